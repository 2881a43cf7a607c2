"""
Object sources - legacy object histories to migrate.
"""

from .manifest_source import ManifestObjectProcessor, ManifestObjectSource, fetch_url

__all__ = [
    "ManifestObjectProcessor",
    "ManifestObjectSource",
    "fetch_url",
]
