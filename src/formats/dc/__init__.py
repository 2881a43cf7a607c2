"""
DC package - Dublin Core (simple metadata) components.
"""

from .dc_parser import DCParser, DCRecord
from .dc_shredder import SimpleMetadataShredder

__all__ = [
    "DCParser",
    "DCRecord",
    "SimpleMetadataShredder",
]
