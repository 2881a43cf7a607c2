"""
Exception hierarchy for the migration engine.

Structural and transport errors are fatal for the object being migrated;
the version handler wraps them in ObjectMigrationError so the driver can
report which object failed.
"""

from typing import Optional


class MigrationError(Exception):
    """Base class for all migration failures."""


class StructuralError(MigrationError):
    """Legacy data has an unexpected shape (bad DC XML, foreign RELS subject, ...)."""


class TransportError(MigrationError):
    """A call to the target repository or a content fetch failed."""


class ManifestError(MigrationError):
    """An object manifest could not be read or is malformed."""


class ConfigError(MigrationError):
    """Configuration is missing or invalid."""


class ObjectMigrationError(MigrationError):
    """Migration of a single legacy object was aborted."""

    def __init__(self, pid: str, message: str, version_index: Optional[int] = None):
        self.pid = pid
        self.message = message
        self.version_index = version_index
        location = f" at version {version_index}" if version_index is not None else ""
        super().__init__(f"Failed to migrate {pid}{location}: {message}")
