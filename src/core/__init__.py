"""
Core components of the Fedora 3 to Fedora 4 migrator.

This package provides:

- Triple deltas and SPARQL update rendering (TripleDelta, should_apply_delta)
- The legacy-to-target property mapping (PropertyMapper)
- Datastream property deltas (DatastreamPropertyUpdater)
- Path mapping (SimpleIdMapper)
- The in-memory target repository (RecordingRepository)
- Configuration loading (load_config, MigrationSettings)
- The exception hierarchy (MigrationError and subclasses)

The orchestration modules depend on the format shredders and are imported
from their own modules:

Usage:
    from core import TripleDelta, PropertyMapper, SimpleIdMapper
    from core.version_handler import ObjectVersionHandler
    from core.migrator import Migrator
"""

from .errors import (
    MigrationError,
    StructuralError,
    TransportError,
    ManifestError,
    ConfigError,
    ObjectMigrationError,
)

from .delta import (
    PlaceholderGenerator,
    TripleDelta,
    should_apply_delta,
    current_xsd_datetime,
)

from .property_mapping import (
    PropertyMapper,
    PropertyMappingEntry,
    ValueKind,
)

from .datastream_properties import DatastreamPropertyUpdater
from .id_mapper import SimpleIdMapper
from .recording_repository import RecordingRepository
from .config import MigrationSettings, load_config

__all__ = [
    # Errors
    "MigrationError",
    "StructuralError",
    "TransportError",
    "ManifestError",
    "ConfigError",
    "ObjectMigrationError",
    # Deltas
    "PlaceholderGenerator",
    "TripleDelta",
    "should_apply_delta",
    "current_xsd_datetime",
    # Mapping
    "PropertyMapper",
    "PropertyMappingEntry",
    "ValueKind",
    "DatastreamPropertyUpdater",
    "SimpleIdMapper",
    # Repositories
    "RecordingRepository",
    # Configuration
    "MigrationSettings",
    "load_config",
]
