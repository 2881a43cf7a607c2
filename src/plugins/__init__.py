"""
Collaborator protocols for the migration engine.

Usage:
    from plugins import TargetRepositoryProtocol, ObjectSourceProtocol

    assert is_target_repository(FedoraRepositoryClient(config))
"""

from .protocols import (
    # Source side
    ObjectProcessorProtocol,
    ObjectSourceProtocol,
    ObjectVersionHandlerProtocol,
    # Target side
    TargetResourceProtocol,
    TargetDatastreamProtocol,
    TargetRepositoryProtocol,
    IdMapperProtocol,
    # Strategies
    PropertyMapperProtocol,
    DatastreamPropertyUpdaterProtocol,
    # Type checking utilities
    is_target_repository,
    is_object_source,
)

__all__ = [
    "ObjectProcessorProtocol",
    "ObjectSourceProtocol",
    "ObjectVersionHandlerProtocol",
    "TargetResourceProtocol",
    "TargetDatastreamProtocol",
    "TargetRepositoryProtocol",
    "IdMapperProtocol",
    "PropertyMapperProtocol",
    "DatastreamPropertyUpdaterProtocol",
    "is_target_repository",
    "is_object_source",
]
