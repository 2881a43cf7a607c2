"""
Protocol Definitions for Migration Collaborators.

This module defines the protocols (interfaces) that the components around
the version handler must implement. Using protocols allows for duck typing
while still providing type hints and documentation: the Fedora REST client,
the in-memory recording repository and test doubles all satisfy the same
repository protocol without sharing a base class.

Protocols:
    ObjectProcessorProtocol: One legacy object, able to replay its versions
    ObjectSourceProtocol: Lazy, single-pass stream of object processors
    ObjectVersionHandlerProtocol: Consumes an object's version sequence
    TargetResourceProtocol: A target resource accepting deltas and snapshots
    TargetDatastreamProtocol: A target binary resource
    TargetRepositoryProtocol: Creates target resources
    IdMapperProtocol: Maps legacy identifiers to target paths
    PropertyMapperProtocol: Pluggable legacy-to-target property mapping
    DatastreamPropertyUpdaterProtocol: Pluggable datastream property policy
"""

from typing import (
    TYPE_CHECKING,
    Any,
    Iterable,
    Iterator,
    Optional,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from core.delta import TripleDelta
    from shared.models import DatastreamInfo, DatastreamVersion, ObjectInfo, ObjectVersion


__all__ = [
    # Source side
    "ObjectProcessorProtocol",
    "ObjectSourceProtocol",
    "ObjectVersionHandlerProtocol",
    # Target side
    "TargetResourceProtocol",
    "TargetDatastreamProtocol",
    "TargetRepositoryProtocol",
    "IdMapperProtocol",
    # Strategies
    "PropertyMapperProtocol",
    "DatastreamPropertyUpdaterProtocol",
    # Type checking utilities
    "is_target_repository",
    "is_object_source",
]


# =============================================================================
# Source Side
# =============================================================================

@runtime_checkable
class ObjectVersionHandlerProtocol(Protocol):
    """
    Protocol for components that migrate one object's version history.

    The handler receives the complete, chronologically ordered sequence of
    an object's versions and performs all target-side effects for it before
    returning.
    """

    def process_object_versions(self, versions: Iterable["ObjectVersion"]) -> Any:
        """
        Migrate every version of one object.

        Returns:
            Implementation-defined result; the version handler returns its
            session (with ``versions_processed``), or None for no versions.

        Raises:
            ObjectMigrationError: If the object could not be migrated.
        """
        ...


@runtime_checkable
class ObjectProcessorProtocol(Protocol):
    """
    Protocol for a single legacy object produced by an object source.

    The processor knows the object's identity and how to replay its version
    history into a handler.
    """

    @property
    def object_info(self) -> "ObjectInfo":
        """Identity of the object."""
        ...

    def process_object(self, handler: ObjectVersionHandlerProtocol) -> Any:
        """Feed this object's versions to the handler and return its result."""
        ...


@runtime_checkable
class ObjectSourceProtocol(Protocol):
    """
    Protocol for a lazy, finite, single-pass stream of legacy objects.

    Example implementation:
        class ListSource:
            def __init__(self, processors):
                self._processors = processors

            def __iter__(self):
                return iter(self._processors)
    """

    def __iter__(self) -> Iterator[ObjectProcessorProtocol]:
        ...


# =============================================================================
# Target Side
# =============================================================================

@runtime_checkable
class TargetResourceProtocol(Protocol):
    """Protocol for a resource in the target repository."""

    @property
    def path(self) -> str:
        """Repository path of the resource."""
        ...

    def update_properties(self, delta: "TripleDelta") -> None:
        """
        Apply a delta as one atomic delete-where/insert-data update.

        Raises:
            TransportError: If the repository rejects the update.
        """
        ...

    def create_version_snapshot(self, label: str) -> None:
        """Record an immutable, named snapshot of the resource's current state."""
        ...


@runtime_checkable
class TargetDatastreamProtocol(TargetResourceProtocol, Protocol):
    """Protocol for a binary resource in the target repository."""

    def update_content(self, content: bytes, mime_type: Optional[str] = None) -> None:
        """Replace the binary content of the resource."""
        ...


@runtime_checkable
class TargetRepositoryProtocol(Protocol):
    """Protocol for the operations the migration needs from the target repository."""

    def create_object(self, path: str) -> TargetResourceProtocol:
        """Create a container at path and return its handle."""
        ...

    def create_datastream(
        self,
        path: str,
        content: bytes,
        mime_type: Optional[str] = None,
    ) -> TargetDatastreamProtocol:
        """Create a binary resource at path and return its handle."""
        ...

    def create_or_update_redirect_datastream(self, path: str, url: str) -> Any:
        """Create or replace a resource that redirects to url."""
        ...


@runtime_checkable
class IdMapperProtocol(Protocol):
    """Protocol for mapping legacy identifiers onto target repository paths."""

    def map_object_path(self, object_info: "ObjectInfo") -> str:
        ...

    def map_datastream_path(self, datastream_info: "DatastreamInfo") -> str:
        ...


# =============================================================================
# Strategies
# =============================================================================

@runtime_checkable
class PropertyMapperProtocol(Protocol):
    """
    Protocol for translating one legacy predicate/value pair into a delta.

    Alternate mapping policies can be substituted by passing a different
    implementation to the version handler and the shredders.
    """

    def map_property(
        self,
        predicate: str,
        value: str,
        delta: "TripleDelta",
        is_literal: bool = True,
    ) -> None:
        ...


@runtime_checkable
class DatastreamPropertyUpdaterProtocol(Protocol):
    """Protocol for building the property delta of a changed content datastream."""

    def build_delta(self, version: "DatastreamVersion") -> "TripleDelta":
        ...


# =============================================================================
# Type Checking Utilities
# =============================================================================

def is_target_repository(obj: Any) -> bool:
    """Check if object implements TargetRepositoryProtocol."""
    return isinstance(obj, TargetRepositoryProtocol)


def is_object_source(obj: Any) -> bool:
    """Check if object implements ObjectSourceProtocol."""
    return isinstance(obj, ObjectSourceProtocol)
