"""
In-memory target repository.

Implements the repository protocol without a server: every call is recorded
so a migration can be rehearsed (``migrate --dry-run``) and inspected.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .delta import TripleDelta
from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass
class RecordedCall:
    """One repository operation: name, target path and an optional detail."""
    operation: str
    path: str
    detail: Optional[str] = None


class RecordedResource:
    """A container recorded by RecordingRepository."""

    def __init__(self, repository: "RecordingRepository", path: str):
        self.repository = repository
        self.path = path
        self.deltas: List[TripleDelta] = []
        self.snapshots: List[str] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.path!r})"

    def update_properties(self, delta: TripleDelta) -> None:
        self.deltas.append(delta)
        self.repository._record("update_properties", self.path, delta.to_sparql_update())

    def create_version_snapshot(self, label: str) -> None:
        if label in self.snapshots:
            raise TransportError(f"Snapshot {label!r} already exists for {self.path}")
        self.snapshots.append(label)
        self.repository._record("create_version_snapshot", self.path, label)


class RecordedDatastream(RecordedResource):
    """A binary recorded by RecordingRepository."""

    def __init__(self, repository: "RecordingRepository", path: str, content: bytes, mime_type: Optional[str]):
        super().__init__(repository, path)
        self.content = content
        self.mime_type = mime_type
        self.content_updates = 0

    def update_content(self, content: bytes, mime_type: Optional[str] = None) -> None:
        self.content = content
        self.mime_type = mime_type
        self.content_updates += 1
        self.repository._record("update_content", self.path, f"{len(content)} bytes")


class RecordingRepository:
    """
    Records what a migration would do to a Fedora 4 repository.

    Attributes:
        objects: Containers by path.
        datastreams: Binaries by path.
        redirects: Redirect target URL by path.
        calls: Every operation in order.
    """

    def __init__(self):
        self.objects: Dict[str, RecordedResource] = {}
        self.datastreams: Dict[str, RecordedDatastream] = {}
        self.redirects: Dict[str, str] = {}
        self.calls: List[RecordedCall] = []

    def _record(self, operation: str, path: str, detail: Optional[str] = None) -> None:
        logger.debug(f"[dry-run] {operation} {path}")
        self.calls.append(RecordedCall(operation, path, detail))

    def _ensure_free(self, path: str) -> None:
        if path in self.objects or path in self.datastreams:
            raise TransportError(f"Resource already exists: {path}")

    def create_object(self, path: str) -> RecordedResource:
        self._ensure_free(path)
        resource = RecordedResource(self, path)
        self.objects[path] = resource
        self._record("create_object", path)
        return resource

    def create_datastream(self, path: str, content: bytes, mime_type: Optional[str] = None) -> RecordedDatastream:
        self._ensure_free(path)
        datastream = RecordedDatastream(self, path, content, mime_type)
        self.datastreams[path] = datastream
        self._record("create_datastream", path, f"{len(content)} bytes")
        return datastream

    def create_or_update_redirect_datastream(self, path: str, url: str) -> None:
        self.redirects[path] = url
        self._record("create_or_update_redirect_datastream", path, url)

    def operations(self, operation: str) -> List[Tuple[str, Optional[str]]]:
        """(path, detail) of every recorded call of one operation."""
        return [(c.path, c.detail) for c in self.calls if c.operation == operation]
