"""
Legacy (Fedora 3) object and version data types.

These classes describe what an object source hands to the version handler:
one ObjectVersion per point in an object's history, each carrying the
datastream versions that changed at that point. They are produced by the
source, consumed once by the handler and never mutated by it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from constants import LegacyPredicates


class ControlGroup(Enum):
    """
    Fedora 3 datastream control groups.

    Attributes:
        INLINE_XML: Content stored inline in the object XML (X).
        MANAGED: Content stored and managed by the repository (M).
        EXTERNAL: Content referenced by URL and fetched on request (E).
        REDIRECT: Content referenced by URL, clients are redirected to it (R).
    """
    INLINE_XML = "X"
    MANAGED = "M"
    EXTERNAL = "E"
    REDIRECT = "R"

    @classmethod
    def from_code(cls, code: str) -> "ControlGroup":
        """Resolve a one-letter control group code (case-insensitive)."""
        try:
            return cls(code.strip().upper())
        except (AttributeError, ValueError):
            raise ValueError(f"Unknown control group: {code!r}")


class DatastreamKind(Enum):
    """How a changed datastream version is migrated."""
    SIMPLE_METADATA = "simple-metadata"
    OUTBOUND_RELATIONSHIPS = "outbound-relationships"
    INBOUND_RELATIONSHIPS = "inbound-relationships"
    REDIRECT = "redirect"
    MANAGED_CONTENT = "managed-content"


@dataclass(frozen=True)
class ObjectInfo:
    """Identity of a legacy object."""
    pid: str

    @property
    def uri(self) -> str:
        """Canonical URI of the object, e.g. ``info:fedora/demo:1``."""
        return f"{LegacyPredicates.OBJECT_URI_PREFIX}{self.pid}"


@dataclass(frozen=True)
class ObjectProperty:
    """An object-level property: legacy predicate URI and its string value."""
    name: str
    value: str


@dataclass(frozen=True)
class DatastreamInfo:
    """Version-independent facts about a datastream."""
    object_info: ObjectInfo
    datastream_id: str
    control_group: ControlGroup
    state: Optional[str] = None


@dataclass
class DatastreamVersion:
    """
    One version of a datastream, as changed in an object version.

    Attributes:
        datastream_info: The datastream this version belongs to.
        version_id: Legacy version identifier (e.g. ``DS1.0``).
        mime_type: MIME type of the content.
        created: Creation timestamp of this version (xsd:dateTime lexical form).
        label: Datastream label.
        format_uri: Format identifier URI.
        external_or_redirect_url: Location of E/R content.
        is_first_version_in_object: First version of this datastream in the object.
        is_last_version_in_object: Last version of this datastream in the object.
        content_loader: Zero-argument callable returning the content bytes.
    """
    datastream_info: DatastreamInfo
    version_id: str
    mime_type: Optional[str] = None
    created: Optional[str] = None
    label: Optional[str] = None
    format_uri: Optional[str] = None
    external_or_redirect_url: Optional[str] = None
    is_first_version_in_object: bool = False
    is_last_version_in_object: bool = False
    content_loader: Optional[Callable[[], bytes]] = field(default=None, repr=False)

    @property
    def datastream_id(self) -> str:
        return self.datastream_info.datastream_id

    @property
    def control_group(self) -> ControlGroup:
        return self.datastream_info.control_group

    def get_content(self) -> bytes:
        """Load the content of this version. Loading may block on I/O."""
        if self.content_loader is None:
            return b""
        return self.content_loader()


@dataclass
class ObjectVersion:
    """
    An object at one point of its history.

    Attributes:
        object_info: The object this version belongs to.
        version_date: Timestamp of this version.
        version_index: Ordinal of this version within the object's history.
        is_first_version: True for the earliest version.
        is_last_version: True for the latest version.
        object_properties: Object-level properties.
        changed_datastreams: Datastream versions introduced at this point.
    """
    object_info: ObjectInfo
    version_date: str
    version_index: int
    is_first_version: bool = False
    is_last_version: bool = False
    object_properties: List[ObjectProperty] = field(default_factory=list)
    changed_datastreams: List[DatastreamVersion] = field(default_factory=list)

    @property
    def pid(self) -> str:
        return self.object_info.pid
