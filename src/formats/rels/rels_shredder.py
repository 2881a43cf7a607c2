"""
Relationship shredders for RELS-EXT and RELS-INT.

RELS-EXT statements describe the object itself and are merged into the
object-level delta. RELS-INT statements describe the object's datastreams;
each becomes a standalone delta for the datastream it addresses.

Both shredders validate every statement before producing anything, so a
structural error never leaves a half-filled delta behind.
"""

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from rdflib import URIRef

from core.delta import TripleDelta
from core.errors import StructuralError
from core.property_mapping import PropertyMapper
from plugins.protocols import PropertyMapperProtocol, TargetResourceProtocol
from shared.models import DatastreamVersion
from .rels_parser import RelsGraphParser, object_value

logger = logging.getLogger(__name__)


class OutboundRelationshipShredder:
    """Shreds RELS-EXT into properties of the object it belongs to."""

    def __init__(
        self,
        property_mapper: Optional[PropertyMapperProtocol] = None,
        parser: Optional[RelsGraphParser] = None,
    ):
        self.property_mapper = property_mapper or PropertyMapper()
        self.parser = parser or RelsGraphParser()

    def shred(self, version: DatastreamVersion, delta: TripleDelta) -> int:
        """
        Add the mapped RELS-EXT statements of version to delta.

        Returns:
            Number of statements migrated.

        Raises:
            StructuralError: If a statement's subject is not the object, or
                its object is neither a literal nor a URI resource.
        """
        object_uri = version.datastream_info.object_info.uri
        source = f"{version.datastream_id} of {version.datastream_info.object_info.pid}"

        mapped: List[Tuple[str, str, bool]] = []
        for statement in self.parser.statements(version.get_content(), source):
            subject, predicate, _ = statement
            if not isinstance(subject, URIRef) or str(subject) != object_uri:
                raise StructuralError(f"Non-resource subject found in {source}: {subject}")
            value, is_literal = object_value(statement, source)
            mapped.append((str(predicate), value, is_literal))

        for predicate, value, is_literal in mapped:
            self.property_mapper.map_property(predicate, value, delta, is_literal)
        return len(mapped)


@dataclass
class InboundUpdate:
    """A delta addressed to one datastream by a RELS-INT statement."""
    datastream_id: str
    resource: TargetResourceProtocol
    delta: TripleDelta


class InboundRelationshipShredder:
    """
    Shreds RELS-INT into per-datastream deltas.

    The subject's last path segment names the datastream. Only datastreams
    already created while migrating the current object can be addressed;
    statements about any other datastream are skipped with a warning.
    """

    def __init__(
        self,
        property_mapper: Optional[PropertyMapperProtocol] = None,
        parser: Optional[RelsGraphParser] = None,
    ):
        self.property_mapper = property_mapper or PropertyMapper()
        self.parser = parser or RelsGraphParser()

    def shred(
        self,
        version: DatastreamVersion,
        datastreams: Mapping[str, TargetResourceProtocol],
    ) -> List[InboundUpdate]:
        """
        Build one delta per RELS-INT statement.

        Args:
            version: The RELS-INT datastream version.
            datastreams: Datastreams created so far for this object, by id.

        Returns:
            Updates in statement order, for datastreams that exist.

        Raises:
            StructuralError: On a blank-node subject or an unsupported object.
        """
        source = f"{version.datastream_id} of {version.datastream_info.object_info.pid}"

        updates: List[InboundUpdate] = []
        for statement in self.parser.statements(version.get_content(), source):
            subject, predicate, _ = statement
            if not isinstance(subject, URIRef):
                raise StructuralError(f"Non-resource subject found in {source}: {subject}")
            value, is_literal = object_value(statement, source)

            datastream_id = str(subject).rstrip("/").split("/")[-1]
            resource = datastreams.get(datastream_id)
            if resource is None:
                logger.warning(
                    f"Skipping {source} statement about {datastream_id}: "
                    f"datastream has not been migrated yet"
                )
                continue

            delta = TripleDelta()
            self.property_mapper.map_property(str(predicate), value, delta, is_literal)
            updates.append(InboundUpdate(datastream_id, resource, delta))
        return updates
