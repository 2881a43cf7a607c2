"""
Property Mapping Table.

Translates legacy (Fedora 3) predicates into target (Fedora 4) predicates
and value kinds. The table is total: predicates without a rewrite map to
themselves, typed as literal or URI according to the caller.

Hard-coded rules:
- model#createdDate      -> premis:hasDateCreatedByApplication (date)
- model#state            -> access#objState
- view#lastModifiedDate  -> metadata modification audit event, no property
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from constants import AuditEventTypes, LegacyPredicates, TargetPredicates
from .delta import TripleDelta

logger = logging.getLogger(__name__)


class ValueKind(Enum):
    """How a mapped value is written."""
    LITERAL = "literal"
    URI = "uri"
    DATE = "date"


@dataclass(frozen=True)
class PropertyMappingEntry:
    """
    Result of looking up a legacy predicate.

    Attributes:
        legacy_predicate: Predicate as found in the legacy data.
        target_predicate: Predicate written to the target resource.
        value_kind: Literal, URI or xsd:dateTime literal.
        audit_event_type: When set, the value becomes an audit event of this
            type instead of a direct property.
    """
    legacy_predicate: str
    target_predicate: str
    value_kind: ValueKind
    audit_event_type: Optional[str] = None

    @property
    def is_audit_event(self) -> bool:
        return self.audit_event_type is not None


class PropertyMapper:
    """
    Default mapping policy from legacy to target predicates.

    Subclass or replace it (see PropertyMapperProtocol) to change how
    properties are translated; the version handler and the shredders only
    call map_property().
    """

    DATE_PREDICATES: FrozenSet[str] = frozenset({
        LegacyPredicates.CREATED_DATE,
        LegacyPredicates.LAST_MODIFIED_DATE,
        TargetPredicates.PREMIS_DATE_CREATED_BY_APPLICATION,
        TargetPredicates.PREMIS_HAS_EVENT_DATE_TIME,
    })

    PREDICATE_REWRITES: Dict[str, str] = {
        LegacyPredicates.CREATED_DATE: TargetPredicates.PREMIS_DATE_CREATED_BY_APPLICATION,
        LegacyPredicates.STATE: TargetPredicates.ACCESS_OBJ_STATE,
    }

    AUDIT_EVENT_PREDICATES: Dict[str, str] = {
        LegacyPredicates.LAST_MODIFIED_DATE: AuditEventTypes.METADATA_MODIFICATION,
    }

    def is_date_property(self, predicate: str) -> bool:
        return predicate in self.DATE_PREDICATES

    def lookup(self, predicate: str, is_literal: bool = True) -> PropertyMappingEntry:
        """
        Resolve the mapping of a legacy predicate.

        Args:
            predicate: Legacy predicate URI.
            is_literal: Whether the legacy value is a literal (else a URI).

        Returns:
            The mapping entry; never None.
        """
        event_type = self.AUDIT_EVENT_PREDICATES.get(predicate)
        if event_type is not None:
            return PropertyMappingEntry(
                legacy_predicate=predicate,
                target_predicate=TargetPredicates.PREMIS_HAS_EVENT_DATE_TIME,
                value_kind=ValueKind.DATE,
                audit_event_type=event_type,
            )

        target = self.PREDICATE_REWRITES.get(predicate, predicate)
        if self.is_date_property(target):
            kind = ValueKind.DATE
        elif is_literal:
            kind = ValueKind.LITERAL
        else:
            kind = ValueKind.URI
        return PropertyMappingEntry(legacy_predicate=predicate, target_predicate=target, value_kind=kind)

    def map_property(
        self,
        predicate: str,
        value: str,
        delta: TripleDelta,
        is_literal: bool = True,
    ) -> None:
        """
        Add the mapped form of one legacy predicate/value pair to a delta.

        Direct properties add one removal and one insertion; audit-event
        predicates add an event subgraph only.
        """
        entry = self.lookup(predicate, is_literal)

        if entry.is_audit_event:
            logger.debug(f"Mapping {predicate} to {entry.audit_event_type} event at {value}")
            delta.add_date_event(entry.audit_event_type, value)
            return

        logger.debug(f"Mapping {predicate} -> {entry.target_predicate} ({entry.value_kind.value}): {value}")
        if entry.value_kind is ValueKind.DATE:
            delta.update_date_triple(entry.target_predicate, value)
        elif entry.value_kind is ValueKind.LITERAL:
            delta.update_literal_triple(entry.target_predicate, value)
        else:
            delta.update_uri_triple(entry.target_predicate, value)
