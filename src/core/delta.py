"""
Triple Delta Builder and Audit Event Injector.

A TripleDelta pairs a remove-set and an insert-set of triples describing one
logical update of a target resource. It is rendered as a single SPARQL
update::

    DELETE WHERE { <> <p> ?o0 . } ;
    INSERT DATA { <> <p> "new value" . }

The remove-set never needs to know the current value of a predicate: every
removal uses a fresh variable in object position. Variables are drawn from a
generator owned by the delta, so two removals in the same delta never share
a placeholder and unrelated deltas never interfere with each other.

Audit events are insert-only blank-node subgraphs and are never retracted.
"""

import itertools
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from rdflib import BNode, Literal, URIRef, XSD
from rdflib.term import Node, Variable

from constants import MigrationDefaults, SparqlPrefixes, TargetPredicates

logger = logging.getLogger(__name__)

Triple = Tuple[Node, URIRef, Node]

# The resource being patched; SPARQL updates are resolved against its URI.
SELF = URIRef("")


class PlaceholderGenerator:
    """Hands out distinct SPARQL variables (?o0, ?o1, ...)."""

    def __init__(self, prefix: str = MigrationDefaults.PLACEHOLDER_PREFIX):
        self._prefix = prefix
        self._counter = itertools.count()

    def next(self) -> Variable:
        return Variable(f"{self._prefix}{next(self._counter)}")


class TripleDelta:
    """
    Accumulates triples to remove from and insert into one resource.

    Attributes:
        to_remove: Delete patterns; objects are placeholder variables.
        to_insert: Concrete triples to add.
    """

    def __init__(self, placeholders: Optional[PlaceholderGenerator] = None):
        self.to_remove: List[Triple] = []
        self.to_insert: List[Triple] = []
        self._placeholders = placeholders or PlaceholderGenerator()

    def __repr__(self) -> str:
        return f"TripleDelta(remove={len(self.to_remove)}, insert={len(self.to_insert)})"

    @property
    def is_empty(self) -> bool:
        return not self.to_remove and not self.to_insert

    # ------------------------------------------------------------------
    # Primitive operations
    # ------------------------------------------------------------------

    def remove_values(self, predicate: str) -> Variable:
        """Schedule removal of whatever values the resource has for predicate."""
        placeholder = self._placeholders.next()
        self.to_remove.append((SELF, URIRef(predicate), placeholder))
        return placeholder

    def insert(self, predicate: str, obj: Node, subject: Node = SELF) -> None:
        self.to_insert.append((subject, URIRef(predicate), obj))

    def insert_literal(self, predicate: str, value: str) -> None:
        self.insert(predicate, Literal(value))

    # ------------------------------------------------------------------
    # Replace-value operations: one removal plus one insertion each
    # ------------------------------------------------------------------

    def update_literal_triple(self, predicate: str, value: str) -> None:
        """Replace the values of predicate with a plain literal."""
        self.remove_values(predicate)
        self.insert(predicate, Literal(value))

    def update_uri_triple(self, predicate: str, value: str) -> None:
        """Replace the values of predicate with a URI reference."""
        self.remove_values(predicate)
        self.insert(predicate, URIRef(value))

    def update_date_triple(self, predicate: str, value: str) -> None:
        """Replace the values of predicate with an xsd:dateTime literal."""
        self.remove_values(predicate)
        self.insert(predicate, date_literal(value))

    # ------------------------------------------------------------------
    # Audit events
    # ------------------------------------------------------------------

    def add_date_event(self, event_type_uri: str, timestamp: str) -> BNode:
        """
        Append a PREMIS event (type + date) anchored to the resource.

        Adds three insert triples around a fresh blank node and nothing to
        the remove-set.

        Args:
            event_type_uri: PREMIS event type (see AuditEventTypes).
            timestamp: Event time, xsd:dateTime lexical form.

        Returns:
            The blank node standing for the event.
        """
        event = BNode()
        self.insert(TargetPredicates.PREMIS_HAS_EVENT, event)
        self.insert(TargetPredicates.PREMIS_HAS_EVENT_TYPE, URIRef(event_type_uri), subject=event)
        self.insert(TargetPredicates.PREMIS_HAS_EVENT_DATE_TIME, date_literal(timestamp), subject=event)
        return event

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def to_sparql_update(self, prefixes: Iterable[Tuple[str, str]] = SparqlPrefixes.PREFIXES) -> str:
        """Render the delta as a DELETE WHERE / INSERT DATA request."""
        lines = [f"PREFIX {prefix}: <{namespace}>" for prefix, namespace in prefixes]
        lines.append("DELETE WHERE {")
        lines.extend(f"  {_triple_to_n3(t)}" for t in self.to_remove)
        lines.append("} ;")
        lines.append("INSERT DATA {")
        lines.extend(f"  {_triple_to_n3(t)}" for t in self.to_insert)
        lines.append("}")
        return "\n".join(lines) + "\n"


def should_apply_delta(delta: TripleDelta) -> bool:
    """
    Decide whether a delta is sent to the target repository.

    A delta is applied only when it both removes and inserts something.
    Pure additions (for example a lone migration event) and pure removals
    are therefore never sent. Every apply path goes through this check.
    """
    return bool(delta.to_remove) and bool(delta.to_insert)


def date_literal(value: str) -> Literal:
    """An xsd:dateTime literal keeping the lexical form as given."""
    return Literal(value, datatype=XSD.dateTime, normalize=False)


def current_xsd_datetime() -> Optional[str]:
    """
    Current time as an xsd:dateTime string, or None if it cannot be formatted.

    A formatting failure is logged and reported as None so that callers can
    omit the affected event and carry on.
    """
    try:
        return datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    except (OverflowError, ValueError, OSError) as e:
        logger.error(f"Error converting current time to xsd:dateTime: {e}")
        return None


def _triple_to_n3(triple: Triple) -> str:
    s, p, o = triple
    return f"{s.n3()} {p.n3()} {o.n3()} ."
