"""
RELS Parser Module

Parses the RDF/XML content of RELS-EXT and RELS-INT datastreams into rdflib
graphs and classifies the object terms of their statements.
"""

import logging
from typing import List, Optional, Tuple

from rdflib import Graph, Literal, URIRef
from rdflib.term import Node

from core.errors import StructuralError

logger = logging.getLogger(__name__)

Statement = Tuple[Node, URIRef, Node]


class RelsGraphParser:
    """
    Handles RELS-EXT/RELS-INT parsing.

    Fedora 3 stores relationship datastreams as RDF/XML. Any parse failure
    is reported as a StructuralError: malformed legacy data is not expected
    to be transient.
    """

    def __init__(self, rdf_format: str = "xml"):
        self.rdf_format = rdf_format

    def parse(self, content: bytes, source: Optional[str] = None) -> Graph:
        """
        Parse relationship content into a graph.

        Args:
            content: Raw datastream bytes.
            source: Datastream identifier used in error messages.

        Returns:
            The parsed graph (possibly empty).

        Raises:
            StructuralError: If the content is not valid RDF.
        """
        label = source or "relationship datastream"
        graph = Graph()
        if not content or not content.strip():
            logger.debug(f"{label} is empty")
            return graph

        try:
            graph.parse(data=content, format=self.rdf_format)
        except Exception as e:
            logger.error(f"Failed to parse {label}: {e}")
            raise StructuralError(f"Invalid RDF in {label}: {e}") from e

        logger.debug(f"Parsed {len(graph)} statements from {label}")
        return graph

    def statements(self, content: bytes, source: Optional[str] = None) -> List[Statement]:
        """Parse content and return its statements in a stable order."""
        return sorted(self.parse(content, source))


def object_value(statement: Statement, source: str) -> Tuple[str, bool]:
    """
    Split a statement's object into its string value and literal flag.

    Raises:
        StructuralError: If the object is neither a literal nor a URI resource.
    """
    _, predicate, obj = statement
    if isinstance(obj, Literal):
        return str(obj), True
    if isinstance(obj, URIRef):
        return str(obj), False
    raise StructuralError(
        f"Unsupported object {obj!r} for {predicate} in {source}: "
        f"only literals and URI resources can be migrated"
    )
