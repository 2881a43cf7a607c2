"""
RELS package - relationship datastream components.

Components:
- rels_parser: RDF/XML parsing of RELS-EXT / RELS-INT content
- rels_shredder: Outbound (RELS-EXT) and inbound (RELS-INT) shredders
"""

from .rels_parser import RelsGraphParser, object_value
from .rels_shredder import (
    InboundRelationshipShredder,
    InboundUpdate,
    OutboundRelationshipShredder,
)

__all__ = [
    "RelsGraphParser",
    "object_value",
    "OutboundRelationshipShredder",
    "InboundRelationshipShredder",
    "InboundUpdate",
]
