"""
Tests for the RELS-EXT and RELS-INT shredders.
"""

import logging

import pytest
from rdflib import Literal, URIRef

from core.delta import TripleDelta
from core.errors import StructuralError
from formats.rels import InboundRelationshipShredder, OutboundRelationshipShredder, RelsGraphParser
from fixtures import (
    RELS_EXT_BNODE_OBJECT_XML,
    RELS_EXT_FOREIGN_SUBJECT_XML,
    RELS_EXT_XML,
    RELS_INT_XML,
    make_datastream_version,
)

HAS_MODEL = "info:fedora/fedora-system:def/model#hasModel"
IS_MEMBER_OF = "info:fedora/fedora-system:def/relations-external#isMemberOf"
NOTE = "http://example.org/terms#note"


class StubResource:
    def __init__(self, path):
        self.path = path


@pytest.mark.unit
class TestRelsGraphParser:

    def test_empty_content_is_an_empty_graph(self):
        assert len(RelsGraphParser().parse(b"")) == 0

    def test_invalid_rdf_raises_structural_error(self):
        with pytest.raises(StructuralError, match="Invalid RDF"):
            RelsGraphParser().parse(b"<rdf:RDF", "RELS-EXT of demo:1")

    def test_statements_are_sorted(self):
        statements = RelsGraphParser().statements(RELS_EXT_XML)
        assert statements == sorted(statements)
        assert len(statements) == 3


@pytest.mark.unit
class TestOutboundRelationshipShredder:

    def test_maps_every_statement(self):
        delta = TripleDelta()
        count = OutboundRelationshipShredder().shred(make_datastream_version("RELS-EXT", RELS_EXT_XML), delta)

        assert count == 3
        assert len(delta.to_remove) == 3
        inserted = {(p, o) for _, p, o in delta.to_insert}
        assert inserted == {
            (URIRef(HAS_MODEL), URIRef("info:fedora/demo:CModel")),
            (URIRef(IS_MEMBER_OF), URIRef("info:fedora/demo:collection")),
            (URIRef(NOTE), Literal("hello")),
        }

    def test_foreign_subject_raises_before_any_mapping(self):
        delta = TripleDelta()
        version = make_datastream_version("RELS-EXT", RELS_EXT_FOREIGN_SUBJECT_XML)

        with pytest.raises(StructuralError, match="Non-resource subject"):
            OutboundRelationshipShredder().shred(version, delta)
        assert delta.is_empty

    def test_blank_node_object_raises(self):
        delta = TripleDelta()
        version = make_datastream_version("RELS-EXT", RELS_EXT_BNODE_OBJECT_XML)

        with pytest.raises(StructuralError):
            OutboundRelationshipShredder().shred(version, delta)
        assert delta.is_empty

    def test_empty_datastream_maps_nothing(self):
        delta = TripleDelta()
        assert OutboundRelationshipShredder().shred(make_datastream_version("RELS-EXT", b""), delta) == 0
        assert delta.is_empty


@pytest.mark.unit
class TestInboundRelationshipShredder:

    def test_builds_one_delta_per_statement_about_known_datastreams(self):
        ds1 = StubResource("/migrated/demo:1/DS1")
        updates = InboundRelationshipShredder().shred(
            make_datastream_version("RELS-INT", RELS_INT_XML), {"DS1": ds1}
        )

        assert len(updates) == 1
        update = updates[0]
        assert update.datastream_id == "DS1"
        assert update.resource is ds1
        assert [(p, o) for _, p, o in update.delta.to_insert] == [(URIRef(NOTE), Literal("about DS1"))]
        assert len(update.delta.to_remove) == 1

    def test_unknown_datastream_is_skipped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            updates = InboundRelationshipShredder().shred(make_datastream_version("RELS-INT", RELS_INT_XML), {})

        assert updates == []
        assert "DS2" in caplog.text
        assert "has not been migrated yet" in caplog.text

    def test_blank_node_subject_raises(self):
        content = b"""<rdf:RDF xmlns:rdf="http://www.w3.org/1999/02/22-rdf-syntax-ns#"
                               xmlns:ex="http://example.org/terms#">
            <rdf:Description><ex:note>anonymous</ex:note></rdf:Description>
        </rdf:RDF>"""
        with pytest.raises(StructuralError, match="Non-resource subject"):
            InboundRelationshipShredder().shred(make_datastream_version("RELS-INT", content), {})
