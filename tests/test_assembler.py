"""
Unit tests for assembling the entity graph
"""

import logging

import pytest

from json_entity_extractor.assembler import assemble
from json_entity_extractor.decomposer import decompose_all
from json_entity_extractor.emitter import render_all
from json_entity_extractor.errors import NameCollisionWarning
from json_entity_extractor.models import AssociationEdge, Cardinality, DecompositionResult, Entity, TypeTag


def build(*collections):
    return assemble([(name, decompose_all(name, records)) for name, records in collections])


class TestAssemble:
    """Merging decomposition results from several roots"""

    def test_same_entity_from_two_roots_is_merged(self):
        graph = build(
            ("user", [{"id": 1, "address": {"city": "X"}}]),
            ("company", [{"address": {"zip": "1010", "city": None}}]),
        )

        address = graph.get("address")
        assert list(address.fields) == ["city", "zip"]
        assert address.fields["city"].type is TypeTag.BOUNDED_STRING
        assert graph.declaration_order == ["user", "address", "company"]
        assert [(e.source, e.target) for e in graph.edges] == [("user", "address"), ("company", "address")]

    def test_names_are_deduplicated_case_insensitively(self):
        graph = assemble([
            ("user", [DecompositionResult(entity=Entity(name="user"))]),
            ("User", [DecompositionResult(entity=Entity(name="User"))]),
        ])

        assert len(graph.entities) == 1
        assert graph.roots == ["user"]
        assert graph.declaration_order == ["user"]

    def test_cardinality_collision_keeps_first_and_warns(self):
        with pytest.warns(NameCollisionWarning):
            graph = build(
                ("shop", [{"owner": {"pet": {"n": 1}}}]),
                ("owner", [{"pet": [{"n": 2}]}]),
            )

        owner_edges = [e for e in graph.edges if e.source == "owner"]
        assert len(owner_edges) == 1
        assert owner_edges[0].cardinality is Cardinality.ONE_TO_ONE
        assert len(graph.collisions) == 1

    def test_unknown_fields_are_reported_once(self, caplog):
        with caplog.at_level(logging.WARNING):
            graph = build(("thing", [{"blob": object()}]))
            render_all(graph)
            render_all(graph)

        messages = [r.getMessage() for r in caplog.records if "never had a classifiable value" in r.getMessage()]
        assert len(messages) == 1
        assert "blob" in messages[0]

    def test_missing_targets_get_an_entity(self):
        edge = AssociationEdge("user", "profile", Cardinality.ONE_TO_ONE, "profile")
        graph = assemble([("user", [DecompositionResult(entity=Entity(name="user"), edges=[edge])])])

        assert graph.get("profile") is not None
        assert graph.declaration_order == ["user", "profile"]


class TestDeclarationOrder:
    def test_pre_order_after_each_root(self):
        graph = build(
            ("user", [{"profile": {"avatar": {"url": "u"}}, "orders": [{"sku": "A"}]}]),
            ("product", [{"id": 1}]),
        )

        assert graph.declaration_order == ["user", "profile", "avatar", "order", "product"]

    def test_sources_come_before_targets_and_names_are_unique(self):
        graph = build(
            ("user", [{"address": {"geo": {"lat": 1.5}}}]),
            ("company", [{"address": {"geo": {"lng": 2.5}}, "owner": {"address": {"zip": "1"}}}]),
        )

        order = graph.declaration_order
        assert len(order) == len(set(order))
        assert set(order) == {e.name for e in graph.entities.values()}
        for edge in graph.edges:
            first_source = min(
                order.index(e.source) for e in graph.edges if e.target == edge.target
            )
            assert first_source < order.index(edge.target)
