"""Tests for GraphStore: vertices, edges, relation labels."""

from __future__ import annotations

import random

import pytest

from relgraph.domain.errors import RegistryFull, VertexNotFound
from relgraph.domain.types import VertexKind
from relgraph.infrastructure.graph.store import GraphStore


class TestVertices:
    def test_find_or_insert_is_idempotent(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("dog")
        assert store.find_or_insert_concept("dog") == a
        assert store.size() == 1

    def test_fresh_vertex(self, store: GraphStore) -> None:
        u = store.find_or_insert_concept("dog")
        assert store.vertex_name(u) == "dog"
        assert store.vertex_gloss(u) == ""
        assert store.out_degree(u) == 0

    def test_ids_are_dense(self, store: GraphStore) -> None:
        ids = [store.find_or_insert_concept(n) for n in ("a", "b", "c")]
        assert ids == [0, 1, 2]
        assert list(store.vertices()) == ids

    def test_namespaces_are_disjoint(self, store: GraphStore) -> None:
        c = store.find_or_insert_concept("bank")
        w = store.find_or_insert_word("bank")
        assert c != w
        assert store.size() == 2
        assert store.vertex_is_concept(c) and not store.vertex_is_word(c)
        assert store.vertex_is_word(w) and not store.vertex_is_concept(w)
        assert store.vertex_kind(w) is VertexKind.WORD

    def test_lookup_by_name(self, store: GraphStore) -> None:
        c = store.find_or_insert_concept("bank")
        w = store.find_or_insert_word("bank")
        assert store.get_vertex_by_name("bank") == (c, True)
        assert store.get_vertex_by_name("bank", VertexKind.WORD) == (w, True)
        assert store.get_vertex_by_name("river") == (None, False)

    def test_lookup_falls_back_to_words(self, store: GraphStore) -> None:
        w = store.find_or_insert_word("bank")
        assert store.get_vertex_by_name("bank") == (w, True)
        assert store.get_vertex_by_name("bank", VertexKind.CONCEPT) == (None, False)

    def test_require_vertex(self, store: GraphStore) -> None:
        store.find_or_insert_concept("dog")
        assert store.require_vertex("dog") == 0
        with pytest.raises(VertexNotFound):
            store.require_vertex("cat")

    def test_gloss(self, store: GraphStore) -> None:
        u = store.find_or_insert_concept("dog")
        store.set_gloss(u, "a domesticated canid")
        assert store.vertex_gloss(u) == "a domesticated canid"

    def test_random_vertex(self, store: GraphStore) -> None:
        assert store.random_vertex() is None
        for name in "abc":
            store.find_or_insert_concept(name)
        rng = random.Random(7)
        picks = {store.random_vertex(rng) for _ in range(50)}
        assert picks <= {0, 1, 2}
        assert len(picks) > 1


class TestEdges:
    def test_insert_and_lookup(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e = store.find_or_insert_edge(a, b, 2.5)
        assert store.find_edge(a, b) == e
        assert store.find_edge(b, a) is None
        assert store.edge_endpoints(e) == (a, b)
        assert store.edge_weight(e) == 2.5
        assert store.edge_relations(e) == []
        assert list(store.successors(a)) == [b]

    def test_first_writer_wins(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e1 = store.find_or_insert_edge(a, b, 1.0)
        e2 = store.find_or_insert_edge(a, b, 9.0)
        assert e1 == e2
        assert store.num_edges() == 1
        assert store.edge_weight(e1) == 1.0

    def test_merged_relation_labels(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e = store.find_or_insert_edge(a, b)
        store.add_relation_label(e, "hypernym")
        store.add_relation_label(store.find_or_insert_edge(a, b), "holonym")
        store.add_relation_label(e, "hypernym")
        assert store.edge_relations(e) == ["hypernym", "holonym"]
        assert store.edge_mask(e) == 0b11

    def test_labels_decode_in_registry_order(self, store: GraphStore) -> None:
        store.registry.register("first")
        store.registry.register("second")
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e = store.find_or_insert_edge(a, b)
        store.add_relation_label(e, "second")
        store.add_relation_label(e, "first")
        assert store.edge_relations(e) == ["first", "second"]

    def test_registry_full_leaves_mask_untouched(self) -> None:
        store = GraphStore()
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e = store.find_or_insert_edge(a, b)
        for i in range(32):
            store.add_relation_label(e, f"r{i}")
        before = store.edge_mask(e)
        with pytest.raises(RegistryFull):
            store.add_relation_label(e, "r32")
        assert store.edge_mask(e) == before
        assert len(store.registry) == 32

    def test_negative_weight_rejected(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        with pytest.raises(ValueError):
            store.find_or_insert_edge(a, a, -1.0)

    @pytest.mark.parametrize("weight", [float("inf"), float("nan"), 1e400])
    def test_non_finite_weight_rejected(self, store: GraphStore, weight: float) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        with pytest.raises(ValueError, match="finite"):
            store.find_or_insert_edge(a, b, weight)
        e = store.find_or_insert_edge(a, b, 1.0)
        with pytest.raises(ValueError, match="finite"):
            store.set_edge_weight(e, weight)
        assert store.edge_weight(e) == 1.0

    def test_out_edges_is_a_snapshot(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e = store.find_or_insert_edge(a, b)
        out = store.out_edges(a)
        assert out == (e,)
        with pytest.raises(AttributeError):
            out.append(e)  # type: ignore[attr-defined]
        store.find_or_insert_edge(a, a)
        assert out == (e,)
        assert store.out_degree(a) == 2

    def test_unknown_endpoint_rejected(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        with pytest.raises(IndexError):
            store.find_or_insert_edge(a, 5)

    def test_set_edge_weight(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        e = store.find_or_insert_edge(a, b, 1.0)
        store.set_edge_weight(e, 0.25)
        assert store.edge_weight(e) == 0.25


class TestRevision:
    def test_mutations_bump_revision(self, store: GraphStore) -> None:
        r0 = store.revision
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        r1 = store.revision
        assert r1 > r0
        e = store.find_or_insert_edge(a, b)
        r2 = store.revision
        assert r2 > r1
        store.set_edge_weight(e, 3.0)
        assert store.revision > r2

    def test_lookups_do_not_bump_revision(self, store: GraphStore) -> None:
        a = store.find_or_insert_concept("a")
        b = store.find_or_insert_concept("b")
        store.find_or_insert_edge(a, b)
        r = store.revision
        store.find_or_insert_concept("a")
        store.find_or_insert_edge(a, b)
        store.get_vertex_by_name("a")
        assert store.revision == r


class TestRestore:
    def test_restore_vertex_rejects_duplicates(self, store: GraphStore) -> None:
        store.restore_vertex("a", VertexKind.CONCEPT, "")
        store.restore_vertex("a", VertexKind.WORD, "")
        with pytest.raises(ValueError):
            store.restore_vertex("a", VertexKind.CONCEPT, "")

    def test_restore_edge_validates(self, store: GraphStore) -> None:
        store.registry.register("r")
        a = store.restore_vertex("a", VertexKind.CONCEPT, "")
        b = store.restore_vertex("b", VertexKind.CONCEPT, "")
        store.restore_edge(a, b, 1.0, 0b1)
        with pytest.raises(ValueError):
            store.restore_edge(a, b, 1.0, 0)
        with pytest.raises(ValueError):
            store.restore_edge(b, a, 1.0, 0b10)
        with pytest.raises(IndexError):
            store.restore_edge(a, 9, 1.0, 0)
