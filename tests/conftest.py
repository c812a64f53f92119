"""Shared pytest fixtures and test helpers for relgraph tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from relgraph.domain.records import RelationRecord
from relgraph.infrastructure.graph.engine import GraphInstance, RelGraph
from relgraph.infrastructure.graph.store import GraphStore

RELATIONS_TXT = """\
# toy relation file
u:dog v:canine t:hypernym s:wn30 w:2 d:1
u:canine v:carnivore t:hypernym s:wn30 w:1 d:1
u:dog v:canine t:similar s:wn30 w:7 d:1
u:cat v:feline t:hypernym s:wn30 d:1
u:feline v:carnivore t:hypernym s:wn30 d:1
u:dog v:cat t:related s:xnet
u:carnivore v:animal t:hypernym s:other d:1
"""

DICTIONARY_TXT = """\
dog dog:3 canine:1
cat cat
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def relations_file(tmp_path: Path) -> Path:
    path = tmp_path / "rels.txt"
    path.write_text(RELATIONS_TXT, encoding="utf-8")
    return path


@pytest.fixture
def dictionary_file(tmp_path: Path) -> Path:
    path = tmp_path / "dict.txt"
    path.write_text(DICTIONARY_TXT, encoding="utf-8")
    return path


@pytest.fixture
def toy_graph(relations_file: Path, dictionary_file: Path) -> RelGraph:
    """Graph built from the toy files with sources wn30 + xnet and the dictionary."""
    graph = RelGraph.from_txt(relations_file, {"wn30", "xnet"})
    graph.add_dictionary(dictionary_file, with_weight=True)
    graph.set_gloss(graph.find_or_insert_concept("dog"), "a domesticated canid")
    graph.add_comment("relgraph build rels.txt -s wn30 -s xnet")
    return graph


@pytest.fixture
def graphs(toy_graph: RelGraph) -> GraphInstance:
    return GraphInstance(toy_graph)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def rel(
    source: str,
    target: str,
    weight: float = 1.0,
    relation: str | None = "related",
    source_id: str | None = "src",
    *,
    directed: bool = True,
) -> RelationRecord:
    """Shorthand for a relation record."""
    return RelationRecord(
        source=source,
        target=target,
        weight=weight,
        relation=relation,
        source_id=source_id,
        directed=directed,
    )


def build_store(edges: list[tuple[str, str, float]]) -> GraphStore:
    """Concept-only store from ``(source, target, weight)`` triples."""
    s = GraphStore()
    for u, v, w in edges:
        s.find_or_insert_edge(s.find_or_insert_concept(u), s.find_or_insert_concept(v), w)
    return s


def vid(s: GraphStore, name: str) -> int:
    """Concept-first vertex id lookup, asserting the vertex exists."""
    vertex, found = s.get_vertex_by_name(name)
    assert found and vertex is not None
    return vertex
