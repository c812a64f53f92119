"""RelGraph and GraphInstance: the graph and its single-owner lifecycle.

:class:`RelGraph` bundles the vertex/edge store, relation registry,
accepted relation sources, comment log and normalization cache behind
one object. :class:`GraphInstance` is the handle an application creates
once and passes around; ``create_from_*`` replaces the graph it holds, so
every holder of the handle sees the new graph.

Single-threaded by contract: mutation (ingestion, ``ppv_weights``) must
not overlap with traversal or ranking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, TextIO, TypeAlias

from relgraph.domain.errors import UninitializedGraph
from relgraph.domain.records import (
    DEFAULT_WEIGHT,
    DictionaryEntry,
    RelationRecord,
    read_dictionary_file,
    read_relation_file,
)
from relgraph.domain.types import VertexKind
from relgraph.infrastructure.graph import loader, ranker, snapshot, traversal
from relgraph.infrastructure.graph.registry import RelationRegistry
from relgraph.infrastructure.graph.store import GraphStore

if TYPE_CHECKING:
    import random
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

RelationSource: TypeAlias = Path | str | Iterable[RelationRecord]
DictionarySource: TypeAlias = Path | str | Iterable[DictionaryEntry]


def _relation_records(relations: RelationSource) -> Iterable[RelationRecord]:
    if isinstance(relations, (str, Path)):
        return read_relation_file(Path(relations))
    return relations


def _dictionary_entries(entries: DictionarySource) -> Iterable[DictionaryEntry]:
    if isinstance(entries, (str, Path)):
        return read_dictionary_file(Path(entries))
    return entries


class RelGraph:
    """In-memory relatedness graph with its metadata and ranking cache."""

    def __init__(
        self,
        store: GraphStore | None = None,
        *,
        sources: Iterable[str] = (),
        comments: Iterable[str] = (),
    ) -> None:
        self.store = store if store is not None else GraphStore()
        self._sources: set[str] = set(sources)
        self._comments: list[str] = list(comments)
        self.cache = ranker.NormalizationCache()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_txt(cls, relations: RelationSource, rel_sources: Iterable[str]) -> RelGraph:
        """Build a graph from relation records of the accepted sources."""
        graph = cls(sources=rel_sources)
        graph.add_from_txt(relations)
        return graph

    @classmethod
    def from_binfile(cls, path: Path | str) -> RelGraph:
        contents = snapshot.read_snapshot(Path(path))
        return cls(contents.store, sources=contents.sources, comments=contents.comments)

    def write_to_binfile(self, path: Path | str) -> None:
        contents = snapshot.SnapshotContents(
            store=self.store,
            sources=set(self._sources),
            comments=list(self._comments),
        )
        snapshot.write_snapshot(Path(path), contents)

    def add_from_txt(self, relations: RelationSource) -> loader.IngestStats:
        """Layer more relations onto the graph, filtered by :attr:`sources`."""
        return loader.ingest_relations(self.store, _relation_records(relations), self._sources)

    def add_rel_source(self, source_id: str) -> None:
        self._sources.add(source_id)

    @property
    def sources(self) -> frozenset[str]:
        return frozenset(self._sources)

    def add_token(
        self,
        word: str,
        concept: str,
        *,
        weight: float | None = None,
        with_weight: bool = False,
        default_weight: float = DEFAULT_WEIGHT,
    ) -> int:
        entry = DictionaryEntry(word=word, concept=concept, weight=weight)
        return loader.add_token(
            self.store, entry, with_weight=with_weight, default_weight=default_weight
        )

    def add_dictionary(
        self,
        entries: DictionarySource,
        *,
        with_weight: bool = False,
        default_weight: float = DEFAULT_WEIGHT,
    ) -> loader.IngestStats:
        return loader.add_dictionary(
            self.store,
            _dictionary_entries(entries),
            with_weight=with_weight,
            default_weight=default_weight,
        )

    # ------------------------------------------------------------------
    # Store passthroughs
    # ------------------------------------------------------------------

    @property
    def registry(self) -> RelationRegistry:
        return self.store.registry

    def size(self) -> int:
        return self.store.size()

    def num_edges(self) -> int:
        return self.store.num_edges()

    def find_or_insert_concept(self, name: str) -> int:
        return self.store.find_or_insert_concept(name)

    def find_or_insert_word(self, name: str) -> int:
        return self.store.find_or_insert_word(name)

    def find_or_insert_edge(self, u: int, v: int, weight: float = DEFAULT_WEIGHT) -> int:
        return self.store.find_or_insert_edge(u, v, weight)

    def add_relation_label(self, e: int, label: str) -> None:
        self.store.add_relation_label(e, label)

    def get_vertex_by_name(
        self, name: str, kind: VertexKind | None = None
    ) -> tuple[int | None, bool]:
        return self.store.get_vertex_by_name(name, kind)

    def vertex_name(self, u: int) -> str:
        return self.store.vertex_name(u)

    def vertex_gloss(self, u: int) -> str:
        return self.store.vertex_gloss(u)

    def set_gloss(self, u: int, gloss: str) -> None:
        self.store.set_gloss(u, gloss)

    def vertex_is_concept(self, u: int) -> bool:
        return self.store.vertex_is_concept(u)

    def vertex_is_word(self, u: int) -> bool:
        return self.store.vertex_is_word(u)

    def edge_relations(self, e: int) -> list[str]:
        return self.store.edge_relations(e)

    def set_edge_weight(self, e: int, weight: float) -> None:
        self.store.set_edge_weight(e, weight)
        self.cache.invalidate()

    def random_vertex(self, rng: random.Random | None = None) -> int | None:
        return self.store.random_vertex(rng)

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def add_comment(self, text: str) -> None:
        self._comments.append(text)

    def get_comments(self) -> tuple[str, ...]:
        return tuple(self._comments)

    # ------------------------------------------------------------------
    # Algorithms
    # ------------------------------------------------------------------

    def bfs(self, source: int) -> tuple[bool, list[int]]:
        return traversal.bfs(self.store, source)

    def dijkstra(self, source: int) -> tuple[bool, dict[int, int]]:
        return traversal.dijkstra(self.store, source)

    def pagerank_ppv(
        self,
        restart: Sequence[float],
        use_weight: bool = False,
        *,
        damping: float = ranker.DEFAULT_DAMPING,
        max_iterations: int = ranker.DEFAULT_MAX_ITERATIONS,
        threshold: float = ranker.DEFAULT_THRESHOLD,
    ) -> list[float]:
        return ranker.pagerank_ppv(
            self.store,
            restart,
            use_weight=use_weight,
            cache=self.cache,
            damping=damping,
            max_iterations=max_iterations,
            threshold=threshold,
        )

    def ppv_weights(self, ppv: Sequence[float]) -> None:
        ranker.ppv_weights(self.store, ppv, cache=self.cache)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def display_info(self, out: TextIO) -> None:
        """Write a short summary: counts, relation types, sources, comments."""
        store = self.store
        words = sum(1 for u in store.vertices() if store.vertex_is_word(u))
        out.write(
            f"{store.size()} vertices ({store.size() - words} concepts, {words} words), "
            f"{store.num_edges()} edges\n"
        )
        out.write(f"Relations: {' '.join(store.registry.labels())}\n")
        out.write(f"Sources: {' '.join(sorted(self._sources))}\n")
        for comment in self._comments:
            out.write(f"Comment: {comment}\n")

    def dump_graph(self, out: TextIO) -> None:
        """Write every vertex and every edge, one per line."""
        store = self.store
        for u in store.vertices():
            kind = store.vertex_kind(u).name.lower()
            line = f"{u}\t{kind}\t{store.vertex_name(u)}"
            gloss = store.vertex_gloss(u)
            if gloss:
                line += f"\t{gloss}"
            out.write(line + "\n")
        for e in store.edges():
            u, v = store.edge_endpoints(e)
            rels = ",".join(store.edge_relations(e))
            out.write(
                f"{store.vertex_name(u)} -> {store.vertex_name(v)}"
                f"\tw={store.edge_weight(e):g}\trels={rels}\n"
            )


class GraphInstance:
    """Handle owning the process's single :class:`RelGraph`.

    Build one at start-up and pass it to whatever needs the graph.
    A failed ``create_from_*`` leaves the current graph untouched.
    """

    def __init__(self, graph: RelGraph | None = None) -> None:
        self._graph = graph

    @property
    def is_initialized(self) -> bool:
        return self._graph is not None

    def instance(self) -> RelGraph:
        """The current graph.

        Raises:
            UninitializedGraph: No ``create_from_*`` call has succeeded yet.
        """
        if self._graph is None:
            raise UninitializedGraph
        return self._graph

    @property
    def graph(self) -> RelGraph:
        return self.instance()

    def create_from_txt(self, relations: RelationSource, rel_sources: Iterable[str]) -> RelGraph:
        graph = RelGraph.from_txt(relations, rel_sources)
        self.replace(graph)
        return graph

    def create_from_binfile(self, path: Path | str) -> RelGraph:
        graph = RelGraph.from_binfile(path)
        self.replace(graph)
        return graph

    def replace(self, graph: RelGraph) -> None:
        """Install a fully built *graph* as the current one."""
        if self._graph is not None:
            logger.debug("Replacing existing graph instance")
        self._graph = graph
