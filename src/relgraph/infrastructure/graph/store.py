"""GraphStore: purpose-built adjacency storage for the relatedness graph.

Vertices live in parallel arrays indexed by a dense, stable integer id.
Concept and word vertices have separate name indexes, so the same string
may name one vertex of each kind. Edges are directed, at most one per
ordered pair, and carry a weight plus a relation bitmask whose bits refer
to the store's :class:`RelationRegistry`.

Vertices and edges are only ever added. Every topology or weight change
bumps :attr:`GraphStore.revision`, which derived caches use to detect
staleness.
"""

from __future__ import annotations

import math
import random
from collections.abc import Iterator

from relgraph.domain.errors import VertexNotFound
from relgraph.domain.types import VertexFlag, VertexKind
from relgraph.infrastructure.graph.registry import RelationRegistry


def _check_weight(weight: float) -> float:
    weight = float(weight)
    if not math.isfinite(weight) or weight < 0.0:
        msg = f"Edge weight must be finite and non-negative, got {weight!r}"
        raise ValueError(msg)
    return weight


class GraphStore:
    """Vertex/edge container with name-indexed lookup."""

    def __init__(self, registry: RelationRegistry | None = None) -> None:
        self.registry = registry if registry is not None else RelationRegistry()
        self.revision = 0

        # Vertex table
        self._names: list[str] = []
        self._glosses: list[str] = []
        self._flags: list[int] = []
        self._out: list[list[int]] = []
        self._name_index: dict[VertexKind, dict[str, int]] = {
            VertexKind.CONCEPT: {},
            VertexKind.WORD: {},
        }

        # Edge table
        self._edge_src: list[int] = []
        self._edge_tgt: list[int] = []
        self._edge_weight: list[float] = []
        self._edge_mask: list[int] = []
        self._edge_index: dict[tuple[int, int], int] = {}

    # ------------------------------------------------------------------
    # Sizes and iteration
    # ------------------------------------------------------------------

    def size(self) -> int:
        """Number of vertices."""
        return len(self._names)

    __len__ = size

    def num_edges(self) -> int:
        return len(self._edge_src)

    def vertices(self) -> range:
        return range(len(self._names))

    def edges(self) -> range:
        return range(len(self._edge_src))

    # ------------------------------------------------------------------
    # Vertices
    # ------------------------------------------------------------------

    def _insert_vertex(self, name: str, kind: VertexKind, gloss: str = "") -> int:
        index = self._name_index[kind]
        vid = index.get(name)
        if vid is not None:
            return vid
        vid = len(self._names)
        self._names.append(name)
        self._glosses.append(gloss)
        self._flags.append(int(kind.flags))
        self._out.append([])
        index[name] = vid
        self.revision += 1
        return vid

    def restore_vertex(self, name: str, kind: VertexKind, gloss: str) -> int:
        """Append a vertex that must not exist yet; used when decoding snapshots."""
        if name in self._name_index[kind]:
            msg = f"Duplicate {kind.name.lower()} vertex {name!r}"
            raise ValueError(msg)
        return self._insert_vertex(name, kind, gloss)

    def find_or_insert_concept(self, name: str) -> int:
        return self._insert_vertex(name, VertexKind.CONCEPT)

    def find_or_insert_word(self, name: str) -> int:
        return self._insert_vertex(name, VertexKind.WORD)

    def get_vertex_by_name(
        self, name: str, kind: VertexKind | None = None
    ) -> tuple[int | None, bool]:
        """Look up a vertex by name.

        With no *kind*, concepts are searched before words. Returns
        ``(vertex_id, True)`` on a hit and ``(None, False)`` otherwise.
        """
        kinds = (kind,) if kind is not None else (VertexKind.CONCEPT, VertexKind.WORD)
        for k in kinds:
            vid = self._name_index[k].get(name)
            if vid is not None:
                return vid, True
        return None, False

    def require_vertex(self, name: str, kind: VertexKind | None = None) -> int:
        """Like :meth:`get_vertex_by_name` but raises :class:`VertexNotFound`."""
        vid, found = self.get_vertex_by_name(name, kind)
        if not found or vid is None:
            label = kind.name.lower() if kind is not None else "vertex"
            raise VertexNotFound(name, label)
        return vid

    def vertex_name(self, u: int) -> str:
        return self._names[u]

    def vertex_gloss(self, u: int) -> str:
        return self._glosses[u]

    def set_gloss(self, u: int, gloss: str) -> None:
        self._glosses[u] = gloss

    def vertex_flags(self, u: int) -> int:
        return self._flags[u]

    def vertex_kind(self, u: int) -> VertexKind:
        return VertexKind.from_flags(self._flags[u])

    def vertex_is_concept(self, u: int) -> bool:
        return not self._flags[u] & VertexFlag.WORD

    def vertex_is_word(self, u: int) -> bool:
        return bool(self._flags[u] & VertexFlag.WORD)

    def random_vertex(self, rng: random.Random | None = None) -> int | None:
        """A uniformly chosen vertex id, or None for an empty graph."""
        if not self._names:
            return None
        return (rng or random).randrange(len(self._names))

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def find_edge(self, u: int, v: int) -> int | None:
        return self._edge_index.get((u, v))

    def find_or_insert_edge(self, u: int, v: int, weight: float = 1.0) -> int:
        """Return the edge ``u -> v``, creating it if needed.

        An existing edge keeps its original weight.
        """
        eid = self._edge_index.get((u, v))
        if eid is not None:
            return eid
        if not (0 <= u < len(self._names) and 0 <= v < len(self._names)):
            msg = f"Edge endpoints out of range: ({u}, {v})"
            raise IndexError(msg)
        return self._append_edge(u, v, _check_weight(weight), 0)

    def restore_edge(self, u: int, v: int, weight: float, mask: int) -> int:
        """Append a fully specified edge; used when decoding snapshots."""
        if (u, v) in self._edge_index:
            msg = f"Duplicate edge ({u}, {v})"
            raise ValueError(msg)
        if not (0 <= u < len(self._names) and 0 <= v < len(self._names)):
            msg = f"Edge endpoints out of range: ({u}, {v})"
            raise IndexError(msg)
        if not self.registry.valid_mask(mask):
            msg = f"Relation mask {mask:#x} uses unregistered bits"
            raise ValueError(msg)
        return self._append_edge(u, v, _check_weight(weight), mask)

    def _append_edge(self, u: int, v: int, weight: float, mask: int) -> int:
        eid = len(self._edge_src)
        self._edge_src.append(u)
        self._edge_tgt.append(v)
        self._edge_weight.append(weight)
        self._edge_mask.append(mask)
        self._edge_index[(u, v)] = eid
        self._out[u].append(eid)
        self.revision += 1
        return eid

    def add_relation_label(self, e: int, label: str) -> None:
        """Register *label* if needed and set its bit on edge *e*."""
        self._edge_mask[e] |= self.registry.bit(label)

    def edge_source(self, e: int) -> int:
        return self._edge_src[e]

    def edge_target(self, e: int) -> int:
        return self._edge_tgt[e]

    def edge_endpoints(self, e: int) -> tuple[int, int]:
        return self._edge_src[e], self._edge_tgt[e]

    def edge_weight(self, e: int) -> float:
        return self._edge_weight[e]

    def set_edge_weight(self, e: int, weight: float) -> None:
        self._edge_weight[e] = _check_weight(weight)
        self.revision += 1

    def edge_mask(self, e: int) -> int:
        return self._edge_mask[e]

    def edge_relations(self, e: int) -> list[str]:
        """Relation labels carried by edge *e*, in registry order."""
        return self.registry.decode(self._edge_mask[e])

    def out_edges(self, u: int) -> tuple[int, ...]:
        return tuple(self._out[u])

    def out_degree(self, u: int) -> int:
        return len(self._out[u])

    def successors(self, u: int) -> Iterator[int]:
        tgt = self._edge_tgt
        for e in self._out[u]:
            yield tgt[e]
