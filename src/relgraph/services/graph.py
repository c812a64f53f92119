"""GraphService: read-only queries over the loaded graph.

Reachability (BFS), shortest paths (Dijkstra), personalized PageRank
and structural summaries, each wrapped in a :class:`ServiceResult`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from relgraph.domain.errors import RelGraphError
from relgraph.infrastructure.graph.traversal import path_to
from relgraph.services.base import BaseService
from relgraph.services.result import ServiceResult

if TYPE_CHECKING:
    from relgraph.infrastructure.graph.engine import RelGraph


def _vertex_item(graph: RelGraph, u: int) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": graph.vertex_name(u),
        "kind": graph.store.vertex_kind(u).name.lower(),
    }
    gloss = graph.vertex_gloss(u)
    if gloss:
        item["gloss"] = gloss
    return item


class GraphService(BaseService):
    """Handles graph queries and ranking."""

    def _not_found(self, op: str, name: str, label: str = "vertex") -> ServiceResult:
        return self._error(
            op, "NOT_FOUND", f"Vertex '{name}' ({label}) not found in graph", name=name
        )

    # ------------------------------------------------------------------
    # info / dump
    # ------------------------------------------------------------------

    def info(self) -> ServiceResult:
        """Summarize the graph: sizes, relation types, sources, comments."""
        try:
            g = self._graphs.instance()
        except RelGraphError as exc:
            return self._from_exception("info", exc)

        store = g.store
        words = sum(1 for u in store.vertices() if store.vertex_is_word(u))
        return ServiceResult(
            ok=True,
            op="info",
            data={
                "vertices": store.size(),
                "concepts": store.size() - words,
                "words": words,
                "edges": store.num_edges(),
                "relations": list(g.registry.labels()),
                "sources": sorted(g.sources),
                "comments": list(g.get_comments()),
            },
        )

    def dump(self) -> ServiceResult:
        """Every vertex and every edge, each exactly once."""
        try:
            g = self._graphs.instance()
        except RelGraphError as exc:
            return self._from_exception("dump", exc)

        store = g.store
        vertices = [{"index": u, **_vertex_item(g, u)} for u in store.vertices()]
        edges = []
        for e in store.edges():
            u, v = store.edge_endpoints(e)
            edges.append(
                {
                    "source": store.vertex_name(u),
                    "target": store.vertex_name(v),
                    "weight": store.edge_weight(e),
                    "relations": store.edge_relations(e),
                }
            )
        return ServiceResult(
            ok=True,
            op="dump",
            data={"vertices": vertices, "edges": edges},
        )

    # ------------------------------------------------------------------
    # reach: breadth-first reachability
    # ------------------------------------------------------------------

    def reach(self, name: str, *, top: int | None = None) -> ServiceResult:
        """List vertices reachable from *name* along outgoing edges.

        Args:
            name: Source vertex (concepts are matched before words).
            top: Truncate the listing to this many vertices.
        """
        try:
            g = self._graphs.instance()
        except RelGraphError as exc:
            return self._from_exception("reach", exc)

        vid, found = g.get_vertex_by_name(name)
        if not found or vid is None:
            return self._not_found("reach", name, "source")

        _, order = g.bfs(vid)
        listed = order if top is None else order[:top]
        return ServiceResult(
            ok=True,
            op="reach",
            data={
                "source_id": name,
                "count": len(order),
                "items": [_vertex_item(g, u) for u in listed],
            },
        )

    # ------------------------------------------------------------------
    # path: weighted shortest path
    # ------------------------------------------------------------------

    def path(self, source: str, target: str) -> ServiceResult:
        """Cheapest directed path from *source* to *target* by edge weight."""
        try:
            g = self._graphs.instance()
        except RelGraphError as exc:
            return self._from_exception("path", exc)

        ids: dict[str, int] = {}
        for name, label in [(source, "source"), (target, "target")]:
            vid, found = g.get_vertex_by_name(name)
            if not found or vid is None:
                return self._not_found("path", name, label)
            ids[label] = vid

        _, parents = g.dijkstra(ids["source"])
        node_path = path_to(parents, ids["target"])
        if not node_path:
            return self._error(
                "path",
                "NO_PATH",
                f"No path from '{source}' to '{target}'",
                source=source,
                target=target,
            )

        store = g.store
        cost = 0.0
        for u, v in zip(node_path, node_path[1:], strict=False):
            e = store.find_edge(u, v)
            if e is not None:
                cost += store.edge_weight(e)

        return ServiceResult(
            ok=True,
            op="path",
            data={
                "source_id": source,
                "target_id": target,
                "length": len(node_path) - 1,
                "cost": cost,
                "steps": [_vertex_item(g, u) for u in node_path],
            },
        )

    # ------------------------------------------------------------------
    # rank: personalized PageRank
    # ------------------------------------------------------------------

    def rank(
        self,
        seeds: list[str],
        *,
        top: int = 20,
        use_weight: bool | None = None,
    ) -> ServiceResult:
        """Rank concepts by relevance to *seeds* via personalized PageRank.

        The restart mass is spread uniformly over the seeds that exist in
        the graph; unknown seeds are reported as warnings.

        Args:
            seeds: Concept or word names forming the context.
            top: Maximum number of concepts to return.
            use_weight: Weight transitions by edge weight. Defaults to the
                ``[rank] use_weight`` setting.
        """
        try:
            g = self._graphs.instance()
        except RelGraphError as exc:
            return self._from_exception("rank", exc)

        cfg = self.rank_config
        weighted = cfg.use_weight if use_weight is None else use_weight

        warnings: list[str] = []
        seed_ids: list[int] = []
        for name in seeds:
            vid, found = g.get_vertex_by_name(name)
            if not found or vid is None:
                warnings.append(f"Seed '{name}' not found in graph")
            elif vid not in seed_ids:
                seed_ids.append(vid)

        if not seed_ids:
            return self._error(
                "rank", "NOT_FOUND", "None of the seeds were found in graph", seeds=seeds
            )

        restart = [0.0] * g.size()
        for vid in seed_ids:
            restart[vid] = 1.0 / len(seed_ids)

        ranks = g.pagerank_ppv(
            restart,
            weighted,
            damping=cfg.damping,
            max_iterations=cfg.max_iterations,
            threshold=cfg.threshold,
        )

        store = g.store
        ranked = sorted(
            (u for u in store.vertices() if store.vertex_is_concept(u)),
            key=lambda u: ranks[u],
            reverse=True,
        )[:top]

        items = [{**_vertex_item(g, u), "score": round(ranks[u], 6)} for u in ranked]
        return ServiceResult(
            ok=True,
            op="rank",
            data={
                "seeds": [g.vertex_name(u) for u in seed_ids],
                "count": len(items),
                "items": items,
            },
            warnings=warnings,
            meta={"weighted": weighted, "damping": cfg.damping},
        )
