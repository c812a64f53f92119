"""Breadth-first reachability and single-source shortest paths.

Both follow outgoing edges only and are total over any valid store: an
unknown source yields a failed (empty) result, an isolated source a
one-element traversal.
"""

from __future__ import annotations

import heapq
from collections import deque

from relgraph.infrastructure.graph.store import GraphStore


def _valid(store: GraphStore, source: int) -> bool:
    return 0 <= source < store.size()


def bfs(store: GraphStore, source: int) -> tuple[bool, list[int]]:
    """Vertices reachable from *source*, in discovery order.

    Returns ``(reached, order)``; *reached* is False only when *source* is
    not a vertex of *store*.
    """
    if not _valid(store, source):
        return False, []

    visited = {source}
    order = [source]
    queue: deque[int] = deque([source])
    while queue:
        u = queue.popleft()
        for v in store.successors(u):
            if v not in visited:
                visited.add(v)
                order.append(v)
                queue.append(v)
    return True, order


def shortest_paths(store: GraphStore, source: int) -> tuple[dict[int, int], dict[int, float]]:
    """Dijkstra from *source*: ``(parents, distances)`` for reached vertices.

    Edge weights must be non-negative.
    """
    parents: dict[int, int] = {}
    dist: dict[int, float] = {}
    if not _valid(store, source):
        return parents, dist

    parents[source] = source
    dist[source] = 0.0
    done: set[int] = set()
    heap: list[tuple[float, int]] = [(0.0, source)]
    while heap:
        d, u = heapq.heappop(heap)
        if u in done:
            continue
        done.add(u)
        for e in store.out_edges(u):
            v = store.edge_target(e)
            nd = d + store.edge_weight(e)
            if v not in dist or nd < dist[v]:
                dist[v] = nd
                parents[v] = u
                heapq.heappush(heap, (nd, v))
    return parents, dist


def dijkstra(store: GraphStore, source: int) -> tuple[bool, dict[int, int]]:
    """Shortest-path predecessor map from *source*.

    ``parents[source] == source``; unreached vertices have no entry.
    """
    if not _valid(store, source):
        return False, {}
    parents, _ = shortest_paths(store, source)
    return True, parents


def path_to(parents: dict[int, int], target: int) -> list[int]:
    """Rebuild the source → *target* path from a parent map.

    Returns an empty list when *target* was not reached.
    """
    if target not in parents:
        return []
    path = [target]
    node = target
    while parents[node] != node:
        node = parents[node]
        path.append(node)
    path.reverse()
    return path
