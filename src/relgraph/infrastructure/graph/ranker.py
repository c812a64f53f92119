"""Personalized PageRank over a :class:`GraphStore`.

Power iteration of ``rank = (1 - d) * restart + d * M * rank`` where ``M``
spreads each vertex's rank over its out-edges, uniformly or in proportion
to edge weight. The rank held by dangling vertices (no out-edges, or zero
total out-weight) flows back along the normalised restart vector, so a
restart vector summing to 1 yields ranks summing to 1.

The per-vertex normalisation (out-degree or out-weight sum) is kept in a
:class:`NormalizationCache` so repeated rankings in the same mode skip
that pass.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from relgraph.domain.types import CoefStatus
from relgraph.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)

DEFAULT_DAMPING = 0.85
DEFAULT_MAX_ITERATIONS = 30
DEFAULT_THRESHOLD = 1e-4


def compute_out_coefs(store: GraphStore, use_weight: bool) -> list[float]:
    """Out-degree (or out-weight sum) of every vertex, in one pass over edges."""
    coefs = [0.0] * store.size()
    for e in store.edges():
        coefs[store.edge_source(e)] += store.edge_weight(e) if use_weight else 1.0
    return coefs


class NormalizationCache:
    """Lazily computed out-degree / out-weight vector with a validity tag.

    The cache also remembers the store revision it was computed against,
    so any vertex, edge or weight change makes it stale even if nobody
    called :meth:`invalidate`.
    """

    def __init__(self) -> None:
        self.status = CoefStatus.INVALID
        self.values: list[float] = []
        self._revision = -1

    def invalidate(self) -> None:
        self.status = CoefStatus.INVALID
        self.values = []
        self._revision = -1

    def is_valid_for(self, store: GraphStore, use_weight: bool) -> bool:
        return (
            self.status == CoefStatus.for_mode(use_weight)
            and self._revision == store.revision
            and len(self.values) == store.size()
        )

    def ensure(self, store: GraphStore, use_weight: bool) -> list[float]:
        """Return the coefficients for *use_weight*, recomputing if needed."""
        if not self.is_valid_for(store, use_weight):
            mode = CoefStatus.for_mode(use_weight)
            logger.debug("Recomputing out coefficients (mode=%s)", mode.name.lower())
            self.values = compute_out_coefs(store, use_weight)
            self.status = mode
            self._revision = store.revision
        return self.values


def pagerank_ppv(
    store: GraphStore,
    restart: Sequence[float],
    *,
    use_weight: bool = False,
    cache: NormalizationCache | None = None,
    damping: float = DEFAULT_DAMPING,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[float]:
    """Rank every vertex of *store* against the *restart* distribution.

    Iterates until the L1 change between successive rank vectors drops
    below *threshold* or *max_iterations* is reached.

    Args:
        store: Graph to rank.
        restart: Personalization mass per vertex id; need not sum to 1.
        use_weight: Split rank by edge weight instead of uniformly.
        cache: Normalization cache to reuse; a throwaway one if omitted.
        damping: Probability of following an edge rather than restarting.
        max_iterations: Iteration cap.
        threshold: Convergence bound on the L1 change.

    Raises:
        ValueError: *restart* does not have one entry per vertex.
    """
    n = store.size()
    if len(restart) != n:
        msg = f"Restart vector has {len(restart)} entries for {n} vertices"
        raise ValueError(msg)
    if n == 0:
        return []

    restart = [float(x) for x in restart]
    mass = sum(restart)
    if mass <= 0.0:
        return [0.0] * n
    restart_dist = [x / mass for x in restart]

    coefs = (cache or NormalizationCache()).ensure(store, use_weight)
    dangling = [u for u in range(n) if coefs[u] <= 0.0]
    out = [store.out_edges(u) for u in range(n)]
    targets = [store.edge_target(e) for e in store.edges()]
    weights = [store.edge_weight(e) for e in store.edges()] if use_weight else None

    base = [(1.0 - damping) * x for x in restart]
    ranks = list(restart)
    iterations = 0
    delta = 0.0
    for iterations in range(1, max_iterations + 1):
        dangling_mass = damping * sum(ranks[u] for u in dangling)
        new = [b + dangling_mass * p for b, p in zip(base, restart_dist, strict=True)]
        for u in range(n):
            coef = coefs[u]
            if coef <= 0.0 or ranks[u] == 0.0:
                continue
            share = damping * ranks[u] / coef
            if weights is None:
                for e in out[u]:
                    new[targets[e]] += share
            else:
                for e in out[u]:
                    new[targets[e]] += share * weights[e]
        delta = sum(abs(a - b) for a, b in zip(new, ranks, strict=True))
        ranks = new
        if delta < threshold:
            break

    logger.debug(
        "PageRank finished after %d iterations (delta=%.3g, weighted=%s)",
        iterations,
        delta,
        use_weight,
    )
    return ranks


def ppv_weights(
    store: GraphStore,
    ppv: Sequence[float],
    *,
    cache: NormalizationCache | None = None,
) -> None:
    """Reweight every edge with the personalization value of its target.

    Invalidates *cache*, since the weighted out-sums change.
    """
    if len(ppv) != store.size():
        msg = f"Personalization vector has {len(ppv)} entries for {store.size()} vertices"
        raise ValueError(msg)
    if any(not math.isfinite(x) or x < 0.0 for x in ppv):
        msg = "Personalization values must be finite and non-negative"
        raise ValueError(msg)
    for e in store.edges():
        store.set_edge_weight(e, ppv[store.edge_target(e)])
    if cache is not None:
        cache.invalidate()
