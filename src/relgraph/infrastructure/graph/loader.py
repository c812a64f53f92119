"""Graph construction from relation records and dictionary entries.

A relation record is applied whole or not at all: its label is registered
before either endpoint or the edge is touched, so a full registry rejects
the record without leaving stray vertices behind.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Collection, Iterable
from dataclasses import dataclass

from relgraph.domain.records import DEFAULT_WEIGHT, DictionaryEntry, RelationRecord
from relgraph.infrastructure.graph.store import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class IngestStats:
    """Counters for one ingestion call."""

    accepted: int = 0
    dropped: int = 0
    edges_added: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "accepted": self.accepted,
            "dropped": self.dropped,
            "edges_added": self.edges_added,
        }


def apply_relation(store: GraphStore, record: RelationRecord) -> int:
    """Insert *record* into *store*. Returns the number of new edges."""
    if not math.isfinite(record.weight) or record.weight < 0.0:
        msg = f"Relation weight must be finite and non-negative, got {record.weight!r}"
        raise ValueError(msg)
    label = record.relation
    if label:
        store.registry.register(label)

    u = store.find_or_insert_concept(record.source)
    v = store.find_or_insert_concept(record.target)
    pairs = [(u, v)] if record.directed or u == v else [(u, v), (v, u)]

    before = store.num_edges()
    for a, b in pairs:
        e = store.find_or_insert_edge(a, b, record.weight)
        if label:
            store.add_relation_label(e, label)
    return store.num_edges() - before


def ingest_relations(
    store: GraphStore,
    records: Iterable[RelationRecord],
    accepted_sources: Collection[str],
) -> IngestStats:
    """Apply every record whose source is in *accepted_sources*.

    Records from other sources (or with no source) are dropped.
    """
    stats = IngestStats()
    for record in records:
        if record.source_id is None or record.source_id not in accepted_sources:
            stats.dropped += 1
            continue
        stats.edges_added += apply_relation(store, record)
        stats.accepted += 1
    logger.info(
        "Ingested %d relations (%d dropped, %d new edges)",
        stats.accepted,
        stats.dropped,
        stats.edges_added,
    )
    return stats


def add_token(
    store: GraphStore,
    entry: DictionaryEntry,
    *,
    with_weight: bool = False,
    default_weight: float = DEFAULT_WEIGHT,
) -> int:
    """Link a word vertex to its concept. Returns the word → concept edge id."""
    weight = default_weight
    if with_weight and entry.weight is not None:
        weight = entry.weight
    w = store.find_or_insert_word(entry.word)
    c = store.find_or_insert_concept(entry.concept)
    return store.find_or_insert_edge(w, c, weight)


def add_dictionary(
    store: GraphStore,
    entries: Iterable[DictionaryEntry],
    *,
    with_weight: bool = False,
    default_weight: float = DEFAULT_WEIGHT,
) -> IngestStats:
    stats = IngestStats()
    for entry in entries:
        before = store.num_edges()
        add_token(store, entry, with_weight=with_weight, default_weight=default_weight)
        stats.accepted += 1
        stats.edges_added += store.num_edges() - before
    logger.info("Linked %d dictionary entries (%d new edges)", stats.accepted, stats.edges_added)
    return stats
