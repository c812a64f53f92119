"""RelationRegistry: append-only table of relation labels.

The index of a label is its bit position in every edge's relation mask,
so the order is part of the snapshot format and never changes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from relgraph.domain.errors import RegistryFull
from relgraph.domain.types import RELATION_MASK_BITS

logger = logging.getLogger(__name__)


class RelationRegistry:
    """Ordered relation labels with stable bit indexes."""

    def __init__(self, labels: Iterable[str] = (), *, capacity: int = RELATION_MASK_BITS) -> None:
        self._capacity = capacity
        self._labels: list[str] = []
        self._index: dict[str, int] = {}
        for label in labels:
            self.register(label)

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._labels)

    def __iter__(self) -> Iterator[str]:
        return iter(self._labels)

    def __contains__(self, label: object) -> bool:
        return label in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RelationRegistry):
            return NotImplemented
        return self._labels == other._labels

    def labels(self) -> tuple[str, ...]:
        return tuple(self._labels)

    def index_of(self, label: str) -> int | None:
        return self._index.get(label)

    def register(self, label: str) -> int:
        """Return the bit index of *label*, appending it if unseen.

        Raises:
            RegistryFull: *label* is new and every bit is taken. Nothing is
                recorded for the rejected label.
        """
        idx = self._index.get(label)
        if idx is not None:
            return idx
        if len(self._labels) >= self._capacity:
            raise RegistryFull(label, self._capacity)
        idx = len(self._labels)
        self._labels.append(label)
        self._index[label] = idx
        logger.debug("Registered relation type %r as bit %d", label, idx)
        return idx

    def bit(self, label: str) -> int:
        """Register *label* and return its single-bit mask."""
        return 1 << self.register(label)

    def decode(self, mask: int) -> list[str]:
        """Labels whose bit is set in *mask*, in ascending bit order."""
        return [label for idx, label in enumerate(self._labels) if mask >> idx & 1]

    def valid_mask(self, mask: int) -> bool:
        """True if *mask* only uses bits of registered labels."""
        return 0 <= mask < (1 << len(self._labels))
