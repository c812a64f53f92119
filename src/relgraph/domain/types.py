"""Vertex kinds and normalization-cache states."""

from __future__ import annotations

from enum import IntEnum, IntFlag

# Width of the per-edge relation bitset; bounds the number of relation labels.
RELATION_MASK_BITS = 32


class VertexFlag(IntFlag):
    """Flag bits stored per vertex. A vertex without ``WORD`` is a concept."""

    NONE = 0
    WORD = 1


class VertexKind(IntEnum):
    CONCEPT = 0
    WORD = 1

    @classmethod
    def from_flags(cls, flags: int) -> VertexKind:
        return cls.WORD if flags & VertexFlag.WORD else cls.CONCEPT

    @property
    def flags(self) -> VertexFlag:
        return VertexFlag.WORD if self is VertexKind.WORD else VertexFlag.NONE


class CoefStatus(IntEnum):
    """Validity tag of the out-degree / out-weight normalization cache."""

    INVALID = 0
    UNWEIGHTED = 1
    WEIGHTED = 2

    @classmethod
    def for_mode(cls, use_weight: bool) -> CoefStatus:
        return cls.WEIGHTED if use_weight else cls.UNWEIGHTED
