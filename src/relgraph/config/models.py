"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, relgraph.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RankConfig(BaseModel):
    """[rank] section: personalized PageRank parameters."""

    model_config = {"frozen": True}

    damping: float = Field(default=0.85, gt=0.0, lt=1.0)
    max_iterations: int = Field(default=30, ge=1)
    threshold: float = Field(default=1e-4, gt=0.0)
    use_weight: bool = False


class IngestConfig(BaseModel):
    """[ingest] section."""

    model_config = {"frozen": True}

    sources: list[str] = Field(default_factory=list)
    default_weight: float = Field(default=1.0, ge=0.0)
    dictionary_weight: float = Field(default=1.0, ge=0.0)


class GraphConfig(BaseModel):
    """[graph] section."""

    model_config = {"frozen": True}

    snapshot: str = "relgraph.bin"
