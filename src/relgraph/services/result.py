"""Result objects returned by every relgraph service call.

Expected failures (unknown vertex, unreachable target, corrupt snapshot,
full relation registry) come back as ``ok=False`` results carrying an
error code; only programming errors propagate as exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Error code, message and structured context of a failed call."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False when *error* is set.
        op: Operation name, used to pick a renderer (``"rank"``, ``"build"``).
        data: Payload of a successful call.
        warnings: Problems that did not stop the call, such as unknown seeds.
        error: Set on failure.
        meta: Parameters the call ran with (damping, weighting).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )
