"""BaseService: shared foundation for relgraph services.

Every service receives the application's :class:`GraphInstance` and the
active settings at construction time.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from relgraph.config.models import IngestConfig, RankConfig
from relgraph.domain.errors import RelGraphError
from relgraph.services.result import ServiceResult

if TYPE_CHECKING:
    from relgraph.config.settings import RelGraphSettings
    from relgraph.infrastructure.graph.engine import GraphInstance

logger = logging.getLogger(__name__)


def error_result(op: str, code: str, message: str, **detail: object) -> ServiceResult:
    return ServiceResult.failure(op, code, message, **detail)


def result_from_exception(op: str, exc: Exception) -> ServiceResult:
    """Convert a relgraph or I/O failure into an error result.

    Any other exception is re-raised.
    """
    if isinstance(exc, RelGraphError):
        code = exc.code
    elif isinstance(exc, OSError):
        code = "IO_ERROR"
    else:
        raise exc
    logger.debug("%s failed: %s", op, exc, exc_info=True)
    return error_result(op, code, str(exc))


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, graphs: GraphInstance, settings: RelGraphSettings | None = None) -> None:
        self._graphs = graphs
        self._settings = settings

    @property
    def rank_config(self) -> RankConfig:
        return self._settings.rank if self._settings else RankConfig()

    @property
    def ingest_config(self) -> IngestConfig:
        return self._settings.ingest if self._settings else IngestConfig()

    _error = staticmethod(error_result)
    _from_exception = staticmethod(result_from_exception)
