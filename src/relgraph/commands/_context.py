"""AppContext: shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Owns the process's :class:`GraphInstance`, loading
the snapshot lazily so ``--help`` never touches the disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from relgraph.infrastructure.graph.engine import GraphInstance
from relgraph.output.formatters import format_result

if TYPE_CHECKING:
    from relgraph.config.settings import RelGraphSettings
    from relgraph.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: RelGraphSettings) -> None:
        self.settings = settings
        self.graphs = GraphInstance()

        from relgraph.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def snapshot_path(self, override: str | None = None) -> Path:
        """The snapshot to use: *override* if given, else the configured one."""
        return Path(override) if override else self.settings.snapshot_path

    def load(self, override: str | None = None) -> ServiceResult | None:
        """Load the snapshot into :attr:`graphs`.

        Returns an error result on failure, None on success.
        """
        from relgraph.domain.errors import RelGraphError
        from relgraph.services.base import result_from_exception

        path = self.snapshot_path(override)
        try:
            self.graphs.create_from_binfile(path)
        except (RelGraphError, OSError) as exc:
            return result_from_exception("load", exc)
        return None

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout; warnings go to stderr in human mode.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(result, json_output=self.settings.json_output)
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
