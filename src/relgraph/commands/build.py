"""Commands: build a snapshot from relation files, or extend one."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from relgraph.commands._base import RgCommand
from relgraph.services.build import BuildService

if TYPE_CHECKING:
    from relgraph.commands._context import AppContext

_files_argument = click.argument(
    "relation_files",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
_source_option = click.option(
    "-s",
    "--source",
    "sources",
    multiple=True,
    help="Accepted relation source (repeatable).",
)


def _command_line() -> str:
    return shlex.join(["relgraph", *sys.argv[1:]])


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph build wn30_rels.txt -s wn30 -o wn30.bin
  relgraph build wn30_rels.txt gloss_rels.txt.gz -s wn30 -s gloss -o wn30g.bin
  relgraph build wn30_rels.txt -s wn30 --dict wn30_dict.txt --with-weight"""
)
@_files_argument
@click.option("-o", "--output", default=None, help="Snapshot to write (default: [graph] snapshot).")
@_source_option
@click.option(
    "--dict",
    "dictionary",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Word-to-concept dictionary to link in.",
)
@click.option("--with-weight", is_flag=True, help="Weight dictionary links by concept counts.")
@click.option("--note", "notes", multiple=True, help="Extra comment stored in the snapshot.")
@click.pass_obj
def build(
    app: AppContext,
    relation_files: tuple[Path, ...],
    output: str | None,
    sources: tuple[str, ...],
    dictionary: Path | None,
    with_weight: bool,
    notes: tuple[str, ...],
) -> None:
    """Build a graph snapshot from RELATION_FILES."""
    svc = BuildService(app.graphs, app.settings)
    app.emit(
        svc.build(
            list(relation_files),
            app.snapshot_path(output),
            sources=sources or None,
            dictionary=dictionary,
            with_weight=with_weight,
            comments=[_command_line(), *notes],
        )
    )


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph add extra_rels.txt -s xnet -g wn30.bin
  relgraph add more_rels.txt"""
)
@_files_argument
@click.option("-g", "--graph", "graph_path", default=None, help="Snapshot to extend.")
@_source_option
@click.pass_obj
def add(
    app: AppContext,
    relation_files: tuple[Path, ...],
    graph_path: str | None,
    sources: tuple[str, ...],
) -> None:
    """Add relations from RELATION_FILES to an existing snapshot."""
    svc = BuildService(app.graphs, app.settings)
    app.emit(
        svc.extend(
            list(relation_files),
            app.snapshot_path(graph_path),
            sources=sources,
            comments=[_command_line()],
        )
    )
