"""Commands: inspect, traverse, and rank a graph snapshot."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from relgraph.commands._base import RgCommand
from relgraph.services.graph import GraphService

if TYPE_CHECKING:
    from relgraph.commands._context import AppContext

_graph_option = click.option(
    "-g",
    "--graph",
    "graph_path",
    default=None,
    help="Snapshot file (default: [graph] snapshot setting).",
)


def _service(app: AppContext, graph_path: str | None) -> GraphService:
    error = app.load(graph_path)
    if error is not None:
        app.emit(error)
    return GraphService(app.graphs, app.settings)


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph info
  relgraph info -g wn30.bin
  relgraph --json info"""
)
@_graph_option
@click.pass_obj
def info(app: AppContext, graph_path: str | None) -> None:
    """Show vertex/edge counts, relation types, sources, and comments."""
    app.emit(_service(app, graph_path).info())


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph dump -g wn30.bin
  relgraph --json dump > graph.json"""
)
@_graph_option
@click.pass_obj
def dump(app: AppContext, graph_path: str | None) -> None:
    """Print every vertex and edge of the graph."""
    app.emit(_service(app, graph_path).dump())


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph reach 02084071-n
  relgraph reach 02084071-n --top 50"""
)
@click.argument("source")
@click.option("--top", default=None, type=click.IntRange(min=0), help="Max vertices listed.")
@_graph_option
@click.pass_obj
def reach(app: AppContext, source: str, top: int | None, graph_path: str | None) -> None:
    """List vertices reachable from SOURCE (breadth-first)."""
    app.emit(_service(app, graph_path).reach(source, top=top))


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph path 02084071-n 00015388-n
  relgraph --json path 02084071-n 00015388-n"""
)
@click.argument("source")
@click.argument("target")
@_graph_option
@click.pass_obj
def path(app: AppContext, source: str, target: str, graph_path: str | None) -> None:
    """Cheapest weighted path from SOURCE to TARGET."""
    app.emit(_service(app, graph_path).path(source, target))


@click.command(
    cls=RgCommand,
    examples="""\
  relgraph rank 02084071-n 02121620-n
  relgraph rank bank money --top 5
  relgraph rank 02084071-n --weighted"""
)
@click.argument("seeds", nargs=-1, required=True)
@click.option("--top", default=20, type=click.IntRange(min=0), help="Max results.")
@click.option(
    "--weighted/--unweighted",
    default=None,
    help="Follow edges in proportion to weight (default: [rank] use_weight).",
)
@_graph_option
@click.pass_obj
def rank(
    app: AppContext,
    seeds: tuple[str, ...],
    top: int,
    weighted: bool | None,
    graph_path: str | None,
) -> None:
    """Rank concepts by personalized PageRank around SEEDS."""
    app.emit(_service(app, graph_path).rank(list(seeds), top=top, use_weight=weighted))
