"""Subcommand modules for relgraph.

Provides register_commands() which uses deferred imports to keep
``relgraph --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from relgraph.commands.build import add, build
    from relgraph.commands.graph import dump, info, path, rank, reach

    cli.add_command(build)
    cli.add_command(add)
    cli.add_command(info)
    cli.add_command(dump)
    cli.add_command(reach)
    cli.add_command(path)
    cli.add_command(rank)
