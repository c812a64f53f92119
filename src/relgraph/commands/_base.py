"""Click classes shared by every relgraph command.

Commands take an ``examples`` string; ``--examples`` prints it and exits
before any argument is validated, so ``relgraph rank --examples`` works
without seeds or a snapshot.
"""

from __future__ import annotations

from typing import Any

import click


class RgCommand(click.Command):
    """Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class RgGroup(click.Group):
    """Root group; commands declared on it default to :class:`RgCommand`."""

    command_class = RgCommand
