"""Click base classes carrying per-command usage examples.

``--help`` stays short; ``--examples`` prints the example block attached
to a command or group and exits.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def _examples_option(examples: str) -> click.Option:
    """An eager ``--examples`` flag that prints *examples* and exits."""
    text = textwrap.dedent(examples).strip("\n")

    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(text)
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples.",
    )


class PlanCommand(click.Command):
    """Command accepting an ``examples=`` keyword."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class PlanGroup(click.Group):
    """Group accepting an ``examples=`` keyword.

    Subcommands and nested groups default to :class:`PlanCommand` and
    :class:`PlanGroup`, so ``@group.command(examples=...)`` needs no ``cls=``.
    """

    command_class = PlanCommand
    group_class = type

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))
