"""Subcommand modules for planctl.

:func:`register_commands` imports each group lazily so ``planctl --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the project, tree, task, session, and tag groups to *cli*."""
    from planctl.commands.project import project
    from planctl.commands.session import session
    from planctl.commands.tag import tag
    from planctl.commands.task import task
    from planctl.commands.tree import tree

    cli.add_command(project)
    cli.add_command(tree)
    cli.add_command(task)
    cli.add_command(session)
    cli.add_command(tag)
