"""Command group: the project's node tree."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from planctl.commands._base import PlanGroup
from planctl.domain.filters import JobFilter
from planctl.domain.types import Direction, NodeType
from planctl.services.tree import TreeService

if TYPE_CHECKING:
    from planctl.commands._context import AppContext

_TREE_EXAMPLES = """\
  planctl tree show --completed
  planctl tree add Area "Platform"
  planctl tree add Job "Write migration" --parent 1.2
  planctl tree move 1.2.1 --to 2
  planctl tree up 1.3"""

_NODE_TYPES = [member.value for member in NodeType]


def _service(app: AppContext) -> TreeService:
    return TreeService(app.store, app.load_project())


@click.group(cls=PlanGroup, examples=_TREE_EXAMPLES)
@click.pass_obj
def tree(app: AppContext) -> None:
    """Show and restructure the project tree."""


@tree.command(
    examples="""\
  planctl tree show
  planctl tree show --completed --no-incomplete
  planctl tree show --outline > outline.txt"""
)
@click.option(
    "--completed/--no-completed",
    default=None,
    help="Include completed Jobs (default from [tree] config).",
)
@click.option(
    "--incomplete/--no-incomplete",
    default=None,
    help="Include incomplete Jobs (default from [tree] config).",
)
@click.option("--outline", is_flag=True, help="Print the unfiltered plain-text outline.")
@click.pass_obj
def show(
    app: AppContext,
    completed: bool | None,
    incomplete: bool | None,
    outline: bool,
) -> None:
    """Print the tree."""
    service = _service(app)
    if outline:
        app.emit(service.show_outline())
        return
    config = app.settings.tree
    job_filter = JobFilter(
        show_completed_jobs=config.show_completed_jobs if completed is None else completed,
        show_incomplete_jobs=config.show_incomplete_jobs if incomplete is None else incomplete,
    )
    app.emit(service.display(job_filter))


@tree.command(
    examples="""\
  planctl tree add Area "Platform"
  planctl tree add Job "Write migration" --parent 1.2
  planctl tree add Component --parent 1"""
)
@click.argument("node_type", metavar="TYPE", type=click.Choice(_NODE_TYPES, case_sensitive=False))
@click.argument("name", default="")
@click.option("--parent", default=None, help="Parent node ID (root when omitted).")
@click.pass_obj
def add(app: AppContext, node_type: str, name: str, parent: str | None) -> None:
    """Append a node; a NAME also creates its task."""
    app.emit(_service(app).add_node(parent, node_type, name))


@tree.command(
    examples="""\
  planctl tree show --outline > outline.txt && planctl tree edit outline.txt
  planctl tree show --outline | sed "s/Docs/Guides/" | planctl tree edit"""
)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def edit(app: AppContext, source: IO[str]) -> None:
    """Replace the tree with the outline read from SOURCE (stdin by default)."""
    app.emit(_service(app).apply_outline(source.read()))


@tree.command(examples="  planctl tree remove 1.2")
@click.argument("node_id")
@click.pass_obj
def remove(app: AppContext, node_id: str) -> None:
    """Remove a node, its descendants, and their tasks."""
    app.emit(_service(app).remove_node(node_id))


@tree.command(
    examples="""\
  planctl tree move 1.2.1 --to 2
  planctl tree move 2.1"""
)
@click.argument("node_id")
@click.option("--to", "parent", default=None, help="New parent ID (root when omitted).")
@click.pass_obj
def move(app: AppContext, node_id: str, parent: str | None) -> None:
    """Re-parent a node; it takes the next free number at the destination."""
    app.emit(_service(app).move_node(node_id, parent))


@tree.command(examples="  planctl tree renumber")
@click.pass_obj
def renumber(app: AppContext) -> None:
    """Close numbering gaps at every level."""
    app.emit(_service(app).renumber())


@tree.command(examples="  planctl tree up 1.3")
@click.argument("node_id")
@click.pass_obj
def up(app: AppContext, node_id: str) -> None:
    """Swap a node with its previous sibling."""
    app.emit(_service(app).swap(node_id, Direction.UP))


@tree.command(examples="  planctl tree down 1.1")
@click.argument("node_id")
@click.pass_obj
def down(app: AppContext, node_id: str) -> None:
    """Swap a node with its next sibling."""
    app.emit(_service(app).swap(node_id, Direction.DOWN))


@tree.command(examples="  planctl tree indent 1.2")
@click.argument("node_id")
@click.pass_obj
def indent(app: AppContext, node_id: str) -> None:
    """Make a node the last child of its previous sibling."""
    app.emit(_service(app).indent(node_id))


@tree.command(examples="  planctl tree outdent 1.2.1")
@click.argument("node_id")
@click.pass_obj
def outdent(app: AppContext, node_id: str) -> None:
    """Make a node a sibling of its parent."""
    app.emit(_service(app).outdent(node_id))
