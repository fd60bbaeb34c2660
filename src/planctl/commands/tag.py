"""Command group: project and task tags."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from planctl.commands._base import PlanGroup
from planctl.services.tags import TagService

if TYPE_CHECKING:
    from planctl.commands._context import AppContext

_TAG_EXAMPLES = """\
  planctl tag add backend
  planctl tag attach 1.2.1 backend
  planctl tag list"""


def _service(app: AppContext) -> TagService:
    return TagService(app.store, app.load_project())


@click.group(cls=PlanGroup, examples=_TAG_EXAMPLES)
@click.pass_obj
def tag(app: AppContext) -> None:
    """Manage tags."""


@tag.command(examples="  planctl tag add backend")
@click.argument("name")
@click.pass_obj
def add(app: AppContext, name: str) -> None:
    """Register a tag on the project."""
    app.emit(_service(app).add_tag(name))


@tag.command(examples="  planctl tag remove backend")
@click.argument("name")
@click.pass_obj
def remove(app: AppContext, name: str) -> None:
    """Remove a tag from the project and every task."""
    app.emit(_service(app).remove_tag(name))


@tag.command(examples="  planctl tag attach 1.2.1 backend")
@click.argument("task_id")
@click.argument("name")
@click.pass_obj
def attach(app: AppContext, task_id: str, name: str) -> None:
    """Tag a task."""
    app.emit(_service(app).tag_task(task_id, name))


@tag.command(examples="  planctl tag detach 1.2.1 backend")
@click.argument("task_id")
@click.argument("name")
@click.pass_obj
def detach(app: AppContext, task_id: str, name: str) -> None:
    """Untag a task."""
    app.emit(_service(app).untag_task(task_id, name))


@tag.command("list", examples="  planctl tag list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List project tags with task counts."""
    app.emit(_service(app).list_tags())
