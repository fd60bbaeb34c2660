"""Command group: tasks and their Markdown documents."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from planctl.commands._base import PlanGroup
from planctl.services.tags import TagService
from planctl.services.task import TaskService

if TYPE_CHECKING:
    from planctl.commands._context import AppContext

_TASK_EXAMPLES = """\
  planctl task show 1.2.1
  planctl task show 1.2.1 > job.md && $EDITOR job.md && planctl task edit 1.2.1 job.md
  planctl task create 1.3 "Reporting" --tag backend
  planctl task search backend urgent --all"""


def _service(app: AppContext) -> TaskService:
    return TaskService(app.store, app.load_project())


@click.group(cls=PlanGroup, examples=_TASK_EXAMPLES)
@click.pass_obj
def task(app: AppContext) -> None:
    """Create, edit, and search tasks."""


@task.command(
    examples="""\
  planctl task show 1.2.1
  planctl task show 1.2.1 --data
  planctl --json task show 1.2.1"""
)
@click.argument("task_id")
@click.option("--data", is_flag=True, help="Show the stored fields instead of the document.")
@click.pass_obj
def show(app: AppContext, task_id: str, data: bool) -> None:
    """Print a task as a Markdown document."""
    service = _service(app)
    app.emit(service.get_task(task_id) if data else service.render_document(task_id))


@task.command(
    examples="""\
  planctl task create 1.3 "Reporting"
  planctl task create 1.3 "Reporting" --tag backend --tag q3 --notes 'Owner: Sam'"""
)
@click.argument("task_id")
@click.argument("name")
@click.option("--tag", "tags", multiple=True, help="Tag to attach (repeatable).")
@click.option("--notes", default="", help="Initial notes.")
@click.pass_obj
def create(app: AppContext, task_id: str, name: str, tags: tuple[str, ...], notes: str) -> None:
    """Create the task for an existing node (or an orphan task)."""
    app.emit(_service(app).create_task(task_id, name, tags=list(tags), notes=notes))


@task.command(
    examples="""\
  planctl task edit 1.2.1 job.md
  planctl task show 1.2.1 | sed 's/\\[ \\]/[x]/' | planctl task edit 1.2.1"""
)
@click.argument("task_id")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def edit(app: AppContext, task_id: str, source: IO[str]) -> None:
    """Replace a task with the document read from SOURCE (stdin by default)."""
    text = source.read()
    track = app.settings.documents.track_code_fences
    app.emit(_service(app).apply_document(task_id, text, track_fences=track))


@task.command(examples="  planctl task delete 1.2.1")
@click.argument("task_id")
@click.pass_obj
def delete(app: AppContext, task_id: str) -> None:
    """Delete a task; its node stays in the tree."""
    app.emit(_service(app).delete_task(task_id))


@task.command(examples="  planctl task link 1.4 2.1")
@click.argument("task_id")
@click.argument("node_id")
@click.pass_obj
def link(app: AppContext, task_id: str, node_id: str) -> None:
    """Attach a task to another node, replacing any task already there."""
    app.emit(_service(app).link_task(task_id, node_id))


@task.command(
    examples="""\
  planctl task search backend
  planctl task search backend urgent --all"""
)
@click.argument("tags", nargs=-1, required=True)
@click.option("--all", "match_all", is_flag=True, help="Require every tag instead of any.")
@click.pass_obj
def search(app: AppContext, tags: tuple[str, ...], match_all: bool) -> None:
    """Find tasks by tag."""
    service = TagService(app.store, app.load_project())
    if len(tags) == 1:
        app.emit(service.search_by_tag(tags[0]))
    else:
        app.emit(service.search_by_tags(list(tags), match_all=match_all))
