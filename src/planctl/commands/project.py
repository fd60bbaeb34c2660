"""Command group: stored projects (list, create, delete, show)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from planctl.commands._base import PlanGroup
from planctl.services.project import ProjectService

if TYPE_CHECKING:
    from planctl.commands._context import AppContext

_PROJECT_EXAMPLES = """\
  planctl project list
  planctl project create website-relaunch
  planctl -p website-relaunch project show
  planctl project delete website-relaunch --yes"""


@click.group(cls=PlanGroup, examples=_PROJECT_EXAMPLES)
@click.pass_obj
def project(app: AppContext) -> None:
    """Create, inspect, and delete projects."""


@project.command("list", examples="  planctl project list\n  planctl --json project list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List stored projects."""
    app.emit(ProjectService(app.store).list_projects())


@project.command(
    examples="""\
  planctl project create website-relaunch
  planctl project create website-relaunch --id WR"""
)
@click.argument("name")
@click.option("--id", "project_id", default=None, help="Project ID (defaults to the name).")
@click.pass_obj
def create(app: AppContext, name: str, project_id: str | None) -> None:
    """Create an empty project."""
    app.emit(ProjectService(app.store).create_project(name, project_id))


@project.command(examples="  planctl project delete website-relaunch --yes")
@click.argument("name")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def delete(app: AppContext, name: str, yes: bool) -> None:
    """Delete a project file."""
    if not yes:
        click.confirm(f"Delete project {name}?", abort=True)
    app.emit(ProjectService(app.store).delete_project(name))


@project.command(
    examples="""\
  planctl project show website-relaunch
  planctl -p website-relaunch project show"""
)
@click.argument("name", required=False)
@click.pass_obj
def show(app: AppContext, name: str | None) -> None:
    """Show a project summary and its tree (defaults to the active project)."""
    name = name or app.settings.project_name
    if not name:
        raise click.UsageError("Name a project or pass --project NAME.")
    app.emit(ProjectService(app.store).show_project(name))
