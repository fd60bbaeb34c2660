"""Command group: time-tracking sessions."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from planctl.commands._base import PlanGroup
from planctl.services.session import SessionService

if TYPE_CHECKING:
    from planctl.commands._context import AppContext

_SESSION_EXAMPLES = """\
  planctl session start --type deep-work --planned 90
  planctl session add-task 1.2.1
  planctl session stop
  planctl session show 0 > session.md && planctl session edit 0 session.md"""

_INDEX_HELP = "Session index (the active session when omitted)."


def _service(app: AppContext) -> SessionService:
    return SessionService(app.store, app.load_project())


@click.group(cls=PlanGroup, examples=_SESSION_EXAMPLES)
@click.pass_obj
def session(app: AppContext) -> None:
    """Track work sessions."""


@session.command(
    examples="""\
  planctl session start
  planctl session start --type review --planned 30"""
)
@click.option("--type", "session_type", default=None, help="Session type ([session] default).")
@click.option(
    "--planned",
    type=click.IntRange(min=0),
    default=None,
    help="Planned duration in minutes ([session] default).",
)
@click.pass_obj
def start(app: AppContext, session_type: str | None, planned: int | None) -> None:
    """Open a new session now."""
    defaults = app.settings.session
    app.emit(
        _service(app).start_session(
            session_type=defaults.default_type if session_type is None else session_type,
            planned_duration_minutes=(
                defaults.planned_duration_minutes if planned is None else planned
            ),
        )
    )


@session.command(examples="  planctl session stop\n  planctl session stop 2")
@click.argument("index", type=int, required=False)
@click.pass_obj
def stop(app: AppContext, index: int | None) -> None:
    """Close a session now."""
    app.emit(_service(app).stop_session(index))


@session.command(examples="  planctl session show\n  planctl session show 0")
@click.argument("index", type=int, required=False)
@click.pass_obj
def show(app: AppContext, index: int | None) -> None:
    """Print a session as a Markdown document."""
    app.emit(_service(app).render_document(index))


@session.command(examples="  planctl session edit 0 session.md\n  planctl session edit 0 < s.md")
@click.argument("index", type=int)
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def edit(app: AppContext, index: int, source: IO[str]) -> None:
    """Replace a session with the document read from SOURCE (stdin by default)."""
    text = source.read()
    track = app.settings.documents.track_code_fences
    app.emit(_service(app).apply_document(index, text, track_fences=track))


@session.command("add-task", examples="  planctl session add-task 1.2.1 --index 0")
@click.argument("task_id")
@click.option("--index", type=int, default=None, help=_INDEX_HELP)
@click.pass_obj
def add_task(app: AppContext, task_id: str, index: int | None) -> None:
    """Record work on a task in a session."""
    app.emit(_service(app).add_task(index, task_id))


@session.command(examples="  planctl session active")
@click.pass_obj
def active(app: AppContext) -> None:
    """Show the open session, if any."""
    app.emit(_service(app).get_active_session())


@session.command("list", examples="  planctl session list\n  planctl --json session list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List all sessions."""
    app.emit(_service(app).list_sessions())
