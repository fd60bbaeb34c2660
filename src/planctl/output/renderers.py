"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer. Any result
carrying a ``document`` is printed verbatim so it can be piped back
into ``edit`` commands.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from planctl.output.console import create_console, get_output, style_for_type

if TYPE_CHECKING:
    from rich.console import Console

    from planctl.services.result import ServiceResult

TREE_LINE_RE = re.compile(r"^(\s*)(\S+) (\w+): (.*)$")


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    if result.ok and isinstance(result.data.get("document"), str):
        return result.data["document"].rstrip("\n")

    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: IDs for listings, else a status line."""
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {message}"
    if isinstance(result.data.get("document"), str):
        return result.data["document"].rstrip("\n")
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id", "")) for item in items if isinstance(item, dict))
    if "new_id" in result.data:
        return str(result.data["new_id"])
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="plan.ok"), Text(f"  {result.op}", style="plan.op"))


def _field(console: Console, key: str, value: Any) -> None:
    label = Text(f"  {key}: ", style="plan.key")
    if isinstance(value, (dict, list)):
        shown = Text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    elif key in ("id", "new_id", "node_id", "index"):
        shown = Text(str(value), style="plan.id")
    elif key == "name":
        shown = Text(str(value), style="plan.name")
    else:
        shown = Text(str(value))
    console.print(label, shown, sep="")


def tree_line(line: str) -> Text:
    """Style one ``<indent><id> <Type>: <name>`` line."""
    match = TREE_LINE_RE.match(line)
    if match is None:
        return Text(line)
    indent, node_id, node_type, name = match.groups()
    text = Text(indent)
    text.append(node_id, style="plan.id")
    text.append(" ")
    text.append(node_type, style=style_for_type(node_type))
    text.append(": ")
    text.append(name)
    return text


def _print_tree(console: Console, tree: str) -> None:
    for line in tree.splitlines():
        console.print(tree_line(line), soft_wrap=True)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    message = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="plan.error"),
        Text(f"  {result.op}", style="plan.op"),
        Text(" — "),
        Text(message),
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(f"    {key}: {value}", markup=False)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose and result.meta:
        for key, value in result.meta.items():
            console.print(Text(f"  meta.{key}: {value}", style="dim"))


def _render_tree(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    tree = result.data.get("tree", "")
    if not tree:
        console.print(Text("(empty tree)", style="dim"))
        return
    _print_tree(console, tree)


def _render_project(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    data = result.data
    console.print(Text(str(data.get("name", "")), style="plan.name"))
    for key in ("id", "nodes", "tasks", "sessions"):
        _field(console, key, data.get(key, ""))
    tags = data.get("tags") or []
    if tags:
        label = Text("  tags: ", style="plan.key")
        console.print(label, Text(", ".join(tags), style="plan.tag"), sep="")
    tree = data.get("tree", "")
    if tree:
        console.print()
        _print_tree(console, tree)


def _render_projects(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    names = result.data.get("projects", [])
    for name in names:
        console.print(Text(name, style="plan.name"))
    console.print(f"\n{len(names)} projects")


def _render_items(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="plan.id", no_wrap=True)
    table.add_column("Name", style="plan.name")
    table.add_column("Tags", style="plan.tag")
    for item in items:
        tags = ", ".join(item.get("tags", []))
        table.add_row(str(item.get("id", "")), str(item.get("name", "")), tags)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} tasks")


def _render_sessions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    rows = result.data.get("sessions", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", style="plan.id", justify="right")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Type")
    table.add_column("Tasks")
    for row in rows:
        end = row.get("end") or Text("open", style="plan.warning")
        table.add_row(
            str(row.get("index", "")),
            str(row.get("start", "")),
            end,
            str(row.get("type", "")),
            ", ".join(row.get("tasks", [])),
        )
    console.print(table)
    console.print(f"\n{len(rows)} sessions")


def _render_tags(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    rows = result.data.get("tags", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Tag", style="plan.tag")
    table.add_column("Tasks", justify="right")
    for row in rows:
        table.add_row(str(row.get("tag", "")), str(row.get("tasks", 0)))
    console.print(table)


def _render_active(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    if result.data.get("index") is None:
        console.print(Text("No active session", style="dim"))
        return
    session = result.data.get("session") or {}
    _field(console, "index", result.data["index"])
    _field(console, "start", session.get("start_timestamp", ""))
    if session.get("tasks"):
        _field(console, "tasks", session["tasks"])


_Renderer = Callable[..., None]

_OP_RENDERERS: dict[str, _Renderer] = {
    "display": _render_tree,
    "show_project": _render_project,
    "list_projects": _render_projects,
    "search_by_tag": _render_items,
    "search_by_tags": _render_items,
    "list_sessions": _render_sessions,
    "list_tags": _render_tags,
    "get_active_session": _render_active,
}
