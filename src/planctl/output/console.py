"""Rich Console factory and theme for planctl output.

Consoles render into a StringIO buffer so formatting stays a pure
``ServiceResult -> str`` step. In non-TTY environments (tests, pipes)
Rich leaves out color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PLAN_THEME = Theme(
    {
        "plan.ok": "bold green",
        "plan.error": "bold red",
        "plan.warning": "bold yellow",
        "plan.op": "bold cyan",
        "plan.key": "dim",
        "plan.id": "bold blue",
        "plan.name": "bold",
        "plan.tag": "magenta",
        "plan.type.area": "bold magenta",
        "plan.type.component": "cyan",
        "plan.type.job": "yellow",
        "plan.type.freeform": "green",
    }
)

_TYPE_STYLES: dict[str, str] = {
    "Area": "plan.type.area",
    "Component": "plan.type.component",
    "Job": "plan.type.job",
    "Freeform": "plan.type.freeform",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (for stable test output).
    """
    return Console(
        file=StringIO(),
        theme=PLAN_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(node_type: str) -> str:
    """Rich style name for a node type; empty for unknown types."""
    return _TYPE_STYLES.get(node_type, "")
