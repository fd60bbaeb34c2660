"""Rich/JSON output helpers.

The CLI renders a ServiceResult for humans (Rich text, tables, styled
tree lines) or machines (``--json``). This module picks the mode.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

from planctl.output.renderers import render_quiet, render_result

if TYPE_CHECKING:
    from planctl.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output mode flags, taken from the global CLI options."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    JSON mode dumps the whole result, warnings included. Human mode
    prints documents verbatim and everything else through Rich.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)
