"""Root CLI group for planctl with global flags and command registration."""

from __future__ import annotations

import click

from planctl import __version__
from planctl.commands import register_commands
from planctl.commands._base import PlanGroup
from planctl.commands._context import AppContext
from planctl.config.settings import PlanSettings


@click.group(cls=PlanGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="planctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("-p", "--project", "project_name", default=None, help="Project to operate on.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    project_name: str | None,
) -> None:
    """planctl — hierarchical project planning from the command line."""
    # Unset flags stay None so env vars and planctl.toml can supply them.
    settings = PlanSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        active_project=project_name,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
