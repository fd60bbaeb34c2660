"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. The project store and the active project are opened
lazily, so ``--help`` and ``--version`` never touch the disk.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from planctl.config.logging import bind_project, configure_logging
from planctl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from planctl.config.settings import PlanSettings
    from planctl.domain.models import Project
    from planctl.infrastructure.storage import ProjectStore
    from planctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: PlanSettings) -> None:
        self.settings = settings
        self._store: ProjectStore | None = None
        self._project: Project | None = None

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        bind_project(settings.project_name)

    @property
    def store(self) -> ProjectStore:
        if self._store is None:
            from planctl.infrastructure.storage import ProjectStore

            self._store = ProjectStore(self.settings.storage_dir)
        return self._store

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def load_project(self) -> Project:
        """The active project, loaded on first use.

        Exits with a usage error when no project is selected and with
        code 1 when the file cannot be read. Recovery warnings go to stderr.
        """
        if self._project is not None:
            return self._project

        name = self.settings.project_name
        if not name:
            raise click.UsageError(
                "No project selected. Pass --project NAME or set [project] default "
                "in planctl.toml."
            )

        from planctl.services.project import ProjectService

        service = ProjectService(self.store)
        result = service.load_project(name)
        if not result.ok:
            self.emit(result)
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
        self._project = service.project
        return self._project

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Outside JSON mode, warnings go to
          stderr so piped output stays clean.
        * Failure: writes to stderr and exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            if output:
                click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
