"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  : CLI flags passed by Click
  2. Env vars     : ``PLANCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    : ``planctl.toml`` found by walk-up or ``PLANCTL_CONFIG``
  4. Code defaults: baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from planctl.config.discovery import find_config
from planctl.config.models import (
    DocumentConfig,
    ProjectConfig,
    SessionConfig,
    StorageConfig,
    TreeConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings read from a ``planctl.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = tomllib.loads(toml_path.read_text(encoding="utf-8"))
            except tomllib.TOMLDecodeError as exc:
                raise click.ClickException(f"Invalid TOML in {toml_path}: {exc}") from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# The TOML path has to reach settings_customise_sources, which pydantic
# calls as a classmethod during construction.
_tls = threading.local()


class PlanSettings(BaseSettings):
    """Everything the CLI needs, frozen after construction.

    Attributes:
        config_path: The TOML file in effect, or None.
        active_project: Project named by ``--project``. :attr:`project_name`
            falls back to ``[project] default``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PLANCTL_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    active_project: str | None = None

    # --- TOML sections ---
    storage: StorageConfig = Field(default_factory=StorageConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    documents: DocumentConfig = Field(default_factory=DocumentConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    @property
    def project_name(self) -> str | None:
        return self.active_project or self.project.default

    @property
    def storage_dir(self) -> Path:
        return self.storage.resolved_directory

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML source between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(cls, *, config_path: str | None = None, **cli_flags: Any) -> PlanSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* must exist; otherwise the TOML file is
        discovered from the working directory.
        """
        if config_path:
            toml_path: Path | None = Path(config_path).expanduser()
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config()

        flags = {key: value for key, value in cli_flags.items() if value is not None}
        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **flags)
        finally:
            _tls.toml_path = None
