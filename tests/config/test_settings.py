"""Tests for PlanSettings — CLI flags, env vars, and TOML in one object."""

from __future__ import annotations

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from planctl.config.models import DEFAULT_STORAGE_DIR
from planctl.config.settings import PlanSettings


class TestDefaults:
    def test_all_defaults(self) -> None:
        settings = PlanSettings.from_cli()
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.project_name is None
        assert settings.storage_dir == DEFAULT_STORAGE_DIR.expanduser()
        assert settings.tree.show_completed_jobs is False
        assert settings.documents.track_code_fences is True

    def test_frozen(self) -> None:
        settings = PlanSettings.from_cli()
        with pytest.raises(ValidationError):
            settings.quiet = True  # type: ignore[misc]

    def test_none_flags_ignored(self) -> None:
        settings = PlanSettings.from_cli(json_output=None, active_project=None)
        assert settings.json_output is False


class TestTomlSource:
    def test_discovered_from_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "planctl.toml").write_text(
            '[project]\ndefault = "website"\n[tree]\nshow_completed_jobs = true\n',
            encoding="utf-8",
        )
        settings = PlanSettings.from_cli()
        assert settings.config_path == (tmp_path / "planctl.toml").resolve()
        assert settings.project_name == "website"
        assert settings.tree.show_completed_jobs is True
        assert settings.tree.show_incomplete_jobs is True

    def test_explicit_path(self, tmp_path: Path) -> None:
        config = tmp_path / "other.toml"
        config.write_text('[storage]\ndirectory = "/srv/plans"\n', encoding="utf-8")
        settings = PlanSettings.from_cli(config_path=str(config))
        assert settings.storage_dir == Path("/srv/plans")

    def test_explicit_missing(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            PlanSettings.from_cli(config_path=str(tmp_path / "nope.toml"))

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "planctl.toml").write_text("[project\n", encoding="utf-8")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            PlanSettings.from_cli()

    def test_session_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "planctl.toml").write_text(
            '[session]\ndefault_type = "deep-work"\nplanned_duration_minutes = 50\n',
            encoding="utf-8",
        )
        settings = PlanSettings.from_cli()
        assert settings.session.default_type == "deep-work"
        assert settings.session.planned_duration_minutes == 50


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "planctl.toml").write_text('[project]\ndefault = "toml"\n', encoding="utf-8")
        monkeypatch.setenv("PLANCTL_PROJECT__DEFAULT", "env")
        assert PlanSettings.from_cli().project_name == "env"

    def test_cli_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANCTL_PROJECT__DEFAULT", "env")
        monkeypatch.setenv("PLANCTL_QUIET", "true")
        settings = PlanSettings.from_cli(active_project="cli", quiet=False)
        assert settings.project_name == "cli"
        assert settings.quiet is False

    def test_env_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANCTL_JSON_OUTPUT", "1")
        assert PlanSettings.from_cli().json_output is True
