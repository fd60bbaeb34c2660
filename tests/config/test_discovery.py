"""Tests for planctl.toml discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from planctl.config.discovery import CONFIG_FILENAME, find_config, load_config


class TestFindConfig:
    def test_walks_up(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == config.resolve()

    def test_none_found(self, tmp_path: Path) -> None:
        nested = tmp_path / "empty"
        nested.mkdir()
        found = find_config(nested)
        assert found is None or not found.is_relative_to(nested)

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        override = tmp_path / "custom.toml"
        override.write_text("", encoding="utf-8")
        monkeypatch.setenv("PLANCTL_CONFIG", str(override))
        assert find_config(tmp_path) == override

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("", encoding="utf-8")
        monkeypatch.setenv("PLANCTL_CONFIG", str(tmp_path / "gone.toml"))
        assert find_config(tmp_path) is None


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PLANCTL_CONFIG", str(tmp_path / "gone.toml"))
        config = load_config(cwd=tmp_path)
        assert config.documents.track_code_fences is True
        assert config.project.default is None

    def test_sparse_override(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[documents]\ntrack_code_fences = false\n", encoding="utf-8")
        config = load_config(path)
        assert config.documents.track_code_fences is False
        assert config.session.planned_duration_minutes == 0

    def test_validation_error(self, tmp_path: Path) -> None:
        path = tmp_path / CONFIG_FILENAME
        path.write_text("[session]\nplanned_duration_minutes = -5\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)
