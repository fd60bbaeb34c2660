"""Tests for the root command and its global flags."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from planctl import __version__
from planctl.cli import cli


class TestRoot:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_without_subcommand(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, [])
        assert result.exit_code == 0
        for group in ("project", "tree", "task", "session", "tag"):
            assert group in result.stdout

    def test_missing_config(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["-c", "nope.toml", "project", "list"])
        assert result.exit_code == 1
        assert "Config file not found" in result.stderr


class TestGlobalFlags:
    def test_project_flag_overrides_default(self, cli_runner: CliRunner, cli_env: Path) -> None:
        cli_runner.invoke(cli, ["-p", "other", "tree", "add", "Area", "Ops"])
        assert (cli_env / "other.json").exists()
        assert not (cli_env / "demo.json").exists()

    def test_config_file_selects_project(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        storage = tmp_path / "plans"
        config = tmp_path / "team.toml"
        config.write_text(
            f'[storage]\ndirectory = "{storage.as_posix()}"\n[project]\ndefault = "team"\n',
            encoding="utf-8",
        )
        result = cli_runner.invoke(cli, ["-c", str(config), "tree", "add", "Area", "Ops"])
        assert result.exit_code == 0, result.output
        assert (storage / "team.json").exists()

    def test_json_load_warning_on_stderr(self, cli_runner: CliRunner, cli_env: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "tree", "add", "Area", "Ops"])
        payload = json.loads(result.stdout)
        assert payload["data"]["id"] == "1"
        assert "WARNING: Created new project" in result.stderr

    def test_quiet(self, cli_runner: CliRunner, cli_env: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "tree", "add", "Area", "Ops"])
        assert result.stdout == "1\n"

    def test_log_json_keeps_stdout_clean(self, cli_runner: CliRunner, cli_env: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "--log-json", "-v", "project", "list"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["ok"] is True
