"""Tests for the ``task`` command group."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from planctl.cli import cli
from planctl.domain.models import Project
from planctl.infrastructure.storage import ProjectStore
from tests.conftest import names


@pytest.fixture
def saved(store: ProjectStore, planned_project: Project) -> ProjectStore:
    store.save(planned_project)
    return store


def _load(store: ProjectStore) -> Project:
    project, _ = store.load("demo")
    assert project is not None
    return project


@pytest.mark.usefixtures("cli_env", "saved")
class TestTaskCommands:
    def test_show_document(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["task", "show", "1.1.1"])
        assert result.exit_code == 0
        assert "Write handlers" in result.stdout
        assert "WARNING" not in result.stderr

    def test_show_data(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "task", "show", "1.1.1", "--data"])
        data = json.loads(result.stdout)["data"]
        assert data["node_type"] == "Job"
        assert data["task"]["name"] == "Write handlers"

    def test_show_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "task", "show", "9"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["message"] == "Task not found: 9"

    def test_edit_round_trip(self, cli_runner: CliRunner, saved: ProjectStore) -> None:
        document = cli_runner.invoke(cli, ["task", "show", "1.1.1"]).stdout
        edited = document.replace("Write handlers", "Write all handlers")
        result = cli_runner.invoke(cli, ["--json", "task", "edit", "1.1.1"], input=edited)
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["data"]["task"]["name"] == "Write all handlers"
        assert _load(saved).task_list["1.1.1"].name == "Write all handlers"

    def test_edit_unchanged_is_stable(self, cli_runner: CliRunner) -> None:
        document = cli_runner.invoke(cli, ["task", "show", "1.1"]).stdout
        cli_runner.invoke(cli, ["task", "edit", "1.1"], input=document)
        assert cli_runner.invoke(cli, ["task", "show", "1.1"]).stdout == document

    def test_edit_from_file(self, cli_runner: CliRunner, saved: ProjectStore) -> None:
        document = cli_runner.invoke(cli, ["task", "show", "3"]).stdout
        with open("ideas.md", "w", encoding="utf-8") as handle:
            handle.write(document.replace("Ideas", "Someday"))
        result = cli_runner.invoke(cli, ["task", "edit", "3", "ideas.md"])
        assert result.exit_code == 0, result.output
        assert _load(saved).task_list["3"].name == "Someday"

    def test_create_with_tags(self, cli_runner: CliRunner, saved: ProjectStore) -> None:
        cli_runner.invoke(cli, ["tree", "add", "Job", "--parent", "1.1"])
        result = cli_runner.invoke(
            cli,
            ["--json", "task", "create", "1.1.3", "Rate limits", "--tag", "backend", "--tag", "q3"],
        )
        assert result.exit_code == 0, result.output
        project = _load(saved)
        assert project.task_list["1.1.3"].tags == ["backend", "q3"]
        assert project.tags == ["backend", "q3"]

    def test_create_duplicate(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "task", "create", "1.1.1", "Again"])
        assert result.exit_code == 1

    def test_delete_keeps_node(self, cli_runner: CliRunner, saved: ProjectStore) -> None:
        cli_runner.invoke(cli, ["task", "delete", "2"])
        project = _load(saved)
        assert "2" not in project.task_list
        assert "2" in project.structure

    def test_link_replaces_with_warning(self, cli_runner: CliRunner, saved: ProjectStore) -> None:
        result = cli_runner.invoke(cli, ["task", "link", "3", "2"])
        assert result.exit_code == 0
        assert "WARNING: Replaced existing task at node 2" in result.stderr
        assert names(_load(saved))["2"] == "Ideas"

    def test_search(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["tag", "attach", "1.1.1", "backend"])
        cli_runner.invoke(cli, ["tag", "attach", "1.1.2", "backend"])
        cli_runner.invoke(cli, ["tag", "attach", "1.1.2", "security"])

        one = json.loads(cli_runner.invoke(cli, ["--json", "task", "search", "backend"]).stdout)
        assert one["op"] == "search_by_tag"
        assert [item["id"] for item in one["data"]["items"]] == ["1.1.1", "1.1.2"]

        both = cli_runner.invoke(cli, ["--json", "task", "search", "backend", "security", "--all"])
        data = json.loads(both.stdout)["data"]
        assert [item["id"] for item in data["items"]] == ["1.1.2"]

    def test_search_quiet(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["tag", "attach", "2", "docs"])
        result = cli_runner.invoke(cli, ["-q", "task", "search", "docs"])
        assert result.stdout == "2\n"
