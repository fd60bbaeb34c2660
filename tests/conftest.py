"""Shared pytest fixtures and test helpers for planctl tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from planctl.domain.models import Project
from planctl.domain.tree import PlanTree
from planctl.infrastructure.storage import ProjectStore


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory with no PLANCTL_* variables.

    Keeps a developer's own ``planctl.toml`` and environment out of the
    results.
    """
    for key in list(os.environ):
        if key.startswith("PLANCTL_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    return tmp_path / "projects"


@pytest.fixture
def store(storage_dir: Path) -> ProjectStore:
    return ProjectStore(storage_dir)


@pytest.fixture
def project() -> Project:
    """An unsaved project named ``demo``."""
    return Project.new("demo")


@pytest.fixture
def planned_project(project: Project) -> Project:
    """``demo`` with a small tree::

        1 Area: Platform
          1.1 Component: API
            1.1.1 Job: Write handlers
            1.1.2 Job: Add auth
        2 Area: Docs
        3 Freeform: Ideas
    """
    tree = PlanTree.of(project)
    tree.add_node(None, "Area", "Platform")
    tree.add_node("1", "Component", "API")
    tree.add_node("1.1", "Job", "Write handlers")
    tree.add_node("1.1", "Job", "Add auth")
    tree.add_node(None, "Area", "Docs")
    tree.add_node(None, "Freeform", "Ideas")
    return project


@pytest.fixture
def cli_env(storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at *storage_dir* with ``demo`` as the default project."""
    monkeypatch.setenv("PLANCTL_STORAGE__DIRECTORY", str(storage_dir))
    monkeypatch.setenv("PLANCTL_PROJECT__DEFAULT", "demo")
    return storage_dir


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def names(project: Project) -> dict[str, str]:
    """``task id -> task name`` for every task in *project*."""
    return {key: task.name for key, task in project.task_list.items()}


def all_ids(project: Project) -> list[str]:
    """Every node ID in pre-order."""
    tree = PlanTree.of(project)
    ids: list[str] = []
    for key in sorted(project.structure, key=lambda k: [int(p) for p in k.split(".")]):
        ids.extend(tree.subtree_ids(key, project.structure[key]))
    return ids
