"""Tests for ProjectService."""

from __future__ import annotations

import pytest

from planctl.domain.models import Project
from planctl.infrastructure.storage import ProjectStore
from planctl.services.project import ProjectService


class TestCreateProject:
    def test_create(self, store: ProjectStore) -> None:
        result = ProjectService(store).create_project("demo")
        assert result.ok
        assert result.op == "create_project"
        assert result.data["name"] == "demo"
        assert result.data["nodes"] == 0
        assert result.meta == {"project": "demo"}
        assert store.exists("demo")

    def test_custom_id(self, store: ProjectStore) -> None:
        result = ProjectService(store).create_project("demo", "D-1")
        assert result.data["id"] == "D-1"

    def test_duplicate(self, store: ProjectStore) -> None:
        ProjectService(store).create_project("demo")
        result = ProjectService(store).create_project("demo")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"
        assert result.error.message == "Project already exists: demo"

    def test_invalid_name(self, store: ProjectStore, caplog: pytest.LogCaptureFixture) -> None:
        service = ProjectService(store)
        result = service.create_project("../evil")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"
        assert result.data == {}
        assert "not saved" not in caplog.text


class TestLoadProject:
    def test_load_saved(self, store: ProjectStore, planned_project: Project) -> None:
        store.save(planned_project)
        service = ProjectService(store)
        result = service.load_project("demo")
        assert result.ok
        assert result.warnings == []
        assert result.data["nodes"] == 6
        assert result.data["tasks"] == 6
        assert service.project == planned_project

    def test_missing_loads_with_warning(self, store: ProjectStore) -> None:
        result = ProjectService(store).load_project("fresh")
        assert result.ok
        assert result.warnings == ["Created new project (file did not exist)"]

    def test_show_includes_tree(self, store: ProjectStore, planned_project: Project) -> None:
        store.save(planned_project)
        result = ProjectService(store).show_project("demo")
        assert result.op == "show_project"
        assert result.data["tree"].splitlines()[0] == "1 Area: Platform"


class TestListDelete:
    def test_list(self, store: ProjectStore) -> None:
        service = ProjectService(store)
        service.create_project("b")
        service.create_project("a")
        result = ProjectService(store).list_projects()
        assert result.data == {"projects": ["a", "b"], "count": 2}

    def test_delete(self, store: ProjectStore) -> None:
        ProjectService(store).create_project("demo")
        result = ProjectService(store).delete_project("demo")
        assert result.ok
        assert not store.exists("demo")

    def test_delete_missing(self, store: ProjectStore) -> None:
        result = ProjectService(store).delete_project("ghost")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
