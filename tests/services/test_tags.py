"""Tests for TagService."""

from __future__ import annotations

import pytest

from planctl.domain.models import Project
from planctl.infrastructure.storage import ProjectStore
from planctl.services.tags import TagService


@pytest.fixture
def service(store: ProjectStore, planned_project: Project) -> TagService:
    service = TagService(store, planned_project)
    service.tag_task("1.1.1", "backend")
    service.tag_task("1.1.2", "backend")
    service.tag_task("1.1.2", "security")
    return service


class TestProjectTags:
    def test_add(self, service: TagService) -> None:
        result = service.add_tag("docs")
        assert result.data == {"tag": "docs", "added": True}
        assert service.add_tag("docs").data["added"] is False
        assert service.project.tags == ["backend", "security", "docs"]

    def test_remove_strips_tasks(self, service: TagService) -> None:
        result = service.remove_tag("backend")
        assert result.data == {"tag": "backend", "tasks": ["1.1.1", "1.1.2"]}
        assert service.project.task_list["1.1.2"].tags == ["security"]
        assert "backend" not in service.project.tags

    def test_remove_unknown(self, service: TagService) -> None:
        result = service.remove_tag("nope")
        assert result.error is not None
        assert result.error.message == "Tag not found: nope"

    def test_list_counts(self, service: TagService) -> None:
        service.add_tag("docs")
        result = service.list_tags()
        assert result.data["tags"] == [
            {"tag": "backend", "tasks": 2},
            {"tag": "security", "tasks": 1},
            {"tag": "docs", "tasks": 0},
        ]


class TestTaskTags:
    def test_tag_registers_and_saves(self, store: ProjectStore, service: TagService) -> None:
        project, _ = store.load("demo")
        assert project is not None
        assert project.task_list["1.1.2"].tags == ["backend", "security"]
        assert project.tags == ["backend", "security"]

    def test_tag_twice(self, service: TagService) -> None:
        result = service.tag_task("1.1.1", "backend")
        assert result.data["tags"] == ["backend"]

    def test_tag_missing_task(self, service: TagService) -> None:
        result = service.tag_task("77", "x")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_untag(self, service: TagService) -> None:
        result = service.untag_task("1.1.2", "backend")
        assert result.data == {"id": "1.1.2", "tags": ["security"]}
        assert "backend" in service.project.tags

    def test_untag_absent(self, service: TagService) -> None:
        result = service.untag_task("1", "backend")
        assert result.error is not None
        assert result.error.message == "Tag not found on task: backend"


class TestSearch:
    def test_single_tag(self, service: TagService) -> None:
        result = service.search_by_tag("security")
        assert result.data["items"] == [
            {"id": "1.1.2", "name": "Add auth", "tags": ["backend", "security"]}
        ]

    def test_any(self, service: TagService) -> None:
        result = service.search_by_tags(["security", "backend"])
        assert [item["id"] for item in result.data["items"]] == ["1.1.1", "1.1.2"]

    def test_all(self, service: TagService) -> None:
        result = service.search_by_tags(["security", "backend"], match_all=True)
        assert result.data["count"] == 1

    def test_no_tags(self, service: TagService) -> None:
        assert service.search_by_tags([]).data["items"] == []
