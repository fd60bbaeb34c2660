"""TagService — the project tag list and per-task tags."""

from __future__ import annotations

from collections.abc import Callable

from planctl.domain.errors import DomainError
from planctl.domain.ids import sorted_ids
from planctl.domain.models import Task
from planctl.services._helpers import task_summary
from planctl.services.base import BaseService
from planctl.services.result import ServiceResult


class TagService(BaseService):
    """Tag bookkeeping. Tagging a task also registers the tag on the project."""

    def _matches(self, predicate: Callable[[Task], bool]) -> list[dict[str, object]]:
        task_list = self.project.task_list
        return [
            task_summary(task_list[key]) for key in sorted_ids(task_list) if predicate(task_list[key])
        ]

    def add_tag(self, tag: str) -> ServiceResult:
        op = "add_tag"
        if tag in self.project.tags:
            return self._ok(op, {"tag": tag, "added": False})
        self.project.tags.append(tag)
        return self._commit(op, {"tag": tag, "added": True})

    def remove_tag(self, tag: str) -> ServiceResult:
        """Drop *tag* from the project and from every task carrying it."""
        op = "remove_tag"
        if tag not in self.project.tags:
            return self._fail(op, DomainError.not_found(f"Tag not found: {tag}", tag=tag))
        self.project.tags.remove(tag)
        affected = []
        for task_id in sorted_ids(self.project.task_list):
            task = self.project.task_list[task_id]
            if tag in task.tags:
                task.tags.remove(tag)
                affected.append(task_id)
        return self._commit(op, {"tag": tag, "tasks": affected})

    def tag_task(self, task_id: str, tag: str) -> ServiceResult:
        op = "tag_task"
        task = self.project.task_list.get(task_id)
        if task is None:
            return self._fail(op, DomainError.not_found(f"Task not found: {task_id}", id=task_id))
        if tag not in task.tags:
            task.tags.append(tag)
        self.project.register_tags([tag])
        return self._commit(op, {"id": task_id, "tags": list(task.tags)})

    def untag_task(self, task_id: str, tag: str) -> ServiceResult:
        op = "untag_task"
        task = self.project.task_list.get(task_id)
        if task is None:
            return self._fail(op, DomainError.not_found(f"Task not found: {task_id}", id=task_id))
        if tag not in task.tags:
            return self._fail(
                op, DomainError.not_found(f"Tag not found on task: {tag}", id=task_id, tag=tag)
            )
        task.tags.remove(tag)
        return self._commit(op, {"id": task_id, "tags": list(task.tags)})

    def list_tags(self) -> ServiceResult:
        counts = {tag: 0 for tag in self.project.tags}
        for task in self.project.task_list.values():
            for tag in task.tags:
                counts[tag] = counts.get(tag, 0) + 1
        rows = [{"tag": tag, "tasks": count} for tag, count in counts.items()]
        return self._ok("list_tags", {"tags": rows, "count": len(rows)})

    def search_by_tag(self, tag: str) -> ServiceResult:
        items = self._matches(lambda task: tag in task.tags)
        return self._ok("search_by_tag", {"tags": [tag], "items": items, "count": len(items)})

    def search_by_tags(self, tags: list[str], match_all: bool = False) -> ServiceResult:
        """Tasks carrying all (*match_all*) or any of *tags*."""

        def wanted(task: Task) -> bool:
            hits = [tag in task.tags for tag in tags]
            return all(hits) if match_all else any(hits)

        items = self._matches(wanted) if tags else []
        return self._ok(
            "search_by_tags",
            {"tags": list(tags), "match_all": match_all, "items": items, "count": len(items)},
        )
