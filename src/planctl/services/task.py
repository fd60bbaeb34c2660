"""TaskService — task records and their Markdown documents.

A task is keyed by the ID of the node it describes. Tasks whose key
matches no node (orphans) are kept and can be re-attached with
:meth:`TaskService.link_task`.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from planctl.domain.errors import DomainError
from planctl.domain.models import Estimation, Task, empty_details
from planctl.domain.tree import PlanTree
from planctl.domain.types import NodeType
from planctl.formats.task import task_to_text, text_to_task
from planctl.services._helpers import task_payload
from planctl.services.base import BaseService
from planctl.services.result import ServiceResult

UPDATABLE_FIELDS = frozenset({"name", "details", "estimation", "notes", "tags", "custom"})


class TaskService(BaseService):
    """Create, edit, and render tasks of a loaded project."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _node_type(self, node_id: str) -> NodeType | None:
        location, _ = PlanTree.of(self.project).find_node(node_id)
        return location.node.type if location is not None else None

    def _document_type(self, task_id: str) -> NodeType:
        """Node type governing *task_id*'s document; orphans use their details."""
        node_type = self._node_type(task_id)
        if node_type is not None:
            return node_type
        task = self.project.task_list.get(task_id)
        return NodeType(task.details.kind) if task is not None else NodeType.FREEFORM

    @staticmethod
    def _missing(task_id: str) -> DomainError:
        return DomainError.not_found(f"Task not found: {task_id}", id=task_id)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_task(
        self,
        task_id: str,
        name: str,
        *,
        details: Any = None,
        estimation: Any = None,
        notes: str = "",
        tags: list[str] | None = None,
        custom: dict[str, str] | None = None,
    ) -> ServiceResult:
        """Create a task keyed *task_id*. Details default to the node's variant."""
        op = "create_task"
        if task_id in self.project.task_list:
            return self._fail(op, DomainError.invalid(f"Task already exists: {task_id}", id=task_id))

        node_type = self._node_type(task_id) or NodeType.FREEFORM
        if details is None:
            details = empty_details(node_type)
        elif isinstance(details, dict) and "kind" not in details:
            details = {**details, "kind": node_type.value}
        if estimation is None and node_type is NodeType.JOB:
            estimation = Estimation()
        try:
            task = Task.model_validate(
                {
                    "id": task_id,
                    "name": name,
                    "details": details,
                    "estimation": estimation,
                    "notes": notes,
                    "tags": tags or [],
                    "custom": custom or {},
                }
            )
        except ValidationError as exc:
            return self._fail(op, DomainError.invalid(f"Invalid task data: {exc}", id=task_id))

        self.project.task_list[task_id] = task
        self.project.register_tags(task.tags)
        return self._commit(op, {"task": task_payload(task)})

    def update_task(self, task_id: str, **fields: Any) -> ServiceResult:
        """Replace the given fields of *task_id*; new tags join the project."""
        op = "update_task"
        task = self.project.task_list.get(task_id)
        if task is None:
            return self._fail(op, self._missing(task_id))
        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            return self._fail(
                op, DomainError.invalid(f"Unknown task field: {', '.join(unknown)}", fields=unknown)
            )

        merged = task.model_dump()
        details = fields.get("details")
        if isinstance(details, dict) and "kind" not in details:
            fields["details"] = {**details, "kind": task.details.kind}
        merged.update(fields)
        try:
            updated = Task.model_validate(merged)
        except ValidationError as exc:
            return self._fail(op, DomainError.invalid(f"Invalid task data: {exc}", id=task_id))

        self.project.task_list[task_id] = updated
        if "tags" in fields:
            self.project.register_tags(updated.tags)
        return self._commit(op, {"task": task_payload(updated)})

    def delete_task(self, task_id: str) -> ServiceResult:
        op = "delete_task"
        if self.project.task_list.pop(task_id, None) is None:
            return self._fail(op, self._missing(task_id))
        return self._commit(op, {"id": task_id})

    def link_task(self, task_id: str, node_id: str) -> ServiceResult:
        """Re-key task *task_id* to node *node_id*, replacing any task there."""
        op = "link_task"
        task = self.project.task_list.get(task_id)
        if task is None:
            return self._fail(op, self._missing(task_id))
        if self._node_type(node_id) is None:
            return self._fail(op, DomainError.not_found(f"Node not found: {node_id}", id=node_id))

        warnings: list[str] = []
        if task_id != node_id:
            if node_id in self.project.task_list:
                warnings.append(f"Replaced existing task at node {node_id}")
            del self.project.task_list[task_id]
            task.id = node_id
            self.project.task_list[node_id] = task
        return self._commit(op, {"id": task_id, "node_id": node_id}, warnings)

    def get_task(self, task_id: str) -> ServiceResult:
        task = self.project.task_list.get(task_id)
        if task is None:
            return self._fail("get_task", self._missing(task_id))
        node_type = self._node_type(task_id)
        return self._ok(
            "get_task",
            {
                "task": task_payload(task),
                "node_type": node_type.value if node_type is not None else None,
            },
        )

    def render_document(self, task_id: str) -> ServiceResult:
        op = "render_document"
        task = self.project.task_list.get(task_id)
        if task is None:
            return self._fail(op, self._missing(task_id))
        document = task_to_text(task, self._document_type(task_id))
        return self._ok(op, {"id": task_id, "document": document})

    def apply_document(self, task_id: str, text: str, *, track_fences: bool = True) -> ServiceResult:
        """Parse *text* as the document for *task_id* and store the result.

        The key stays *task_id* whatever ID the document's title carries.
        A node without a task gets one.
        """
        op = "apply_document"
        if task_id not in self.project.task_list and self._node_type(task_id) is None:
            return self._fail(op, self._missing(task_id))

        parsed = text_to_task(text, self._document_type(task_id), track_fences=track_fences)
        warnings: list[str] = []
        if parsed.id and parsed.id != task_id:
            warnings.append(f"Document title ID {parsed.id} ignored; kept {task_id}")
        parsed.id = task_id
        self.project.task_list[task_id] = parsed
        self.project.register_tags(parsed.tags)
        return self._commit(op, {"task": task_payload(parsed)}, warnings)
