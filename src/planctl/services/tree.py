"""TreeService — structural edits on a loaded project, saved after each."""

from __future__ import annotations

from planctl.domain.filters import JobFilter
from planctl.domain.models import Project
from planctl.domain.tree import PlanTree
from planctl.domain.types import Direction, NodeType
from planctl.formats.structure import structure_to_text, text_to_structure
from planctl.infrastructure.storage import ProjectStore
from planctl.services.base import BaseService
from planctl.services.result import ServiceResult


class TreeService(BaseService):
    """Wraps :class:`PlanTree` operations in the service contract."""

    def __init__(self, store: ProjectStore, project: Project) -> None:
        super().__init__(store, project)
        self._tree = PlanTree.of(project)

    def add_node(
        self,
        parent_id: str | None,
        node_type: NodeType | str,
        name: str = "",
    ) -> ServiceResult:
        op = "add_node"
        new_id, err = self._tree.add_node(parent_id, node_type, name)
        if err is not None:
            return self._fail(op, err)
        return self._commit(op, {"id": new_id, "type": str(node_type), "name": name})

    def remove_node(self, node_id: str) -> ServiceResult:
        op = "remove_node"
        removed, err = self._tree.remove_node(node_id)
        if err is not None:
            return self._fail(op, err)
        return self._commit(op, {"id": node_id, "removed": removed})

    def move_node(self, node_id: str, new_parent_id: str | None) -> ServiceResult:
        op = "move_node"
        new_id, err = self._tree.move_node(node_id, new_parent_id)
        if err is not None:
            return self._fail(op, err)
        return self._commit(op, {"id": node_id, "new_id": new_id, "parent": new_parent_id})

    def renumber(self) -> ServiceResult:
        changes, _ = self._tree.renumber_structure()
        return self._commit("renumber", {"changes": changes, "count": len(changes)})

    def swap(self, node_id: str, direction: Direction | str) -> ServiceResult:
        op = "swap"
        new_id, err = self._tree.swap_siblings(node_id, direction)
        if err is not None:
            return self._fail(op, err)
        return self._commit(op, {"id": node_id, "new_id": new_id, "direction": str(direction)})

    def indent(self, node_id: str) -> ServiceResult:
        op = "indent"
        new_id, err = self._tree.indent_node(node_id)
        if err is not None:
            return self._fail(op, err)
        return self._commit(op, {"id": node_id, "new_id": new_id})

    def outdent(self, node_id: str) -> ServiceResult:
        op = "outdent"
        new_id, err = self._tree.outdent_node(node_id)
        if err is not None:
            return self._fail(op, err)
        return self._commit(op, {"id": node_id, "new_id": new_id})

    def display(self, job_filter: JobFilter | None = None) -> ServiceResult:
        """Read-only tree listing, optionally hiding Jobs by completion."""
        text, _ = self._tree.get_tree_display(job_filter)
        lines = text.splitlines()
        return self._ok("display", {"tree": text, "count": len(lines)})

    def show_outline(self) -> ServiceResult:
        """The full, unfiltered outline as a document."""
        document = structure_to_text(self.project.structure, self.project.task_list)
        return self._ok("show_outline", {"document": document})

    def apply_outline(self, text: str) -> ServiceResult:
        """Replace the tree with the outline in *text*.

        Existing tasks keep their content and take the outline's name;
        named lines without a task get a fresh one. Tasks whose node is
        gone stay in the task list as orphans.
        """
        structure, named = text_to_structure(text)
        task_list = self.project.task_list
        created: list[str] = []
        renamed: list[str] = []
        for task_id, parsed in named.items():
            existing = task_list.get(task_id)
            if existing is None:
                task_list[task_id] = parsed
                created.append(task_id)
            elif existing.name != parsed.name:
                existing.name = parsed.name
                renamed.append(task_id)

        # PlanTree holds a reference to this dict, so edit it in place.
        self.project.structure.clear()
        self.project.structure.update(structure)
        text_out, _ = self._tree.get_tree_display()
        nodes = len(text_out.splitlines()) if text_out else 0
        return self._commit(
            "apply_outline", {"nodes": nodes, "created": created, "renamed": renamed}
        )
