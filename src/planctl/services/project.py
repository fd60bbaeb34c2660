"""ProjectService — create, open, list, and delete stored projects."""

from __future__ import annotations

from planctl.domain.errors import DomainError
from planctl.domain.models import Project
from planctl.domain.tree import PlanTree
from planctl.services.base import BaseService
from planctl.services.result import ServiceResult


class ProjectService(BaseService):
    """Project lifecycle. After a successful create or load,
    :attr:`project` holds the project for the scoped services."""

    def create_project(self, name: str, project_id: str | None = None) -> ServiceResult:
        op = "create_project"
        path, err = self._store.path_for(name)
        if path is None:
            assert err is not None
            return self._fail(op, err)
        if path.exists():
            return self._fail(op, DomainError.invalid(f"Project already exists: {name}", name=name))
        self._project = Project.new(name, project_id)
        return self._commit(op, self._summary())

    def load_project(self, name: str) -> ServiceResult:
        """Open *name*. Recovered files load with a warning, not an error."""
        op = "load_project"
        project, err = self._store.load(name)
        if project is None:
            assert err is not None
            return self._fail(op, err)
        self._project = project
        warnings = [err.message] if err is not None else []
        return self._ok(op, self._summary(), warnings)

    def show_project(self, name: str) -> ServiceResult:
        """Load *name* and include its tree outline."""
        result = self.load_project(name)
        if not result.ok:
            return result
        tree, _ = PlanTree.of(self.project).get_tree_display()
        return self._ok("show_project", {**result.data, "tree": tree}, list(result.warnings))

    def delete_project(self, name: str) -> ServiceResult:
        op = "delete_project"
        deleted, err = self._store.delete(name)
        if not deleted:
            assert err is not None
            return self._fail(op, err)
        return self._ok(op, {"name": name})

    def list_projects(self) -> ServiceResult:
        names = self._store.list_projects()
        return self._ok("list_projects", {"projects": names, "count": len(names)})

    def _summary(self) -> dict[str, object]:
        project = self.project
        tree = PlanTree.of(project)
        nodes = sum(len(tree.subtree_ids(key, node)) for key, node in project.structure.items())
        return {
            "id": project.project_info.id,
            "name": project.project_info.name,
            "nodes": nodes,
            "tasks": len(project.task_list),
            "sessions": len(project.time_log),
            "tags": list(project.tags),
        }
