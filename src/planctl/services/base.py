"""BaseService — shared foundation for planctl services.

Every service receives a :class:`ProjectStore` at construction time and,
for project-scoped operations, the loaded :class:`Project` it edits.

INVARIANT: A mutating operation edits the in-memory project first and
then saves. A failed save reports ``PERSISTENCE_FAILURE`` but does not
roll the edit back; ``data`` still describes the mutated state.
"""

from __future__ import annotations

import logging
from typing import Any

from planctl.domain.errors import DomainError
from planctl.domain.models import Project
from planctl.infrastructure.storage import ProjectStore
from planctl.services.result import ServiceError, ServiceResult

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class TreeService(BaseService):
            def add_node(self, ...) -> ServiceResult:
                new_id, err = self._tree.add_node(...)
                if err is not None:
                    return self._fail("add_node", err)
                return self._commit("add_node", {"id": new_id})
    """

    def __init__(self, store: ProjectStore, project: Project | None = None) -> None:
        self._store = store
        self._project = project

    @property
    def project(self) -> Project:
        assert self._project is not None, f"{type(self).__name__} needs a loaded project"
        return self._project

    def _meta(self) -> dict[str, Any] | None:
        if self._project is None:
            return None
        return {"project": self._project.project_info.name}

    def _fail(
        self,
        op: str,
        error: DomainError,
        *,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return ServiceResult(
            ok=False,
            op=op,
            data=data or {},
            warnings=warnings or [],
            error=ServiceError.from_domain(error),
            meta=self._meta(),
        )

    def _ok(self, op: str, data: dict[str, Any], warnings: list[str] | None = None) -> ServiceResult:
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings or [], meta=self._meta())

    def _commit(
        self,
        op: str,
        data: dict[str, Any],
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Save the project, then report *data* for operation *op*."""
        saved, err = self._store.save(self.project)
        if not saved:
            assert err is not None
            logger.warning("Operation %s applied but not saved: %s", op, err.message)
            return self._fail(op, err, data=data, warnings=warnings)
        logger.debug("Operation %s saved", op)
        return self._ok(op, data, warnings)
