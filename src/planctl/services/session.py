"""SessionService — time-tracking sessions of a loaded project.

Sessions are addressed by their 0-based position in ``time_log``. A
session is open until it has an end timestamp.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from planctl.domain.errors import DomainError
from planctl.domain.models import TimeLog
from planctl.formats.session import session_to_text, text_to_session
from planctl.services._helpers import now_iso
from planctl.services.base import BaseService
from planctl.services.result import ServiceResult

UPDATABLE_FIELDS = frozenset(
    {
        "notes",
        "interruptions",
        "interruption_minutes",
        "session_type",
        "planned_duration_minutes",
        "focus_rating",
        "energy_level",
        "context_switches",
        "defects",
        "deliverables",
        "blockers",
        "retrospective",
    }
)


class SessionService(BaseService):
    """Handles the session lifecycle and session documents."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _session(self, index: int | None) -> tuple[int, TimeLog | None, DomainError | None]:
        """Resolve *index*; None means the active session."""
        if index is None:
            active = self._active_index()
            if active is None:
                return -1, None, DomainError.not_found("No active session")
            index = active
        if 0 <= index < len(self.project.time_log):
            return index, self.project.time_log[index], None
        return index, None, DomainError.not_found(f"Session not found: {index}", index=index)

    def _active_index(self) -> int | None:
        for index, session in enumerate(self.project.time_log):
            if session.is_open:
                return index
        return None

    @staticmethod
    def _payload(index: int, session: TimeLog) -> dict[str, Any]:
        return {"index": index, "session": session.model_dump(mode="json")}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start_session(
        self,
        *,
        session_type: str = "",
        planned_duration_minutes: int = 0,
    ) -> ServiceResult:
        """Open a new session stamped with the current UTC time."""
        warnings: list[str] = []
        active = self._active_index()
        if active is not None:
            warnings.append(f"Session {active} is still open")
        session = TimeLog(
            start_timestamp=now_iso(),
            session_type=session_type,
            planned_duration_minutes=planned_duration_minutes,
        )
        self.project.time_log.append(session)
        index = len(self.project.time_log) - 1
        return self._commit("start_session", self._payload(index, session), warnings)

    def stop_session(self, index: int | None = None) -> ServiceResult:
        op = "stop_session"
        index, session, err = self._session(index)
        if session is None:
            assert err is not None
            return self._fail(op, err)
        if not session.is_open:
            return self._fail(op, DomainError.invalid("Session already stopped", index=index))
        session.end_timestamp = now_iso()
        return self._commit(op, self._payload(index, session))

    def update_session(self, index: int | None, **fields: Any) -> ServiceResult:
        op = "update_session"
        index, session, err = self._session(index)
        if session is None:
            assert err is not None
            return self._fail(op, err)
        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            return self._fail(
                op,
                DomainError.invalid(f"Unknown session field: {', '.join(unknown)}", fields=unknown),
            )
        try:
            updated = TimeLog.model_validate({**session.model_dump(), **fields})
        except ValidationError as exc:
            return self._fail(op, DomainError.invalid(f"Invalid session data: {exc}", index=index))
        self.project.time_log[index] = updated
        return self._commit(op, self._payload(index, updated))

    def add_task(self, index: int | None, task_id: str) -> ServiceResult:
        """Record work on *task_id* in session *index*. Adding twice is a no-op."""
        op = "add_task"
        index, session, err = self._session(index)
        if session is None:
            assert err is not None
            return self._fail(op, err)
        if task_id not in self.project.task_list:
            return self._fail(op, DomainError.not_found(f"Task not found: {task_id}", id=task_id))
        if task_id in session.tasks:
            return self._ok(op, self._payload(index, session))
        session.tasks.append(task_id)
        return self._commit(op, self._payload(index, session))

    def get_active_session(self) -> ServiceResult:
        """The first open session, or ``index: None`` when all are closed."""
        index = self._active_index()
        if index is None:
            return self._ok("get_active_session", {"index": None, "session": None})
        return self._ok("get_active_session", self._payload(index, self.project.time_log[index]))

    def list_sessions(self) -> ServiceResult:
        rows = [
            {
                "index": index,
                "start": session.start_timestamp,
                "end": session.end_timestamp,
                "type": session.session_type,
                "tasks": list(session.tasks),
            }
            for index, session in enumerate(self.project.time_log)
        ]
        return self._ok("list_sessions", {"sessions": rows, "count": len(rows)})

    def render_document(self, index: int | None = None) -> ServiceResult:
        op = "render_session"
        index, session, err = self._session(index)
        if session is None:
            assert err is not None
            return self._fail(op, err)
        return self._ok(op, {"index": index, "document": session_to_text(session)})

    def apply_document(self, index: int | None, text: str, *, track_fences: bool = True) -> ServiceResult:
        """Replace session *index* with the parsed document."""
        op = "apply_session"
        index, session, err = self._session(index)
        if session is None:
            assert err is not None
            return self._fail(op, err)
        parsed = text_to_session(text, track_fences=track_fences)
        warnings = [
            f"Unknown task in session: {task_id}"
            for task_id in parsed.tasks
            if task_id not in self.project.task_list
        ]
        self.project.time_log[index] = parsed
        return self._commit(op, self._payload(index, parsed), warnings)
