"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime

from planctl.domain.models import Task

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SSZ`` (session timestamps)."""
    return datetime.now(UTC).strftime(TIMESTAMP_FORMAT)


def task_payload(task: Task) -> dict[str, object]:
    """JSON-ready dump of a task, tagged with its details variant."""
    return task.model_dump(mode="json")


def task_summary(task: Task) -> dict[str, object]:
    """Compact listing row for a task."""
    return {"id": task.id, "name": task.name, "tags": list(task.tags)}
