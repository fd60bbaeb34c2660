"""Conversion between stored JSON data and the record model.

Stored task details carry no type tag. When the owning node is known its
type decides the variant; otherwise the shape is sniffed in a fixed order:
Job, then Component, then Area, else Freeform.

INVARIANT: The sniffing order is a documented precedence for ambiguous
legacy data. Do not reorder it.

Details that cannot be kept in structured form (plain strings, dicts that
do not fit the node's variant) are preserved at the front of the task's
notes under a ``Migrated details:`` banner rather than dropped.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from planctl.domain.ids import sorted_ids
from planctl.domain.models import (
    DETAILS_BY_TYPE,
    AreaDetails,
    ComponentDetails,
    Details,
    Estimation,
    FreeformDetails,
    JobDetails,
    Project,
    ProjectInfo,
    StructureNode,
    Task,
    TimeLog,
    details_fields,
)
from planctl.domain.types import NodeType

MIGRATED_BANNER = "Migrated details:"

# Sniffing order matters: first match wins.
_SNIFF_ORDER: tuple[type[BaseModel], ...] = (
    JobDetails,
    ComponentDetails,
    AreaDetails,
    FreeformDetails,
)


def _prepend_notes(notes: str, text: str) -> str:
    return f"{text}\n\n{notes}" if notes else text


def _conforms(raw: dict[str, Any], model: type[BaseModel]) -> bool:
    return any(name in raw for name in details_fields(model))


def sniff_details(raw: dict[str, Any]) -> Details:
    """Pick a details variant for untyped *raw* data by field presence."""
    kind = raw.get("kind")
    if kind in {member.value for member in NodeType}:
        return DETAILS_BY_TYPE[NodeType(kind)].model_validate(raw)
    for model in _SNIFF_ORDER:
        if _conforms(raw, model):
            return model.model_validate(raw)
    return FreeformDetails(custom=raw.get("custom") or {})


def coerce_details(raw: Any, node_type: NodeType | None, notes: str) -> tuple[Details, str]:
    """Build details for a task owned by a node of *node_type*.

    Returns ``(details, notes)``; *notes* gains a migration block when the
    raw value could not be kept in structured form.
    """
    if node_type is None:
        if isinstance(raw, dict):
            return sniff_details(raw), notes
        if isinstance(raw, str):
            return FreeformDetails(content=raw), notes
        return FreeformDetails(), notes

    model = DETAILS_BY_TYPE[node_type]
    if isinstance(raw, dict):
        if raw.get("kind") == node_type.value or _conforms(raw, model):
            return model.model_validate({**raw, "kind": node_type.value}), notes
        if not raw:
            return model(), notes
        dumped = json.dumps(raw, indent=2, ensure_ascii=False)
        return model(), _prepend_notes(notes, f"{MIGRATED_BANNER}\n{dumped}")
    if isinstance(raw, str) and raw:
        if node_type is NodeType.FREEFORM:
            return FreeformDetails(content=raw), notes
        return model(), _prepend_notes(notes, f"{MIGRATED_BANNER}\n{raw}")
    return model(), notes


def node_types(structure: dict[str, StructureNode]) -> dict[str, NodeType]:
    """Flatten *structure* into an ``id -> type`` map."""
    found: dict[str, NodeType] = {}
    stack = list(structure.values())
    while stack:
        node = stack.pop()
        found[node.id] = node.type
        stack.extend(node.subtasks.values())
    return found


# ---------------------------------------------------------------------------
# dict -> model
# ---------------------------------------------------------------------------


def structure_from_dict(data: dict[str, Any] | None) -> dict[str, StructureNode]:
    """Rebuild structure nodes, stamping each with its key as ID."""
    data = data or {}
    result: dict[str, StructureNode] = {}
    for node_id in sorted_ids(data):
        raw = data[node_id] or {}
        result[node_id] = StructureNode(
            id=node_id,
            type=raw.get("type") or NodeType.JOB,
            subtasks=structure_from_dict(raw.get("subtasks")),
        )
    return result


def task_from_dict(task_id: str, raw: dict[str, Any], node_type: NodeType | None) -> Task:
    """Build a task, migrating string estimations and untyped details."""
    notes = raw.get("notes") or ""
    estimation = None
    raw_estimation = raw.get("estimation")
    if isinstance(raw_estimation, str):
        if raw_estimation:
            notes = _prepend_notes(notes, raw_estimation)
    elif isinstance(raw_estimation, dict):
        estimation = Estimation.model_validate(raw_estimation)

    details, notes = coerce_details(raw.get("details"), node_type, notes)
    return Task(
        id=task_id,
        name=raw.get("name") or "",
        details=details,
        estimation=estimation,
        notes=notes,
        tags=raw.get("tags") or [],
        custom=raw.get("custom") or {},
    )


def project_from_dict(data: dict[str, Any]) -> Project:
    """Build a :class:`Project` from stored JSON data."""
    structure = structure_from_dict(data.get("structure"))
    types = node_types(structure)
    task_list = {
        task_id: task_from_dict(task_id, raw or {}, types.get(task_id))
        for task_id, raw in (data.get("task_list") or {}).items()
    }
    info = data.get("project_info") or {}
    return Project(
        project_info=ProjectInfo(id=info.get("id") or "", name=info.get("name") or ""),
        structure=structure,
        task_list=task_list,
        time_log=[TimeLog.model_validate(entry or {}) for entry in data.get("time_log") or []],
        tags=list(dict.fromkeys(data.get("tags") or [])),
        notes=data.get("notes") or "",
    )


# ---------------------------------------------------------------------------
# model -> dict
# ---------------------------------------------------------------------------


def structure_to_dict(structure: dict[str, StructureNode]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for node_id in sorted_ids(structure):
        node = structure[node_id]
        entry: dict[str, Any] = {"type": node.type.value}
        if node.subtasks:
            entry["subtasks"] = structure_to_dict(node.subtasks)
        result[node_id] = entry
    return result


def task_to_dict(task: Task) -> dict[str, Any]:
    """Stored shape of a task: no ``id`` (implied by key), no ``kind`` tag."""
    details = task.details.model_dump(mode="json", exclude={"kind"})
    if not details.get("custom"):
        details.pop("custom", None)
    entry: dict[str, Any] = {"name": task.name, "details": details}
    if task.estimation is not None:
        entry["estimation"] = task.estimation.model_dump(mode="json")
    if task.notes:
        entry["notes"] = task.notes
    entry["tags"] = list(task.tags)
    if task.custom:
        entry["custom"] = dict(task.custom)
    return entry


def project_to_dict(project: Project) -> dict[str, Any]:
    """Stored JSON shape of *project*. Empty notes are omitted."""
    data: dict[str, Any] = {
        "project_info": project.project_info.model_dump(mode="json"),
        "structure": structure_to_dict(project.structure),
        "task_list": {
            task_id: task_to_dict(project.task_list[task_id])
            for task_id in sorted_ids(project.task_list)
        },
        "time_log": [entry.model_dump(mode="json") for entry in project.time_log],
        "tags": list(project.tags),
    }
    if project.notes:
        data["notes"] = project.notes
    return data
