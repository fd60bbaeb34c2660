"""Record model: tree nodes, tasks, details variants, estimation, time logs.

Every list-like free-text field is stored canonically as a single string
(one ``- item`` line per entry). Older stored data used JSON arrays for
these fields; the ``mode="before"`` validators below fold arrays into the
canonical string so loading never fails on the older shape.

``Details`` is a discriminated union on ``kind``. Consumers match on the
variant class; no runtime shape inspection happens outside
:mod:`planctl.domain.legacy`.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from planctl.domain.types import Confidence, EffortMethod, NodeType, WorkType


def coerce_text(value: Any) -> Any:
    """Fold a legacy list into ``- item`` lines; map None to ``""``."""
    if value is None:
        return ""
    if isinstance(value, list):
        items = [str(item).strip() for item in value if item is not None]
        return "\n".join(f"- {item}" for item in items if item)
    return value


def coerce_number(value: Any) -> Any:
    """Map None/blank to 0 so hand-edited JSON with nulls still loads."""
    if value is None or value == "":
        return 0
    return value


class _TextModel(BaseModel):
    """Base for models whose ``str`` fields accept legacy arrays and nulls."""

    @model_validator(mode="before")
    @classmethod
    def _fold_text(cls, data: Any) -> Any:
        # Only plain text fields; the ``kind`` discriminator is a Literal.
        if not isinstance(data, dict):
            return data
        folded = dict(data)
        for name, field in cls.model_fields.items():
            if name in folded and field.annotation is str:
                folded[name] = coerce_text(folded[name])
        return folded


# ---------------------------------------------------------------------------
# Details variants
# ---------------------------------------------------------------------------


class AreaDetails(_TextModel):
    """Strategic description of an Area node."""

    kind: Literal["Area"] = "Area"
    vision_purpose: str = ""
    goals_objectives: str = ""
    scope_boundaries: str = ""
    key_components: str = ""
    success_metrics: str = ""
    stakeholders: str = ""
    dependencies_constraints: str = ""
    strategic_context: str = ""
    custom: dict[str, str] = Field(default_factory=dict)


class ComponentDetails(_TextModel):
    """Functional description of a Component node."""

    kind: Literal["Component"] = "Component"
    purpose: str = ""
    capabilities: str = ""
    acceptance_criteria: str = ""
    architecture_design: str = ""
    interfaces_integration: str = ""
    quality_attributes: str = ""
    related_components: str = ""
    other: str = ""
    custom: dict[str, str] = Field(default_factory=dict)


class JobDetails(_TextModel):
    """Work description of a Job node, with a completion flag."""

    kind: Literal["Job"] = "Job"
    context_why: str = ""
    outcome_dod: str = ""
    scope_in: str = ""
    scope_out: str = ""
    requirements_constraints: str = ""
    dependencies: str = ""
    approach: str = ""
    risks: str = ""
    validation_test_plan: str = ""
    completed: bool = False
    custom: dict[str, str] = Field(default_factory=dict)

    @field_validator("completed", mode="before")
    @classmethod
    def _null_completed(cls, value: Any) -> Any:
        return False if value is None else value


class FreeformDetails(_TextModel):
    """Schema-less details: one content block plus custom sub-sections."""

    kind: Literal["Freeform"] = "Freeform"
    content: str = ""
    custom: dict[str, str] = Field(default_factory=dict)


Details = Annotated[
    AreaDetails | ComponentDetails | JobDetails | FreeformDetails,
    Field(discriminator="kind"),
]

DETAILS_BY_TYPE: dict[NodeType, type[AreaDetails | ComponentDetails | JobDetails | FreeformDetails]] = {
    NodeType.AREA: AreaDetails,
    NodeType.COMPONENT: ComponentDetails,
    NodeType.JOB: JobDetails,
    NodeType.FREEFORM: FreeformDetails,
}


def empty_details(node_type: NodeType | str) -> AreaDetails | ComponentDetails | JobDetails | FreeformDetails:
    """Fresh details variant for *node_type*."""
    return DETAILS_BY_TYPE[NodeType(node_type)]()


def details_fields(model: type[BaseModel]) -> list[str]:
    """Content field names of a details variant (excludes ``kind``/``custom``)."""
    return [name for name in model.model_fields if name not in ("kind", "custom")]


# ---------------------------------------------------------------------------
# Estimation
# ---------------------------------------------------------------------------


class Effort(_TextModel):
    method: EffortMethod = EffortMethod.NONE
    base_hours: float = 0
    buffer_percent: float = 0
    buffer_reason: str = ""
    total_hours: float = 0

    @field_validator("base_hours", "buffer_percent", "total_hours", mode="before")
    @classmethod
    def _null_numbers(cls, value: Any) -> Any:
        return coerce_number(value)

    @field_validator("method", mode="before")
    @classmethod
    def _null_method(cls, value: Any) -> Any:
        return value or ""


class Milestone(_TextModel):
    name: str = ""
    date: str = ""


class Schedule(_TextModel):
    start_date: str = ""
    target_finish: str = ""
    milestones: list[Milestone] = Field(default_factory=list)

    @field_validator("milestones", mode="before")
    @classmethod
    def _null_milestones(cls, value: Any) -> Any:
        return value or []


class PostEstimateNotes(_TextModel):
    could_be_smaller: str = ""
    could_be_bigger: str = ""
    ignored_last_time: str = ""


class Estimation(_TextModel):
    """Effort estimate attached to Job tasks."""

    work_type: WorkType = WorkType.NONE
    assumptions: str = ""
    effort: Effort = Field(default_factory=Effort)
    confidence: Confidence = Confidence.NONE
    schedule: Schedule = Field(default_factory=Schedule)
    post_estimate_notes: PostEstimateNotes = Field(default_factory=PostEstimateNotes)

    @field_validator("work_type", "confidence", mode="before")
    @classmethod
    def _null_enums(cls, value: Any) -> Any:
        return value or ""

    @field_validator("effort", "schedule", "post_estimate_notes", mode="before")
    @classmethod
    def _null_sections(cls, value: Any) -> Any:
        return value or {}


# ---------------------------------------------------------------------------
# Tree and tasks
# ---------------------------------------------------------------------------


class StructureNode(BaseModel):
    """A tree node: type tag plus children keyed by their full IDs."""

    id: str = ""
    type: NodeType = NodeType.JOB
    subtasks: dict[str, StructureNode] = Field(default_factory=dict)


class Task(_TextModel):
    """Content record for a node (or a free-floating orphan)."""

    id: str = ""
    name: str = ""
    details: Details = Field(default_factory=FreeformDetails)
    estimation: Estimation | None = None
    notes: str = ""
    tags: list[str] = Field(default_factory=list)
    custom: dict[str, str] = Field(default_factory=dict)

    @field_validator("tags", mode="before")
    @classmethod
    def _dedupe_tags(cls, value: Any) -> Any:
        if not value:
            return []
        return list(dict.fromkeys(value))


# ---------------------------------------------------------------------------
# Time logs
# ---------------------------------------------------------------------------


class EnergyLevel(BaseModel):
    start: int = 0
    end: int = 0

    @field_validator("start", "end", mode="before")
    @classmethod
    def _null_numbers(cls, value: Any) -> Any:
        return coerce_number(value)


class Defects(_TextModel):
    found: str = ""
    fixed: str = ""


class Retrospective(_TextModel):
    what_went_well: str = ""
    what_needs_improvement: str = ""
    lessons_learned: str = ""


class TimeLog(_TextModel):
    """One work session. An empty ``end_timestamp`` means still running."""

    start_timestamp: str = ""
    end_timestamp: str = ""
    notes: str = ""
    interruptions: str = ""
    interruption_minutes: int = 0
    tasks: list[str] = Field(default_factory=list)
    session_type: str = ""
    planned_duration_minutes: int = 0
    focus_rating: int = 0
    energy_level: EnergyLevel = Field(default_factory=EnergyLevel)
    context_switches: int = 0
    defects: Defects = Field(default_factory=Defects)
    deliverables: str = ""
    blockers: str = ""
    retrospective: Retrospective = Field(default_factory=Retrospective)

    @field_validator(
        "interruption_minutes",
        "planned_duration_minutes",
        "focus_rating",
        "context_switches",
        mode="before",
    )
    @classmethod
    def _null_numbers(cls, value: Any) -> Any:
        return coerce_number(value)

    @field_validator("tasks", mode="before")
    @classmethod
    def _null_tasks(cls, value: Any) -> Any:
        return value or []

    @field_validator("energy_level", "defects", "retrospective", mode="before")
    @classmethod
    def _null_sections(cls, value: Any) -> Any:
        return value or {}

    @property
    def is_open(self) -> bool:
        return self.end_timestamp == ""


# ---------------------------------------------------------------------------
# Project
# ---------------------------------------------------------------------------


class ProjectInfo(_TextModel):
    id: str = ""
    name: str = ""


class Project(_TextModel):
    """Root aggregate. Exclusively owns every contained entity."""

    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
    structure: dict[str, StructureNode] = Field(default_factory=dict)
    task_list: dict[str, Task] = Field(default_factory=dict)
    time_log: list[TimeLog] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    notes: str = ""

    @classmethod
    def new(cls, name: str, project_id: str | None = None) -> Project:
        """Empty project named *name* (the ID defaults to the name)."""
        return cls(project_info=ProjectInfo(id=project_id or name, name=name))

    def register_tags(self, tags: list[str]) -> None:
        """Add any unseen *tags* to the project-level tag list."""
        for tag in tags:
            if tag not in self.tags:
                self.tags.append(tag)
