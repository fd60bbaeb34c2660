"""Tests for the record model and its legacy-tolerant validators."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from planctl.domain.models import (
    AreaDetails,
    ComponentDetails,
    Estimation,
    FreeformDetails,
    JobDetails,
    Project,
    Task,
    TimeLog,
    details_fields,
    empty_details,
)
from planctl.domain.types import Confidence, NodeType, WorkType


class TestDetails:
    @pytest.mark.parametrize(
        ("node_type", "model"),
        [
            (NodeType.AREA, AreaDetails),
            (NodeType.COMPONENT, ComponentDetails),
            (NodeType.JOB, JobDetails),
            (NodeType.FREEFORM, FreeformDetails),
        ],
    )
    def test_empty_details_variant(self, node_type: NodeType, model: type) -> None:
        details = empty_details(node_type)
        assert isinstance(details, model)
        assert details.kind == node_type.value

    def test_empty_details_accepts_string(self) -> None:
        assert isinstance(empty_details("Job"), JobDetails)

    def test_discriminated_by_kind(self) -> None:
        task = Task.model_validate({"details": {"kind": "Component", "purpose": "Serve"}})
        assert isinstance(task.details, ComponentDetails)
        assert task.details.purpose == "Serve"

    def test_kind_only_details(self) -> None:
        task = Task(details={"kind": "Job"})  # type: ignore[arg-type]
        assert isinstance(task.details, JobDetails)
        assert task.details.context_why == ""

    def test_kind_kept_while_text_folds(self) -> None:
        task = Task.model_validate(
            {"name": None, "details": {"kind": "Area", "stakeholders": ["Ops", "Sales"]}}
        )
        assert task.name == ""
        assert isinstance(task.details, AreaDetails)
        assert task.details.stakeholders == "- Ops\n- Sales"

    def test_legacy_list_folds_to_lines(self) -> None:
        details = AreaDetails.model_validate({"goals_objectives": ["Ship", "", "Grow"]})
        assert details.goals_objectives == "- Ship\n- Grow"

    def test_null_text_becomes_empty(self) -> None:
        details = JobDetails.model_validate({"risks": None, "completed": None})
        assert details.risks == ""
        assert details.completed is False

    def test_details_fields_excludes_meta(self) -> None:
        fields = details_fields(FreeformDetails)
        assert fields == ["content"]


class TestEstimation:
    def test_defaults(self) -> None:
        estimation = Estimation()
        assert estimation.work_type is WorkType.NONE
        assert estimation.effort.total_hours == 0
        assert estimation.schedule.milestones == []

    def test_nulls_load(self) -> None:
        estimation = Estimation.model_validate(
            {
                "work_type": None,
                "confidence": None,
                "effort": {"base_hours": None, "method": None},
                "schedule": None,
            }
        )
        assert estimation.work_type is WorkType.NONE
        assert estimation.confidence is Confidence.NONE
        assert estimation.effort.base_hours == 0
        assert estimation == Estimation()

    def test_not_empty(self) -> None:
        assert Estimation(work_type=WorkType.BUGFIX) != Estimation()

    def test_unknown_enum_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Estimation.model_validate({"work_type": "chores"})


class TestTask:
    def test_tags_deduplicated_in_order(self) -> None:
        task = Task(tags=["b", "a", "b"])
        assert task.tags == ["b", "a"]

    def test_default_details_freeform(self) -> None:
        assert isinstance(Task().details, FreeformDetails)


class TestTimeLog:
    def test_open_until_ended(self) -> None:
        session = TimeLog(start_timestamp="2025-01-01T10:00:00Z")
        assert session.is_open
        session.end_timestamp = "2025-01-01T11:00:00Z"
        assert not session.is_open

    def test_nulls_load(self) -> None:
        session = TimeLog.model_validate(
            {"tasks": None, "energy_level": None, "focus_rating": None, "notes": None}
        )
        assert session.tasks == []
        assert session.energy_level.start == 0
        assert session.focus_rating == 0
        assert session.notes == ""


class TestProject:
    def test_new_defaults_id_to_name(self) -> None:
        project = Project.new("demo")
        assert project.project_info.id == "demo"
        assert project.project_info.name == "demo"

    def test_new_with_id(self) -> None:
        assert Project.new("demo", "D-1").project_info.id == "D-1"

    def test_register_tags(self) -> None:
        project = Project.new("demo")
        project.register_tags(["a", "b"])
        project.register_tags(["b", "c"])
        assert project.tags == ["a", "b", "c"]
