"""Tests for stored-data conversion and details sniffing."""

from __future__ import annotations

from planctl.domain.legacy import (
    MIGRATED_BANNER,
    coerce_details,
    project_from_dict,
    project_to_dict,
    sniff_details,
    task_to_dict,
)
from planctl.domain.models import (
    AreaDetails,
    ComponentDetails,
    FreeformDetails,
    JobDetails,
    Project,
    Task,
)
from planctl.domain.types import NodeType


class TestSniffDetails:
    def test_job_shape(self) -> None:
        assert isinstance(sniff_details({"context_why": "x"}), JobDetails)

    def test_component_shape(self) -> None:
        assert isinstance(sniff_details({"capabilities": "x"}), ComponentDetails)

    def test_area_shape(self) -> None:
        assert isinstance(sniff_details({"stakeholders": "x"}), AreaDetails)

    def test_precedence_job_over_component_over_area(self) -> None:
        mixed = {"vision_purpose": "a", "purpose": "c", "approach": "j"}
        assert isinstance(sniff_details(mixed), JobDetails)
        assert isinstance(sniff_details({"vision_purpose": "a", "purpose": "c"}), ComponentDetails)

    def test_explicit_kind_wins(self) -> None:
        assert isinstance(sniff_details({"kind": "Area", "approach": "j"}), AreaDetails)

    def test_unknown_shape_is_freeform(self) -> None:
        details = sniff_details({"whatever": 1})
        assert isinstance(details, FreeformDetails)
        assert details.content == ""


class TestCoerceDetails:
    def test_node_type_decides_variant(self) -> None:
        details, notes = coerce_details({"purpose": "x"}, NodeType.COMPONENT, "")
        assert isinstance(details, ComponentDetails)
        assert details.purpose == "x"
        assert notes == ""

    def test_mismatched_dict_migrates_into_notes(self) -> None:
        details, notes = coerce_details({"content": "hello"}, NodeType.AREA, "keep")
        assert isinstance(details, AreaDetails)
        assert notes.startswith(MIGRATED_BANNER)
        assert '"content": "hello"' in notes
        assert notes.endswith("keep")

    def test_string_details_for_freeform(self) -> None:
        details, notes = coerce_details("plain text", NodeType.FREEFORM, "")
        assert details == FreeformDetails(content="plain text")
        assert notes == ""

    def test_string_details_for_job_migrates(self) -> None:
        details, notes = coerce_details("plain text", NodeType.JOB, "")
        assert details == JobDetails()
        assert notes == f"{MIGRATED_BANNER}\nplain text"

    def test_orphan_string_is_freeform(self) -> None:
        details, _ = coerce_details("plain text", None, "")
        assert details == FreeformDetails(content="plain text")


class TestProjectFromDict:
    def test_full_shape(self) -> None:
        data = {
            "project_info": {"id": "P1", "name": "demo"},
            "structure": {"1": {"type": "Area", "subtasks": {"1.1": {"type": "Job"}}}},
            "task_list": {
                "1": {"name": "Platform", "details": {"vision_purpose": "Scale"}},
                "1.1": {
                    "name": "Build",
                    "details": {"approach": "TDD", "completed": True},
                    "estimation": {"work_type": "new_work"},
                    "tags": ["backend"],
                },
            },
            "time_log": [{"start_timestamp": "2025-01-01T10:00:00Z", "tasks": ["1.1"]}],
            "tags": ["backend", "backend"],
        }
        project = project_from_dict(data)
        assert project.project_info.name == "demo"
        assert project.structure["1"].subtasks["1.1"].id == "1.1"
        assert isinstance(project.task_list["1"].details, AreaDetails)
        job = project.task_list["1.1"]
        assert isinstance(job.details, JobDetails)
        assert job.details.completed is True
        assert job.estimation is not None
        assert job.estimation.work_type == "new_work"
        assert job.id == "1.1"
        assert project.time_log[0].tasks == ["1.1"]
        assert project.tags == ["backend"]

    def test_string_estimation_moves_to_notes(self) -> None:
        data = {
            "structure": {"1": {"type": "Job"}},
            "task_list": {"1": {"name": "x", "estimation": "about 3 days", "notes": "n"}},
        }
        task = project_from_dict(data).task_list["1"]
        assert task.estimation is None
        assert task.notes == "about 3 days\n\nn"

    def test_missing_sections(self) -> None:
        project = project_from_dict({})
        assert project.structure == {}
        assert project.task_list == {}
        assert project.notes == ""

    def test_missing_node_type_defaults_to_job(self) -> None:
        project = project_from_dict({"structure": {"1": {}}})
        assert project.structure["1"].type is NodeType.JOB


class TestProjectToDict:
    def test_round_trip(self, planned_project: Project) -> None:
        planned_project.task_list["1.1.1"].tags = ["backend"]
        planned_project.tags = ["backend"]
        assert project_from_dict(project_to_dict(planned_project)) == planned_project

    def test_empty_notes_omitted(self, project: Project) -> None:
        assert "notes" not in project_to_dict(project)
        project.notes = "hello"
        assert project_to_dict(project)["notes"] == "hello"

    def test_task_shape(self) -> None:
        entry = task_to_dict(Task(id="1", name="x", details=JobDetails(risks="r")))
        assert "id" not in entry
        assert "kind" not in entry["details"]
        assert "custom" not in entry["details"]
        assert "estimation" not in entry
        assert entry["details"]["risks"] == "r"
        assert entry["tags"] == []

    def test_structure_shape(self, planned_project: Project) -> None:
        structure = project_to_dict(planned_project)["structure"]
        assert list(structure) == ["1", "2", "3"]
        assert structure["1"]["subtasks"]["1.1"]["type"] == "Component"
        assert "subtasks" not in structure["2"]
