"""Visibility filter for Job nodes in tree listings.

Only Job nodes are ever hidden. A Job counts as completed only when its
task exists and carries :class:`JobDetails` with ``completed`` set; a
missing task or any other details shape counts as incomplete.
"""

from __future__ import annotations

from pydantic import BaseModel

from planctl.domain.models import JobDetails, StructureNode, Task
from planctl.domain.types import NodeType


class JobFilter(BaseModel):
    """Which Job nodes a tree listing shows."""

    model_config = {"frozen": True}

    show_completed_jobs: bool = False
    show_incomplete_jobs: bool = True


def is_completed(task: Task | None) -> bool:
    return task is not None and isinstance(task.details, JobDetails) and task.details.completed


def should_hide(node: StructureNode, task: Task | None, job_filter: JobFilter) -> bool:
    """True when *node* is a Job excluded by *job_filter*."""
    if node.type is not NodeType.JOB:
        return False
    if is_completed(task):
        return not job_filter.show_completed_jobs
    return not job_filter.show_incomplete_jobs
