"""Node types and estimation enums.

The empty-string members stand for "not chosen" so that option lists
rendered with no box checked parse back to the same value.
"""

from __future__ import annotations

from enum import StrEnum


class NodeType(StrEnum):
    """Kinds of node in the planning tree."""

    AREA = "Area"
    COMPONENT = "Component"
    JOB = "Job"
    FREEFORM = "Freeform"


class WorkType(StrEnum):
    """Estimation work classification."""

    NONE = ""
    NEW_WORK = "new_work"
    CHANGE = "change"
    BUGFIX = "bugfix"
    RESEARCH = "research"


class EffortMethod(StrEnum):
    """How an effort figure was arrived at."""

    NONE = ""
    SIMILAR_WORK = "similar_work"
    THREE_POINT = "three_point"
    GUT_FEEL = "gut_feel"


class Confidence(StrEnum):
    """Confidence in an estimate."""

    NONE = ""
    LOW = "low"
    MED = "med"
    HIGH = "high"


class Direction(StrEnum):
    """Sibling swap direction."""

    UP = "up"
    DOWN = "down"
