"""Checkbox option groups used by task documents.

Each group renders as one ``- [ ] Label`` line per option. Parsing picks
the first checked line whose label matches an option; with nothing
checked the value is the empty member.
"""

from __future__ import annotations

from typing import NamedTuple

from planctl.domain.types import Confidence, EffortMethod, WorkType
from planctl.formats.markdown import format_checkbox, parse_checkbox


class Option(NamedTuple):
    label: str
    value: str


WORK_TYPE_OPTIONS: tuple[Option, ...] = (
    Option("New work", WorkType.NEW_WORK),
    Option("Change", WorkType.CHANGE),
    Option("Bugfix", WorkType.BUGFIX),
    Option("Research/Spike", WorkType.RESEARCH),
)

METHOD_OPTIONS: tuple[Option, ...] = (
    Option("Similar work", EffortMethod.SIMILAR_WORK),
    Option("3-point", EffortMethod.THREE_POINT),
    Option("Gut feel", EffortMethod.GUT_FEEL),
)

CONFIDENCE_OPTIONS: tuple[Option, ...] = (
    Option("Low", Confidence.LOW),
    Option("Med", Confidence.MED),
    Option("High", Confidence.HIGH),
)

COMPLETED = "completed"
COMPLETION_OPTIONS: tuple[Option, ...] = (Option("Completed", COMPLETED),)


def render_options(options: tuple[Option, ...], selected: str) -> list[str]:
    return [format_checkbox(option.label, option.value == selected) for option in options]


def _label_matches(label: str, option: Option, *, exact: bool = False) -> bool:
    """Case-insensitive match; a written label may carry trailing text."""
    written = label.lower()
    expected = option.label.lower()
    return written == expected if exact else written.startswith(expected)


def select_option(lines: list[str], options: tuple[Option, ...], *, exact: bool = False) -> str:
    """Value of the first checked line matching one of *options*, else ``""``.

    A label matches when it starts with the option label, or equals it
    when *exact* is set.

    Examples:
        >>> select_option(["- [ ] Change", "- [x] Bugfix"], WORK_TYPE_OPTIONS)
        'bugfix'
    """
    for line in lines:
        parsed = parse_checkbox(line)
        if parsed is None or not parsed[0]:
            continue
        for option in options:
            if _label_matches(parsed[1], option, exact=exact):
                return str(option.value)
    return ""


def strip_options(lines: list[str], options: tuple[Option, ...]) -> list[str]:
    """*lines* without the checkbox lines whose label is exactly an option label."""
    kept: list[str] = []
    for line in lines:
        parsed = parse_checkbox(line)
        if parsed is not None and any(
            _label_matches(parsed[1], option, exact=True) for option in options
        ):
            continue
        kept.append(line)
    return kept
