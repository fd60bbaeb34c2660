"""Session documents: a :class:`TimeLog` as heading-structured Markdown.

Timestamps are stored as ISO 8601 (``2025-01-01T10:00:00Z``) and shown
as ``2025-01-01 10:00``. Seconds appear only when non-zero. A value that
does not look like a timestamp is kept exactly as written.

Unknown H2 sections and stray H1 lines are appended to the session notes.
"""

from __future__ import annotations

import re

from planctl.domain.models import Defects, EnergyLevel, Retrospective, TimeLog
from planctl.formats.markdown import (
    FenceTracker,
    finalize_section,
    format_heading,
    join_blocks,
    parse_heading,
    split_lines,
)

ISO_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})T(\d{2}:\d{2})(?::(\d{2}))?Z?$")
DISPLAY_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})\s+(\d{2}:\d{2})(?::(\d{2}))?$")
MINUTES_RE = re.compile(r"\(minutes:\s*(\d+)\s*\)", re.IGNORECASE)
INT_RE = re.compile(r"-?\d+")
TASK_LINE_RE = re.compile(r"^\s*[-*]\s+(.+?)\s*$")

# (field, label) pairs for the key/value blocks.
SESSION_FIELDS: tuple[tuple[str, str], ...] = (
    ("start_timestamp", "Start"),
    ("end_timestamp", "End"),
    ("session_type", "Type"),
    ("planned_duration_minutes", "Planned Duration (min)"),
)
METRIC_FIELDS: tuple[tuple[str, str], ...] = (
    ("focus_rating", "Focus Rating (1-5)"),
    ("energy_start", "Energy Level Start (1-5)"),
    ("energy_end", "Energy Level End (1-5)"),
    ("context_switches", "Context Switches"),
)
DEFECT_HEADINGS: tuple[tuple[str, str], ...] = (("found", "Found"), ("fixed", "Fixed"))
RETRO_HEADINGS: tuple[tuple[str, str], ...] = (
    ("what_went_well", "What Went Well"),
    ("what_needs_improvement", "What Needs Improvement"),
    ("lessons_learned", "Lessons Learned"),
)

_TEXT_SECTIONS = {"notes": "notes", "deliverables": "deliverables", "blockers": "blockers"}


def format_timestamp(timestamp: str) -> str:
    """Display form of an ISO timestamp.

    Examples:
        >>> format_timestamp("2025-01-01T10:00:00Z")
        '2025-01-01 10:00'
        >>> format_timestamp("2025-01-01T10:00:30Z")
        '2025-01-01 10:00:30'
    """
    match = ISO_RE.match(timestamp.strip())
    if match is None:
        return timestamp
    date, minutes, seconds = match.groups()
    if seconds and seconds != "00":
        return f"{date} {minutes}:{seconds}"
    return f"{date} {minutes}"


def parse_timestamp(text: str) -> str:
    """ISO form of a displayed timestamp; anything else is returned as-is."""
    value = text.strip()
    match = DISPLAY_RE.match(value)
    if match is None:
        return value
    date, minutes, seconds = match.groups()
    return f"{date}T{minutes}:{seconds or '00'}Z"


def _int(text: str) -> int:
    match = INT_RE.search(text)
    return int(match.group(0)) if match else 0


def _key_values(lines: list[str], fields: tuple[tuple[str, str], ...]) -> dict[str, str]:
    """Pick ``Label: value`` lines; the first occurrence of each label wins."""
    found: dict[str, str] = {}
    for line in lines:
        label, sep, value = line.partition(":")
        if not sep:
            continue
        for field, expected in fields:
            if field not in found and label.strip().lower() == expected.lower():
                found[field] = value.strip()
    return found


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------


def _text(value: str) -> list[str]:
    return split_lines(value) if value else []


def session_to_text(session: TimeLog) -> str:
    """Render *session* as a session document."""
    lines = [
        format_heading(2, "Session"),
        f"Start: {format_timestamp(session.start_timestamp)}".rstrip(),
        f"End:   {format_timestamp(session.end_timestamp)}".rstrip(),
        f"Type:  {session.session_type}".rstrip(),
        f"Planned Duration (min): {session.planned_duration_minutes}",
        "",
        format_heading(2, "Productivity Metrics"),
        f"Focus Rating (1-5): {session.focus_rating}",
        f"Energy Level Start (1-5): {session.energy_level.start}",
        f"Energy Level End (1-5): {session.energy_level.end}",
        f"Context Switches: {session.context_switches}",
        "",
        format_heading(2, "Notes"),
        *_text(session.notes),
        "",
        format_heading(2, f"Interruptions (minutes: {session.interruption_minutes})"),
        *_text(session.interruptions),
        "",
        format_heading(2, "Deliverables"),
        *_text(session.deliverables),
        "",
        format_heading(2, "Defects"),
    ]
    for field, title in DEFECT_HEADINGS:
        lines += [format_heading(3, title), *_text(getattr(session.defects, field)), ""]
    lines += [format_heading(2, "Blockers"), *_text(session.blockers), ""]
    lines.append(format_heading(2, "Retrospective"))
    for field, title in RETRO_HEADINGS:
        lines += [format_heading(3, title), *_text(getattr(session.retrospective, field)), ""]
    lines.append(format_heading(2, "Tasks"))
    lines += [f"- {task_id}" for task_id in session.tasks]
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _SessionParser:
    def __init__(self, track_fences: bool) -> None:
        self.fences = FenceTracker() if track_fences else None
        self.section: str | None = None
        self.subsection: str | None = None
        self.heading = ""
        self.buffer: list[str] = []

        self.values: dict[str, object] = {}
        self.defects: dict[str, str] = {}
        self.retrospective: dict[str, str] = {}
        self.notes: list[str] = []
        self.recovered: list[str] = []
        self.tasks: list[str] = []

    def feed(self, line: str) -> None:
        literal = self.fences.feed(line) if self.fences is not None else False
        heading = None if literal else parse_heading(line)
        if heading is None:
            self.buffer.append(line)
            return

        level, title = heading
        if level == 1:
            self.recovered.append(title)
        elif level == 2:
            self._flush()
            self.section = self._section_for(title)
            self.subsection = None
            self.heading = title
        elif level == 3 and self.section in ("defects", "retrospective"):
            table = DEFECT_HEADINGS if self.section == "defects" else RETRO_HEADINGS
            field = next((f for f, t in table if t.lower() == title.lower()), None)
            if field is None:
                self.buffer.append(line)
                return
            self._flush()
            self.subsection = field
        else:
            self.buffer.append(line)

    def _section_for(self, title: str) -> str:
        key = title.lower()
        if key.startswith("interruptions"):
            match = MINUTES_RE.search(title)
            self.values["interruption_minutes"] = int(match.group(1)) if match else 0
            return "interruptions"
        if key in ("session", "productivity metrics", "defects", "retrospective", "tasks"):
            return key
        if key in _TEXT_SECTIONS:
            return key
        return "unknown"

    def _flush(self) -> None:
        lines, self.buffer = self.buffer, []
        section = self.section
        if section is None:
            self._recover(lines)
        elif section == "session":
            found = _key_values(lines, SESSION_FIELDS)
            for field in ("start_timestamp", "end_timestamp"):
                if field in found:
                    self.values[field] = parse_timestamp(found[field])
            if "session_type" in found:
                self.values["session_type"] = found["session_type"]
            if "planned_duration_minutes" in found:
                self.values["planned_duration_minutes"] = _int(found["planned_duration_minutes"])
        elif section == "productivity metrics":
            for field, value in _key_values(lines, METRIC_FIELDS).items():
                self.values[field] = _int(value)
        elif section == "notes":
            self.notes.append(finalize_section(lines))
        elif section in ("interruptions", "deliverables", "blockers"):
            self.values[section] = finalize_section(lines)
        elif section in ("defects", "retrospective"):
            target = self.defects if section == "defects" else self.retrospective
            if self.subsection is None:
                self._recover(lines)
            else:
                target[self.subsection] = finalize_section(lines)
        elif section == "tasks":
            for line in lines:
                match = TASK_LINE_RE.match(line)
                if match:
                    self.tasks.append(match.group(1))
        else:
            self._recover([self.heading, *lines])

    def _recover(self, lines: list[str]) -> None:
        text = finalize_section(lines)
        if text:
            self.recovered.append(text)

    def result(self) -> TimeLog:
        self._flush()
        values = dict(self.values)
        energy = EnergyLevel(start=values.pop("energy_start", 0), end=values.pop("energy_end", 0))
        return TimeLog(
            **values,
            notes=join_blocks(*self.notes, *self.recovered),
            tasks=self.tasks,
            energy_level=energy,
            defects=Defects(**self.defects),
            retrospective=Retrospective(**self.retrospective),
        )


def text_to_session(text: str, *, track_fences: bool = True) -> TimeLog:
    """Parse a session document. Never fails; missing fields take defaults."""
    parser = _SessionParser(track_fences)
    for line in split_lines(text):
        parser.feed(line)
    return parser.result()
