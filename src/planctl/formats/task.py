"""Task documents: a :class:`Task` as heading-structured Markdown.

Layout::

    # Task: <id> - <name>
    ## Details
    ### <fixed sub-heading per node type>
    ## Estimation            (Job only)
    ## Notes
    ## Tags
    ## <Custom Title>        (task.custom)

Parsing is a flush-on-transition state machine. Each structural heading
closes the current buffer and hands it to whichever field owns the
current section and sub-section. Text that no field owns (a preamble
before the first H2, stray H1 lines, text under Details or Estimation
before their first H3, and Estimation in a non-Job document) is appended
to the notes instead of being dropped.

INVARIANT: ``text_to_task(task_to_text(t), type)`` reproduces every field
of a task whose text fields are already in captured form (no leading or
trailing blank lines, no blank runs of three or more, no heading lines).
"""

from __future__ import annotations

import re
from decimal import Decimal

from planctl.domain.models import (
    AreaDetails,
    ComponentDetails,
    Details,
    Effort,
    Estimation,
    FreeformDetails,
    JobDetails,
    Milestone,
    PostEstimateNotes,
    Schedule,
    Task,
    empty_details,
)
from planctl.domain.types import NodeType
from planctl.formats.markdown import (
    FenceTracker,
    finalize_section,
    format_heading,
    format_task_title,
    join_blocks,
    parse_heading,
    parse_task_title,
    slugify,
    split_lines,
    title_from_key,
)
from planctl.formats.options import (
    COMPLETED,
    COMPLETION_OPTIONS,
    CONFIDENCE_OPTIONS,
    METHOD_OPTIONS,
    WORK_TYPE_OPTIONS,
    render_options,
    select_option,
    strip_options,
)

# ---------------------------------------------------------------------------
# Heading tables (field name, heading title), in document order
# ---------------------------------------------------------------------------

AREA_HEADINGS: tuple[tuple[str, str], ...] = (
    ("vision_purpose", "Vision / Purpose"),
    ("goals_objectives", "Goals / Objectives"),
    ("scope_boundaries", "Scope / Boundaries"),
    ("key_components", "Key Components"),
    ("success_metrics", "Success Metrics / KPIs"),
    ("stakeholders", "Stakeholders"),
    ("dependencies_constraints", "Dependencies / Constraints"),
    ("strategic_context", "Strategic Context"),
)

COMPONENT_HEADINGS: tuple[tuple[str, str], ...] = (
    ("purpose", "Purpose / What It Is"),
    ("capabilities", "Capabilities / Features"),
    ("acceptance_criteria", "Acceptance Criteria"),
    ("architecture_design", "Architecture / Design"),
    ("interfaces_integration", "Interfaces / Integration Points"),
    ("quality_attributes", "Quality Attributes"),
    ("related_components", "Related Components"),
    ("other", "Other"),
)

# "scope" covers both scope_in and scope_out.
JOB_HEADINGS: tuple[tuple[str, str], ...] = (
    ("context_why", "Context / Why"),
    ("outcome_dod", "Outcome / Definition of Done"),
    ("scope", "Scope"),
    ("requirements_constraints", "Requirements / Constraints"),
    ("dependencies", "Dependencies"),
    ("approach", "Approach (brief plan)"),
    ("risks", "Risks"),
    ("validation_test_plan", "Validation / Test Plan"),
)

DETAIL_HEADINGS: dict[NodeType, tuple[tuple[str, str], ...]] = {
    NodeType.AREA: AREA_HEADINGS,
    NodeType.COMPONENT: COMPONENT_HEADINGS,
    NodeType.JOB: JOB_HEADINGS,
    NodeType.FREEFORM: (),
}

ESTIMATION_HEADINGS: tuple[tuple[str, str], ...] = (
    ("work_type", "Type"),
    ("assumptions", "Assumptions"),
    ("effort", "Effort (hours)"),
    ("confidence", "Confidence"),
    ("schedule", "Schedule"),
    ("post_estimate_notes", "Post-estimate notes"),
)

IN_SCOPE = "**In scope:**"
OUT_OF_SCOPE = "**Out of scope:**"
SCOPE_LABELS: tuple[tuple[str, str], ...] = (("scope_in", IN_SCOPE), ("scope_out", OUT_OF_SCOPE))
METHOD_LABEL = "**Method:**"
ESTIMATE_LABEL = "**Estimate:**"
MILESTONE_SEPARATOR = "—"

POST_ESTIMATE_LABELS: tuple[tuple[str, str], ...] = (
    ("could_be_smaller", "**What could make this smaller?**"),
    ("could_be_bigger", "**What could make this bigger?**"),
    ("ignored_last_time", "**What did I ignore / forget last time?**"),
)

BUFFER_RE = re.compile(
    r"Buffer:\s*(?:([-+]?[\d.]+(?:[eE][-+]?\d+)?)\s*%)?\s*(?:\(reason:\s*(.*)\))?\s*$",
    re.IGNORECASE,
)
NUMBER_RE = re.compile(r"[-+]?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?")
MILESTONE_RE = re.compile(r"^\s+[-*]\s+(.*)$")

_DETAILS = "details"
_ESTIMATION = "estimation"
_NOTES = "notes"
_TAGS = "tags"
_KNOWN_SECTIONS = {"details": _DETAILS, "estimation": _ESTIMATION, "notes": _NOTES, "tags": _TAGS}


def _estimation_custom_key(key: str) -> str:
    """Task-level custom key for an unknown Estimation sub-section.

    These render back as H2 sections, so a key that would read as a fixed
    H2 heading is prefixed to keep it a custom section.
    """
    return f"estimation_{key}" if key in _KNOWN_SECTIONS else key


def _body(text: str) -> list[str]:
    return split_lines(text) if text else []


def _format_number(value: float) -> str:
    if not value:
        return ""
    if float(value).is_integer():
        return str(int(value))
    # str() switches to exponent form below 1e-4.
    return format(Decimal(repr(float(value))), "f")


def _parse_number(text: str) -> float:
    match = NUMBER_RE.search(text)
    return float(match.group(0)) if match else 0.0


def _labelled_value(lines: list[str], label: str) -> str | None:
    """Value after ``- <label>:`` on the first line carrying it."""
    pattern = re.compile(rf"^\s*[-*]?\s*{re.escape(label)}:\s*(.*)$", re.IGNORECASE)
    for line in lines:
        match = pattern.match(line)
        if match:
            return match.group(1).strip()
    return None


def _split_blocks(
    lines: list[str], labels: tuple[tuple[str, str], ...]
) -> tuple[list[str], dict[str, list[str]]]:
    """Split *lines* at bold label lines into ``(preamble, {key: lines})``."""
    lookup = {label.lower(): key for key, label in labels}
    preamble: list[str] = []
    blocks: dict[str, list[str]] = {}
    current: list[str] = preamble
    for line in lines:
        key = lookup.get(line.strip().lower())
        if key is not None:
            current = blocks.setdefault(key, [])
            continue
        current.append(line)
    return preamble, blocks


# ---------------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------------


def _section(level: int, title: str, body: list[str]) -> list[str]:
    return [format_heading(level, title), *body, ""]


def _details_lines(details: Details) -> list[str]:
    lines: list[str] = []
    if isinstance(details, FreeformDetails):
        if details.content:
            lines += [*_body(details.content), ""]
    elif isinstance(details, JobDetails):
        for field, title in JOB_HEADINGS:
            if field == "context_why":
                state = COMPLETED if details.completed else ""
                checkbox = render_options(COMPLETION_OPTIONS, state)
                body = [*_body(details.context_why), "", *checkbox]
            elif field == "scope":
                body = [IN_SCOPE, *_body(details.scope_in), ""]
                body += [OUT_OF_SCOPE, *_body(details.scope_out)]
            else:
                body = _body(getattr(details, field))
            lines += _section(3, title, body)
    elif isinstance(details, AreaDetails):
        for field, title in AREA_HEADINGS:
            lines += _section(3, title, _body(getattr(details, field)))
    elif isinstance(details, ComponentDetails):
        for field, title in COMPONENT_HEADINGS:
            lines += _section(3, title, _body(getattr(details, field)))

    for key, value in details.custom.items():
        lines += _section(3, title_from_key(key), _body(value))
    return lines


def _hours_line(label: str, value: float) -> str:
    return f"- {label}: {_format_number(value)}h" if value else f"- {label}:"


def _estimation_lines(estimation: Estimation) -> list[str]:
    effort = estimation.effort
    buffer = "- Buffer:"
    if effort.buffer_percent:
        buffer += f" {_format_number(effort.buffer_percent)}%"
    if effort.buffer_reason:
        buffer += f" (reason: {effort.buffer_reason})"
    effort_body = [
        METHOD_LABEL,
        *render_options(METHOD_OPTIONS, effort.method),
        "",
        ESTIMATE_LABEL,
        _hours_line("Base effort", effort.base_hours),
        buffer,
        _hours_line("Total", effort.total_hours),
    ]

    schedule = estimation.schedule
    schedule_body = [
        f"- Start: {schedule.start_date}".rstrip(),
        f"- Target finish: {schedule.target_finish}".rstrip(),
        "- Milestones:",
        *(f"  - {m.name} {MILESTONE_SEPARATOR} {m.date}".rstrip() for m in schedule.milestones),
    ]

    post = estimation.post_estimate_notes
    post_body: list[str] = []
    for field, label in POST_ESTIMATE_LABELS:
        if post_body:
            post_body.append("")
        post_body += [label, *_body(getattr(post, field))]

    return [
        *_section(3, "Type", render_options(WORK_TYPE_OPTIONS, estimation.work_type)),
        *_section(3, "Assumptions", _body(estimation.assumptions)),
        *_section(3, "Effort (hours)", effort_body),
        *_section(3, "Confidence", render_options(CONFIDENCE_OPTIONS, estimation.confidence)),
        *_section(3, "Schedule", schedule_body),
        *_section(3, "Post-estimate notes", post_body),
    ]


def task_to_text(task: Task, node_type: NodeType | str | None = None) -> str:
    """Render *task* as a task document.

    Details render by their own variant. *node_type* (defaulting to the
    details variant) decides whether an Estimation section is written.
    """
    kind = NodeType(node_type) if node_type else NodeType(task.details.kind)
    lines = [format_task_title(task.id, task.name), "", format_heading(2, "Details"), ""]
    lines += _details_lines(task.details)
    if kind is NodeType.JOB:
        lines += [format_heading(2, "Estimation"), ""]
        lines += _estimation_lines(task.estimation or Estimation())
    lines += _section(2, "Notes", _body(task.notes))
    lines += _section(2, "Tags", [", ".join(task.tags)] if task.tags else [])
    for key, value in task.custom.items():
        lines += _section(2, title_from_key(key), _body(value))
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _parse_tags(lines: list[str]) -> list[str]:
    tags: list[str] = []
    for line in lines:
        for part in line.split(","):
            tag = part.strip()
            if tag and tag not in tags:
                tags.append(tag)
    return tags


def _parse_effort(lines: list[str]) -> Effort:
    buffer_percent, buffer_reason = 0.0, ""
    for line in lines:
        match = BUFFER_RE.search(line)
        if match:
            percent = match.group(1) or ""
            buffer_percent = float(percent) if NUMBER_RE.fullmatch(percent) else 0.0
            buffer_reason = (match.group(2) or "").strip()
            break
    return Effort(
        method=select_option(lines, METHOD_OPTIONS),
        base_hours=_parse_number(_labelled_value(lines, "Base effort") or ""),
        buffer_percent=buffer_percent,
        buffer_reason=buffer_reason,
        total_hours=_parse_number(_labelled_value(lines, "Total") or ""),
    )


def _parse_schedule(lines: list[str]) -> Schedule:
    milestones: list[Milestone] = []
    in_milestones = False
    for line in lines:
        if _labelled_value([line], "Milestones") is not None:
            in_milestones = True
            continue
        match = MILESTONE_RE.match(line) if in_milestones else None
        if match:
            name, _, date = match.group(1).partition(MILESTONE_SEPARATOR)
            milestones.append(Milestone(name=name.strip(), date=date.strip()))
    return Schedule(
        start_date=_labelled_value(lines, "Start") or "",
        target_finish=_labelled_value(lines, "Target finish") or "",
        milestones=milestones,
    )


def _parse_post_notes(lines: list[str]) -> PostEstimateNotes:
    _, blocks = _split_blocks(lines, POST_ESTIMATE_LABELS)
    return PostEstimateNotes(**{key: finalize_section(block) for key, block in blocks.items()})


def _build_estimation(blocks: dict[str, list[str]]) -> Estimation:
    return Estimation(
        work_type=select_option(blocks.get("work_type", []), WORK_TYPE_OPTIONS),
        assumptions=finalize_section(blocks.get("assumptions", [])),
        effort=_parse_effort(blocks.get("effort", [])),
        confidence=select_option(blocks.get("confidence", []), CONFIDENCE_OPTIONS),
        schedule=_parse_schedule(blocks.get("schedule", [])),
        post_estimate_notes=_parse_post_notes(blocks.get("post_estimate_notes", [])),
    )


class _TaskParser:
    """State for one pass over a task document."""

    def __init__(self, node_type: NodeType, track_fences: bool) -> None:
        self.node_type = node_type
        self.fences = FenceTracker() if track_fences else None
        self.detail_lookup = {slugify(title): field for field, title in DETAIL_HEADINGS[node_type]}
        self.estimation_lookup = {slugify(title): field for field, title in ESTIMATION_HEADINGS}

        self.task_id = ""
        self.name = ""
        self.identified = False
        self.seen_h2 = False

        # section is None before the first H2; subsection is None before the first H3.
        self.section: str | tuple[str, str] | None = None
        self.subsection: str | tuple[str, str] | None = None
        self.buffer: list[str] = []

        self.details: dict[str, object] = {}
        self.details_custom: dict[str, str] = {}
        self.estimation_blocks: dict[str, list[str]] = {}
        self.notes: list[str] = []
        self.recovered: list[str] = []
        self.tags: list[str] = []
        self.custom: dict[str, str] = {}

    # -- line dispatch -------------------------------------------------

    def feed(self, line: str) -> None:
        literal = self.fences.feed(line) if self.fences is not None else False
        heading = None if literal else parse_heading(line)
        if heading is None:
            self.buffer.append(line)
            return

        level, title = heading
        if level == 1:
            self._on_h1(title)
        elif level == 2:
            self._flush()
            self.seen_h2 = True
            key = slugify(title)
            self.section = _KNOWN_SECTIONS.get(key, ("custom", key))
            self.subsection = None
        elif level == 3 and self.section == _DETAILS:
            self._flush()
            key = slugify(title)
            self.subsection = self.detail_lookup.get(key, ("custom", key))
        elif level == 3 and self.section == _ESTIMATION and self.node_type is NodeType.JOB:
            self._flush()
            key = slugify(title)
            custom = ("custom", _estimation_custom_key(key))
            self.subsection = self.estimation_lookup.get(key, custom)
        else:
            self.buffer.append(line)

    def _on_h1(self, title: str) -> None:
        identity = None if (self.identified or self.seen_h2) else parse_task_title(title)
        if identity is None:
            self.recovered.append(title)
            return
        self._flush()
        self.task_id, self.name = identity
        self.identified = True

    # -- flushing ------------------------------------------------------

    def _flush(self) -> None:
        lines, self.buffer = self.buffer, []
        section, subsection = self.section, self.subsection

        if section is None:
            self._recover(lines)
        elif section == _DETAILS:
            self._flush_details(subsection, lines)
        elif section == _ESTIMATION:
            if self.node_type is not NodeType.JOB or subsection is None:
                self._recover(lines)
            elif isinstance(subsection, tuple):
                self.custom[subsection[1]] = finalize_section(lines)
            else:
                self.estimation_blocks[subsection] = lines
        elif section == _NOTES:
            self.notes.append(finalize_section(lines))
        elif section == _TAGS:
            self.tags += [tag for tag in _parse_tags(lines) if tag not in self.tags]
        elif isinstance(section, tuple):
            self.custom[section[1]] = finalize_section(lines)

    def _flush_details(self, subsection: str | tuple[str, str] | None, lines: list[str]) -> None:
        if subsection is None:
            if self.node_type is NodeType.FREEFORM:
                self.details["content"] = finalize_section(lines)
            else:
                self._recover(lines)
        elif isinstance(subsection, tuple):
            self.details_custom[subsection[1]] = finalize_section(lines)
        elif subsection == "context_why":
            completed = select_option(lines, COMPLETION_OPTIONS, exact=True)
            self.details["completed"] = completed == COMPLETED
            self.details["context_why"] = finalize_section(strip_options(lines, COMPLETION_OPTIONS))
        elif subsection == "scope":
            preamble, blocks = _split_blocks(lines, SCOPE_LABELS)
            self.details["scope_in"] = finalize_section(preamble + blocks.get("scope_in", []))
            self.details["scope_out"] = finalize_section(blocks.get("scope_out", []))
        else:
            self.details[subsection] = finalize_section(lines)

    def _recover(self, lines: list[str]) -> None:
        text = finalize_section(lines)
        if text:
            self.recovered.append(text)

    # -- result --------------------------------------------------------

    def result(self) -> Task:
        self._flush()
        details = empty_details(self.node_type).model_copy(
            update={**self.details, "custom": self.details_custom}
        )
        estimation = None
        if self.node_type is NodeType.JOB:
            estimation = _build_estimation(self.estimation_blocks)
        return Task(
            id=self.task_id,
            name=self.name,
            details=details,
            estimation=estimation,
            notes=join_blocks(*self.notes, *self.recovered),
            tags=self.tags,
            custom=self.custom,
        )


def text_to_task(text: str, node_type: NodeType | str, *, track_fences: bool = True) -> Task:
    """Parse a task document for a node of *node_type*.

    Never fails: unrecognized structure degrades into custom fields or
    notes. With *track_fences* off, heading-like lines inside fenced code
    blocks are treated as headings.
    """
    parser = _TaskParser(NodeType(node_type), track_fences)
    for line in split_lines(text):
        parser.feed(line)
    return parser.result()
