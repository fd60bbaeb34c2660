"""Line-level Markdown helpers shared by the document formats.

Only ATX headings (``#`` to ``######`` followed by a space) and task-list
checkboxes are recognized. Everything else passes through as literal
text.
"""

from __future__ import annotations

import re

HEADING_RE = re.compile(r"^(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
TASK_TITLE_RE = re.compile(r"^Task:\s*(\S*)(?:\s+-(?:\s+(.*))?)?$")
CHECKBOX_RE = re.compile(r"^\s*[-*]?\s*\[([ xX])\]\s+(.*)$")
FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")

# Blank runs at least this long collapse to a single blank line.
BLANK_RUN_LIMIT = 3


# ---------------------------------------------------------------------------
# Headings and checkboxes
# ---------------------------------------------------------------------------


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, title)`` when *line* is an ATX heading."""
    match = HEADING_RE.match(line)
    if match is None:
        return None
    return len(match.group(1)), (match.group(2) or "").strip()


def format_heading(level: int, title: str) -> str:
    return f"{'#' * level} {title}"


def format_task_title(task_id: str, name: str) -> str:
    """The identity heading, e.g. ``# Task: 1.2 - Write parser``."""
    return format_heading(1, f"Task: {task_id} - {name}").rstrip()


def parse_task_title(title: str) -> tuple[str, str] | None:
    """Split an H1 title of the form ``Task: <id> - <name>``.

    The name may itself contain ``" - "``; only the first separator counts.
    """
    match = TASK_TITLE_RE.match(title.strip())
    if match is None:
        return None
    return match.group(1), (match.group(2) or "").strip()


def format_checkbox(label: str, checked: bool) -> str:
    return f"- [{'x' if checked else ' '}] {label}"


def parse_checkbox(line: str) -> tuple[bool, str] | None:
    """Return ``(checked, label)`` for a task-list line."""
    match = CHECKBOX_RE.match(line)
    if match is None:
        return None
    return match.group(1) in "xX", match.group(2).strip()


# ---------------------------------------------------------------------------
# Keys and titles
# ---------------------------------------------------------------------------


def slugify(title: str) -> str:
    """Custom-section key for a heading title.

    Examples:
        >>> slugify("Open Questions?")
        'open_questions'
    """
    slug = re.sub(r"[^a-z0-9]+", "_", title.lower()).strip("_")
    return slug or "untitled"


def title_from_key(key: str) -> str:
    """Heading title for a custom-section key.

    Examples:
        >>> title_from_key("open_questions")
        'Open Questions'
    """
    return " ".join(word.capitalize() for word in key.split("_") if word)


# ---------------------------------------------------------------------------
# Free-text capture
# ---------------------------------------------------------------------------


def split_lines(text: str) -> list[str]:
    if not text:
        return []
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def _is_blank(line: str) -> bool:
    return not line.strip()


def normalize_blank_lines(lines: list[str]) -> list[str]:
    """Collapse runs of three or more blank lines to one empty line."""
    result: list[str] = []
    run: list[str] = []
    for line in lines:
        if _is_blank(line):
            run.append(line)
            continue
        if run:
            result.extend([""] if len(run) >= BLANK_RUN_LIMIT else run)
            run = []
        result.append(line)
    if run:
        result.extend([""] if len(run) >= BLANK_RUN_LIMIT else run)
    return result


def trim_blank_lines(lines: list[str]) -> list[str]:
    start, end = 0, len(lines)
    while start < end and _is_blank(lines[start]):
        start += 1
    while end > start and _is_blank(lines[end - 1]):
        end -= 1
    return lines[start:end]


def finalize_section(lines: list[str]) -> str:
    """Turn a captured line buffer into a field value."""
    return "\n".join(trim_blank_lines(normalize_blank_lines(lines)))


def join_blocks(*blocks: str) -> str:
    """Join non-empty text blocks with a blank line between them."""
    return "\n\n".join(block for block in blocks if block)


# ---------------------------------------------------------------------------
# Code fences
# ---------------------------------------------------------------------------


class FenceTracker:
    """Follows fenced code blocks so their lines are never read as headings.

    Call :meth:`feed` once per line, in order. A fence closes on a line of
    the same character at least as long as the opener, with nothing after.
    """

    def __init__(self) -> None:
        self._marker: str | None = None

    @property
    def in_fence(self) -> bool:
        return self._marker is not None

    def feed(self, line: str) -> bool:
        """Advance past *line*; True when it is a fence line or inside a fence."""
        match = FENCE_RE.match(line)
        if self._marker is None:
            if match is not None:
                self._marker = match.group(1)
                return True
            return False
        if match is not None:
            marker = match.group(1)
            closes = (
                marker[0] == self._marker[0]
                and len(marker) >= len(self._marker)
                and not line[match.end() :].strip()
            )
            if closes:
                self._marker = None
        return True
