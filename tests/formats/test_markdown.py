"""Tests for the shared line-level Markdown helpers."""

from __future__ import annotations

import pytest

from planctl.formats.markdown import (
    FenceTracker,
    finalize_section,
    format_checkbox,
    format_task_title,
    join_blocks,
    normalize_blank_lines,
    parse_checkbox,
    parse_heading,
    parse_task_title,
    slugify,
    split_lines,
    title_from_key,
)


class TestHeadings:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("# Title", (1, "Title")),
            ("## Details  ", (2, "Details")),
            ("###\tTabbed", (3, "Tabbed")),
            ("##", (2, "")),
        ],
    )
    def test_parse(self, line: str, expected: tuple[int, str]) -> None:
        assert parse_heading(line) == expected

    @pytest.mark.parametrize("line", ["#hashtag", "####### seven", " # indented", "text"])
    def test_not_headings(self, line: str) -> None:
        assert parse_heading(line) is None


class TestTaskTitle:
    def test_format(self) -> None:
        assert format_task_title("1.2", "Write parser") == "# Task: 1.2 - Write parser"

    def test_format_without_name(self) -> None:
        assert format_task_title("1.2", "") == "# Task: 1.2 -"

    def test_parse_keeps_dashes_in_name(self) -> None:
        assert parse_task_title("Task: 1.2 - Parse - then render") == ("1.2", "Parse - then render")

    def test_parse_without_name(self) -> None:
        assert parse_task_title("Task: 1.2 -") == ("1.2", "")

    def test_parse_other_h1(self) -> None:
        assert parse_task_title("Meeting notes") is None


class TestCheckboxes:
    def test_round_trip(self) -> None:
        assert parse_checkbox(format_checkbox("Bugfix", True)) == (True, "Bugfix")
        assert parse_checkbox(format_checkbox("Bugfix", False)) == (False, "Bugfix")

    def test_uppercase_and_bare(self) -> None:
        assert parse_checkbox("[X] Done") == (True, "Done")
        assert parse_checkbox("* [ ] Later") == (False, "Later")

    def test_plain_bullet(self) -> None:
        assert parse_checkbox("- Bugfix") is None


class TestKeys:
    def test_slugify_collapses_runs(self) -> None:
        assert slugify("Open  Questions??") == "open_questions"

    def test_slugify_fallback(self) -> None:
        assert slugify("!!!") == "untitled"

    def test_title_from_key(self) -> None:
        assert title_from_key("rollout_plan") == "Rollout Plan"


class TestCapture:
    def test_split_lines_normalizes_newlines(self) -> None:
        assert split_lines("a\r\nb\rc") == ["a", "b", "c"]
        assert split_lines("") == []

    def test_three_blanks_collapse(self) -> None:
        assert normalize_blank_lines(["a", "", "", "", "b"]) == ["a", "", "b"]

    def test_two_blanks_kept(self) -> None:
        assert normalize_blank_lines(["a", "", "", "b"]) == ["a", "", "", "b"]

    def test_finalize_trims_edges(self) -> None:
        assert finalize_section(["", "", "a", "", "", "", "", "b", " "]) == "a\n\nb"

    def test_finalize_is_idempotent(self) -> None:
        once = finalize_section(["a", "", "", "", "b"])
        assert finalize_section(split_lines(once)) == once

    def test_join_blocks_skips_empty(self) -> None:
        assert join_blocks("a", "", "b") == "a\n\nb"


class TestFenceTracker:
    def test_inside_fence_is_literal(self) -> None:
        fences = FenceTracker()
        assert fences.feed("```python") is True
        assert fences.in_fence
        assert fences.feed("# not a heading") is True
        assert fences.feed("```") is True
        assert not fences.in_fence
        assert fences.feed("# heading") is False

    def test_other_marker_does_not_close(self) -> None:
        fences = FenceTracker()
        fences.feed("~~~")
        fences.feed("```")
        assert fences.in_fence
        fences.feed("~~~~")
        assert not fences.in_fence

    def test_shorter_marker_does_not_close(self) -> None:
        fences = FenceTracker()
        fences.feed("````")
        fences.feed("```")
        assert fences.in_fence

    def test_closing_line_with_info_string_stays_open(self) -> None:
        fences = FenceTracker()
        fences.feed("```")
        fences.feed("``` python")
        assert fences.in_fence
