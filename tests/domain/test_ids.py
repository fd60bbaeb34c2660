"""Tests for materialized-path node IDs."""

from __future__ import annotations

import pytest

from planctl.domain.ids import (
    child_id,
    is_valid_id,
    is_within,
    last_segment,
    parent_of,
    rebase_id,
    sorted_ids,
)


class TestValidation:
    @pytest.mark.parametrize("node_id", ["1", "1.2", "10.2.33"])
    def test_valid(self, node_id: str) -> None:
        assert is_valid_id(node_id)

    @pytest.mark.parametrize("node_id", ["", "1.", ".1", "a", "1..2", "1.b"])
    def test_invalid(self, node_id: str) -> None:
        assert not is_valid_id(node_id)


class TestNavigation:
    def test_parent_of(self) -> None:
        assert parent_of("1.2.3") == "1.2"
        assert parent_of("7") is None

    def test_child_id(self) -> None:
        assert child_id(None, 3) == "3"
        assert child_id("1.2", 4) == "1.2.4"

    def test_last_segment(self) -> None:
        assert last_segment("1.2.10") == 10

    def test_is_within(self) -> None:
        assert is_within("1.2", "1.2")
        assert is_within("1.2.5", "1.2")
        assert not is_within("1.20", "1.2")

    def test_rebase_keeps_suffix(self) -> None:
        assert rebase_id("1.2.3.4", "1.2", "5") == "5.3.4"


class TestOrdering:
    def test_numeric_not_lexical(self) -> None:
        assert sorted_ids(["1.10", "1.9", "2", "1"]) == ["1", "1.9", "1.10", "2"]

    def test_parent_before_children(self) -> None:
        assert sorted_ids(["1.1", "1", "1.1.1"]) == ["1", "1.1", "1.1.1"]
