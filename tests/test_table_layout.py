"""Tests for column clamping, even splits and cell width resolution."""

from __future__ import annotations

import math

import pytest

from blockmail.core.contracts import TableCell, TableRow
from blockmail.core.tables.layout import (
    clamp_column_count,
    resolve_cell_widths,
    row_width_errors,
    split_evenly,
)


def _row(*widths: float | None) -> TableRow:
    return TableRow(
        id="r",
        cells=[TableCell(id=f"c{i}", width_percent=w) for i, w in enumerate(widths)],
    )


@pytest.mark.parametrize(  # type: ignore[misc]
    ("requested", "expected"),
    [(0, 1), (1, 1), (2.4, 2), (2.5, 3), (4, 4), (5, 4), (-3, 1), (math.nan, 1), (math.inf, 1)],
)
def test_clamp_column_count(requested: float, expected: int) -> None:
    assert clamp_column_count(requested) == expected


def test_split_evenly_gives_remainder_to_first_columns() -> None:
    assert split_evenly(100, 3) == [34, 33, 33]
    assert split_evenly(100, 4) == [25, 25, 25, 25]
    assert sum(split_evenly(100, 3)) == 100
    assert split_evenly(100, 0) == []


def test_resolve_fills_missing_widths() -> None:
    """[60, -, -] over 3 columns → [60, 20, 20]."""
    assert resolve_cell_widths(_row(60, None, None), 3) == [60, 20, 20]


def test_resolve_rescales_when_total_is_off() -> None:
    """[30, 30] over 2 columns → [50, 50]."""
    assert resolve_cell_widths(_row(30, 30), 2) == [50, 50]


def test_resolve_even_split_without_widths() -> None:
    assert resolve_cell_widths(_row(None, None, None, None), 4) == [25, 25, 25, 25]


def test_resolve_keeps_exact_widths() -> None:
    assert resolve_cell_widths(_row(70, 30), 2) == [70, 30]


def test_resolve_falls_back_to_even_value_without_room() -> None:
    """Defined widths already fill the row: the others get the even share."""
    assert resolve_cell_widths(_row(100, None), 2) == [100, 50]


def test_resolve_ignores_non_positive_widths() -> None:
    assert resolve_cell_widths(_row(0, None), 2) == [50, 50]


def test_row_with_all_widths_summing_to_70_fails() -> None:
    errors = row_width_errors(_row(40, 30), 2, "t1")
    assert errors == ["Table block t1 row r width must total 100%"]


def test_row_with_missing_width_and_room_left_passes() -> None:
    assert row_width_errors(_row(40, 30, None), 3, "t1") == []


def test_row_within_epsilon_passes() -> None:
    assert row_width_errors(_row(33.33, 33.33, 33.335), 3, "t1") == []


def test_row_missing_width_without_room_fails() -> None:
    errors = row_width_errors(_row(60, 40, None), 3, "t1")
    assert errors == ["Table block t1 row r width leaves no space for missing cells"]


def test_row_cell_count_mismatch_skips_width_checks() -> None:
    errors = row_width_errors(_row(10, 10), 3, "t1")
    assert errors == ["Table block t1 row r has 2 cells (expected 3)"]


def test_invalid_width_value_is_reported() -> None:
    errors = row_width_errors(_row(150, None), 2, "t1")
    assert "Table block t1 cell c0 has invalid width" in errors
