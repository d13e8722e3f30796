"""
Table layout: column counts and cell width arithmetic.

Two width views exist and must not be confused:

- the *stored* widths (``TableCell.width_percent``), which the validator holds
  to the row width invariant (see :func:`row_width_errors`);
- the *rendered* widths from :func:`resolve_cell_widths`, a best-effort fill
  that tolerates partially specified rows.

When every defined width already uses up 100%, ``resolve_cell_widths`` falls
back to the even split for the undefined cells, so the rendered row can exceed
100% while the stored row was rejected by validation. Rendering only ever sees
validated documents during export, so this only shows up in previews.
"""

from __future__ import annotations

import math
from typing import Final

from blockmail.core.contracts.blocks import TableRow

TABLE_COLUMN_MIN: Final[int] = 1
TABLE_COLUMN_MAX: Final[int] = 4
WIDTH_EPSILON: Final[float] = 0.01


def clamp_column_count(count: float) -> int:
    """Round ``count`` to the nearest integer and clamp it to ``[1, 4]``.

    Halves round up; non-finite input clamps to the minimum.
    """
    if not math.isfinite(count):
        return TABLE_COLUMN_MIN
    rounded = math.floor(count + 0.5)
    return min(TABLE_COLUMN_MAX, max(TABLE_COLUMN_MIN, rounded))


def split_evenly(total: int, count: int) -> list[int]:
    """Distribute ``total`` over ``count`` parts that sum exactly to ``total``.

    >>> split_evenly(100, 3)
    [34, 33, 33]
    """
    if count <= 0:
        return []
    base, remainder = divmod(total, count)
    return [base + (1 if index < remainder else 0) for index in range(count)]


def _defined_width(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return float(value)


def resolve_cell_widths(row: TableRow, column_count: int) -> list[float]:
    """Return the percentage width to render for each cell of ``row``.

    - No width defined: even split over ``column_count`` (or the cell count
      when the column count is unknown).
    - Some defined: keep them, share the remaining percentage evenly among the
      others; fall back to the even split when nothing remains.
    - All defined but not totalling 100 (beyond epsilon): rescale proportionally.
    """
    cells = row.cells
    if not cells:
        return []

    fallback = 100 / column_count if column_count > 0 else 100 / len(cells)
    widths = [_defined_width(cell.width_percent) for cell in cells]
    defined = [w for w in widths if w is not None]
    missing = len(widths) - len(defined)

    if not defined:
        return [fallback for _ in cells]

    defined_sum = sum(defined)
    if missing > 0:
        remaining = max(0.0, 100 - defined_sum)
        fill = remaining / missing if remaining > 0 else fallback
        return [w if w is not None else fill for w in widths]

    if defined_sum > 0 and abs(defined_sum - 100) > WIDTH_EPSILON:
        scale = 100 / defined_sum
        return [w * scale for w in defined]
    return defined


def is_valid_width_percent(value: object) -> bool:
    """A stored width is valid when it is a finite number in ``(0, 100]``."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value) and 0 < value <= 100


def row_width_errors(row: TableRow, column_count: int, table_id: str) -> list[str]:
    """Check one row against the cell count and width invariants.

    Width checks are skipped when the cell count is wrong, since the widths of
    a malformed row are meaningless.
    """
    if len(row.cells) != column_count:
        return [
            f"Table block {table_id} row {row.id} has {len(row.cells)} cells "
            f"(expected {column_count})"
        ]

    errors: list[str] = []
    defined_count = 0
    total = 0.0
    for cell in row.cells:
        if cell.width_percent is None:
            continue
        if not is_valid_width_percent(cell.width_percent):
            errors.append(f"Table block {table_id} cell {cell.id} has invalid width")
            continue
        defined_count += 1
        total += cell.width_percent

    if total > 100 + WIDTH_EPSILON:
        errors.append(f"Table block {table_id} row {row.id} width exceeds 100%")

    missing = len(row.cells) - defined_count
    if missing == 0 and abs(total - 100) > WIDTH_EPSILON:
        errors.append(f"Table block {table_id} row {row.id} width must total 100%")
    if missing > 0 and total >= 100 - WIDTH_EPSILON:
        errors.append(
            f"Table block {table_id} row {row.id} width leaves no space for missing cells"
        )
    return errors


__all__ = [
    "TABLE_COLUMN_MAX",
    "TABLE_COLUMN_MIN",
    "WIDTH_EPSILON",
    "clamp_column_count",
    "is_valid_width_percent",
    "resolve_cell_widths",
    "row_width_errors",
    "split_evenly",
]
