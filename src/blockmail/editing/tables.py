"""
Table block editing.

Tables are edited as values: each function takes a :class:`TableBlock` and
returns a new one. Rejected edits (unknown row, last row, a variant that is
not allowed in a cell) return the input table unchanged.

New rows always get an even width split (see
:func:`blockmail.core.tables.layout.split_evenly`), so a freshly created or
re-columned table satisfies the row width invariant.
"""

from __future__ import annotations

from collections.abc import Callable

from blockmail.core.contracts.blocks import (
    Block,
    CellBlock,
    TableBlock,
    TableCell,
    TableRow,
    is_cell_block,
)
from blockmail.core.contracts.document import Document
from blockmail.core.ids import new_id
from blockmail.core.settings import load_settings
from blockmail.core.tables.layout import clamp_column_count, split_evenly


# ----- Construction -------------------------------------------------------
def create_table_cell(width_percent: float | None = None) -> TableCell:
    return TableCell(id=new_id(), width_percent=width_percent, blocks=[])


def create_table_row(column_count: int) -> TableRow:
    """A row of ``column_count`` empty cells whose widths total 100."""
    widths = split_evenly(100, column_count)
    return TableRow(id=new_id(), cells=[create_table_cell(w) for w in widths])


def create_table_block(column_count: float) -> TableBlock:
    """Create a table with one row.

    ``column_count`` is rounded and clamped into ``[1, 4]``; cell padding comes
    from ``BLOCKMAIL_TABLE_CELL_PADDING``.
    """
    count = clamp_column_count(column_count)
    return TableBlock(
        id=new_id(),
        rows=[create_table_row(count)],
        column_count=count,
        cell_padding=load_settings().table_cell_padding,
    )


# ----- Rows and columns ---------------------------------------------------
def add_row(table: TableBlock) -> TableBlock:
    count = clamp_column_count(table.column_count)
    return table.model_copy(
        update={"column_count": count, "rows": [*table.rows, create_table_row(count)]}
    )


def delete_row(table: TableBlock, row_id: str) -> TableBlock:
    """Remove row ``row_id``; the last remaining row is never deleted."""
    if len(table.rows) <= 1:
        return table
    rows = [row for row in table.rows if row.id != row_id]
    if len(rows) == len(table.rows):
        return table
    return table.model_copy(update={"rows": rows})


def update_column_count(table: TableBlock, column_count: float) -> TableBlock:
    """Change the number of columns.

    Extra cells are dropped from the right, missing cells are appended, and
    every cell width is overwritten with an even split. An unchanged (clamped)
    count is a no-op.
    """
    count = clamp_column_count(column_count)
    if count == table.column_count:
        return table

    widths = split_evenly(100, count)
    source_rows = table.rows or [create_table_row(count)]
    rows = []
    for row in source_rows:
        cells = list(row.cells[:count])
        while len(cells) < count:
            cells.append(create_table_cell())
        cells = [
            cell.model_copy(update={"width_percent": width})
            for cell, width in zip(cells, widths)
        ]
        rows.append(row.model_copy(update={"cells": cells}))
    return table.model_copy(update={"column_count": count, "rows": rows})


# ----- Lookup -------------------------------------------------------------
def find_table(document: Document, table_id: str) -> TableBlock | None:
    """Return the top-level table ``table_id``, if any."""
    for block in document.blocks:
        if block.id == table_id and isinstance(block, TableBlock):
            return block
    return None


def find_cell(table: TableBlock, cell_id: str) -> TableCell | None:
    for row in table.rows:
        for cell in row.cells:
            if cell.id == cell_id:
                return cell
    return None


def find_cell_block(table: TableBlock, cell_id: str, block_id: str) -> Block | None:
    cell = find_cell(table, cell_id)
    if cell is None:
        return None
    return next((b for b in cell.blocks if b.id == block_id), None)


def _map_cell(
    table: TableBlock, cell_id: str, fn: Callable[[TableCell], TableCell]
) -> TableBlock:
    rows = [
        row.model_copy(
            update={"cells": [fn(cell) if cell.id == cell_id else cell for cell in row.cells]}
        )
        for row in table.rows
    ]
    return table.model_copy(update={"rows": rows})


# ----- Cell content -------------------------------------------------------
def place_block_in_cell(table: TableBlock, cell_id: str, block: CellBlock) -> TableBlock:
    """Make ``block`` the sole content of ``cell_id``, replacing any occupant.

    Tables and custom blocks cannot live in a cell and are rejected.
    """
    if not is_cell_block(block) or find_cell(table, cell_id) is None:
        return table
    return _map_cell(table, cell_id, lambda cell: cell.model_copy(update={"blocks": [block]}))


def update_cell_block(
    table: TableBlock,
    cell_id: str,
    block_id: str,
    updater: Callable[[CellBlock], CellBlock],
) -> TableBlock:
    """Apply ``updater`` to a cell block; a disallowed result is discarded."""
    target = find_cell_block(table, cell_id, block_id)
    if target is None:
        return table
    updated = updater(target)
    if not is_cell_block(updated):
        return table
    return _map_cell(table, cell_id, lambda cell: cell.model_copy(update={"blocks": [updated]}))


def remove_cell_block(table: TableBlock, cell_id: str, block_id: str) -> TableBlock:
    if find_cell_block(table, cell_id, block_id) is None:
        return table
    return _map_cell(
        table,
        cell_id,
        lambda cell: cell.model_copy(
            update={"blocks": [b for b in cell.blocks if b.id != block_id]}
        ),
    )


__all__ = [
    "add_row",
    "create_table_block",
    "create_table_cell",
    "create_table_row",
    "delete_row",
    "find_cell",
    "find_cell_block",
    "find_table",
    "place_block_in_cell",
    "remove_cell_block",
    "update_cell_block",
    "update_column_count",
]
