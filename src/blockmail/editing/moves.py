"""
Moving blocks between the top level and table cells.

A cell holds at most one block, so a move into an occupied cell is refused
rather than overwriting the occupant. The cell-targeting moves return ``None``
when refused; moving a cell block back to the top level returns the document
unchanged when the source cannot be found.
"""

from __future__ import annotations

import math

from blockmail.core.contracts.blocks import TableBlock, is_cell_block
from blockmail.core.contracts.document import Document

from .tables import (
    find_cell,
    find_cell_block,
    find_table,
    place_block_in_cell,
    remove_cell_block,
)


def _with_tables(document: Document, *tables: TableBlock) -> Document:
    by_id = {table.id: table for table in tables}
    blocks = [by_id.get(block.id, block) for block in document.blocks]
    return document.model_copy(update={"blocks": blocks})


def move_block_to_cell(
    document: Document, block_index: int, table_id: str, cell_id: str
) -> Document | None:
    """Move the top-level block at ``block_index`` into an empty cell."""
    if not 0 <= block_index < len(document.blocks):
        return None
    source = document.blocks[block_index]
    if not is_cell_block(source):
        return None

    table = find_table(document, table_id)
    if table is None:
        return None
    cell = find_cell(table, cell_id)
    if cell is None or cell.blocks:
        return None

    updated = place_block_in_cell(table, cell_id, source)
    remaining = [b for i, b in enumerate(document.blocks) if i != block_index]
    return _with_tables(document.model_copy(update={"blocks": remaining}), updated)


def move_cell_block_to_top_level(
    document: Document,
    table_id: str,
    cell_id: str,
    block_id: str,
    target_index: float,
) -> Document:
    """Take a block out of a cell and insert it among the top-level blocks.

    ``target_index`` is rounded and clamped into ``[0, len(blocks)]``; a
    non-finite index appends.
    """
    table = find_table(document, table_id)
    if table is None:
        return document
    block = find_cell_block(table, cell_id, block_id)
    if block is None:
        return document

    blocks = list(_with_tables(document, remove_cell_block(table, cell_id, block_id)).blocks)
    if math.isfinite(target_index):
        index = min(max(math.floor(target_index + 0.5), 0), len(blocks))
    else:
        index = len(blocks)
    blocks.insert(index, block)
    return document.model_copy(update={"blocks": blocks})


def move_cell_block_to_cell(
    document: Document,
    source_table_id: str,
    source_cell_id: str,
    block_id: str,
    target_table_id: str,
    target_cell_id: str,
) -> Document | None:
    """Move a block from one cell to another empty cell, possibly across tables."""
    if source_table_id == target_table_id and source_cell_id == target_cell_id:
        return None

    source_table = find_table(document, source_table_id)
    target_table = find_table(document, target_table_id)
    if source_table is None or target_table is None:
        return None

    block = find_cell_block(source_table, source_cell_id, block_id)
    if block is None:
        return None
    target_cell = find_cell(target_table, target_cell_id)
    if target_cell is None or target_cell.blocks:
        return None

    if source_table_id == target_table_id:
        updated = place_block_in_cell(
            remove_cell_block(source_table, source_cell_id, block_id), target_cell_id, block
        )
        return _with_tables(document, updated)

    return _with_tables(
        document,
        remove_cell_block(source_table, source_cell_id, block_id),
        place_block_in_cell(target_table, target_cell_id, block),
    )


__all__ = ["move_block_to_cell", "move_cell_block_to_cell", "move_cell_block_to_top_level"]
