"""Immutable document tree operations."""

from __future__ import annotations

from .custom import create_custom_block, update_custom_block_config
from .document import (
    add_block,
    create_document,
    delete_block,
    find_block,
    reorder_blocks,
    replace_block,
    set_preview_mode,
    update_block,
)
from .moves import move_block_to_cell, move_cell_block_to_cell, move_cell_block_to_top_level
from .tables import (
    add_row,
    create_table_block,
    create_table_cell,
    create_table_row,
    delete_row,
    find_cell,
    find_cell_block,
    find_table,
    place_block_in_cell,
    remove_cell_block,
    update_cell_block,
    update_column_count,
)

__all__ = [
    "add_block",
    "add_row",
    "create_custom_block",
    "create_document",
    "create_table_block",
    "create_table_cell",
    "create_table_row",
    "delete_block",
    "delete_row",
    "find_block",
    "find_cell",
    "find_cell_block",
    "find_table",
    "move_block_to_cell",
    "move_cell_block_to_cell",
    "move_cell_block_to_top_level",
    "place_block_in_cell",
    "remove_cell_block",
    "reorder_blocks",
    "replace_block",
    "set_preview_mode",
    "update_block",
    "update_cell_block",
    "update_column_count",
    "update_custom_block_config",
]
