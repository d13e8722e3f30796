"""
Top-level document operations.

Every function takes a :class:`Document` snapshot and returns a new one; the
input is never modified. Operations that cannot apply (unknown id, index out
of range, identical positions) return the input document itself, so callers
can detect a no-op with ``result is document``.
"""

from __future__ import annotations

from collections.abc import Callable

from blockmail.core.contracts.blocks import Block
from blockmail.core.contracts.document import Document, PreviewMode, layout_for
from blockmail.core.settings import load_settings


def create_document(document_id: str, preview_mode: PreviewMode | None = None) -> Document:
    """Create an empty document.

    The preview mode defaults to ``BLOCKMAIL_DEFAULT_PREVIEW_MODE`` (``mobile``
    unless configured otherwise).
    """
    mode = preview_mode or load_settings().default_preview_mode
    return Document(id=document_id, layout=layout_for(mode), blocks=[])


def set_preview_mode(document: Document, mode: PreviewMode) -> Document:
    """Switch preview mode; the width always follows the mode."""
    layout = layout_for(mode)
    if layout == document.layout:
        return document
    return document.model_copy(update={"layout": layout})


def find_block(document: Document, block_id: str) -> Block | None:
    return next((b for b in document.blocks if b.id == block_id), None)


def add_block(document: Document, block: Block) -> Document:
    """Append ``block`` at the end of the document."""
    return document.model_copy(update={"blocks": [*document.blocks, block]})


def update_block(
    document: Document, block_id: str, updater: Callable[[Block], Block]
) -> Document:
    """Replace the top-level block ``block_id`` with ``updater(block)``."""
    if find_block(document, block_id) is None:
        return document
    blocks = [updater(b) if b.id == block_id else b for b in document.blocks]
    return document.model_copy(update={"blocks": blocks})


def replace_block(document: Document, block_id: str, block: Block) -> Document:
    return update_block(document, block_id, lambda _: block)


def delete_block(document: Document, block_id: str) -> Document:
    blocks = [b for b in document.blocks if b.id != block_id]
    if len(blocks) == len(document.blocks):
        return document
    return document.model_copy(update={"blocks": blocks})


def reorder_blocks(document: Document, from_index: int, to_index: int) -> Document:
    """Move the block at ``from_index`` so that it ends up at ``to_index``.

    Both indices must address existing blocks; otherwise the document is
    returned unchanged.
    """
    count = len(document.blocks)
    if from_index == to_index:
        return document
    if not (0 <= from_index < count and 0 <= to_index < count):
        return document

    blocks = list(document.blocks)
    moved = blocks.pop(from_index)
    blocks.insert(to_index, moved)
    return document.model_copy(update={"blocks": blocks})


__all__ = [
    "add_block",
    "create_document",
    "delete_block",
    "find_block",
    "reorder_blocks",
    "replace_block",
    "set_preview_mode",
    "update_block",
]
