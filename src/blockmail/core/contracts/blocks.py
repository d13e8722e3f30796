"""Block contracts: the tagged variants that make up a document.

Every block carries an ``id`` (unique within its document) and a ``type`` tag
used as the Pydantic discriminator:

- ``text``   : :class:`TextBlock` with formatting :class:`TextRun` intervals.
- ``button`` : :class:`ButtonBlock` (label + http(s) link + colors).
- ``image``  : :class:`ImageBlock`; only ``status == "ready"`` is exportable.
- ``html``   : :class:`HtmlBlock`, raw markup passed through verbatim.
- ``table``  : :class:`TableBlock` of rows and cells, each cell holding at
  most one block.
- ``custom`` : :class:`CustomBlockInstance` resolved against a definition
  directory at use time.

Cell contents are typed with the full :data:`Block` union on purpose: a
document that nests a table (or a custom block) inside a cell still
deserializes, and the validator reports the nesting instead of the parser
failing with a generic shape error.
"""

from __future__ import annotations

from typing import Annotated, Any, Final, Literal

from pydantic import Field

from blockmail.core.ids import new_id

from .base import Contract, Number

BlockAlign = Literal["left", "center", "right"]
ButtonShape = Literal["square", "rounded", "pill"]
ImageStatus = Literal["pending", "ready", "uploading", "error"]
CustomBlockState = Literal["ready", "invalid", "missing-definition"]

BLOCK_ALIGNS: Final[tuple[str, ...]] = ("left", "center", "right")
BUTTON_SHAPES: Final[tuple[str, ...]] = ("square", "rounded", "pill")
IMAGE_STATUSES: Final[tuple[str, ...]] = ("pending", "ready", "uploading", "error")
CUSTOM_BLOCK_STATES: Final[tuple[str, ...]] = ("ready", "invalid", "missing-definition")

# Block variants allowed inside a table cell.
CELL_BLOCK_TYPES: Final[frozenset[str]] = frozenset({"text", "button", "image", "html"})


class TextRun(Contract):
    """Half-open interval ``[start, end)`` of a text carrying explicit style."""

    start: int
    end: int
    bold: bool = False
    color: str | None = None


class TextBlock(Contract):
    """Plain text with bold/color runs."""

    id: str = Field(default_factory=new_id)
    type: Literal["text"] = "text"
    text: str = ""
    runs: list[TextRun] = Field(default_factory=list)
    font_size: Number | None = None
    align: str | None = None


class ButtonBlock(Contract):
    """Link rendered as a button. Empty colors mean "unset"."""

    id: str = Field(default_factory=new_id)
    type: Literal["button"] = "button"
    label: str = ""
    url: str = ""
    shape: str = "rounded"
    text_color: str = ""
    background_color: str = ""
    font_size: Number | None = None
    align: str | None = None


class ImageDisplay(Contract):
    """Presentation hints for an image."""

    width_px: Number | None = None
    height_px: Number | None = None
    align: str | None = None


class ImageBlock(Contract):
    """Image reference plus its upload lifecycle status."""

    id: str = Field(default_factory=new_id)
    type: Literal["image"] = "image"
    url: str = ""
    status: str = "pending"
    display: ImageDisplay = Field(default_factory=ImageDisplay)


class HtmlBlock(Contract):
    """Opaque markup, emitted without modification."""

    id: str = Field(default_factory=new_id)
    type: Literal["html"] = "html"
    content: str = ""


class TableCell(Contract):
    """One table slot. ``blocks`` holds at most one block once validated."""

    id: str = Field(default_factory=new_id)
    width_percent: Number | None = None
    blocks: list[Block] = Field(default_factory=list)


class TableRow(Contract):
    id: str = Field(default_factory=new_id)
    cells: list[TableCell] = Field(default_factory=list)


class TableBlock(Contract):
    """Grid of 1-4 columns; every row must have ``column_count`` cells."""

    id: str = Field(default_factory=new_id)
    type: Literal["table"] = "table"
    rows: list[TableRow] = Field(default_factory=list)
    column_count: int = 1
    cell_padding: Number | None = None


class CustomBlockInstance(Contract):
    """Instance of an externally defined block.

    ``state`` and ``read_only`` are derived values. They are stored so that a
    serialized document shows what the editor last saw, but they are recomputed
    from the definition directory whenever the block is resolved.
    """

    id: str = Field(default_factory=new_id)
    type: Literal["custom"] = "custom"
    definition_id: str = ""
    config: dict[str, Any] = Field(default_factory=dict)
    state: str = "ready"
    read_only: bool = False


Block = Annotated[
    TextBlock | ButtonBlock | ImageBlock | HtmlBlock | TableBlock | CustomBlockInstance,
    Field(discriminator="type"),
]
CellBlock = TextBlock | ButtonBlock | ImageBlock | HtmlBlock

TableCell.model_rebuild()
TableRow.model_rebuild()
TableBlock.model_rebuild()


def is_cell_block(block: object) -> bool:
    """Return True if ``block`` may be placed inside a table cell."""
    return isinstance(block, TextBlock | ButtonBlock | ImageBlock | HtmlBlock)


__all__ = [
    "BLOCK_ALIGNS",
    "BUTTON_SHAPES",
    "CELL_BLOCK_TYPES",
    "CUSTOM_BLOCK_STATES",
    "IMAGE_STATUSES",
    "Block",
    "BlockAlign",
    "ButtonBlock",
    "ButtonShape",
    "CellBlock",
    "CustomBlockInstance",
    "CustomBlockState",
    "HtmlBlock",
    "ImageBlock",
    "ImageDisplay",
    "ImageStatus",
    "TableBlock",
    "TableCell",
    "TableRow",
    "TextBlock",
    "TextRun",
    "is_cell_block",
]
