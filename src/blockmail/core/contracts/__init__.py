"""Public data contracts (documents, blocks, custom block definitions)."""

from __future__ import annotations

from .blocks import (
    BLOCK_ALIGNS,
    BUTTON_SHAPES,
    CELL_BLOCK_TYPES,
    CUSTOM_BLOCK_STATES,
    IMAGE_STATUSES,
    Block,
    ButtonBlock,
    CellBlock,
    CustomBlockInstance,
    HtmlBlock,
    ImageBlock,
    ImageDisplay,
    TableBlock,
    TableCell,
    TableRow,
    TextBlock,
    TextRun,
    is_cell_block,
)
from .custom import (
    CustomBlockDefinition,
    SettingsField,
    SettingsFieldOption,
    SettingsSchema,
    ValidationIssue,
    ValidationResult,
)
from .document import PREVIEW_WIDTHS, Document, LayoutSettings, layout_for

__all__ = [
    "BLOCK_ALIGNS",
    "BUTTON_SHAPES",
    "CELL_BLOCK_TYPES",
    "CUSTOM_BLOCK_STATES",
    "IMAGE_STATUSES",
    "PREVIEW_WIDTHS",
    "Block",
    "ButtonBlock",
    "CellBlock",
    "CustomBlockDefinition",
    "CustomBlockInstance",
    "Document",
    "HtmlBlock",
    "ImageBlock",
    "ImageDisplay",
    "LayoutSettings",
    "SettingsField",
    "SettingsFieldOption",
    "SettingsSchema",
    "TableBlock",
    "TableCell",
    "TableRow",
    "TextBlock",
    "TextRun",
    "ValidationIssue",
    "ValidationResult",
    "is_cell_block",
    "layout_for",
]
