"""
Document validator.

``validate_document`` walks a document and returns a :class:`ValidationReport`
listing *every* violation as a human-readable string. It never stops at the
first error and never raises for invalid content; a definition that raises
inside its own ``validate`` is reported like any other failure.

Rules by block type
-------------------
- text   : runs in bounds, ascending and non-overlapping; run colors hex or
  null; alignment; font size in [8, 72].
- button : http(s) URL; colors hex or unset; shape; alignment; font size.
- image  : URL (when present) http(s); known status; alignment; positive
  display sizes.
- html   : content is a string.
- table  : 1-4 integer columns; at least one row; non-negative padding; cell
  count per row; row width invariant; at most one block per cell; no table or
  custom block inside a cell; cell blocks validated with the rules above.
- custom : definition id, config, state and read-only tags well formed; when
  the definition resolves, schema and definition validation on the merged
  config. An unresolvable definition adds no further errors.

With ``for_export=True`` the document must also have at least one block and
every image (top level or inside a cell) must be ``ready`` with a valid URL.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from blockmail.core.contracts.blocks import (
    BUTTON_SHAPES,
    CELL_BLOCK_TYPES,
    CUSTOM_BLOCK_STATES,
    IMAGE_STATUSES,
    ButtonBlock,
    CustomBlockInstance,
    HtmlBlock,
    ImageBlock,
    TableBlock,
    TextBlock,
)
from blockmail.core.contracts.document import Document
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.custom.resolution import resolve_custom_block
from blockmail.core.tables.layout import TABLE_COLUMN_MAX, TABLE_COLUMN_MIN, row_width_errors

from .rules import (
    is_number,
    is_valid_align,
    is_valid_font_size,
    is_valid_hex_color,
    is_valid_http_url,
    is_valid_optional_color,
    runs_are_valid,
)


class ValidationReport(BaseModel):
    """Outcome of validating a document."""

    valid: bool
    errors: list[str] = Field(default_factory=list)


def _text_errors(block: TextBlock) -> list[str]:
    errors: list[str] = []
    if not runs_are_valid(block.text, block.runs):
        errors.append(f"Text runs invalid for block {block.id}")
    if any(not is_valid_hex_color(run.color) for run in block.runs):
        errors.append(f"Invalid text run color in block {block.id}")
    if not is_valid_align(block.align):
        errors.append(f"Invalid text alignment in block {block.id}")
    if not is_valid_font_size(block.font_size):
        errors.append(f"Invalid text font size in block {block.id}")
    return errors


def _button_errors(block: ButtonBlock) -> list[str]:
    errors: list[str] = []
    if not is_valid_http_url(block.url):
        errors.append(f"Invalid button URL in block {block.id}")
    if not (
        is_valid_optional_color(block.text_color)
        and is_valid_optional_color(block.background_color)
    ):
        errors.append(f"Invalid button color in block {block.id}")
    if block.shape not in BUTTON_SHAPES:
        errors.append(f"Invalid button shape in block {block.id}")
    if not is_valid_align(block.align):
        errors.append(f"Invalid button alignment in block {block.id}")
    if not is_valid_font_size(block.font_size):
        errors.append(f"Invalid button font size in block {block.id}")
    return errors


def _image_errors(block: ImageBlock, for_export: bool) -> list[str]:
    errors: list[str] = []
    if block.url and not is_valid_http_url(block.url):
        errors.append(f"Invalid image URL in block {block.id}")
    elif for_export and not block.url:
        errors.append(f"Image block {block.id} has no URL")
    if block.status not in IMAGE_STATUSES:
        errors.append(f"Invalid image status in block {block.id}")
    elif for_export and block.status != "ready":
        errors.append(f"Image block {block.id} is not ready for export (status: {block.status})")
    if not is_valid_align(block.display.align):
        errors.append(f"Invalid image alignment in block {block.id}")
    for name, size in (("width", block.display.width_px), ("height", block.display.height_px)):
        if size is not None and not (is_number(size) and size > 0):
            errors.append(f"Invalid image {name} in block {block.id}")
    return errors


def _html_errors(block: HtmlBlock) -> list[str]:
    if not isinstance(block.content, str):
        return [f"Invalid html content in block {block.id}"]
    return []


def _cell_block_errors(block: Any, for_export: bool) -> list[str]:
    if isinstance(block, TextBlock):
        return _text_errors(block)
    if isinstance(block, ButtonBlock):
        return _button_errors(block)
    if isinstance(block, ImageBlock):
        return _image_errors(block, for_export)
    if isinstance(block, HtmlBlock):
        return _html_errors(block)
    return [f"Unknown block type for block {getattr(block, 'id', '?')}"]


def _table_errors(block: TableBlock, for_export: bool) -> list[str]:
    errors: list[str] = []
    if not TABLE_COLUMN_MIN <= block.column_count <= TABLE_COLUMN_MAX:
        errors.append(f"Table block {block.id} has invalid column count")

    if not block.rows:
        errors.append(f"Table block {block.id} must include at least one row")
        return errors

    if block.cell_padding is not None and not (
        is_number(block.cell_padding) and block.cell_padding >= 0
    ):
        errors.append(f"Table block {block.id} has invalid cell padding")

    for row in block.rows:
        if not row.id:
            errors.append(f"Table block {block.id} has row with missing id")
        errors.extend(row_width_errors(row, block.column_count, block.id))

        for cell in row.cells:
            if not cell.id:
                errors.append(f"Table block {block.id} has cell with missing id")
            if len(cell.blocks) > 1:
                errors.append(f"Table block {block.id} cell {cell.id} has multiple blocks")
            for cell_block in cell.blocks:
                if cell_block.type not in CELL_BLOCK_TYPES:
                    errors.append(
                        f"Table block {block.id} cell {cell.id} has invalid block type "
                        f"{cell_block.type}"
                    )
                    continue
                errors.extend(_cell_block_errors(cell_block, for_export))
    return errors


def _custom_errors(block: CustomBlockInstance, directory: DefinitionDirectory) -> list[str]:
    errors: list[str] = []
    if not isinstance(block.definition_id, str) or not block.definition_id:
        errors.append(f"Custom block {block.id} is missing a definitionId")
    if not isinstance(block.config, Mapping):
        errors.append(f"Custom block {block.id} has invalid config payload")
    if block.state not in CUSTOM_BLOCK_STATES:
        errors.append(f"Custom block {block.id} has invalid state")
    if not isinstance(block.read_only, bool):
        errors.append(f"Custom block {block.id} has invalid readOnly flag")

    resolution = resolve_custom_block(block, directory)
    errors.extend(resolution.errors)
    return errors


def validate_block(
    block: Any, directory: DefinitionDirectory, *, for_export: bool = False
) -> list[str]:
    """Return every rule violation of one top-level block."""
    checks: dict[type, Callable[[Any], list[str]]] = {
        TextBlock: _text_errors,
        ButtonBlock: _button_errors,
        ImageBlock: lambda b: _image_errors(b, for_export),
        HtmlBlock: _html_errors,
        TableBlock: lambda b: _table_errors(b, for_export),
        CustomBlockInstance: lambda b: _custom_errors(b, directory),
    }
    check = checks.get(type(block))
    if check is None:
        return [f"Unknown block type for block {getattr(block, 'id', '?')}"]
    return check(block)


def validate_document(
    document: Document, directory: DefinitionDirectory, *, for_export: bool = False
) -> ValidationReport:
    """Validate ``document`` against every structural and reference rule.

    Parameters
    ----------
    document : Document
        The document snapshot to check.
    directory : DefinitionDirectory
        Where custom block definitions are resolved.
    for_export : bool
        Add the rules that only apply to export (non-empty document, ready
        images with URLs).
    """
    errors: list[str] = []
    if not document.id:
        errors.append("Document id is required")
    if not document.layout.is_consistent():
        errors.append("Document layout is invalid")
    if for_export and not document.blocks:
        errors.append("Document must contain at least one block")

    for block in document.blocks:
        errors.extend(validate_block(block, directory, for_export=for_export))

    return ValidationReport(valid=not errors, errors=errors)


__all__ = ["ValidationReport", "validate_block", "validate_document"]
