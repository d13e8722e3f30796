"""
Email-safe HTML rendering.

``render_block_html`` turns one block into markup. The same function serves
live preview and final export; ``mode`` is only forwarded to custom block
definitions, so both paths produce byte-identical structure for every other
block type. ``wrap_email_html`` puts the concatenated blocks into a fixed-width
container.

Conventions
-----------
- All user text and attribute values are escaped (``& < > " '``). Raw HTML
  blocks and custom block output are emitted verbatim.
- Layout uses inline styles and ``role="presentation"`` tables only, which is
  what mail clients reliably support.
- Custom blocks are re-resolved against the directory immediately before
  rendering. Missing or invalid definitions, a raising ``render_html`` and a
  non-string result all render a visible placeholder.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence
from typing import Any, Final

from blockmail.core.contracts.blocks import (
    BLOCK_ALIGNS,
    ButtonBlock,
    CustomBlockInstance,
    HtmlBlock,
    ImageBlock,
    TableBlock,
    TableCell,
    TextBlock,
    TextRun,
)
from blockmail.core.contracts.custom import RenderMode
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.custom.resolution import resolve_custom_block
from blockmail.core.result import capture
from blockmail.core.settings import get_logger, load_settings
from blockmail.core.tables.layout import resolve_cell_widths
from blockmail.core.text.runs import DEFAULT_STYLE, merge_segments, normalize_runs
from blockmail.core.validation.rules import DEFAULT_FONT_SIZE_PX

_log = get_logger("blockmail.rendering")

FONT_STACK: Final[str] = "Helvetica,Arial,sans-serif"
BUTTON_RADII: Final[dict[str, int]] = {"square": 0, "rounded": 8, "pill": 999}

_ESCAPES: Final[tuple[tuple[str, str], ...]] = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#39;"),
)


def escape_html(value: str) -> str:
    """Escape the five markup-unsafe characters. ``&`` goes first."""
    for raw, entity in _ESCAPES:
        value = value.replace(raw, entity)
    return value


def _align(value: str | None, fallback: str) -> str:
    return value if value in BLOCK_ALIGNS else fallback


def _px(value: float) -> str:
    """Format a number for CSS/HTML: integral values lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return f"{value:.2f}".rstrip("0").rstrip(".")
    return str(value)


# ---------------------------------------------------------------------------
# Leaf blocks
# ---------------------------------------------------------------------------
def render_text_content(text: str, runs: Sequence[TextRun]) -> str:
    """Render ``text`` with a span for every non-default segment of ``runs``."""
    parts: list[str] = []
    for segment in merge_segments(normalize_runs(len(text), runs)):
        content = escape_html(text[segment.start : segment.end])
        if segment.style == DEFAULT_STYLE:
            parts.append(content)
            continue
        styles = []
        if segment.style.bold:
            styles.append("font-weight:700")
        if segment.style.color:
            styles.append(f"color:{escape_html(segment.style.color)}")
        parts.append(f'<span style="{";".join(styles)}">{content}</span>')
    return "".join(parts).replace("\n", "<br />")


def _render_text(block: TextBlock) -> str:
    align = _align(block.align, "left")
    font_size = _px(block.font_size if block.font_size is not None else DEFAULT_FONT_SIZE_PX)
    style = (
        f"text-align:{align};font-family:{FONT_STACK};font-size:{font_size}px;"
        "line-height:1.6;color:#1b1b1b;margin:0 0 12px 0;"
    )
    return f'<div style="{style}">{render_text_content(block.text, block.runs)}</div>'


def _render_button(block: ButtonBlock) -> str:
    align = _align(block.align, "left")
    font_size = _px(block.font_size if block.font_size is not None else DEFAULT_FONT_SIZE_PX)
    styles = ["display:inline-block"]
    if block.background_color:
        styles.append(f"background-color:{escape_html(block.background_color)}")
    if block.text_color:
        styles.append(f"color:{escape_html(block.text_color)}")
    styles += [
        f"border-radius:{BUTTON_RADII.get(block.shape, 0)}px",
        "text-decoration:none",
        f"font-family:{FONT_STACK}",
        f"font-size:{font_size}px",
        "padding:12px 20px",
    ]
    return (
        f'<div style="text-align:{align};margin:0 0 16px 0;">'
        f'<a href="{escape_html(block.url)}" style="{";".join(styles)}">'
        f"{escape_html(block.label)}</a></div>"
    )


def _render_image(block: ImageBlock) -> str:
    display = block.display
    align = _align(display.align, "center")
    style = "display:block;border:0;"
    if display.width_px:
        style += f"width:{_px(display.width_px)}px;"
    if display.height_px:
        style += f"height:{_px(display.height_px)}px;"
    if align == "center":
        style += "margin:0 auto;"
    elif align == "right":
        style += "margin-left:auto;"
    return (
        f'<div style="text-align:{align};margin:0 0 16px 0;">'
        f'<img src="{escape_html(block.url)}" alt="" style="{style}" /></div>'
    )


def _render_html(block: HtmlBlock) -> str:
    return block.content


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------
def _render_cell(
    cell: TableCell,
    width: float,
    padding: float,
    directory: DefinitionDirectory,
    mode: RenderMode,
) -> str:
    inner = "".join(render_block_html(b, directory, mode=mode) for b in cell.blocks)
    w = _px(width)
    return (
        f'<td width="{w}%" valign="top" '
        f'style="width:{w}%;padding:{_px(padding)}px;vertical-align:top;">{inner}</td>'
    )


def _render_table(block: TableBlock, directory: DefinitionDirectory, mode: RenderMode) -> str:
    padding = block.cell_padding
    if padding is None:
        padding = load_settings().table_cell_padding
    rows = []
    for row in block.rows:
        widths = resolve_cell_widths(row, block.column_count)
        cells = "".join(
            _render_cell(cell, width, padding, directory, mode)
            for cell, width in zip(row.cells, widths)
        )
        rows.append(f"<tr>{cells}</tr>")
    return (
        '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0" '
        'style="width:100%;border-collapse:collapse;margin:0 0 16px 0;">'
        f'{"".join(rows)}</table>'
    )


# ---------------------------------------------------------------------------
# Custom blocks
# ---------------------------------------------------------------------------
def render_custom_placeholder(definition_id: str, reason: str) -> str:
    """Visible stand-in for a custom block that cannot be rendered.

    ``reason`` is ``"missing"`` (no definition) or ``"invalid"`` (anything else).
    """
    title = "Missing custom block" if reason == "missing" else "Invalid custom block"
    detail = f": {escape_html(definition_id)}" if definition_id else ""
    return (
        '<div style="border:1px dashed #f59e0b;background:#fffbeb;padding:12px;'
        f"border-radius:8px;font-family:{FONT_STACK};color:#92400e;margin:0 0 16px 0;\">"
        f"<strong>{title}{detail}</strong>"
        '<div style="font-size:13px;margin-top:6px;">'
        "This block cannot be rendered. The configuration is preserved.</div></div>"
    )


def _render_custom(
    block: CustomBlockInstance, directory: DefinitionDirectory, mode: RenderMode
) -> str:
    resolution = resolve_custom_block(block, directory)
    if resolution.definition is None:
        _log.info("Custom block %s: no definition %r", block.id, block.definition_id)
        return render_custom_placeholder(block.definition_id, "missing")
    if not resolution.is_ready:
        _log.warning("Custom block %s is invalid: %s", block.id, "; ".join(resolution.errors))
        return render_custom_placeholder(block.definition_id, "invalid")

    rendered = capture(
        resolution.definition.render_html, copy.deepcopy(resolution.config), {"mode": mode}
    )
    if rendered.is_err():
        _log.warning("Custom block %s render failed: %s", block.id, rendered.unwrap_err())
        return render_custom_placeholder(block.definition_id, "invalid")
    html = rendered.unwrap()
    if not isinstance(html, str):
        _log.warning(
            "Custom block %s render returned %s, expected str", block.id, type(html).__name__
        )
        return render_custom_placeholder(block.definition_id, "invalid")
    return html


# ---------------------------------------------------------------------------
# Public surface
# ---------------------------------------------------------------------------
def render_block_html(
    block: Any, directory: DefinitionDirectory, *, mode: RenderMode = "preview"
) -> str:
    """Render a single block (top level or cell content) to markup.

    Parameters
    ----------
    block : Block
        Any block variant.
    directory : DefinitionDirectory
        Used to resolve custom blocks, including ones nested in cells.
    mode : {"preview", "export"}
        Forwarded to custom block definitions as ``context["mode"]``.
    """
    if isinstance(block, TextBlock):
        return _render_text(block)
    if isinstance(block, ButtonBlock):
        return _render_button(block)
    if isinstance(block, ImageBlock):
        return _render_image(block)
    if isinstance(block, HtmlBlock):
        return _render_html(block)
    if isinstance(block, TableBlock):
        return _render_table(block, directory, mode)
    if isinstance(block, CustomBlockInstance):
        return _render_custom(block, directory, mode)
    return ""


def wrap_email_html(content: str, width_px: int) -> str:
    """Wrap rendered blocks in a complete document with a centered fixed-width column."""
    width = _px(width_px)
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="UTF-8" />'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0" />'
        "<title></title></head>"
        '<body style="margin:0;padding:0;background-color:#f4f4f5;">'
        '<table role="presentation" width="100%" cellpadding="0" cellspacing="0" border="0" '
        'style="width:100%;background-color:#f4f4f5;">'
        '<tr><td align="center" style="padding:24px 0;">'
        f'<table role="presentation" width="{width}" cellpadding="0" cellspacing="0" border="0" '
        f'style="width:{width}px;max-width:100%;background-color:#ffffff;">'
        f'<tr><td style="padding:24px;">{content}</td></tr>'
        "</table></td></tr></table></body></html>"
    )


__all__ = [
    "escape_html",
    "render_block_html",
    "render_custom_placeholder",
    "render_text_content",
    "wrap_email_html",
]
