"""Document and layout contracts.

A :class:`Document` is an ordered list of top-level blocks plus the preview
layout it is designed for. ``previewWidthPx`` is fully determined by
``previewMode`` through :data:`PREVIEW_WIDTHS`; any other pairing is invalid.
"""

from __future__ import annotations

from typing import Final, Literal

from pydantic import Field

from .base import Contract
from .blocks import Block

PreviewMode = Literal["mobile", "desktop"]

PREVIEW_WIDTHS: Final[dict[str, int]] = {
    "mobile": 375,
    "desktop": 640,
}


class LayoutSettings(Contract):
    """Preview mode and the fixed container width derived from it."""

    preview_mode: str = "mobile"
    preview_width_px: int = PREVIEW_WIDTHS["mobile"]

    def is_consistent(self) -> bool:
        """Return True if the width is the one dictated by the mode."""
        return PREVIEW_WIDTHS.get(self.preview_mode) == self.preview_width_px


def layout_for(mode: PreviewMode) -> LayoutSettings:
    """Build a consistent layout for ``mode``."""
    return LayoutSettings(preview_mode=mode, preview_width_px=PREVIEW_WIDTHS[mode])


class Document(Contract):
    """Root of the content tree."""

    id: str
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    blocks: list[Block] = Field(default_factory=list)


__all__ = ["PREVIEW_WIDTHS", "Document", "LayoutSettings", "PreviewMode", "layout_for"]
