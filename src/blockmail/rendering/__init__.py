"""Markup rendering for blocks and the email container."""

from __future__ import annotations

from .html import (
    escape_html,
    render_block_html,
    render_custom_placeholder,
    render_text_content,
    wrap_email_html,
)

__all__ = [
    "escape_html",
    "render_block_html",
    "render_custom_placeholder",
    "render_text_content",
    "wrap_email_html",
]
