"""Primitive value rules shared by the validator, schema checks and renderer."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from typing import Any, Final
from urllib.parse import urlsplit

from blockmail.core.contracts.blocks import BLOCK_ALIGNS, TextRun

HEX_COLOR_RE: Final[re.Pattern[str]] = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")

FONT_SIZE_MIN_PX: Final[int] = 8
FONT_SIZE_MAX_PX: Final[int] = 72
DEFAULT_FONT_SIZE_PX: Final[int] = 16


def is_number(value: Any) -> bool:
    """True for finite ints/floats; bools are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def is_valid_http_url(value: Any) -> bool:
    """True if ``value`` is an absolute ``http``/``https`` URL with a host."""
    if not isinstance(value, str) or not value:
        return False
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def is_valid_hex_color(value: Any) -> bool:
    """``#RGB`` / ``#RRGGBB``; ``None`` means "no color" and is valid."""
    if value is None:
        return True
    return isinstance(value, str) and HEX_COLOR_RE.fullmatch(value) is not None


def is_valid_optional_color(value: Any) -> bool:
    """Button colors: hex, or empty / ``None`` meaning unset."""
    return value in ("", None) or is_valid_hex_color(value)


def is_valid_align(value: Any) -> bool:
    return value is None or value in BLOCK_ALIGNS


def is_valid_font_size(value: Any) -> bool:
    if value is None:
        return True
    return is_number(value) and FONT_SIZE_MIN_PX <= value <= FONT_SIZE_MAX_PX


def runs_are_valid(text: str, runs: Sequence[TextRun]) -> bool:
    """True if runs are in bounds, non-empty, ascending and non-overlapping."""
    last_end = 0
    for run in runs:
        if run.start < 0 or run.end > len(text) or run.end <= run.start:
            return False
        if run.start < last_end:
            return False
        last_end = run.end
    return True


__all__ = [
    "DEFAULT_FONT_SIZE_PX",
    "FONT_SIZE_MAX_PX",
    "FONT_SIZE_MIN_PX",
    "HEX_COLOR_RE",
    "is_number",
    "is_valid_align",
    "is_valid_font_size",
    "is_valid_hex_color",
    "is_valid_http_url",
    "is_valid_optional_color",
    "runs_are_valid",
]
