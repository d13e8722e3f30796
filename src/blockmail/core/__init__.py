"""Core package initializer for blockmail.

The core holds the data contracts and the pure algorithms (run algebra, table
layout, custom block resolution, validation). Import from the submodules:
    from blockmail.core.settings import load_settings, Settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
