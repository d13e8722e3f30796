"""Identifier generation for blocks, rows and cells."""

from __future__ import annotations

import random
import time
import uuid


def new_id() -> str:
    """Return a process-unique identifier.

    A random UUID4 is used when the platform provides a randomness source;
    otherwise fall back to ``block_<nanosecond timestamp>_<random hex>``.
    """
    try:
        return str(uuid.uuid4())
    except NotImplementedError:
        return f"block_{time.time_ns()}_{random.getrandbits(64):x}"


__all__ = ["new_id"]
