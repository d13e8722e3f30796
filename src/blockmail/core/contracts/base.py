"""Shared base for every blockmail data contract.

All contracts are *frozen* Pydantic v2 models: an edit never mutates a model in
place, it builds a new one with ``model_copy(update=...)``. Python attributes are
snake_case while the portable document format uses camelCase keys
(``previewWidthPx``, ``readOnly``...). Both spellings are accepted on input;
``model_dump(by_alias=True)`` produces the wire spelling.

Value-domain rules (ranges, colors, URL schemes, enumerated tags) are left to
:mod:`blockmail.core.validation` so that one pass can report every violation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# JSON numbers: keep ints as ints so rendered markup reads ``16px``, not ``16.0px``.
Number = int | float


class Contract(BaseModel):
    """Base model: immutable, camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


__all__ = ["Contract", "Number"]
