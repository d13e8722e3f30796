"""Custom block definition contracts.

A custom block definition is supplied by code outside the core (a plugin).
It describes its settings with a :class:`SettingsSchema`, provides default
configuration, and exposes two callbacks:

- ``validate(config) -> ValidationResult``
- ``render_html(config, context) -> str`` where ``context["mode"]`` is
  ``"preview"`` or ``"export"``.

Both callbacks are treated as untrusted: callers in
:mod:`blockmail.core.custom.resolution` and :mod:`blockmail.rendering.html`
wrap every invocation so a failing plugin degrades to a validation message or
a placeholder instead of propagating.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import Field

from .base import Contract, Number

SettingsFieldType = Literal[
    "string", "number", "boolean", "color", "select", "url", "html", "richtext"
]
RenderMode = Literal["preview", "export"]


class SettingsFieldOption(Contract):
    label: str
    value: str | Number


class SettingsField(Contract):
    """One configurable setting of a custom block."""

    key: str
    label: str
    type: SettingsFieldType
    required: bool = False
    default: Any = None
    options: list[SettingsFieldOption] | None = None
    min_value: Number | None = Field(default=None, alias="min")
    max_value: Number | None = Field(default=None, alias="max")
    pattern: str | None = None
    help_text: str | None = None


class SettingsSchema(Contract):
    fields: list[SettingsField] = Field(default_factory=list)


class ValidationIssue(Contract):
    """A per-field problem reported by schema or definition validation."""

    field: str
    message: str
    code: str | None = None


class ValidationResult(Contract):
    """Outcome of validating a custom block configuration."""

    ok: bool
    missing_fields: list[str] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)


ValidateFn = Callable[[Mapping[str, Any]], "ValidationResult | Mapping[str, Any]"]
RenderFn = Callable[[Mapping[str, Any], Mapping[str, Any]], str]


@dataclass(frozen=True)
class CustomBlockDefinition:
    """Behavior and schema of one custom block type.

    Attributes
    ----------
    id : str
        Directory key; instances refer to it through ``definition_id``.
    display_name : str
        Human-readable name, used to sort directory listings.
    settings_schema : SettingsSchema
        Field declarations (types, defaults, constraints).
    validate : ValidateFn
        Definition-specific validation. May return a :class:`ValidationResult`
        or an equivalent mapping (``{"ok": ..., "missingFields": [...]}``).
    render_html : RenderFn
        Produces the block markup from a merged configuration.
    default_config : Mapping[str, Any]
        Defaults layered above the per-field schema defaults.
    """

    id: str
    display_name: str
    settings_schema: SettingsSchema
    validate: ValidateFn
    render_html: RenderFn
    default_config: Mapping[str, Any] = field(default_factory=dict)


__all__ = [
    "CustomBlockDefinition",
    "RenderFn",
    "RenderMode",
    "SettingsField",
    "SettingsFieldOption",
    "SettingsFieldType",
    "SettingsSchema",
    "ValidateFn",
    "ValidationIssue",
    "ValidationResult",
]
