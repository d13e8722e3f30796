"""Settings-schema validation for custom block configurations.

``validate_settings`` checks a merged configuration against the field
declarations of a :class:`SettingsSchema`:

- required fields must be present and non-empty (``None``, ``""`` and
  whitespace-only strings count as empty) and are reported in
  ``missing_fields``;
- present values must match the field type; numbers honour ``min``/``max``,
  selects must use one of the declared option values, and ``pattern`` is a
  full-match regular expression applied to string values.

Unknown configuration keys are ignored: definitions may keep private state in
their config.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

from blockmail.core.contracts.custom import (
    SettingsField,
    SettingsSchema,
    ValidationIssue,
    ValidationResult,
)
from blockmail.core.validation.rules import is_number, is_valid_hex_color, is_valid_http_url


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_text(field: SettingsField, value: Any) -> str | None:
    if not isinstance(value, str):
        return "must be a string"
    return None


def _check_number(field: SettingsField, value: Any) -> str | None:
    if not is_number(value):
        return "must be a number"
    if field.min_value is not None and value < field.min_value:
        return f"must be at least {field.min_value}"
    if field.max_value is not None and value > field.max_value:
        return f"must be at most {field.max_value}"
    return None


def _check_boolean(field: SettingsField, value: Any) -> str | None:
    return None if isinstance(value, bool) else "must be true or false"


def _check_color(field: SettingsField, value: Any) -> str | None:
    return None if is_valid_hex_color(value) else "must be a hex color (#RGB or #RRGGBB)"


def _check_url(field: SettingsField, value: Any) -> str | None:
    return None if is_valid_http_url(value) else "must be an http(s) URL"


def _check_select(field: SettingsField, value: Any) -> str | None:
    allowed = [option.value for option in field.options or []]
    if value not in allowed:
        return "must be one of: " + ", ".join(str(v) for v in allowed)
    return None


_CHECKS: dict[str, Callable[[SettingsField, Any], str | None]] = {
    "string": _check_text,
    "html": _check_text,
    "richtext": _check_text,
    "number": _check_number,
    "boolean": _check_boolean,
    "color": _check_color,
    "url": _check_url,
    "select": _check_select,
}


def _check_pattern(field: SettingsField, value: Any) -> str | None:
    if not field.pattern or not isinstance(value, str):
        return None
    try:
        matched = re.fullmatch(field.pattern, value) is not None
    except re.error:
        return f"has an invalid pattern {field.pattern!r}"
    return None if matched else f"does not match pattern {field.pattern}"


def validate_settings(schema: SettingsSchema, config: Mapping[str, Any]) -> ValidationResult:
    """Validate ``config`` against ``schema`` and collect every problem."""
    missing: list[str] = []
    issues: list[ValidationIssue] = []

    for field in schema.fields:
        value = config.get(field.key)
        if _is_empty(value):
            if field.required:
                missing.append(field.key)
            continue

        message = _CHECKS[field.type](field, value) or _check_pattern(field, value)
        if message:
            issues.append(
                ValidationIssue(field=field.key, message=f"{field.label} {message}", code=field.type)
            )

    return ValidationResult(ok=not missing and not issues, missing_fields=missing, errors=issues)


__all__ = ["validate_settings"]
