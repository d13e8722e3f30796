"""Configuration merging for custom blocks.

The effective configuration of a custom block is built from three layers, in
increasing priority:

1. each schema field's declared ``default``,
2. the definition's ``default_config``,
3. the instance's own ``config`` (or caller overrides at creation time).
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from blockmail.core.contracts.custom import CustomBlockDefinition


def deep_merge(base: Any, override: Any) -> Any:
    """Merge ``override`` onto ``base`` without mutating either.

    Mappings merge key by key, recursively. Any other value, lists included,
    is replaced wholesale by the override. Only a key missing from the
    override keeps the base value; an explicit ``None`` replaces it.
    """
    if isinstance(base, Mapping) and isinstance(override, Mapping):
        merged: dict[str, Any] = {k: copy.deepcopy(v) for k, v in base.items()}
        for key, value in override.items():
            merged[key] = deep_merge(base.get(key), value)
        return merged
    return copy.deepcopy(override)


def schema_defaults(definition: CustomBlockDefinition) -> dict[str, Any]:
    """Collect the per-field defaults declared by the settings schema."""
    return {
        field.key: copy.deepcopy(field.default)
        for field in definition.settings_schema.fields
        if field.default is not None
    }


def merge_config_with_defaults(
    definition: CustomBlockDefinition, config: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Return the effective configuration of an instance of ``definition``."""
    base = deep_merge(schema_defaults(definition), dict(definition.default_config))
    merged = deep_merge(base, dict(config or {}))
    return dict(merged)


__all__ = ["deep_merge", "merge_config_with_defaults", "schema_defaults"]
