"""
Custom block state resolution.

``state`` and ``read_only`` on a :class:`CustomBlockInstance` are never trusted:
they are recomputed here from the definition directory every time a block is
resolved (at edit time, at import, at validation and right before rendering).

Resolution outcomes
-------------------
- ``missing-definition`` (read-only): no definition is registered under the id.
- ``invalid``: the definition is incomplete, the merged config fails the
  settings schema, or the definition's own ``validate`` rejects it (or raises).
- ``ready``: everything above passed.

Definition callbacks run behind :func:`blockmail.core.result.capture`, so an
exception inside plugin code becomes an error message, never a crash.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from blockmail.core.contracts.blocks import CustomBlockInstance
from blockmail.core.contracts.custom import (
    CustomBlockDefinition,
    SettingsSchema,
    ValidationResult,
)
from blockmail.core.contracts.document import Document
from blockmail.core.result import Result, capture

from .config import merge_config_with_defaults
from .directory import DefinitionDirectory
from .schema import validate_settings


@dataclass(frozen=True, slots=True)
class CustomBlockResolution:
    """Derived view of a custom block against a directory.

    Attributes
    ----------
    state : str
        ``"ready"``, ``"invalid"`` or ``"missing-definition"``.
    read_only : bool
        Forced to True when the definition is missing.
    config : dict[str, Any]
        Effective configuration (defaults merged). Equals the stored config
        when the definition is missing.
    definition : CustomBlockDefinition | None
        The resolved definition, if any.
    errors : list[str]
        Human-readable reasons the block is invalid, each naming the block id.
    """

    state: str
    read_only: bool
    config: dict[str, Any]
    definition: CustomBlockDefinition | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_ready(self) -> bool:
        return self.state == "ready"


def is_definition_complete(definition: CustomBlockDefinition) -> bool:
    """Return True if ``definition`` carries everything needed to validate and render."""
    return bool(
        definition.id
        and definition.display_name
        and isinstance(definition.settings_schema, SettingsSchema)
        and isinstance(definition.default_config, Mapping)
        and callable(definition.validate)
        and callable(definition.render_html)
    )


def _as_validation_result(raw: Any) -> ValidationResult:
    if isinstance(raw, ValidationResult):
        return raw
    return ValidationResult.model_validate(raw)


def _describe(block_id: str, result: ValidationResult) -> list[str]:
    messages: list[str] = []
    if result.missing_fields:
        messages.append(
            f"Custom block {block_id} missing required fields: {', '.join(result.missing_fields)}"
        )
    for issue in result.errors:
        messages.append(f"Custom block {block_id} field {issue.field}: {issue.message}")
    if not result.ok and not messages:
        messages.append(f"Custom block {block_id} failed validation")
    return messages


def run_definition_validate(
    definition: CustomBlockDefinition, config: Mapping[str, Any]
) -> Result[ValidationResult, str]:
    """Call ``definition.validate`` behind the failure boundary."""
    return capture(definition.validate, copy.deepcopy(dict(config))).flat_map(
        lambda raw: capture(_as_validation_result, raw)
    )


def resolve_custom_block(
    block: CustomBlockInstance, directory: DefinitionDirectory
) -> CustomBlockResolution:
    """Derive the state of ``block`` from ``directory``."""
    definition = directory.lookup(block.definition_id) if block.definition_id else None
    if definition is None:
        return CustomBlockResolution(
            state="missing-definition", read_only=True, config=dict(block.config)
        )

    if not is_definition_complete(definition):
        return CustomBlockResolution(
            state="invalid",
            read_only=False,
            config=dict(block.config),
            definition=definition,
            errors=[f"Custom block {block.id} definition {definition.id} is incomplete"],
        )

    merged = merge_config_with_defaults(definition, block.config)
    errors = _describe(block.id, validate_settings(definition.settings_schema, merged))

    outcome = run_definition_validate(definition, merged)
    if outcome.is_err():
        errors.append(
            f"Custom block {block.id} validation threw an error: {outcome.unwrap_err()}"
        )
    else:
        errors.extend(_describe(block.id, outcome.unwrap()))

    return CustomBlockResolution(
        state="invalid" if errors else "ready",
        read_only=False,
        config=merged,
        definition=definition,
        errors=errors,
    )


def apply_resolution(
    block: CustomBlockInstance, directory: DefinitionDirectory
) -> CustomBlockInstance:
    """Return ``block`` with ``state``/``read_only`` rewritten from a fresh resolution.

    The stored ``config`` is left untouched so that defaults are not baked into
    the document.
    """
    resolution = resolve_custom_block(block, directory)
    if block.state == resolution.state and block.read_only == resolution.read_only:
        return block
    return block.model_copy(update={"state": resolution.state, "read_only": resolution.read_only})


def refresh_custom_blocks(document: Document, directory: DefinitionDirectory) -> Document:
    """Re-derive the state of every top-level custom block of ``document``."""
    changed = False
    blocks = []
    for block in document.blocks:
        if isinstance(block, CustomBlockInstance):
            refreshed = apply_resolution(block, directory)
            changed = changed or refreshed is not block
            blocks.append(refreshed)
        else:
            blocks.append(block)
    if not changed:
        return document
    return document.model_copy(update={"blocks": blocks})


__all__ = [
    "CustomBlockResolution",
    "apply_resolution",
    "is_definition_complete",
    "refresh_custom_blocks",
    "resolve_custom_block",
    "run_definition_validate",
]
