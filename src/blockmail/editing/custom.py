"""Custom block instantiation and configuration edits."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from blockmail.core.contracts.blocks import CustomBlockInstance
from blockmail.core.contracts.document import Document
from blockmail.core.custom.config import deep_merge, schema_defaults
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.custom.resolution import apply_resolution
from blockmail.core.ids import new_id


def create_custom_block(
    definition_id: str,
    directory: DefinitionDirectory,
    overrides: Mapping[str, Any] | None = None,
    id: str | None = None,
) -> CustomBlockInstance:
    """Instantiate a custom block of ``definition_id``.

    The stored config is schema defaults, then the definition's default
    config, then ``overrides`` (deep-merged, later layers win). Without a
    registered definition only the overrides are kept and the block is
    ``missing-definition`` and read-only.

    The config is not validated here: a freshly inserted block is ``ready``
    until the next resolution.
    """
    definition = directory.lookup(definition_id)
    base: Any = {}
    if definition is not None:
        base = deep_merge(schema_defaults(definition), dict(definition.default_config))
    config = deep_merge(base, dict(overrides or {}))
    state = "ready" if definition is not None else "missing-definition"
    return CustomBlockInstance(
        id=id or new_id(),
        definition_id=definition_id,
        config=dict(config),
        state=state,
        read_only=definition is None,
    )


def update_custom_block_config(
    document: Document,
    block_id: str,
    config: Mapping[str, Any],
    directory: DefinitionDirectory,
) -> Document:
    """Replace the config of custom block ``block_id`` and re-derive its state.

    Read-only blocks and unknown ids leave the document unchanged.
    """
    blocks = []
    changed = False
    for block in document.blocks:
        if block.id == block_id and isinstance(block, CustomBlockInstance):
            refreshed = apply_resolution(block, directory)
            if refreshed.read_only:
                return document
            updated = block.model_copy(update={"config": dict(config)})
            blocks.append(apply_resolution(updated, directory))
            changed = True
        else:
            blocks.append(block)
    if not changed:
        return document
    return document.model_copy(update={"blocks": blocks})


__all__ = ["create_custom_block", "update_custom_block_config"]
