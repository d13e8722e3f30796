"""Custom block support: definition directory, config merging, schema checks, resolution."""

from __future__ import annotations

from .config import deep_merge, merge_config_with_defaults, schema_defaults
from .directory import DefinitionDirectory, DuplicateDefinitionError
from .loader import DefinitionLoadError, import_definitions, parse_references
from .resolution import (
    CustomBlockResolution,
    apply_resolution,
    is_definition_complete,
    refresh_custom_blocks,
    resolve_custom_block,
)
from .schema import validate_settings

__all__ = [
    "CustomBlockResolution",
    "DefinitionDirectory",
    "DefinitionLoadError",
    "DuplicateDefinitionError",
    "apply_resolution",
    "deep_merge",
    "import_definitions",
    "is_definition_complete",
    "merge_config_with_defaults",
    "parse_references",
    "refresh_custom_blocks",
    "resolve_custom_block",
    "schema_defaults",
    "validate_settings",
]
