"""
Importing custom block definitions from ``module:attribute`` references.

Applications that only run the ``blockmail`` command cannot register
definitions in code, so they name them in ``BLOCKMAIL_DEFINITIONS`` as a
comma-separated list such as ``shop.blocks:HERO,shop.blocks:all_blocks``.

Each reference may point to:
- a :class:`CustomBlockDefinition`,
- an iterable of definitions,
- a zero-argument callable returning either of the above.
"""

from __future__ import annotations

import importlib
from collections.abc import Iterable
from typing import Any

from blockmail.core.contracts.custom import CustomBlockDefinition
from blockmail.core.settings import get_logger

_log = get_logger("blockmail.custom")


class DefinitionLoadError(ValueError):
    """Raised when a definition reference cannot be imported or has the wrong shape."""

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(f"Cannot load custom block definitions from {reference!r}: {reason}")
        self.reference = reference


def parse_references(value: str) -> list[str]:
    """Split a comma-separated reference list, dropping blanks."""
    return [part.strip() for part in value.split(",") if part.strip()]


def _as_definitions(reference: str, target: Any) -> list[CustomBlockDefinition]:
    if callable(target) and not isinstance(target, CustomBlockDefinition):
        target = target()
    if isinstance(target, CustomBlockDefinition):
        return [target]
    if isinstance(target, Iterable) and not isinstance(target, str | bytes):
        items = list(target)
        if all(isinstance(item, CustomBlockDefinition) for item in items):
            return items
    raise DefinitionLoadError(reference, "not a CustomBlockDefinition or a collection of them")


def import_definitions(references: Iterable[str]) -> list[CustomBlockDefinition]:
    """Import every referenced definition, in reference order.

    Raises
    ------
    DefinitionLoadError
        If a reference is malformed, its module cannot be imported, the
        attribute is missing, or it does not yield definitions.
    """
    definitions: list[CustomBlockDefinition] = []
    for reference in references:
        module_name, sep, attribute = reference.partition(":")
        if not sep or not module_name or not attribute:
            raise DefinitionLoadError(reference, "expected 'module:attribute'")
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            raise DefinitionLoadError(reference, str(exc)) from exc
        try:
            target = getattr(module, attribute)
        except AttributeError as exc:
            raise DefinitionLoadError(reference, f"no attribute {attribute!r}") from exc

        loaded = _as_definitions(reference, target)
        _log.debug("Loaded %d definition(s) from %s", len(loaded), reference)
        definitions.extend(loaded)
    return definitions


__all__ = ["DefinitionLoadError", "import_definitions", "parse_references"]
