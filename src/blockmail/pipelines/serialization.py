"""
JSON serialization of documents.

Documents are written with the camelCase wire names (``previewMode``,
``columnCount``, ``definitionId`` ...). Parsing happens in two stages:

1. **Structure**: JSON syntax and shape (types, required keys, known ``type``
   tags) are checked by Pydantic. Failures become one message per problem.
2. **Semantics**: a structurally valid document goes through the full
   validator; any violation fails the import with the complete list.

On success the stored custom block ``state``/``readOnly`` values are replaced
by a fresh resolution against the directory.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from blockmail.core.contracts.document import Document
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.custom.resolution import refresh_custom_blocks
from blockmail.core.result import Result, err, ok
from blockmail.core.validation.document import validate_document

from .export import DocumentValidationError


def serialize_document(document: Document, *, indent: int | None = 2) -> str:
    """Return ``document`` as JSON using the wire field names."""
    return document.model_dump_json(by_alias=True, indent=indent)


def _structural_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "document"
        messages.append(f"{location}: {error['msg']}")
    return messages


def _load(payload: str | bytes | Mapping[str, Any]) -> Any:
    if isinstance(payload, Mapping):
        return dict(payload)
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise DocumentValidationError(
            [f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})"]
        ) from exc
    except UnicodeDecodeError as exc:
        raise DocumentValidationError(
            [f"Invalid encoding: {exc.reason} at byte {exc.start}"]
        ) from exc


def parse_document(
    payload: str | bytes | Mapping[str, Any], directory: DefinitionDirectory
) -> Document:
    """Parse and validate a serialized document.

    Parameters
    ----------
    payload : str | bytes | Mapping
        JSON text, or an already decoded mapping.
    directory : DefinitionDirectory
        Used to validate and resolve custom blocks.

    Raises
    ------
    DocumentValidationError
        On malformed JSON, structural errors, or any validation rule failure.
    """
    data = _load(payload)
    try:
        document = Document.model_validate(data)
    except ValidationError as exc:
        raise DocumentValidationError(_structural_errors(exc)) from exc

    report = validate_document(document, directory)
    if not report.valid:
        raise DocumentValidationError(report.errors)
    return refresh_custom_blocks(document, directory)


def try_parse_document(
    payload: str | bytes | Mapping[str, Any], directory: DefinitionDirectory
) -> Result[Document, list[str]]:
    try:
        return ok(parse_document(payload, directory))
    except DocumentValidationError as exc:
        return err(exc.errors)


__all__ = ["parse_document", "serialize_document", "try_parse_document"]
