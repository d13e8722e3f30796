"""blockmail: block-based rich content documents rendered to email-safe HTML.

The most common entry points are re-exported here::

    from blockmail import DefinitionDirectory, create_document, export_html
"""

from __future__ import annotations

from blockmail.core.contracts import Document
from blockmail.core.custom import DefinitionDirectory, DuplicateDefinitionError
from blockmail.core.validation.document import ValidationReport, validate_document
from blockmail.editing import create_document
from blockmail.pipelines import (
    DocumentValidationError,
    export_html,
    parse_document,
    serialize_document,
    try_export_html,
)
from blockmail.rendering import render_block_html

__all__ = [
    "DefinitionDirectory",
    "Document",
    "DocumentValidationError",
    "DuplicateDefinitionError",
    "ValidationReport",
    "__version__",
    "create_document",
    "export_html",
    "parse_document",
    "render_block_html",
    "serialize_document",
    "try_export_html",
    "validate_document",
]
__version__ = "0.1.0"
