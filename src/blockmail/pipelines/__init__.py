"""Pipeline entry points for blockmail.

Currently exposed:

- :func:`export_html` / :func:`try_export_html`: validate then render a
  document to email HTML, implemented in ``export.py``.
- :func:`serialize_document` / :func:`parse_document`: JSON round-trip with
  validation on import, implemented in ``serialization.py``.
"""

from __future__ import annotations

from .export import DocumentValidationError, export_html, render_document_body, try_export_html
from .serialization import parse_document, serialize_document, try_parse_document

__all__ = [
    "DocumentValidationError",
    "export_html",
    "parse_document",
    "render_document_body",
    "serialize_document",
    "try_export_html",
    "try_parse_document",
]
