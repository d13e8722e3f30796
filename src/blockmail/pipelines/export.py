"""
Export pipeline: document → complete email HTML.

Flow
----
1. Validate the whole document with the export rules
   (:func:`blockmail.core.validation.document.validate_document` with
   ``for_export=True``).
2. Any error aborts the export; no partial markup is produced and the full
   error list is surfaced through :class:`DocumentValidationError`.
3. Render every top-level block in ``export`` mode (custom blocks are
   re-resolved right before rendering) and concatenate.
4. Wrap the result in a container of ``layout.preview_width_px``.

``try_export_html`` is the non-raising variant returning a
:class:`~blockmail.core.result.Result`.
"""

from __future__ import annotations

from collections.abc import Sequence

from blockmail.core.contracts.document import Document
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.result import Result, err, ok
from blockmail.core.settings import get_logger
from blockmail.core.validation.document import validate_document
from blockmail.rendering.html import render_block_html, wrap_email_html

_log = get_logger("blockmail.export")


class DocumentValidationError(ValueError):
    """Raised when a document fails validation at import or export.

    Attributes
    ----------
    errors : list[str]
        Every violation found, in document order.
    """

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Document is invalid")


def render_document_body(document: Document, directory: DefinitionDirectory) -> str:
    """Render and concatenate every top-level block in export mode."""
    return "".join(
        render_block_html(block, directory, mode="export") for block in document.blocks
    )


def export_html(document: Document, directory: DefinitionDirectory) -> str:
    """Validate ``document`` and render it to a standalone email HTML string.

    Raises
    ------
    DocumentValidationError
        If any validation rule fails; ``errors`` holds the complete list.
    """
    report = validate_document(document, directory, for_export=True)
    if not report.valid:
        _log.warning("Export of %s refused: %d error(s)", document.id, len(report.errors))
        raise DocumentValidationError(report.errors)

    html = wrap_email_html(
        render_document_body(document, directory), document.layout.preview_width_px
    )
    _log.info("Exported document %s (%d blocks)", document.id, len(document.blocks))
    return html


def try_export_html(
    document: Document, directory: DefinitionDirectory
) -> Result[str, list[str]]:
    """Like :func:`export_html` but returns ``Err(errors)`` instead of raising."""
    try:
        return ok(export_html(document, directory))
    except DocumentValidationError as exc:
        return err(exc.errors)


__all__ = ["DocumentValidationError", "export_html", "render_document_body", "try_export_html"]
