# src/blockmail/cli.py
"""
blockmail Command Line Interface (CLI).

This module implements the terminal interface using `typer` and `rich`.

Features
--------
- **validate**: Parse a JSON document and list every validation error.
- **export**: Validate with the export rules and write the email HTML.
- **definitions**: Show the custom block definitions known to the CLI.

Custom blocks are resolved against the module-level ``directory`` (which an
embedding application may populate before invoking ``app``) plus every
definition named in ``BLOCKMAIL_DEFINITIONS``, a comma-separated list of
``module:attribute`` references.

Usage
-----
    $ blockmail validate newsletter.json
    $ BLOCKMAIL_DEFINITIONS=shop.blocks:HERO blockmail export newsletter.json -o out.html
"""

from __future__ import annotations

import traceback
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from blockmail.core.contracts.custom import CustomBlockDefinition
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.custom.loader import DefinitionLoadError, import_definitions, parse_references
from blockmail.core.settings import load_settings
from blockmail.core.validation.document import validate_document
from blockmail.editing.document import set_preview_mode
from blockmail.pipelines.export import DocumentValidationError, export_html
from blockmail.pipelines.serialization import parse_document

# Ensure env vars (BLOCKMAIL_*, LOG_LEVEL) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="blockmail: validate and export block-based email documents.",
    rich_markup_mode="markdown",
)
console = Console()
err_console = Console(stderr=True)

directory = DefinitionDirectory()


class PreviewChoice(str, Enum):
    mobile = "mobile"
    desktop = "desktop"


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _print_errors(title: str, errors: list[str]) -> None:
    """Render an error list as a numbered panel on stderr."""
    body = "\n".join(f"[red]{i:>3}.[/red] {message}" for i, message in enumerate(errors, 1))
    err_console.print(Panel(body, title=f"{title} ({len(errors)})", border_style="red"))


def _fail(message: str, exc: Exception, verbose: bool = False) -> typer.Exit:
    """Print an I/O failure; tracebacks follow with `--verbose` or in the dev environment."""
    err_console.print(f"[bold red]❌ {message}:[/bold red] {exc}")
    if verbose or load_settings().is_dev:
        traceback.print_exc()
    return typer.Exit(code=1)


def _active_directory() -> DefinitionDirectory:
    """The module-level directory plus definitions named in `BLOCKMAIL_DEFINITIONS`.

    A configured definition whose id is already known is skipped.
    """
    references = parse_references(load_settings().definitions)
    if not references:
        return directory
    extra: dict[str, CustomBlockDefinition] = {}
    for definition in import_definitions(references):
        if definition.id not in directory:
            extra.setdefault(definition.id, definition)
    return DefinitionDirectory([*directory.list_all(), *extra.values()])


def _load_directory() -> DefinitionDirectory:
    try:
        return _active_directory()
    except DefinitionLoadError as e:
        err_console.print(f"[bold red]❌ Definition Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e


FileArgument = Annotated[
    Path,
    typer.Argument(
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        help="Path to a JSON document.",
    ),
]


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def validate(
    file: FileArgument,
    for_export: Annotated[
        bool,
        typer.Option("--export", help="Also apply the export-only rules (ready images, ...)."),
    ] = False,
) -> None:
    """
    Validate a document and print every error found.

    Exits with code 1 when the document is invalid.
    """
    active = _load_directory()
    try:
        document = parse_document(file.read_bytes(), active)
    except DocumentValidationError as e:
        _print_errors(f"Invalid document: {file.name}", e.errors)
        raise typer.Exit(code=1) from e
    except OSError as e:
        raise _fail("I/O Error", e) from e

    if for_export:
        report = validate_document(document, active, for_export=True)
        if not report.valid:
            _print_errors(f"Not exportable: {file.name}", report.errors)
            raise typer.Exit(code=1)

    console.print(
        f"[bold green]✅ {file.name} is valid[/bold green] "
        f"({len(document.blocks)} blocks, {document.layout.preview_mode})"
    )


@app.command()  # type: ignore[misc]
def export(
    file: FileArgument,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the HTML here instead of stdout."),
    ] = None,
    mode: Annotated[
        PreviewChoice | None,
        typer.Option("--mode", "-m", help="Override the document preview mode."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Export a document to email HTML.

    Nothing is written when validation fails; every error is listed instead.
    """
    active = _load_directory()
    try:
        document = parse_document(file.read_bytes(), active)
        if mode is not None:
            document = set_preview_mode(document, mode.value)
        html = export_html(document, active)
    except DocumentValidationError as e:
        _print_errors(f"Export failed: {file.name}", e.errors)
        raise typer.Exit(code=1) from e
    except OSError as e:
        raise _fail("I/O Error", e, verbose) from e

    if output is None:
        typer.echo(html)
        return

    try:
        output.write_text(html, encoding="utf-8")
    except OSError as e:
        raise _fail(f"Failed to save to {output}", e, verbose) from e
    console.print(
        Panel(
            f"Saved to: [link=file://{output}]{output}[/link]",
            title="Export",
            border_style="green",
        )
    )


@app.command()  # type: ignore[misc]
def definitions() -> None:
    """
    List the custom block definitions available to the other commands.

    Definitions come from `BLOCKMAIL_DEFINITIONS` (comma-separated
    `module:attribute` references) and from any registered by an embedding
    application.
    """
    active = _load_directory()
    if not len(active):
        console.print(
            "[dim]No custom block definitions registered. "
            "Set BLOCKMAIL_DEFINITIONS to load some.[/dim]"
        )
        return

    table = Table(title="Custom block definitions")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Fields")
    for definition in active.list_all():
        fields = ", ".join(
            f"{f.key}{'*' if f.required else ''}" for f in definition.settings_schema.fields
        )
        table.add_row(definition.id, definition.display_name, fields or "-")
    console.print(table)


if __name__ == "__main__":
    app()
