"""Tests for the document validator: every rule, accumulated without short-circuiting."""

from __future__ import annotations

from blockmail.core.contracts import (
    ButtonBlock,
    CustomBlockInstance,
    Document,
    HtmlBlock,
    ImageBlock,
    ImageDisplay,
    LayoutSettings,
    TableBlock,
    TableCell,
    TableRow,
    TextBlock,
    TextRun,
    layout_for,
)
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.validation.document import validate_document


def _doc(*blocks: object) -> Document:
    return Document(id="doc", layout=layout_for("mobile"), blocks=list(blocks))


def _errors(document: Document, directory: DefinitionDirectory, **kwargs: bool) -> list[str]:
    return validate_document(document, directory, **kwargs).errors


def test_sample_document_is_valid(
    sample_document: Document, directory: DefinitionDirectory
) -> None:
    report = validate_document(sample_document, directory, for_export=True)
    assert report.valid, report.errors
    assert report.errors == []


def test_document_level_rules(directory: DefinitionDirectory) -> None:
    document = Document(
        id="", layout=LayoutSettings(preview_mode="mobile", preview_width_px=640), blocks=[]
    )
    assert _errors(document, directory) == [
        "Document id is required",
        "Document layout is invalid",
    ]


def test_text_rules_accumulate(directory: DefinitionDirectory) -> None:
    block = TextBlock(
        id="t1",
        text="abc",
        runs=[TextRun(start=0, end=2, color="red"), TextRun(start=1, end=5)],
        font_size=100,
        align="justify",
    )
    assert _errors(_doc(block), directory) == [
        "Text runs invalid for block t1",
        "Invalid text run color in block t1",
        "Invalid text alignment in block t1",
        "Invalid text font size in block t1",
    ]


def test_font_size_bounds_are_inclusive(directory: DefinitionDirectory) -> None:
    blocks = [TextBlock(id="a", font_size=8), TextBlock(id="b", font_size=72)]
    assert _errors(_doc(*blocks), directory) == []
    assert _errors(_doc(TextBlock(id="c", font_size=7.5)), directory) == [
        "Invalid text font size in block c"
    ]


def test_button_rules(directory: DefinitionDirectory) -> None:
    block = ButtonBlock(
        id="b1",
        url="javascript:alert(1)",
        text_color="#12",
        background_color="",
        shape="blob",
        align="middle",
        font_size=4,
    )
    assert _errors(_doc(block), directory) == [
        "Invalid button URL in block b1",
        "Invalid button color in block b1",
        "Invalid button shape in block b1",
        "Invalid button alignment in block b1",
        "Invalid button font size in block b1",
    ]


def test_button_unset_colors_are_valid(directory: DefinitionDirectory) -> None:
    block = ButtonBlock(id="b1", url="http://example.com/x")
    assert _errors(_doc(block), directory) == []


def test_image_rules(directory: DefinitionDirectory) -> None:
    block = ImageBlock(
        id="i1",
        url="data:image/png;base64,AAA",
        status="lost",
        display=ImageDisplay(align="top", width_px=-10),
    )
    assert _errors(_doc(block), directory) == [
        "Invalid image URL in block i1",
        "Invalid image status in block i1",
        "Invalid image alignment in block i1",
        "Invalid image width in block i1",
    ]


def test_pending_image_without_url_is_fine_outside_export(
    directory: DefinitionDirectory,
) -> None:
    assert _errors(_doc(ImageBlock(id="i1")), directory) == []


def test_export_rules(directory: DefinitionDirectory) -> None:
    uploading = ImageBlock(id="img-9", url="https://cdn.x/a.png", status="uploading")
    empty = ImageBlock(id="img-0", status="ready")

    errors = _errors(_doc(uploading, empty), directory, for_export=True)

    assert errors == [
        "Image block img-9 is not ready for export (status: uploading)",
        "Image block img-0 has no URL",
    ]
    assert _errors(_doc(), directory, for_export=True) == [
        "Document must contain at least one block"
    ]


def test_html_is_permissive(directory: DefinitionDirectory) -> None:
    assert _errors(_doc(HtmlBlock(id="h", content="<p unclosed")), directory) == []


def _table(*rows: TableRow, column_count: int = 2, **kwargs: object) -> TableBlock:
    return TableBlock(id="tbl", column_count=column_count, rows=list(rows), **kwargs)


def test_table_structure_rules(directory: DefinitionDirectory) -> None:
    empty = _table(column_count=5, cell_padding=-1)
    assert _errors(_doc(empty), directory) == [
        "Table block tbl has invalid column count",
        "Table block tbl must include at least one row",
    ]

    padded = _table(
        TableRow(id="r1", cells=[TableCell(id="c1", width_percent=100)]),
        column_count=1,
        cell_padding=-4,
    )
    assert _errors(_doc(padded), directory) == ["Table block tbl has invalid cell padding"]


def test_table_width_invariant(directory: DefinitionDirectory) -> None:
    seventy = _table(
        TableRow(
            id="r1",
            cells=[TableCell(id="a", width_percent=40), TableCell(id="b", width_percent=30)],
        )
    )
    assert _errors(_doc(seventy), directory) == ["Table block tbl row r1 width must total 100%"]

    with_room = _table(
        TableRow(
            id="r1",
            cells=[
                TableCell(id="a", width_percent=40),
                TableCell(id="b", width_percent=30),
                TableCell(id="c"),
            ],
        ),
        column_count=3,
    )
    assert _errors(_doc(with_room), directory) == []


def test_table_cell_content_rules(directory: DefinitionDirectory) -> None:
    inner_table = TableBlock(id="nested", rows=[TableRow(id="nr", cells=[TableCell(id="nc")])])
    table = _table(
        TableRow(
            id="r1",
            cells=[
                TableCell(
                    id="c1",
                    blocks=[TextBlock(id="x"), ButtonBlock(id="bad-btn", url="nope")],
                ),
                TableCell(id="c2", blocks=[inner_table]),
            ],
        )
    )
    assert _errors(_doc(table), directory) == [
        "Table block tbl cell c1 has multiple blocks",
        "Invalid button URL in block bad-btn",
        "Table block tbl cell c2 has invalid block type table",
    ]


def test_custom_block_inside_cell_is_rejected(directory: DefinitionDirectory) -> None:
    custom = CustomBlockInstance(id="cb", definition_id="hero", config={"headline": "x"})
    table = _table(
        TableRow(id="r1", cells=[TableCell(id="c1", blocks=[custom])]), column_count=1
    )
    assert _errors(_doc(table), directory) == [
        "Table block tbl cell c1 has invalid block type custom"
    ]


def test_image_in_cell_follows_export_rules(directory: DefinitionDirectory) -> None:
    table = _table(
        TableRow(
            id="r1",
            cells=[TableCell(id="c1", blocks=[ImageBlock(id="cell-img", status="pending")])],
        ),
        column_count=1,
    )
    assert _errors(_doc(table), directory) == []
    assert _errors(_doc(table), directory, for_export=True) == [
        "Image block cell-img has no URL",
        "Image block cell-img is not ready for export (status: pending)",
    ]


def test_custom_block_rules(directory: DefinitionDirectory) -> None:
    blocks = [
        CustomBlockInstance(id="ok", definition_id="hero", config={"headline": "Hi"}),
        CustomBlockInstance(id="missing-field", definition_id="hero"),
        CustomBlockInstance(
            id="bad-color", definition_id="hero", config={"headline": "Hi", "accent": "blue"}
        ),
        CustomBlockInstance(
            id="weird-state", definition_id="hero", config={"headline": "Hi"}, state="broken"
        ),
        CustomBlockInstance(id="no-def", definition_id=""),
    ]
    assert _errors(_doc(*blocks), directory) == [
        "Custom block missing-field missing required fields: headline",
        "Custom block bad-color field accent: Accent must be a hex color (#RGB or #RRGGBB)",
        "Custom block weird-state has invalid state",
        "Custom block no-def is missing a definitionId",
    ]


def test_unregistered_definition_adds_no_errors(directory: DefinitionDirectory) -> None:
    ghost = CustomBlockInstance(id="g", definition_id="ghost-widget", config={"a": 1})
    assert validate_document(_doc(ghost), directory, for_export=True).valid


def test_every_block_is_checked(directory: DefinitionDirectory) -> None:
    """A failing block never hides errors in later blocks."""
    document = _doc(
        TextBlock(id="t1", align="nowhere"),
        ButtonBlock(id="b1", url="ftp://x"),
        ImageBlock(id="i1", url="https://x.io/i.png", status="error"),
    )
    errors = _errors(document, directory, for_export=True)
    assert [e.rsplit(" ", 1)[-1] for e in errors[:2]] == ["t1", "b1"]
    assert errors[2].startswith("Image block i1 is not ready")
