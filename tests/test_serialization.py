"""Tests for JSON serialization and validated import."""

from __future__ import annotations

import json

import pytest

from blockmail.core.contracts import CustomBlockInstance, Document, TableBlock, TextBlock
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.pipelines import DocumentValidationError, parse_document, serialize_document
from blockmail.pipelines.serialization import try_parse_document


def test_serialize_uses_wire_names(sample_document: Document) -> None:
    data = json.loads(serialize_document(sample_document))

    assert data["layout"] == {"previewMode": "desktop", "previewWidthPx": 640}
    table = next(b for b in data["blocks"] if b["type"] == "table")
    assert table["columnCount"] == 2 and table["cellPadding"] == 16
    assert table["rows"][0]["cells"][0]["widthPercent"] == 50
    button = next(b for b in data["blocks"] if b["type"] == "button")
    assert button["textColor"] == "#fff" and button["backgroundColor"] == "#0055ff"
    custom = next(b for b in data["blocks"] if b["type"] == "custom")
    assert custom["definitionId"] == "hero" and custom["readOnly"] is False


def test_parse_restores_an_equal_document(
    sample_document: Document, directory: DefinitionDirectory
) -> None:
    parsed = parse_document(serialize_document(sample_document), directory)

    assert parsed == sample_document
    table = parsed.blocks[3]
    assert isinstance(table, TableBlock)
    assert table.rows[0].cells[0].blocks[0].type == "button"


def test_parse_accepts_decoded_mapping(directory: DefinitionDirectory) -> None:
    payload = {
        "id": "d",
        "layout": {"previewMode": "mobile", "previewWidthPx": 375},
        "blocks": [{"id": "t", "type": "text", "text": "hi", "runs": [], "fontSize": 14}],
    }
    document = parse_document(payload, directory)

    block = document.blocks[0]
    assert isinstance(block, TextBlock) and block.font_size == 14


def test_malformed_json_is_reported(directory: DefinitionDirectory) -> None:
    with pytest.raises(DocumentValidationError) as excinfo:
        parse_document('{"id": "d", "blocks": [', directory)

    assert len(excinfo.value.errors) == 1
    assert excinfo.value.errors[0].startswith("Invalid JSON:")


def test_structural_errors_list_each_problem(directory: DefinitionDirectory) -> None:
    payload = {
        "layout": {"previewMode": "mobile", "previewWidthPx": 375},
        "blocks": [{"id": "x", "type": "video"}],
    }
    with pytest.raises(DocumentValidationError) as excinfo:
        parse_document(payload, directory)

    errors = excinfo.value.errors
    assert any(e.startswith("id:") for e in errors)
    assert any(e.startswith("blocks.0") for e in errors)


def test_semantic_errors_carry_validator_messages(directory: DefinitionDirectory) -> None:
    payload = json.dumps(
        {
            "id": "d",
            "layout": {"previewMode": "desktop", "previewWidthPx": 375},
            "blocks": [
                {"id": "b", "type": "button", "label": "x", "url": "mailto:a@b.c"},
                {
                    "id": "tbl",
                    "type": "table",
                    "columnCount": 2,
                    "rows": [
                        {
                            "id": "r",
                            "cells": [
                                {"id": "c1", "widthPercent": 40, "blocks": []},
                                {"id": "c2", "widthPercent": 30, "blocks": []},
                            ],
                        }
                    ],
                },
            ],
        }
    )

    result = try_parse_document(payload, directory)

    assert result.is_err()
    assert result.unwrap_err() == [
        "Document layout is invalid",
        "Invalid button URL in block b",
        "Table block tbl row r width must total 100%",
    ]


def test_import_rederives_custom_block_state(directory: DefinitionDirectory) -> None:
    payload = {
        "id": "d",
        "blocks": [
            {
                "id": "g",
                "type": "custom",
                "definitionId": "ghost",
                "config": {"kept": True},
                "state": "ready",
                "readOnly": False,
            },
            {
                "id": "h",
                "type": "custom",
                "definitionId": "hero",
                "config": {"headline": "Hi"},
                "state": "missing-definition",
                "readOnly": True,
            },
        ],
    }
    document = parse_document(payload, directory)

    ghost, hero = document.blocks
    assert isinstance(ghost, CustomBlockInstance) and isinstance(hero, CustomBlockInstance)
    assert (ghost.state, ghost.read_only, ghost.config) == (
        "missing-definition",
        True,
        {"kept": True},
    )
    assert (hero.state, hero.read_only) == ("ready", False)


def test_undecodable_bytes_are_reported(directory: DefinitionDirectory) -> None:
    with pytest.raises(DocumentValidationError) as excinfo:
        parse_document(b'{"id": "\xff"}', directory)

    assert len(excinfo.value.errors) == 1
    assert excinfo.value.errors[0].startswith("Invalid encoding:")
    assert try_parse_document(b"\xff\xfe\xfa", directory).is_err()
