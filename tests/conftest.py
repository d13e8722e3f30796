"""Shared fixtures: a hero custom block definition, its directory, sample documents."""

from __future__ import annotations

import sys
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import pytest

from blockmail.core.contracts import (
    ButtonBlock,
    CustomBlockDefinition,
    CustomBlockInstance,
    Document,
    ImageBlock,
    ImageDisplay,
    SettingsField,
    SettingsFieldOption,
    SettingsSchema,
    TableBlock,
    TableCell,
    TableRow,
    TextBlock,
    TextRun,
    ValidationIssue,
    ValidationResult,
    layout_for,
)
from blockmail.core.custom.directory import DefinitionDirectory
from blockmail.core.settings import load_settings


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Iterator[None]:
    """Drop cached settings after each test so env changes never leak."""
    yield
    load_settings.cache_clear()


def _validate_hero(config: Mapping[str, Any]) -> ValidationResult:
    if config.get("headline") == "forbidden":
        return ValidationResult(
            ok=False,
            errors=[ValidationIssue(field="headline", message="Headline is not allowed")],
        )
    return ValidationResult(ok=True)


def _render_hero(config: Mapping[str, Any], context: Mapping[str, Any]) -> str:
    return (
        f'<section class="hero" data-mode="{context["mode"]}" '
        f'style="background:{config["accent"]};">{config["headline"]}</section>'
    )


@pytest.fixture  # type: ignore[misc]
def hero_definition() -> CustomBlockDefinition:
    """A definition with one required field, defaults at both layers and a select."""
    return CustomBlockDefinition(
        id="hero",
        display_name="Hero banner",
        settings_schema=SettingsSchema(
            fields=[
                SettingsField(key="headline", label="Headline", type="string", required=True),
                SettingsField(key="accent", label="Accent", type="color", default="#ff6600"),
                SettingsField(
                    key="layout",
                    label="Layout",
                    type="select",
                    default="wide",
                    options=[
                        SettingsFieldOption(label="Wide", value="wide"),
                        SettingsFieldOption(label="Narrow", value="narrow"),
                    ],
                ),
                SettingsField(
                    key="padding", label="Padding", type="number", min=0, max=64, default=24
                ),
            ]
        ),
        validate=_validate_hero,
        render_html=_render_hero,
        default_config={"style": {"rounded": True, "shadow": "soft"}},
    )


@pytest.fixture  # type: ignore[misc]
def directory(hero_definition: CustomBlockDefinition) -> DefinitionDirectory:
    return DefinitionDirectory([hero_definition])


@pytest.fixture  # type: ignore[misc]
def text_block() -> TextBlock:
    return TextBlock(
        id="txt-1",
        text="Hello <world>\nBye",
        runs=[TextRun(start=0, end=5, bold=True)],
    )


@pytest.fixture  # type: ignore[misc]
def table_block() -> TableBlock:
    """A two-column table whose first cell holds a button."""
    return TableBlock(
        id="tbl-1",
        column_count=2,
        cell_padding=16,
        rows=[
            TableRow(
                id="row-1",
                cells=[
                    TableCell(
                        id="cell-a",
                        width_percent=50,
                        blocks=[
                            ButtonBlock(
                                id="btn-in-cell",
                                label="Shop",
                                url="https://example.com/shop",
                                background_color="#111111",
                                text_color="#ffffff",
                            )
                        ],
                    ),
                    TableCell(id="cell-b", width_percent=50, blocks=[]),
                ],
            )
        ],
    )


@pytest.fixture  # type: ignore[misc]
def sample_document(text_block: TextBlock, table_block: TableBlock) -> Document:
    """A valid, exportable document covering every block type."""
    return Document(
        id="doc-1",
        layout=layout_for("desktop"),
        blocks=[
            text_block,
            ButtonBlock(
                id="btn-1",
                label="Read more",
                url="https://example.com",
                shape="pill",
                text_color="#fff",
                background_color="#0055ff",
            ),
            ImageBlock(
                id="img-1",
                url="https://cdn.example.com/a.png",
                status="ready",
                display=ImageDisplay(width_px=320, height_px=200),
            ),
            table_block,
            CustomBlockInstance(
                id="hero-1", definition_id="hero", config={"headline": "Spring sale"}
            ),
        ],
    )


_DEFINITIONS_SOURCE = '''
from blockmail.core.contracts import CustomBlockDefinition, SettingsSchema, ValidationResult

BANNER = CustomBlockDefinition(
    id="banner",
    display_name="Promo banner",
    settings_schema=SettingsSchema(),
    validate=lambda config: ValidationResult(ok=True),
    render_html=lambda config, context: "<p>promo</p>",
)
NOT_A_DEFINITION = 42


def all_blocks():
    return [BANNER]
'''


@pytest.fixture  # type: ignore[misc]
def definitions_module(tmp_path: Path, monkeypatch: Any) -> str:
    """An importable module exposing definitions; returns its name."""
    name = "blockmail_fixture_blocks"
    (tmp_path / f"{name}.py").write_text(_DEFINITIONS_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, name, raising=False)
    return name
