"""RenderRequest と Archetype の解釈をテストする。"""

from __future__ import annotations

import pytest

from plakat.core.archetype import Archetype
from plakat.core.palettes import DEFAULT_PALETTE_ID, PALETTES, SIGNAL_COLOR, resolve_palette
from plakat.core.request import RenderRequest


def test_archetype_parse_matches_exact_tags() -> None:
    assert Archetype.parse("GRID") is Archetype.GRID
    assert Archetype.parse("grid") is None
    assert Archetype.parse(" GRID ") is None
    assert Archetype.parse(Archetype.DOT_FIELD) is Archetype.DOT_FIELD
    assert Archetype.parse("NOT_REAL") is None
    assert Archetype.parse(3) is None
    assert len(Archetype) == 7


def test_from_mapping_accepts_catalog_spellings() -> None:
    req = RenderRequest.from_mapping({"archetype": "GRID", "paletteId": "MONOCHROME", "seed": -4})
    assert req.palette_id == "MONOCHROME"
    assert req.seed == -4
    assert req.density == 0.5

    req = RenderRequest.from_mapping({"archetype": "GRID", "palette": "COOL_STEEL", "density": 0.9})
    assert req.palette_id == "COOL_STEEL"
    assert req.density == 0.9


def test_from_mapping_keeps_missing_archetype_as_none() -> None:
    req = RenderRequest.from_mapping({"seed": 1})
    assert req.archetype is None
    assert req.archetype_tag == ""


def test_seed_must_be_int() -> None:
    with pytest.raises(TypeError):
        RenderRequest(archetype="GRID", seed=1.5)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        RenderRequest(archetype="GRID", seed=True)


def test_density_out_of_range_is_kept() -> None:
    assert RenderRequest(archetype="GRID", density=3).density == 3.0
    with pytest.raises(ValueError):
        RenderRequest(archetype="GRID", density=float("nan"))


def test_unknown_archetype_tag_is_kept() -> None:
    assert RenderRequest(archetype="nope").archetype_tag == "nope"
    assert RenderRequest(archetype=Archetype.GRID).archetype_tag == "GRID"


def test_palette_table_and_fallback() -> None:
    assert DEFAULT_PALETTE_ID in PALETTES
    assert resolve_palette("NOT_A_PALETTE") is PALETTES[DEFAULT_PALETTE_ID]
    assert resolve_palette(None) is PALETTES[DEFAULT_PALETTE_ID]
    assert resolve_palette("CONSTRUCTIVIST").ink == "#000000"
    assert SIGNAL_COLOR == "#D4A84B"
    for palette in PALETTES.values():
        assert 3 <= len(palette.colors) <= 5
        assert palette.color(99) == palette.ink
    with pytest.raises(TypeError):
        PALETTES["X"] = PALETTES[DEFAULT_PALETTE_ID]  # type: ignore[index]
