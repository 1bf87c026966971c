"""`plakat.export.svg`（Scene -> SVG 文字列 / ElementTree / ファイル）をテストする。"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from plakat.core.scene import EffectRef, Element, Rotation, Scene
from plakat.export.svg import export_svg, scene_to_element, scene_to_string
from plakat.render.pipeline import render

_SVG = "{http://www.w3.org/2000/svg}"


def _tiny_scene() -> Scene:
    bg = Element.create("rect", {"x": 0, "y": 0, "width": 560, "height": 560, "fill": "#fff"}, role="background")
    poly = Element.create(
        "polygon",
        {"points": ((1, 2.556), (3.1, -0.0001)), "fill": "a&b", "filter": EffectRef("shadow")},
    )
    g = Element.create("g", {"transform": Rotation(45, 10.127, 20)}, children=[poly], role="signal")
    grad = Element.create("linearGradient", {"id": "z1-warm"}, children=[Element.create("stop", {"offset": "0%"})])
    return Scene(
        uid="z1",
        canvas_size=560,
        defs=(grad,),
        elements=(bg, g),
        overlays=(Element.create("rect", {"fill": EffectRef("vignette")}, role="overlay-vignette"),),
        archetype="GRID",
        palette_id="SIGNAL",
        seed=1,
        density=0.5,
    )


def test_scene_to_string_exact_output() -> None:
    text = scene_to_string(_tiny_scene())
    assert text == (
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 560 560" width="560" height="560"'
        ' shape-rendering="geometricPrecision">'
        '<defs><linearGradient id="z1-warm"><stop offset="0%"/></linearGradient></defs>'
        '<rect x="0" y="0" width="560" height="560" fill="#fff" data-role="background"/>'
        '<g transform="rotate(45 10.13 20)" data-role="signal">'
        '<polygon points="1,2.56 3.1,0" fill="a&amp;b" filter="url(#z1-shadow)"/></g>'
        '<rect fill="url(#z1-vignette)" data-role="overlay-vignette"/>'
        "</svg>"
    )


def test_scene_to_string_parses_as_svg() -> None:
    scene = render({"archetype": "CONSTRUCTIVIST", "palette_id": "CONSTRUCTIVIST", "seed": 101})
    assert scene is not None
    root = ET.fromstring(scene_to_string(scene))
    assert root.tag == f"{_SVG}svg"
    assert root.get("viewBox") == "0 0 560 560"
    children = list(root)
    assert children[0].tag == f"{_SVG}defs"
    assert len(children) == 1 + len(scene.elements) + len(scene.overlays)
    ids = {d.get("id") for d in children[0]}
    for node in root.iter():
        for value in node.attrib.values():
            if value.startswith("url(#"):
                assert value[5:-1] in ids


def test_scene_to_element_matches_string() -> None:
    scene = _tiny_scene()
    elem = scene_to_element(scene)
    parsed = ET.fromstring(scene_to_string(scene))
    assert elem.tag == parsed.tag
    assert [c.tag for c in elem.iter()] == [c.tag for c in parsed.iter()]
    assert [dict(c.attrib) for c in elem.iter()] == [dict(c.attrib) for c in parsed.iter()]


def test_export_svg_writes_file(tmp_path: Path) -> None:
    scene = render({"archetype": "FREE_FORM", "seed": 2})
    assert scene is not None
    out = export_svg(scene, tmp_path / "nested" / "art.svg")
    assert out.is_file()
    text = out.read_text(encoding="utf-8")
    assert text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg ')
    assert text.endswith("</svg>\n")
    assert ET.fromstring(text.split("\n", 1)[1]).get("width") == "560"


def test_export_svg_rejects_other_suffix(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export_svg(_tiny_scene(), tmp_path / "art.png")
