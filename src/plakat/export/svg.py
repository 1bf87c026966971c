"""
どこで: `src/plakat/export/svg.py`。
何を: Scene を SVG 文字列・ElementTree 部分木・ファイルへ書き出す。
なぜ: 構図計算（Scene）と出力先を分離し、文字列埋め込みと DOM 組み込みの両方に対応するため。
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path
from xml.sax.saxutils import quoteattr

from plakat.core.scene import EffectRef, Element, Rotation, Scene, format_number

_SVG_NS = "http://www.w3.org/2000/svg"
_ROLE_ATTR = "data-role"


def _attr_text(scene: Scene, value: object) -> str:
    """属性値を決定的な文字列へ変換して返す。"""

    if isinstance(value, EffectRef):
        return scene.effect_url(value)
    if isinstance(value, Rotation):
        return f"rotate({format_number(value.angle)} {format_number(value.cx)} {format_number(value.cy)})"
    if isinstance(value, tuple):
        return " ".join(f"{format_number(x)},{format_number(y)}" for x, y in value)
    if isinstance(value, str):
        return value
    return format_number(float(value))  # type: ignore[arg-type]


def _attr_items(scene: Scene, element: Element) -> list[tuple[str, str]]:
    items = [(name, _attr_text(scene, value)) for name, value in element.attrs]
    if element.role is not None:
        items.append((_ROLE_ATTR, element.role))
    return items


def _write_element(scene: Scene, element: Element, out: list[str]) -> None:
    attrs = "".join(f" {name}={quoteattr(text)}" for name, text in _attr_items(scene, element))
    if not element.children:
        out.append(f"<{element.tag}{attrs}/>")
        return
    out.append(f"<{element.tag}{attrs}>")
    for child in element.children:
        _write_element(scene, child, out)
    out.append(f"</{element.tag}>")


def _root_attrs(scene: Scene) -> list[tuple[str, str]]:
    c = int(scene.canvas_size)
    return [
        ("xmlns", _SVG_NS),
        ("viewBox", f"0 0 {c} {c}"),
        ("width", str(c)),
        ("height", str(c)),
        ("shape-rendering", "geometricPrecision"),
    ]


def scene_to_string(scene: Scene, *, xml_declaration: bool = False) -> str:
    """Scene を 1 つの SVG 文書文字列に変換して返す。

    Notes
    -----
    出力順は defs -> プリミティブ層 -> オーバーレイ。同じ Scene からは常にバイト同一。
    """
    out: list[str] = []
    if xml_declaration:
        out.append('<?xml version="1.0" encoding="UTF-8"?>')
    root = "".join(f" {name}={quoteattr(text)}" for name, text in _root_attrs(scene))
    out.append(f"<svg{root}>")
    out.append("<defs>")
    for d in scene.defs:
        _write_element(scene, d, out)
    out.append("</defs>")
    for e in scene.elements:
        _write_element(scene, e, out)
    for o in scene.overlays:
        _write_element(scene, o, out)
    out.append("</svg>")
    return "".join(out)


def _to_et(scene: Scene, element: Element, parent: ET.Element) -> None:
    node = ET.SubElement(parent, f"{{{_SVG_NS}}}{element.tag}")
    for name, text in _attr_items(scene, element):
        node.set(name, text)
    for child in element.children:
        _to_et(scene, child, node)


def scene_to_element(scene: Scene) -> ET.Element:
    """Scene を ElementTree の `svg` 要素（部分木）として返す。

    Notes
    -----
    既存の XML 文書へ埋め込む用途向け。タグは SVG 名前空間付き。
    """
    root = ET.Element(f"{{{_SVG_NS}}}svg")
    for name, text in _root_attrs(scene):
        if name == "xmlns":
            continue
        root.set(name, text)
    defs = ET.SubElement(root, f"{{{_SVG_NS}}}defs")
    for d in scene.defs:
        _to_et(scene, d, defs)
    for e in (*scene.elements, *scene.overlays):
        _to_et(scene, e, root)
    return root


def export_svg(scene: Scene, path: str | Path) -> Path:
    """Scene を SVG ファイルとして保存する。

    Parameters
    ----------
    scene : Scene
        render 済みの Scene。
    path : str or Path
        出力先パス。親ディレクトリは必要に応じて作成する。

    Returns
    -------
    Path
        保存先パス。
    """
    _path = Path(path)
    if _path.suffix.lower() != ".svg":
        raise ValueError(f"SVG の保存先は .svg である必要がある: {_path}")
    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(scene_to_string(scene, xml_declaration=True) + "\n")
    return _path


__all__ = ["export_svg", "scene_to_element", "scene_to_string"]
