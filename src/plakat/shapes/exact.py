"""
どこで: `src/plakat/shapes/exact.py`。厳密な幾何プリミティブの Element 生成。
何を: 矩形・円・三角形・弧・線・星形などを、幾何パラメータだけから 1 要素として構築する。
なぜ: コンポーザが乱数や状態に触れずに再利用できる基本図形を提供するため。
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from plakat.core.golden import CANVAS_SIZE
from plakat.core.scene import AttrValue, Element, Points, Rotation, format_number as _fmt
from plakat.core.shape_registry import shape

QUARTER_CORNERS = ("tl", "tr", "bl", "br")


def _rotation(angle: float, cx: float, cy: float) -> Rotation | None:
    if float(angle) == 0.0:
        return None
    return Rotation(float(angle), float(cx), float(cy))


def _arc_path(x1: float, y1: float, r: float, large: int, x2: float, y2: float) -> str:
    return (
        f"M {_fmt(x1)} {_fmt(y1)} A {_fmt(r)} {_fmt(r)} 0 {large} 1 {_fmt(x2)} {_fmt(y2)}"
    )


def rotate_points(points: Sequence[tuple[float, float]], angle: float, cx: float, cy: float) -> Points:
    """点列を (cx, cy) 周りに angle [deg] 回転した点列を返す。"""

    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    rad = math.radians(float(angle))
    c = math.cos(rad)
    s = math.sin(rad)
    dx = pts[:, 0] - cx
    dy = pts[:, 1] - cy
    out = np.stack([cx + dx * c - dy * s, cy + dx * s + dy * c], axis=1)
    return tuple((float(px), float(py)) for px, py in out)


@shape
def rect(x: float, y: float, w: float, h: float, fill: AttrValue, opacity: float = 1.0) -> Element:
    return Element.create(
        "rect", {"x": x, "y": y, "width": w, "height": h, "fill": fill, "opacity": opacity}
    )


@shape
def rect_outline(
    x: float, y: float, w: float, h: float, stroke: str, sw: float = 2.0, opacity: float = 1.0
) -> Element:
    return Element.create(
        "rect",
        {
            "x": x,
            "y": y,
            "width": w,
            "height": h,
            "fill": "none",
            "stroke": stroke,
            "stroke-width": sw,
            "opacity": opacity,
        },
    )


@shape
def circle(cx: float, cy: float, r: float, fill: AttrValue, opacity: float = 1.0) -> Element:
    return Element.create("circle", {"cx": cx, "cy": cy, "r": r, "fill": fill, "opacity": opacity})


@shape
def circle_outline(
    cx: float, cy: float, r: float, stroke: str, sw: float = 2.0, opacity: float = 1.0
) -> Element:
    return Element.create(
        "circle",
        {
            "cx": cx,
            "cy": cy,
            "r": r,
            "fill": "none",
            "stroke": stroke,
            "stroke-width": sw,
            "opacity": opacity,
        },
    )


@shape
def semicircle(
    cx: float, cy: float, r: float, rotation: float, fill: str, opacity: float = 1.0
) -> Element:
    """直径を水平に置いた半円。rotation [deg] で (cx, cy) 周りに回す。"""

    d = _arc_path(cx - r, cy, r, 0, cx + r, cy) + " Z"
    return Element.create(
        "path",
        {"d": d, "fill": fill, "opacity": opacity, "transform": _rotation(rotation, cx, cy)},
    )


def triangle_points(cx: float, cy: float, size: float) -> Points:
    """重心 (cx, cy)・一辺 size の上向き正三角形の頂点を返す。"""

    h = size * math.sqrt(3.0) / 2.0
    return (
        (cx, cy - h * 2.0 / 3.0),
        (cx - size / 2.0, cy + h / 3.0),
        (cx + size / 2.0, cy + h / 3.0),
    )


@shape
def triangle(
    cx: float, cy: float, size: float, rotation: float, fill: str, opacity: float = 1.0
) -> Element:
    return Element.create(
        "polygon",
        {
            "points": triangle_points(cx, cy, size),
            "fill": fill,
            "opacity": opacity,
            "transform": _rotation(rotation, cx, cy),
        },
    )


def wedge_points(cx: float, cy: float, width: float, height: float) -> Points:
    return (
        (cx, cy - height / 2.0),
        (cx - width / 2.0, cy + height / 2.0),
        (cx + width / 2.0, cy + height / 2.0),
    )


@shape
def wedge(
    cx: float,
    cy: float,
    width: float,
    height: float,
    rotation: float,
    fill: str,
    opacity: float = 1.0,
) -> Element:
    """鋭い二等辺三角形（楔）。"""

    return Element.create(
        "polygon",
        {
            "points": wedge_points(cx, cy, width, height),
            "fill": fill,
            "opacity": opacity,
            "transform": _rotation(rotation, cx, cy),
        },
    )


@shape
def quarter_circle(
    cx: float, cy: float, r: float, corner: str, fill: str, opacity: float = 1.0
) -> Element:
    """(cx, cy) を要とする四分円。corner は tl / tr / bl / br。"""

    if corner == "tl":
        start, end = (cx, cy - r), (cx + r, cy)
    elif corner == "tr":
        start, end = (cx + r, cy), (cx, cy + r)
    elif corner == "br":
        start, end = (cx, cy + r), (cx - r, cy)
    elif corner == "bl":
        start, end = (cx - r, cy), (cx, cy - r)
    else:
        raise ValueError(f"未知の corner: {corner!r}")
    d = f"M {_fmt(cx)} {_fmt(cy)} L " + _arc_path(*start, r, 0, *end)[2:] + " Z"
    return Element.create("path", {"d": d, "fill": fill, "opacity": opacity})


@shape
def thick_line(
    x1: float, y1: float, x2: float, y2: float, color: str, width: float = 4.0
) -> Element:
    return Element.create(
        "line",
        {
            "x1": x1,
            "y1": y1,
            "x2": x2,
            "y2": y2,
            "stroke": color,
            "stroke-width": width,
            "stroke-linecap": "butt",
        },
    )


@shape
def thin_line(
    x1: float, y1: float, x2: float, y2: float, color: str, width: float = 2.0
) -> Element:
    return Element.create(
        "line", {"x1": x1, "y1": y1, "x2": x2, "y2": y2, "stroke": color, "stroke-width": width}
    )


@shape
def diagonal_line(
    angle: float,
    cx: float,
    cy: float,
    color: str,
    width: float = 1.5,
    *,
    canvas_size: float = CANVAS_SIZE,
) -> Element:
    """(cx, cy) を通り、キャンバスを突き抜ける角度 angle [deg] の直線。"""

    rad = math.radians(angle)
    length = float(canvas_size) * 1.5
    dx = math.cos(rad) * length
    dy = math.sin(rad) * length
    return thin_line(cx - dx, cy - dy, cx + dx, cy + dy, color, width)


@shape
def stripe_block(
    x: float,
    y: float,
    w: float,
    h: float,
    direction: str,
    color: str,
    gap: float = 10.0,
    stroke_width: float = 2.0,
) -> Element:
    """等間隔の平行線で埋めた矩形ブロック（`g`）。direction は vertical / horizontal。"""

    if gap <= 0:
        raise ValueError("gap は正の値である必要がある")
    lines: list[Element] = []
    if direction == "vertical":
        px = x
        while px <= x + w:
            lines.append(thin_line(px, y, px, y + h, color, stroke_width))
            px += gap
    else:
        py = y
        while py <= y + h:
            lines.append(thin_line(x, py, x + w, py, color, stroke_width))
            py += gap
    return Element.create("g", {"opacity": 0.35}, children=lines)


@shape
def crosshatch(
    x: float,
    y: float,
    w: float,
    h: float,
    color: str,
    gap: float = 8.0,
    sw: float = 1.0,
    opacity: float = 0.2,
) -> Element:
    """45° の斜線群（`g`）。"""

    if gap <= 0:
        raise ValueError("gap は正の値である必要がある")
    lines: list[Element] = []
    span = max(w, h)
    d = -span
    while d <= span:
        if x + d < x + w and y < y + h:
            lines.append(thin_line(x + d, y, x + d + h, y + h, color, sw))
        d += gap
    return Element.create("g", {"opacity": opacity}, children=lines)


@shape
def dot(cx: float, cy: float, r: float, fill: str, opacity: float = 1.0) -> Element:
    return circle(cx, cy, r, fill, opacity)


@shape
def concentric_ring(
    cx: float, cy: float, r: float, stroke: str, sw: float = 2.0, opacity: float = 1.0
) -> Element:
    return circle_outline(cx, cy, r, stroke, sw, opacity)


@shape
def arc_segment(
    cx: float,
    cy: float,
    r: float,
    start_deg: float,
    end_deg: float,
    color: str,
    sw: float = 3.0,
) -> Element:
    """start_deg から end_deg へ時計回りに描く開いた円弧。"""

    a0 = math.radians(start_deg)
    a1 = math.radians(end_deg)
    large = 1 if (end_deg - start_deg) > 180 else 0
    d = _arc_path(
        cx + r * math.cos(a0), cy + r * math.sin(a0), r, large, cx + r * math.cos(a1), cy + r * math.sin(a1)
    )
    return Element.create("path", {"d": d, "fill": "none", "stroke": color, "stroke-width": sw})


@shape
def cross(cx: float, cy: float, size: float, color: str, sw: float = 3.0) -> Element:
    return Element.create(
        "g",
        children=[
            thin_line(cx - size, cy, cx + size, cy, color, sw),
            thin_line(cx, cy - size, cx, cy + size, color, sw),
        ],
    )


@shape
def trapezoid(
    cx: float,
    cy: float,
    top_w: float,
    bottom_w: float,
    h: float,
    rotation: float,
    fill: str,
    opacity: float = 1.0,
) -> Element:
    points = (
        (cx - top_w / 2.0, cy - h / 2.0),
        (cx + top_w / 2.0, cy - h / 2.0),
        (cx + bottom_w / 2.0, cy + h / 2.0),
        (cx - bottom_w / 2.0, cy + h / 2.0),
    )
    return Element.create(
        "polygon",
        {"points": points, "fill": fill, "opacity": opacity, "transform": _rotation(rotation, cx, cy)},
    )


@shape
def rotated_rect(
    cx: float, cy: float, w: float, h: float, angle: float, fill: str, opacity: float = 1.0
) -> Element:
    """中心 (cx, cy) の矩形を angle [deg] 回転したもの。"""

    return Element.create(
        "rect",
        {
            "x": cx - w / 2.0,
            "y": cy - h / 2.0,
            "width": w,
            "height": h,
            "fill": fill,
            "opacity": opacity,
            "transform": _rotation(angle, cx, cy),
        },
    )


@shape
def bar(
    cx: float,
    cy: float,
    length: float,
    thickness: float,
    angle: float,
    fill: str,
    opacity: float = 1.0,
) -> Element:
    """細長い矩形。"""

    return rotated_rect(cx, cy, length, thickness, angle, fill, opacity)


def star_points(
    cx: float, cy: float, outer_r: float, inner_r: float, n: int, rotation: float = 0.0
) -> Points:
    """外径・内径を交互に結ぶ n 芒星の頂点列を返す。rotation は [rad]。

    Notes
    -----
    rotation == 0 で最初の外側頂点が真上（-Y）に来る。頂点数は 2n。
    """
    n = max(2, int(n))
    k = np.arange(2 * n, dtype=np.float64)
    angles = rotation + (k / (2 * n)) * 2.0 * math.pi - math.pi / 2.0
    radii = np.where(k % 2 == 0, float(outer_r), float(inner_r))
    xs = cx + np.cos(angles) * radii
    ys = cy + np.sin(angles) * radii
    return tuple((float(px), float(py)) for px, py in zip(xs, ys))


def regular_polygon_points(cx: float, cy: float, r: float, n: int, rotation: float = 0.0) -> Points:
    """正 n 角形の頂点列を返す。rotation は [rad]、0 で最初の頂点が真上。"""

    n = max(3, int(n))
    angles = rotation + np.arange(n, dtype=np.float64) / n * 2.0 * math.pi - math.pi / 2.0
    xs = cx + np.cos(angles) * float(r)
    ys = cy + np.sin(angles) * float(r)
    return tuple((float(px), float(py)) for px, py in zip(xs, ys))


@shape
def polygon(
    points: Sequence[tuple[float, float]],
    fill: str,
    opacity: float = 1.0,
    *,
    stroke: str | None = None,
    stroke_width: float | None = None,
    stroke_opacity: float | None = None,
) -> Element:
    """任意の点列の多角形。stroke 系は指定時のみ出力する。"""

    return Element.create(
        "polygon",
        {
            "points": tuple(points),
            "fill": fill,
            "opacity": opacity,
            "stroke": stroke,
            "stroke-width": stroke_width,
            "stroke-opacity": stroke_opacity,
        },
    )


@shape
def star_polygon(
    cx: float,
    cy: float,
    outer_r: float,
    inner_r: float,
    n: int,
    fill: str,
    opacity: float = 1.0,
    *,
    rotation: float = 0.0,
    stroke: str | None = None,
    stroke_width: float | None = None,
    stroke_opacity: float | None = None,
) -> Element:
    return polygon(
        star_points(cx, cy, outer_r, inner_r, n, rotation),
        fill,
        opacity,
        stroke=stroke,
        stroke_width=stroke_width,
        stroke_opacity=stroke_opacity,
    )


@shape
def regular_polygon(
    cx: float,
    cy: float,
    r: float,
    n: int,
    fill: str,
    opacity: float = 1.0,
    *,
    rotation: float = 0.0,
    stroke: str | None = None,
    stroke_width: float | None = None,
    stroke_opacity: float | None = None,
) -> Element:
    return polygon(
        regular_polygon_points(cx, cy, r, n, rotation),
        fill,
        opacity,
        stroke=stroke,
        stroke_width=stroke_width,
        stroke_opacity=stroke_opacity,
    )


__all__ = [
    "QUARTER_CORNERS",
    "arc_segment",
    "bar",
    "circle",
    "circle_outline",
    "concentric_ring",
    "cross",
    "crosshatch",
    "diagonal_line",
    "dot",
    "polygon",
    "quarter_circle",
    "rect",
    "rect_outline",
    "regular_polygon",
    "regular_polygon_points",
    "rotate_points",
    "rotated_rect",
    "semicircle",
    "star_points",
    "star_polygon",
    "stripe_block",
    "thick_line",
    "thin_line",
    "trapezoid",
    "triangle",
    "triangle_points",
    "wedge",
    "wedge_points",
]
