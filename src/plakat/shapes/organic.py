"""
どこで: `src/plakat/shapes/organic.py`。ノイズで輪郭をゆらした「手仕上げ」風プリミティブ。
何を: 厳密図形の輪郭を法線方向にノイズ変位させた淡いハロー多角形と、その上の crisp な図形を `g` にまとめる。
なぜ: seed 決定的なまま、版画のような縁のにじみを与えるため。
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from plakat.core.context import RenderContext
from plakat.core.noise import NoiseField
from plakat.core.scene import Element, Points, Rotation
from plakat.core.shape_registry import shape
from plakat.shapes import exact

# 輪郭標本化の空間周波数。
EDGE_NOISE_SCALE = 0.02
# ハローの不透明度（crisp 図形の不透明度に対する比）。
HALO_OPACITY_RATIO = 0.12
# 最小寸法に対する変位振幅の上限比。
MAX_AMPLITUDE_RATIO = 0.025

RECT_STEPS = 12
CIRCLE_STEPS = 32


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def rect_amplitude(w: float, h: float) -> float:
    """矩形のハロー振幅。幅に比例し、最小寸法の 2.5% を超えない。"""

    return min(_clamp(abs(w) * 0.008, 0.8, 2.5), MAX_AMPLITUDE_RATIO * min(abs(w), abs(h)))


def circle_amplitude(r: float) -> float:
    """円のハロー振幅。直径の 2.5% を超えない。"""

    return min(_clamp(abs(r) * 0.025, 0.5, 2.0), MAX_AMPLITUDE_RATIO * 2.0 * abs(r))


def triangle_amplitude(size: float) -> float:
    height = abs(size) * math.sqrt(3.0) / 2.0
    return min(_clamp(abs(size) * 0.008, 0.8, 2.5), MAX_AMPLITUDE_RATIO * height)


def _subdivide(vertices: Sequence[tuple[float, float]], steps: int) -> tuple[np.ndarray, np.ndarray]:
    """閉多角形の各辺を steps 分割し、点列と各点の辺法線を返す。"""

    v = np.asarray(vertices, dtype=np.float64).reshape(-1, 2)
    nxt = np.roll(v, -1, axis=0)
    t = np.arange(steps, dtype=np.float64) / float(steps)

    edge = nxt - v
    length = np.hypot(edge[:, 0], edge[:, 1])
    safe = np.where(length > 0.0, length, 1.0)
    normal = np.stack([edge[:, 1] / safe, -edge[:, 0] / safe], axis=1)
    normal[length <= 0.0] = 0.0

    pts = v[:, None, :] + edge[:, None, :] * t[None, :, None]
    normals = np.broadcast_to(normal[:, None, :], pts.shape)
    return pts.reshape(-1, 2), np.ascontiguousarray(normals).reshape(-1, 2)


def perturb_outline(
    noise: NoiseField,
    points: np.ndarray,
    normals: np.ndarray,
    amplitude: float,
    offset: float,
    *,
    scale: float = EDGE_NOISE_SCALE,
) -> Points:
    """輪郭点を法線方向へ `noise * amplitude` だけ変位させた点列を返す。

    Notes
    -----
    ノイズ値は [-1, 1] にクリップするため、各点の変位は amplitude 以下に収まる。
    """
    xs = points[:, 0] * scale + offset
    ys = points[:, 1] * scale + offset * 0.7
    values = np.clip(noise.sample_many(xs, ys), -1.0, 1.0) * float(amplitude)
    out = points + normals * values[:, None]
    return tuple((float(px), float(py)) for px, py in out)


def circle_outline_points(
    noise: NoiseField, cx: float, cy: float, r: float, amplitude: float, offset: float
) -> Points:
    """半径方向にゆらした円周の点列（32 点）を返す。"""

    angles = np.arange(CIRCLE_STEPS, dtype=np.float64) / CIRCLE_STEPS * 2.0 * math.pi
    cos = np.cos(angles)
    sin = np.sin(angles)
    values = np.clip(noise.sample_many(cos * 2.0 + offset, sin * 2.0 + offset * 0.7), -1.0, 1.0)
    rr = r + values * amplitude
    return tuple((float(px), float(py)) for px, py in zip(cx + cos * rr, cy + sin * rr))


def _offset(ctx: RenderContext, offset: float | None) -> float:
    return ctx.rng.draw() * 100.0 if offset is None else float(offset)


def _halo(points: Points, fill: str, opacity: float) -> Element:
    return Element.create(
        "polygon",
        {"points": points, "fill": fill, "opacity": opacity * HALO_OPACITY_RATIO, "stroke": "none"},
        role="halo",
    )


@shape(name="rect", family="organic")
def organic_rect(
    ctx: RenderContext,
    x: float,
    y: float,
    w: float,
    h: float,
    fill: str,
    opacity: float = 0.85,
    *,
    rotation: float = 0.0,
    offset: float | None = None,
) -> Element:
    """ハロー付きの矩形。

    Parameters
    ----------
    ctx : RenderContext
        乱数（オフセット用に 1 draw）とノイズ場の供給元。
    x, y, w, h : float
        矩形の左上と寸法。
    fill : str
        塗り色。
    opacity : float, default 0.85
        crisp 矩形の不透明度。ハローはその 12%。
    rotation : float, default 0.0
        中心周りの回転 [deg]。`g` の transform として出力する。
    offset : float or None, optional
        ノイズ標本化のオフセット。None なら rng から 1 draw して決める。
    """
    pts, normals = _subdivide(((x, y), (x + w, y), (x + w, y + h), (x, y + h)), RECT_STEPS)
    halo = perturb_outline(ctx.noise, pts, normals, rect_amplitude(w, h), _offset(ctx, offset))
    crisp = exact.rect(x, y, w, h, fill, opacity)
    transform = Rotation(float(rotation), x + w / 2.0, y + h / 2.0) if rotation else None
    return Element.create(
        "g", {"transform": transform}, children=[_halo(halo, fill, opacity), crisp]
    )


@shape(name="circle", family="organic")
def organic_circle(
    ctx: RenderContext,
    cx: float,
    cy: float,
    r: float,
    fill: str,
    opacity: float = 0.85,
    *,
    offset: float | None = None,
) -> Element:
    halo = circle_outline_points(ctx.noise, cx, cy, r, circle_amplitude(r), _offset(ctx, offset))
    return Element.create(
        "g", children=[_halo(halo, fill, opacity), exact.circle(cx, cy, r, fill, opacity)]
    )


@shape(name="triangle", family="organic")
def organic_triangle(
    ctx: RenderContext,
    cx: float,
    cy: float,
    size: float,
    rotation: float,
    fill: str,
    opacity: float = 0.85,
    *,
    offset: float | None = None,
) -> Element:
    """回転を頂点に焼き込んだ正三角形とそのハロー。"""

    vertices = exact.rotate_points(exact.triangle_points(cx, cy, size), rotation, cx, cy)
    pts, normals = _subdivide(vertices, RECT_STEPS)
    halo = perturb_outline(ctx.noise, pts, normals, triangle_amplitude(size), _offset(ctx, offset))
    return Element.create(
        "g", children=[_halo(halo, fill, opacity), exact.polygon(vertices, fill, opacity)]
    )


@shape(name="wedge", family="organic")
def organic_wedge(
    ctx: RenderContext,
    cx: float,
    cy: float,
    width: float,
    height: float,
    rotation: float,
    fill: str,
    opacity: float = 0.85,
) -> Element:
    """楔は縁を鋭く保つためハローを付けない（乱数も消費しない）。"""

    vertices = exact.rotate_points(exact.wedge_points(cx, cy, width, height), rotation, cx, cy)
    return exact.polygon(vertices, fill, opacity)


@shape(name="semicircle", family="organic")
def organic_semicircle(
    ctx: RenderContext,
    cx: float,
    cy: float,
    r: float,
    rotation: float,
    fill: str,
    opacity: float = 0.85,
    *,
    offset: float | None = None,
) -> Element:
    angles = np.linspace(math.pi, 2.0 * math.pi, num=17)
    vertices = tuple((float(cx + math.cos(a) * r), float(cy + math.sin(a) * r)) for a in angles)
    pts, normals = _subdivide(vertices, 2)
    amplitude = min(circle_amplitude(r), MAX_AMPLITUDE_RATIO * abs(r))
    halo = perturb_outline(ctx.noise, pts, normals, amplitude, _offset(ctx, offset))
    crisp = exact.semicircle(cx, cy, r, 0.0, fill, opacity)
    transform = Rotation(float(rotation), cx, cy) if rotation else None
    return Element.create(
        "g", {"transform": transform}, children=[_halo(halo, fill, opacity), crisp]
    )


@shape(name="bar", family="organic")
def organic_bar(
    ctx: RenderContext,
    cx: float,
    cy: float,
    length: float,
    thickness: float,
    angle: float,
    fill: str,
    opacity: float = 0.85,
) -> Element:
    return organic_rect(
        ctx, cx - length / 2.0, cy - thickness / 2.0, length, thickness, fill, opacity, rotation=angle
    )


__all__ = [
    "circle_amplitude",
    "circle_outline_points",
    "organic_bar",
    "organic_circle",
    "organic_rect",
    "organic_semicircle",
    "organic_triangle",
    "organic_wedge",
    "perturb_outline",
    "rect_amplitude",
    "triangle_amplitude",
]
