"""
どこで: `src/plakat/composers/_common.py`。
何を: 全コンポーザが共有する小道具（背景・影・シグナル配置・organic 図形ディスパッチ）。
なぜ: 「背景で始まり、シグナルを 1 つだけ置く」という横断的な約束を 1 箇所で守るため。
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from plakat.core.context import RenderContext
from plakat.core.golden import Point
from plakat.core.palettes import SIGNAL_COLOR, Palette
from plakat.core.scene import EffectRef, Element
from plakat.core.shape_registry import shape_registry
from plakat.shapes import exact

SHADOW = EffectRef("shadow")
DEEP_SHADOW = EffectRef("deep-shadow")
GLOW = EffectRef("glow")


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def background(ctx: RenderContext, palette: Palette) -> Element:
    """キャンバス全面の背景矩形（役割 `background`）。"""

    c = ctx.canvas_size
    return exact.rect(0, 0, c, c, palette.background).with_role("background")


def with_shadow(element: Element) -> Element:
    return element.with_attrs({"filter": SHADOW})


def with_deep_shadow(element: Element) -> Element:
    return element.with_attrs({"filter": DEEP_SHADOW})


def art(ctx: RenderContext, kind: str, *args: Any, **kwargs: Any) -> Element:
    """organic 図形を登録名 kind で生成する。"""

    return shape_registry.get(kind, family="organic")(ctx, *args, **kwargs)


def place_signal(
    ctx: RenderContext,
    x: float,
    y: float,
    r: float,
    *,
    halo_scale: float = 1.8,
    halo_opacity: float = 0.5,
    opacity: float = 0.9,
) -> list[Element]:
    """シグナル（固定色の小円）とその光暈を返す。

    Notes
    -----
    各コンポーザはこれをちょうど 1 回だけ呼ぶ。光暈は glow グラデーション、
    本体は deep-shadow で通常図形より強く浮かせる。
    """
    halo = exact.circle(x, y, r * halo_scale, GLOW, halo_opacity).with_role("signal-halo")
    body = with_deep_shadow(art(ctx, "circle", x, y, r, SIGNAL_COLOR, opacity)).with_role("signal")
    return [halo, body]


def farthest_anchor(ctx: RenderContext, x: float, y: float) -> Point:
    """(x, y) から最も遠い黄金比交点を返す（カウンターウェイト用）。"""

    gp = ctx.golden
    return max((gp.tl, gp.tr, gp.bl, gp.br), key=lambda p: math.hypot(p[0] - x, p[1] - y))


def nearest(values: Sequence[float], target: float) -> float:
    return min(values, key=lambda v: abs(v - target))


__all__ = [
    "DEEP_SHADOW",
    "GLOW",
    "SHADOW",
    "art",
    "background",
    "clamp",
    "farthest_anchor",
    "lerp",
    "nearest",
    "place_signal",
    "with_deep_shadow",
    "with_shadow",
]
