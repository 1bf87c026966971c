"""
どこで: `src/plakat/composers/color_study.py`。
何を: 下寄せの入れ子正方形・入れ子円・並置した色面の 3 戦略で色彩習作を組む。
なぜ: 形を最小限に抑え、隣接する色どうしの相互作用そのものを主題にするため。

Notes
-----
入れ子戦略では外側から内側へ寸法が厳密に減少し（各領域は 1 つ外側の領域に収まる）、
最内の「宝石」の中心にシグナルが置かれる。
"""

from __future__ import annotations

import math

from plakat.composers._common import (
    art,
    background,
    clamp,
    place_signal,
    with_deep_shadow,
    with_shadow,
)
from plakat.core.archetype import Archetype
from plakat.core.color import weighted_pick
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.golden import PHI_INV
from plakat.core.palettes import Palette
from plakat.core.scene import Element


def _jewel_color(ctx: RenderContext, palette: Palette, ring_colors: list[str]) -> str:
    unused = [col for col in palette.colors if col not in ring_colors]
    if not unused:
        return palette.ink
    return weighted_pick(ctx.rng, unused)


def _nested_squares(ctx: RenderContext, palette: Palette, ring_colors: list[str], unit: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    prev_y, prev_size = 0.0, float(c)
    for i, color in enumerate(ring_colors):
        inset = unit * (i + 1)
        side = inset * rng.uniform(1.0, 1.3)
        top = inset * rng.uniform(0.8, 1.1)
        bottom = inset * rng.uniform(1.3, 1.8)
        size = min(c - side * 2, c - top - bottom, prev_size - unit * 0.5)
        if size <= 0:
            break
        sx = (c - size) / 2
        # 下寄せ（上の余白が狭い）。1 つ外側の正方形からははみ出さない
        sy = clamp(top + (c - top - bottom - size) / 2, prev_y, prev_y + prev_size - size)
        out.append(with_shadow(art(ctx, "rect", sx, sy, size, size, color, 0.85)).with_role("ring"))
        prev_y, prev_size = sy, size

    jewel = prev_size * rng.uniform(0.35, 0.5)
    jx = (c - jewel) / 2
    jy = prev_y + (prev_size - jewel) * 0.6
    color = _jewel_color(ctx, palette, ring_colors)
    out.append(with_deep_shadow(art(ctx, "rect", jx, jy, jewel, jewel, color, 0.9)).with_role("jewel"))

    out.extend(place_signal(ctx, jx + jewel / 2, jy + jewel / 2, jewel * rng.uniform(0.12, 0.2), halo_scale=1.6, halo_opacity=0.4))
    return out


def _nested_circles(ctx: RenderContext, palette: Palette, ring_colors: list[str], unit: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    pcx, pcy, prev_r = c / 2, c / 2, c / 2
    for i, color in enumerate(ring_colors):
        inset = unit * (i + 1)
        side = inset * rng.uniform(1.0, 1.3)
        top = inset * rng.uniform(0.8, 1.1)
        bottom = inset * rng.uniform(1.3, 1.8)
        r = min(c - side * 2, c - top - bottom) / 2
        r = min(r, prev_r - unit * 0.25)
        if r <= 0:
            break
        cx = c / 2 + (rng.uniform(-unit * 0.3, unit * 0.3) if i > 0 else 0.0)
        cy = c / 2 + unit * i * 0.15
        # 中心のずれは 1 つ外側の円に収まる範囲に縮める
        dist = math.hypot(cx - pcx, cy - pcy)
        slack = prev_r - r
        if dist > slack:
            k = slack / dist
            cx = pcx + (cx - pcx) * k
            cy = pcy + (cy - pcy) * k
        out.append(with_shadow(art(ctx, "circle", cx, cy, r, color, 0.85)).with_role("ring"))
        pcx, pcy, prev_r = cx, cy, r

    jr = prev_r * rng.uniform(0.35, 0.5)
    jx = pcx
    jy = pcy + (prev_r - jr) * 0.3
    color = _jewel_color(ctx, palette, ring_colors)
    out.append(with_deep_shadow(art(ctx, "circle", jx, jy, jr, color, 0.9)).with_role("jewel"))

    out.extend(place_signal(ctx, jx, jy, jr * rng.uniform(0.25, 0.4), halo_scale=1.6, halo_opacity=0.4))
    return out


def _side_by_side(ctx: RenderContext, palette: Palette) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    divisions = rng.uniform_int(2, 3)
    vertical = rng.draw() > 0.5
    field_colors = rng.shuffle(palette.colors)[:divisions]
    field = c / divisions

    for i, color in enumerate(field_colors):
        if vertical:
            out.append(art(ctx, "rect", i * field, 0, field, c, color, 0.85).with_role("field"))
        else:
            out.append(art(ctx, "rect", 0, i * field, c, field, color, 0.85).with_role("field"))

    # 同じ色・同じ大きさの正方形が、地の色によって違って見える
    sq = rng.uniform(c * 0.1, c * 0.18)
    sq_color = weighted_pick(rng, (palette.ink, palette.background))
    for i in range(divisions):
        if vertical:
            sx, sy = i * field + (field - sq) / 2, (c - sq) / 2
        else:
            sx, sy = (c - sq) / 2, i * field + (field - sq) / 2
        out.append(art(ctx, "rect", sx, sy, sq, sq, sq_color, 0.9))

    # 最初の色面の境界上、黄金分割の高さ
    boundary = field
    along = c * PHI_INV
    sx, sy = (boundary, along) if vertical else (along, boundary)
    out.extend(place_signal(ctx, sx, sy, sq * 0.2, halo_scale=1.6, halo_opacity=0.4))
    return out


@composer(Archetype.COLOR_STUDY)
def compose_color_study(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    """COLOR_STUDY: 密度は使わない（色と比例だけで構成する）。"""

    rng, c = ctx.rng, ctx.canvas_size
    out = [background(ctx, palette)]

    strategy = rng.uniform_int(0, 2)
    if strategy == 2:
        out.extend(_side_by_side(ctx, palette))
        return out

    ring_count = rng.uniform_int(3, 5)
    unit = c / (ring_count * 2 + 3)
    available = rng.shuffle((palette.background, *palette.colors))
    ring_colors = [available[i % len(available)] for i in range(ring_count)]
    if strategy == 0:
        out.extend(_nested_squares(ctx, palette, ring_colors, unit))
    else:
        out.extend(_nested_circles(ctx, palette, ring_colors, unit))
    return out
