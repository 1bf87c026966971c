"""
どこで: `src/plakat/composers/repetition.py`。
何を: 律動的なセル帯・寸法の漸進・波に乗る行列・放射状の環の 4 戦略で反復構図を組む。
なぜ: 系の規則性と小さな揺らぎを同時に見せる反復のリズムを作るため。
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
from plakat.core.color import spatial_color
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.palettes import SIGNAL_COLOR, Palette
from plakat.core.scene import Element
from plakat.shapes import exact


def rhythm_fill_chance(column: int, row_freq: float, row_offset: float, density: float) -> float:
    """律動セルの塗り確率。列方向の正弦波に密度ぶんの底上げを足す。"""

    return 0.3 + math.sin(column * row_freq + row_offset) * 0.35 + density * 0.2


def _rhythm_bands(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    rows = rng.uniform_int(4, 8)
    cols = rng.uniform_int(6, 12)
    margin = 30
    gutter = 3
    cell_w = (c - margin * 2 - gutter * (cols - 1)) / cols
    cell_h = (c - margin * 2 - gutter * (rows - 1)) / rows

    for r in range(rows):
        row_offset = rng.draw() * math.pi * 2
        row_freq = rng.uniform(0.3, 0.8)
        for col in range(cols):
            x = margin + col * (cell_w + gutter)
            y = margin + r * (cell_h + gutter)
            # セルごとの乱数は塗るかどうかに関係なく先に引く
            roll = rng.draw()
            color = spatial_color(rng, palette.colors, x, y, c)
            opacity = rng.uniform(0.6, 1.0)
            offset = rng.draw() * 100.0
            if roll < rhythm_fill_chance(col, row_freq, row_offset, density):
                cell = art(ctx, "rect", x, y, cell_w, cell_h, color, opacity, offset=offset)
                out.append(cell.with_role("rhythm-cell"))

    gold_row = rng.uniform_int(1, rows - 2)
    start = rng.uniform_int(0, cols // 3)
    end = rng.uniform_int(cols * 2 // 3, cols - 1)
    y = margin + gold_row * (cell_h + gutter)
    for col in range(start, end + 1):
        x = margin + col * (cell_w + gutter)
        out.append(with_shadow(art(ctx, "rect", x, y, cell_w, cell_h, SIGNAL_COLOR, 0.85)))

    # 金の帯の終端の 1 段上（または下）、帯と同じ律動上に置く
    step = -(cell_h + gutter) if gold_row >= rows / 2 else cell_h + gutter
    sx = margin + end * (cell_w + gutter) + cell_w / 2
    sy = y + cell_h / 2 + step
    out.extend(place_signal(ctx, sx, sy, min(cell_w, cell_h) * 0.45, halo_opacity=0.4))
    return out


def _size_progression(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    out: list[Element] = []

    count = rng.uniform_int(8, 16)
    vertical = rng.draw() > 0.5
    margin = 40
    total = c - margin * 2
    base = total / count * 0.85

    for i in range(count):
        t = i / (count - 1)
        # 中央ほど縮む「くびれ」
        size = base * max(0.1, 1 - 0.6 * math.sin(t * math.pi) ** 2 * clamp(density, 0, 1))
        pos = margin + t * total
        x = c / 2 - size / 2 if vertical else pos - size / 2
        y = pos - size / 2 if vertical else c / 2 - size / 2
        color = colors[0] if i % 2 == 0 else colors[min(len(colors) - 1, 1)]
        out.append(with_shadow(art(ctx, "rect", x, y, size, size, color, rng.uniform(0.75, 1.0))))

    ax = rng.uniform(c * 0.15, c * 0.35) if vertical else c / 2
    ay = c / 2 if vertical else rng.uniform(c * 0.15, c * 0.35)
    out.extend(place_signal(ctx, ax, ay, rng.uniform(c * 0.04, c * 0.08), halo_scale=1.6, halo_opacity=0.4))
    return out


def _wave_procession(ctx: RenderContext, palette: Palette) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    count = rng.uniform_int(8, 18)
    amplitude = rng.uniform(c * 0.12, c * 0.25)
    frequency = rng.uniform(1.5, 3.5)
    base = rng.uniform(8, 20)
    crescendo = rng.uniform(0.5, 2.0)
    kind = rng.pick(("circle", "rect", "triangle", "semicircle"))

    anchor_right = rng.draw() > 0.5
    aw = rng.uniform(c * 0.12, c * 0.22)
    ah = rng.uniform(c * 0.3, c * 0.55)
    ax = c - aw - 10 if anchor_right else 10
    ay = c - ah if rng.draw() > 0.5 else 0
    out.append(with_deep_shadow(art(ctx, "rect", ax, ay, aw, ah, palette.ink, 0.75)))

    for i in range(count):
        t = i / (count - 1)
        size = base + base * crescendo * t
        x = 40 + t * (c - 80)
        y = c / 2 + math.sin(t * math.pi * frequency) * amplitude
        color = spatial_color(rng, palette.colors, x, y, c)
        opacity = rng.uniform(0.6, 1.0)
        if kind == "circle":
            out.append(art(ctx, "circle", x, y, size, color, opacity))
        elif kind == "rect":
            out.append(art(ctx, "rect", x - size, y - size, size * 2, size * 2, color, opacity))
        elif kind == "triangle":
            out.append(art(ctx, "triangle", x, y, size * 2, rng.uniform(-15, 15), color, opacity))
        else:
            out.append(art(ctx, "semicircle", x, y, size, rng.pick((0, 90, 180, 270)), color, opacity))

    peak_x = 40 + (0.25 / frequency) * (c - 80)
    peak_y = c / 2 - amplitude
    out.extend(place_signal(ctx, peak_x, peak_y, rng.uniform(c * 0.03, c * 0.06), halo_scale=1.6, halo_opacity=0.4))
    return out


def _radial_rhythm(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    out: list[Element] = []

    rings = rng.uniform_int(3, 6)
    per_ring = rng.uniform_int(4, 10)
    max_r = c * 0.4
    kind = rng.pick(("circle", "rect", "triangle"))

    for ring in range(rings):
        ring_r = max_r * (ring + 1) / rings
        size = rng.uniform(6, 15) * (1 + ring * 0.3)
        color = colors[ring % len(colors)]
        count = per_ring + ring * 2
        start = ring * rng.uniform(10, 30)
        for i in range(count):
            angle = start + (i / count) * math.pi * 2
            x = c / 2 + math.cos(angle) * ring_r
            y = c / 2 + math.sin(angle) * ring_r
            opacity = rng.uniform(0.5, 0.9)
            if kind == "circle":
                out.append(art(ctx, "circle", x, y, size, color, opacity))
            elif kind == "rect":
                out.append(
                    art(ctx, "rect", x - size, y - size, size * 2, size * 2, color, opacity, rotation=math.degrees(angle))
                )
            else:
                out.append(art(ctx, "triangle", x, y, size * 2, math.degrees(angle), color, opacity))

    out.extend(place_signal(ctx, c / 2, c / 2, rng.uniform(c * 0.04, c * 0.08), halo_opacity=0.45))

    if density > 0.4:
        for ring in range(rings):
            out.append(exact.circle_outline(c / 2, c / 2, max_r * (ring + 1) / rings, palette.ink, 0.5, 0.12))
    return out


@composer(Archetype.REPETITION)
def compose_repetition(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    out = [background(ctx, palette)]

    strategy = ctx.rng.uniform_int(0, 3)
    if strategy == 0:
        out.extend(_rhythm_bands(ctx, palette, density))
    elif strategy == 1:
        out.extend(_size_progression(ctx, palette, density))
    elif strategy == 2:
        out.extend(_wave_procession(ctx, palette))
    else:
        out.extend(_radial_rhythm(ctx, palette, density))
    return out
