"""
どこで: `src/plakat/composers/dot_field.py`。
何を: 点の大きさで球面を浮かせる・図形で点格子を覆い隠す・点の階調で地形を作る、の 3 戦略。
なぜ: 規則的な点格子の変調だけで形と奥行きを知覚させるため。
"""

from __future__ import annotations

import math

from plakat.composers._common import (
    art,
    background,
    clamp,
    lerp,
    place_signal,
    with_deep_shadow,
    with_shadow,
)
from plakat.core.archetype import Archetype
from plakat.core.color import weighted_pick
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.palettes import Palette
from plakat.core.scene import Element
from plakat.shapes import exact

MASK_MODES = ("disappear", "tint", "enlarge", "outline")


def _jitter(ctx: RenderContext, x: float, y: float, scale: float, shift: float, amount: float) -> tuple[float, float]:
    """格子点 (x, y) をノイズでわずかにずらした位置を返す。"""

    noise = ctx.noise
    return (
        x + noise.sample(x * scale, y * scale) * amount,
        y + noise.sample(x * scale + shift, y * scale + shift) * amount,
    )


def _sphere(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    n = rng.uniform_int(10, int(10 + density * 8))
    spacing = c / (n + 1)
    min_r = 1.0
    max_r = spacing * 0.42
    scx = rng.uniform(c * 0.3, c * 0.7)
    scy = rng.uniform(c * 0.3, c * 0.7)
    sr = rng.uniform(c * 0.2, c * 0.38)
    bulge = rng.draw() > 0.5

    for r in range(n):
        for col in range(n):
            dx = spacing + col * spacing
            dy = spacing + r * spacing
            dist = math.hypot(dx - scx, dy - scy)
            t = clamp(dist / sr, 0, 1)
            if dist < sr:
                dot_r = lerp(max_r, min_r, t * t) if bulge else lerp(min_r, max_r, t * t)
                color = palette.colors[0] if t < 0.5 else palette.ink
                opacity = lerp(1.0, 0.5, t)
            else:
                dot_r = min_r + (max_r - min_r) * 0.15
                color = palette.ink
                opacity = 0.4
            px, py = _jitter(ctx, dx, dy, 0.02, 50, 2)
            out.append(exact.dot(px, py, dot_r, color, opacity))

    # 球面のハイライト
    angle = math.radians(rng.uniform(-60, -30))
    hx = scx + math.cos(angle) * sr * 0.4
    hy = scy + math.sin(angle) * sr * 0.4
    out.extend(place_signal(ctx, hx, hy, sr * 0.12, halo_scale=1.83, opacity=0.7))
    return out


def _masked_grid(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    n = rng.uniform_int(10, int(10 + density * 6))
    spacing = c / (n + 1)
    base_r = rng.uniform(2, 4)

    overlays: list[tuple[str, float, float, float, str, float]] = []
    for _ in range(rng.uniform_int(1, 3)):
        kind = rng.pick(("rect", "circle", "triangle", "bar"))
        ox = rng.uniform(c * 0.15, c * 0.65)
        oy = rng.uniform(c * 0.15, c * 0.65)
        size = rng.uniform(c * 0.15, c * 0.3)
        overlays.append((kind, ox, oy, size, rng.pick(palette.colors), rng.uniform(-30, 30)))

    def inside(px: float, py: float) -> bool:
        for kind, ox, oy, size, _, _ in overlays:
            if kind == "circle":
                if math.hypot(px - ox, py - oy) < size:
                    return True
            elif abs(px - ox) < size / 2 and abs(py - oy) < size / 2:
                return True
        return False

    mode = rng.pick(MASK_MODES)
    for r in range(n):
        for col in range(n):
            dx = spacing + col * spacing
            dy = spacing + r * spacing
            masked = inside(dx, dy)
            if masked and mode == "disappear":
                continue
            if masked and mode == "outline":
                out.append(exact.circle_outline(dx, dy, base_r * 2, palette.ink, 1, 0.6))
                continue
            dot_r, color, opacity = base_r, palette.ink, 0.5
            if masked and mode == "tint":
                color, opacity = palette.colors[0], 0.9
            elif masked and mode == "enlarge":
                dot_r, opacity = base_r * 3, 0.7
            px, py = _jitter(ctx, dx, dy, 0.018, 40, 1.5)
            out.append(exact.dot(px, py, dot_r, color, opacity))

    for kind, ox, oy, size, color, angle in overlays:
        if kind == "rect":
            el = art(ctx, "rect", ox - size / 2, oy - size / 2, size, size, color, 0.6, rotation=angle)
        elif kind == "circle":
            el = art(ctx, "circle", ox, oy, size, color, 0.55)
        elif kind == "triangle":
            el = art(ctx, "triangle", ox, oy, size * 1.3, angle, color, 0.6)
        else:
            el = art(ctx, "bar", ox, oy, size * 2.5, size * 0.3, angle, color, 0.6)
        out.append(with_shadow(el))

    # 覆いの無い黄金比交点を優先する
    anchors = ctx.golden.anchors()
    free = [p for p in anchors if not inside(*p)] or list(anchors)
    sx, sy = rng.pick(free)
    out.extend(place_signal(ctx, sx, sy, rng.uniform(c * 0.025, c * 0.04)))
    return out


def _gradient_field(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    out: list[Element] = []

    n = rng.uniform_int(12, int(12 + density * 6))
    spacing = c / (n + 1)
    max_r = spacing * 0.4
    g_angle = rng.uniform(0, math.pi * 2)
    g_cos, g_sin = math.cos(g_angle), math.sin(g_angle)
    p_cos, p_sin = math.cos(g_angle + math.pi / 2), math.sin(g_angle + math.pi / 2)

    for r in range(n):
        for col in range(n):
            dx = spacing + col * spacing
            dy = spacing + r * spacing
            nx = (dx - c / 2) / (c / 2)
            ny = (dy - c / 2) / (c / 2)
            g = clamp((nx * g_cos + ny * g_sin + 1) / 2, 0, 1)
            p = clamp((nx * p_cos + ny * p_sin + 1) / 2, 0, 1)
            color = colors[int(clamp(math.floor(p * (len(colors) - 1)), 0, len(colors) - 1))]
            px, py = _jitter(ctx, dx, dy, 0.015, 30, 1.5)
            out.append(exact.dot(px, py, lerp(max_r * 0.15, max_r, g), color, lerp(0.3, 0.9, g)))

    kind = rng.pick(("rect", "circle", "triangle"))
    ox = rng.uniform(c * 0.25, c * 0.6)
    oy = rng.uniform(c * 0.25, c * 0.6)
    size = rng.uniform(c * 0.12, c * 0.25)
    color = weighted_pick(rng, colors)
    if kind == "rect":
        out.append(with_deep_shadow(art(ctx, "rect", ox - size / 2, oy - size / 2, size, size, color, 0.7)))
        out.append(exact.rect_outline(ox - size / 2, oy - size / 2, size, size, palette.ink, 2, 0.5))
    elif kind == "circle":
        out.append(with_deep_shadow(art(ctx, "circle", ox, oy, size / 2, color, 0.7)))
        out.append(exact.circle_outline(ox, oy, size / 2, palette.ink, 2, 0.5))
    else:
        out.append(with_deep_shadow(art(ctx, "triangle", ox, oy, size, rng.uniform(0, 360), color, 0.7)))

    out.extend(place_signal(ctx, ox, oy, size * 0.12, halo_scale=2.0, halo_opacity=0.4))
    return out


@composer(Archetype.DOT_FIELD)
def compose_dot_field(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    """DOT_FIELD: 密度は格子の分割数の上限を決める。"""

    out = [background(ctx, palette)]
    strategy = ctx.rng.uniform_int(0, 2)
    if strategy == 0:
        out.extend(_sphere(ctx, palette, density))
    elif strategy == 1:
        out.extend(_masked_grid(ctx, palette, density))
    else:
        out.extend(_gradient_field(ctx, palette, density))
    return out
