"""
どこで: `src/plakat/composers/arabian_geometric.py`。
何を: 同心の星形層・ギリ（girih）タイル敷き・ムカルナス風の放射環の 3 戦略で幾何文様を組む。
なぜ: 回転対称と星・多角形の入れ子だけで、図像を持たない文様を作るため。
"""

from __future__ import annotations

import math

from plakat.composers._common import background, place_signal, with_shadow
from plakat.core.archetype import Archetype
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.palettes import SIGNAL_COLOR, Palette
from plakat.core.scene import Element
from plakat.shapes import exact

FOLD_COUNTS = (8, 10, 12)


def _spoke(cx: float, cy: float, angle: float, r0: float, r1: float) -> tuple[float, float, float, float]:
    return (
        cx + math.cos(angle) * r0,
        cy + math.sin(angle) * r0,
        cx + math.cos(angle) * r1,
        cy + math.sin(angle) * r1,
    )


def _star_tessellation(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    ink = palette.ink
    out: list[Element] = []

    folds = rng.pick(FOLD_COUNTS)
    cx = cy = c / 2
    outer = c * 0.44
    out.append(exact.circle(cx, cy, outer * 1.08, ink, 0.04))

    # (半径, 内径比, 色, 不透明度, 線幅)
    layers = (
        (outer, 0.42, colors[0], 0.2, 1.5),
        (outer * 0.72, 0.38, colors[1], 0.35, 1.2),
        (outer * 0.48, 0.4, colors[2], 0.5, 1.0),
        (outer * 0.28, 0.45, SIGNAL_COLOR, 0.7, 1.5),
    )
    for li, (r, indent, color, opacity, sw) in enumerate(layers):
        out.append(
            exact.star_polygon(cx, cy, r, r * indent, folds, color, opacity, stroke=ink, stroke_width=sw, stroke_opacity=0.6)
        )
        if li < len(layers) - 1:
            out.append(exact.circle_outline(cx, cy, r * 0.85, ink, 0.8, 0.2))

    for i in range(folds):
        a = i / folds * math.pi * 2 - math.pi / 2
        out.append(exact.thin_line(*_spoke(cx, cy, a, outer * 0.2, c * 0.62), ink, 0.7))
        a2 = (i + 0.5) / folds * math.pi * 2 - math.pi / 2
        out.append(exact.thin_line(*_spoke(cx, cy, a2, outer * 0.35, outer), ink, 0.4))

    # 星の先端どうしの間を埋める凧形
    for i in range(folds):
        a1 = i / folds * math.pi * 2 - math.pi / 2
        a2 = (i + 1) / folds * math.pi * 2 - math.pi / 2
        mid = (a1 + a2) / 2
        kite = (
            (cx + math.cos(a1) * outer, cy + math.sin(a1) * outer),
            (cx + math.cos(mid) * outer * 1.15, cy + math.sin(mid) * outer * 1.15),
            (cx + math.cos(a2) * outer, cy + math.sin(a2) * outer),
            (cx + math.cos(mid) * outer * 0.7, cy + math.sin(mid) * outer * 0.7),
        )
        out.append(
            exact.polygon(kite, colors[(i + 2) % len(colors)], 0.18, stroke=ink, stroke_width=0.6, stroke_opacity=0.4)
        )

    for i in range(folds):
        a = i / folds * math.pi * 2 - math.pi / 2
        rx, ry = cx + math.cos(a) * outer, cy + math.sin(a) * outer
        out.append(exact.circle(rx, ry, c * 0.018, colors[i % len(colors)], 0.75))

    if density > 0.35:
        cr = c * 0.14
        for idx, (px, py) in enumerate(((0, 0), (c, 0), (0, c), (c, c))):
            out.append(exact.quarter_circle(px, py, cr, exact.QUARTER_CORNERS[idx], colors[idx % len(colors)], 0.2))
            out.append(exact.circle_outline(px, py, cr, ink, 1, 0.3))

    out.extend(place_signal(ctx, cx, cy, rng.uniform(c * 0.04, c * 0.06), halo_scale=2.0, halo_opacity=0.45))

    b = c * 0.025
    out.append(exact.rect_outline(b, b, c - b * 2, c - b * 2, ink, 2, 0.35))
    return out


def _girih_field(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    ink = palette.ink
    out: list[Element] = []

    tile = rng.uniform(c * 0.1, c * 0.16)
    cols = math.ceil(c / tile) + 2
    rows = math.ceil(c / (tile * 0.866)) + 2
    base_angle = rng.draw() * math.pi
    inner_ratio = rng.uniform(0.38, 0.48)

    for r in range(-1, rows):
        for col in range(-1, cols):
            tcx = col * tile + (0 if r % 2 == 0 else tile / 2)
            tcy = r * tile * 0.866
            star_r = tile * 0.44
            inner_r = star_r * inner_ratio
            ci = (r + col) % len(colors)
            out.append(
                exact.star_polygon(
                    tcx,
                    tcy,
                    star_r,
                    inner_r,
                    6,
                    colors[ci],
                    rng.uniform(0.15, 0.35),
                    rotation=base_angle,
                    stroke=ink,
                    stroke_width=0.8,
                    stroke_opacity=0.5,
                )
            )
            if density > 0.25:
                out.append(
                    exact.regular_polygon(
                        tcx,
                        tcy,
                        inner_r * 0.85,
                        6,
                        colors[(ci + 2) % len(colors)],
                        0.12,
                        rotation=base_angle + math.pi / 6,
                        stroke=ink,
                        stroke_width=0.4,
                        stroke_opacity=0.35,
                    )
                )
            if density > 0.4:
                out.append(exact.dot(tcx, tcy, 1.5, ink, 0.3))

    med_r = c * rng.uniform(0.2, 0.26)
    mx = my = c / 2
    out.append(with_shadow(exact.circle(mx, my, med_r, palette.background, 0.85)))
    out.append(exact.circle_outline(mx, my, med_r, ink, 2.5, 0.55))
    out.append(exact.circle_outline(mx, my, med_r * 0.88, ink, 1, 0.3))

    folds = rng.pick(FOLD_COUNTS)
    out.append(
        exact.star_polygon(mx, my, med_r * 0.75, med_r * 0.35, folds, colors[0], 0.25, stroke=ink, stroke_width=1.2, stroke_opacity=0.5)
    )
    out.append(
        exact.star_polygon(mx, my, med_r * 0.45, med_r * 0.22, folds, SIGNAL_COLOR, 0.4, stroke=ink, stroke_width=1, stroke_opacity=0.4)
    )
    out.extend(place_signal(ctx, mx, my, med_r * 0.06, halo_scale=1.67))

    b = c * 0.028
    out.append(exact.rect_outline(b, b, c - b * 2, c - b * 2, ink, 2, 0.4))
    out.append(exact.rect_outline(b * 2, b * 2, c - b * 4, c - b * 4, ink, 1, 0.2))
    return out


def _muqarnas(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    ink = palette.ink
    out: list[Element] = []

    cx = cy = c / 2
    folds = rng.pick(FOLD_COUNTS)
    ring_count = rng.uniform_int(4, 6)
    dome = c * 0.46
    out.append(exact.circle(cx, cy, dome, ink, 0.05))
    out.append(exact.circle_outline(cx, cy, dome, ink, 2, 0.45))

    # 外側の環から描く
    for ring in range(ring_count - 1, -1, -1):
        ring_r = dome * (ring + 1) / (ring_count + 0.5)
        prev_r = dome * ring / (ring_count + 0.5) if ring > 0 else 0.0
        count = folds * (1 if ring == 0 else ring + 1)
        size = (ring_r - prev_r) * rng.uniform(0.32, 0.5)
        color = colors[ring % len(colors)]
        rot = ring * (math.pi / folds)
        out.append(exact.circle_outline(cx, cy, ring_r, ink, 1, 0.22))

        mid_r = (ring_r + prev_r) / 2
        for i in range(count):
            angle = rot + i / count * math.pi * 2
            ex = cx + math.cos(angle) * mid_r
            ey = cy + math.sin(angle) * mid_r
            opacity = rng.uniform(0.3, 0.65)
            choice = (ring + i) % 4
            if choice == 0:
                out.append(exact.rotated_rect(ex, ey, size * 0.7, size * 1.5, math.degrees(angle), color, opacity))
            elif choice == 1:
                out.append(exact.triangle(ex, ey, size * 0.9, math.degrees(angle) + 90, color, opacity))
            elif choice == 2:
                out.append(exact.circle(ex, ey, size * 0.35, color, opacity))
            else:
                out.append(
                    exact.star_polygon(
                        ex, ey, size * 0.5, size * 0.2, 6, color, opacity, rotation=angle, stroke=ink, stroke_width=0.4, stroke_opacity=0.3
                    )
                )

    for i in range(folds):
        a = i / folds * math.pi * 2
        out.append(exact.thin_line(*_spoke(cx, cy, a, dome * 0.12, dome), ink, 0.7))

    rose = dome * 0.13
    out.extend(place_signal(ctx, cx, cy, rose, halo_scale=2.2, halo_opacity=0.4, opacity=0.85))
    out.append(
        exact.polygon(exact.star_points(cx, cy, rose * 1.8, rose * 1.8 * 0.42, folds), "none", 0.55, stroke=ink, stroke_width=1.5)
    )

    if density > 0.3:
        sp = c * 0.16
        color = colors[-1]
        for tri in (
            ((0, 0), (sp, 0), (0, sp)),
            ((c, 0), (c - sp, 0), (c, sp)),
            ((0, c), (sp, c), (0, c - sp)),
            ((c, c), (c - sp, c), (c, c - sp)),
        ):
            out.append(exact.polygon(tri, color, 0.12))
    return out


@composer(Archetype.ARABIAN_GEOMETRIC)
def compose_arabian_geometric(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    out = [background(ctx, palette)]
    strategy = ctx.rng.uniform_int(0, 2)
    if strategy == 0:
        out.extend(_star_tessellation(ctx, palette, density))
    elif strategy == 1:
        out.extend(_girih_field(ctx, palette, density))
    else:
        out.extend(_muqarnas(ctx, palette, density))
    return out
