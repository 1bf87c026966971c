"""
どこで: `src/plakat/composers/free_form.py`。
何を: 透明な大平面の重なり・縁に寄せた量塊・対角の緊張・群島・奥行き層の 5 戦略で構図を組む。
なぜ: 少数の主要図形と明確な階層で、重なりによる光学的な奥行きを作るため。
"""

from __future__ import annotations

from plakat.composers._common import (
    art,
    background,
    lerp,
    place_signal,
    with_deep_shadow,
    with_shadow,
)
from plakat.core.archetype import Archetype
from plakat.core.color import spatial_color, weighted_pick
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.palettes import Palette
from plakat.core.scene import Element
from plakat.core.spatial_grid import CircleBounds, RectBounds
from plakat.shapes import exact

ISLAND_ATTEMPTS = 8
ISLAND_RADIUS = 80.0


def _overlapping_planes(ctx: RenderContext, palette: Palette, density: float, connectors: bool) -> list[Element]:
    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    gp = ctx.golden
    colors = palette.colors
    out: list[Element] = []

    p1w = rng.uniform(c * 0.52, c * 0.68)
    p1h = rng.uniform(c * 0.58, c * 0.72)
    p1x = rng.uniform(-p1w * 0.12, c * 0.08)
    p1y = rng.uniform(-p1h * 0.08, c * 0.12)
    p1_color = weighted_pick(rng, colors)
    out.append(with_shadow(art(ctx, "rect", p1x, p1y, p1w, p1h, p1_color, 0.82)))
    grid.insert(RectBounds(p1x, p1y, p1w, p1h))

    p2w = rng.uniform(c * 0.38, c * 0.52)
    p2h = rng.uniform(c * 0.42, c * 0.58)
    p2x = p1x + p1w * rng.uniform(0.2, 0.4)
    p2y = p1y + p1h * rng.uniform(0.15, 0.35)
    p2_color = spatial_color(rng, colors, p2x, p2y, c)
    out.append(with_shadow(art(ctx, "rect", p2x, p2y, p2w, p2h, p2_color, 0.68)))
    grid.insert(RectBounds(p2x, p2y, p2w, p2h))

    if density > 0.3:
        p3w = rng.uniform(c * 0.18, c * 0.28)
        p3h = rng.uniform(c * 0.22, c * 0.32)
        p3x = gp.right_third if rng.draw() > 0.5 else rng.uniform(-p3w * 0.2, c * 0.05)
        p3y = gp.bottom_third if rng.draw() > 0.5 else rng.uniform(c * 0.05, gp.top_third)
        out.append(art(ctx, "rect", p3x, p3y, p3w, p3h, palette.ink, 0.72))
        grid.insert(RectBounds(p3x, p3y, p3w, p3h))

    fr = rng.uniform(c * 0.07, c * 0.13)
    fx = lerp(p1x + p1w / 2, p2x + p2w / 2, rng.uniform(0.35, 0.65))
    fy = lerp(p1y + p1h / 2, p2y + p2h / 2, rng.uniform(0.35, 0.65))
    out.extend(place_signal(ctx, fx, fy, fr))

    # カウンターウェイトはシグナルの対角側
    cwx = (gp.tl[0] if fx > c / 2 else gp.tr[0]) + rng.uniform(-20, 20)
    cwy = (gp.tl[1] if fy > c / 2 else gp.bl[1]) + rng.uniform(-20, 20)
    cw_size = rng.uniform(c * 0.06, c * 0.1)
    if rng.draw() > 0.5:
        out.append(art(ctx, "triangle", cwx, cwy, cw_size * 1.8, rng.uniform_int(0, 3) * 90, palette.ink, 0.85))
    else:
        out.append(art(ctx, "circle", cwx, cwy, cw_size * 0.5, palette.color(2), 0.75))

    if connectors:
        out.append(exact.thin_line(p1x, p1y + p1h, p2x + p2w, p2y, palette.ink, 0.8))
        out.append(exact.thin_line(fx, fy, cwx, cwy, palette.ink, 0.5))
    return out


def _edge_anchored(ctx: RenderContext, palette: Palette, texture: bool) -> list[Element]:
    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    gp = ctx.golden
    colors = palette.colors
    out: list[Element] = []

    anchor_left = rng.draw() > 0.5
    dom_w = rng.uniform(c * 0.42, c * 0.58)
    dom_h = rng.uniform(c * 0.55, c * 0.75)
    if anchor_left:
        dom_x = -dom_w * rng.uniform(0.08, 0.18)
    else:
        dom_x = c - dom_w * rng.uniform(0.82, 0.92)
    dom_y = rng.uniform(-dom_h * 0.05, c * 0.1)
    out.append(with_deep_shadow(art(ctx, "rect", dom_x, dom_y, dom_w, dom_h, weighted_pick(rng, colors), 0.88)))
    grid.insert(RectBounds(dom_x, dom_y, dom_w, dom_h))

    sec_w = rng.uniform(c * 0.28, c * 0.38)
    sec_h = rng.uniform(c * 0.32, c * 0.48)
    if anchor_left:
        sec_x = dom_x + dom_w - sec_w * rng.uniform(0.15, 0.3)
    else:
        sec_x = dom_x - sec_w * rng.uniform(0.55, 0.75)
    sec_y = dom_y + dom_h * rng.uniform(0.25, 0.45)
    out.append(
        with_shadow(art(ctx, "rect", sec_x, sec_y, sec_w, sec_h, spatial_color(rng, colors, sec_x, sec_y, c), 0.72))
    )
    grid.insert(RectBounds(sec_x, sec_y, sec_w, sec_h))

    arc_r = rng.uniform(c * 0.14, c * 0.2)
    if rng.draw() > 0.5:
        arc_x = c if anchor_left else 0
        arc_y = rng.uniform(c * 0.35, c * 0.65)
        out.append(
            with_shadow(art(ctx, "semicircle", arc_x, arc_y, arc_r, 90 if anchor_left else 270, palette.color(2), 0.75))
        )
    else:
        corner = rng.pick(("tr", "br") if anchor_left else ("tl", "bl"))
        arc_x = 0 if "l" in corner else c
        arc_y = 0 if "t" in corner else c
        out.append(exact.quarter_circle(arc_x, arc_y, arc_r * 1.6, corner, palette.color(2), 0.65))

    fr = rng.uniform(c * 0.06, c * 0.1)
    fx = gp.br[0] if anchor_left else gp.bl[0]
    fy = gp.br[1] + rng.uniform(-30, 30)
    out.extend(place_signal(ctx, fx, fy, fr, halo_scale=1.6, halo_opacity=0.4))

    if texture:
        st_w = rng.uniform(35, 55)
        st_h = rng.uniform(120, 200)
        if anchor_left:
            st_x = dom_x + dom_w + rng.uniform(25, 50)
        else:
            st_x = dom_x - st_w - rng.uniform(25, 50)
        st_y = rng.uniform(c * 0.15, c * 0.4)
        direction = "vertical" if rng.draw() > 0.5 else "horizontal"
        out.append(exact.stripe_block(st_x, st_y, st_w, st_h, direction, palette.ink, 8, 1.5))

    sm = rng.uniform(c * 0.04, c * 0.07)
    sm_x = rng.uniform(c * 0.72, c * 0.88) if anchor_left else rng.uniform(c * 0.08, c * 0.22)
    sm_y = rng.uniform(c * 0.72, c * 0.88)
    out.append(art(ctx, "rect", sm_x, sm_y, sm, sm * rng.uniform(1.2, 2.0), palette.ink, 0.65))
    grid.insert(RectBounds(sm_x, sm_y, sm, sm))
    return out


def _diagonal_tension(ctx: RenderContext, palette: Palette, connectors: bool) -> list[Element]:
    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    gp = ctx.golden
    colors = palette.colors
    out: list[Element] = []

    big_r = rng.uniform(c * 0.2, c * 0.26)
    big_x = gp.tl[0] + rng.uniform(30, 80)
    big_y = gp.tl[1] + rng.uniform(40, 100)
    out.append(with_deep_shadow(art(ctx, "circle", big_x, big_y, big_r, weighted_pick(rng, colors), 0.72)))
    grid.insert(CircleBounds(big_x, big_y, big_r))
    out.append(exact.circle_outline(big_x, big_y, big_r * rng.uniform(1.25, 1.5), palette.ink, 1.5, 0.25))

    sec_r = rng.uniform(c * 0.1, c * 0.16)
    sec_x = big_x + big_r * rng.uniform(0.4, 0.7)
    sec_y = big_y + big_r * rng.uniform(-0.3, 0.3)
    out.append(with_shadow(art(ctx, "circle", sec_x, sec_y, sec_r, spatial_color(rng, colors, sec_x, sec_y, c), 0.55)))
    grid.insert(CircleBounds(sec_x, sec_y, sec_r))

    bar_angle = rng.uniform(30, 55) * (1 if rng.draw() > 0.5 else -1)
    bar_len = rng.uniform(c * 0.55, c * 0.75)
    bar_thick = rng.uniform(c * 0.04, c * 0.07)
    out.append(with_shadow(art(ctx, "bar", gp.center[0], gp.bottom_third, bar_len, bar_thick, bar_angle, palette.ink, 0.78)))

    fw = rng.uniform(c * 0.14, c * 0.22)
    fh = rng.uniform(c * 0.18, c * 0.28)
    fx = gp.br[0] + rng.uniform(-20, 40)
    fy = gp.br[1] + rng.uniform(-40, 10)
    out.append(with_shadow(art(ctx, "rect", fx - fw / 2, fy - fh / 2, fw, fh, palette.color(2), 0.6)))
    grid.insert(RectBounds(fx - fw / 2, fy - fh / 2, fw, fh))

    sr = rng.uniform(c * 0.05, c * 0.08)
    out.extend(place_signal(ctx, big_x + big_r * 0.45, big_y - big_r * 0.25, sr, halo_scale=1.6, halo_opacity=0.45))

    if connectors:
        out.append(exact.thin_line(big_x, big_y + big_r, fx, fy, palette.ink, 0.7))
    return out


def _archipelago(ctx: RenderContext, palette: Palette) -> list[Element]:
    """空間グリッドで疎な位置を選びながら島（小図形）を散らす。"""

    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    gp = ctx.golden
    out: list[Element] = []

    island_count = rng.uniform_int(4, 7)
    for i in range(island_count):
        bx, by, _ = grid.sparsest(
            rng,
            attempts=ISLAND_ATTEMPTS,
            x_range=(c * 0.05, c * 0.85),
            y_range=(c * 0.05, c * 0.85),
            radius=ISLAND_RADIUS,
        )
        size = rng.uniform(c * 0.08, c * 0.22) * (1 - i * 0.08)
        color = spatial_color(rng, palette.colors, bx, by, c)
        kind = rng.pick(("rect", "circle", "triangle"))

        if kind == "rect":
            w = size * rng.uniform(0.8, 1.5)
            h = size * rng.uniform(0.8, 1.5)
            out.append(with_shadow(art(ctx, "rect", bx, by, w, h, color, rng.uniform(0.6, 0.9))))
            grid.insert(RectBounds(bx, by, w, h))
        elif kind == "circle":
            r = size / 2
            out.append(with_shadow(art(ctx, "circle", bx + r, by + r, r, color, rng.uniform(0.6, 0.9))))
            grid.insert(CircleBounds(bx + r, by + r, r))
        else:
            rotation = rng.uniform(0, 360)
            out.append(art(ctx, "triangle", bx + size / 2, by + size / 2, size, rotation, color, rng.uniform(0.6, 0.9)))
            grid.insert(RectBounds(bx, by, size, size))

    fr = rng.uniform(c * 0.06, c * 0.1)
    out.extend(place_signal(ctx, gp.center[0], gp.center[1], fr))
    grid.insert(CircleBounds(gp.center[0], gp.center[1], fr))
    return out


def _layered_depth(ctx: RenderContext, palette: Palette) -> list[Element]:
    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    gp = ctx.golden
    colors = palette.colors
    out: list[Element] = []

    layer_count = rng.uniform_int(3, 5)
    for layer in range(layer_count):
        t = layer / (layer_count - 1)
        layer_op = lerp(0.3, 0.9, t)
        layer_scale = lerp(0.6, 1.0, t)
        color = colors[layer % len(colors)]

        w = rng.uniform(c * 0.2, c * 0.45) * layer_scale
        h = rng.uniform(c * 0.25, c * 0.5) * layer_scale
        x = rng.uniform(-w * 0.1, c * 0.5)
        y = rng.uniform(c * t * 0.3, c * (0.2 + t * 0.5))
        if rng.draw() > 0.4:
            out.append(with_shadow(art(ctx, "rect", x, y, w, h, color, layer_op)))
        else:
            out.append(with_shadow(art(ctx, "circle", x + w / 2, y + h / 2, min(w, h) / 2, color, layer_op)))
        grid.insert(RectBounds(x, y, w, h))

    fr = rng.uniform(c * 0.07, c * 0.12)
    fx = gp.br[0] + rng.uniform(-30, 30)
    fy = gp.br[1] + rng.uniform(-30, 30)
    out.extend(place_signal(ctx, fx, fy, fr))

    bar_len = rng.uniform(c * 0.3, c * 0.5)
    bar_thick = rng.uniform(c * 0.02, c * 0.04)
    bx = rng.uniform(c * 0.2, c * 0.6)
    by = rng.uniform(c * 0.1, c * 0.3)
    out.append(art(ctx, "bar", bx, by, bar_len, bar_thick, rng.uniform(-15, 15), palette.ink, 0.7))
    return out


def _micro_accents(ctx: RenderContext, palette: Palette) -> list[Element]:
    """空間グリッド上で疎な場所にだけ小さな点を置く。"""

    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    out: list[Element] = []
    for _ in range(rng.uniform_int(2, 5)):
        ax = rng.uniform(c * 0.05, c * 0.95)
        ay = rng.uniform(c * 0.05, c * 0.95)
        if grid.density(ax, ay, 50) < 2:
            ar = rng.uniform(2, 5)
            color = palette.ink if ctx.noise.sample(ax * 0.01, ay * 0.01) > 0 else palette.color(0)
            out.append(exact.dot(ax, ay, ar, color, rng.uniform(0.3, 0.6)))
            grid.insert(CircleBounds(ax, ay, ar))
    return out


@composer(Archetype.FREE_FORM)
def compose_free_form(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    """FREE_FORM: 少数の大きな平面・円・棒の自由配置。"""

    rng = ctx.rng
    out = [background(ctx, palette)]

    strategy = rng.uniform_int(0, 4)
    # 特徴フラグは密度に関わらず 1 draw ずつ消費する
    has_texture = rng.chance(0.3) and density > 0.35
    has_connectors = rng.chance(0.4) and density > 0.3
    has_micro_accents = rng.chance(0.35)

    if strategy == 0:
        out.extend(_overlapping_planes(ctx, palette, density, has_connectors))
    elif strategy == 1:
        out.extend(_edge_anchored(ctx, palette, has_texture))
    elif strategy == 2:
        out.extend(_diagonal_tension(ctx, palette, has_connectors))
    elif strategy == 3:
        out.extend(_archipelago(ctx, palette))
    else:
        out.extend(_layered_depth(ctx, palette))

    if has_micro_accents:
        out.extend(_micro_accents(ctx, palette))
    return out
