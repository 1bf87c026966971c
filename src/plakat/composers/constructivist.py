"""
どこで: `src/plakat/composers/constructivist.py`。
何を: 赤い楔・シュプレマティスムの浮遊形・ポスター的な対角分割の 3 戦略で構図を組む。
なぜ: 赤・黒・地色に絞った配色と対角線の運動で、緊張した構成を作るため。
"""

from __future__ import annotations

import math

from plakat.composers._common import (
    art,
    background,
    farthest_anchor,
    place_signal,
    with_deep_shadow,
    with_shadow,
)
from plakat.core.archetype import Archetype
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.palettes import Palette
from plakat.core.rng import SeededRng
from plakat.core.scene import Element
from plakat.core.spatial_grid import CircleBounds, RectBounds
from plakat.shapes import exact

FRAGMENT_ATTEMPTS = 3


def _counter_signal(ctx: RenderContext, focus_x: float, focus_y: float) -> list[Element]:
    """主塊から最も遠い黄金比交点にシグナルを置く。"""

    c = ctx.canvas_size
    x, y = farthest_anchor(ctx, focus_x, focus_y)
    r = ctx.rng.uniform(c * 0.025, c * 0.045)
    return place_signal(ctx, x, y, r, halo_scale=2.0, halo_opacity=0.4)


def _red_wedge(ctx: RenderContext, density: float, red: str, black: str) -> list[Element]:
    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    out: list[Element] = []

    wx = rng.uniform(c * 0.3, c * 0.5)
    wy = rng.uniform(c * 0.3, c * 0.55)
    ww = rng.uniform(c * 0.22, c * 0.35)
    wh = rng.uniform(c * 0.32, c * 0.5)
    w_angle = rng.uniform(-60, -20)
    out.append(with_deep_shadow(art(ctx, "wedge", wx, wy, ww, wh, w_angle, red, 0.95)))
    grid.insert(RectBounds(wx - ww / 2, wy - wh / 2, ww, wh))

    rad = math.radians(w_angle)
    cr = rng.uniform(c * 0.15, c * 0.25)
    cx = wx + math.cos(rad) * c * rng.uniform(0.15, 0.3)
    cy = wy + math.sin(rad) * c * rng.uniform(0.15, 0.3)
    out.append(with_shadow(art(ctx, "circle", cx, cy, cr, black, 0.8)))
    grid.insert(CircleBounds(cx, cy, cr))

    # 楔から放射する力線
    for _ in range(rng.uniform_int(3, 6)):
        l_rad = math.radians(w_angle + rng.uniform(-25, 25))
        lx = wx + rng.uniform(-30, 30)
        ly = wy + rng.uniform(-30, 30)
        length = rng.uniform(c * 0.3, c * 0.8)
        out.append(
            exact.thin_line(lx, ly, lx + math.cos(l_rad) * length, ly + math.sin(l_rad) * length, black, rng.uniform(0.5, 2))
        )

    # 力で砕けた破片。楔の周りで空いている方向を選ぶ
    def around_wedge(r: SeededRng) -> tuple[float, float]:
        f_rad = math.radians(w_angle + r.uniform(-40, 40))
        dist = r.uniform(c * 0.2, c * 0.4)
        return wx + math.cos(f_rad) * dist, wy + math.sin(f_rad) * dist

    for _ in range(rng.uniform_int(2, 5)):
        size = rng.uniform(c * 0.03, c * 0.08)
        fx, fy, _ = grid.sparsest(
            rng, attempts=FRAGMENT_ATTEMPTS, x_range=(0, c), y_range=(0, c), radius=size, sampler=around_wedge
        )
        color = red if rng.draw() > 0.6 else black
        if rng.draw() > 0.5:
            h = size * rng.uniform(1, 2.5)
            opacity = rng.uniform(0.5, 0.9)
            out.append(art(ctx, "rect", fx - size / 2, fy - size / 2, size, h, color, opacity, rotation=rng.uniform(-45, 45)))
        else:
            out.append(art(ctx, "triangle", fx, fy, size * 1.5, rng.uniform(0, 360), color, rng.uniform(0.5, 0.9)))
        grid.insert(CircleBounds(fx, fy, size))

    if density > 0.4:
        ac = rng.uniform(c * 0.03, c * 0.06)
        ax = rng.uniform(c * 0.05, c * 0.2) if rng.draw() > 0.5 else rng.uniform(c * 0.75, c * 0.95)
        ay = rng.uniform(c * 0.05, c * 0.3)
        out.append(art(ctx, "rect", ax, ay, ac, ac * 2, red, 0.7))

    out.extend(_counter_signal(ctx, wx, wy))
    return out


def _suprematist(ctx: RenderContext, density: float, red: str, black: str) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    mw = rng.uniform(c * 0.25, c * 0.4)
    mh = rng.uniform(c * 0.08, c * 0.15)
    m_angle = rng.uniform(20, 55) * (1 if rng.draw() > 0.5 else -1)
    mx = rng.uniform(c * 0.25, c * 0.55)
    my = rng.uniform(c * 0.3, c * 0.5)
    out.append(with_deep_shadow(art(ctx, "rect", mx - mw / 2, my - mh / 2, mw, mh, black, 0.9, rotation=m_angle)))

    cross_size = rng.uniform(c * 0.08, c * 0.15)
    cross_x = mx + rng.uniform(-c * 0.15, c * 0.15)
    cross_y = my + rng.uniform(-c * 0.2, -c * 0.1)
    out.append(exact.cross(cross_x, cross_y, cross_size, red, 4))

    bw = rng.uniform(c * 0.35, c * 0.55)
    bh = rng.uniform(c * 0.04, c * 0.08)
    b_angle = m_angle + rng.uniform(30, 60)
    bx = rng.uniform(c * 0.35, c * 0.6)
    by = rng.uniform(c * 0.45, c * 0.7)
    out.append(with_deep_shadow(art(ctx, "bar", bx, by, bw, bh, b_angle, red, 0.85)))

    tri = rng.uniform(c * 0.06, c * 0.12)
    tx = rng.uniform(c * 0.6, c * 0.85)
    ty = rng.uniform(c * 0.15, c * 0.4)
    out.append(art(ctx, "triangle", tx, ty, tri, rng.uniform(0, 360), black, 0.7))

    sr = rng.uniform(c * 0.02, c * 0.05)
    sx = rng.uniform(c * 0.1, c * 0.3)
    sy = rng.uniform(c * 0.6, c * 0.85)
    out.append(art(ctx, "circle", sx, sy, sr, red, 0.8))

    if density > 0.3:
        for _ in range(2):
            angle = rng.uniform(10, 80) * (1 if rng.draw() > 0.5 else -1)
            px = rng.uniform(c * 0.2, c * 0.8)
            py = rng.uniform(c * 0.2, c * 0.8)
            out.append(exact.diagonal_line(angle, px, py, black, 0.5, canvas_size=c))

    out.extend(_counter_signal(ctx, mx, my))
    return out


def _poster(ctx: RenderContext, red: str, black: str) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    if rng.draw() > 0.5:
        big_r = rng.uniform(c * 0.2, c * 0.35)
        fx = rng.uniform(c * 0.3, c * 0.6)
        fy = rng.uniform(c * 0.35, c * 0.65)
        out.append(with_shadow(art(ctx, "circle", fx, fy, big_r, black, 0.15)))
        out.append(exact.circle_outline(fx, fy, big_r, black, 2, 0.5))
        ww = rng.uniform(c * 0.15, c * 0.25)
        wh = rng.uniform(c * 0.25, c * 0.45)
        out.append(with_deep_shadow(art(ctx, "wedge", fx, fy, ww, wh, rng.uniform(-70, -20), red, 0.9)))
    else:
        rw = rng.uniform(c * 0.3, c * 0.5)
        rh = rng.uniform(c * 0.25, c * 0.4)
        rx = rng.uniform(c * 0.25, c * 0.5) - rw / 2
        ry = rng.uniform(c * 0.35, c * 0.55) - rh / 2
        out.append(with_shadow(art(ctx, "rect", rx, ry, rw, rh, black, 0.2)))
        out.append(exact.rect_outline(rx, ry, rw, rh, black, 2, 0.6))
        ww = rng.uniform(c * 0.18, c * 0.3)
        wh = rng.uniform(c * 0.25, c * 0.4)
        fx = rx + rw * 0.4
        fy = ry + rh * 0.3
        out.append(with_deep_shadow(art(ctx, "wedge", fx, fy, ww, wh, rng.uniform(-80, -30), red, 0.9)))

    for _ in range(rng.uniform_int(3, 7)):
        angle = rng.uniform(10, 80) * (1 if rng.draw() > 0.5 else -1)
        lx = rng.uniform(c * 0.1, c * 0.9)
        ly = rng.uniform(c * 0.1, c * 0.9)
        out.append(exact.diagonal_line(angle, lx, ly, black, rng.uniform(0.3, 1.5), canvas_size=c))

    for _ in range(rng.uniform_int(1, 3)):
        size = rng.uniform(c * 0.03, c * 0.07)
        ax = rng.uniform(c * 0.05, c * 0.95)
        ay = rng.uniform(c * 0.05, c * 0.95)
        color = red if rng.draw() > 0.5 else black
        h = size * rng.uniform(0.5, 2)
        opacity = rng.uniform(0.4, 0.8)
        out.append(art(ctx, "rect", ax, ay, size, h, color, opacity, rotation=rng.uniform(0, 360)))

    out.extend(_counter_signal(ctx, fx, fy))
    return out


@composer(Archetype.CONSTRUCTIVIST)
def compose_constructivist(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    """CONSTRUCTIVIST: 先頭 2 色を赤と黒として使う。"""

    red = palette.colors[0]
    black = palette.color(1)
    out = [background(ctx, palette)]

    strategy = ctx.rng.uniform_int(0, 2)
    if strategy == 0:
        out.extend(_red_wedge(ctx, density, red, black))
    elif strategy == 1:
        out.extend(_suprematist(ctx, density, red, black))
    else:
        out.extend(_poster(ctx, red, black))
    return out
