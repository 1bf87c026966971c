"""
どこで: `src/plakat/composers/grid.py`。
何を: 非一様な罫線グリッド・傾いた浮遊矩形・セルごとの図形配列の 3 戦略で構図を組む。
なぜ: 比例と均衡を主題とする格子構成を、密度で罫線の太さと分割数を変えながら作るため。
"""

from __future__ import annotations

from plakat.composers._common import (
    art,
    background,
    nearest,
    place_signal,
    with_shadow,
)
from plakat.core.archetype import Archetype
from plakat.core.color import spatial_color, weighted_pick
from plakat.core.composer_registry import composer
from plakat.core.context import RenderContext
from plakat.core.palettes import SIGNAL_COLOR, Palette
from plakat.core.scene import Element
from plakat.core.spatial_grid import RectBounds
from plakat.shapes import exact

CELL_SHAPES = ("circle", "semicircle", "triangle", "rect", "quarter", "empty")


def _divisions(ctx: RenderContext, count: int) -> list[float]:
    """0 と C を両端に持つ、非一様な分割位置の列を返す。"""

    rng, c = ctx.rng, ctx.canvas_size
    lines = [0.0]
    min_gap = c * 0.1
    for i in range(count):
        prev = lines[-1]
        max_gap = (c - prev) - min_gap * (count - i)
        lines.append(prev + rng.uniform(min_gap, max(min_gap + 1, max_gap)))
    lines.append(float(c))
    return lines


def _ruled_cells(ctx: RenderContext, palette: Palette, density: float, line_w: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    out: list[Element] = []

    v_lines = _divisions(ctx, rng.uniform_int(3, 5))
    h_lines = _divisions(ctx, rng.uniform_int(2, 4))

    cells: list[tuple[float, float, float, float]] = []
    for r in range(len(h_lines) - 1):
        for col in range(len(v_lines) - 1):
            cells.append((v_lines[col], h_lines[r], v_lines[col + 1] - v_lines[col], h_lines[r + 1] - h_lines[r]))

    # 面積の大きいセルほど色を受けやすい
    by_area = sorted(range(len(cells)), key=lambda k: cells[k][2] * cells[k][3], reverse=True)
    color_count = rng.uniform_int(2, min(4, int(2 + density * 3)))
    assigned = rng.shuffle(palette.colors)[:color_count]
    fills: dict[int, str] = {}
    for i in range(min(len(assigned), len(by_area))):
        fills[by_area[i]] = assigned[i]

    if len(by_area) > color_count:
        gold = by_area[rng.uniform_int(1, min(4, len(by_area) - 1))]
        fills.setdefault(gold, SIGNAL_COLOR)

    for k, (x, y, w, h) in enumerate(cells):
        if k in fills:
            out.append(with_shadow(art(ctx, "rect", x, y, w, h, fills[k], 0.85)).with_role("cell"))

    for x in v_lines[1:-1]:
        out.append(exact.thick_line(x, 0, x, c, palette.ink, line_w))
    for y in h_lines[1:-1]:
        out.append(exact.thick_line(0, y, c, y, palette.ink, line_w))
    out.append(exact.rect_outline(0, 0, c, c, palette.ink, line_w))

    # 罫線の交点のうち黄金比アンカーに最も近い点にシグナルを置く
    ax, ay = rng.pick(ctx.golden.anchors())
    sx = nearest(v_lines[1:-1] or [ax], ax)
    sy = nearest(h_lines[1:-1] or [ay], ay)
    out.extend(place_signal(ctx, sx, sy, rng.uniform(c * 0.025, c * 0.04) + line_w, halo_scale=1.6, halo_opacity=0.4))
    return out


def _floating_rects(ctx: RenderContext, palette: Palette) -> list[Element]:
    rng, grid, c = ctx.rng, ctx.grid, ctx.canvas_size
    colors = palette.colors
    out: list[Element] = []

    rects: list[tuple[float, float, float, float, float, str, float]] = []
    for _ in range(rng.uniform_int(7, 13)):
        w = rng.uniform(c * 0.08, c * 0.25)
        h = rng.uniform(c * 0.06, c * 0.2)
        x, y, _ = grid.sparsest(
            rng, attempts=3, x_range=(c * 0.05, c * 0.85), y_range=(c * 0.05, c * 0.85), radius=w / 2
        )
        grid.insert(RectBounds(x, y, w, h))
        angle = rng.uniform(-35, 35)
        color = spatial_color(rng, colors, x, y, c)
        rects.append((x, y, w, h, angle, color, rng.uniform(0.65, 1.0)))

    # 大きいものほど奥
    rects.sort(key=lambda r: r[2] * r[3], reverse=True)
    for x, y, w, h, angle, color, opacity in rects:
        out.append(with_shadow(art(ctx, "rect", x, y, w, h, color, opacity, rotation=angle)))

    for i in range(rng.uniform_int(1, 3)):
        cr = rng.uniform(c * 0.03, c * 0.08)
        cx = rng.uniform(c * 0.1, c * 0.9)
        cy = rng.uniform(c * 0.1, c * 0.9)
        if i == 0:
            out.extend(place_signal(ctx, cx, cy, cr, halo_opacity=0.4))
        else:
            out.append(with_shadow(art(ctx, "circle", cx, cy, cr, weighted_pick(rng, colors), rng.uniform(0.6, 0.9))))
    return out


def _shape_per_cell(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    rng, c = ctx.rng, ctx.canvas_size
    colors = palette.colors
    out: list[Element] = []

    n = 5 if density > 0.7 else 4 if density > 0.4 else 3
    margin = 20
    gutter = 6
    cell = (c - margin * 2 - gutter * (n - 1)) / n
    prev_shape = ""

    for r in range(n):
        for col in range(n):
            x = margin + col * (cell + gutter)
            y = margin + r * (cell + gutter)
            cx = x + cell / 2
            cy = y + cell / 2
            out.append(exact.rect_outline(x, y, cell, cell, palette.ink, 1, 0.15))

            kind = rng.pick([s for s in CELL_SHAPES if s != prev_shape])
            prev_shape = kind
            color = spatial_color(rng, colors, cx, cy, c)
            inner_r = cell * 0.38
            inner_s = cell * 0.7
            is_filled = rng.draw() > 0.3
            ix = x + (cell - inner_s) / 2
            iy = y + (cell - inner_s) / 2

            if kind == "circle":
                if is_filled:
                    out.append(art(ctx, "circle", cx, cy, inner_r, color, 0.85))
                else:
                    out.append(exact.circle_outline(cx, cy, inner_r, color, 2))
            elif kind == "semicircle":
                out.append(art(ctx, "semicircle", cx, cy, inner_r, rng.pick((0, 90, 180, 270)), color, 0.85))
            elif kind == "triangle":
                out.append(art(ctx, "triangle", cx, cy, inner_s, rng.pick((0, 60, 120, 180, 240, 300)), color, 0.85))
            elif kind == "rect":
                if rng.draw() < 0.3:
                    out.append(art(ctx, "rect", ix, iy, inner_s / 2, inner_s, color, 0.85))
                    out.append(art(ctx, "rect", ix + inner_s / 2, iy, inner_s / 2, inner_s, weighted_pick(rng, colors), 0.7))
                else:
                    out.append(art(ctx, "rect", ix, iy, inner_s, inner_s, color, 0.85))
            elif kind == "quarter":
                qx = rng.pick((x, x + cell))
                qy = rng.pick((y, y + cell))
                out.append(exact.quarter_circle(qx, qy, cell * 0.8, rng.pick(exact.QUARTER_CORNERS), color, 0.8))

    gx = margin + rng.uniform_int(0, n - 1) * (cell + gutter) + cell / 2
    gy = margin + rng.uniform_int(0, n - 1) * (cell + gutter) + cell / 2
    out.extend(place_signal(ctx, gx, gy, cell * 0.4, halo_scale=1.6, halo_opacity=0.35, opacity=0.85))
    return out


@composer(Archetype.GRID)
def compose_grid(ctx: RenderContext, palette: Palette, density: float) -> list[Element]:
    """GRID: 格子構成。罫線の太さは密度で 3 / 4 / 5 に切り替える。"""

    line_w = 5 if density > 0.7 else 4 if density > 0.4 else 3
    out = [background(ctx, palette)]

    strategy = ctx.rng.uniform_int(0, 2)
    if strategy == 0:
        out.extend(_ruled_cells(ctx, palette, density, line_w))
    elif strategy == 1:
        out.extend(_floating_rects(ctx, palette))
    else:
        out.extend(_shape_per_cell(ctx, palette, density))
    return out
