"""organic 図形（ノイズでゆらいだハロー + crisp 図形）をテストする。"""

from __future__ import annotations

import math

import pytest

from plakat.core.context import RenderContext
from plakat.core.scene import Rotation
from plakat.shapes import organic


def _ctx(seed: int = 3) -> RenderContext:
    return RenderContext.create(seed)


def test_rect_amplitude_is_clamped() -> None:
    assert organic.rect_amplitude(1000, 1000) == 2.5
    assert organic.rect_amplitude(200, 200) == pytest.approx(1.6)
    # 細い矩形では最小寸法の 2.5% が上限
    assert organic.rect_amplitude(400, 8) == pytest.approx(0.2)
    assert organic.rect_amplitude(10, 10) == pytest.approx(0.25)


def test_circle_amplitude_is_clamped() -> None:
    assert organic.circle_amplitude(200) == 2.0
    assert organic.circle_amplitude(40) == pytest.approx(1.0)
    assert organic.circle_amplitude(4) == pytest.approx(0.2)


def test_organic_rect_structure() -> None:
    g = organic.organic_rect(_ctx(), 100, 120, 80, 60, "#C04B3C", 0.8)
    assert g.tag == "g"
    halo, crisp = g.children
    assert halo.role == "halo"
    assert halo.tag == "polygon"
    assert halo.get("stroke") == "none"
    assert halo.get("opacity") == pytest.approx(0.8 * organic.HALO_OPACITY_RATIO)
    assert crisp.tag == "rect"
    assert crisp.get("width") == 80
    assert len(halo.get("points")) == 4 * organic.RECT_STEPS
    assert g.get("transform") is None


def test_rect_halo_stays_within_amplitude_of_outline() -> None:
    x, y, w, h = 50.0, 60.0, 200.0, 90.0
    amp = organic.rect_amplitude(w, h)
    g = organic.organic_rect(_ctx(11), x, y, w, h, "#000", offset=12.5)
    for px, py in g.children[0].get("points"):
        assert x - amp - 1e-9 <= px <= x + w + amp + 1e-9
        assert y - amp - 1e-9 <= py <= y + h + amp + 1e-9
        dist_to_edge = min(abs(px - x), abs(px - x - w), abs(py - y), abs(py - y - h))
        assert dist_to_edge <= amp + 1e-9


def test_circle_halo_radius_within_amplitude() -> None:
    cx, cy, r = 280.0, 280.0, 60.0
    amp = organic.circle_amplitude(r)
    g = organic.organic_circle(_ctx(), cx, cy, r, "#3A6EA5")
    pts = g.children[0].get("points")
    assert len(pts) == organic.CIRCLE_STEPS
    for px, py in pts:
        assert abs(math.hypot(px - cx, py - cy) - r) <= amp + 1e-9


def test_offset_draw_consumption() -> None:
    a = _ctx(5)
    before = a.rng.state
    organic.organic_rect(a, 0, 0, 50, 50, "#000", offset=1.0)
    assert a.rng.state == before

    organic.organic_rect(a, 0, 0, 50, 50, "#000")
    b = _ctx(5)
    b.rng.draw()
    assert a.rng.state == b.rng.state


def test_wedge_has_no_halo_and_no_draw() -> None:
    ctx = _ctx()
    before = ctx.rng.state
    e = organic.organic_wedge(ctx, 100, 100, 40, 120, 30, "#CC0000")
    assert e.tag == "polygon"
    assert ctx.rng.state == before


def test_rotation_is_applied_to_group() -> None:
    g = organic.organic_rect(_ctx(), 0, 0, 100, 40, "#000", rotation=15)
    assert g.get("transform") == Rotation(15.0, 50.0, 20.0)
    bar = organic.organic_bar(_ctx(), 50, 20, 100, 40, 15, "#000")
    assert bar.get("transform") == Rotation(15.0, 50.0, 20.0)


def test_same_context_seed_gives_same_halo() -> None:
    a = organic.organic_triangle(_ctx(9), 200, 200, 80, 20, "#000")
    b = organic.organic_triangle(_ctx(9), 200, 200, 80, 20, "#000")
    assert a == b
    c = organic.organic_triangle(_ctx(10), 200, 200, 80, 20, "#000")
    assert a.children[0].get("points") != c.children[0].get("points")
