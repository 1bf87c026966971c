"""SpatialGrid の登録・重複除去・密度・疎領域探索をテストする。"""

from __future__ import annotations

import pytest

from plakat.core.rng import SeededRng
from plakat.core.spatial_grid import CircleBounds, RectBounds, SpatialGrid


def test_query_deduplicates_multi_cell_bounds() -> None:
    grid = SpatialGrid(80)
    big = RectBounds(10, 10, 300, 300)
    grid.insert(big)
    assert len(grid) == 1
    hits = grid.query(RectBounds(0, 0, 560, 560))
    assert hits == [big]


def test_query_preserves_insertion_order() -> None:
    grid = SpatialGrid(80)
    a = RectBounds(0, 0, 10, 10)
    b = CircleBounds(20, 20, 5)
    grid.insert(a)
    grid.insert(b)
    assert grid.query(RectBounds(0, 0, 40, 40)) == [a, b]


def test_density_counts_nearby_bounds_only() -> None:
    grid = SpatialGrid(80)
    for i in range(3):
        grid.insert(CircleBounds(40 + i, 40, 10))
    grid.insert(RectBounds(480, 480, 20, 20))
    assert grid.density(40, 40, 10) == 3
    assert grid.density(490, 490, 5) == 1
    assert grid.density(280, 280, 5) == 0


def test_cell_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        SpatialGrid(0)


def test_sparsest_prefers_empty_region() -> None:
    grid = SpatialGrid(80)
    for x in range(0, 280, 20):
        for y in range(0, 560, 20):
            grid.insert(RectBounds(x, y, 10, 10))
    x, _y, density = grid.sparsest(
        SeededRng(5), attempts=64, x_range=(0, 560), y_range=(0, 560), radius=20
    )
    assert density == 0
    assert x >= 280 - 40


def test_sparsest_draw_count_is_fixed() -> None:
    grid = SpatialGrid(80)
    rng = SeededRng(99)
    grid.sparsest(rng, attempts=5, x_range=(0, 560), y_range=(0, 560), radius=30)
    expected = SeededRng(99)
    for _ in range(10):
        expected.draw()
    assert rng.state == expected.state


def test_sparsest_uses_sampler() -> None:
    grid = SpatialGrid(80)
    seen: list[int] = []

    def sampler(rng: SeededRng) -> tuple[float, float]:
        seen.append(1)
        return 100.0, 200.0

    x, y, density = grid.sparsest(
        SeededRng(1), attempts=3, x_range=(0, 1), y_range=(0, 1), radius=5, sampler=sampler
    )
    assert (x, y, density) == (100.0, 200.0, 0)
    assert len(seen) == 3
