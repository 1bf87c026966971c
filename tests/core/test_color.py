"""色選択（weighted_pick / spatial_color / harmonic_colors）をテストする。"""

from __future__ import annotations

import pytest

from plakat.core.color import default_weights, harmonic_colors, spatial_color, weighted_pick
from plakat.core.rng import SeededRng

COLORS = ("#111111", "#222222", "#333333", "#444444", "#555555")


class _FixedDraw(SeededRng):
    """draw() が常に同じ値を返すテスト用乱数源。"""

    __slots__ = ("_value", "calls")

    def __init__(self, value: float) -> None:
        super().__init__(0)
        self._value = value
        self.calls = 0

    def draw(self) -> float:
        self.calls += 1
        return self._value


def test_default_weights_decay() -> None:
    w = default_weights(5)
    assert w[:3] == [0.35, 0.25, 0.2]
    assert w[3] == pytest.approx(0.1)
    assert sum(w) == pytest.approx(1.0)


def test_weighted_pick_uses_cumulative_weights() -> None:
    assert weighted_pick(_FixedDraw(0.0), COLORS) == COLORS[0]
    assert weighted_pick(_FixedDraw(0.5), COLORS) == COLORS[1]
    assert weighted_pick(_FixedDraw(0.999), COLORS) == COLORS[4]


def test_weighted_pick_consumes_one_draw() -> None:
    rng = _FixedDraw(0.3)
    weighted_pick(rng, COLORS, [1, 1, 1, 1, 1])
    assert rng.calls == 1


@pytest.mark.parametrize(
    "weights",
    [
        [1.0, 2.0],
        [-1.0, 1.0, 1.0, 1.0, 1.0],
        [0.0, 0.0, 0.0, 0.0, 0.0],
        [float("nan"), 1.0, 1.0, 1.0, 1.0],
    ],
)
def test_weighted_pick_falls_back_to_uniform_on_bad_weights(weights) -> None:
    # 一様抽選: index = floor(0.5 * 5) = 2
    assert weighted_pick(_FixedDraw(0.5), COLORS, weights) == COLORS[2]


def test_weighted_pick_rejects_empty_colors() -> None:
    with pytest.raises(ValueError):
        weighted_pick(SeededRng(1), [])


def test_spatial_color_biases_by_position() -> None:
    top_left = [spatial_color(SeededRng(s), COLORS[:2], 0, 0, 560) for s in range(300)]
    bottom_right = [spatial_color(SeededRng(s), COLORS[:2], 560, 560, 560) for s in range(300)]
    assert top_left.count(COLORS[0]) > bottom_right.count(COLORS[0])


def test_harmonic_colors_cycles_shuffled_palette() -> None:
    out = harmonic_colors(SeededRng(4), COLORS[:3], 7)
    assert len(out) == 7
    assert out[:3] == out[3:6]
    assert sorted(out[:3]) == sorted(COLORS[:3])
