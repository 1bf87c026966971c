"""
どこで: `src/plakat/core/color.py`。
何を: 重み付き抽選と位置バイアス付き抽選による色選択を提供する。
なぜ: 一様乱数ではなく「主色が多く、差し色は稀」という配色の偏りを seed 決定的に作るため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from plakat.core.rng import SeededRng


def default_weights(n: int) -> list[float]:
    """n 色に対する既定の減衰重み（35% / 25% / 20% / 残りを等分）を返す。"""

    rest = 0.2 / max(1, n - 3)
    weights: list[float] = []
    for i in range(int(n)):
        if i == 0:
            weights.append(0.35)
        elif i == 1:
            weights.append(0.25)
        elif i == 2:
            weights.append(0.2)
        else:
            weights.append(rest)
    return weights


def _valid_weights(weights: Sequence[float], n: int) -> bool:
    if len(weights) != n:
        return False
    total = 0.0
    for w in weights:
        fw = float(w)
        if not math.isfinite(fw) or fw < 0.0:
            return False
        total += fw
    return total > 0.0


def weighted_pick(
    rng: SeededRng,
    colors: Sequence[str],
    weights: Sequence[float] | None = None,
) -> str:
    """累積重みで 1 色を選んで返す。

    Parameters
    ----------
    rng : SeededRng
        乱数源。ちょうど 1 draw を消費する。
    colors : Sequence[str]
        候補色列（空は不可）。
    weights : Sequence[float] or None, optional
        各色の重み。None なら `default_weights`。負値や合計 0 など不正な場合は
        一様抽選にフォールバックする。

    Returns
    -------
    str
        選ばれた色。
    """
    if not colors:
        raise ValueError("weighted_pick には 1 色以上が必要")

    _weights = default_weights(len(colors)) if weights is None else list(weights)
    if not _valid_weights(_weights, len(colors)):
        return rng.pick(colors)

    total = sum(float(w) for w in _weights)
    r = rng.draw() * total
    for color, w in zip(colors, _weights):
        r -= float(w)
        if r <= 0.0:
            return color
    return colors[-1]


def spatial_color(
    rng: SeededRng,
    colors: Sequence[str],
    x: float,
    y: float,
    canvas_size: float,
) -> str:
    """キャンバス上の位置に応じて色の重みを偏らせて 1 色を選ぶ。

    Notes
    -----
    左上ほど colors[0]、右下ほど colors[1] の重みが増える（双線形バイアス）。
    残りの色には小さな乱数重みを与える。消費 draw 数は `len(colors) - 2 + 1`。
    """
    c = float(canvas_size) if canvas_size else 1.0
    nx = float(x) / c
    ny = float(y) / c
    warm_bias = (1.0 - nx) * (1.0 - ny)
    cool_bias = nx * ny

    weights: list[float] = []
    for i in range(len(colors)):
        if i == 0:
            weights.append(0.2 + warm_bias * 0.3)
        elif i == 1:
            weights.append(0.2 + cool_bias * 0.3)
        else:
            weights.append(0.15 + rng.draw() * 0.1)
    return weighted_pick(rng, colors, weights)


def harmonic_colors(rng: SeededRng, colors: Sequence[str], count: int) -> list[str]:
    """シャッフルした色を巡回して count 色を返す（隣接の同色を避ける）。"""

    pool = rng.shuffle(colors)
    return [pool[i % len(pool)] for i in range(int(count))]


__all__ = ["default_weights", "harmonic_colors", "spatial_color", "weighted_pick"]
