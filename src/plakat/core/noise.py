"""seed 由来の置換表で構築する 2D シンプレックスノイズ場。"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[import-untyped]

PERMUTATION_SIZE = 256

# ノイズ出力を概ね [-1, 1] に正規化する係数。
NOISE_SCALE: float = 70.0

_F2: float = 0.5 * (math.sqrt(3.0) - 1.0)
_G2: float = (3.0 - math.sqrt(3.0)) / 6.0

_GRAD2_12 = [
    [1.0, 1.0],
    [-1.0, 1.0],
    [1.0, -1.0],
    [-1.0, -1.0],
    [1.0, 0.0],
    [-1.0, 0.0],
    [0.0, 1.0],
    [0.0, -1.0],
    [1.0, 1.0],
    [-1.0, 1.0],
    [1.0, -1.0],
    [-1.0, -1.0],
]

NOISE_GRADIENTS_2D = np.asarray(_GRAD2_12, dtype=np.float64)
NOISE_GRADIENTS_2D.setflags(write=False)


@njit(cache=True)
def _corner(t, gi, x, y, grad2_array):
    """1 頂点ぶんの寄与を返す。"""
    if t <= 0.0:
        return 0.0
    t = t * t
    return t * t * (grad2_array[gi, 0] * x + grad2_array[gi, 1] * y)


@njit(cache=True)
def simplex_noise_2d(x, y, perm_table, grad2_array):
    """2 次元シンプレックスノイズ生成。"""
    s = (x + y) * _F2
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    t = (i + j) * _G2
    x0 = x - (i - t)
    y0 = y - (j - t)

    if x0 > y0:
        i1 = 1
        j1 = 0
    else:
        i1 = 0
        j1 = 1

    x1 = x0 - i1 + _G2
    y1 = y0 - j1 + _G2
    x2 = x0 - 1.0 + 2.0 * _G2
    y2 = y0 - 1.0 + 2.0 * _G2
    ii = i & 255
    jj = j & 255

    g0 = perm_table[ii + perm_table[jj]] % 12
    g1 = perm_table[ii + i1 + perm_table[jj + j1]] % 12
    g2 = perm_table[ii + 1 + perm_table[jj + 1]] % 12

    n0 = _corner(0.5 - x0 * x0 - y0 * y0, g0, x0, y0, grad2_array)
    n1 = _corner(0.5 - x1 * x1 - y1 * y1, g1, x1, y1, grad2_array)
    n2 = _corner(0.5 - x2 * x2 - y2 * y2, g2, x2, y2, grad2_array)
    return NOISE_SCALE * (n0 + n1 + n2)


@njit(cache=True)
def simplex_noise_2d_many(xs, ys, perm_table, grad2_array):
    """座標配列の各点でノイズを評価する。"""
    n = xs.shape[0]
    out = np.zeros(n, dtype=np.float64)
    for k in range(n):
        out[k] = simplex_noise_2d(xs[k], ys[k], perm_table, grad2_array)
    return out


@dataclass(frozen=True, slots=True, eq=False)
class NoiseField:
    """1 回の render 内で不変な 2D ノイズ場。

    Parameters
    ----------
    perm : np.ndarray
        int64 型 shape (512,) の置換表（256 要素の置換を 2 周複製したもの）。

    Notes
    -----
    構築後は乱数を消費しない純関数として標本化できる。
    """

    perm: np.ndarray

    def __post_init__(self) -> None:
        perm = np.asarray(self.perm)
        if perm.shape != (2 * PERMUTATION_SIZE,):
            raise ValueError("perm は shape (512,) である必要がある")
        if perm.dtype != np.int64:
            perm = perm.astype(np.int64, copy=True)
        perm.setflags(write=False)
        object.__setattr__(self, "perm", perm)

    @classmethod
    def build(cls, draw: Callable[[], float]) -> "NoiseField":
        """乱数関数 draw からちょうど 256 回引いて置換表を作る。

        Parameters
        ----------
        draw : Callable[[], float]
            [0, 1) を返す乱数関数（通常は `SeededRng.draw`）。

        Returns
        -------
        NoiseField
            構築済みのノイズ場。
        """
        p = list(range(PERMUTATION_SIZE))
        # i == 0 の手番も 1 draw として消費する（置換は恒等）。
        for i in range(PERMUTATION_SIZE - 1, -1, -1):
            j = int(draw() * (i + 1))
            p[i], p[j] = p[j], p[i]
        return cls(perm=np.asarray(p + p, dtype=np.int64))

    def sample(self, x: float, y: float) -> float:
        """(x, y) のノイズ値（概ね [-1, 1]）を返す。"""

        return float(simplex_noise_2d(float(x), float(y), self.perm, NOISE_GRADIENTS_2D))

    def sample_many(self, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        """座標配列の各点のノイズ値を float64 配列で返す。"""

        _xs = np.ascontiguousarray(xs, dtype=np.float64).reshape(-1)
        _ys = np.ascontiguousarray(ys, dtype=np.float64).reshape(-1)
        if _xs.shape != _ys.shape:
            raise ValueError("xs と ys は同じ長さである必要がある")
        return simplex_noise_2d_many(_xs, _ys, self.perm, NOISE_GRADIENTS_2D)


__all__ = ["NOISE_SCALE", "NoiseField", "PERMUTATION_SIZE", "simplex_noise_2d"]
