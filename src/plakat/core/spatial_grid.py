"""
どこで: `src/plakat/core/spatial_grid.py`。
何を: 配置済み図形の外接範囲をセル単位でバケット化する空間ハッシュグリッド。
なぜ: 候補位置の局所密度を O(セル数) で引き、疎な領域を優先する貪欲配置を実現するため。
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from plakat.core.rng import SeededRng

# 各コンポーザが用いる既定のセル寸法。
DEFAULT_CELL_SIZE = 80.0


@dataclass(frozen=True, slots=True, eq=False)
class RectBounds:
    """軸平行矩形の範囲。"""

    x: float
    y: float
    w: float
    h: float

    def extent(self) -> tuple[float, float, float, float]:
        return self.x, self.y, self.x + self.w, self.y + self.h


@dataclass(frozen=True, slots=True, eq=False)
class CircleBounds:
    """円の範囲（外接正方形でバケット化する）。"""

    cx: float
    cy: float
    r: float

    def extent(self) -> tuple[float, float, float, float]:
        return self.cx - self.r, self.cy - self.r, self.cx + self.r, self.cy + self.r


Bounds = RectBounds | CircleBounds


class SpatialGrid:
    """セル座標 -> 範囲リストの辞書で構成する空間ハッシュ。

    Notes
    -----
    - 複数セルにまたがる範囲は重なる全セルへ登録し、query 時に重複を除く。
    - 重なりを保証的に排除する packer ではない。密度判定のための近似索引。
    - 1 回の render 内でのみ使い、出力には含めない。
    """

    def __init__(self, cell_size: float = DEFAULT_CELL_SIZE) -> None:
        _cell = float(cell_size)
        if _cell <= 0:
            raise ValueError("cell_size は正の値である必要がある")
        self._cell_size = _cell
        self._cells: dict[tuple[int, int], list[Bounds]] = {}
        self._count = 0

    @property
    def cell_size(self) -> float:
        return self._cell_size

    def __len__(self) -> int:
        """挿入済み範囲の総数を返す。"""
        return self._count

    def _cell_range(self, bounds: Bounds) -> tuple[int, int, int, int]:
        x1, y1, x2, y2 = bounds.extent()
        c1 = math.floor(x1 / self._cell_size)
        r1 = math.floor(y1 / self._cell_size)
        c2 = math.floor(x2 / self._cell_size)
        r2 = math.floor(y2 / self._cell_size)
        return c1, r1, c2, r2

    def insert(self, bounds: Bounds) -> None:
        """範囲を重なる全セルへ登録する。"""

        c1, r1, c2, r2 = self._cell_range(bounds)
        for r in range(r1, r2 + 1):
            for c in range(c1, c2 + 1):
                self._cells.setdefault((c, r), []).append(bounds)
        self._count += 1

    def query(self, bounds: Bounds) -> list[Bounds]:
        """bounds と同じセルに登録された範囲を重複なしで返す。

        Returns
        -------
        list[Bounds]
            初出順（挿入順ベース）に並んだ範囲列。
        """
        c1, r1, c2, r2 = self._cell_range(bounds)
        seen: dict[int, Bounds] = {}
        for r in range(r1, r2 + 1):
            for c in range(c1, c2 + 1):
                for item in self._cells.get((c, r), ()):
                    seen.setdefault(id(item), item)
        return list(seen.values())

    def density(self, x: float, y: float, radius: float) -> int:
        """点 (x, y) の半径 radius 近傍に登録された範囲数を返す。"""

        return len(self.query(CircleBounds(float(x), float(y), float(radius))))

    def sparsest(
        self,
        rng: SeededRng,
        *,
        attempts: int,
        x_range: tuple[float, float],
        y_range: tuple[float, float],
        radius: float,
        sampler: Callable[[SeededRng], tuple[float, float]] | None = None,
    ) -> tuple[float, float, int]:
        """ランダム候補を attempts 個引き、局所密度が最小の点を返す。

        Notes
        -----
        attempts 回ぶんの候補を必ず引くため、乱数消費量は結果に依存しない。
        同密度の候補は先に引いたものを優先する。

        Returns
        -------
        tuple[float, float, int]
            (x, y, density)。
        """
        n = max(1, int(attempts))
        best: tuple[float, float, int] | None = None
        for _ in range(n):
            if sampler is None:
                tx = rng.uniform(*x_range)
                ty = rng.uniform(*y_range)
            else:
                tx, ty = sampler(rng)
            d = self.density(tx, ty, radius)
            if best is None or d < best[2]:
                best = (tx, ty, d)
        assert best is not None
        return best


__all__ = ["Bounds", "CircleBounds", "DEFAULT_CELL_SIZE", "RectBounds", "SpatialGrid"]
