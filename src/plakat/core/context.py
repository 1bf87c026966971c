"""
どこで: `src/plakat/core/context.py`。
何を: 1 回の render が排他的に所有する状態（乱数・ノイズ場・空間索引）を束ねる。
なぜ: クロージャで暗黙に捕捉せず、コンポーザと図形ファクトリへ明示的に渡すため。
"""

from __future__ import annotations

from dataclasses import dataclass

from plakat.core.golden import CANVAS_SIZE, GoldenPoints, golden_points
from plakat.core.noise import NoiseField
from plakat.core.rng import SeededRng
from plakat.core.spatial_grid import DEFAULT_CELL_SIZE, SpatialGrid


@dataclass(frozen=True, slots=True, eq=False)
class RenderContext:
    """render 呼び出し単位の状態。

    Notes
    -----
    生成順は「rng -> noise（256 draw 消費）-> grid」で固定する。
    render 間で共有しないため、ロックは不要。
    """

    rng: SeededRng
    noise: NoiseField
    grid: SpatialGrid
    canvas_size: int = CANVAS_SIZE

    @classmethod
    def create(
        cls,
        seed: int,
        *,
        canvas_size: int = CANVAS_SIZE,
        cell_size: float = DEFAULT_CELL_SIZE,
    ) -> "RenderContext":
        """seed から RenderContext を生成する。"""

        rng = SeededRng(seed)
        noise = NoiseField.build(rng.draw)
        return cls(rng=rng, noise=noise, grid=SpatialGrid(cell_size), canvas_size=int(canvas_size))

    @property
    def golden(self) -> GoldenPoints:
        return golden_points(self.canvas_size)


__all__ = ["RenderContext"]
