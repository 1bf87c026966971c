# どこで: `src/plakat/core/golden.py`。
# 何を: 黄金比から導いたキャンバス上のアンカー点と分割線を計算する。
# なぜ: 主役要素とカウンターウェイトの配置目標を各コンポーザで共有するため。

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

PHI = 1.618033988749895
PHI_INV = 1.0 / PHI

# 全アートワーク共通の正方形キャンバス寸法（viewBox 単位）。
CANVAS_SIZE = 560

Point = tuple[float, float]


@dataclass(frozen=True, slots=True)
class GoldenPoints:
    """黄金比アンカー点（4 交点 + 中心）と分割線の位置。"""

    tl: Point
    tr: Point
    bl: Point
    br: Point
    center: Point
    left_third: float
    right_third: float
    top_third: float
    bottom_third: float

    def anchors(self) -> tuple[Point, ...]:
        """5 つのアンカー点を (tl, tr, bl, br, center) の順で返す。"""

        return (self.tl, self.tr, self.bl, self.br, self.center)


@lru_cache(maxsize=8)
def golden_points(canvas_size: float = CANVAS_SIZE) -> GoldenPoints:
    """canvas_size 四方のキャンバスに対する GoldenPoints を返す。"""

    c = float(canvas_size)
    near = c * PHI_INV * PHI_INV  # ~0.382
    far = c * PHI_INV  # ~0.618
    return GoldenPoints(
        tl=(near, near),
        tr=(far, near),
        bl=(near, far),
        br=(far, far),
        center=(c / 2.0, c / 2.0),
        left_third=near,
        right_third=far,
        top_third=near,
        bottom_third=far,
    )


__all__ = ["CANVAS_SIZE", "GoldenPoints", "PHI", "PHI_INV", "Point", "golden_points"]
