"""
どこで: `src/plakat/core/rng.py`。
何を: 32bit 整数 seed から決定的な [0, 1) 乱数列を生成する SeededRng を提供する。
なぜ: 同じ seed から常に同じ作品を再生成するため、乱数源をここ 1 つに限定する。
"""

from __future__ import annotations

import math
from collections.abc import MutableSequence, Sequence
from typing import TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32bit 乗算の下位 32bit を返す。"""

    return (a * b) & _MASK32


def wrap_seed(seed: int) -> int:
    """任意の整数 seed を 32bit 符号なし整数へ折り返して返す。

    Notes
    -----
    負の seed も 2 の補数表現として扱う（-1 -> 0xFFFFFFFF）。
    """

    try:
        return int(seed) & _MASK32
    except Exception as exc:
        raise TypeError(f"seed は整数である必要がある: got={seed!r}") from exc


class SeededRng:
    """mulberry32 系の混合関数で状態を進める決定的乱数源。

    Parameters
    ----------
    seed : int
        32bit に折り返される初期状態。

    Notes
    -----
    1 回の render 呼び出しが排他的に所有する。スレッド間で共有しない。
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = wrap_seed(seed)

    @property
    def state(self) -> int:
        """現在の 32bit 状態を返す。"""

        return self._state

    def draw(self) -> float:
        """状態を 1 つ進め、[0, 1) の float を返す。"""

        s = (self._state + _GOLDEN_GAMMA) & _MASK32
        self._state = s
        t = _imul(s ^ (s >> 15), 1 | s)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32) ^ t
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    __call__ = draw

    def uniform(self, lo: float, hi: float) -> float:
        """[lo, hi) の一様乱数を返す。lo == hi の場合は定数を返す。"""

        return float(lo) + self.draw() * (float(hi) - float(lo))

    def uniform_int(self, lo: int, hi: int) -> int:
        """[lo, hi]（両端含む）の整数一様乱数を返す。"""

        return int(math.floor(self.uniform(lo, hi + 1)))

    def chance(self, threshold: float) -> bool:
        """1 回 draw し、その値が threshold を超えたかどうかを返す。

        Notes
        -----
        必ず 1 draw を消費する。密度条件と組み合わせる場合も
        乱数列の消費量を分岐に依存させないために使う。
        """

        return self.draw() > float(threshold)

    def pick(self, items: Sequence[T]) -> T:
        """列から 1 要素を一様に選んで返す。"""

        if not items:
            raise ValueError("pick には空でない列が必要")
        return items[int(self.draw() * len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Fisher-Yates で並べ替えた新しいリストを返す（入力は変更しない）。"""

        out = list(items)
        self.shuffle_in_place(out)
        return out

    def shuffle_in_place(self, items: MutableSequence[T]) -> None:
        """Fisher-Yates で items をその場で並べ替える。"""

        for i in range(len(items) - 1, 0, -1):
            j = int(self.draw() * (i + 1))
            items[i], items[j] = items[j], items[i]


__all__ = ["SeededRng", "wrap_seed"]
