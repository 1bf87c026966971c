# どこで: `src/plakat/core/archetype.py`。
# 何を: 7 種の構図アーキタイプを閉じた列挙として定義する。
# なぜ: 文字列タグによる動的ディスパッチを、型で閉じた集合に置き換えるため。

from __future__ import annotations

from enum import Enum


class Archetype(str, Enum):
    """構図アルゴリズム（コンポーザ）の種別。"""

    FREE_FORM = "FREE_FORM"
    GRID = "GRID"
    REPETITION = "REPETITION"
    CONSTRUCTIVIST = "CONSTRUCTIVIST"
    COLOR_STUDY = "COLOR_STUDY"
    DOT_FIELD = "DOT_FIELD"
    ARABIAN_GEOMETRIC = "ARABIAN_GEOMETRIC"

    @classmethod
    def parse(cls, value: object) -> "Archetype | None":
        """Archetype またはタグ文字列を Archetype に変換する。タグは大文字の完全一致で、未知なら None。"""

        if isinstance(value, Archetype):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


__all__ = ["Archetype"]
