"""
どこで: `src/plakat/core/palettes.py`。
何を: パレット（前景色列・背景色・インク色）の不変レコードと静的テーブルを定義する。
なぜ: 全 render で共有する読み取り専用の配色設定を 1 箇所で固定するため。
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

# 全アーキタイプ共通の「シグナル」色。パレットとは独立に固定する。
SIGNAL_COLOR = "#D4A84B"

DEFAULT_PALETTE_ID = "SIGNAL"


@dataclass(frozen=True, slots=True)
class Palette:
    """前景色 3〜5 色と背景色・インク色の組。"""

    id: str
    colors: tuple[str, ...]
    background: str
    ink: str

    def __post_init__(self) -> None:
        if not 3 <= len(self.colors) <= 5:
            raise ValueError(f"palette {self.id!r} の前景色は 3〜5 色である必要がある")

    def color(self, index: int, fallback: str | None = None) -> str:
        """index 番目の前景色を返す。範囲外なら fallback（既定はインク色）。"""

        if 0 <= index < len(self.colors):
            return self.colors[index]
        return self.ink if fallback is None else fallback


def _palette(id: str, colors: tuple[str, ...], background: str, ink: str) -> Palette:
    return Palette(id=id, colors=colors, background=background, ink=ink)


PALETTES: Mapping[str, Palette] = MappingProxyType(
    {
        p.id: p
        for p in (
            _palette(
                "SIGNAL",
                ("#C04B3C", "#3A6EA5", "#D4A84B", "#6B7B3C", "#1C1C1C"),
                "#F2E8D5",
                "#1C1C1C",
            ),
            _palette(
                "CLASSIC_BAUHAUS",
                ("#E63946", "#457B9D", "#F4D35E", "#1D1D1D", "#E07A2F"),
                "#F0E6D3",
                "#1D1D1D",
            ),
            _palette(
                "CONSTRUCTIVIST",
                ("#CC0000", "#1A1A1A", "#CC0000", "#8B0000"),
                "#F5F0E8",
                "#000000",
            ),
            _palette(
                "WARM_EARTH",
                ("#C67B5C", "#CC9933", "#6B7B3C", "#8B4513", "#1C1C1C"),
                "#F2E8D5",
                "#1C1C1C",
            ),
            _palette(
                "COOL_STEEL",
                ("#3A6EA5", "#5A6B7C", "#7B96A8", "#A0A8B0", "#1C1C1C"),
                "#E8ECF0",
                "#1C1C1C",
            ),
            _palette(
                "MONOCHROME",
                ("#1C1C1C", "#404040", "#707070", "#A0A0A0", "#D0D0D0"),
                "#F2E8D5",
                "#1C1C1C",
            ),
        )
    }
)
"""プロセス全体で共有する読み取り専用パレットテーブル。"""


def resolve_palette(palette_id: object) -> Palette:
    """palette_id に対応するパレットを返す。未知の id は既定パレットに置き換える。"""

    palette = PALETTES.get(str(palette_id)) if palette_id is not None else None
    if palette is None:
        return PALETTES[DEFAULT_PALETTE_ID]
    return palette


__all__ = ["DEFAULT_PALETTE_ID", "PALETTES", "Palette", "SIGNAL_COLOR", "resolve_palette"]
