"""
どこで: `src/plakat/core/request.py`。
何を: render の入力（archetype / palette_id / seed / density）を不変レコードとして定義する。
なぜ: カタログ側の辞書表現と engine 側の入力を 1 つの型で受け渡すため。
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite
from typing import Any, Mapping

from plakat.core.archetype import Archetype
from plakat.core.palettes import DEFAULT_PALETTE_ID

DEFAULT_DENSITY = 0.5

_PALETTE_KEYS = ("palette_id", "paletteId", "palette")


@dataclass(frozen=True, slots=True)
class RenderRequest:
    """1 枚のアートワークを決める入力。

    Parameters
    ----------
    archetype : Archetype or str or None
        構図アーキタイプ。未知のタグや欠落（None）も保持し、render 側で診断する。
    palette_id : str
        パレット id。未知の id は既定パレットに解決される。
    seed : int
        32bit に折り返して使う整数 seed（負値可）。
    density : float
        想定域 [0, 1]。範囲外も拒否せず、各式の clamp に任せる。
    """

    archetype: Archetype | str | None
    palette_id: str = DEFAULT_PALETTE_ID
    seed: int = 0
    density: float = DEFAULT_DENSITY

    def __post_init__(self) -> None:
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise TypeError(f"seed は int である必要がある: got={self.seed!r}")
        try:
            density = float(self.density)
        except Exception as exc:
            raise TypeError(f"density は数値である必要がある: got={self.density!r}") from exc
        if not isfinite(density):
            raise ValueError(f"density は有限値である必要がある: got={self.density!r}")
        object.__setattr__(self, "density", density)
        object.__setattr__(self, "palette_id", str(self.palette_id))

    @property
    def archetype_tag(self) -> str:
        """archetype のタグ文字列を返す。"""

        if isinstance(self.archetype, Archetype):
            return self.archetype.value
        if self.archetype is None:
            return ""
        return str(self.archetype)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "RenderRequest":
        """カタログ由来の辞書（`palette` / `paletteId` 表記も可）から生成する。"""

        palette_id: Any = DEFAULT_PALETTE_ID
        for key in _PALETTE_KEYS:
            if key in payload:
                palette_id = payload[key]
                break
        return cls(
            archetype=payload.get("archetype"),
            palette_id=str(palette_id),
            seed=int(payload.get("seed", 0)),
            density=float(payload.get("density", DEFAULT_DENSITY)),
        )


__all__ = ["DEFAULT_DENSITY", "RenderRequest"]
