"""
どこで: `src/plakat/core/scene.py`。
何を: コンポーザが組み立てる不変なシーングラフ（Element / Scene）を定義する。
なぜ: 構図計算と出力先（SVG 文字列・DOM・ファイル）を分離し、出力側を差し替え可能にするため。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from math import isfinite
from typing import Any, Mapping, TypeAlias

# 数値属性の出力桁数。出力のバイト同一性はこの桁数で固定する。
FLOAT_DECIMALS = 2


def format_number(value: float, *, decimals: int = FLOAT_DECIMALS) -> str:
    """数値を決定的な短い文字列に変換して返す。

    Notes
    -----
    固定小数で丸めた後、末尾の 0 と小数点を落とす。`-0` は `0` に正規化する。
    """
    fv = float(value)
    if not isfinite(fv):
        raise ValueError(f"非有限の数値は出力できない: {value!r}")
    text = f"{fv:.{int(decimals)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        return "0"
    return text


@dataclass(frozen=True, slots=True)
class EffectRef:
    """defs に定義した効果（フィルタ・グラデーション）への参照。

    Notes
    -----
    出力時に `url(#{uid}-{name})` へ解決する。uid は render ごとに決まる。
    """

    name: str


@dataclass(frozen=True, slots=True)
class Rotation:
    """中心 (cx, cy) 周りの回転 [deg]。"""

    angle: float
    cx: float
    cy: float


Points: TypeAlias = tuple[tuple[float, float], ...]
AttrValue: TypeAlias = str | int | float | EffectRef | Rotation | Points


def _normalize_attr(name: str, value: Any) -> AttrValue:
    if isinstance(value, (EffectRef, Rotation, str)):
        return value
    if isinstance(value, bool):
        raise TypeError(f"属性 {name!r} に bool は使えない")
    if isinstance(value, (int, float)):
        if not isfinite(float(value)):
            raise ValueError(f"属性 {name!r} が非有限: {value!r}")
        return value
    if isinstance(value, (list, tuple)):
        pts: list[tuple[float, float]] = []
        for item in value:
            try:
                px, py = item
            except Exception as exc:
                raise TypeError(f"属性 {name!r} の点列は (x, y) の列である必要がある") from exc
            pts.append((float(px), float(py)))
        return tuple(pts)
    raise TypeError(f"属性 {name!r} に使えない型: {type(value)!r}")


@dataclass(frozen=True, slots=True)
class Element:
    """1 つのベクタ要素（タグ・属性・子要素）。

    Parameters
    ----------
    tag : str
        SVG 要素名（`rect`, `circle`, `polygon`, `path`, `line`, `g`, ...）。
    attrs : tuple[tuple[str, AttrValue], ...]
        挿入順を保った (属性名, 値) 列。
    children : tuple[Element, ...]
        子要素列（`g` や filter 定義で使用）。
    role : str or None
        構図上の役割ラベル（`background`, `signal` など）。出力では `data-role`。
    """

    tag: str
    attrs: tuple[tuple[str, AttrValue], ...] = ()
    children: tuple["Element", ...] = ()
    role: str | None = None

    @classmethod
    def create(
        cls,
        tag: str,
        attrs: Mapping[str, Any] | None = None,
        *,
        children: tuple["Element", ...] | list["Element"] = (),
        role: str | None = None,
    ) -> "Element":
        """属性辞書から Element を生成する。値が None の属性は省略する。"""

        items: list[tuple[str, AttrValue]] = []
        for name, value in (attrs or {}).items():
            if value is None:
                continue
            items.append((str(name), _normalize_attr(str(name), value)))
        return cls(tag=str(tag), attrs=tuple(items), children=tuple(children), role=role)

    def get(self, name: str, default: Any = None) -> Any:
        """属性値を返す。無ければ default。"""

        for key, value in self.attrs:
            if key == name:
                return value
        return default

    def with_attrs(self, updates: Mapping[str, Any]) -> "Element":
        """属性を上書き（無ければ末尾に追加）した新しい Element を返す。"""

        merged = dict(self.attrs)
        for name, value in updates.items():
            if value is None:
                merged.pop(name, None)
            else:
                merged[name] = _normalize_attr(name, value)
        return replace(self, attrs=tuple(merged.items()))

    def with_role(self, role: str | None) -> "Element":
        return replace(self, role=role)

    def iter_tree(self):
        """自身と子孫を深さ優先（前順）で列挙する。"""

        yield self
        for child in self.children:
            yield from child.iter_tree()


@dataclass(frozen=True, slots=True)
class Scene:
    """render の出力。defs・プリミティブ層・雰囲気オーバーレイの順に描画する。

    Notes
    -----
    - `elements[0]` は背景矩形。後の要素ほど手前に描かれる。
    - `defs` は id を `"{uid}-{name}"` として 1 回だけ定義し、要素からは参照する。
    """

    uid: str
    canvas_size: int
    defs: tuple[Element, ...]
    elements: tuple[Element, ...]
    overlays: tuple[Element, ...]
    archetype: str
    palette_id: str
    seed: int
    density: float

    def effect_url(self, ref: EffectRef) -> str:
        """EffectRef を `url(#...)` 文字列へ解決して返す。"""

        return f"url(#{self.effect_id(ref.name)})"

    def effect_id(self, name: str) -> str:
        return f"{self.uid}-{name}"

    def animated_elements(self) -> tuple[Element, ...]:
        """段階表示の対象（背景を除くプリミティブ層）を返す。"""

        return self.elements[1:]

    def find(self, role: str) -> list[Element]:
        """プリミティブ層から役割 role の要素を描画順で返す。"""

        return [e for e in self.elements if e.role == role]


__all__ = [
    "AttrValue",
    "EffectRef",
    "Element",
    "FLOAT_DECIMALS",
    "Points",
    "Rotation",
    "Scene",
    "format_number",
]
