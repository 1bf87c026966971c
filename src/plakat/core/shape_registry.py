# src/plakat/core/shape_registry.py
# 図形ファクトリ関数のレジストリ。
# (family, 名前) から Element 生成関数を引けるようにする。

from __future__ import annotations

from collections.abc import Callable, ItemsView
from typing import Any

from plakat.core.scene import Element

ShapeFunc = Callable[..., Element]

SHAPE_FAMILIES = ("exact", "organic")


class ShapeRegistry:
    """図形ファクトリの名前と生成関数を対応付けるレジストリ。

    Notes
    -----
    登録は import 時の `@shape` デコレータに限定し、render 中は読み取り専用として扱う。
    family が "organic" の関数は第 1 引数に RenderContext を受け取る。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[tuple[str, str], ShapeFunc] = {}

    def _register(
        self,
        name: str,
        func: ShapeFunc,
        *,
        family: str,
        overwrite: bool = True,
    ) -> None:
        """図形を登録する（内部用）。"""
        if family not in SHAPE_FAMILIES:
            raise ValueError(f"未知の shape family: {family!r}")
        key = (family, name)
        if not overwrite and key in self._items:
            raise ValueError(f"shape '{family}.{name}' は既に登録されている")
        self._items[key] = func

    def get(self, name: str, *, family: str = "exact") -> ShapeFunc:
        """名前に対応する生成関数を取得する。

        Raises
        ------
        KeyError
            未登録の名前が指定された場合。
        """
        return self._items[(family, name)]

    def __contains__(self, key: object) -> bool:
        """(family, name) が登録済みかどうかを返す。"""
        return key in self._items

    def names(self, family: str = "exact") -> tuple[str, ...]:
        """family に属する登録名を登録順で返す。"""
        return tuple(n for f, n in self._items if f == family)

    def items(self) -> ItemsView[tuple[str, str], ShapeFunc]:
        """登録済みエントリの ((family, name), func) ビューを返す。"""
        return self._items.items()


shape_registry = ShapeRegistry()
"""グローバルな図形レジストリインスタンス。"""


def shape(
    func: ShapeFunc | None = None,
    *,
    name: str | None = None,
    family: str = "exact",
    overwrite: bool = True,
) -> Any:
    """グローバル図形レジストリ用デコレータ。

    name を省略した場合は関数名を登録名とする。

    Examples
    --------
    @shape
    def dot(cx, cy, r, fill, opacity=1.0):
        ...

    @shape(name="rect", family="organic")
    def organic_rect(ctx, x, y, w, h, fill, opacity=0.85):
        ...
    """

    def decorator(f: ShapeFunc) -> ShapeFunc:
        shape_registry._register(
            name or f.__name__,
            f,
            family=family,
            overwrite=overwrite,
        )
        return f

    if func is None:
        return decorator
    return decorator(func)


__all__ = ["SHAPE_FAMILIES", "ShapeFunc", "ShapeRegistry", "shape", "shape_registry"]
