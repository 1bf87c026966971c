# src/plakat/core/composer_registry.py
# Archetype からコンポーザ関数を引くディスパッチテーブル。

from __future__ import annotations

from collections.abc import Callable, ItemsView

from plakat.core.archetype import Archetype
from plakat.core.context import RenderContext
from plakat.core.palettes import Palette
from plakat.core.scene import Element

ComposerFunc = Callable[[RenderContext, Palette, float], list[Element]]


class ComposerRegistry:
    """Archetype とコンポーザ関数を対応付けるレジストリ。

    Notes
    -----
    コンポーザのシグネチャは
    ``compose(ctx: RenderContext, palette: Palette, density: float) -> list[Element]``
    を想定する。戻り値の先頭は背景矩形。
    """

    def __init__(self) -> None:
        self._items: dict[Archetype, ComposerFunc] = {}

    def _register(self, archetype: Archetype, func: ComposerFunc, *, overwrite: bool = True) -> None:
        if not overwrite and archetype in self._items:
            raise ValueError(f"composer '{archetype.value}' は既に登録されている")
        self._items[archetype] = func

    def get(self, archetype: Archetype) -> ComposerFunc:
        """Archetype に対応するコンポーザを取得する。

        Raises
        ------
        KeyError
            未登録の Archetype が指定された場合。
        """
        return self._items[archetype]

    def resolve(self, tag: object) -> ComposerFunc | None:
        """タグ文字列または Archetype からコンポーザを引く。解決できなければ None。"""

        archetype = Archetype.parse(tag)
        if archetype is None:
            return None
        return self._items.get(archetype)

    def __contains__(self, archetype: object) -> bool:
        return archetype in self._items

    def items(self) -> ItemsView[Archetype, ComposerFunc]:
        return self._items.items()


composer_registry = ComposerRegistry()
"""グローバルなコンポーザレジストリインスタンス。"""


def composer(archetype: Archetype, *, overwrite: bool = True):
    """グローバルコンポーザレジストリ用デコレータ。

    Examples
    --------
    @composer(Archetype.GRID)
    def compose_grid(ctx, palette, density):
        ...
    """

    def decorator(f: ComposerFunc) -> ComposerFunc:
        composer_registry._register(archetype, f, overwrite=overwrite)
        return f

    return decorator


__all__ = ["ComposerFunc", "ComposerRegistry", "composer", "composer_registry"]
