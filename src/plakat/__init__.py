# どこで: `src/plakat/__init__.py`。
# 何を: ルート `plakat` パッケージと公開 API（render / render_to_string / render_animated）を定義する。
# なぜ: import 起点を `plakat` に統一するため。

from __future__ import annotations

from plakat.core.archetype import Archetype
from plakat.core.palettes import PALETTES, SIGNAL_COLOR
from plakat.core.request import RenderRequest
from plakat.core.scene import Scene
from plakat.render.pipeline import render, render_animated, render_to_string

__all__ = [
    "Archetype",
    "PALETTES",
    "RenderRequest",
    "SIGNAL_COLOR",
    "Scene",
    "render",
    "render_animated",
    "render_to_string",
]
