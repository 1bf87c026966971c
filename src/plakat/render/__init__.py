# どこで: `src/plakat/render/__init__.py`。
# 何を: render パイプラインと段階表示をまとめる。
# なぜ: 公開入口を `plakat.render` に集約するため。

from plakat.render.animation import ManualScheduler, RevealController, ThreadingScheduler
from plakat.render.pipeline import render, render_animated, render_to_string

__all__ = [
    "ManualScheduler",
    "RevealController",
    "ThreadingScheduler",
    "render",
    "render_animated",
    "render_to_string",
]
