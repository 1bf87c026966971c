# どこで: `src/plakat/export/__init__.py`。
# 何を: Scene の書き出し（SVG / PNG）をまとめる。
# なぜ: 出力先の実装を構図計算から切り離すため。

from plakat.export.image import export_image
from plakat.export.svg import export_svg, scene_to_element, scene_to_string

__all__ = ["export_image", "export_svg", "scene_to_element", "scene_to_string"]
