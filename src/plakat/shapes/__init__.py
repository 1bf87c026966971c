# どこで: `src/plakat/shapes/__init__.py`。
# 何を: 厳密図形と organic 図形のモジュールを束ねる。
# なぜ: import 時に両 family を図形レジストリへ登録するため。

from __future__ import annotations

from plakat.shapes import exact, organic

__all__ = ["exact", "organic"]
