# どこで: `src/plakat/composers/__init__.py`。
# 何を: 7 種のコンポーザを import してレジストリへ登録する。
# なぜ: `plakat.composers` の import だけでディスパッチテーブルが揃うようにするため。

from __future__ import annotations

from plakat.composers import arabian_geometric as _composer_arabian_geometric  # noqa: F401
from plakat.composers import color_study as _composer_color_study  # noqa: F401
from plakat.composers import constructivist as _composer_constructivist  # noqa: F401
from plakat.composers import dot_field as _composer_dot_field  # noqa: F401
from plakat.composers import free_form as _composer_free_form  # noqa: F401
from plakat.composers import grid as _composer_grid  # noqa: F401
from plakat.composers import repetition as _composer_repetition  # noqa: F401

__all__: list[str] = []
