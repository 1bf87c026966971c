"""
どこで: `src/plakat/render/pipeline.py`。
何を: RenderRequest から Scene を組み立てる公開パイプライン（render / render_to_string / render_animated）。
なぜ: パレット解決・コンポーザ選択・効果定義・オーバーレイ付加を 1 箇所で固定し、決定性を保つため。
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

# composers を import してコンポーザ登録を副作用で行う。
from plakat import composers as _composers  # noqa: F401
from plakat.core.composer_registry import composer_registry
from plakat.core.context import RenderContext
from plakat.core.golden import CANVAS_SIZE
from plakat.core.palettes import resolve_palette
from plakat.core.request import RenderRequest
from plakat.core.scene import Scene
from plakat.export.svg import scene_to_string
from plakat.render.animation import AnimationSettings, RevealController, Scheduler
from plakat.render.effects import build_defs, build_overlays, scene_uid

_logger = logging.getLogger(__name__)


def _coerce_request(request: RenderRequest | Mapping[str, Any]) -> RenderRequest:
    if isinstance(request, RenderRequest):
        return request
    return RenderRequest.from_mapping(request)


def render(request: RenderRequest | Mapping[str, Any]) -> Scene | None:
    """1 枚のアートワークを Scene として組み立てて返す。

    Parameters
    ----------
    request : RenderRequest or Mapping
        `{archetype, palette_id, seed, density}`。Mapping は `RenderRequest.from_mapping` で解釈する。

    Returns
    -------
    Scene or None
        未知の archetype の場合は警告を記録して None。未知のパレットは既定パレットに置き換える。
    """
    req = _coerce_request(request)
    func = composer_registry.resolve(req.archetype)
    if func is None:
        _logger.warning("unknown archetype: %r", req.archetype_tag)
        return None

    palette = resolve_palette(req.palette_id)
    ctx = RenderContext.create(req.seed, canvas_size=CANVAS_SIZE)
    elements = func(ctx, palette, req.density)
    uid = scene_uid(req.seed)
    return Scene(
        uid=uid,
        canvas_size=ctx.canvas_size,
        defs=build_defs(uid, req.seed, palette),
        elements=tuple(elements),
        overlays=build_overlays(ctx.canvas_size),
        archetype=req.archetype_tag,
        palette_id=palette.id,
        seed=req.seed,
        density=req.density,
    )


def render_to_string(request: RenderRequest | Mapping[str, Any]) -> str | None:
    """render の結果を SVG 文字列で返す。未知の archetype は None。"""

    scene = render(request)
    if scene is None:
        return None
    return scene_to_string(scene)


def render_animated(
    request: RenderRequest | Mapping[str, Any],
    *,
    scheduler: Scheduler | None = None,
    settings: AnimationSettings | None = None,
    on_complete: Callable[[], None] | None = None,
) -> RevealController | None:
    """render の結果を段階表示コントローラで包んで返す。

    Notes
    -----
    settings を省略すると実行時設定（config.yaml の animation）を使う。
    scheduler を省略すると実時間の ThreadingScheduler を使う。
    """
    scene = render(request)
    if scene is None:
        return None
    _settings = AnimationSettings.from_config() if settings is None else settings
    return RevealController(scene, scheduler=scheduler, settings=_settings, on_complete=on_complete)


__all__ = ["render", "render_animated", "render_to_string"]
