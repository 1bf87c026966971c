"""
どこで: `src/plakat/render/animation.py`。
何を: Scene のプリミティブを描画順に 1 つずつ登場させる段階表示コントローラ。
なぜ: 作品ごとに再現可能な「組み上がり」演出を、構図の乱数列と独立に提供するため。
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any, Protocol

from plakat.core.rng import SeededRng, wrap_seed
from plakat.core.runtime_config import AnimationConfig, runtime_config
from plakat.core.scene import Element, Scene, format_number
from plakat.export.svg import scene_to_string
from plakat.render.effects import overlay_opacities

_logger = logging.getLogger(__name__)

ENTRY_STYLES = (
    "scale-up",
    "slide-left",
    "slide-right",
    "slide-up",
    "slide-down",
    "rotate-in",
    "zoom-pop",
)

# 隠れている間の CSS transform。
ENTRY_TRANSFORMS = {
    "scale-up": "scale(0.3)",
    "slide-left": "translateX(-80px)",
    "slide-right": "translateX(80px)",
    "slide-up": "translateY(-60px)",
    "slide-down": "translateY(60px)",
    "rotate-in": "scale(0.5) rotate(-45deg)",
    "zoom-pop": "scale(1.6)",
}

ANIMATION_SEED_OFFSET = 7777


@dataclass(frozen=True, slots=True)
class AnimationSettings:
    """段階表示の時間設定 [ms]。"""

    delay_per_element_ms: int = 90
    initial_delay_ms: int = 400
    finish_delay_ms: int = 400
    min_duration_ms: int = 550
    duration_jitter_ms: int = 250
    overlay_duration_ms: int = 1000
    easing: str = "cubic-bezier(0.22, 1, 0.36, 1)"

    def __post_init__(self) -> None:
        for name in (
            "delay_per_element_ms",
            "initial_delay_ms",
            "finish_delay_ms",
            "min_duration_ms",
            "duration_jitter_ms",
            "overlay_duration_ms",
        ):
            v = int(getattr(self, name))
            if v < 0:
                raise ValueError(f"{name} は 0 以上である必要がある: got={v}")
            object.__setattr__(self, name, v)

    @classmethod
    def from_config(cls, config: AnimationConfig | None = None) -> "AnimationSettings":
        """実行時設定（未指定なら `runtime_config().animation`）から生成する。"""

        cfg = runtime_config().animation if config is None else config
        return cls(
            delay_per_element_ms=cfg.delay_per_element_ms,
            initial_delay_ms=cfg.initial_delay_ms,
            finish_delay_ms=cfg.finish_delay_ms,
            min_duration_ms=cfg.min_duration_ms,
            duration_jitter_ms=cfg.duration_jitter_ms,
            overlay_duration_ms=cfg.overlay_duration_ms,
            easing=cfg.easing,
        )

    def reveal_at(self, index: int) -> int:
        """index 番目の要素が登場する時刻 [ms]。"""

        return self.initial_delay_ms + int(index) * self.delay_per_element_ms

    def finish_at(self, count: int) -> int:
        """count 要素の後の仕上げ（オーバーレイ表示）の時刻 [ms]。"""

        return self.reveal_at(count) + self.finish_delay_ms


@dataclass(frozen=True, slots=True)
class Entrance:
    """1 要素の登場演出。"""

    style: str
    duration_ms: int


def assign_entrances(seed: int, count: int, settings: AnimationSettings) -> tuple[Entrance, ...]:
    """`seed + 7777` 由来の独立な乱数で count 要素ぶんの登場演出を決める。

    Notes
    -----
    1 要素あたり 2 draw（style, duration）を描画順に消費する。
    """
    rng = SeededRng(wrap_seed(int(seed) + ANIMATION_SEED_OFFSET))
    out: list[Entrance] = []
    for _ in range(int(count)):
        style = ENTRY_STYLES[int(math.floor(rng.draw() * len(ENTRY_STYLES)))]
        dur = settings.min_duration_ms + int(math.floor(rng.draw() * settings.duration_jitter_ms))
        out.append(Entrance(style=style, duration_ms=dur))
    return tuple(out)


class Scheduler(Protocol):
    """遅延実行とキャンセルの最小インターフェース。"""

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


def _run_logged(callback: Callable[[], None]) -> None:
    try:
        callback()
    except Exception:
        _logger.exception("reveal step failed")


class ManualScheduler:
    """明示的に進める仮想時計 [ms] のスケジューラ。

    Notes
    -----
    `advance(ms)` の中で期限到来したコールバックを (期限, 登録順) の順に同期実行する。
    テストとオフラインのフレーム書き出し用。
    """

    def __init__(self) -> None:
        self._now = 0
        self._seq = 0
        self._pending: dict[int, tuple[int, Callable[[], None]]] = {}

    @property
    def now(self) -> int:
        return self._now

    def __len__(self) -> int:
        return len(self._pending)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> int:
        handle = self._seq
        self._seq += 1
        self._pending[handle] = (self._now + max(0, int(delay_ms)), callback)
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def advance(self, ms: int) -> None:
        """時計を ms 進め、期限到来分を実行する。"""

        target = self._now + max(0, int(ms))
        while True:
            due = [(t, h) for h, (t, _) in self._pending.items() if t <= target]
            if not due:
                break
            t, h = min(due)
            _, callback = self._pending.pop(h)
            self._now = t
            _run_logged(callback)
        self._now = target

    def run_all(self) -> None:
        """保留中のコールバックを全て実行する。"""

        while self._pending:
            last = max(t for t, _ in self._pending.values())
            self.advance(last - self._now)


class ThreadingScheduler:
    """`threading.Timer` による実時間スケジューラ。"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timers: set[threading.Timer] = set()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> threading.Timer:
        def _fire() -> None:
            with self._lock:
                self._timers.discard(timer)
            _run_logged(callback)

        timer = threading.Timer(max(0, int(delay_ms)) / 1000.0, _fire)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()
        return timer

    def cancel(self, handle: threading.Timer) -> None:
        handle.cancel()
        with self._lock:
            self._timers.discard(handle)

    def cancel_all(self) -> None:
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for t in timers:
            t.cancel()


class RevealController:
    """Scene の段階表示を制御する。

    Notes
    -----
    - 対象は背景を除くプリミティブ層（`Scene.animated_elements()`）。
    - 登場順は常に描画順。演出の種類と長さは別系統の乱数で決まる。
    - `play()` は世代番号を進める。古い世代の保留ステップは実行されても何もしない。
    - 生成直後は全要素が隠れた状態。
    """

    def __init__(
        self,
        scene: Scene,
        *,
        scheduler: Scheduler | None = None,
        settings: AnimationSettings | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        self._scene = scene
        self._scheduler: Scheduler = ThreadingScheduler() if scheduler is None else scheduler
        self._settings = AnimationSettings() if settings is None else settings
        self._on_complete = on_complete
        self._targets = scene.animated_elements()
        self._entrances = assign_entrances(scene.seed, len(self._targets), self._settings)
        self._lock = threading.RLock()
        self._generation = 0
        self._handles: list[Any] = []
        self._playing = False
        self._visible = [False] * len(self._targets)
        self._order: list[int] = []
        self._overlays_visible = False

    @property
    def scene(self) -> Scene:
        return self._scene

    @property
    def element_count(self) -> int:
        return len(self._targets)

    @property
    def entrances(self) -> tuple[Entrance, ...]:
        return self._entrances

    def is_playing(self) -> bool:
        return self._playing

    def is_visible(self, index: int) -> bool:
        return self._visible[index]

    def overlays_visible(self) -> bool:
        return self._overlays_visible

    def reveal_order(self) -> tuple[int, ...]:
        """直近の play / reveal 以降に表示された要素 index を表示順で返す。"""

        with self._lock:
            return tuple(self._order)

    def play(self) -> None:
        """全要素を隠した状態から段階表示を開始する。"""

        with self._lock:
            self._stop_locked()
            self._playing = True
            self._generation += 1
            gen = self._generation
            self._visible = [False] * len(self._targets)
            self._order = []
            self._overlays_visible = False
            for i in range(len(self._targets)):
                h = self._scheduler.call_later(self._settings.reveal_at(i), self._reveal_step(gen, i))
                self._handles.append(h)
            h = self._scheduler.call_later(self._settings.finish_at(len(self._targets)), self._finish_step(gen))
            self._handles.append(h)
        _logger.debug("play: seed=%d elements=%d", self._scene.seed, len(self._targets))

    def stop(self) -> None:
        """保留中の表示ステップを全て取り消す。表示状態はそのまま残す。"""

        with self._lock:
            self._stop_locked()

    def reveal(self) -> None:
        """保留を取り消し、完成状態へ直接移る。"""

        with self._lock:
            self._stop_locked()
            for i, shown in enumerate(self._visible):
                if not shown:
                    self._visible[i] = True
                    self._order.append(i)
            self._overlays_visible = True

    def _stop_locked(self) -> None:
        for h in self._handles:
            self._scheduler.cancel(h)
        self._handles = []
        self._generation += 1
        self._playing = False

    def _reveal_step(self, gen: int, index: int) -> Callable[[], None]:
        def step() -> None:
            with self._lock:
                if gen != self._generation:
                    return
                self._visible[index] = True
                self._order.append(index)

        return step

    def _finish_step(self, gen: int) -> Callable[[], None]:
        def step() -> None:
            with self._lock:
                if gen != self._generation:
                    return
                self._overlays_visible = True
                self._playing = False
                self._handles = []
            if self._on_complete is not None:
                self._on_complete()

        return step

    def _styled(self, index: int, element: Element) -> Element:
        entrance = self._entrances[index]
        easing = self._settings.easing
        dur = entrance.duration_ms
        parts = [
            "transform-origin:center center",
            "transform-box:fill-box",
            f"transition:opacity {dur}ms {easing}, transform {dur}ms {easing}",
        ]
        if not self._visible[index]:
            parts += ["opacity:0", f"transform:{ENTRY_TRANSFORMS[entrance.style]}"]
        return element.with_attrs({"style": ";".join(parts)})

    def to_string(self) -> str:
        """現在の表示状態を inline style 付きの SVG 文字列で返す。"""

        with self._lock:
            bg, *_ = self._scene.elements
            elements = (bg, *(self._styled(i, e) for i, e in enumerate(self._targets)))
            overlays = []
            transition = f"transition:opacity {self._settings.overlay_duration_ms}ms {self._settings.easing}"
            for overlay, final in zip(self._scene.overlays, overlay_opacities()):
                opacity = final if self._overlays_visible else 0
                overlays.append(
                    overlay.with_attrs({"opacity": format_number(opacity), "style": transition})
                )
            staged = replace(self._scene, elements=elements, overlays=tuple(overlays))
        return scene_to_string(staged)


__all__ = [
    "ANIMATION_SEED_OFFSET",
    "ENTRY_STYLES",
    "ENTRY_TRANSFORMS",
    "AnimationSettings",
    "Entrance",
    "ManualScheduler",
    "RevealController",
    "Scheduler",
    "ThreadingScheduler",
    "assign_entrances",
]
