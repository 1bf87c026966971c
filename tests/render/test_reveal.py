"""段階表示コントローラ（RevealController）の順序・取り消し・直列化をテストする。"""

from __future__ import annotations

import logging
import math
import threading
import xml.etree.ElementTree as ET

import pytest

from plakat.core.rng import SeededRng
from plakat.render.animation import (
    ENTRY_STYLES,
    ENTRY_TRANSFORMS,
    AnimationSettings,
    ManualScheduler,
    RevealController,
    ThreadingScheduler,
    assign_entrances,
)
from plakat.render.pipeline import render

_SVG = "{http://www.w3.org/2000/svg}"
SETTINGS = AnimationSettings()


def _controller(seed: int = 5, archetype: str = "GRID", scheduler=None, **kwargs) -> RevealController:
    scene = render({"archetype": archetype, "seed": seed})
    assert scene is not None
    return RevealController(
        scene,
        scheduler=ManualScheduler() if scheduler is None else scheduler,
        settings=SETTINGS,
        **kwargs,
    )


class _NonCancellingScheduler(ManualScheduler):
    """cancel を無視するスケジューラ（世代番号による無効化だけを確かめる）。"""

    def cancel(self, handle: int) -> None:
        return None


def test_entrances_use_independent_seed() -> None:
    got = assign_entrances(42, 5, SETTINGS)
    rng = SeededRng(42 + 7777)
    for entrance in got:
        assert entrance.style == ENTRY_STYLES[math.floor(rng.draw() * 7)]
        assert entrance.duration_ms == 550 + math.floor(rng.draw() * 250)
        assert 550 <= entrance.duration_ms < 800


def test_entrances_cover_every_element() -> None:
    controller = _controller()
    assert len(controller.entrances) == controller.element_count
    assert set(ENTRY_TRANSFORMS) == set(ENTRY_STYLES)


def test_reveal_follows_paint_order_and_schedule() -> None:
    scheduler = ManualScheduler()
    done: list[int] = []
    controller = _controller(scheduler=scheduler, on_complete=lambda: done.append(1))
    n = controller.element_count

    controller.play()
    assert controller.is_playing()
    assert len(scheduler) == n + 1

    scheduler.advance(SETTINGS.initial_delay_ms - 1)
    assert controller.reveal_order() == ()

    for i in range(n):
        target = SETTINGS.reveal_at(i)
        scheduler.advance(target - scheduler.now)
        assert controller.reveal_order() == tuple(range(i + 1))
        assert [controller.is_visible(k) for k in range(n)] == [k <= i for k in range(n)]
    assert not controller.overlays_visible()

    scheduler.advance(SETTINGS.finish_at(n) - scheduler.now)
    assert controller.overlays_visible()
    assert not controller.is_playing()
    assert done == [1]


def test_stop_cancels_pending_steps_and_keeps_state() -> None:
    scheduler = ManualScheduler()
    controller = _controller(scheduler=scheduler)
    controller.play()
    scheduler.advance(SETTINGS.reveal_at(2))
    controller.stop()

    assert len(scheduler) == 0
    assert not controller.is_playing()
    scheduler.advance(100_000)
    assert controller.reveal_order() == (0, 1, 2)
    assert not controller.overlays_visible()


def test_play_again_restarts_single_timeline() -> None:
    scheduler = _NonCancellingScheduler()
    done: list[int] = []
    controller = _controller(scheduler=scheduler, on_complete=lambda: done.append(1))
    n = controller.element_count

    controller.play()
    scheduler.advance(SETTINGS.reveal_at(3))
    controller.play()
    assert controller.reveal_order() == ()

    scheduler.run_all()
    assert controller.reveal_order() == tuple(range(n))
    assert done == [1]


def test_reveal_jumps_to_terminal_state() -> None:
    scheduler = ManualScheduler()
    controller = _controller(scheduler=scheduler)
    controller.play()
    scheduler.advance(SETTINGS.reveal_at(1))
    controller.reveal()

    n = controller.element_count
    assert len(scheduler) == 0
    assert not controller.is_playing()
    assert controller.overlays_visible()
    assert controller.reveal_order() == tuple(range(n))


def _styles(svg: str) -> tuple[list[str], list[ET.Element]]:
    root = ET.fromstring(svg)
    children = list(root)
    assert children[0].tag == f"{_SVG}defs"
    body = children[1:]
    overlays = body[-3:]
    animated = body[1:-3]
    return [e.get("style", "") for e in animated], overlays


def test_to_string_reflects_hidden_and_revealed_state() -> None:
    controller = _controller(seed=9, archetype="ARABIAN_GEOMETRIC")
    styles, overlays = _styles(controller.to_string())
    assert len(styles) == controller.element_count
    for style, entrance in zip(styles, controller.entrances):
        assert "opacity:0" in style.split(";")
        assert style.endswith(f"transform:{ENTRY_TRANSFORMS[entrance.style]}")
        assert f"transition:opacity {entrance.duration_ms}ms" in style
    assert [o.get("opacity") for o in overlays] == ["0", "0", "0"]

    controller.reveal()
    styles, overlays = _styles(controller.to_string())
    assert all("opacity:0" not in s.split(";") for s in styles)
    assert [o.get("opacity") for o in overlays] == ["1", "1", "0.07"]


def test_failing_step_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    scheduler = ManualScheduler()
    ran: list[str] = []

    def boom() -> None:
        raise RuntimeError("boom")

    scheduler.call_later(10, boom)
    scheduler.call_later(20, lambda: ran.append("after"))
    with caplog.at_level(logging.ERROR, logger="plakat.render.animation"):
        scheduler.advance(50)
    assert ran == ["after"]
    assert any(r.getMessage() == "reveal step failed" for r in caplog.records)


def test_threading_scheduler_runs_to_completion() -> None:
    finished = threading.Event()
    scene = render({"archetype": "REPETITION", "seed": 3})
    assert scene is not None
    fast = AnimationSettings(delay_per_element_ms=1, initial_delay_ms=0, finish_delay_ms=200)
    controller = RevealController(
        scene, scheduler=ThreadingScheduler(), settings=fast, on_complete=finished.set
    )
    controller.play()
    assert finished.wait(5.0)
    assert controller.overlays_visible()
    assert sorted(controller.reveal_order()) == list(range(controller.element_count))


def test_threading_scheduler_cancel() -> None:
    scheduler = ThreadingScheduler()
    fired = threading.Event()
    handle = scheduler.call_later(200, fired.set)
    scheduler.cancel(handle)
    assert not fired.wait(0.4)


def test_settings_reject_negative_values() -> None:
    with pytest.raises(ValueError):
        AnimationSettings(delay_per_element_ms=-1)
