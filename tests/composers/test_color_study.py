"""COLOR_STUDY の入れ子領域（外から内へ厳密に縮む）をテストする。"""

from __future__ import annotations

import pytest

from plakat.core.noise import NoiseField
from plakat.core.rng import SeededRng
from plakat.core.scene import Element, Scene
from plakat.render.pipeline import render


def _strategy(seed: int) -> int:
    rng = SeededRng(seed)
    NoiseField.build(rng.draw)
    return rng.uniform_int(0, 2)


def _size(group: Element) -> float:
    crisp = group.children[-1]
    if crisp.tag == "rect":
        return float(crisp.get("width"))
    assert crisp.tag == "circle"
    return 2.0 * float(crisp.get("r"))


def _nested_sizes(scene: Scene) -> list[float]:
    ordered = [e for e in scene.elements if e.role in ("ring", "jewel", "signal")]
    roles = [e.role for e in ordered]
    assert roles[-2:] == ["jewel", "signal"]
    assert set(roles[:-2]) == {"ring"}
    return [_size(e) for e in ordered]


def test_catalog_scenario_yields_strictly_shrinking_nest() -> None:
    for _ in range(3):
        scene = render(
            {"archetype": "COLOR_STUDY", "palette_id": "CLASSIC_BAUHAUS", "seed": 36787, "density": 0.5}
        )
        assert scene is not None
        sizes = _nested_sizes(scene)
        assert len(sizes) >= 3
        assert all(a > b for a, b in zip(sizes, sizes[1:]))


@pytest.mark.parametrize("strategy", [0, 1])
def test_nested_strategies_shrink_for_many_seeds(strategy: int) -> None:
    seeds = [s for s in range(300) if _strategy(s) == strategy][:25]
    assert seeds
    for seed in seeds:
        scene = render({"archetype": "COLOR_STUDY", "palette_id": "SIGNAL", "seed": seed})
        assert scene is not None
        sizes = _nested_sizes(scene)
        assert all(a > b for a, b in zip(sizes, sizes[1:])), seed


def test_nested_squares_are_contained() -> None:
    seeds = [s for s in range(300) if _strategy(s) == 0][:25]
    for seed in seeds:
        scene = render({"archetype": "COLOR_STUDY", "palette_id": "WARM_EARTH", "seed": seed})
        assert scene is not None
        rects = [e.children[-1] for e in scene.elements if e.role in ("ring", "jewel")]
        for outer, inner in zip(rects, rects[1:]):
            ox, oy, ow = outer.get("x"), outer.get("y"), outer.get("width")
            ix, iy, iw = inner.get("x"), inner.get("y"), inner.get("width")
            assert ox - 1e-6 <= ix and ix + iw <= ox + ow + 1e-6
            assert oy - 1e-6 <= iy and iy + iw <= oy + ow + 1e-6


def test_side_by_side_fields_cover_canvas() -> None:
    seed = next(s for s in range(300) if _strategy(s) == 2)
    scene = render({"archetype": "COLOR_STUDY", "palette_id": "COOL_STEEL", "seed": seed})
    assert scene is not None
    fields = scene.find("field")
    assert len(fields) in (2, 3)
    assert len(scene.find("signal")) == 1
