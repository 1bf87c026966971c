"""REPETITION の律動帯における密度単調性をテストする。"""

from __future__ import annotations

import pytest

from plakat.composers.repetition import rhythm_fill_chance
from plakat.core.noise import NoiseField
from plakat.core.rng import SeededRng
from plakat.render.pipeline import render


def _rhythm_seeds(limit: int) -> list[int]:
    out = []
    for seed in range(400):
        rng = SeededRng(seed)
        NoiseField.build(rng.draw)
        if rng.uniform_int(0, 3) == 0:
            out.append(seed)
        if len(out) >= limit:
            break
    return out


def test_fill_chance_increases_with_density() -> None:
    for col in range(10):
        assert rhythm_fill_chance(col, 0.5, 1.0, 0.9) > rhythm_fill_chance(col, 0.5, 1.0, 0.1)


@pytest.mark.parametrize("seed", _rhythm_seeds(8))
def test_rhythm_cell_count_is_monotone_in_density(seed: int) -> None:
    counts = []
    for density in (0.0, 0.25, 0.5, 0.75, 1.0):
        scene = render({"archetype": "REPETITION", "palette_id": "SIGNAL", "seed": seed, "density": density})
        assert scene is not None
        counts.append(len(scene.find("rhythm-cell")))
    assert counts == sorted(counts)
    assert counts[0] > 0 or counts[-1] > 0
