"""黄金比アンカー点をテストする。"""

from __future__ import annotations

import pytest

from plakat.core.golden import CANVAS_SIZE, PHI, PHI_INV, golden_points


def test_anchor_positions() -> None:
    gp = golden_points(CANVAS_SIZE)
    near = CANVAS_SIZE * PHI_INV * PHI_INV
    far = CANVAS_SIZE * PHI_INV
    assert gp.tl == pytest.approx((near, near))
    assert gp.br == pytest.approx((far, far))
    assert gp.center == (280.0, 280.0)
    assert gp.anchors() == (gp.tl, gp.tr, gp.bl, gp.br, gp.center)


def test_near_and_far_split_canvas_in_golden_ratio() -> None:
    gp = golden_points(1000)
    assert gp.left_third + gp.right_third == pytest.approx(1000)
    assert gp.right_third / gp.left_third == pytest.approx(PHI)
