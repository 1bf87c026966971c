from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from plakat.core.runtime_config import set_config_path
from plakat.export import image
from plakat.render.pipeline import render


# `plakat.export.image`（SVG→PNG / resvg）をテストする。

@pytest.fixture(autouse=True)
def _reset_runtime_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_config_path(None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    set_config_path(None)


def _scene():
    scene = render({"archetype": "DOT_FIELD", "palette_id": "WARM_EARTH", "seed": 77})
    assert scene is not None
    return scene


def test_default_output_path_uses_output_dir_and_request():
    path = image.default_output_path(_scene(), ".png")
    assert path == Path("output") / "png" / "DOT_FIELD_WARM_EARTH_77.png"


def test_png_output_size_scales_canvas_by_png_scale():
    assert image.png_output_size(560) == (1120, 1120)
    assert image.png_output_size(560, scale=0.5) == (280, 280)
    with pytest.raises(ValueError):
        image.png_output_size(560, scale=0)


def test_export_image_png_invokes_resvg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    out_png = tmp_path / "out.png"

    def fake_run(cmd, *, capture_output: bool, text: bool, check: bool):
        assert capture_output is True
        assert text is True
        assert check is False
        assert cmd[0] == "resvg"
        assert cmd[cmd.index("--width") + 1] == "1120"
        assert cmd[cmd.index("--height") + 1] == "1120"
        assert Path(cmd[-2]) == out_png.with_suffix(".svg")
        assert Path(cmd[-2]).is_file()
        assert Path(cmd[-1]) == out_png
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

    monkeypatch.setattr(image.subprocess, "run", fake_run)

    assert image.export_image(_scene(), out_png) == out_png


def test_rasterize_reports_resvg_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def fake_run(cmd, *, capture_output: bool, text: bool, check: bool):
        return subprocess.CompletedProcess(args=cmd, returncode=1, stdout="", stderr="bad svg")

    monkeypatch.setattr(image.subprocess, "run", fake_run)

    with pytest.raises(RuntimeError, match="bad svg"):
        image.rasterize_svg_to_png(tmp_path / "in.svg", tmp_path / "out.png", output_size=(10, 10))


def test_rasterize_reports_missing_resvg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def fake_run(cmd, *, capture_output: bool, text: bool, check: bool):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(image.subprocess, "run", fake_run)

    with pytest.raises(RuntimeError, match="resvg"):
        image.rasterize_svg_to_png(tmp_path / "in.svg", tmp_path / "out.png", output_size=(10, 10))


def test_export_image_rejects_unknown_suffix(tmp_path: Path):
    with pytest.raises(ValueError):
        image.export_image(_scene(), tmp_path / "art.gif")
