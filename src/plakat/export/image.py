"""
どこで: `src/plakat/export/image.py`。
何を: Scene を SVG 経由で外部ラスタライザ（resvg）により PNG へ変換して保存する。
なぜ: SVG を正（ソース）として保存し、PNG は任意の倍率で再生成できる導線を用意するため。
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from plakat.core.runtime_config import output_root_dir, runtime_config
from plakat.core.scene import Scene
from plakat.export.svg import export_svg

_logger = logging.getLogger(__name__)


def export_image(scene: Scene, path: str | Path, *, scale: float | None = None) -> Path:
    """Scene を画像として保存する。

    Notes
    -----
    `.svg` はそのまま保存する。`.png` は隣に SVG を保存してから resvg でラスタライズする。
    """
    _path = Path(path)
    suffix = _path.suffix.lower()

    if suffix == ".svg":
        return export_svg(scene, _path)

    if suffix == ".png":
        svg_path = _path.with_suffix(".svg")
        export_svg(scene, svg_path)
        return rasterize_svg_to_png(
            svg_path,
            _path,
            output_size=png_output_size(scene.canvas_size, scale=scale),
        )

    raise ValueError(f"未対応の画像フォーマット: {suffix!r}")


def default_output_path(scene: Scene, suffix: str = ".svg") -> Path:
    """Scene の既定保存パスを返す。

    Notes
    -----
    パスは `{output_root}/{svg|png}/{archetype}_{palette}_{seed}{suffix}`。
    """
    kind = suffix.lstrip(".").lower()
    stem = f"{scene.archetype}_{scene.palette_id}_{scene.seed}"
    return output_root_dir() / kind / f"{stem}{suffix}"


def png_output_size(canvas_size: int, *, scale: float | None = None) -> tuple[int, int]:
    """canvas_size と倍率から PNG 出力ピクセルサイズを返す。"""

    if int(canvas_size) <= 0:
        raise ValueError("canvas_size は正の値である必要がある")
    _scale = float(runtime_config().png_scale if scale is None else scale)
    if _scale <= 0:
        raise ValueError(f"scale は正の値である必要がある: got={_scale}")
    px = int(int(canvas_size) * _scale)
    return px, px


def _resvg_command(*, input_svg: Path, output_png: Path, output_size: tuple[int, int]) -> list[str]:
    out_w, out_h = output_size
    if int(out_w) <= 0 or int(out_h) <= 0:
        raise ValueError("output_size は正の (width, height) である必要がある")
    return [
        "resvg",
        "--width",
        str(int(out_w)),
        "--height",
        str(int(out_h)),
        str(input_svg),
        str(output_png),
    ]


def rasterize_svg_to_png(
    svg_path: str | Path,
    png_path: str | Path,
    *,
    output_size: tuple[int, int],
) -> Path:
    """SVG を PNG として保存する。

    Raises
    ------
    RuntimeError
        resvg が見つからない、またはラスタライズに失敗した場合。
    """

    _svg_path = Path(svg_path)
    _png_path = Path(png_path)
    _png_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = _resvg_command(input_svg=_svg_path, output_png=_png_path, output_size=output_size)
    _logger.debug("rasterize: %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise RuntimeError(
            "resvg が見つかりません（`resvg` をインストールして PATH を通してください）"
        ) from e

    if proc.returncode != 0:
        details = (proc.stderr or proc.stdout or "").strip()
        raise RuntimeError(f"resvg が失敗しました (code={proc.returncode}). {details}".strip())

    return _png_path


__all__ = [
    "default_output_path",
    "export_image",
    "png_output_size",
    "rasterize_svg_to_png",
]
