"""
どこで: `src/plakat/cli.py`。
何を: `python -m plakat` のコマンドライン入口（render / list）。
なぜ: カタログ外からも seed 指定で作品を SVG / PNG へ書き出せるようにするため。
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from plakat.core.archetype import Archetype
from plakat.core.palettes import DEFAULT_PALETTE_ID, PALETTES
from plakat.core.request import DEFAULT_DENSITY, RenderRequest
from plakat.core.runtime_config import set_config_path
from plakat.export.image import default_output_path, export_image
from plakat.export.svg import export_svg
from plakat.render.pipeline import render


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.config:
        set_config_path(args.config)

    if args.command == "list":
        return _cmd_list()
    return _cmd_render(args)


def _cmd_list() -> int:
    print("archetypes:")  # noqa: T201
    for a in Archetype:
        print(f"  {a.value}")  # noqa: T201
    print("palettes:")  # noqa: T201
    for pid in PALETTES:
        mark = " (default)" if pid == DEFAULT_PALETTE_ID else ""
        print(f"  {pid}{mark}")  # noqa: T201
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    request = RenderRequest(
        archetype=str(args.archetype),
        palette_id=str(args.palette),
        seed=int(args.seed),
        density=float(args.density),
    )
    scene = render(request)
    if scene is None:
        print(f"未知の archetype です: {args.archetype}（`list` で一覧を確認してください）")  # noqa: T201
        return 2

    svg_path = Path(args.output) if args.output else default_output_path(scene, ".svg")
    try:
        written = export_svg(scene, svg_path)
    except ValueError as exc:
        print(str(exc))  # noqa: T201
        return 2
    print(written)  # noqa: T201

    if args.png:
        png_path = written.with_suffix(".png") if args.output else default_output_path(scene, ".png")
        print(export_image(scene, png_path, scale=args.scale))  # noqa: T201
    return 0


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="plakat", description="決定的な生成ポスターを SVG / PNG に書き出す")
    p.add_argument("-v", "--verbose", action="store_true", help="DEBUG ログを出す")
    p.add_argument("--config", default="", help="config.yaml のパス（既定の探索より優先）")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("render", help="1 枚を書き出す")
    r.add_argument("archetype", help="構図アーキタイプ（例: GRID, COLOR_STUDY）")
    r.add_argument("--palette", default=DEFAULT_PALETTE_ID, help="パレット id（未知なら既定パレット）")
    r.add_argument("--seed", type=int, default=0, help="整数 seed（負値可）")
    r.add_argument("--density", type=float, default=DEFAULT_DENSITY, help="密度 [0, 1]")
    r.add_argument("-o", "--output", default="", help="出力 SVG パス（省略時は output_dir/svg/ 以下）")
    r.add_argument("--png", action="store_true", help="resvg で PNG も書き出す")
    r.add_argument("--scale", type=float, default=None, help="PNG 倍率（省略時は config の export.png.scale）")

    sub.add_parser("list", help="archetype とパレット id を表示する")
    return p.parse_args(argv)


__all__ = ["main"]
