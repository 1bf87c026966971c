"""
どこで: `src/plakat/render/effects.py`。
何を: 再利用される効果定義（紙の粒子・影・ヴィネット・グラデーション）と 3 枚の雰囲気オーバーレイを組み立てる。
なぜ: 効果は defs に 1 回だけ定義し、図形とオーバーレイからは id 参照で共有するため。
"""

from __future__ import annotations

from plakat.core.palettes import SIGNAL_COLOR, Palette
from plakat.core.scene import EffectRef, Element

EFFECT_NAMES = ("paper", "shadow", "deep-shadow", "vignette", "warm", "cool", "depth", "glow")

PAPER_OPACITY = 0.07
PAPER_BASE_FREQUENCY = 0.55
PAPER_OCTAVES = 4


def scene_uid(seed: int) -> str:
    """seed から render 単位の id 接頭辞を返す。"""

    return f"z{int(seed)}"


def _e(tag: str, attrs: dict | None = None, *children: Element) -> Element:
    return Element.create(tag, attrs or {}, children=children)


def _drop_shadow(uid: str, name: str, *, dx: int, dy: int, blur: int, alpha: float, margin: int) -> Element:
    return _e(
        "filter",
        {
            "id": f"{uid}-{name}",
            "x": f"-{margin}%",
            "y": f"-{margin}%",
            "width": f"{100 + margin * 2 + 10}%",
            "height": f"{100 + margin * 2 + 10}%",
        },
        _e("feOffset", {"dx": dx, "dy": dy, "in": "SourceAlpha", "result": "offset"}),
        _e("feGaussianBlur", {"in": "offset", "stdDeviation": blur, "result": "blur"}),
        _e("feFlood", {"flood-color": f"rgba(0,0,0,{alpha})", "result": "flood"}),
        _e("feComposite", {"in": "flood", "in2": "blur", "operator": "in", "result": "shadow"}),
        _e("feMerge", {}, _e("feMergeNode", {"in": "shadow"}), _e("feMergeNode", {"in": "SourceGraphic"})),
    )


def _stop(offset: str, color: str, opacity: float | None = None) -> Element:
    return _e("stop", {"offset": offset, "stop-color": color, "stop-opacity": opacity})


def build_defs(uid: str, seed: int, palette: Palette) -> tuple[Element, ...]:
    """効果定義を EFFECT_NAMES の順で返す。

    Parameters
    ----------
    uid : str
        id 接頭辞。各定義の id は `"{uid}-{name}"`。
    seed : int
        紙の粒子（feTurbulence）の seed に `seed mod 1000` を使う。
    palette : Palette
        warm / cool / depth グラデーションの色源。
    """
    colors = palette.colors
    paper = _e(
        "filter",
        {"id": f"{uid}-paper", "x": "0", "y": "0", "width": "100%", "height": "100%"},
        _e(
            "feTurbulence",
            {
                "type": "fractalNoise",
                "baseFrequency": PAPER_BASE_FREQUENCY,
                "numOctaves": PAPER_OCTAVES,
                "stitchTiles": "stitch",
                "result": "noise",
                "seed": int(seed) % 1000,
            },
        ),
        _e("feColorMatrix", {"type": "saturate", "values": "0", "in": "noise", "result": "mono"}),
        _e("feBlend", {"in": "SourceGraphic", "in2": "mono", "mode": "multiply", "result": "tex"}),
        _e("feComposite", {"in": "tex", "in2": "SourceAlpha", "operator": "in"}),
    )
    shadow = _drop_shadow(uid, "shadow", dx=2, dy=3, blur=5, alpha=0.06, margin=10)
    deep = _drop_shadow(uid, "deep-shadow", dx=4, dy=6, blur=8, alpha=0.08, margin=15)
    vignette = _e(
        "radialGradient",
        {"id": f"{uid}-vignette", "cx": "50%", "cy": "50%", "r": "70%"},
        _stop("0%", "transparent"),
        _stop("70%", "transparent"),
        _stop("100%", "rgba(0,0,0,0.04)"),
    )
    warm = _e(
        "linearGradient",
        {"id": f"{uid}-warm", "x1": "0%", "y1": "0%", "x2": "100%", "y2": "100%"},
        _stop("0%", colors[0]),
        _stop("100%", SIGNAL_COLOR),
    )
    cool = _e(
        "linearGradient",
        {"id": f"{uid}-cool", "x1": "0%", "y1": "100%", "x2": "100%", "y2": "0%"},
        _stop("0%", colors[1]),
        _stop("100%", colors[2], 0.7),
    )
    depth = _e(
        "linearGradient",
        {"id": f"{uid}-depth", "x1": "0%", "y1": "0%", "x2": "0%", "y2": "100%"},
        _stop("0%", palette.ink, 0.01),
        _stop("100%", palette.ink, 0.05),
    )
    glow = _e(
        "radialGradient",
        {"id": f"{uid}-glow", "cx": "50%", "cy": "50%", "r": "50%"},
        _stop("0%", SIGNAL_COLOR),
        _stop("60%", SIGNAL_COLOR, 0.6),
        _stop("100%", SIGNAL_COLOR, 0),
    )
    return (paper, shadow, deep, vignette, warm, cool, depth, glow)


def overlay_opacities() -> tuple[float, float, float]:
    """完成状態でのオーバーレイ不透明度（depth, vignette, paper）。"""

    return (1.0, 1.0, PAPER_OPACITY)


def build_overlays(canvas_size: int) -> tuple[Element, ...]:
    """depth -> vignette -> paper の順の全面オーバーレイを返す。"""

    c = canvas_size
    depth_op, vignette_op, paper_op = overlay_opacities()
    return (
        Element.create(
            "rect",
            {"x": 0, "y": 0, "width": c, "height": c, "fill": EffectRef("depth"), "opacity": depth_op},
            role="overlay-depth",
        ),
        Element.create(
            "rect",
            {"x": 0, "y": 0, "width": c, "height": c, "fill": EffectRef("vignette"), "opacity": vignette_op},
            role="overlay-vignette",
        ),
        Element.create(
            "rect",
            {
                "x": 0,
                "y": 0,
                "width": c,
                "height": c,
                "fill": "transparent",
                "filter": EffectRef("paper"),
                "opacity": paper_op,
            },
            role="overlay-paper",
        ),
    )


__all__ = [
    "EFFECT_NAMES",
    "PAPER_OPACITY",
    "build_defs",
    "build_overlays",
    "overlay_opacities",
    "scene_uid",
]
