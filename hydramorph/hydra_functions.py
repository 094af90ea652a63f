"""Bundled hydra function table.

Each record follows the external catalog feed shape: ``name``, native hydra
``type`` tag and ordered ``inputs``. Texture inputs have no default.
"""

from __future__ import annotations

from typing import Any


def _fn(name: str, type_: str, *inputs: tuple[str, str, Any]) -> dict[str, Any]:
    return {
        "name": name,
        "type": type_,
        "inputs": [
            {"name": input_name, "type": input_type, "default": default}
            for input_name, input_type, default in inputs
        ],
    }


_TEX = ("texture", "vec4", None)

HYDRA_FUNCTIONS: tuple[dict[str, Any], ...] = (
    # Sources
    _fn("noise", "src", ("scale", "float", 10), ("offset", "float", 0.1)),
    _fn("voronoi", "src", ("scale", "float", 5), ("speed", "float", 0.3), ("blending", "float", 0.3)),
    _fn("osc", "src", ("frequency", "float", 60), ("sync", "float", 0.1), ("offset", "float", 0)),
    _fn("shape", "src", ("sides", "float", 3), ("radius", "float", 0.3), ("smoothing", "float", 0.01)),
    _fn("gradient", "src", ("speed", "float", 0)),
    _fn("src", "src", ("tex", "sampler2D", None)),
    _fn("solid", "src", ("r", "float", 0), ("g", "float", 0), ("b", "float", 0), ("a", "float", 1)),
    # Geometry
    _fn("rotate", "coord", ("angle", "float", 10), ("speed", "float", 0)),
    _fn(
        "scale",
        "coord",
        ("amount", "float", 1.5),
        ("xMult", "float", 1),
        ("yMult", "float", 1),
        ("offsetX", "float", 0.5),
        ("offsetY", "float", 0.5),
    ),
    _fn("pixelate", "coord", ("pixelX", "float", 20), ("pixelY", "float", 20)),
    _fn(
        "repeat",
        "coord",
        ("repeatX", "float", 3),
        ("repeatY", "float", 3),
        ("offsetX", "float", 0),
        ("offsetY", "float", 0),
    ),
    _fn("repeatX", "coord", ("reps", "float", 3), ("offset", "float", 0)),
    _fn("repeatY", "coord", ("reps", "float", 3), ("offset", "float", 0)),
    _fn("kaleid", "coord", ("nSides", "float", 4)),
    _fn(
        "scroll",
        "coord",
        ("scrollX", "float", 0.5),
        ("scrollY", "float", 0.5),
        ("speedX", "float", 0),
        ("speedY", "float", 0),
    ),
    _fn("scrollX", "coord", ("scrollX", "float", 0.5), ("speed", "float", 0)),
    _fn("scrollY", "coord", ("scrollY", "float", 0.5), ("speed", "float", 0)),
    # Color
    _fn("posterize", "color", ("bins", "float", 3), ("gamma", "float", 0.6)),
    _fn("shift", "color", ("r", "float", 0.5), ("g", "float", 0), ("b", "float", 0), ("a", "float", 0)),
    _fn("invert", "color", ("amount", "float", 1)),
    _fn("contrast", "color", ("amount", "float", 1.6)),
    _fn("brightness", "color", ("amount", "float", 0.4)),
    _fn("luma", "color", ("threshold", "float", 0.5), ("tolerance", "float", 0.1)),
    _fn("thresh", "color", ("threshold", "float", 0.5), ("tolerance", "float", 0.04)),
    _fn("color", "color", ("r", "float", 1), ("g", "float", 1), ("b", "float", 1), ("a", "float", 1)),
    _fn("saturate", "color", ("amount", "float", 2)),
    _fn("hue", "color", ("hue", "float", 0.4)),
    _fn("colorama", "color", ("amount", "float", 0.005)),
    _fn("sum", "color", ("scale", "vec4", 1)),
    _fn("r", "color", ("scale", "float", 1), ("offset", "float", 0)),
    _fn("g", "color", ("scale", "float", 1), ("offset", "float", 0)),
    _fn("b", "color", ("scale", "float", 1), ("offset", "float", 0)),
    _fn("a", "color", ("scale", "float", 1), ("offset", "float", 0)),
    # Operators
    _fn("add", "combine", _TEX, ("amount", "float", 1)),
    _fn("sub", "combine", _TEX, ("amount", "float", 1)),
    _fn("layer", "combine", _TEX),
    _fn("blend", "combine", _TEX, ("amount", "float", 0.5)),
    _fn("mult", "combine", _TEX, ("amount", "float", 1)),
    _fn("diff", "combine", _TEX),
    _fn("mask", "combine", _TEX),
    # Modulators
    _fn(
        "modulateRepeat",
        "combineCoord",
        _TEX,
        ("repeatX", "float", 3),
        ("repeatY", "float", 3),
        ("offsetX", "float", 0.5),
        ("offsetY", "float", 0.5),
    ),
    _fn("modulateRepeatX", "combineCoord", _TEX, ("reps", "float", 3), ("offset", "float", 0.5)),
    _fn("modulateRepeatY", "combineCoord", _TEX, ("reps", "float", 3), ("offset", "float", 0.5)),
    _fn("modulateKaleid", "combineCoord", _TEX, ("nSides", "float", 4)),
    _fn("modulateScrollX", "combineCoord", _TEX, ("scrollX", "float", 0.5), ("speed", "float", 0)),
    _fn("modulateScrollY", "combineCoord", _TEX, ("scrollY", "float", 0.5), ("speed", "float", 0)),
    _fn("modulate", "combineCoord", _TEX, ("amount", "float", 0.1)),
    _fn("modulateScale", "combineCoord", _TEX, ("multiple", "float", 1), ("offset", "float", 1)),
    _fn("modulatePixelate", "combineCoord", _TEX, ("multiple", "float", 10), ("offset", "float", 3)),
    _fn("modulateRotate", "combineCoord", _TEX, ("multiple", "float", 1), ("offset", "float", 0)),
    _fn("modulateHue", "combineCoord", _TEX, ("amount", "float", 1)),
)
