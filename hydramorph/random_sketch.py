"""Random sketch generation from per-function argument recipes."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping, Sequence
from types import MappingProxyType
from typing import Literal, TypeVar

import numpy as np

from .catalog import FunctionCatalog, default_catalog
from .codegen import js_number
from .config import RandomSketchSettings
from .errors import InvalidInputError

_LOGGER = logging.getLogger("hydramorph.random_sketch")

T = TypeVar("T")

ArgKind = Literal[
    "value",
    "pos_or_neg",
    "zero_one",
    "zero_half",
    "tenth_to_max",
    "tenth_to_one",
    "source",
    "texture",
]

HEADER = "// Random Hydra\n"
MATH_FUNCTIONS = ("sin", "cos", "tan")
MOUSE_VALUES = ("mouse.x", "mouse.y")

SOURCE_RECIPES: Mapping[str, tuple[ArgKind, ...]] = MappingProxyType(
    {
        "gradient": ("value",),
        "noise": ("value", "value"),
        "osc": ("value", "value", "value"),
        "shape": ("value", "zero_half", "tenth_to_one"),
        "solid": ("zero_one", "zero_one", "zero_one", "tenth_to_max"),
        "voronoi": ("value", "value", "zero_one"),
    }
)

FUNCTION_RECIPES: Mapping[str, Mapping[str, tuple[ArgKind, ...]]] = MappingProxyType(
    {
        "color": MappingProxyType(
            {
                "brightness": ("zero_one",),
                "contrast": ("tenth_to_max",),
                "color": ("zero_one", "zero_one", "zero_one"),
                "colorama": ("value",),
                "invert": ("zero_one",),
                "luma": ("zero_one", "zero_one"),
                "posterize": ("zero_one", "zero_one"),
                "saturate": ("value",),
                "thresh": ("zero_one", "zero_one"),
            }
        ),
        "geometry": MappingProxyType(
            {
                "kaleid": ("value",),
                "pixelate": ("tenth_to_max", "tenth_to_max"),
                "repeat": ("value", "value", "value", "value"),
                "repeatX": ("value", "value"),
                "repeatY": ("value", "value"),
                "rotate": ("value", "value"),
                "scale": ("pos_or_neg", "tenth_to_one", "tenth_to_one"),
                "scrollX": ("value", "value"),
                "scrollY": ("value", "value"),
            }
        ),
        "modulator": MappingProxyType(
            {
                "modulate": ("texture", "value"),
                "modulateHue": ("texture", "value"),
                "modulateKaleid": ("texture", "value"),
                "modulatePixelate": ("texture", "value"),
                "modulateRepeat": ("texture", "value", "value", "zero_one", "zero_one"),
                "modulateRepeatX": ("texture", "value", "zero_one"),
                "modulateRepeatY": ("texture", "value", "zero_one"),
                "modulateRotate": ("texture", "value"),
                "modulateScale": ("texture", "value"),
                "modulateScrollX": ("texture", "zero_one", "zero_one"),
                "modulateScrollY": ("texture", "zero_one", "zero_one"),
            }
        ),
        "operator": MappingProxyType(
            {
                "add": ("source", "zero_one"),
                "blend": ("source", "zero_one"),
                "diff": ("source",),
                "layer": ("source",),
                "mask": ("source", "value", "zero_one"),
                "mult": ("source", "zero_one"),
            }
        ),
    }
)


def truncate(number: float, digits: int) -> float:
    stepper = 10.0**digits
    return math.trunc(stepper * number) / stepper


class RandomSketchGenerator:
    """Builds random but always-parseable sketches.

    Every argument kind maps to one value generator through ``VALUE_GENERATORS``;
    every function maps to its ordered argument kinds through the recipe tables.
    """

    def __init__(
        self,
        settings: RandomSketchSettings | None = None,
        *,
        rng: np.random.Generator | None = None,
        catalog: FunctionCatalog | None = None,
    ) -> None:
        self._settings = settings or RandomSketchSettings()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._catalog = catalog or default_catalog()
        self._sources = tuple(
            name
            for name in SOURCE_RECIPES
            if name in self._catalog
            and self._settings.allows_source(name)
            and not self._settings.is_ignored(name)
        )
        self._functions: dict[str, tuple[str, ...]] = {}
        for category, recipes in FUNCTION_RECIPES.items():
            names = tuple(
                name
                for name in recipes
                if name in self._catalog
                and self._settings.allows_function(name)
                and not self._settings.is_ignored(name)
            )
            if names:
                self._functions[category] = names

    @property
    def settings(self) -> RandomSketchSettings:
        return self._settings

    def _choice(self, items: Sequence[T]) -> T:
        return items[int(self._rng.integers(len(items)))]

    def _percent_roll(self, probability: int) -> bool:
        return int(self._rng.integers(1, 101)) <= probability

    # -------------------------------------------------------------------------
    # Values
    # -------------------------------------------------------------------------

    def _normal_number(self) -> float:
        low, high = self._settings.min_value, self._settings.max_value
        digits = int(self._rng.integers(4))
        return truncate(self._rng.random() * (high - low) + low, digits)

    def _arrow_function(self) -> str | None:
        multiplier = truncate(self._rng.random() * 0.9 + 0.1, int(self._rng.integers(1, 3)))
        if self._percent_roll(self._settings.arrow_function_prob):
            return f"() => Math.{self._choice(MATH_FUNCTIONS)}(time * {js_number(multiplier)})"
        if self._percent_roll(self._settings.mouse_function_prob):
            return f"() => {self._choice(MOUSE_VALUES)} * {js_number(multiplier)}"
        return None

    def gen_value(self) -> str:
        return self._arrow_function() or js_number(self._normal_number())

    def gen_pos_or_neg(self) -> str:
        arrow = self._arrow_function()
        if arrow:
            return arrow
        value = self._normal_number()
        if int(self._rng.integers(1, 6)) == 5:
            value = -value
        return js_number(value)

    def gen_zero_one(self) -> str:
        return self._arrow_function() or js_number(truncate(self._rng.random(), 1))

    def gen_zero_half(self) -> str:
        return self._arrow_function() or js_number(truncate(self._rng.random() * 0.5, 2))

    def gen_tenth_to_max(self) -> str:
        high = self._settings.max_value
        return self._arrow_function() or js_number(
            truncate(self._rng.random() * (high - 0.1) + 0.1, 2)
        )

    def gen_tenth_to_one(self) -> str:
        return self._arrow_function() or js_number(
            truncate(self._rng.random() * 0.9 + 0.1, 2)
        )

    def gen_texture(self) -> str:
        if self._percent_roll(self._settings.modulate_itself_prob):
            return "o0"
        return self.gen_source()

    # -------------------------------------------------------------------------
    # Calls
    # -------------------------------------------------------------------------

    def _render(self, name: str, recipe: tuple[ArgKind, ...]) -> str:
        args = ", ".join(VALUE_GENERATORS[kind](self) for kind in recipe)
        return f"{name}({args})"

    def gen_source(self) -> str:
        if not self._sources:
            raise InvalidInputError("Couldn't generate a source (every source is ignored)")
        name = self._choice(self._sources)
        return self._render(name, SOURCE_RECIPES[name])

    def gen_function(self) -> str:
        if not self._functions:
            raise InvalidInputError("Couldn't generate a function (every function is ignored)")
        category = self._choice(tuple(self._functions))
        name = self._choice(self._functions[category])
        return "." + self._render(name, FUNCTION_RECIPES[category][name])

    def generate_code(self, min_functions: int = 2, max_functions: int = 5) -> str:
        if min_functions < 0 or max_functions < min_functions:
            raise InvalidInputError(
                f"Invalid function count range: {min_functions}..{max_functions}"
            )
        count = int(self._rng.integers(min_functions, max_functions + 1))
        lines = [self.gen_source()]
        lines.extend("  " + self.gen_function() for _ in range(count))
        code = HEADER + "\n".join(lines) + "\n.out(o0)"
        _LOGGER.debug("Generated random sketch with %d functions", count)
        return code


VALUE_GENERATORS: Mapping[ArgKind, Callable[[RandomSketchGenerator], str]] = MappingProxyType(
    {
        "value": RandomSketchGenerator.gen_value,
        "pos_or_neg": RandomSketchGenerator.gen_pos_or_neg,
        "zero_one": RandomSketchGenerator.gen_zero_one,
        "zero_half": RandomSketchGenerator.gen_zero_half,
        "tenth_to_max": RandomSketchGenerator.gen_tenth_to_max,
        "tenth_to_one": RandomSketchGenerator.gen_tenth_to_one,
        "source": RandomSketchGenerator.gen_source,
        "texture": RandomSketchGenerator.gen_texture,
    }
)
