from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import InvalidInputError


# -----------------------------------------------------------------------------
# Shared constants
# -----------------------------------------------------------------------------

OUTPUT_NAME = "out"
OUTPUT_CATEGORY = "output"

INTENSITY_PARAMETERS: frozenset[str] = frozenset(
    {"amount", "strength", "intensity", "scale", "contrast", "brightness"}
)

# Native hydra type tags -> catalog categories. Unlisted tags pass through.
CATEGORY_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "src": "source",
        "coord": "geometry",
        "color": "color",
        "combine": "operator",
        "combineCoord": "modulator",
    }
)

# (from, to) function swaps the transform glitch must never perform.
TRANSFORM_BLACKLIST: frozenset[tuple[str, str]] = frozenset({("modulate", "modulateScrollX")})

WATCH_LIST: frozenset[str] = frozenset({"time", "fps"})
AUDIO_IDENTIFIER = "a"

MUTATION_ATTEMPTS = 5
ZERO_BASELINE_FALLBACK = 0.5
MORPH_SWITCH_POINT = 0.5


def is_intensity_parameter(name: str) -> bool:
    return name.lower() in INTENSITY_PARAMETERS


def normalize_category(tag: str) -> str:
    return CATEGORY_ALIASES.get(tag, tag)


# -----------------------------------------------------------------------------
# Options
# -----------------------------------------------------------------------------


class MutateOptions(BaseModel):
    """Mode flags for a single Mutator call.

    reroll: glitch the same literal slot as the previous call.
    change_transform: swap a call's function name instead of glitching a literal.
    """

    reroll: bool = False
    change_transform: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class RandomSketchSettings(BaseModel):
    """Knobs for the random sketch generator.

    Probabilities are percentages in 0..100. Name lists are matched
    case-insensitively; empty exclusive lists mean "everything allowed".
    """

    min_value: float = 0.0
    max_value: float = 5.0
    arrow_function_prob: int = Field(default=10, ge=0, le=100)
    mouse_function_prob: int = Field(default=0, ge=0, le=100)
    modulate_itself_prob: int = Field(default=20, ge=0, le=100)
    exclusive_sources: tuple[str, ...] = ()
    exclusive_functions: tuple[str, ...] = ()
    ignored: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("exclusive_sources", "exclusive_functions", "ignored", mode="before")
    @classmethod
    def _coerce_names(cls, value: object) -> object:
        match value:
            case str():
                return tuple(part.strip() for part in value.split(",") if part.strip())
            case list() | set() | frozenset():
                return tuple(value)
            case _:
                return value

    @model_validator(mode="after")
    def _check_range(self) -> "RandomSketchSettings":
        if self.max_value < self.min_value:
            raise InvalidInputError(
                f"max_value ({self.max_value}) must be >= min_value ({self.min_value})"
            )
        return self

    def is_ignored(self, name: str) -> bool:
        return name.lower() in {item.lower() for item in self.ignored}

    def allows_source(self, name: str) -> bool:
        if not self.exclusive_sources:
            return True
        return name.lower() in {item.lower() for item in self.exclusive_sources}

    def allows_function(self, name: str) -> bool:
        if not self.exclusive_functions:
            return True
        return name.lower() in {item.lower() for item in self.exclusive_functions}
