from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Literal

from .catalog import FunctionCatalog, default_catalog
from .chain import Argument, CallNode, Chain, LiteralArg, Sketch
from .codegen import chain_to_source
from .config import MORPH_SWITCH_POINT, is_intensity_parameter
from .errors import GenerationError, InvalidInputError
from .parser import parse, validate_source

_LOGGER = logging.getLogger("hydramorph.morph")

AlignmentKind = Literal["interpolate", "transition", "fade_out", "fade_in"]


@dataclass(frozen=True, slots=True)
class AlignmentEntry:
    kind: AlignmentKind
    call_a: CallNode | None = None
    call_b: CallNode | None = None


@dataclass(frozen=True, slots=True)
class MorphStep:
    step: int
    t: float
    code: str
    chain: Chain


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation: t=0 returns a, t=1 returns b"""
    return a + (b - a) * t


def scale_intensity(call: CallNode, intensity: float) -> CallNode:
    """Scale numeric literal arguments bound to intensity-like parameters."""
    args: list[Argument] = []
    for index, argument in enumerate(call.args):
        parameter = call.spec.parameter(index)
        match argument:
            case LiteralArg() if (
                argument.is_number
                and parameter is not None
                and is_intensity_parameter(parameter.name)
            ):
                args.append(LiteralArg(value=argument.value * intensity))
            case _:
                args.append(argument)
    return call.with_args(tuple(args))


def interpolate_arguments(
    args_a: Sequence[Argument], args_b: Sequence[Argument], t: float
) -> tuple[Argument, ...]:
    morphed: list[Argument] = []
    for index in range(max(len(args_a), len(args_b))):
        arg_a = args_a[index] if index < len(args_a) else None
        arg_b = args_b[index] if index < len(args_b) else None
        match arg_a, arg_b:
            case LiteralArg(), LiteralArg() if arg_a.is_number and arg_b.is_number:
                morphed.append(LiteralArg(value=lerp(arg_a.value, arg_b.value, t)))
            case None, _:
                morphed.append(arg_b)
            case _, None:
                morphed.append(arg_a)
            case _:
                morphed.append(arg_a if t < MORPH_SWITCH_POINT else arg_b)
    return tuple(morphed)


def interpolate_calls(call_a: CallNode, call_b: CallNode, t: float) -> CallNode:
    # Same category, but the name is always taken from call_a.
    return call_a.with_args(interpolate_arguments(call_a.args, call_b.args, t))


def transition_calls(call_a: CallNode, call_b: CallNode, t: float) -> CallNode:
    if t < MORPH_SWITCH_POINT:
        return scale_intensity(call_a, 1 - t * 2)
    return scale_intensity(call_b, (t - 0.5) * 2)


class SketchMorpher:
    """Generates valid intermediate sketches between two sketches.

    Only the first chain of each sketch takes part in the morph. The first and
    last steps reproduce the two input chains; every step in between is built
    from the position-by-position alignment of the chains.
    """

    def __init__(self, catalog: FunctionCatalog | None = None) -> None:
        self._catalog = catalog or default_catalog()

    @property
    def catalog(self) -> FunctionCatalog:
        return self._catalog

    def parse_sketch(self, text: str) -> Sketch:
        return parse(text, self._catalog)

    def align(self, chain_a: Chain, chain_b: Chain) -> list[AlignmentEntry]:
        alignment: list[AlignmentEntry] = []
        for index in range(max(len(chain_a), len(chain_b))):
            call_a = chain_a[index] if index < len(chain_a) else None
            call_b = chain_b[index] if index < len(chain_b) else None
            match call_a, call_b:
                case CallNode(), CallNode() if call_a.category == call_b.category:
                    alignment.append(AlignmentEntry("interpolate", call_a, call_b))
                case CallNode(), CallNode():
                    alignment.append(AlignmentEntry("transition", call_a, call_b))
                case CallNode(), None:
                    alignment.append(AlignmentEntry("fade_out", call_a=call_a))
                case None, CallNode():
                    alignment.append(AlignmentEntry("fade_in", call_b=call_b))
        return alignment

    def interpolate_chains(self, alignment: Sequence[AlignmentEntry], t: float) -> Chain:
        calls: list[CallNode] = []
        for entry in alignment:
            match entry.kind:
                case "interpolate":
                    calls.append(interpolate_calls(entry.call_a, entry.call_b, t))
                case "transition":
                    calls.append(transition_calls(entry.call_a, entry.call_b, t))
                case "fade_out" if t < MORPH_SWITCH_POINT:
                    calls.append(scale_intensity(entry.call_a, 1 - t * 2))
                case "fade_in" if t >= MORPH_SWITCH_POINT:
                    calls.append(scale_intensity(entry.call_b, (t - 0.5) * 2))
        return tuple(calls)

    def _first_chains(self, sketch_a: str, sketch_b: str) -> tuple[Chain, Chain]:
        chain_a = self.parse_sketch(sketch_a).first_chain
        chain_b = self.parse_sketch(sketch_b).first_chain
        if not chain_a or not chain_b:
            raise InvalidInputError("One or both sketches contain no valid hydra chains")
        return chain_a, chain_b

    def iter_morph_steps(
        self, sketch_a: str, sketch_b: str, steps: int = 10
    ) -> Iterator[MorphStep]:
        """Yield validated morph steps for t = step / steps, step in 0..steps.

        Steps whose generated code does not re-parse are skipped, so the
        sequence may be sparse.
        """
        if steps < 1:
            raise InvalidInputError(f"steps must be >= 1, got {steps}")
        chain_a, chain_b = self._first_chains(sketch_a, sketch_b)
        alignment = self.align(chain_a, chain_b)

        for step in range(steps + 1):
            t = step / steps
            if step == 0:
                chain = chain_a
            elif step == steps:
                chain = chain_b
            else:
                chain = self.interpolate_chains(alignment, t)
            try:
                code = chain_to_source(chain)
            except (GenerationError, InvalidInputError) as exc:
                _LOGGER.warning("Dropping morph step %d (t=%.3f): %s", step, t, exc)
                continue
            if not validate_source(code):
                _LOGGER.warning("Dropping morph step %d (t=%.3f): invalid code", step, t)
                continue
            yield MorphStep(step=step, t=t, code=code, chain=chain)

    def morph_sketches(self, sketch_a: str, sketch_b: str, steps: int = 10) -> list[MorphStep]:
        return list(self.iter_morph_steps(sketch_a, sketch_b, steps))


def morph_sketches(
    sketch_a: str,
    sketch_b: str,
    steps: int = 10,
    *,
    catalog: FunctionCatalog | None = None,
) -> list[MorphStep]:
    return SketchMorpher(catalog).morph_sketches(sketch_a, sketch_b, steps)
