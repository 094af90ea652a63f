from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .catalog import FunctionCatalog, default_catalog
from .chain import LiteralValue
from .codegen import generate, js_number
from .config import (
    MUTATION_ATTEMPTS,
    OUTPUT_NAME,
    TRANSFORM_BLACKLIST,
    ZERO_BASELINE_FALLBACK,
    MutateOptions,
)
from .errors import GenerationError, GenerationValidationError, MutationExhaustedError, ParseError
from .estree import iter_nodes
from .parser import parse, validate_source

Node = dict[str, Any]

_LOGGER = logging.getLogger("hydramorph.mutator")


@dataclass(slots=True)
class MutationState:
    """Literal and call nodes collected from one freshly parsed sketch."""

    literals: list[Node] = field(default_factory=list)
    calls: list[Node] = field(default_factory=list)


def _is_indexed_member(node: Node) -> bool:
    # Subscript literals such as a[0] are structural, not tunable.
    if node["type"] != "MemberExpression":
        return False
    return (node.get("property") or {}).get("type") == "Literal"


def _swappable_name(call: Node) -> str | None:
    callee = call.get("callee") or {}
    if callee.get("type") != "MemberExpression" or callee.get("computed"):
        return None
    name = (callee.get("property") or {}).get("name")
    if not name or name == OUTPUT_NAME:
        return None
    return name


def collect_mutation_state(program: Node) -> MutationState:
    state = MutationState()
    for node in iter_nodes(program, prune=_is_indexed_member):
        match node["type"]:
            case "Literal":
                state.literals.append(node)
            case "CallExpression" if _swappable_name(node) is not None:
                state.calls.append(node)
    return state


def _is_number(value: LiteralValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _js_round(value: float) -> float:
    return math.floor(value + 0.5)


class Mutator:
    """Randomized point mutations of a sketch's literals and transform calls.

    The baseline vector holds the literal values seen the first time a sketch
    with the current literal count was mutated; it is rebuilt whenever the
    count changes. One Mutator instance should be driven from a single thread.
    """

    def __init__(
        self,
        catalog: FunctionCatalog | None = None,
        *,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._catalog = catalog or default_catalog()
        self._rng = rng if rng is not None else np.random.default_rng()
        self._initial_vector: list[LiteralValue] = []
        self._last_literal_index: int | None = None

    @property
    def initial_vector(self) -> tuple[LiteralValue, ...]:
        return tuple(self._initial_vector)

    @property
    def last_literal_index(self) -> int | None:
        return self._last_literal_index

    def mutate(self, text: str, options: MutateOptions | None = None) -> str:
        """Return a mutated copy of ``text``, or ``text`` itself if every attempt fails."""
        options = options or MutateOptions()
        try:
            return self._mutate_with_retries(text, options)
        except MutationExhaustedError as exc:
            _LOGGER.warning("%s; returning sketch unchanged", exc)
            return text

    def _mutate_with_retries(self, text: str, options: MutateOptions) -> str:
        last_error: Exception | None = None
        for attempt in range(1, MUTATION_ATTEMPTS + 1):
            try:
                return self._mutate_once(text, options)
            except (ParseError, GenerationError) as exc:
                last_error = exc
                _LOGGER.warning(
                    "Mutation attempt %d/%d failed: %s", attempt, MUTATION_ATTEMPTS, exc
                )
        raise MutationExhaustedError(
            f"Mutation gave up after {MUTATION_ATTEMPTS} attempts"
        ) from last_error

    def _mutate_once(self, text: str, options: MutateOptions) -> str:
        sketch = parse(text, self._catalog)
        state = collect_mutation_state(sketch.program)
        self._sync_baseline(state)

        if options.change_transform:
            self._glitch_transform(state)
        else:
            self._glitch_literal(state, reroll=options.reroll)

        code = generate(sketch.program, sketch.comments)
        if not validate_source(code):
            raise GenerationValidationError(code, "mutated sketch does not re-parse")
        return code

    def _sync_baseline(self, state: MutationState) -> None:
        if len(state.literals) != len(self._initial_vector):
            self._initial_vector = [node.get("value") for node in state.literals]

    def glitch_relative(self, baseline: LiteralValue) -> float:
        if not _is_number(baseline) or baseline == 0:
            baseline = ZERO_BASELINE_FALLBACK
        return _js_round(self._rng.random() * baseline * 2 * 1000) / 1000

    def _glitch_literal(self, state: MutationState, *, reroll: bool) -> None:
        count = len(state.literals)
        if reroll:
            index = self._last_literal_index if self._last_literal_index is not None else 0
        elif count == 0:
            _LOGGER.info("No literals to glitch")
            return
        else:
            index = int(self._rng.integers(count))
            self._last_literal_index = index

        if index >= count:
            _LOGGER.info("No literal at index %d to reroll", index)
            return

        node = state.literals[index]
        baseline = self._initial_vector[index] if index < len(self._initial_vector) else None
        glitched = self.glitch_relative(baseline)
        was = node.get("raw")
        node.pop("regex", None)
        node["value"] = glitched
        node["raw"] = js_number(glitched)
        _LOGGER.info("Literal %d changed from %s to %s", index, was, node["raw"])

    def _glitch_transform(self, state: MutationState) -> None:
        if not state.calls:
            _LOGGER.info("No transform calls to glitch")
            return
        index = int(self._rng.integers(len(state.calls)))
        callee = state.calls[index]["callee"]
        old_name = callee["property"]["name"]

        spec = self._catalog.lookup(old_name)
        if spec is None:
            _LOGGER.info("No catalog entry for function %d (%s)", index, old_name)
            return
        others = [
            other for other in self._catalog.by_category(spec.category) if other.name != old_name
        ]
        if not others:
            _LOGGER.info("No other functions in category %s", spec.category)
            return

        become = others[int(self._rng.integers(len(others)))].name
        if (old_name, become) in TRANSFORM_BLACKLIST:
            _LOGGER.info(
                "Function %d changing from %s can't change to %s", index, old_name, become
            )
            return

        callee["property"]["name"] = become
        _LOGGER.info("Function %d changed from %s to %s", index, old_name, become)
