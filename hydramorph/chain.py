from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal, TypeAlias

from .catalog import FunctionSpec

LiteralValue: TypeAlias = float | int | str | bool | None


@dataclass(frozen=True, slots=True)
class LiteralArg:
    value: LiteralValue
    kind: Literal["literal"] = "literal"

    @property
    def is_number(self) -> bool:
        return isinstance(self.value, (int, float)) and not isinstance(self.value, bool)


@dataclass(frozen=True, slots=True)
class CallableArg:
    """Arrow or function expression, kept as source text."""

    code: str
    kind: Literal["function"] = "function"


@dataclass(frozen=True, slots=True)
class ExpressionArg:
    """Any other argument expression, kept as source text."""

    code: str
    kind: Literal["expression"] = "expression"


Argument: TypeAlias = LiteralArg | CallableArg | ExpressionArg


@dataclass(frozen=True, slots=True)
class CallNode:
    name: str
    args: tuple[Argument, ...]
    spec: FunctionSpec = field(compare=False)

    @property
    def category(self) -> str:
        return self.spec.category

    def with_args(self, args: tuple[Argument, ...]) -> "CallNode":
        return replace(self, args=args)


Chain: TypeAlias = tuple[CallNode, ...]


@dataclass(slots=True)
class Sketch:
    """A parsed sketch: raw ESTree program, its comments and extracted chains."""

    text: str
    program: dict[str, Any]
    comments: list[dict[str, Any]]
    chains: list[Chain]

    @property
    def first_chain(self) -> Chain | None:
        return self.chains[0] if self.chains else None
