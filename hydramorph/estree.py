"""Thin layer over esprima: parse sketch text into plain ESTree dictionaries."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import esprima
from esprima.error_handler import Error as EsprimaError

from .errors import ParseError

Node = dict[str, Any]

_SKIP_KEYS = frozenset({"type", "range", "loc", "leadingComments", "trailingComments"})


def _to_plain(value: Any) -> Any:
    match value:
        case None | bool() | int() | float() | str():
            return value
        case list() | tuple():
            return [_to_plain(item) for item in value]
        case dict():
            return {key: _to_plain(item) for key, item in value.items()}
        case _:
            try:
                attrs = vars(value)
            except TypeError:
                # Opaque values such as compiled regex patterns.
                return value
            return {key: _to_plain(item) for key, item in attrs.items()}


def parse_program(text: str) -> tuple[Node, list[Node]]:
    """Parse JavaScript source, returning the Program node and its comments."""
    try:
        program = esprima.parseScript(text, {"range": True, "comment": True})
    except (EsprimaError, RecursionError) as exc:
        message = getattr(exc, "message", None) or str(exc)
        raise ParseError(message, source=text) from exc
    plain = _to_plain(program)
    comments = plain.pop("comments", None) or []
    return plain, comments


def is_node(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("type"), str)


def child_nodes(node: Node) -> Iterator[Node]:
    for key, value in node.items():
        if key in _SKIP_KEYS:
            continue
        if is_node(value):
            yield value
        elif isinstance(value, list):
            for item in value:
                if is_node(item):
                    yield item


def iter_nodes(node: Node, prune: Callable[[Node], bool] | None = None) -> Iterator[Node]:
    """Yield nodes depth-first in document order.

    When ``prune`` returns True for a node, neither it nor its subtree is visited.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if prune is not None and prune(current):
            continue
        yield current
        stack.extend(reversed(list(child_nodes(current))))


def is_comment_block(comment: Node) -> bool:
    return comment.get("type") in ("Block", "BlockComment")
