"""Rewrite watched globals into lookups on a live state object.

Function constructors capture primitive globals such as ``time`` by value;
rewriting ``time`` to ``_h.time`` makes generated code read the live value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from .codegen import generate
from .config import AUDIO_IDENTIFIER, WATCH_LIST
from .errors import ParseError
from .estree import child_nodes, parse_program

Node = dict[str, Any]

_LOGGER = logging.getLogger("hydramorph.deglobalize")

_FUNCTION_TYPES = frozenset(
    {
        "FunctionDeclaration",
        "FunctionExpression",
        "AsyncFunctionDeclaration",
        "AsyncFunctionExpression",
        "ArrowFunctionExpression",
        "AsyncArrowFunctionExpression",
    }
)


def _reference_children(node: Node) -> Iterator[Node]:
    """Children of ``node`` that can hold identifier references.

    Binding positions, labels and non-computed property names are left out.
    """
    match node["type"]:
        case "MemberExpression" if not node.get("computed"):
            yield node["object"]
        case "Property" | "MethodDefinition":
            if node.get("computed"):
                yield node["key"]
            yield node["value"]
        case "VariableDeclarator":
            if node.get("init") is not None:
                yield node["init"]
        case kind if kind in _FUNCTION_TYPES:
            yield node["body"]
        case "CatchClause":
            yield node["body"]
        case "LabeledStatement":
            yield node["body"]
        case "BreakStatement" | "ContinueStatement":
            return
        case "ClassDeclaration" | "ClassExpression":
            if node.get("superClass") is not None:
                yield node["superClass"]
            yield node["body"]
        case "MetaProperty":
            return
        case _:
            yield from child_nodes(node)


def iter_references(program: Node) -> Iterator[Node]:
    stack = [program]
    while stack:
        node = stack.pop()
        if node["type"] == "Identifier":
            yield node
            continue
        stack.extend(reversed(list(_reference_children(node))))


def deglobalize(text: str, prefix: str = "_h", watch_list: frozenset[str] = WATCH_LIST) -> str:
    """Rewrite watched identifiers to ``prefix.name``.

    Returns ``text`` unchanged when nothing matches. Parse errors propagate.
    """
    program, _comments = parse_program(text)
    matches = [node for node in iter_references(program) if node["name"] in watch_list]
    if not matches:
        return text
    for node in matches:
        node["name"] = f"{prefix}.{node['name']}"
    _LOGGER.debug("Deglobalized %d reference(s) with prefix %s", len(matches), prefix)
    return generate(program)


def uses_audio(text: str) -> bool:
    """Whether the sketch references the audio global ``a``."""
    try:
        program, _comments = parse_program(text)
    except ParseError as exc:
        _LOGGER.info("Skipping audio check for unparseable sketch: %s", exc.message)
        return False
    return any(node["name"] == AUDIO_IDENTIFIER for node in iter_references(program))
