from __future__ import annotations

import logging
from typing import Any

from .catalog import FunctionCatalog, default_catalog
from .chain import Argument, CallableArg, CallNode, Chain, ExpressionArg, LiteralArg, Sketch
from .codegen import expression_source
from .config import OUTPUT_NAME
from .errors import ParseError
from .estree import parse_program

Node = dict[str, Any]

_LOGGER = logging.getLogger("hydramorph.parser")

_CALLABLE_TYPES = frozenset(
    {
        "ArrowFunctionExpression",
        "AsyncArrowFunctionExpression",
        "FunctionExpression",
        "AsyncFunctionExpression",
    }
)


def parse(text: str, catalog: FunctionCatalog | None = None) -> Sketch:
    """Parse sketch text and extract its call chains.

    Raises ParseError when the text is not valid source.
    """
    catalog = catalog or default_catalog()
    program, comments = parse_program(text)
    chains = extract_chains(program, catalog)
    return Sketch(text=text, program=program, comments=comments, chains=chains)


def validate_source(text: str) -> bool:
    try:
        parse_program(text)
    except ParseError as exc:
        _LOGGER.warning("Generated invalid sketch: %s (%s)", text, exc.message)
        return False
    return True


def function_name(call: Node) -> str | None:
    callee = call.get("callee") or {}
    match callee.get("type"):
        case "MemberExpression" if not callee.get("computed"):
            return callee["property"].get("name")
        case "Identifier":
            return callee["name"]
        case _:
            return None


def is_chain_root(node: Node, catalog: FunctionCatalog) -> bool:
    if node.get("type") != "CallExpression":
        return False
    name = function_name(node)
    return name is not None and (name == OUTPUT_NAME or name in catalog)


def classify_argument(node: Node) -> Argument:
    match node["type"]:
        case "Literal" if not node.get("regex"):
            return LiteralArg(value=node.get("value"))
        case kind if kind in _CALLABLE_TYPES:
            return CallableArg(code=expression_source(node))
        case _:
            return ExpressionArg(code=expression_source(node))


def extract_chain(node: Node, catalog: FunctionCatalog) -> Chain:
    """Walk a method chain right-to-left back to its root call.

    Unresolvable links end the walk; whatever was collected so far is kept.
    """
    calls: list[CallNode] = []
    current: Node | None = node
    while current is not None:
        match current.get("type"):
            case "CallExpression":
                name = function_name(current)
                spec = catalog.resolve(name) if name is not None else None
                if spec is None:
                    break
                args = tuple(classify_argument(argument) for argument in current["arguments"])
                calls.append(CallNode(name=name, args=args, spec=spec))
                callee = current["callee"]
                current = callee.get("object") if callee.get("type") == "MemberExpression" else None
            case "Identifier":
                spec = catalog.lookup(current["name"])
                if spec is not None and spec.category == "source":
                    calls.append(CallNode(name=spec.name, args=(), spec=spec))
                break
            case _:
                break
    calls.reverse()
    return tuple(calls)


def extract_chains(program: Node, catalog: FunctionCatalog) -> list[Chain]:
    chains: list[Chain] = []
    for statement in program.get("body", []):
        if statement.get("type") != "ExpressionStatement":
            continue
        expression = statement["expression"]
        if not is_chain_root(expression, catalog):
            continue
        chain = extract_chain(expression, catalog)
        if chain:
            chains.append(chain)
    return chains
