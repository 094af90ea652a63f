"""ESTree to JavaScript source printer, plus chain rendering."""

from __future__ import annotations

import json
import math
import re
from collections.abc import Iterable, Sequence
from typing import Any

from .chain import Argument, CallableArg, Chain, ExpressionArg, LiteralArg, LiteralValue
from .config import OUTPUT_NAME
from .errors import GenerationError, InvalidInputError
from .estree import is_comment_block

Node = dict[str, Any]

_INDENT = "  "

# Expression precedence, loosest to tightest.
_SEQUENCE = 1
_YIELD = 2
_ASSIGN = 3
_CONDITIONAL = 4
_UNARY = 16
_POSTFIX = 17
_CALL = 18
_PRIMARY = 19

_BINARY_PRECEDENCE = {
    "||": 5,
    "??": 5,
    "&&": 6,
    "|": 7,
    "^": 8,
    "&": 9,
    "==": 10,
    "!=": 10,
    "===": 10,
    "!==": 10,
    "<": 11,
    ">": 11,
    "<=": 11,
    ">=": 11,
    "in": 11,
    "instanceof": 11,
    "<<": 12,
    ">>": 12,
    ">>>": 12,
    "+": 13,
    "-": 13,
    "*": 14,
    "/": 14,
    "%": 14,
    "**": 15,
}

_WORD_UNARY = frozenset({"typeof", "void", "delete"})
_STATEMENT_START_NEEDS_PARENS = re.compile(r"^(\{|function\b|class\b|async\s+function\b|let\s*\[)")


def js_number(value: float | int) -> str:
    """Format a number the way JavaScript's String(number) does."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent_text = text.split("e")
    exponent = int(exponent_text)
    if -7 < exponent < 0:
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        return f"{sign}0.{'0' * (-exponent - 1)}{digits}"
    return f"{mantissa}e{'-' if exponent < 0 else '+'}{abs(exponent)}"


def literal_source(value: LiteralValue) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "true" if value else "false"
        case str():
            return json.dumps(value)
        case int() | float():
            return js_number(value)
        case _:
            raise GenerationError(f"Unsupported literal value: {value!r}")


def _precedence(node: Node) -> int:
    match node["type"]:
        case "SequenceExpression":
            return _SEQUENCE
        case "YieldExpression":
            return _YIELD
        case "AssignmentExpression" | "ArrowFunctionExpression" | "AsyncArrowFunctionExpression":
            return _ASSIGN
        case "ConditionalExpression":
            return _CONDITIONAL
        case "BinaryExpression" | "LogicalExpression":
            return _BINARY_PRECEDENCE[node["operator"]]
        case "UnaryExpression" | "AwaitExpression":
            return _UNARY
        case "UpdateExpression":
            return _POSTFIX
        case "CallExpression" | "MemberExpression" | "NewExpression" | "TaggedTemplateExpression":
            return _CALL
        case _:
            return _PRIMARY


def _is_async(node: Node) -> bool:
    return bool(node.get("async") or node.get("isAsync")) or node["type"].startswith("Async")


def _contains_call(node: Node) -> bool:
    current: Node | None = node
    while current is not None:
        match current["type"]:
            case "CallExpression":
                return True
            case "MemberExpression":
                current = current["object"]
            case "TaggedTemplateExpression":
                current = current["tag"]
            case _:
                return False
    return False


class _Printer:
    def __init__(self) -> None:
        self._depth = 0
        # Set while printing a for-statement init, where a bare `in` is ambiguous.
        self._no_in = False

    def _indent(self) -> str:
        return _INDENT * self._depth

    # -------------------------------------------------------------------------
    # Expressions
    # -------------------------------------------------------------------------

    def expression(self, node: Node, min_precedence: int = _SEQUENCE) -> str:
        text = self._expression(node)
        if _precedence(node) < min_precedence:
            return f"({text})"
        return text

    def _expression(self, node: Node) -> str:
        kind = node["type"]
        match kind:
            case "Identifier":
                return node["name"]
            case "Literal":
                return self._literal(node)
            case "ThisExpression":
                return "this"
            case "Super":
                return "super"
            case "ArrayExpression" | "ArrayPattern":
                return self._array(node["elements"])
            case "ObjectExpression" | "ObjectPattern":
                return self._object(node["properties"])
            case "FunctionExpression" | "AsyncFunctionExpression":
                return self._function(node)
            case "ArrowFunctionExpression" | "AsyncArrowFunctionExpression":
                return self._arrow(node)
            case "ClassExpression":
                return self._class(node)
            case "TemplateLiteral":
                return self._template(node)
            case "TaggedTemplateExpression":
                return self.expression(node["tag"], _CALL) + self._template(node["quasi"])
            case "SequenceExpression":
                return ", ".join(self.expression(item, _ASSIGN) for item in node["expressions"])
            case "UnaryExpression":
                return self._unary(node)
            case "UpdateExpression":
                argument = self.expression(node["argument"], _CALL)
                if node.get("prefix"):
                    return f"{node['operator']}{argument}"
                return f"{argument}{node['operator']}"
            case "BinaryExpression" | "LogicalExpression":
                return self._binary(node)
            case "AssignmentExpression":
                left = self.expression(node["left"], _CALL)
                right = self.expression(node["right"], _ASSIGN)
                return f"{left} {node['operator']} {right}"
            case "ConditionalExpression":
                test = self.expression(node["test"], _CONDITIONAL + 1)
                consequent = self.expression(node["consequent"], _ASSIGN)
                alternate = self.expression(node["alternate"], _ASSIGN)
                return f"{test} ? {consequent} : {alternate}"
            case "CallExpression":
                callee = self.expression(node["callee"], _CALL)
                return f"{callee}({self._arguments(node['arguments'])})"
            case "NewExpression":
                callee = self.expression(node["callee"], _CALL)
                if _contains_call(node["callee"]) and not callee.startswith("("):
                    callee = f"({callee})"
                return f"new {callee}({self._arguments(node['arguments'])})"
            case "MemberExpression":
                return self._member(node)
            case "SpreadElement" | "RestElement":
                return "..." + self.expression(node["argument"], _ASSIGN)
            case "YieldExpression":
                keyword = "yield*" if node.get("delegate") else "yield"
                if node.get("argument") is None:
                    return keyword
                return f"{keyword} {self.expression(node['argument'], _ASSIGN)}"
            case "AwaitExpression":
                return "await " + self.expression(node["argument"], _UNARY)
            case "AssignmentPattern":
                left = self.expression(node["left"], _CALL)
                return f"{left} = {self.expression(node['right'], _ASSIGN)}"
            case "MetaProperty":
                return f"{node['meta']['name']}.{node['property']['name']}"
            case _:
                raise GenerationError(f"Cannot generate source for node type {kind!r}")

    def _literal(self, node: Node) -> str:
        regex = node.get("regex")
        if regex:
            return node.get("raw") or f"/{regex['pattern']}/{regex.get('flags', '')}"
        raw = node.get("raw")
        if isinstance(raw, str) and raw:
            return raw
        return literal_source(node.get("value"))

    def _arguments(self, arguments: Sequence[Node]) -> str:
        return ", ".join(self.expression(argument, _ASSIGN) for argument in arguments)

    def _array(self, elements: Sequence[Node | None]) -> str:
        items = ["" if item is None else self.expression(item, _ASSIGN) for item in elements]
        if elements and elements[-1] is None:
            items.append("")
        return "[" + ", ".join(items) + "]"

    def _property_key(self, node: Node) -> str:
        key = node["key"]
        if node.get("computed"):
            return f"[{self.expression(key, _ASSIGN)}]"
        return self.expression(key)

    def _object(self, properties: Sequence[Node]) -> str:
        if not properties:
            return "{}"
        return "{" + ", ".join(self._property(item) for item in properties) + "}"

    def _property(self, node: Node) -> str:
        if node["type"] in ("SpreadElement", "RestElement"):
            return self.expression(node)
        key = self._property_key(node)
        value = node["value"]
        kind = node.get("kind", "init")
        if kind in ("get", "set"):
            return f"{kind} {key}{self._function_tail(value)}"
        if node.get("method"):
            return self._method_prefix(value) + key + self._function_tail(value)
        if node.get("shorthand") and not node.get("computed"):
            match value["type"]:
                case "Identifier" if value["name"] == key:
                    return key
                case "AssignmentPattern" if value["left"].get("name") == key:
                    return self.expression(value)
        return f"{key}: {self.expression(value, _ASSIGN)}"

    def _method_prefix(self, function: Node) -> str:
        prefix = "async " if _is_async(function) else ""
        if function.get("generator"):
            prefix += "*"
        return prefix

    def _params(self, params: Iterable[Node]) -> str:
        return ", ".join(self.expression(param, _ASSIGN) for param in params)

    def _function_tail(self, function: Node) -> str:
        return f"({self._params(function['params'])}) {self.block(function['body'])}"

    def _function(self, node: Node) -> str:
        head = "async function" if _is_async(node) else "function"
        if node.get("generator"):
            head += "*"
        if node.get("id"):
            head += f" {node['id']['name']}"
        return head + self._function_tail(node)

    def _arrow(self, node: Node) -> str:
        prefix = "async " if _is_async(node) else ""
        params = f"({self._params(node['params'])})"
        body = node["body"]
        if body["type"] == "BlockStatement":
            return f"{prefix}{params} => {self.block(body)}"
        text = self.expression(body, _ASSIGN)
        if text.startswith("{"):
            text = f"({text})"
        return f"{prefix}{params} => {text}"

    def _class(self, node: Node) -> str:
        head = "class"
        if node.get("id"):
            head += f" {node['id']['name']}"
        if node.get("superClass"):
            head += f" extends {self.expression(node['superClass'], _CALL)}"
        members = node["body"]["body"]
        if not members:
            return head + " {}"
        self._depth += 1
        lines = [self._indent() + self._method(member) for member in members]
        self._depth -= 1
        return head + " {\n" + "\n".join(lines) + "\n" + self._indent() + "}"

    def _method(self, node: Node) -> str:
        value = node["value"]
        prefix = "static " if node.get("static") else ""
        kind = node.get("kind", "method")
        if kind in ("get", "set"):
            prefix += f"{kind} "
        else:
            prefix += self._method_prefix(value)
        return prefix + self._property_key(node) + self._function_tail(value)

    def _template(self, node: Node) -> str:
        parts: list[str] = []
        expressions = node["expressions"]
        for index, quasi in enumerate(node["quasis"]):
            parts.append(quasi["value"]["raw"])
            if index < len(expressions):
                parts.append("${" + self.expression(expressions[index]) + "}")
        return "`" + "".join(parts) + "`"

    def _unary(self, node: Node) -> str:
        operator = node["operator"]
        argument = self.expression(node["argument"], _UNARY)
        if operator in _WORD_UNARY or argument[:1] in ("+", "-") and operator in ("+", "-"):
            return f"{operator} {argument}"
        return f"{operator}{argument}"

    def _binary(self, node: Node) -> str:
        operator = node["operator"]
        precedence = _BINARY_PRECEDENCE[operator]
        if operator == "**":
            left = self.expression(node["left"], _POSTFIX)
            right = self.expression(node["right"], precedence)
        else:
            left = self.expression(node["left"], precedence)
            right = self.expression(node["right"], precedence + 1)
        text = f"{left} {operator} {right}"
        if operator == "in" and self._no_in:
            return f"({text})"
        return text

    def _member(self, node: Node) -> str:
        target = node["object"]
        text = self.expression(target, _CALL)
        if target["type"] == "Literal" and isinstance(target.get("value"), (int, float)):
            text = f"({text})"
        if node.get("computed"):
            return f"{text}[{self.expression(node['property'])}]"
        return f"{text}.{node['property']['name']}"

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def block(self, node: Node) -> str:
        body = node["body"]
        if not body:
            return "{}"
        self._depth += 1
        inner = "\n".join(self._indent() + self.statement(item) for item in body)
        self._depth -= 1
        return "{\n" + inner + "\n" + self._indent() + "}"

    def _wrapped(self, node: Node) -> str:
        if node["type"] == "BlockStatement":
            return self.block(node)
        return self.block({"type": "BlockStatement", "body": [node]})

    def _declaration(self, node: Node) -> str:
        declarators = []
        for item in node["declarations"]:
            text = self.expression(item["id"], _ASSIGN)
            if item.get("init") is not None:
                text += f" = {self.expression(item['init'], _ASSIGN)}"
            declarators.append(text)
        return f"{node['kind']} " + ", ".join(declarators)

    def _for_init(self, node: Node) -> str:
        self._no_in = True
        try:
            if node["type"] == "VariableDeclaration":
                return self._declaration(node)
            return self.expression(node)
        finally:
            self._no_in = False

    def _loop_head(self, node: Node) -> str:
        if node["type"] == "VariableDeclaration":
            return self._declaration(node)
        return self.expression(node, _CALL)

    def statement(self, node: Node) -> str:
        kind = node["type"]
        match kind:
            case "ExpressionStatement":
                text = self.expression(node["expression"])
                if _STATEMENT_START_NEEDS_PARENS.match(text):
                    text = f"({text})"
                return text + ";"
            case "VariableDeclaration":
                return self._declaration(node) + ";"
            case "FunctionDeclaration" | "AsyncFunctionDeclaration":
                return self._function(node)
            case "ClassDeclaration":
                return self._class(node)
            case "BlockStatement":
                return self.block(node)
            case "EmptyStatement":
                return ";"
            case "DebuggerStatement":
                return "debugger;"
            case "ReturnStatement":
                if node.get("argument") is None:
                    return "return;"
                return f"return {self.expression(node['argument'])};"
            case "ThrowStatement":
                return f"throw {self.expression(node['argument'])};"
            case "BreakStatement" | "ContinueStatement":
                keyword = "break" if kind == "BreakStatement" else "continue"
                if node.get("label"):
                    return f"{keyword} {node['label']['name']};"
                return f"{keyword};"
            case "LabeledStatement":
                return f"{node['label']['name']}: {self.statement(node['body'])}"
            case "IfStatement":
                return self._if(node)
            case "ForStatement":
                init = "" if node.get("init") is None else self._for_init(node["init"])
                test = "" if node.get("test") is None else self.expression(node["test"])
                update = "" if node.get("update") is None else self.expression(node["update"])
                return f"for ({init}; {test}; {update}) {self._wrapped(node['body'])}"
            case "ForInStatement":
                left = self._loop_head(node["left"])
                right = self.expression(node["right"])
                return f"for ({left} in {right}) {self._wrapped(node['body'])}"
            case "ForOfStatement":
                left = self._loop_head(node["left"])
                right = self.expression(node["right"], _ASSIGN)
                return f"for ({left} of {right}) {self._wrapped(node['body'])}"
            case "WhileStatement":
                return f"while ({self.expression(node['test'])}) {self._wrapped(node['body'])}"
            case "DoWhileStatement":
                body = self._wrapped(node["body"])
                return f"do {body} while ({self.expression(node['test'])});"
            case "TryStatement":
                return self._try(node)
            case "SwitchStatement":
                return self._switch(node)
            case _:
                raise GenerationError(f"Cannot generate source for statement type {kind!r}")

    def _if(self, node: Node) -> str:
        text = f"if ({self.expression(node['test'])}) "
        alternate = node.get("alternate")
        if alternate is None:
            return text + self._inline_body(node["consequent"])
        text += self._wrapped(node["consequent"])
        if alternate["type"] == "IfStatement":
            return text + " else " + self._if(alternate)
        return text + " else " + self._wrapped(alternate)

    def _inline_body(self, node: Node) -> str:
        if node["type"] == "BlockStatement":
            return self.block(node)
        return self._wrapped(node)

    def _try(self, node: Node) -> str:
        text = "try " + self.block(node["block"])
        handler = node.get("handler")
        if handler is not None:
            if handler.get("param") is not None:
                text += f" catch ({self.expression(handler['param'])}) "
            else:
                text += " catch "
            text += self.block(handler["body"])
        if node.get("finalizer") is not None:
            text += " finally " + self.block(node["finalizer"])
        return text

    def _switch(self, node: Node) -> str:
        head = f"switch ({self.expression(node['discriminant'])}) {{"
        self._depth += 1
        lines: list[str] = []
        for case in node["cases"]:
            if case.get("test") is None:
                lines.append(self._indent() + "default:")
            else:
                lines.append(self._indent() + f"case {self.expression(case['test'])}:")
            self._depth += 1
            lines.extend(self._indent() + self.statement(item) for item in case["consequent"])
            self._depth -= 1
        self._depth -= 1
        if not lines:
            return head + "}"
        return head + "\n" + "\n".join(lines) + "\n" + self._indent() + "}"


def _comment_source(comment: Node) -> str:
    if is_comment_block(comment):
        return f"/*{comment['value']}*/"
    return f"//{comment['value']}"


def _comment_end(comment: Node) -> int:
    span = comment.get("range")
    return span[1] if span else -1


def generate(program: Node, comments: Sequence[Node] | None = None) -> str:
    """Render a Program (or a single statement/expression node) as source."""
    printer = _Printer()
    if program["type"] != "Program":
        if program["type"].endswith(("Statement", "Declaration")):
            return printer.statement(program)
        return printer.expression(program)

    pending = sorted(comments or (), key=_comment_end)
    lines: list[str] = []
    for statement in program["body"]:
        start = (statement.get("range") or [0, 0])[0]
        while pending and _comment_end(pending[0]) <= start:
            lines.append(_comment_source(pending.pop(0)))
        lines.append(printer.statement(statement))
    lines.extend(_comment_source(comment) for comment in pending)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def expression_source(node: Node) -> str:
    return _Printer().expression(node, _ASSIGN)


def argument_source(argument: Argument) -> str:
    match argument:
        case LiteralArg(value=value):
            return literal_source(value)
        case CallableArg(code=code) | ExpressionArg(code=code):
            return code
        case _:
            raise GenerationError(f"Unknown argument kind: {argument!r}")


def chain_to_source(chain: Chain) -> str:
    """Render a chain as ``source(args).fn(args)...``, appending ``.out()`` if missing."""
    if not chain:
        raise InvalidInputError("Cannot render an empty chain")
    parts: list[str] = []
    for index, call in enumerate(chain):
        args = ", ".join(argument_source(argument) for argument in call.args)
        prefix = "" if index == 0 else "."
        parts.append(f"{prefix}{call.name}({args})")
    code = "".join(parts)
    if f".{OUTPUT_NAME}(" not in code:
        code += f".{OUTPUT_NAME}()"
    return code
