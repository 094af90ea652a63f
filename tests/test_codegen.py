from __future__ import annotations

import pytest

from hydramorph.catalog import default_catalog
from hydramorph.chain import CallableArg, CallNode, ExpressionArg, LiteralArg
from hydramorph.codegen import chain_to_source, generate, js_number, literal_source
from hydramorph.errors import GenerationError, InvalidInputError
from hydramorph.estree import parse_program
from hydramorph.parser import parse, validate_source

SKETCHES = [
    "osc(20, 0.1, 0.8).rotate(0.8).out()",
    "noise(3, 0.1).contrast(0.7).diff(noise(3.5, 0.2).contrast(0.7)).out()",
    "shape(3, 0.3, 0.01).rotate(0.5).scale(1.5).out()",
    "gradient(0).posterize(4).pixelate(20, 20).out()",
    "osc(8).modulateKaleid(osc(8).rotate(() => Math.sin(time / 8) * Math.PI)).out(o1)",
    "src(o0).mult(src(o0).rotate(Math.PI / 2), 0.7).colorama(-.063).out()",
    'solid(1, 0, 0).blend(shape(3, "x"), true).out()',
    "osc.rotate().out()",
]


def _regenerate(text: str) -> str:
    program, comments = parse_program(text)
    return generate(program, comments)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (20.0, "20"),
        (20, "20"),
        (0.1, "0.1"),
        (-0.0, "0"),
        (1.5e-05, "0.000015"),
        (1e-07, "1e-7"),
        (1e21, "1e+21"),
        (-2.5, "-2.5"),
        (True, "true"),
    ],
)
def test_js_number(value: float, expected: str) -> None:
    assert js_number(value) == expected


def test_literal_source_quotes_strings() -> None:
    assert literal_source("a\"b") == '"a\\"b"'
    assert literal_source(None) == "null"
    assert literal_source(False) == "false"


@pytest.mark.parametrize("text", SKETCHES)
def test_chain_round_trip_reparses(text: str) -> None:
    sketch = parse(text)
    code = chain_to_source(sketch.chains[0])
    reparsed = parse(code)
    assert [call.name for call in reparsed.chains[0]] == [call.name for call in sketch.chains[0]]


def test_chain_to_source_renders_every_argument_kind() -> None:
    catalog = default_catalog()
    chain = (
        CallNode(
            "osc",
            (LiteralArg(20.0), CallableArg("() => time"), LiteralArg("x")),
            catalog.lookup("osc"),
        ),
        CallNode("rotate", (), catalog.lookup("rotate")),
        CallNode("diff", (ExpressionArg("src(o0)"),), catalog.lookup("diff")),
    )
    assert chain_to_source(chain) == 'osc(20, () => time, "x").rotate().diff(src(o0)).out()'


def test_chain_to_source_keeps_existing_output_call() -> None:
    chain = parse("osc(1).out(o2)").chains[0]
    assert chain_to_source(chain) == "osc(1).out(o2)"


def test_chain_to_source_rejects_empty_chain() -> None:
    with pytest.raises(InvalidInputError):
        chain_to_source(())


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("x = (a + b) * c", "x = (a + b) * c;\n"),
        ("x = a - -b", "x = a - -b;\n"),
        ("f = () => ({a: 1})", "f = () => ({a: 1});\n"),
        ("x = (1, 2)", "x = (1, 2);\n"),
        ("x = a ? b : c || d", "x = a ? b : c || d;\n"),
        ("y = (a = 1) + 2", "y = (a = 1) + 2;\n"),
        ("z = (0).toString()", "z = (0).toString();\n"),
        ("w = new (foo())()", "w = new (foo())();\n"),
        ("v = typeof x", "v = typeof x;\n"),
        ("n = [1, , 3]", "n = [1, , 3];\n"),
    ],
)
def test_generate_expressions(text: str, expected: str) -> None:
    assert _regenerate(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "(function () { return 1; })()",
        "function f(a, b = 2, ...rest) { if (a) { return b; } else if (b) return a; }",
        "function g() { throw new Error('x'); }",
        "for (let i = 0; i < 3; i++) { x += i; }",
        "for (const k in obj) continue;",
        "for (const v of list) { break; }",
        "while (x) x--;",
        "do { x++; } while (x < 10);",
        "try { f(); } catch (e) { g(e); } finally { h(); }",
        "switch (x) { case 1: y(); break; default: z(); }",
        "class A extends B { constructor() { super(); } static m() {} get v() { return 1; } }",
        "const {a, b: [c, d]} = obj;",
        "label: for (;;) { break label; }",
        "const o = {a, [k]: 1, m() { return this; }, get g() { return 2; }};",
        "async function run() { await go(); }",
        "x = async () => { await y; }",
        "'use strict'; osc().out();",
        "x = a && (b || c)",
        "if (a) if (b) c(); else d();",
    ],
)
def test_generate_statements_reparse(text: str) -> None:
    code = _regenerate(text)
    assert validate_source(code)
    assert _regenerate(code) == code


def test_generate_reattaches_comments() -> None:
    text = "// first\nosc(1).out()\n/* second */\nnoise(2).out(o1)\n// trailing"
    code = _regenerate(text)
    assert code == "// first\nosc(1).out();\n/* second */\nnoise(2).out(o1);\n// trailing\n"


def test_generate_rejects_unknown_nodes() -> None:
    with pytest.raises(GenerationError):
        generate({"type": "Program", "body": [{"type": "Bogus"}]})


def _literal(value: float) -> dict:
    return {"type": "Literal", "value": value, "raw": js_number(value)}


def test_exponent_wraps_unary_base() -> None:
    power = {
        "type": "BinaryExpression",
        "operator": "**",
        "left": {
            "type": "UnaryExpression",
            "operator": "-",
            "prefix": True,
            "argument": _literal(2),
        },
        "right": _literal(2),
    }
    assert generate(power) == "(-2) ** 2"


def test_exponent_is_right_associative() -> None:
    def power(left: dict, right: dict) -> dict:
        return {"type": "BinaryExpression", "operator": "**", "left": left, "right": right}

    inner = power(_literal(2), _literal(3))
    left_nested = power(inner, _literal(2))
    right_nested = power(_literal(2), inner)
    assert generate(left_nested) == "(2 ** 3) ** 2"
    assert generate(right_nested) == "2 ** 3 ** 2"


@pytest.mark.parametrize(
    "text",
    [
        "f = () => ({a: 1}).a",
        "f = () => ({a: 1}).a()",
        "f = () => ({a: 1})[k] ? 1 : 2",
        "f = (x) => ({v: x}.v + 1)",
    ],
)
def test_arrow_body_starting_with_object_is_wrapped(text: str) -> None:
    code = _regenerate(text)
    assert "=> ({" in code
    assert validate_source(code)


@pytest.mark.parametrize(
    "text",
    [
        "for (var i = ('a' in o) ? 1 : 0; i < 3; i++) {}",
        "for (x = ('a' in o); x; ) {}",
        "for (var k = 0, ok = (k in list); ok; ) {}",
    ],
)
def test_for_init_keeps_in_operator_parenthesized(text: str) -> None:
    code = _regenerate(text)
    assert code.startswith("for (")
    assert validate_source(code)
    assert _regenerate(code) == code


def test_in_operator_outside_for_init_is_bare() -> None:
    assert _regenerate("x = 'a' in o") == "x = 'a' in o;\n"
