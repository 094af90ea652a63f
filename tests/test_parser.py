from __future__ import annotations

import pytest

from hydramorph.chain import CallableArg, ExpressionArg, LiteralArg
from hydramorph.errors import ParseError
from hydramorph.parser import parse, validate_source

COMPLEX_SKETCH = """
// feedback tunnel
noise(3,0.1).contrast(0.7)
  .diff(noise(3.5,0.2).contrast(0.7))
  .modulateKaleid(osc(8).rotate(()=>Math.sin(time/8)*Math.PI))
  .mult(src(o0).rotate(Math.PI/2),0.7)
  .colorama(-.063)
  .out()
"""


def test_parse_extracts_single_chain() -> None:
    sketch = parse("osc(20, 0.1, 0.8).rotate(0.8).out()")
    assert len(sketch.chains) == 1
    chain = sketch.chains[0]
    assert [call.name for call in chain] == ["osc", "rotate", "out"]
    assert [call.category for call in chain] == ["source", "geometry", "output"]
    assert chain[0].args == (LiteralArg(20), LiteralArg(0.1), LiteralArg(0.8))


def test_parse_classifies_arguments() -> None:
    chain = parse(COMPLEX_SKETCH).chains[0]
    names = [call.name for call in chain]
    assert names == ["noise", "contrast", "diff", "modulateKaleid", "mult", "colorama", "out"]

    diff_arg = chain[2].args[0]
    assert isinstance(diff_arg, ExpressionArg)
    assert diff_arg.code.startswith("noise(3.5, 0.2)")

    # -.063 is a unary expression, not a literal
    assert isinstance(chain[5].args[0], ExpressionArg)
    assert chain[4].args[1] == LiteralArg(0.7)


def test_parse_keeps_callable_arguments_as_text() -> None:
    chain = parse("osc(() => time * 0.1).out()").chains[0]
    argument = chain[0].args[0]
    assert isinstance(argument, CallableArg)
    assert "time * 0.1" in argument.code
    assert validate_source(f"x = {argument.code}")


def test_parse_keeps_comments_and_raw_program() -> None:
    sketch = parse(COMPLEX_SKETCH)
    assert sketch.program["type"] == "Program"
    assert any("feedback tunnel" in comment["value"] for comment in sketch.comments)


def test_parse_extracts_every_chain_statement() -> None:
    text = "speed = 0.5\nosc(10).out(o0)\nnoise(2).kaleid(4).out(o1)\nrender(o0)"
    sketch = parse(text)
    assert [[call.name for call in chain] for chain in sketch.chains] == [
        ["osc", "out"],
        ["noise", "kaleid", "out"],
    ]
    assert sketch.first_chain == sketch.chains[0]


def test_unknown_link_truncates_chain() -> None:
    chain = parse("shape(4).sparkle(2).rotate(1).out()").chains[0]
    assert [call.name for call in chain] == ["rotate", "out"]


def test_unknown_root_is_not_a_chain() -> None:
    assert parse("Math.sin(1)").chains == []
    assert parse("a.setBins(4)").chains == []


def test_source_identifier_terminates_chain() -> None:
    chain = parse("osc.rotate(1).out()").chains[0]
    assert [call.name for call in chain] == ["osc", "rotate", "out"]
    assert chain[0].args == ()


def test_parse_error_carries_message() -> None:
    with pytest.raises(ParseError) as info:
        parse("osc(10,.out()")
    assert info.value.message
    assert info.value.source == "osc(10,.out()"
    assert "Failed to parse sketch" in str(info.value)


def test_validate_source() -> None:
    assert validate_source("osc().out()")
    assert not validate_source("osc(")
