from __future__ import annotations

import pytest

from hydramorph.deglobalize import deglobalize, uses_audio
from hydramorph.errors import ParseError
from hydramorph.estree import iter_nodes, parse_program


def _prefixed_members(text: str, prefix: str = "_h") -> list[str]:
    program, _comments = parse_program(text)
    return [
        node["property"]["name"]
        for node in iter_nodes(program)
        if node["type"] == "MemberExpression"
        and node["object"].get("type") == "Identifier"
        and node["object"]["name"] == prefix
    ]


def test_rewrites_watched_globals() -> None:
    result = deglobalize("osc(() => time * 0.1, fps).out()")
    assert result == "osc(() => _h.time * 0.1, _h.fps).out();\n"
    assert _prefixed_members(result) == ["time", "fps"]


def test_returns_input_when_nothing_matches() -> None:
    text = "// untouched\nosc(10).out()"
    assert deglobalize(text) is text


def test_binding_positions_are_left_alone() -> None:
    result = deglobalize("const time = 1;\nf(time);")
    assert result == "const time = 1;\nf(_h.time);\n"


def test_function_parameters_are_left_alone() -> None:
    result = deglobalize("function g(time) { return time; }")
    assert "function g(time)" in result
    assert "return _h.time;" in result


def test_property_names_are_left_alone() -> None:
    assert deglobalize("x.time + fps") == "x.time + _h.fps;\n"
    text = "o = {time: 1}"
    assert deglobalize(text) is text


def test_computed_member_is_rewritten() -> None:
    assert deglobalize("x[time]") == "x[_h.time];\n"


def test_custom_prefix_and_watch_list() -> None:
    result = deglobalize("speed + time", prefix="state", watch_list=frozenset({"speed"}))
    assert result == "state.speed + time;\n"
    assert _prefixed_members(result, "state") == ["speed"]


def test_deglobalize_propagates_parse_errors() -> None:
    with pytest.raises(ParseError):
        deglobalize("osc(")


def test_uses_audio() -> None:
    assert uses_audio("osc(() => a.fft[0] * 4).out()")
    assert not uses_audio("osc(10).out()")
    assert not uses_audio("x.a")
    assert not uses_audio("osc(")


def test_free_identifier_becomes_member_access() -> None:
    result = deglobalize("a=time", "_h")
    assert result == "a = _h.time;\n"
    assert _prefixed_members(result) == ["time"]


def test_arrow_returning_object_member_stays_parseable() -> None:
    result = deglobalize("osc(() => ({t: time}).t).out()")
    assert result == "osc(() => ({t: _h.time}.t)).out();\n"
    assert _prefixed_members(result) == ["time"]
