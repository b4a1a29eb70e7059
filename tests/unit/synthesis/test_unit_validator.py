# tests/unit/synthesis/test_unit_validator.py — v1
"""Tests for synthesis/validator.py — count invariant and block parsing."""

from __future__ import annotations

import ast

import pytest

from bodyforge.core.errors import FragmentCountError, FragmentParseError
from bodyforge.declaration.extractor import extract_context, parse_declaration
from bodyforge.declaration.models import MethodSignature
from bodyforge.generation.models import GenerationResponse
from bodyforge.synthesis.validator import parse_block, strip_fences, validate_bodies

_SYNC = MethodSignature(name="greet", parameters="self, name", text="def greet(self, name)")
_ASYNC = MethodSignature(
    name="fetch", parameters="self", is_async=True, text="async def fetch(self)"
)


class TestStripFences:
    def test_python_fence(self):
        assert strip_fences("```python\nreturn 1\n```") == "return 1"

    def test_plain_fence(self):
        assert strip_fences("```\nreturn 1\n```\n") == "return 1"

    def test_no_fence(self):
        assert strip_fences("return 1") == "return 1"


class TestParseBlock:
    def test_bare_statement(self):
        body = parse_block("return name.upper()", _SYNC, 1)
        assert ast.unparse(body[0]) == "return name.upper()"

    def test_multi_line_indented(self):
        body = parse_block("    x = 1\n    return x\n", _SYNC, 1)
        assert len(body) == 2

    def test_already_delimited_def(self):
        body = parse_block("def greet(self, name):\n    return name\n", _SYNC, 1)
        assert [ast.unparse(s) for s in body] == ["return name"]

    def test_def_of_other_name_is_wrapped(self):
        body = parse_block("def helper():\n    return 1\n", _SYNC, 1)
        assert isinstance(body[0], ast.FunctionDef)
        assert body[0].name == "helper"

    def test_fenced(self):
        body = parse_block("```python\nreturn name\n```", _SYNC, 1)
        assert ast.unparse(body[0]) == "return name"

    def test_syntax_error_names_method(self):
        with pytest.raises(FragmentParseError) as exc_info:
            parse_block("return (", _SYNC, 2)
        err = exc_info.value
        assert err.method == "greet"
        assert err.position == 2
        assert "'greet'" in str(err)

    def test_empty(self):
        with pytest.raises(FragmentParseError, match="empty body"):
            parse_block("   \n", _SYNC, 1)

    def test_await_in_sync_method_rejected(self):
        with pytest.raises(FragmentParseError):
            parse_block("return await thing()", _SYNC, 1)

    def test_await_in_async_method_ok(self):
        body = parse_block("return await thing()", _ASYNC, 1)
        assert len(body) == 1

    def test_other_language_block_rejected(self):
        with pytest.raises(FragmentParseError):
            parse_block('{ format!("Hi {name}") }', _SYNC, 1)


class TestValidateBodies:
    @pytest.fixture
    def context(self, greeter_node):
        return extract_context(greeter_node)

    def test_valid(self, context):
        blocks = validate_bodies(context, GenerationResponse(bodies=["return 1", "return 2"]))
        assert [ast.unparse(b[0]) for b in blocks] == ["return 1", "return 2"]

    def test_too_few(self, context):
        with pytest.raises(FragmentCountError) as exc_info:
            validate_bodies(context, GenerationResponse(bodies=["return 1"]))
        assert exc_info.value.expected == 2
        assert exc_info.value.actual == 1

    def test_too_many(self, context):
        with pytest.raises(FragmentCountError, match="expected 2 method bodies, got 3"):
            validate_bodies(
                context, GenerationResponse(bodies=["return 1", "return 2", "return 3"])
            )

    def test_unstructured_multi_method_fails(self, context):
        with pytest.raises(FragmentCountError, match="raw text covers one method"):
            validate_bodies(
                context, GenerationResponse(bodies=["return 1"], structured=False)
            )

    def test_unstructured_single_method_ok(self):
        ctx = extract_context(parse_declaration("class C(I):\n    def f(self): ...\n"))
        blocks = validate_bodies(
            ctx, GenerationResponse(bodies=["return 7"], structured=False)
        )
        assert ast.unparse(blocks[0][0]) == "return 7"

    def test_second_fragment_attributed(self, context):
        with pytest.raises(FragmentParseError) as exc_info:
            validate_bodies(context, GenerationResponse(bodies=["return 1", "return )"]))
        assert exc_info.value.method == "exclaim"
        assert exc_info.value.position == 2
