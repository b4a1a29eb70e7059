# tests/unit/declaration/test_unit_extractor.py — v2
"""Tests for declaration/extractor.py — class -> DeclarationContext."""

from __future__ import annotations

import ast
import sys

import pytest

from bodyforge.core.errors import DeclarationParseError
from bodyforge.declaration.extractor import (
    extract_context,
    normalize_whitespace,
    parse_declaration,
)


class TestParseDeclaration:
    def test_single_class(self, greeter_node):
        assert isinstance(greeter_node, ast.ClassDef)
        assert greeter_node.name == "Simple"

    def test_invalid_python(self):
        with pytest.raises(DeclarationParseError, match="not valid Python"):
            parse_declaration("class Broken(:\n    pass\n")

    def test_no_class(self):
        with pytest.raises(DeclarationParseError, match="found 0"):
            parse_declaration("def f():\n    pass\n")

    def test_two_classes(self):
        with pytest.raises(DeclarationParseError, match="found 2"):
            parse_declaration("class A:\n    pass\nclass B:\n    pass\n")


class TestExtractContext:
    def test_greeter(self, greeter_node):
        ctx = extract_context(greeter_node, hint="be terse")
        assert ctx.interface_name == "Greeter"
        assert ctx.type_name == "Simple"
        assert ctx.hint == "be terse"
        assert ctx.method_names == ["greet", "exclaim"]

    def test_signature_fields(self, greeter_node):
        sig = extract_context(greeter_node).signatures[0]
        assert sig.name == "greet"
        assert sig.parameters == "self, name: str"
        assert sig.return_type == "str"
        assert sig.is_async is False
        assert sig.text == "def greet(self, name: str) -> str"

    def test_anonymous_interface(self):
        node = parse_declaration("class Plain:\n    def run(self): ...\n")
        ctx = extract_context(node)
        assert ctx.interface_name is None

    def test_multiple_bases_joined(self):
        node = parse_declaration(
            "class C(abc.ABC, Mixin, metaclass=Meta):\n    def run(self): ...\n"
        )
        assert extract_context(node).interface_name == "abc.ABC, Mixin"

    def test_async_and_decorators(self):
        node = parse_declaration(
            "class C(Base):\n"
            "    @staticmethod\n"
            "    async def fetch(url: str, *, timeout: float = 1.0) -> bytes: ...\n"
        )
        sig = extract_context(node).signatures[0]
        assert sig.is_async is True
        assert sig.decorators == ("staticmethod",)
        assert sig.text == (
            "@staticmethod async def fetch(url: str, *, timeout: float=1.0) -> bytes"
        )

    def test_preserves_method_order(self):
        node = parse_declaration(
            "class C(I):\n"
            "    def h(self): ...\n"
            "    x = 1\n"
            "    def f(self): ...\n"
            "    def g(self): ...\n"
        )
        assert extract_context(node).method_names == ["h", "f", "g"]

    def test_no_methods(self):
        node = parse_declaration("class C(I):\n    x = 1\n")
        with pytest.raises(DeclarationParseError, match="no methods"):
            extract_context(node)

    def test_empty_hint_is_absent(self, greeter_node):
        assert extract_context(greeter_node, hint="").hint is None

    def test_context_is_frozen(self, greeter_node):
        ctx = extract_context(greeter_node)
        with pytest.raises(Exception):
            ctx.type_name = "Other"  # type: ignore[misc]

    @pytest.mark.skipif(sys.version_info < (3, 12), reason="PEP 695 syntax")
    def test_type_params(self):
        node = parse_declaration(
            "class Box[T](Container[T]):\n    def get[U](self, default: U) -> T | U: ...\n"
        )
        ctx = extract_context(node)
        assert ctx.type_name == "Box[T]"
        assert ctx.interface_name == "Container[T]"
        assert ctx.signatures[0].type_params == "[U]"

    def test_skeleton_keeps_non_method_items(self):
        node = parse_declaration(
            "@final\nclass C(I, metaclass=M):\n    x = 1\n\n    def f(self):\n        \"\"\"Doc.\"\"\"\n        return 1\n\n    def g(self):\n        return 2\n"
        )
        skeleton = extract_context(node).skeleton
        assert "@final" in skeleton
        assert "metaclass=M" in skeleton
        assert "x = 1" in skeleton
        assert "Doc." in skeleton
        assert "return" not in skeleton


class TestNormalizeWhitespace:
    def test_collapses_runs(self):
        assert normalize_whitespace("  def  f(\n    x)  ") == "def f( x)"
