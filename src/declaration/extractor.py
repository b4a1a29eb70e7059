# src/declaration/extractor.py — v2
"""Declaration extractor: parsed class -> DeclarationContext.

A declaration is a class implementing an interface. Its bases form the
interface name (no bases means an anonymous interface), and every method
defined directly in the class body is a signature to fill, in source order.
The rest of the class (decorators, keywords, attributes, nested classes,
method docstrings) is captured as a skeleton so it takes part in the key.
"""

from __future__ import annotations

import ast
import copy
import re

from bodyforge.core.errors import DeclarationParseError
from bodyforge.declaration.models import DeclarationContext, MethodSignature

_WS_RE = re.compile(r"\s+")

FunctionNode = ast.FunctionDef | ast.AsyncFunctionDef


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim."""
    return _WS_RE.sub(" ", text).strip()


def parse_declaration(source: str) -> ast.ClassDef:
    """Parse source text holding exactly one top-level class.

    Raises:
        DeclarationParseError: If the text is not valid Python or does not
            contain exactly one class definition.
    """
    try:
        module = ast.parse(source)
    except SyntaxError as e:
        raise DeclarationParseError(f"declaration is not valid Python: {e}") from e

    classes = [node for node in module.body if isinstance(node, ast.ClassDef)]
    if len(classes) != 1:
        raise DeclarationParseError(
            f"expected exactly one class declaration, found {len(classes)}"
        )
    return classes[0]


def iter_methods(node: ast.ClassDef) -> list[FunctionNode]:
    """Methods defined directly in the class body, in order."""
    return [
        item
        for item in node.body
        if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef))
    ]


def render_skeleton(node: ast.ClassDef) -> str:
    """The class with method bodies reduced to their docstring, or `...`.

    Everything the synthesizer passes through unchanged is part of this text,
    so editing any of it yields a different key.
    """
    skeleton = copy.deepcopy(node)
    for method in iter_methods(skeleton):
        if ast.get_docstring(method, clean=False) is not None:
            method.body = method.body[:1]
        else:
            method.body = [ast.Expr(value=ast.Constant(value=Ellipsis))]
    return ast.unparse(ast.fix_missing_locations(skeleton))


def extract_context(node: ast.ClassDef, hint: str | None = None) -> DeclarationContext:
    """Build the DeclarationContext for a class.

    Args:
        node: Parsed class definition.
        hint: Optional free-text generation hint.

    Raises:
        DeclarationParseError: If the node is not a class or declares no methods.
    """
    if not isinstance(node, ast.ClassDef):
        raise DeclarationParseError(
            f"expected a class declaration, got {type(node).__name__}"
        )

    methods = iter_methods(node)
    if not methods:
        raise DeclarationParseError(
            f"class {node.name!r} declares no methods to implement"
        )

    interface_name = None
    if node.bases:
        interface_name = ", ".join(ast.unparse(base) for base in node.bases)

    return DeclarationContext(
        interface_name=interface_name,
        type_name=node.name + _render_type_params(node),
        signatures=tuple(_signature(m) for m in methods),
        hint=hint or None,
        skeleton=render_skeleton(node),
    )


def _signature(fn: FunctionNode) -> MethodSignature:
    parameters = ast.unparse(fn.args)
    return_type = ast.unparse(fn.returns) if fn.returns is not None else None
    type_params = _render_type_params(fn) or None
    is_async = isinstance(fn, ast.AsyncFunctionDef)

    header = f"{'async def' if is_async else 'def'} {fn.name}{type_params or ''}({parameters})"
    if return_type is not None:
        header += f" -> {return_type}"
    decorators = tuple(ast.unparse(d) for d in fn.decorator_list)
    if decorators:
        header = " ".join(f"@{d}" for d in decorators) + " " + header

    return MethodSignature(
        name=fn.name,
        parameters=parameters,
        return_type=return_type,
        type_params=type_params,
        is_async=is_async,
        decorators=decorators,
        text=normalize_whitespace(header),
    )


def _render_type_params(node: ast.AST) -> str:
    """Render PEP 695 type parameters as '[T, U]' (empty when absent)."""
    params = getattr(node, "type_params", None)
    if not params:
        return ""
    return "[" + ", ".join(ast.unparse(p) for p in params) + "]"
