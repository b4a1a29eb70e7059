# src/synthesis/synthesizer.py — v1
"""Splice validated bodies back into the declaration skeleton."""

from __future__ import annotations

import ast
import copy

from bodyforge.core.errors import GenerationValidationError
from bodyforge.declaration.extractor import iter_methods
from bodyforge.synthesis.validator import Block


def _docstring(body: list[ast.stmt]) -> ast.stmt | None:
    if body and isinstance(body[0], ast.Expr):
        value = body[0].value
        if isinstance(value, ast.Constant) and isinstance(value.value, str):
            return body[0]
    return None


def synthesize(node: ast.ClassDef, blocks: list[Block]) -> str:
    """Rebuild the class with each method body replaced, in order.

    Everything other than method bodies (bases, keywords, decorators, type
    parameters, attributes, nested classes, method signatures, docstrings)
    is carried over from the original node.

    Returns:
        Source text of the synthesized class, newline-terminated.

    Raises:
        GenerationValidationError: If the block count does not match or the
            result is not a complete, compilable class.
    """
    synthesized = copy.deepcopy(node)
    methods = iter_methods(synthesized)
    if len(methods) != len(blocks):
        raise GenerationValidationError(
            f"cannot synthesize {node.name!r}: {len(methods)} methods, {len(blocks)} bodies"
        )

    for method, block in zip(methods, blocks):
        doc = _docstring(method.body)
        method.body = ([doc] if doc is not None else []) + copy.deepcopy(block)

    ast.fix_missing_locations(synthesized)
    source = ast.unparse(synthesized) + "\n"

    try:
        reparsed = ast.parse(source)
        compile(reparsed, f"<{node.name}>", "exec", dont_inherit=True)
    except SyntaxError as e:
        raise GenerationValidationError(
            f"synthesized declaration {node.name!r} does not compile: {e.msg}"
        ) from e
    if len(reparsed.body) != 1 or not isinstance(reparsed.body[0], ast.ClassDef):
        raise GenerationValidationError(
            f"synthesized declaration {node.name!r} is not a single class"
        )
    return source
