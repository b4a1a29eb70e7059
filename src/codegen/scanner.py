# src/codegen/scanner.py — v1
"""Find marked declarations in a module's source text."""

from __future__ import annotations

import ast
import copy
from dataclasses import dataclass

from bodyforge.codegen.marker import MARKER_ARGUMENTS, MARKER_NAME
from bodyforge.core.errors import DeclarationParseError
from bodyforge.declaration.models import GenerationParams


@dataclass(frozen=True)
class AnnotatedDeclaration:
    """A marked class plus where it sits in the source.

    `node` is a copy of the class with the marker decorator removed; it is
    what the pipeline sees and what gets synthesized.
    """

    node: ast.ClassDef
    params: GenerationParams
    start_line: int
    end_line: int
    col_offset: int

    @property
    def name(self) -> str:
        return self.node.name


def _is_marker(expr: ast.expr) -> bool:
    target = expr.func if isinstance(expr, ast.Call) else expr
    if isinstance(target, ast.Name):
        return target.id == MARKER_NAME
    if isinstance(target, ast.Attribute):
        return target.attr == MARKER_NAME
    return False


def _marker_params(expr: ast.expr, class_name: str) -> GenerationParams:
    if not isinstance(expr, ast.Call):
        return GenerationParams()
    if expr.args:
        raise DeclarationParseError(
            f"@{MARKER_NAME} on {class_name!r} takes keyword arguments only"
        )

    values: dict[str, str | None] = {}
    for kw in expr.keywords:
        if kw.arg not in MARKER_ARGUMENTS:
            raise DeclarationParseError(
                f"@{MARKER_NAME} on {class_name!r}: unknown argument {kw.arg!r}"
            )
        try:
            value = ast.literal_eval(kw.value)
        except ValueError as e:
            raise DeclarationParseError(
                f"@{MARKER_NAME} on {class_name!r}: {kw.arg} must be a string literal"
            ) from e
        if value is not None and not isinstance(value, str):
            raise DeclarationParseError(
                f"@{MARKER_NAME} on {class_name!r}: {kw.arg} must be a string literal"
            )
        values[kw.arg] = value
    return GenerationParams(model=values.get("model"), hint=values.get("prompt"))


def find_declarations(source: str, filename: str = "<source>") -> list[AnnotatedDeclaration]:
    """Return marked classes in source order.

    Raises:
        DeclarationParseError: If the module does not parse, a marker is
            malformed, or marked classes are nested inside one another.
    """
    try:
        module = ast.parse(source, filename=filename)
    except SyntaxError as e:
        raise DeclarationParseError(f"{filename} is not valid Python: {e}") from e

    found: list[AnnotatedDeclaration] = []
    for node in ast.walk(module):
        if not isinstance(node, ast.ClassDef):
            continue
        markers = [d for d in node.decorator_list if _is_marker(d)]
        if not markers:
            continue
        if len(markers) > 1:
            raise DeclarationParseError(
                f"{node.name!r} has more than one @{MARKER_NAME} decorator"
            )

        params = _marker_params(markers[0], node.name)
        stripped = copy.deepcopy(node)
        stripped.decorator_list = [d for d in stripped.decorator_list if not _is_marker(d)]
        start = min([node.lineno] + [d.lineno for d in node.decorator_list])
        found.append(
            AnnotatedDeclaration(
                node=stripped,
                params=params,
                start_line=start,
                end_line=node.end_lineno or node.lineno,
                col_offset=node.col_offset,
            )
        )

    found.sort(key=lambda d: d.start_line)
    for outer, inner in zip(found, found[1:]):
        if inner.start_line <= outer.end_line:
            raise DeclarationParseError(
                f"@{MARKER_NAME} class {inner.name!r} is nested inside {outer.name!r}"
            )
    return found
