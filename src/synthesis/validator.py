# src/synthesis/validator.py — v1
"""Structural validation of generated method bodies.

Two checks, both fatal:
  1. one fragment per method signature, no more and no fewer
  2. every fragment compiles as the body of its method

A fragment that is already a complete `def` for the method is "delimited"
and its suite is used directly. Anything else is wrapped in a synthetic
header of the same kind (def / async def) before compiling, which also
catches compile-time errors such as `await` in a sync method.
"""

from __future__ import annotations

import ast
import re
import textwrap

from bodyforge.core.errors import FragmentCountError, FragmentParseError
from bodyforge.declaration.models import DeclarationContext, MethodSignature
from bodyforge.generation.models import GenerationResponse

_FENCE_RE = re.compile(r"^\s*```[\w+-]*\s*\n(?P<code>.*?)\n?\s*```\s*$", re.DOTALL)
_WRAPPER_NAME = "__bodyforge_fragment__"

Block = list[ast.stmt]


def strip_fences(fragment: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    match = _FENCE_RE.match(fragment)
    return match.group("code") if match else fragment


def _delimited_body(text: str, signature: MethodSignature) -> Block | None:
    """Suite of a fragment that is itself the full method definition."""
    try:
        module = ast.parse(text)
    except SyntaxError:
        return None
    if len(module.body) != 1:
        return None
    fn = module.body[0]
    if isinstance(fn, (ast.FunctionDef, ast.AsyncFunctionDef)) and fn.name == signature.name:
        return fn.body
    return None


def parse_block(fragment: str, signature: MethodSignature, position: int) -> Block:
    """Parse one fragment into the statements of a method body.

    Args:
        fragment: Raw body text from the backend.
        signature: The method this fragment belongs to.
        position: 1-based position of the method in the declaration.

    Raises:
        FragmentParseError: If the fragment is empty or does not compile.
    """
    text = textwrap.dedent(strip_fences(fragment)).strip("\n")
    if not text.strip():
        raise FragmentParseError(signature.name, position, "empty body")

    body = _delimited_body(text, signature)
    if body is None:
        keyword = "async def" if signature.is_async else "def"
        wrapped = f"{keyword} {_WRAPPER_NAME}():\n{textwrap.indent(text, '    ')}\n"
        try:
            module = ast.parse(wrapped)
        except SyntaxError as e:
            raise FragmentParseError(signature.name, position, e.msg) from e
        body = module.body[0].body  # type: ignore[attr-defined]
    else:
        keyword = "async def" if signature.is_async else "def"
        module = ast.parse(f"{keyword} {_WRAPPER_NAME}():\n    pass\n")
        module.body[0].body = body  # type: ignore[attr-defined]

    try:
        compile(module, f"<{signature.name}>", "exec", dont_inherit=True)
    except SyntaxError as e:
        raise FragmentParseError(signature.name, position, e.msg) from e
    return body


def validate_bodies(
    context: DeclarationContext, response: GenerationResponse
) -> list[Block]:
    """Check fragment count and parse every fragment, in signature order.

    Raises:
        FragmentCountError: Count differs from the number of signatures.
        FragmentParseError: A fragment is not a valid body (names the method).
    """
    expected = len(context.signatures)
    actual = len(response.bodies)
    if actual != expected:
        raise FragmentCountError(expected, actual, structured=response.structured)

    return [
        parse_block(fragment, signature, position)
        for position, (signature, fragment) in enumerate(
            zip(context.signatures, response.bodies), start=1
        )
    ]
