# src/codegen/marker.py — v1
"""Runtime marker for declarations to generate.

    from bodyforge import implement

    @implement(prompt="be terse")
    class Simple(Greeter):
        def greet(self, name: str) -> str: ...

At runtime the decorator only records its arguments on the class so the
annotated source stays importable. The build pass reads the arguments from
the source text, not from this attribute.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar, overload

MARKER_NAME = "implement"
MARKER_ATTRIBUTE = "__bodyforge__"
MARKER_ARGUMENTS = ("model", "prompt")

T = TypeVar("T", bound=type)


@overload
def implement(cls: T) -> T: ...


@overload
def implement(
    cls: None = None, *, model: str | None = None, prompt: str | None = None
) -> Callable[[T], T]: ...


def implement(
    cls: Any = None, *, model: str | None = None, prompt: str | None = None
) -> Any:
    """Mark a class whose method bodies are generated by the build pass."""

    def mark(target: T) -> T:
        setattr(target, MARKER_ATTRIBUTE, {"model": model, "prompt": prompt})
        return target

    if cls is None:
        return mark
    return mark(cls)
