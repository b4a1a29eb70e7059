# src/declaration/models.py — v2
"""Declaration domain models: MethodSignature, DeclarationContext, GenerationParams."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class MethodSignature(BaseModel):
    """One method stub as written in the declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    parameters: str
    return_type: str | None = None
    type_params: str | None = None
    is_async: bool = False
    decorators: tuple[str, ...] = ()
    text: str


class DeclarationContext(BaseModel):
    """Canonical identity of a declaration: key-derivation and prompt input.

    `skeleton` is the class as written with every method body reduced to its
    docstring (or `...`). It covers what the synthesized class carries over
    unchanged: class decorators and keywords, attributes, nested classes and
    method docstrings.
    """

    model_config = ConfigDict(frozen=True)

    interface_name: str | None = None
    type_name: str
    signatures: tuple[MethodSignature, ...]
    hint: str | None = None
    skeleton: str | None = None

    @property
    def method_names(self) -> list[str]:
        return [s.name for s in self.signatures]


class GenerationParams(BaseModel):
    """Per-declaration parameters supplied by the caller (marker arguments)."""

    model_config = ConfigDict(frozen=True)

    model: str | None = None
    hint: str | None = None
