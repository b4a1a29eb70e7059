# src/generation/prompts.py — v2
"""Prompt construction for method-body generation."""

from __future__ import annotations

from bodyforge.declaration.models import DeclarationContext
from bodyforge.llm.models import Message

SYSTEM_PROMPT = """You are a Python code generator. Return ONLY valid Python code for method bodies.
Do not include markdown fences. Follow the provided signatures exactly.
If something is unspecified, make reasonable, deterministic choices.
Use only the standard library unless explicitly requested."""

FORMAT_INSTRUCTION = (
    'Return ONLY a strict JSON object like {"bodies": ["return 1", "x = 2\\nreturn x"]} '
    "where each string is the indented-block body (without the 'def' line) of the "
    "corresponding method, in the order listed."
)


def build_system_prompt() -> str:
    return SYSTEM_PROMPT


def build_user_prompt(context: DeclarationContext) -> str:
    """Describe the declaration: interface, type, ordered signatures, skeleton, hint."""
    interface = context.interface_name or "(none: anonymous interface)"
    methods = "\n".join(
        f"{i}. {sig.text}" for i, sig in enumerate(context.signatures, start=1)
    )
    declaration = ""
    if context.skeleton:
        declaration = f"- Declaration as written:\n{context.skeleton}\n"
    return (
        "Implement the following Python class methods.\n"
        "Do not change signatures. Provide only the method bodies (without 'def' lines).\n"
        "Context:\n"
        f"- Interface: {interface}\n"
        f"- Class: {context.type_name}\n"
        f"- Methods:\n{methods}\n"
        f"{declaration}"
        f"Additional hint: {context.hint or ''}"
    )


def build_messages(context: DeclarationContext) -> list[Message]:
    """User context message followed by the output-format instruction."""
    return [
        Message(role="user", content=build_user_prompt(context)),
        Message(role="user", content=FORMAT_INSTRUCTION),
    ]
