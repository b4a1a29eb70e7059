# src/generation/models.py — v1
"""Generation request/response models."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from bodyforge.llm.models import Message


class ImplBodies(BaseModel):
    """Structured output contract: one body string per method, in order."""

    model_config = ConfigDict(extra="forbid")
    schema_name: ClassVar[str] = "impl_bodies"

    bodies: list[str]


class GenerationRequest(BaseModel):
    """Everything sent to the backend for one declaration."""

    model: str
    system: str
    messages: list[Message]


class GenerationResponse(BaseModel):
    """Ordered raw fragments returned by the backend.

    `structured` is False when the content was not JSON at all
    and the raw text was kept as a single fragment.
    """

    bodies: list[str]
    structured: bool = True
    model: str = ""
