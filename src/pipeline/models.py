# src/pipeline/models.py — v2
"""Pipeline result model."""

from __future__ import annotations

from pydantic import BaseModel


class SynthesisResult(BaseModel):
    """Outcome of one pipeline invocation."""

    key: str
    declaration: str
    source: str
    cache_hit: bool
    model: str | None = None
