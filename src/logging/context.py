# src/logging/context.py — v3
"""Contextual logging: attach the declaration being generated and its cache key.

The whole context lives in one context variable holding a frozen snapshot.
Context variables are task-local, so concurrent pipeline invocations running
under asyncio.gather each see their own values.
"""

from __future__ import annotations

import contextvars
from dataclasses import asdict, dataclass, replace
from typing import Any


@dataclass(frozen=True)
class LogContext:
    """What the build pass is working on right now."""

    source_file: str | None = None
    declaration: str | None = None
    key: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Set fields only, for JSON log injection."""
        return {name: value for name, value in asdict(self).items() if value is not None}

    @property
    def short_key(self) -> str | None:
        return self.key[:12] if self.key else None


_EMPTY = LogContext()
_current: contextvars.ContextVar[LogContext] = contextvars.ContextVar(
    "bodyforge_log_context", default=_EMPTY
)


def get_context() -> LogContext:
    return _current.get()


def set_file_context(source_file: str) -> None:
    """Enter a source file; declaration fields from a previous file are dropped."""
    _current.set(LogContext(source_file=source_file))


def set_declaration_context(declaration: str, key: str | None = None) -> None:
    """Enter a declaration within the current file (once per pipeline invocation)."""
    _current.set(replace(_current.get(), declaration=declaration, key=key))


def clear_context() -> None:
    _current.set(_EMPTY)
