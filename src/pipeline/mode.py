# src/pipeline/mode.py — v1
"""Online/offline decision.

Offline when either the runtime flag (LLM_OFFLINE) or the build flag
(LLM_NO_NETWORK, also `--no-network`) is set. Offline runs only read the
cache; a miss is fatal.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from bodyforge.config.settings import Settings


@dataclass(frozen=True)
class GenerationMode:
    """Resolved network mode for a build invocation."""

    offline: bool
    reasons: list[str] = field(default_factory=list)

    @property
    def online(self) -> bool:
        return not self.offline


def resolve_mode(settings: Settings) -> GenerationMode:
    """Resolve offline mode and the setting(s) that forced it."""
    reasons: list[str] = []
    if settings.llm_offline:
        reasons.append("LLM_OFFLINE")
    if settings.llm_no_network:
        reasons.append("LLM_NO_NETWORK")
    return GenerationMode(offline=bool(reasons), reasons=reasons)
