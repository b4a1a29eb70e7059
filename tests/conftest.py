# tests/conftest.py — v2
"""Shared test fixtures for unit and integration tests.

Provides the Greeter declaration, a scripted LLM client, and settings
isolated from the developer's environment. No network access.
"""

from __future__ import annotations

import ast
import json

import pytest

from bodyforge.config.settings import Settings
from bodyforge.declaration.extractor import parse_declaration
from bodyforge.llm.base_client import BaseLLMClient
from bodyforge.llm.models import LLMResponse


GREETER_SOURCE = '''
class Simple(Greeter):
    def greet(self, name: str) -> str:
        """Say hello."""
        ...

    def exclaim(self, text: str) -> str:
        pass
'''

GREETER_BODIES = ['return f"Hi {name}"', 'return f"{text}!"']


class ScriptedLLMClient(BaseLLMClient):
    """Returns queued contents in order and records every call."""

    def __init__(self, contents: list[str] | None = None) -> None:
        self.contents = list(contents or [])
        self.calls: list[dict] = []

    async def complete(self, messages, model, system=None, response_format=None):
        self.calls.append(
            {
                "messages": messages,
                "model": model,
                "system": system,
                "response_format": response_format,
            }
        )
        if not self.contents:
            raise AssertionError("unexpected LLM call")
        content = self.contents.pop(0)
        if isinstance(content, Exception):
            raise content
        return LLMResponse(content=content, model=model, provider="scripted")

    @property
    def provider_name(self) -> str:
        return "scripted"


def bodies_json(bodies: list[str]) -> str:
    return json.dumps({"bodies": bodies})


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep developer LLM_* / cache env vars out of Settings."""
    for var in (
        "LLM_PROVIDER", "LLM_API_KEY", "LLM_BASE_URL", "LLM_MODEL",
        "LLM_OFFLINE", "LLM_NO_NETWORK", "LLM_STRICT_SCHEMA", "LLM_TIMEOUT_S",
        "CACHE_BACKEND", "CACHE_DIR", "OUT_DIR", "LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_settings(tmp_path):
    def _make(**kwargs) -> Settings:
        kwargs.setdefault("cache_dir", tmp_path / "cache")
        return Settings(_env_file=None, **kwargs)

    return _make


@pytest.fixture
def greeter_node() -> ast.ClassDef:
    return parse_declaration(GREETER_SOURCE)


@pytest.fixture
def scripted_client() -> ScriptedLLMClient:
    return ScriptedLLMClient([bodies_json(GREETER_BODIES)])
