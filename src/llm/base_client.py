# src/llm/base_client.py — v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from bodyforge.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for chat completion providers.

    Implementations send exactly one request per call and raise
    BackendRequestError / BadResponseError instead of retrying.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        model: str,
        system: str | None = None,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        """Text completion, optionally constrained to a JSON schema."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier."""
