# src/llm/adapters/openai_adapter.py — v2
"""OpenAI-compatible chat completion adapter implementing BaseLLMClient.

Uses the official openai SDK against any endpoint speaking the
`/chat/completions` protocol (OpenAI, Ollama's `/v1`, Gemini's OpenAI
endpoint). SDK-level retries are disabled: one call, one request.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import BaseModel

from bodyforge.core.errors import BackendRequestError, BadResponseError
from bodyforge.llm.base_client import BaseLLMClient
from bodyforge.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


def json_schema_format(response_format: type[BaseModel]) -> dict[str, Any]:
    """Build a strict `json_schema` response_format from a pydantic model."""
    schema = response_format.model_json_schema()
    name = getattr(response_format, "schema_name", response_format.__name__)
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema, "strict": True},
    }


class OpenAIAdapter(BaseLLMClient):
    """OpenAI-compatible adapter."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout_s: float = 120.0,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        **kwargs: Any,
    ):
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_s = timeout_s
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client: Any = None

    def _get_client(self) -> Any:
        if self._client is None:
            import openai

            self._client = openai.AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout_s,
                max_retries=0,
            )
        return self._client

    async def complete(
        self,
        messages: list[Message],
        model: str,
        system: str | None = None,
        response_format: type[BaseModel] | None = None,
    ) -> LLMResponse:
        import openai

        client = self._get_client()
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": oai_messages,
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        if response_format is not None:
            kwargs["response_format"] = json_schema_format(response_format)

        logger.debug("POST %s/chat/completions model=%s", self._base_url, model)
        t0 = time.monotonic()
        try:
            resp = await client.chat.completions.create(**kwargs)
        except openai.APIResponseValidationError as e:
            raise BadResponseError(f"malformed response envelope: {e}") from e
        except openai.APIStatusError as e:
            raise BackendRequestError(str(e), status_code=e.status_code) from e
        except openai.APIError as e:
            raise BackendRequestError(str(e)) from e
        latency = int((time.monotonic() - t0) * 1000)

        choices = getattr(resp, "choices", None)
        if not choices:
            raise BadResponseError("response envelope has no choices")
        choice = choices[0]
        message = getattr(choice, "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raise BadResponseError("first choice has no message content")

        usage = getattr(resp, "usage", None)
        return LLMResponse(
            content=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=model,
            provider="openai",
            latency_ms=latency,
            finish_reason=getattr(choice, "finish_reason", None),
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"
