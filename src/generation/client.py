# src/generation/client.py — v2
"""Generation client: one structured request per cache miss.

Response handling:
  - content is a `{"bodies": [str, ...]}` object -> structured fragments
  - JSON of any other shape -> BadResponseError
  - not JSON at all -> the raw content as a single unstructured fragment,
    or BadResponseError when strict schema enforcement is enabled
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from bodyforge.core.errors import BadResponseError
from bodyforge.declaration.models import DeclarationContext
from bodyforge.generation.models import GenerationRequest, GenerationResponse, ImplBodies
from bodyforge.generation.prompts import build_messages, build_system_prompt
from bodyforge.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

FALLBACK_MODEL = "gpt-4o-mini"


def resolve_model(override: str | None, default: str | None = None) -> str:
    """Per-declaration override > configured default > fallback."""
    return override or default or FALLBACK_MODEL


def build_request(context: DeclarationContext, model: str) -> GenerationRequest:
    return GenerationRequest(
        model=model,
        system=build_system_prompt(),
        messages=build_messages(context),
    )


def parse_content(content: str, strict: bool = False) -> GenerationResponse:
    """Turn message content into ordered fragments.

    Only content that is not JSON at all may fall back to a single raw
    fragment. JSON of any other shape is a bad response: a JSON literal is
    also a Python expression and would otherwise pass as a body.
    """
    try:
        payload = json.loads(content)
    except json.JSONDecodeError as e:
        if strict:
            raise BadResponseError(
                f'model did not return a {{"bodies": [...]}} JSON object: {e.msg}'
            ) from e
        logger.warning(
            "Model content is not JSON; keeping raw text as a single fragment"
        )
        return GenerationResponse(bodies=[content], structured=False)

    try:
        parsed = ImplBodies.model_validate(payload)
    except ValidationError as e:
        raise BadResponseError(
            f'JSON content does not match {{"bodies": [str, ...]}}: {e.error_count()} error(s)'
        ) from e
    return GenerationResponse(bodies=parsed.bodies, structured=True)


class GenerationClient:
    """Builds the prompt, calls the backend once, enforces the output contract."""

    def __init__(
        self,
        llm_client: BaseLLMClient,
        default_model: str | None = None,
        strict_schema: bool = False,
    ) -> None:
        self._llm = llm_client
        self._default_model = default_model
        self._strict_schema = strict_schema

    async def generate(
        self, context: DeclarationContext, model: str | None = None
    ) -> GenerationResponse:
        """Request method bodies for a declaration.

        Raises:
            BackendRequestError: Transport or status failure.
            BadResponseError: Unusable envelope, or non-conforming content
                under strict schema enforcement.
        """
        request = build_request(context, resolve_model(model, self._default_model))
        logger.info(
            "Requesting %d method bodies from %s (model=%s)",
            len(context.signatures), self._llm.provider_name, request.model,
        )
        resp = await self._llm.complete(
            request.messages,
            model=request.model,
            system=request.system,
            response_format=ImplBodies,
        )
        logger.debug(
            "Backend answered in %dms (%d in / %d out tokens)",
            resp.latency_ms, resp.input_tokens, resp.output_tokens,
        )
        result = parse_content(resp.content, strict=self._strict_schema)
        return result.model_copy(update={"model": request.model})
