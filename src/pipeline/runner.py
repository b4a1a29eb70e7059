# src/pipeline/runner.py — v3
"""Pipeline entry point: declaration in, synthesized source out.

    extract -> derive key -> cache lookup
        hit            -> cached source, verbatim
        miss, offline  -> OfflineCacheMissError
        miss, online   -> generate -> validate -> synthesize -> store

Each invocation is independent; the cache store is the only state shared
between concurrent invocations. Only fully validated output is stored.
"""

from __future__ import annotations

import ast
import logging
import time
from typing import TYPE_CHECKING

from bodyforge.cache.fingerprint import derive_key
from bodyforge.core.errors import OfflineCacheMissError
from bodyforge.declaration.extractor import extract_context, parse_declaration
from bodyforge.declaration.models import DeclarationContext, GenerationParams
from bodyforge.generation.client import GenerationClient
from bodyforge.logging.context import set_declaration_context
from bodyforge.pipeline.mode import GenerationMode, resolve_mode
from bodyforge.pipeline.models import SynthesisResult
from bodyforge.synthesis.synthesizer import synthesize
from bodyforge.synthesis.validator import validate_bodies

if TYPE_CHECKING:
    from bodyforge.cache.base_cache_store import BaseCacheStore
    from bodyforge.config.settings import Settings
    from bodyforge.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)


class Pipeline:
    """Cache-backed generation pipeline for one build invocation.

    Args:
        settings: Build settings (constructed once by the caller).
        cache: Cache store. Created from settings when omitted.
        llm_client: Backend client. Created lazily from settings on the
            first online cache miss when omitted.
    """

    def __init__(
        self,
        settings: Settings,
        cache: BaseCacheStore | None = None,
        llm_client: BaseLLMClient | None = None,
    ) -> None:
        self._settings = settings
        self._owns_cache = cache is None
        if cache is None:
            from bodyforge.cache.cache_factory import create_cache_store

            cache = create_cache_store(settings)
        self._cache = cache
        self._llm_client = llm_client
        self._mode = resolve_mode(settings)

    @property
    def mode(self) -> GenerationMode:
        return self._mode

    @property
    def cache(self) -> BaseCacheStore:
        return self._cache

    def close(self) -> None:
        """Close the cache store if this pipeline created it."""
        if self._owns_cache:
            self._cache.close()

    async def run(
        self, node: ast.ClassDef, params: GenerationParams | None = None
    ) -> SynthesisResult:
        """Produce the synthesized source for one declaration."""
        params = params or GenerationParams()
        context = extract_context(node, hint=params.hint)
        key = derive_key(context)
        set_declaration_context(node.name, key)

        cached = await self._cache.lookup(key)
        if cached is not None:
            logger.info("Cache hit for %s", context.type_name)
            return SynthesisResult(
                key=key, declaration=node.name, source=cached, cache_hit=True
            )

        if self._mode.offline:
            raise OfflineCacheMissError(key, self._mode.reasons)

        t0 = time.monotonic()
        source, model = await self._generate(node, context, params)
        await self._cache.store(key, source)
        logger.info(
            "Generated %d method(s) for %s in %.1fs",
            len(context.signatures), context.type_name, time.monotonic() - t0,
        )
        return SynthesisResult(
            key=key, declaration=node.name, source=source, cache_hit=False, model=model
        )

    async def run_source(
        self, source: str, params: GenerationParams | None = None
    ) -> SynthesisResult:
        """Parse a single-class source text and run the pipeline on it."""
        return await self.run(parse_declaration(source), params)

    async def _generate(
        self,
        node: ast.ClassDef,
        context: DeclarationContext,
        params: GenerationParams,
    ) -> tuple[str, str]:
        client = GenerationClient(
            self._get_llm_client(),
            default_model=self._settings.llm_model or None,
            strict_schema=self._settings.llm_strict_schema,
        )
        response = await client.generate(context, model=params.model)
        blocks = validate_bodies(context, response)
        return synthesize(node, blocks), response.model

    def _get_llm_client(self) -> BaseLLMClient:
        if self._llm_client is None:
            from bodyforge.llm.client_factory import create_llm_client

            self._llm_client = create_llm_client(self._settings)
        return self._llm_client
