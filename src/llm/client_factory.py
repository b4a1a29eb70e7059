# src/llm/client_factory.py — v3
"""Factory: instantiate the LLM client from settings.

Only called on a cache miss while online, so cached builds never need a
credential.
"""

from __future__ import annotations

import importlib
import logging

from bodyforge.config.settings import Settings
from bodyforge.core.errors import ConfigurationError
from bodyforge.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name -> adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "bodyforge.llm.adapters.openai_adapter.OpenAIAdapter",
}


class UnsupportedProviderError(ConfigurationError):
    """Raised when a provider is not registered."""


def create_llm_client(settings: Settings) -> BaseLLMClient:
    """Instantiate the configured adapter.

    Raises:
        UnsupportedProviderError: If LLM_PROVIDER is not registered.
        ConfigurationError: If LLM_API_KEY is not set.
    """
    provider = settings.llm_provider
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r} (LLM_PROVIDER). "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )
    if not settings.llm_api_key:
        raise ConfigurationError(
            "LLM_API_KEY is not set; a bearer credential is required to "
            "generate implementations (set LLM_OFFLINE=1 to use the cache only)"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])
    logger.debug(
        "Creating LLM client: provider=%s, base_url=%s", provider, settings.llm_base_url
    )
    return adapter_cls(
        api_key=settings.llm_api_key,
        base_url=settings.llm_base_url,
        timeout_s=settings.llm_timeout_s,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
    )


def register_provider(name: str, class_path: str) -> None:
    """Register a custom provider adapter.

    Args:
        name: Provider identifier.
        class_path: Fully qualified class path implementing BaseLLMClient.
    """
    _PROVIDER_REGISTRY[name] = class_path
    logger.info("Registered LLM provider: %s -> %s", name, class_path)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
