# src/llm/retry.py — v2
"""Build-level retry of whole declaration invocations.

The pipeline itself never retries: each cache miss sends exactly one request.
The build tool may choose to re-run a failed declaration, and only backend
failures (transport, status, bad envelope) are worth another attempt.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from bodyforge.core.errors import BackendError, BackendRequestError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a declaration invocation."""

    max_retries: int = 0
    base_delay_s: float = 2.0
    backoff_factor: float = 2.0
    jitter: bool = True


def is_retryable(error: Exception) -> bool:
    """Only backend errors are retried; client-side HTTP 4xx (except 429) is not."""
    if not isinstance(error, BackendError):
        return False
    if isinstance(error, BackendRequestError) and error.status_code is not None:
        return error.status_code == 429 or error.status_code >= 500
    return True


def compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    label: str = "declaration",
    config: RetryConfig | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async function, retrying retryable backend errors.

    The last error is re-raised unchanged once retries are exhausted.
    """
    config = config or RetryConfig()
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except BackendError as e:
            attempts += 1
            if not is_retryable(e) or attempts > config.max_retries:
                raise
            delay = compute_delay(config, attempts - 1)
            logger.warning(
                "%s: %s (attempt %d/%d), retrying in %.1fs",
                label, e, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
