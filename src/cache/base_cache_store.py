# src/cache/base_cache_store.py — v3
"""Abstract content-addressed store for synthesized declarations."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bodyforge.cache.fingerprint import is_valid_key


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends.

    Entries map a derived key to the full source text of a synthesized
    declaration. They are written once per key and never expire.
    """

    @abstractmethod
    async def lookup(self, key: str) -> str | None:
        """Return the cached source for a key, or None when absent."""

    @abstractmethod
    async def store(self, key: str, source: str) -> None:
        """Persist source for a key. Last writer wins."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove an entry (no-op when absent)."""

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """List all stored keys."""

    async def clear(self) -> int:
        """Remove every entry. Returns the number removed."""
        keys = await self.list_keys()
        for key in keys:
            await self.delete(key)
        return len(keys)

    def close(self) -> None:
        """Release backend resources. No-op for stores that hold none."""

    @staticmethod
    def check_key(key: str) -> str:
        """Reject anything that is not a derived key."""
        if not is_valid_key(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return key
