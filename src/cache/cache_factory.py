# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from bodyforge.cache.base_cache_store import BaseCacheStore
from bodyforge.config.settings import FALLBACK_CACHE_DIR, Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the file backend under
            the fallback cache directory.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "file" if settings is None else settings.cache_backend
    cache_dir = FALLBACK_CACHE_DIR if settings is None else settings.resolved_cache_dir

    if backend == "file":
        from bodyforge.cache.file_store import FileCacheStore
        return FileCacheStore(cache_root=cache_dir)

    if backend == "sqlite":
        from bodyforge.cache.sqlite_store import DB_FILENAME, SqliteCacheStore
        return SqliteCacheStore(db_path=cache_dir / DB_FILENAME)

    raise ValueError(f"Unsupported cache backend: {backend!r}")
