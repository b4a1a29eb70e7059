# src/cache/file_store.py — v2
"""File-based cache store (default CACHE_BACKEND=file).

One entry per key, stored as `<key>.py` under the cache directory. Writes go
to a temp file in the same directory and are renamed into place, so readers
never observe a partially written entry and concurrent writers to the same
key leave exactly one complete file behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from bodyforge.cache.base_cache_store import BaseCacheStore
from bodyforge.cache.fingerprint import is_valid_key

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".py"


def atomic_write_text(path: Path, content: str) -> None:
    """Write text to path via temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            fh.write(content)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class FileCacheStore(BaseCacheStore):
    """Directory of `<key>.py` files."""

    def __init__(self, cache_root: Path | str) -> None:
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    async def lookup(self, key: str) -> str | None:
        """Retrieve cached source by key."""
        path = self.entry_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    async def store(self, key: str, source: str) -> None:
        """Atomically store source under key."""
        path = self.entry_path(key)
        atomic_write_text(path, source)
        logger.debug("Cached %s (%d chars)", path.name, len(source))

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        self.entry_path(key).unlink(missing_ok=True)

    async def list_keys(self) -> list[str]:
        """List keys of all complete entries (temp files are skipped)."""
        if not self._root.is_dir():
            return []
        return sorted(
            path.stem
            for path in self._root.glob(f"*{ENTRY_SUFFIX}")
            if is_valid_key(path.stem)
        )

    def entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        return self._root / f"{self.check_key(key)}{ENTRY_SUFFIX}"
