# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3. All entries live in one database file; WAL journaling
lets concurrent builds read while another process writes. Each statement is
its own transaction, so an interrupted write never leaves a partial row.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from bodyforge.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

DB_FILENAME = "bodyforge_cache.db"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS generations (
    key TEXT PRIMARY KEY,
    source TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(self, db_path: Path | str, timeout_s: float = 30.0) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(self._db_path), timeout=timeout_s, check_same_thread=False
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def lookup(self, key: str) -> str | None:
        """Retrieve cached source by key."""
        cursor = self._conn.execute(
            "SELECT source FROM generations WHERE key = ?", (self.check_key(key),)
        )
        row = cursor.fetchone()
        return None if row is None else row[0]

    async def store(self, key: str, source: str) -> None:
        """Store source under key (upsert)."""
        with self._conn:
            self._conn.execute(
                "INSERT OR REPLACE INTO generations (key, source) VALUES (?, ?)",
                (self.check_key(key), source),
            )
        logger.debug("Cached %s in %s", key, self._db_path.name)

    async def delete(self, key: str) -> None:
        """Remove a cache entry."""
        with self._conn:
            self._conn.execute(
                "DELETE FROM generations WHERE key = ?", (self.check_key(key),)
            )

    async def list_keys(self) -> list[str]:
        """List all stored keys."""
        cursor = self._conn.execute("SELECT key FROM generations ORDER BY key")
        return [row[0] for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
