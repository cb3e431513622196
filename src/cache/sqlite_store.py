# src/cache/sqlite_store.py — v2
"""SQLite-based cache store (CACHE_BACKEND=sqlite).

Uses stdlib sqlite3 — no external dependency. Expiry is stored as a
wall-clock epoch so entries stay valid across processes sharing the file.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path

from txflow.cache.base_cache_store import BaseCacheStore, ttl_seconds

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key TEXT PRIMARY KEY,
    value BLOB NOT NULL,
    expires_at REAL,
    updated_at REAL NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_expires_at ON cache_entries(expires_at);
"""


class SqliteCacheStore(BaseCacheStore):
    """SQLite-backed cache store."""

    def __init__(
        self, db_path: Path | str, clock: Callable[[], float] = time.time
    ) -> None:
        self._db_path = Path(db_path).expanduser()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._clock = clock
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)

    async def get(self, key: str) -> bytes | None:
        cursor = self._conn.execute(
            "SELECT value, expires_at FROM cache_entries WHERE key = ?", (key,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        value, expires_at = row
        if expires_at is not None and self._clock() >= expires_at:
            return None
        return bytes(value)

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store an entry (upsert)."""
        seconds = ttl_seconds(ttl)
        now = self._clock()
        expires_at = None if seconds is None else now + seconds
        self._conn.execute(
            """INSERT OR REPLACE INTO cache_entries (key, value, expires_at, updated_at)
               VALUES (?, ?, ?, ?)""",
            (key, sqlite3.Binary(value), expires_at, now),
        )
        self._conn.commit()

    def purge_expired(self) -> int:
        """Physically remove expired rows. Returns the number removed."""
        cursor = self._conn.execute(
            "DELETE FROM cache_entries WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self._clock(),),
        )
        self._conn.commit()
        logger.debug("Purged %d expired cache entries", cursor.rowcount)
        return cursor.rowcount

    async def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
