# src/cache/memory_store.py — v1
"""In-process cache store (CACHE_BACKEND=memory).

Expired entries are dropped lazily on read. The clock is injectable so
expiry can be tested without sleeping.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import timedelta

from txflow.cache.base_cache_store import BaseCacheStore, ttl_seconds


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache store with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[bytes, float | None]] = {}

    async def get(self, key: str) -> bytes | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        seconds = ttl_seconds(ttl)
        expires_at = None if seconds is None else self._clock() + seconds
        self._entries[key] = (bytes(value), expires_at)

    def __len__(self) -> int:
        return len(self._entries)
