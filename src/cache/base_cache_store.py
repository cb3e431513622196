# src/cache/base_cache_store.py — v2
"""Abstract key/value connector used by the cache façade.

Values are opaque bytes. A TTL of None means "no expiry"; an entry whose
TTL has elapsed must read as absent, whatever the backend's physical
eviction timing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta


def ttl_seconds(ttl: timedelta | None) -> float | None:
    """Convert a TTL to seconds, rejecting negative values."""
    if ttl is None:
        return None
    seconds = ttl.total_seconds()
    if seconds < 0:
        raise ValueError(f"TTL must not be negative: {ttl!r}")
    return seconds


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Return the stored bytes, or None if absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store value under key, replacing any previous entry."""

    async def close(self) -> None:
        """Release backend resources."""
