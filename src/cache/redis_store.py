# src/cache/redis_store.py — v3
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for sharing cached lookups between processes. Expiry is
delegated to Redis (SET ... PX), rounded up to whole milliseconds.
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta

from txflow.cache.base_cache_store import BaseCacheStore, ttl_seconds

logger = logging.getLogger(__name__)


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError("redis package required: pip install redis") from e

        self._client = redis.Redis.from_url(redis_url)

    async def get(self, key: str) -> bytes | None:
        return self._client.get(key)

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        seconds = ttl_seconds(ttl)
        if seconds is None:
            self._client.set(key, value)
            return
        if seconds == 0:
            # PX 0 is rejected by Redis; an already-expired entry is a delete.
            self._client.delete(key)
            return
        # Sub-millisecond TTLs expire after 1ms.
        px = max(1, math.ceil(seconds * 1000))
        self._client.set(key, value, px=px)

    async def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
