# src/cache/tool_cache.py — v2
"""Cache façade used by tools: namespaced keys, default TTL, JSON helpers.

Every key is stored as ``{prefix}:{key}`` so several applications can
share one physical store. Payloads round-trip unchanged, the empty one
included. Deletion is an immediate-expiry overwrite.
"""

from __future__ import annotations

import json
import logging
from datetime import timedelta
from typing import Any, TypeVar

from pydantic import BaseModel

from txflow.cache.base_cache_store import BaseCacheStore

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

IMMEDIATE_EXPIRY = timedelta(0)


class CacheMissError(KeyError):
    """Raised by get_json() when the key is absent or expired."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Key not found: {self.key}"


class ToolCache:
    """Namespaced, TTL-aware cache over a BaseCacheStore.

    Args:
        store: Storage connector.
        key_prefix: Namespace prepended to every key ("" = none).
        default_ttl: TTL used when a caller passes none.
    """

    def __init__(
        self,
        store: BaseCacheStore,
        key_prefix: str = "",
        default_ttl: timedelta | None = None,
    ) -> None:
        self._store = store
        self._prefix = key_prefix
        self._default_ttl = default_ttl

    @property
    def store(self) -> BaseCacheStore:
        return self._store

    def format_key(self, key: str) -> str:
        if not self._prefix:
            return key
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> bytes | None:
        """Return the raw payload, or None when absent."""
        return await self._store.get(self.format_key(key))

    async def set(self, key: str, value: bytes, ttl: timedelta | None = None) -> None:
        """Store a raw payload; ttl falls back to the default TTL."""
        effective_ttl = ttl if ttl is not None else self._default_ttl
        await self._store.set(self.format_key(key), value, effective_ttl)

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> None:
        await self._store.set(self.format_key(key), b"", IMMEDIATE_EXPIRY)

    async def get_json(self, key: str) -> Any:
        """Return the decoded JSON value.

        Raises:
            CacheMissError: If the key is absent.
            json.JSONDecodeError: If the payload is not valid JSON.
        """
        data = await self.get(key)
        if data is None:
            raise CacheMissError(key)
        return json.loads(data)

    async def set_json(self, key: str, value: Any, ttl: timedelta | None = None) -> None:
        """Serialize value as JSON and store it.

        Raises:
            TypeError: If value is not JSON-serializable.
        """
        await self.set(key, json.dumps(value, separators=(",", ":")).encode("utf-8"), ttl)

    async def get_model(self, key: str, model: type[M]) -> M | None:
        """Return a cached pydantic model, or None when absent or unreadable."""
        data = await self.get(key)
        if data is None:
            return None
        try:
            return model.model_validate_json(data)
        except ValueError as exc:
            logger.warning("Discarding unreadable cache entry %s: %s", key, exc)
            return None

    async def set_model(self, key: str, value: BaseModel, ttl: timedelta | None = None) -> None:
        await self.set(key, value.model_dump_json().encode("utf-8"), ttl)
