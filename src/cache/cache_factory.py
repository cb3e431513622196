# src/cache/cache_factory.py — v3
"""Factory for cache store and cache façade instantiation."""

from __future__ import annotations

from datetime import timedelta

from txflow.cache.base_cache_store import BaseCacheStore
from txflow.cache.tool_cache import ToolCache
from txflow.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        settings: Application settings. Defaults to the memory backend.

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from txflow.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore()

    if backend == "sqlite":
        from txflow.cache.sqlite_store import SqliteCacheStore
        cache_root = "~/.txflow/cache" if settings is None else str(settings.cache_root)
        return SqliteCacheStore(db_path=f"{cache_root}/txflow_cache.db")

    if backend == "redis":
        from txflow.cache.redis_store import RedisCacheStore
        if settings is None or not settings.cache_redis_url:
            raise ValueError("CACHE_REDIS_URL must be set when CACHE_BACKEND=redis")
        return RedisCacheStore(redis_url=settings.cache_redis_url)

    raise ValueError(f"Unsupported cache backend: {backend!r}")


def create_tool_cache(settings: Settings | None = None) -> ToolCache | None:
    """Build the ToolCache described by settings, or None when disabled."""
    if settings is not None and not settings.cache_enabled:
        return None
    default_ttl = None
    if settings is not None and settings.cache_default_ttl_s is not None:
        default_ttl = timedelta(seconds=settings.cache_default_ttl_s)
    prefix = "txflow" if settings is None else settings.cache_key_prefix
    return ToolCache(create_cache_store(settings), key_prefix=prefix, default_ttl=default_ttl)
