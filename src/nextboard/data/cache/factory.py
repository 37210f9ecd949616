"""Select the cache provider from configuration."""

from __future__ import annotations

import redis.asyncio as redis
import structlog

from nextboard.config import CacheKind, Settings
from nextboard.data.cache.base import CacheProvider
from nextboard.data.cache.memory import MemoryCacheProvider
from nextboard.data.cache.no_cache import NoCacheProvider
from nextboard.data.cache.redis_cache import RedisCacheProvider
from nextboard.data.db.base import DatabaseProvider
from nextboard.redis_client import create_redis

logger = structlog.get_logger()


def create_cache_provider(
    settings: Settings,
    db: DatabaseProvider,
    client: redis.Redis | None = None,
) -> CacheProvider:
    """Build the configured provider. Caching switched off means NoCacheProvider."""
    tables = settings.cache_tables
    if not settings.cache_enabled or settings.cache_method is CacheKind.NONE:
        provider: CacheProvider = NoCacheProvider(
            db, tables, fetch_on_update=settings.no_cache_fetch_on_update
        )
    elif settings.cache_method is CacheKind.REDIS:
        provider = RedisCacheProvider(
            db,
            tables,
            client if client is not None else create_redis(settings.redis_url),
            prefix=settings.cache_redis_prefix,
        )
    else:
        provider = MemoryCacheProvider(db, tables)
    logger.info("cache_provider_selected", provider=provider.name)
    return provider
