"""Full-table caches consulted by every repository read."""

from nextboard.data.cache.base import CacheProvider
from nextboard.data.cache.factory import create_cache_provider
from nextboard.data.cache.memory import MemoryCacheProvider
from nextboard.data.cache.no_cache import NoCacheProvider
from nextboard.data.cache.redis_cache import RedisCacheProvider

__all__ = [
    "CacheProvider",
    "MemoryCacheProvider",
    "NoCacheProvider",
    "RedisCacheProvider",
    "create_cache_provider",
]
