"""Redis-backed cache shared between processes.

Each table is stored as a JSON array under ``<prefix>:<table>``. A local
copy of the last value read or written backs ``get`` so reads stay
synchronous. At build time a key already present in Redis is reused instead
of hitting the database.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

import redis.asyncio as redis
import structlog

from nextboard.data.cache.base import CacheProvider
from nextboard.data.db.base import DatabaseProvider, Row
from nextboard.redis_client import close_redis

logger = structlog.get_logger()


class RedisCacheProvider(CacheProvider):
    name = "redis"

    def __init__(
        self,
        db: DatabaseProvider,
        tables: Sequence[str],
        client: redis.Redis,
        prefix: str = "nextboard:cache",
    ) -> None:
        super().__init__(db, tables)
        self._redis = client
        self._prefix = prefix
        self._mirror: dict[str, tuple[Row, ...]] = {}

    def key(self, table: str) -> str:
        return f"{self._prefix}:{table}"

    async def build(self) -> None:
        await self._load_tables(self._hydrate)

    async def _hydrate(self, table: str) -> None:
        raw = await self._redis.get(self.key(table))
        if raw is None:
            await self.update(table)
            return
        self._mirror[table] = tuple(json.loads(raw))

    async def update(self, table: str) -> None:
        rows = await self._fetch(table)
        # Non-JSON column values (datetimes, decimals) are stored as strings.
        await self._redis.set(self.key(table), json.dumps(rows, default=str))
        self._mirror[table] = tuple(rows)

    def get(self, table: str) -> Sequence[Row]:
        return self._mirror.get(table, ())

    async def close(self) -> None:
        await close_redis(self._redis)
