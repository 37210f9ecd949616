"""Application context: the long-lived collaborators shared by every request.

Built once at startup and handed to request handlers through
``request.app.state.context``. Nothing in the core reaches for a module-level
singleton.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from nextboard.config import Settings
from nextboard.data.cache import CacheProvider, create_cache_provider
from nextboard.data.db import DatabaseProvider, create_database_provider
from nextboard.locks import KeyedLock

logger = structlog.get_logger()


@dataclass
class AppContext:
    settings: Settings
    db: DatabaseProvider
    cache: CacheProvider
    locks: KeyedLock = field(default_factory=KeyedLock)

    async def start(self) -> None:
        """Connect the database, then mirror the cacheable tables.

        Either failure propagates; the process must not serve without both.
        A failed cache build releases the database pool before re-raising.
        """
        await self.db.connect()
        try:
            await self.cache.build()
        except Exception:
            logger.error("context_start_failed", cache=self.cache.name)
            await self.db.disconnect()
            raise
        logger.info("context_started", database=self.settings.database_provider.value, cache=self.cache.name)

    async def stop(self) -> None:
        await self.cache.close()
        await self.db.disconnect()
        logger.info("context_stopped")


def build_context(settings: Settings) -> AppContext:
    """Resolve the configured providers. Unsupported kinds raise ConfigurationError."""
    db = create_database_provider(settings)
    cache = create_cache_provider(settings, db)
    return AppContext(settings=settings, db=db, cache=cache)
