"""Cache provider contract.

The cache mirrors whole database tables and is the system of record for
reads. Writers go to the database first, then call ``update(table)`` so the
mirror catches up before the next read.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence

import structlog

from nextboard.data.db.base import DatabaseProvider, Row

logger = structlog.get_logger()


class CacheProvider(ABC):
    """In-memory mirror of a fixed set of tables."""

    name: str = "cache"

    def __init__(self, db: DatabaseProvider, tables: Sequence[str]) -> None:
        self._db = db
        self._table_names = tuple(tables)

    @property
    def tables(self) -> tuple[str, ...]:
        return self._table_names

    async def build(self) -> None:
        """Load every cacheable table, one at a time. The first failing table aborts the build."""
        await self._load_tables(self.update)

    async def _load_tables(self, load: Callable[[str], Awaitable[None]]) -> None:
        logger.info("cache_build_started", provider=self.name, tables=len(self._table_names))
        try:
            for table in self._table_names:
                await load(table)
        except Exception as exc:
            logger.error("cache_build_failed", provider=self.name, error=str(exc))
            raise
        logger.info("cache_built", provider=self.name)

    @abstractmethod
    async def update(self, table: str) -> None:
        """Re-read one table from the database and swap it in."""

    async def update_all(self, tables: Sequence[str]) -> None:
        """Refresh tables one after another, in order.

        Raises:
            TypeError: If ``tables`` is not a sequence of table names.
        """
        if isinstance(tables, (str, bytes)) or not isinstance(tables, Sequence):
            msg = "cache provider update_all() tables parameter must be a sequence"
            raise TypeError(msg)
        for table in tables:
            await self.update(table)

    @abstractmethod
    def get(self, table: str) -> Sequence[Row]:
        """Current rows for ``table``; empty when unknown. Never raises."""

    def get_all(self, tables: Mapping[str, str]) -> dict[str, Sequence[Row]]:
        """Map each logical key to the rows of its table.

        Example: ``get_all({"devices": "member_devices"})``.
        """
        if not isinstance(tables, Mapping):
            msg = "cache provider get_all() tables parameter must be a mapping"
            raise TypeError(msg)
        return {key: self.get(table) for key, table in tables.items()}

    async def close(self) -> None:
        """Release external clients. Nothing to do for local providers."""

    async def _fetch(self, table: str) -> list[Row]:
        """Full-table SELECT; warns when the table comes back empty."""
        query = self._db.builder().select().from_(table).build()
        try:
            rows = await self._db.fetch_all(query)
        except Exception as exc:
            logger.error("cache_update_failed", provider=self.name, table=table, error=str(exc))
            raise
        if not rows:
            logger.warning("cache_table_empty", provider=self.name, table=table)
        return rows
