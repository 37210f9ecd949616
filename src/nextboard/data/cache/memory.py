"""Process-local full-table mirror."""

from __future__ import annotations

from collections.abc import Sequence

from nextboard.data.cache.base import CacheProvider
from nextboard.data.db.base import DatabaseProvider, Row


class MemoryCacheProvider(CacheProvider):
    """Keeps each table as an immutable tuple of row dicts.

    ``update`` builds the new tuple completely before swapping the reference,
    so a reader sees either the old rows or the new rows, never a mix.
    """

    name = "memory"

    def __init__(self, db: DatabaseProvider, tables: Sequence[str]) -> None:
        super().__init__(db, tables)
        self._mirror: dict[str, tuple[Row, ...]] = {}

    async def update(self, table: str) -> None:
        rows = await self._fetch(table)
        self._mirror[table] = tuple(rows)

    def get(self, table: str) -> Sequence[Row]:
        return self._mirror.get(table, ())
