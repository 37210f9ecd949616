"""The "no cache" provider.

Reads always come back empty because nothing is ever stored. With
``fetch_on_update`` on (the historical behaviour), ``build`` and ``update``
still run the full-table SELECT and discard the rows, so query problems
surface at boot. With it off they are no-ops.
"""

from __future__ import annotations

from collections.abc import Sequence

from nextboard.data.cache.base import CacheProvider
from nextboard.data.db.base import DatabaseProvider, Row


class NoCacheProvider(CacheProvider):
    name = "none"

    def __init__(self, db: DatabaseProvider, tables: Sequence[str], fetch_on_update: bool = True) -> None:
        super().__init__(db, tables)
        self._fetch_on_update = fetch_on_update
        self._mirror: dict[str, tuple[Row, ...]] = {}

    async def update(self, table: str) -> None:
        if not self._fetch_on_update:
            return
        await self._fetch(table)

    def get(self, table: str) -> Sequence[Row]:
        return self._mirror.get(table, ())
