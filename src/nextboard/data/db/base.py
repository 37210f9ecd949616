"""Database provider contract.

Every SQL engine is reached through the same three operations: ``connect``
once per process, ``query`` with a parametrized statement, ``disconnect`` at
shutdown. Reads return rows as plain dicts; writes return a ``QueryResult``
carrying the inserted identifier where the engine reports one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, ClassVar

from nextboard.config import DatabaseKind
from nextboard.data.db.query_builder import QueryBuilder, SQLQuery
from nextboard.errors import QueryError

Row = dict[str, Any]


@dataclass(frozen=True)
class QueryResult:
    """Outcome of a write statement."""

    insert_id: Any = None
    row_count: int = 0


def validate_query(sql: SQLQuery) -> None:
    """Reject anything that is not a non-empty string plus a value sequence."""
    if not isinstance(sql.query, str) or not sql.query.strip():
        msg = "Invalid SQL query string."
        raise QueryError(msg)
    if isinstance(sql.values, (str, bytes)) or not isinstance(sql.values, Sequence):
        msg = "Values must be a sequence."
        raise QueryError(msg)


class DatabaseProvider(ABC):
    """Uniform query execution across SQL engines."""

    kind: ClassVar[DatabaseKind]

    def __init__(self, table_prefix: str = "") -> None:
        self._table_prefix = table_prefix

    @property
    def table_prefix(self) -> str:
        return self._table_prefix

    def builder(self) -> QueryBuilder:
        """A fresh query builder applying this provider's table prefix."""
        return QueryBuilder(prefix=self._table_prefix)

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection pool. Failure here is fatal at boot."""

    @abstractmethod
    async def query(self, sql: SQLQuery) -> list[Row] | QueryResult:
        """Execute one parametrized statement."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the pool. Raises DatabaseError when nothing is connected."""

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Run every query issued inside the block as one atomic unit."""

    async def fetch_all(self, sql: SQLQuery) -> list[Row]:
        """Execute a read and always hand back a list of rows."""
        result = await self.query(sql)
        if isinstance(result, QueryResult):
            return []
        return result

    async def execute(self, sql: SQLQuery) -> QueryResult:
        """Execute a write and always hand back a QueryResult."""
        result = await self.query(sql)
        if isinstance(result, QueryResult):
            return result
        return QueryResult(row_count=len(result))
