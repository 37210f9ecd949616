"""Async SQLAlchemy engines behind the DatabaseProvider contract.

One provider class per SQL engine; they differ only in driver name, default
port and engine options. Statements arrive with ``?`` placeholders and are
bound as named parameters before execution.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, ClassVar

import structlog
from sqlalchemy import URL, TextClause, text
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from nextboard.config import DatabaseKind, Settings
from nextboard.data.db.base import DatabaseProvider, QueryResult, Row, SQLQuery, validate_query
from nextboard.errors import DatabaseError, QueryError

logger = structlog.get_logger()


def _is_insert(query: str) -> bool:
    return query.lstrip().upper().startswith("INSERT")


def bind_placeholders(sql: SQLQuery) -> tuple[TextClause, dict[str, Any]]:
    """Turn ``?`` placeholders into ``:p0, :p1, ...`` bound parameters."""
    pieces = sql.query.split("?")
    expected = len(pieces) - 1
    if expected != len(sql.values):
        msg = f"Query expects {expected} values, got {len(sql.values)}."
        raise QueryError(msg)
    statement = pieces[0] + "".join(f":p{i}{piece}" for i, piece in enumerate(pieces[1:]))
    params = {f"p{i}": value for i, value in enumerate(sql.values)}
    return text(statement), params


class SQLAlchemyProvider(DatabaseProvider):
    """Shared engine lifecycle and execution for every SQL engine."""

    driver: ClassVar[str]
    default_port: ClassVar[int | None] = None
    url_query: ClassVar[dict[str, str]] = {}

    def __init__(self, settings: Settings) -> None:
        super().__init__(table_prefix=settings.database_table_prefix)
        self._settings = settings
        self._engine: AsyncEngine | None = None
        self._active: ContextVar[AsyncConnection | None] = ContextVar(
            f"nextboard_tx_{type(self).__name__}_{id(self)}", default=None
        )

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            msg = "Database not connected. Call connect() first."
            raise DatabaseError(msg)
        return self._engine

    @property
    def connected(self) -> bool:
        return self._engine is not None

    def url(self) -> str | URL:
        """Connection URL: the explicit override or one assembled from settings."""
        if self._settings.database_url:
            return self._settings.database_url
        return URL.create(
            self.driver,
            username=self._settings.database_user or None,
            password=self._settings.database_password or None,
            host=self._settings.database_host,
            port=self._settings.database_port or self.default_port,
            database=self._settings.database_name,
            query=self.url_query,
        )

    def engine_options(self) -> dict[str, Any]:
        return {
            "pool_size": self._settings.database_pool_size,
            "max_overflow": 10,
            "pool_pre_ping": True,
            "echo": False,
        }

    async def connect(self) -> None:
        """Create the engine and open one connection to prove the server is reachable."""
        if self._engine is not None:
            return
        engine = create_async_engine(self.url(), **self.engine_options())
        try:
            async with engine.connect():
                pass
        except Exception as exc:
            await engine.dispose()
            logger.error("database_connect_failed", provider=self.kind.value, error=str(exc))
            raise
        self._engine = engine
        logger.info("database_connected", provider=self.kind.value)

    async def disconnect(self) -> None:
        if self._engine is None:
            msg = "No active connection to close."
            raise DatabaseError(msg)
        await self._engine.dispose()
        self._engine = None
        logger.info("database_disconnected", provider=self.kind.value)

    def prepare(self, sql: SQLQuery) -> SQLQuery:
        """Engine-specific statement rewrite before binding."""
        return sql

    async def query(self, sql: SQLQuery) -> list[Row] | QueryResult:
        validate_query(sql)
        engine = self.engine
        statement, params = bind_placeholders(self.prepare(sql))
        insert = _is_insert(sql.query)
        try:
            conn = self._active.get()
            if conn is not None:
                result = await conn.execute(statement, params)
                return self._consume(result, insert)
            async with engine.begin() as conn:
                result = await conn.execute(statement, params)
                return self._consume(result, insert)
        except SQLAlchemyError as exc:
            logger.error("query_failed", provider=self.kind.value, query=sql.query, error=str(exc))
            raise

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        """Pin one connection for the block; commit on exit, roll back on error.

        Nested blocks join the outer transaction.
        """
        if self._active.get() is not None:
            yield
            return
        async with self.engine.begin() as conn:
            token = self._active.set(conn)
            try:
                yield
            finally:
                self._active.reset(token)

    @staticmethod
    def _consume(result: CursorResult[Any], insert: bool) -> list[Row] | QueryResult:
        if insert and result.returns_rows:
            return QueryResult(insert_id=result.scalar(), row_count=1)
        if result.returns_rows:
            return [dict(row) for row in result.mappings()]
        return QueryResult(
            insert_id=result.lastrowid if insert else None,
            row_count=result.rowcount,
        )


class MysqlProvider(SQLAlchemyProvider):
    kind = DatabaseKind.MYSQL
    driver = "mysql+aiomysql"
    default_port = 3306


class PostgresProvider(SQLAlchemyProvider):
    """PostgreSQL via asyncpg. Inserts report their id through RETURNING."""

    kind = DatabaseKind.POSTGRES
    driver = "postgresql+asyncpg"
    default_port = 5432

    def engine_options(self) -> dict[str, Any]:
        options = super().engine_options()
        options["connect_args"] = {"statement_cache_size": 0}
        return options

    def prepare(self, sql: SQLQuery) -> SQLQuery:
        if _is_insert(sql.query) and "RETURNING" not in sql.query.upper():
            return SQLQuery(query=f"{sql.query} RETURNING id", values=sql.values)
        return sql


class MssqlProvider(SQLAlchemyProvider):
    kind = DatabaseKind.MSSQL
    driver = "mssql+aioodbc"
    default_port = 1433
    url_query = {"driver": "ODBC Driver 18 for SQL Server", "TrustServerCertificate": "yes"}


class OracleProvider(SQLAlchemyProvider):
    kind = DatabaseKind.ORACLE
    driver = "oracle+oracledb"
    default_port = 1521


class SqliteProvider(SQLAlchemyProvider):
    """File-backed SQLite via aiosqlite."""

    kind = DatabaseKind.SQLITE
    driver = "sqlite+aiosqlite"

    def url(self) -> str | URL:
        if self._settings.database_url:
            return self._settings.database_url
        return URL.create(self.driver, database=self._settings.sqlite_database_path)

    def engine_options(self) -> dict[str, Any]:
        return {"echo": False}
