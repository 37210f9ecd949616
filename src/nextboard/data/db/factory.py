"""Resolve the configured database kind into a provider instance."""

from __future__ import annotations

from nextboard.config import DatabaseKind, Settings
from nextboard.data.db.providers import (
    MssqlProvider,
    MysqlProvider,
    OracleProvider,
    PostgresProvider,
    SQLAlchemyProvider,
    SqliteProvider,
)
from nextboard.errors import ConfigurationError

PROVIDERS: dict[DatabaseKind, type[SQLAlchemyProvider]] = {
    DatabaseKind.MYSQL: MysqlProvider,
    DatabaseKind.POSTGRES: PostgresProvider,
    DatabaseKind.MSSQL: MssqlProvider,
    DatabaseKind.ORACLE: OracleProvider,
    DatabaseKind.SQLITE: SqliteProvider,
}


def create_database_provider(settings: Settings) -> SQLAlchemyProvider:
    """Build the provider for ``settings.database_provider``.

    Raises:
        ConfigurationError: If the kind has no provider.
    """
    provider_cls = PROVIDERS.get(settings.database_provider)
    if provider_cls is None:
        msg = f"Unsupported database type: {settings.database_provider}"
        raise ConfigurationError(msg)
    return provider_cls(settings)
