"""SQL access: provider contract, engine variants and the query builder."""

from nextboard.data.db.base import DatabaseProvider, QueryResult, Row, SQLQuery
from nextboard.data.db.factory import create_database_provider
from nextboard.data.db.query_builder import QueryBuilder

__all__ = [
    "DatabaseProvider",
    "QueryBuilder",
    "QueryResult",
    "Row",
    "SQLQuery",
    "create_database_provider",
]
