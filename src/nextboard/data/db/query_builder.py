"""Fluent SQL builder emitting ``?`` placeholders.

Table names pass through the configured prefix. Values are always bound,
never interpolated.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SQLQuery:
    """A statement with ``?`` placeholders and its positional values."""

    query: str
    values: Sequence[Any] = field(default_factory=tuple)


def _columns(columns: str | Sequence[str]) -> str:
    if isinstance(columns, str):
        return columns
    return ", ".join(columns)


class QueryBuilder:
    """Builds one statement at a time; call ``clear()`` to reuse."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        self._parts: list[str] = []
        self._values: list[Any] = []

    def select(self, columns: str | Sequence[str] = "*") -> QueryBuilder:
        self._parts.append(f"SELECT {_columns(columns)}")
        return self

    def distinct(self) -> QueryBuilder:
        if self._parts and self._parts[0].startswith("SELECT "):
            self._parts[0] = self._parts[0].replace("SELECT", "SELECT DISTINCT", 1)
        return self

    def from_(self, table: str) -> QueryBuilder:
        self._parts.append(f"FROM {self.prefix}{table}")
        return self

    def join(self, join_type: str, table: str, on_condition: str) -> QueryBuilder:
        """Add a ``<type> JOIN`` clause (INNER, LEFT, RIGHT, FULL)."""
        self._parts.append(f"{join_type.upper()} JOIN {self.prefix}{table} ON {on_condition}")
        return self

    def where(self, condition: str, values: Any | Sequence[Any] = ()) -> QueryBuilder:
        self._parts.append(f"WHERE {condition}")
        self._push(values)
        return self

    def and_where(self, condition: str, value: Any) -> QueryBuilder:
        self._parts.append(f"AND {condition}")
        self._values.append(value)
        return self

    def or_where(self, condition: str, value: Any) -> QueryBuilder:
        self._parts.append(f"OR {condition}")
        self._values.append(value)
        return self

    def in_(self, column: str, values: Sequence[Any]) -> QueryBuilder:
        if isinstance(values, str) or not values:
            msg = "IN requires a non-empty sequence of values"
            raise ValueError(msg)
        placeholders = ", ".join("?" for _ in values)
        self._parts.append(f"{column} IN ({placeholders})")
        self._values.extend(values)
        return self

    def between(self, column: str, values: Sequence[Any]) -> QueryBuilder:
        if len(values) != 2:
            msg = "BETWEEN requires exactly two values"
            raise ValueError(msg)
        self._parts.append(f"{column} BETWEEN ? AND ?")
        self._values.extend(values)
        return self

    def group_by(self, columns: str | Sequence[str]) -> QueryBuilder:
        self._parts.append(f"GROUP BY {_columns(columns)}")
        return self

    def having(self, condition: str, value: Any) -> QueryBuilder:
        self._parts.append(f"HAVING {condition}")
        self._values.append(value)
        return self

    def order_by(self, columns: str | Sequence[str], direction: str = "ASC") -> QueryBuilder:
        self._parts.append(f"ORDER BY {_columns(columns)} {direction.upper()}")
        return self

    def limit(self, limit: int) -> QueryBuilder:
        self._parts.append("LIMIT ?")
        self._values.append(int(limit))
        return self

    def offset(self, offset: int) -> QueryBuilder:
        self._parts.append("OFFSET ?")
        self._values.append(int(offset))
        return self

    def insert_into(self, table: str, columns: Sequence[str], values: Sequence[Any]) -> QueryBuilder:
        if not values:
            msg = "INSERT requires a non-empty sequence of values"
            raise ValueError(msg)
        if len(columns) != len(values):
            msg = "Columns and values must have the same length"
            raise ValueError(msg)
        placeholders = ", ".join("?" for _ in values)
        self._parts.append(f"INSERT INTO {self.prefix}{table} ({_columns(columns)}) VALUES ({placeholders})")
        self._values = list(values)
        return self

    def update(self, table: str) -> QueryBuilder:
        self._parts.append(f"UPDATE {self.prefix}{table}")
        return self

    def set(self, columns: Sequence[str], values: Sequence[Any]) -> QueryBuilder:
        if len(columns) != len(values):
            msg = "Columns and values must have the same length"
            raise ValueError(msg)
        self._parts.append("SET " + ", ".join(f"{column} = ?" for column in columns))
        self._values.extend(values)
        return self

    def delete_from(self, table: str) -> QueryBuilder:
        self._parts.append(f"DELETE FROM {self.prefix}{table}")
        return self

    def build(self) -> SQLQuery:
        """Freeze the statement built so far."""
        return SQLQuery(query=" ".join(self._parts), values=tuple(self._values))

    def clear(self) -> QueryBuilder:
        self._parts = []
        self._values = []
        return self

    @property
    def query(self) -> str:
        return " ".join(self._parts)

    @property
    def values(self) -> list[Any]:
        return list(self._values)

    def _push(self, values: Any | Sequence[Any]) -> None:
        if isinstance(values, (list, tuple)):
            self._values.extend(values)
        else:
            self._values.append(values)
