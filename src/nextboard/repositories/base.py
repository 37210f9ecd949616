"""Shared lookups and column decoders for repositories.

Repositories only read. They find raw rows in the cache and decode storage
formats (epoch seconds, JSON text) into entity attribute types.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row


def find_row(cache: CacheProvider, table: str, predicate: Callable[[Row], bool]) -> Row | None:
    """First cached row of ``table`` matching ``predicate``, else None."""
    return next((row for row in cache.get(table) if predicate(row)), None)


def same_id(left: Any, right: Any) -> bool:
    """Compare identifiers that may arrive as ints or digit strings."""
    if left is None or right is None:
        return False
    return str(left) == str(right)


def decode_json(raw: Any) -> Any:
    """Parse a JSON text column. Empty and NULL both decode to None."""
    if raw is None or raw == "":
        return None
    if isinstance(raw, (dict, list)):
        return raw
    return json.loads(raw)


def decode_int(raw: Any, default: int | None = None) -> int | None:
    if raw is None or raw == "":
        return default
    return int(raw)


def decode_flag(raw: Any) -> bool:
    """Integer 0/1 flag columns."""
    return decode_int(raw, 0) == 1
