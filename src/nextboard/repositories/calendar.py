"""Calendars, as read from the cached ``calendars`` table."""

from __future__ import annotations

from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row
from nextboard.entities import Calendar
from nextboard.repositories.base import decode_int, decode_json, find_row, same_id
from nextboard.timeutil import epoch_to_datetime

TABLE = "calendars"


def load_calendar_data_by_id(cache: CacheProvider, calendar_id: int) -> Row | None:
    return find_row(cache, TABLE, lambda row: same_id(row.get("id"), calendar_id))


def build_calendar_from_data(data: Row | None, calendar_id: int | None = None) -> Calendar | None:
    """Decode a calendar row.

    ``assigned_to``, ``permissions`` and ``shared_with`` are JSON text; NULL
    stays None instead of being parsed.
    """
    if data is None:
        return None
    return Calendar(
        id=int(data.get("id") or calendar_id or 0),
        title=data.get("title") or "",
        description=data.get("description"),
        type=data.get("type"),
        created_by=decode_int(data.get("created_by")),
        created_at=epoch_to_datetime(data.get("created_at")),
        assigned_to=decode_json(data.get("assigned_to")),
        permissions=decode_json(data.get("permissions")),
        shared_with=decode_json(data.get("shared_with")),
    )


def get_calendar_by_id(cache: CacheProvider, calendar_id: int) -> Calendar | None:
    return build_calendar_from_data(load_calendar_data_by_id(cache, calendar_id), calendar_id)
