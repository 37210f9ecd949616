"""Session rows, as read from the cached ``sessions`` table."""

from __future__ import annotations

from nextboard.constants import GUEST_MEMBER_ID
from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row
from nextboard.entities import Session
from nextboard.repositories.base import decode_flag, decode_int, find_row, same_id
from nextboard.timeutil import epoch_to_datetime

TABLE = "sessions"


def load_session_data_by_id(cache: CacheProvider, session_id: str) -> Row | None:
    return find_row(cache, TABLE, lambda row: same_id(row.get("id"), session_id))


def build_session_from_data(data: Row | None, session_id: str | None = None) -> Session | None:
    if data is None:
        return None
    return Session(
        id=str(data.get("id", session_id)),
        member_id=decode_int(data.get("member_id"), GUEST_MEMBER_ID) or GUEST_MEMBER_ID,
        expires=epoch_to_datetime(data.get("expires")),
        last_click=epoch_to_datetime(data.get("last_click")),
        location=data.get("location"),
        ip_address=data.get("ip_address"),
        user_agent=data.get("user_agent"),
        display_on_wo=decode_flag(data.get("display_on_wo")),
        is_admin=decode_flag(data.get("is_admin")),
    )


def get_session_by_id(cache: CacheProvider, session_id: str) -> Session | None:
    return build_session_from_data(load_session_data_by_id(cache, session_id), session_id)


def get_session_by_member_id(cache: CacheProvider, member_id: int) -> Session | None:
    data = find_row(cache, TABLE, lambda row: same_id(row.get("member_id"), member_id))
    return build_session_from_data(data)
