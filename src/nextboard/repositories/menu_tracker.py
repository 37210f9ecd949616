"""Menu trackers, as read from the cached ``menu_tracker`` table."""

from __future__ import annotations

from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row
from nextboard.entities import MenuTracker
from nextboard.repositories.base import decode_int, decode_json, find_row, same_id
from nextboard.timeutil import epoch_to_datetime

TABLE = "menu_tracker"


def load_menu_tracker_data_by_member_id(cache: CacheProvider, member_id: int) -> Row | None:
    return find_row(cache, TABLE, lambda row: same_id(row.get("member_id"), member_id))


def build_menu_tracker_from_data(data: Row | None) -> MenuTracker | None:
    if data is None:
        return None
    return MenuTracker(
        id=int(data["id"]),
        member_id=decode_int(data.get("member_id"), 0) or 0,
        data=decode_json(data.get("data")) or {"categories": []},
        last_updated=epoch_to_datetime(data.get("last_updated")),
    )


def get_menu_tracker_by_member_id(cache: CacheProvider, member_id: int) -> MenuTracker | None:
    return build_menu_tracker_from_data(load_menu_tracker_data_by_member_id(cache, member_id))
