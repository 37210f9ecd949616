"""Member devices, as read from the cached ``member_devices`` table."""

from __future__ import annotations

from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row
from nextboard.entities import MemberDevice
from nextboard.repositories.base import decode_int, find_row, same_id
from nextboard.timeutil import epoch_to_datetime

TABLE = "member_devices"


def load_member_device_data_by_id(cache: CacheProvider, device_id: str) -> Row | None:
    return find_row(cache, TABLE, lambda row: same_id(row.get("id"), device_id))


def build_member_device_from_data(data: Row | None, device_id: str | None = None) -> MemberDevice | None:
    if data is None:
        return None
    return MemberDevice(
        id=str(data.get("id", device_id)),
        member_id=decode_int(data.get("member_id"), 0) or 0,
        token=data.get("token"),
        user_agent=data.get("user_agent"),
        last_used_at=epoch_to_datetime(data.get("last_used_at")),
    )


def get_member_device_by_id(cache: CacheProvider, device_id: str) -> MemberDevice | None:
    return build_member_device_from_data(load_member_device_data_by_id(cache, device_id), device_id)


def get_member_device_by_token(cache: CacheProvider, token: str | None) -> MemberDevice | None:
    """The device currently holding ``token``. Revoked devices never match."""
    if not token:
        return None
    return build_member_device_from_data(find_row(cache, TABLE, lambda row: row.get("token") == token))
