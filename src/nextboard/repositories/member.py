"""Members, as read from the cached ``members`` table."""

from __future__ import annotations

from nextboard.constants import GUEST_MEMBER_ID
from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row
from nextboard.entities import Lockout, Member
from nextboard.repositories.base import decode_flag, decode_int, find_row, same_id
from nextboard.timeutil import epoch_to_datetime

TABLE = "members"


def guest_member() -> Member:
    return Member(id=GUEST_MEMBER_ID, username="Guest", display_name="Guest")


def load_member_data_by_id(cache: CacheProvider, member_id: int) -> Row | None:
    return find_row(cache, TABLE, lambda row: same_id(row.get("id"), member_id))


def build_member_from_data(data: Row | None, member_id: int = GUEST_MEMBER_ID) -> Member:
    """Decode a member row. Missing data yields the guest member."""
    if not data:
        return guest_member()
    return Member(
        id=int(data.get("id", member_id)),
        username=data["username"],
        display_name=data.get("display_name"),
        email_address=data.get("email_address"),
        password_hash=data.get("password_hash"),
        lockout=Lockout.from_json(data.get("lockout")),
        total_posts=decode_int(data.get("total_posts"), 0) or 0,
        joined=epoch_to_datetime(data.get("joined")),
        last_online=epoch_to_datetime(data.get("last_online")),
        display_on_wo=decode_flag(data.get("display_on_wo")),
    )


def get_member_by_id(cache: CacheProvider, member_id: int) -> Member:
    return build_member_from_data(load_member_data_by_id(cache, member_id), member_id)


def get_member_by_identity(cache: CacheProvider, identity: str) -> Member | None:
    """Match a sign-in identity against username or email address."""
    if not identity:
        return None
    data = find_row(
        cache,
        TABLE,
        lambda row: row.get("username") == identity or row.get("email_address") == identity,
    )
    return build_member_from_data(data) if data else None


def get_member_by_email(cache: CacheProvider, email_address: str) -> Member | None:
    data = find_row(cache, TABLE, lambda row: row.get("email_address") == email_address)
    return build_member_from_data(data) if data else None
