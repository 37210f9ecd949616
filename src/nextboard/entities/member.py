"""Member, device and session entities."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from nextboard.constants import GUEST_MEMBER_ID


@dataclass(frozen=True)
class Lockout:
    """Failed sign-in tracking stored as JSON on the member row.

    ``expires`` is an epoch second, set only when lockouts are allowed to
    expire.
    """

    locked: bool = False
    attempts: int = 0
    expires: int | None = None

    @classmethod
    def from_json(cls, raw: str | None) -> Lockout | None:
        if not raw:
            return None
        data: dict[str, Any] = json.loads(raw)
        expires = data.get("expires")
        return cls(
            locked=bool(data.get("locked", False)),
            attempts=int(data.get("attempts") or 0),
            expires=int(expires) if expires is not None else None,
        )

    def to_json(self) -> str:
        return json.dumps({"locked": self.locked, "attempts": self.attempts, "expires": self.expires})


@dataclass(frozen=True)
class Member:
    id: int
    username: str
    display_name: str | None = None
    email_address: str | None = None
    password_hash: str | None = None
    lockout: Lockout | None = None
    total_posts: int = 0
    joined: datetime | None = None
    last_online: datetime | None = None
    display_on_wo: bool = False

    @property
    def is_guest(self) -> bool:
        return self.id == GUEST_MEMBER_ID

    @property
    def signed_in(self) -> bool:
        return not self.is_guest


@dataclass(frozen=True)
class MemberDevice:
    """A browser a member signed in from. ``token`` is None once revoked."""

    id: str
    member_id: int
    token: str | None
    user_agent: str | None = None
    last_used_at: datetime | None = None

    @property
    def revoked(self) -> bool:
        return self.token is None


@dataclass(frozen=True)
class Session:
    id: str
    member_id: int = GUEST_MEMBER_ID
    expires: datetime | None = None
    last_click: datetime | None = None
    location: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    display_on_wo: bool = False
    is_admin: bool = False
