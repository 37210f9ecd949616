"""
Account lockout after repeated failed sign-ins.

The lockout record lives as JSON on the member row. Each transition is a
read-modify-write (cache read, database write, cache refresh) held under the
member's key in ``AppContext.locks`` so concurrent attempts cannot lose an
increment.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from nextboard.entities import Lockout, Member
from nextboard.repositories.member import load_member_data_by_id
from nextboard.repositories.setting import BoardSettings
from nextboard.timeutil import now_epoch

if TYPE_CHECKING:
    from nextboard.context import AppContext

logger = structlog.get_logger()


@dataclass(frozen=True)
class LockoutStatus:
    """What the caller needs after one lockout transition."""

    locked: bool
    enabled: bool
    attempts: int
    expires: int | None


_DISABLED = LockoutStatus(locked=False, enabled=False, attempts=0, expires=None)


def _expired(lockout: Lockout, allow_expire: bool, now: int) -> bool:
    return allow_expire and lockout.expires is not None and lockout.expires <= now


async def save_lockout(ctx: AppContext, member_id: int, lockout: Lockout) -> None:
    """Persist the lockout JSON and refresh the members mirror."""
    query = ctx.db.builder().update("members").set(["lockout"], [lockout.to_json()]).where("id = ?", member_id).build()
    await ctx.db.execute(query)
    await ctx.cache.update("members")


async def handle_account_lockout(
    ctx: AppContext,
    member: Member,
    authenticated: bool,
    now: int | None = None,
) -> LockoutStatus:
    """
    Apply one sign-in outcome to the member's lockout record.

    A failure adds one attempt and locks once ``attempts`` reaches the
    configured maximum, with an expiry when lockouts may expire. A success
    clears an expired lock, or resets the counter of an unlocked member.
    A member missing from the cache is reported as not locked.
    """
    board = BoardSettings(ctx.cache, ctx.settings)
    if not board.account_lockout_enabled:
        return _DISABLED

    max_attempts = board.account_lockout_max_failed_attempts
    allow_expire = board.account_lockout_allow_expire
    expiration_minutes = board.account_lockout_expiration_minutes
    now = now if now is not None else now_epoch()

    async with ctx.locks.hold(f"lockout:{member.id}"):
        data = load_member_data_by_id(ctx.cache, member.id)
        if data is None:
            logger.warning("lockout_member_not_cached", member_id=member.id)
            return LockoutStatus(locked=False, enabled=True, attempts=0, expires=None)

        current = Lockout.from_json(data.get("lockout")) or Lockout()

        if authenticated:
            if current.locked and not _expired(current, allow_expire, now):
                return LockoutStatus(locked=True, enabled=True, attempts=current.attempts, expires=current.expires)
            if current.locked or current.attempts != 0:
                await save_lockout(ctx, member.id, Lockout())
                logger.info("lockout_reset", member_id=member.id, was_locked=current.locked)
            return LockoutStatus(locked=False, enabled=True, attempts=0, expires=None)

        # An expired lock starts a fresh run of attempts.
        if current.locked and _expired(current, allow_expire, now):
            current = Lockout()

        attempts = current.attempts + 1
        locked = attempts >= max_attempts
        if not locked or not allow_expire:
            expires = None
        elif current.locked:
            expires = current.expires
        else:
            expires = now + expiration_minutes * 60

        updated = Lockout(locked=locked, attempts=attempts, expires=expires)
        await save_lockout(ctx, member.id, updated)
        if locked and not current.locked:
            logger.warning("account_locked", member_id=member.id, attempts=attempts, expires=expires)
        return LockoutStatus(locked=locked, enabled=True, attempts=attempts, expires=expires)
