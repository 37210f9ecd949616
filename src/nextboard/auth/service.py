"""
Authentication business logic.

Credential validation with account lockout, sign-in completion (device,
token, cookies, session row) and sign-out teardown. Expected outcomes such
as bad credentials or a locked account come back as ``AuthResult`` values;
exceptions are reserved for infrastructure failures.
"""

from __future__ import annotations

import hashlib
import math
import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import structlog
from starlette.requests import Request
from starlette.responses import RedirectResponse

from nextboard.auth.cookies import CookieJar
from nextboard.auth.lockout import handle_account_lockout
from nextboard.auth.password import check_needs_rehash, hash_password, verify_password
from nextboard.auth.session_state import destroy_session, session_id
from nextboard.constants import (
    AUTH_TOKEN_COOKIE,
    DEVICE_ID_COOKIE,
    DEVICE_ID_COOKIE_MAX_AGE,
    SESSION_AUTH_TOKEN,
    SESSION_SIGNIN_ERROR,
)
from nextboard.entities import Member
from nextboard.repositories.member import get_member_by_identity, guest_member
from nextboard.repositories.member_device import get_member_device_by_id, get_member_device_by_token
from nextboard.repositories.session import get_session_by_id
from nextboard.repositories.setting import BoardSettings
from nextboard.timeutil import now_epoch

if TYPE_CHECKING:
    from nextboard.context import AppContext

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------------


class AuthFailureReason(str, Enum):
    SIGN_IN_FAILED = "signInFailed"
    LOCKED_OUT = "lockedOut"


@dataclass(frozen=True)
class AuthResultData:
    reason: AuthFailureReason | None
    message: str | None
    attempts: int
    expires: int | None
    member: Member


@dataclass(frozen=True)
class AuthResult:
    success: bool
    data: AuthResultData


INVALID_CREDENTIALS = "The sign in credentials you entered are invalid."
LOCKED_PERMANENTLY = "Your account has been locked due to too many failed sign in attempts."


def _locked_message(expires: int | None, now: int) -> str:
    if expires is None:
        return LOCKED_PERMANENTLY
    minutes = max(1, math.ceil((expires - now) / 60))
    return f"Your account is locked. Try again in {minutes} minute(s)."


def _failure(
    reason: AuthFailureReason,
    message: str,
    member: Member,
    attempts: int = 0,
    expires: int | None = None,
) -> AuthResult:
    return AuthResult(
        success=False,
        data=AuthResultData(reason=reason, message=message, attempts=attempts, expires=expires, member=member),
    )


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


def generate_auth_token(member: Member) -> str:
    """32 hex characters derived from the member, the clock and fresh randomness."""
    seed = f"{member.id}{member.email_address}{time.time_ns()}{secrets.token_hex(16)}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def generate_device_hash(user_agent: str) -> str:
    """32 hex characters identifying a newly seen device."""
    seed = f"{user_agent}{time.time_ns()}{secrets.token_hex(16)}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


# ---------------------------------------------------------------------------
# Credential validation
# ---------------------------------------------------------------------------


async def validate_credentials(
    ctx: AppContext,
    identity: str,
    password: str,
    now: int | None = None,
) -> AuthResult:
    """Check an identity (username or email) and password against the members mirror."""
    now = now if now is not None else now_epoch()
    member = get_member_by_identity(ctx.cache, identity)
    if member is None:
        logger.info("sign_in_failed", reason="unknown_identity")
        return _failure(AuthFailureReason.SIGN_IN_FAILED, INVALID_CREDENTIALS, guest_member())

    if not verify_password(password, member.password_hash):
        status = await handle_account_lockout(ctx, member, authenticated=False, now=now)
        logger.info("sign_in_failed", member_id=member.id, attempts=status.attempts, locked=status.locked)
        if status.locked:
            return _failure(
                AuthFailureReason.LOCKED_OUT,
                _locked_message(status.expires, now),
                member,
                status.attempts,
                status.expires,
            )
        if status.enabled:
            max_attempts = BoardSettings(ctx.cache, ctx.settings).account_lockout_max_failed_attempts
            message = f"Sign in failed. You have used {status.attempts} of {max_attempts} sign in attempts."
            return _failure(AuthFailureReason.SIGN_IN_FAILED, message, member, status.attempts, status.expires)
        return _failure(AuthFailureReason.SIGN_IN_FAILED, INVALID_CREDENTIALS, member)

    status = await handle_account_lockout(ctx, member, authenticated=True, now=now)
    if status.locked:
        logger.info("sign_in_refused_locked", member_id=member.id)
        return _failure(
            AuthFailureReason.LOCKED_OUT,
            _locked_message(status.expires, now),
            member,
            0,
            status.expires,
        )

    if member.password_hash and check_needs_rehash(member.password_hash):
        query = (
            ctx.db.builder()
            .update("members")
            .set(["password_hash"], [hash_password(password)])
            .where("id = ?", member.id)
            .build()
        )
        await ctx.db.execute(query)
        await ctx.cache.update("members")
        logger.info("password_rehashed", member_id=member.id)

    return AuthResult(
        success=True,
        data=AuthResultData(reason=None, message=None, attempts=0, expires=None, member=member),
    )


# ---------------------------------------------------------------------------
# Sign in / sign out
# ---------------------------------------------------------------------------


async def complete_sign_in(
    ctx: AppContext,
    request: Request,
    member: Member,
    *,
    remember_me: bool = False,
    url: str | None = None,
) -> RedirectResponse:
    """
    Attach a validated member to this browser and redirect to ``url``.

    Reuses the device named by the device cookie (or registers a new one),
    rotates its bearer token, sets the auth cookie and binds the current
    session row to the member. The attempt counter is not touched here:
    ``validate_credentials`` already reset it under the lockout lock. The
    writes run in one transaction; the touched tables are refreshed after
    it commits.
    """
    board = BoardSettings(ctx.cache, ctx.settings)
    response = RedirectResponse(url or ctx.settings.base_url, status_code=303)
    jar = CookieJar(request, response, ctx.settings)
    now = now_epoch()
    token = generate_auth_token(member)
    user_agent = request.headers.get("user-agent", "")
    sid = session_id(request)

    device_id = jar.get(DEVICE_ID_COOKIE)
    device = get_member_device_by_id(ctx.cache, device_id) if device_id else None
    session = get_session_by_id(ctx.cache, sid)

    async with ctx.db.transaction():
        if device is not None:
            query = (
                ctx.db.builder()
                .update("member_devices")
                .set(["member_id", "token", "user_agent", "last_used_at"], [member.id, token, user_agent, now])
                .where("id = ?", device.id)
                .build()
            )
            await ctx.db.execute(query)
        else:
            device_hash = generate_device_hash(user_agent)
            query = (
                ctx.db.builder()
                .insert_into(
                    "member_devices",
                    ["id", "member_id", "token", "user_agent", "last_used_at"],
                    [device_hash, member.id, token, user_agent, now],
                )
                .build()
            )
            await ctx.db.execute(query)
            jar.set(DEVICE_ID_COOKIE, device_hash, max_age=DEVICE_ID_COOKIE_MAX_AGE)

        display_on_wo = int(member.display_on_wo)
        if session is not None:
            query = (
                ctx.db.builder()
                .update("sessions")
                .set(["member_id", "display_on_wo"], [member.id, display_on_wo])
                .where("id = ?", sid)
                .build()
            )
        else:
            query = (
                ctx.db.builder()
                .insert_into(
                    "sessions",
                    ["id", "member_id", "expires", "last_click", "location", "ip_address", "user_agent", "display_on_wo", "is_admin"],
                    [sid, member.id, now + board.session_duration_minutes * 60, now, request.url.path,
                     client_ip(request), user_agent, display_on_wo, 0],
                )
                .build()
            )
        await ctx.db.execute(query)

    await ctx.cache.update_all(["member_devices", "sessions"])

    max_age = board.remember_me_days * 24 * 60 * 60 if remember_me else board.session_duration_minutes * 60
    jar.set(AUTH_TOKEN_COOKIE, token, max_age=max_age)
    request.session[SESSION_AUTH_TOKEN] = token
    request.session.pop(SESSION_SIGNIN_ERROR, None)

    logger.info("member_signed_in", member_id=member.id, new_device=device is None, remember_me=remember_me)
    return response


async def sign_out(
    ctx: AppContext,
    request: Request,
    member: Member,
    url: str | None = None,
) -> RedirectResponse:
    """
    Revoke this browser's bearer token, drop the session row and redirect back.

    Raises:
        SessionDestroyError: If the browser session cannot be destroyed.
    """
    response = RedirectResponse(url or request.headers.get("referer") or ctx.settings.base_url, status_code=303)
    jar = CookieJar(request, response, ctx.settings)
    now = now_epoch()
    sid = session_id(request)
    touched: list[str] = []

    token = jar.get(AUTH_TOKEN_COOKIE)
    device = get_member_device_by_token(ctx.cache, token)

    async with ctx.db.transaction():
        if device is not None:
            query = (
                ctx.db.builder()
                .update("member_devices")
                .set(["token", "last_used_at"], [None, now])
                .where("id = ?", device.id)
                .build()
            )
            await ctx.db.execute(query)
            touched.append("member_devices")

        if member.signed_in:
            query = ctx.db.builder().update("members").set(["last_online"], [now]).where("id = ?", member.id).build()
            await ctx.db.execute(query)

        await ctx.db.execute(ctx.db.builder().delete_from("sessions").where("id = ?", sid).build())

    await ctx.cache.update_all([*touched, "members", "sessions"])

    if token:
        jar.delete(AUTH_TOKEN_COOKIE)
    destroy_session(request)
    jar.delete(ctx.settings.session_cookie_name)

    logger.info("member_signed_out", member_id=member.id, device_revoked=device is not None)
    return response


def client_ip(request: Request) -> str | None:
    """First forwarded address, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None
