"""
Per-request session tracking.

Resolves who is browsing from the auth-token cookie and keeps the
``sessions`` table (who is online, where, since when) current.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from nextboard.auth.service import client_ip
from nextboard.auth.session_state import destroy_session, session_id
from nextboard.constants import AUTH_TOKEN_COOKIE, SESSION_AUTH_TOKEN
from nextboard.entities import Member
from nextboard.repositories.member import get_member_by_id, guest_member
from nextboard.repositories.member_device import get_member_device_by_token
from nextboard.repositories.session import get_session_by_id
from nextboard.repositories.setting import BoardSettings
from nextboard.timeutil import now_epoch

if TYPE_CHECKING:
    from nextboard.context import AppContext

logger = structlog.get_logger()


@dataclass(frozen=True)
class TrackResult:
    member: Member
    session_id: str
    clear_auth_cookie: bool = False


class SessionTracker:
    def __init__(self, ctx: AppContext) -> None:
        self._ctx = ctx

    async def collect_garbage(self, now: int) -> int:
        """Delete session rows whose expiry has passed. Returns how many were cached as expired."""
        expired = [
            session
            for session in self._ctx.cache.get("sessions")
            if session.get("expires") is not None and int(session["expires"]) <= now
        ]
        if not expired:
            return 0
        await self._ctx.db.execute(self._ctx.db.builder().delete_from("sessions").where("expires <= ?", now).build())
        await self._ctx.cache.update("sessions")
        logger.debug("sessions_collected", count=len(expired))
        return len(expired)

    async def track(self, request: Request, now: int | None = None) -> TrackResult:
        """
        Identify the member behind this request and record the visit.

        A token cookie with no live device falls back to guest and asks the
        caller to clear the cookie. With IP matching on, a member session
        seen from a different address or user agent is destroyed.
        """
        ctx = self._ctx
        board = BoardSettings(ctx.cache, ctx.settings)
        now = now if now is not None else now_epoch()
        await self.collect_garbage(now)

        ip_address = client_ip(request)
        user_agent = request.headers.get("user-agent", "")
        sid = session_id(request)
        member = guest_member()
        clear_cookie = False

        token = request.cookies.get(AUTH_TOKEN_COOKIE)
        if token:
            device = get_member_device_by_token(ctx.cache, token)
            candidate = get_member_by_id(ctx.cache, device.member_id) if device else None
            if candidate is None or candidate.is_guest:
                logger.info("auth_token_unmatched")
                request.session.pop(SESSION_AUTH_TOKEN, None)
                clear_cookie = True
            else:
                existing = get_session_by_id(ctx.cache, sid)
                mismatch = (
                    existing is not None
                    and existing.member_id == candidate.id
                    and (existing.ip_address != ip_address or existing.user_agent != user_agent)
                )
                if board.ip_match and mismatch:
                    logger.warning("session_ip_mismatch", member_id=candidate.id)
                    await ctx.db.execute(ctx.db.builder().delete_from("sessions").where("id = ?", sid).build())
                    await ctx.cache.update("sessions")
                    destroy_session(request)
                    sid = session_id(request)
                    clear_cookie = True
                else:
                    member = candidate

        async with ctx.locks.hold(f"session:{sid}"):
            await self._save(request, sid, member, now, board.session_duration_minutes, ip_address, user_agent)
        return TrackResult(member=member, session_id=sid, clear_auth_cookie=clear_cookie)

    async def _save(
        self,
        request: Request,
        sid: str,
        member: Member,
        now: int,
        duration_minutes: int,
        ip_address: str | None,
        user_agent: str,
    ) -> None:
        db = self._ctx.db
        columns = ["member_id", "expires", "last_click", "location", "ip_address", "user_agent", "display_on_wo", "is_admin"]
        values = [
            member.id,
            now + duration_minutes * 60,
            now,
            request.url.path,
            ip_address,
            user_agent,
            int(member.display_on_wo),
            0,
        ]
        existing = get_session_by_id(self._ctx.cache, sid)
        if existing is None:
            query = db.builder().insert_into("sessions", ["id", *columns], [sid, *values]).build()
        else:
            query = db.builder().update("sessions").set(columns, values).where("id = ?", sid).build()
        await db.execute(query)
        await self._ctx.cache.update("sessions")
        if existing is None:
            logger.debug("session_created", member_id=member.id)


def _sets_cookie(response: Response, name: str) -> bool:
    return any(value.startswith(f"{name}=") for value in response.headers.getlist("set-cookie"))


class SessionTrackingMiddleware(BaseHTTPMiddleware):
    """Runs ``SessionTracker.track`` and exposes the member as ``request.state.member``.

    Must sit inside Starlette's SessionMiddleware.
    """

    def __init__(self, app: ASGIApp, exempt_paths: tuple[str, ...] = ()) -> None:
        super().__init__(app)
        self.exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self.exempt_paths:
            return await call_next(request)
        ctx: AppContext = request.app.state.context
        result = await SessionTracker(ctx).track(request)
        request.state.member = result.member
        structlog.contextvars.bind_contextvars(member_id=result.member.id)
        response = await call_next(request)
        if result.clear_auth_cookie and not _sets_cookie(response, AUTH_TOKEN_COOKIE):
            response.delete_cookie(AUTH_TOKEN_COOKIE, path=ctx.settings.cookie_path, domain=ctx.settings.cookie_domain)
        return response
