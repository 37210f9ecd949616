"""Session tracker tests driven with bare Starlette requests."""

from __future__ import annotations

import pytest
import pytest_asyncio
from starlette.requests import Request

from nextboard.auth.tracker import SessionTracker
from nextboard.constants import AUTH_TOKEN_COOKIE, SESSION_ID
from nextboard.repositories.session import get_session_by_id

NOW = 1_700_000_000


def _request(
    session: dict | None = None,
    token: str | None = None,
    ip: str = "10.0.0.1",
    user_agent: str = "pytest",
    path: str = "/forums",
) -> Request:
    headers = [(b"user-agent", user_agent.encode())]
    if token:
        headers.append((b"cookie", f"{AUTH_TOKEN_COOKIE}={token}".encode()))
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("test", 80),
            "path": path,
            "query_string": b"",
            "headers": headers,
            "client": (ip, 5000),
            "session": session if session is not None else {},
        }
    )


@pytest_asyncio.fixture
async def device_token(context, member_id, insert_row) -> str:
    await insert_row("member_devices", {"id": "dev1", "member_id": member_id, "token": "a" * 32, "user_agent": "pytest"})
    return "a" * 32


class TestGarbageCollection:
    @pytest.mark.asyncio
    async def test_expired_rows_removed(self, context, insert_row):
        await insert_row("sessions", {"id": "old", "member_id": 0, "expires": NOW - 1})
        await insert_row("sessions", {"id": "live", "member_id": 0, "expires": NOW + 60})

        removed = await SessionTracker(context).collect_garbage(NOW)

        assert removed == 1
        assert [row["id"] for row in context.cache.get("sessions")] == ["live"]

    @pytest.mark.asyncio
    async def test_nothing_expired_writes_nothing(self, context):
        assert await SessionTracker(context).collect_garbage(NOW) == 0


class TestTrack:
    @pytest.mark.asyncio
    async def test_guest_visit_creates_row(self, context):
        request = _request(path="/topics/5")

        result = await SessionTracker(context).track(request, now=NOW)

        assert result.member.is_guest
        assert result.session_id == request.session[SESSION_ID]
        session = get_session_by_id(context.cache, result.session_id)
        assert session.location == "/topics/5"
        assert session.ip_address == "10.0.0.1"
        assert session.expires.timestamp() == NOW + context.settings.session_duration_minutes * 60

    @pytest.mark.asyncio
    async def test_repeat_visit_updates_row(self, context):
        session: dict = {}
        tracker = SessionTracker(context)
        await tracker.track(_request(session, path="/a"), now=NOW)
        result = await tracker.track(_request(session, path="/b"), now=NOW + 30)

        assert len(context.cache.get("sessions")) == 1
        assert get_session_by_id(context.cache, result.session_id).location == "/b"

    @pytest.mark.asyncio
    async def test_token_resolves_member(self, context, member_id, device_token):
        result = await SessionTracker(context).track(_request(token=device_token), now=NOW)

        assert result.member.id == member_id
        assert not result.clear_auth_cookie
        assert get_session_by_id(context.cache, result.session_id).display_on_wo is True

    @pytest.mark.asyncio
    async def test_unmatched_token_falls_back_to_guest(self, context):
        result = await SessionTracker(context).track(_request(token="b" * 32), now=NOW)
        assert result.member.is_guest
        assert result.clear_auth_cookie


class TestIpMatch:
    async def _existing_session(self, context, member_id, insert_row) -> dict:
        session = {SESSION_ID: "s1"}
        await insert_row(
            "sessions",
            {"id": "s1", "member_id": member_id, "expires": NOW + 600, "ip_address": "10.0.0.1", "user_agent": "pytest"},
        )
        return session

    @pytest.mark.asyncio
    async def test_moved_session_destroyed_when_matching(self, context, member_id, device_token, insert_row):
        await insert_row("settings", {"name": "ipMatch", "type": "bool", "value": "true"})
        session = await self._existing_session(context, member_id, insert_row)

        result = await SessionTracker(context).track(_request(session, token=device_token, ip="10.9.9.9"), now=NOW)

        assert result.member.is_guest
        assert result.clear_auth_cookie
        assert result.session_id != "s1"
        assert get_session_by_id(context.cache, "s1") is None

    @pytest.mark.asyncio
    async def test_moved_session_kept_without_matching(self, context, member_id, device_token, insert_row):
        session = await self._existing_session(context, member_id, insert_row)

        result = await SessionTracker(context).track(_request(session, token=device_token, ip="10.9.9.9"), now=NOW)

        assert result.member.id == member_id
        assert result.session_id == "s1"
        assert get_session_by_id(context.cache, "s1").ip_address == "10.9.9.9"
