"""Repository lookups over the memory cache."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from nextboard.constants import GUEST_MEMBER_ID
from nextboard.entities import Lockout
from nextboard.repositories.calendar import get_calendar_by_id
from nextboard.repositories.member import (
    build_member_from_data,
    get_member_by_email,
    get_member_by_id,
    get_member_by_identity,
)
from nextboard.repositories.member_device import get_member_device_by_id, get_member_device_by_token
from nextboard.repositories.menu_tracker import get_menu_tracker_by_member_id
from nextboard.repositories.session import get_session_by_id, get_session_by_member_id


class TestMembers:
    @pytest.mark.asyncio
    async def test_by_id(self, context, seed_member):
        member_id = await seed_member(lockout=Lockout(locked=False, attempts=2))
        member = get_member_by_id(context.cache, member_id)
        assert member.id == member_id
        assert member.username == "sam"
        assert member.display_name == "Sam"
        assert member.lockout == Lockout(locked=False, attempts=2, expires=None)
        assert member.joined == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert member.display_on_wo is True
        assert member.signed_in

    @pytest.mark.asyncio
    async def test_unknown_id_is_guest(self, context):
        member = get_member_by_id(context.cache, 999)
        assert member.id == GUEST_MEMBER_ID
        assert member.is_guest

    def test_missing_data_is_guest(self):
        assert build_member_from_data(None).is_guest
        assert build_member_from_data({}).is_guest

    @pytest.mark.asyncio
    async def test_identity_matches_username_or_email(self, context, member_id):
        assert get_member_by_identity(context.cache, "sam").id == member_id
        assert get_member_by_identity(context.cache, "sam@example.com").id == member_id
        assert get_member_by_identity(context.cache, "nobody") is None
        assert get_member_by_identity(context.cache, "") is None

    @pytest.mark.asyncio
    async def test_by_email(self, context, member_id):
        assert get_member_by_email(context.cache, "sam@example.com").id == member_id
        assert get_member_by_email(context.cache, "SAM@example.com") is None

    @pytest.mark.asyncio
    async def test_reads_see_refreshed_rows_only(self, context, member_id):
        db = context.db
        await db.execute(db.builder().update("members").set(["username"], ["samuel"]).where("id = ?", member_id).build())
        assert get_member_by_id(context.cache, member_id).username == "sam"
        await context.cache.update("members")
        assert get_member_by_id(context.cache, member_id).username == "samuel"


class TestDevices:
    @pytest.mark.asyncio
    async def test_by_id_and_token(self, context, member_id, insert_row):
        await insert_row(
            "member_devices",
            {"id": "dev1", "member_id": member_id, "token": "tok", "user_agent": "UA", "last_used_at": 60},
        )
        device = get_member_device_by_id(context.cache, "dev1")
        assert device.member_id == member_id
        assert device.last_used_at == datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)
        assert not device.revoked
        assert get_member_device_by_token(context.cache, "tok") == device

    @pytest.mark.asyncio
    async def test_revoked_device_never_matches(self, context, member_id, insert_row):
        await insert_row("member_devices", {"id": "dev2", "member_id": member_id, "token": None})
        assert get_member_device_by_id(context.cache, "dev2").revoked
        assert get_member_device_by_token(context.cache, None) is None
        assert get_member_device_by_token(context.cache, "") is None

    @pytest.mark.asyncio
    async def test_unknown_device(self, context):
        assert get_member_device_by_id(context.cache, "missing") is None


class TestSessions:
    @pytest.mark.asyncio
    async def test_lookups(self, context, member_id, insert_row):
        await insert_row(
            "sessions",
            {"id": "s1", "member_id": member_id, "expires": 120, "ip_address": "10.0.0.1", "is_admin": 1},
        )
        session = get_session_by_id(context.cache, "s1")
        assert session.member_id == member_id
        assert session.is_admin is True
        assert session.display_on_wo is False
        assert session.expires == datetime(1970, 1, 1, 0, 2, tzinfo=timezone.utc)
        assert get_session_by_member_id(context.cache, member_id) == session
        assert get_session_by_id(context.cache, "s2") is None


class TestCalendars:
    @pytest.mark.asyncio
    async def test_json_columns_decoded(self, context, insert_row):
        calendar_id = await insert_row(
            "calendars",
            {
                "title": "Events",
                "type": "public",
                "created_by": 1,
                "created_at": 0,
                "assigned_to": [1, 2],
                "permissions": {"view": ["members"]},
            },
        )
        calendar = get_calendar_by_id(context.cache, calendar_id)
        assert calendar.title == "Events"
        assert calendar.assigned_to == [1, 2]
        assert calendar.permissions == {"view": ["members"]}
        assert calendar.shared_with is None
        assert calendar.created_at == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_unknown_calendar(self, context):
        assert get_calendar_by_id(context.cache, 42) is None


class TestMenuTracker:
    @pytest.mark.asyncio
    async def test_by_member_id(self, context, member_id, insert_row):
        data = {"categories": [{"id": "general", "expanded": True, "items": []}]}
        await insert_row("menu_tracker", {"member_id": member_id, "data": data, "last_updated": 0})
        tracker = get_menu_tracker_by_member_id(context.cache, member_id)
        assert tracker.member_id == member_id
        assert tracker.data == data
        assert get_menu_tracker_by_member_id(context.cache, member_id + 1) is None
