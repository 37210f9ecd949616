"""Admin menu tracker tests."""

from __future__ import annotations

import asyncio

import pytest

from nextboard.admincp.menu import MenuService, convert_menu_data
from nextboard.entities import default_menu_data
from nextboard.errors import NotFoundError
from nextboard.repositories.member import get_member_by_id
from nextboard.repositories.menu_tracker import get_menu_tracker_by_member_id


@pytest.fixture
def service(context, member_id) -> MenuService:
    return MenuService(context, get_member_by_id(context.cache, member_id))


def _selected(tracker) -> list[tuple[str, str]]:
    return [
        (category, item)
        for category, entry in convert_menu_data(tracker.data).items()
        for item, value in entry["items"].items()
        if value["selected"]
    ]


class TestMenuSettings:
    @pytest.mark.asyncio
    async def test_created_once_with_default_layout(self, context, service, member_id):
        first = await service.get_menu_settings()
        second = await service.get_menu_settings()

        assert first.member_id == member_id
        assert [c["id"] for c in first.data["categories"]] == ["general", "forum-management"]
        assert first.data == default_menu_data()
        assert second.id == first.id
        assert len(context.cache.get("menu_tracker")) == 1

    @pytest.mark.asyncio
    async def test_concurrent_first_access_creates_one_row(self, context, service):
        trackers = await asyncio.gather(*(service.get_menu_settings() for _ in range(5)))
        assert len({t.id for t in trackers}) == 1
        assert len(context.cache.get("menu_tracker")) == 1


class TestCategoryToggle:
    @pytest.mark.asyncio
    async def test_only_target_category_changes(self, context, service, member_id):
        tracker = await service.update_menu_category_toggle("forum-management", True)

        menu = convert_menu_data(tracker.data)
        assert menu["forum-management"]["expanded"] is True
        assert menu["general"]["expanded"] is True
        stored = get_menu_tracker_by_member_id(context.cache, member_id)
        assert stored.data == tracker.data

    @pytest.mark.asyncio
    async def test_collapse(self, service):
        tracker = await service.update_menu_category_toggle("general", False)
        assert convert_menu_data(tracker.data)["general"]["expanded"] is False

    @pytest.mark.asyncio
    async def test_unknown_category(self, service):
        with pytest.raises(NotFoundError) as excinfo:
            await service.update_menu_category_toggle("nope", True)
        assert excinfo.value.data == {"category": "nope"}


class TestSelection:
    @pytest.mark.asyncio
    async def test_single_item_update(self, service):
        tracker = await service.update_menu_selected_item("forum-management", "manage-forums", True)
        assert _selected(tracker) == [("general", "dashboard"), ("forum-management", "manage-forums")]

    @pytest.mark.asyncio
    async def test_unknown_item(self, service):
        with pytest.raises(NotFoundError):
            await service.update_menu_selected_item("general", "nope", True)

    @pytest.mark.asyncio
    async def test_unselect_except_leaves_one(self, service):
        await service.update_menu_selected_item("forum-management", "manage-forums", True)

        tracker = await service.unselect_menu_items_except("forum-management", "manage-features")

        assert _selected(tracker) == [("forum-management", "manage-features")]

    @pytest.mark.asyncio
    async def test_unselect_except_unknown_item(self, context, service, member_id):
        with pytest.raises(NotFoundError):
            await service.unselect_menu_items_except("general", "manage-forums")
        assert get_menu_tracker_by_member_id(context.cache, member_id) is None

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/admincp", ("general", "dashboard")),
            ("/AdminCP/ForumManagement/ManageForums/", ("forum-management", "manage-forums")),
            ("admincp/forummanagement/managefeatures", ("forum-management", "manage-features")),
            ("/admincp/forummanagement/manageforums/edit/3", ("forum-management", "manage-forums")),
            ("/admincp/ForumManagement/ManageFeatures/new", ("forum-management", "manage-features")),
            ("/admincp/dashboard/stats", ("general", "dashboard")),
        ],
    )
    @pytest.mark.asyncio
    async def test_manage_selected_by_path(self, service, path, expected):
        tracker = await service.manage_selected_menu_items(path)
        assert _selected(tracker) == [expected]

    @pytest.mark.asyncio
    async def test_unknown_path_changes_nothing(self, service):
        tracker = await service.manage_selected_menu_items("/admincp/unknown")
        assert tracker.data == default_menu_data()


class TestConvert:
    def test_list_to_mapping(self):
        assert convert_menu_data(default_menu_data()) == {
            "general": {
                "id": "general",
                "expanded": True,
                "items": {"dashboard": {"id": "dashboard", "selected": True}},
            },
            "forum-management": {
                "id": "forum-management",
                "expanded": False,
                "items": {
                    "manage-forums": {"id": "manage-forums", "selected": False},
                    "manage-features": {"id": "manage-features", "selected": False},
                },
            },
        }

    def test_empty(self):
        assert convert_menu_data({}) == {}
