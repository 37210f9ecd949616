"""
Admin navigation menu state per member.

The tracker row is created lazily with the default layout on first access.
Every change is a read-modify-write of the JSON blob, held under the
member's key in ``AppContext.locks``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

from nextboard.constants import MENU_LEGEND
from nextboard.entities import Member, MenuData, MenuTracker, default_menu_data
from nextboard.errors import NotFoundError
from nextboard.repositories.menu_tracker import get_menu_tracker_by_member_id
from nextboard.timeutil import epoch_to_datetime, now_epoch

if TYPE_CHECKING:
    from nextboard.context import AppContext

logger = structlog.get_logger()

TABLE = "menu_tracker"

ADMIN_ROOT = "admincp"

# Checked in order; the first fragment contained in the lower-cased path wins,
# so subpages such as ``.../manageforums/edit/3`` select their section.
SELECTED_ITEM_PATHS: tuple[tuple[str, tuple[str, str]], ...] = (
    ("admincp/dashboard", ("general", "dashboard")),
    ("admincp/forummanagement/manageforums", ("forum-management", "manage-forums")),
    ("admincp/forummanagement/managefeatures", ("forum-management", "manage-features")),
)


def selected_item_for_path(path: str) -> tuple[str, str] | None:
    """The (category, item) an admin page path selects, or None."""
    normalized = path.strip("/").lower()
    if normalized == ADMIN_ROOT:
        return ("general", "dashboard")
    return next((target for fragment, target in SELECTED_ITEM_PATHS if fragment in normalized), None)


def convert_menu_data(data: MenuData) -> dict[str, dict[str, Any]]:
    """List form -> ``{category: {"id", "expanded", "items": {item: {"id", "selected"}}}}``."""
    return {
        category["id"]: {
            "id": category["id"],
            "expanded": bool(category.get("expanded", False)),
            "items": {
                item["id"]: {"id": item["id"], "selected": bool(item.get("selected", False))}
                for item in category.get("items", [])
            },
        }
        for category in data.get("categories", [])
    }


def _find_category(data: MenuData, category_id: str) -> dict[str, Any]:
    for category in data.get("categories", []):
        if category.get("id") == category_id:
            return category
    msg = f"Menu category '{category_id}' does not exist."
    raise NotFoundError(msg, data={"category": category_id})


def _find_item(category: dict[str, Any], item_id: str) -> dict[str, Any]:
    for item in category.get("items", []):
        if item.get("id") == item_id:
            return item
    msg = f"Menu item '{item_id}' does not exist."
    raise NotFoundError(msg, data={"category": category["id"], "item": item_id})


class MenuService:
    def __init__(self, ctx: AppContext, member: Member) -> None:
        self._ctx = ctx
        self._member = member

    @property
    def _lock_key(self) -> str:
        return f"menu:{self._member.id}"

    async def get_menu_settings(self) -> MenuTracker:
        """The member's tracker, created with the default layout when missing."""
        async with self._ctx.locks.hold(self._lock_key):
            return await self._load_or_create()

    async def create_default_menu_data(self) -> MenuTracker:
        """Insert the default tracker row for this member and refresh the mirror."""
        data = default_menu_data()
        now = now_epoch()
        query = (
            self._ctx.db.builder()
            .insert_into(TABLE, ["member_id", "data", "last_updated"], [self._member.id, json.dumps(data), now])
            .build()
        )
        result = await self._ctx.db.execute(query)
        await self._ctx.cache.update(TABLE)
        logger.info("menu_tracker_created", member_id=self._member.id, tracker_id=result.insert_id)
        tracker = get_menu_tracker_by_member_id(self._ctx.cache, self._member.id)
        if tracker is not None:
            return tracker
        # Providers that keep no rows still hand back a usable tracker.
        return MenuTracker(
            id=int(result.insert_id or 0),
            member_id=self._member.id,
            data=data,
            last_updated=epoch_to_datetime(now),
        )

    async def update_menu_category_toggle(self, category: str, toggle: bool) -> MenuTracker:
        """Set one category's ``expanded`` flag; other categories are untouched."""
        async with self._ctx.locks.hold(self._lock_key):
            tracker = await self._load_or_create()
            data = tracker.copy_data()
            _find_category(data, category)["expanded"] = bool(toggle)
            return await self._save(tracker, data)

    async def update_menu_selected_item(self, category: str, item: str, selected: bool) -> MenuTracker:
        async with self._ctx.locks.hold(self._lock_key):
            tracker = await self._load_or_create()
            data = tracker.copy_data()
            _find_item(_find_category(data, category), item)["selected"] = bool(selected)
            return await self._save(tracker, data)

    async def unselect_menu_items_except(self, category: str, item: str) -> MenuTracker:
        """Select ``item`` and clear every other item of the legend, in one write."""
        known = {(cat, it) for cat, items in MENU_LEGEND for it in items}
        if (category, item) not in known:
            msg = f"Menu item '{category}/{item}' does not exist."
            raise NotFoundError(msg, data={"category": category, "item": item})
        async with self._ctx.locks.hold(self._lock_key):
            tracker = await self._load_or_create()
            data = tracker.copy_data()
            for legend_category, legend_items in MENU_LEGEND:
                entry = _find_category(data, legend_category)
                for legend_item in legend_items:
                    _find_item(entry, legend_item)["selected"] = (legend_category, legend_item) == (category, item)
            return await self._save(tracker, data)

    async def manage_selected_menu_items(self, path: str) -> MenuTracker:
        """Select the menu entry matching an admin page path. Unknown paths change nothing."""
        target = selected_item_for_path(path)
        if target is None:
            return await self.get_menu_settings()
        return await self.unselect_menu_items_except(*target)

    async def _load_or_create(self) -> MenuTracker:
        tracker = get_menu_tracker_by_member_id(self._ctx.cache, self._member.id)
        if tracker is not None:
            return tracker
        return await self.create_default_menu_data()

    async def _save(self, tracker: MenuTracker, data: MenuData) -> MenuTracker:
        now = now_epoch()
        query = (
            self._ctx.db.builder()
            .update(TABLE)
            .set(["data", "last_updated"], [json.dumps(data), now])
            .where("id = ?", tracker.id)
            .build()
        )
        await self._ctx.db.execute(query)
        await self._ctx.cache.update(TABLE)
        return MenuTracker(id=tracker.id, member_id=self._member.id, data=data, last_updated=epoch_to_datetime(now))
