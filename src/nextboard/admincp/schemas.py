"""Request/response schemas for the admin menu endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from nextboard.admincp.menu import convert_menu_data
from nextboard.entities import MenuTracker


class CategoryToggleRequest(BaseModel):
    """Fields are optional so a missing one is reported in the ajax envelope, not as a 422."""

    category: str | None = None
    toggle: bool | None = None


class ItemSelectRequest(BaseModel):
    category: str | None = None
    item: str | None = None


class MenuResponse(BaseModel):
    id: int
    member_id: int
    categories: list[dict[str, Any]]
    menu: dict[str, dict[str, Any]]

    @classmethod
    def from_tracker(cls, tracker: MenuTracker) -> MenuResponse:
        return cls(
            id=tracker.id,
            member_id=tracker.member_id,
            categories=tracker.data.get("categories", []),
            menu=convert_menu_data(tracker.data),
        )


class AjaxResponse(BaseModel):
    """Envelope the admin control panel scripts expect."""

    success: bool
    data: dict[str, Any] = {}
