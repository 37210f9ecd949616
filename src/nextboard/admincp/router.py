"""Admin control panel menu endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from nextboard.admincp.menu import MenuService
from nextboard.admincp.schemas import AjaxResponse, CategoryToggleRequest, ItemSelectRequest, MenuResponse
from nextboard.auth.dependencies import require_member
from nextboard.context import AppContext
from nextboard.dependencies import get_context
from nextboard.entities import Member

router = APIRouter(prefix="/admincp", tags=["Admin CP"])


def get_menu_service(
    ctx: AppContext = Depends(get_context),  # noqa: B008
    member: Member = Depends(require_member),  # noqa: B008
) -> MenuService:
    return MenuService(ctx, member)


@router.get("/menu", response_model=MenuResponse)
async def menu(
    path: str | None = None,
    service: MenuService = Depends(get_menu_service),  # noqa: B008
) -> MenuResponse:
    """Current menu state; ``path`` first selects the entry for that admin page."""
    tracker = await service.manage_selected_menu_items(path) if path else await service.get_menu_settings()
    return MenuResponse.from_tracker(tracker)


@router.post("/menu/category/toggle", response_model=AjaxResponse)
async def toggle_category(
    body: CategoryToggleRequest,
    service: MenuService = Depends(get_menu_service),  # noqa: B008
) -> AjaxResponse:
    """Expand or collapse one menu category."""
    if body.category is None or body.toggle is None:
        return AjaxResponse(success=False, data={"message": "Missing required parameters: category, toggle."})
    await service.update_menu_category_toggle(body.category, body.toggle)
    return AjaxResponse(success=True)


@router.post("/menu/item/select", response_model=AjaxResponse)
async def select_item(
    body: ItemSelectRequest,
    service: MenuService = Depends(get_menu_service),  # noqa: B008
) -> AjaxResponse:
    """Make one item the only selected entry of the whole menu."""
    if body.category is None or body.item is None:
        return AjaxResponse(success=False, data={"message": "Missing required parameters: category, item."})
    tracker = await service.unselect_menu_items_except(body.category, body.item)
    return AjaxResponse(success=True, data={"menu": MenuResponse.from_tracker(tracker).menu})
