"""Admin menu endpoint tests."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_guest_refused(client: AsyncClient):
    response = await client.get("/admincp/menu")
    assert response.status_code == 403
    assert response.json()["permission"] == "member"


@pytest.mark.asyncio
async def test_menu_created_on_first_view(signed_in_client: AsyncClient, member_id):
    response = await signed_in_client.get("/admincp/menu")

    assert response.status_code == 200
    body = response.json()
    assert body["member_id"] == member_id
    assert body["menu"]["general"] == {
        "id": "general",
        "expanded": True,
        "items": {"dashboard": {"id": "dashboard", "selected": True}},
    }


@pytest.mark.asyncio
async def test_path_selects_item(signed_in_client: AsyncClient):
    response = await signed_in_client.get("/admincp/menu", params={"path": "/admincp/forummanagement/manageforums"})

    menu = response.json()["menu"]
    assert menu["forum-management"]["items"]["manage-forums"]["selected"] is True
    assert menu["general"]["items"]["dashboard"]["selected"] is False


@pytest.mark.asyncio
async def test_subpage_path_selects_its_section(signed_in_client: AsyncClient):
    response = await signed_in_client.get(
        "/admincp/menu", params={"path": "/admincp/forummanagement/manageforums/edit/3"}
    )

    menu = response.json()["menu"]
    assert menu["forum-management"]["items"]["manage-forums"]["selected"] is True
    assert menu["general"]["items"]["dashboard"]["selected"] is False


@pytest.mark.asyncio
async def test_toggle_category(signed_in_client: AsyncClient):
    response = await signed_in_client.post(
        "/admincp/menu/category/toggle", json={"category": "forum-management", "toggle": True}
    )
    assert response.json() == {"success": True, "data": {}}

    menu = (await signed_in_client.get("/admincp/menu")).json()["menu"]
    assert menu["forum-management"]["expanded"] is True
    assert menu["general"]["expanded"] is True


@pytest.mark.asyncio
async def test_toggle_missing_parameters(signed_in_client: AsyncClient):
    response = await signed_in_client.post("/admincp/menu/category/toggle", json={"category": "general"})
    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "data": {"message": "Missing required parameters: category, toggle."},
    }


@pytest.mark.asyncio
async def test_toggle_unknown_category(signed_in_client: AsyncClient):
    response = await signed_in_client.post("/admincp/menu/category/toggle", json={"category": "x", "toggle": True})
    assert response.status_code == 404
    assert response.json()["data"] == {"category": "x"}


@pytest.mark.asyncio
async def test_select_item(signed_in_client: AsyncClient):
    response = await signed_in_client.post(
        "/admincp/menu/item/select", json={"category": "forum-management", "item": "manage-features"}
    )
    body = response.json()
    assert body["success"] is True
    menu = body["data"]["menu"]
    assert {k: v["selected"] for k, v in menu["forum-management"]["items"].items()} == {
        "manage-forums": False,
        "manage-features": True,
    }
    assert menu["general"]["items"] == {"dashboard": {"id": "dashboard", "selected": False}}


@pytest.mark.asyncio
async def test_select_missing_parameters(signed_in_client: AsyncClient):
    response = await signed_in_client.post("/admincp/menu/item/select", json={})
    assert response.json()["success"] is False
