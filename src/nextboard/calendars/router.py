"""Calendar lookup endpoint."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from nextboard.data.cache import CacheProvider
from nextboard.dependencies import get_cache
from nextboard.errors import NotFoundError
from nextboard.repositories.calendar import get_calendar_by_id

router = APIRouter(prefix="/calendars", tags=["Calendars"])


class CalendarResponse(BaseModel):
    id: int
    title: str
    description: str | None
    type: str | None
    created_by: int | None
    created_at: datetime | None
    assigned_to: Any
    permissions: Any
    shared_with: Any


@router.get("/{calendar_id}", response_model=CalendarResponse)
async def calendar(
    calendar_id: int,
    cache: CacheProvider = Depends(get_cache),  # noqa: B008
) -> CalendarResponse:
    found = get_calendar_by_id(cache, calendar_id)
    if found is None:
        msg = "The calendar you requested does not exist."
        raise NotFoundError(msg, data={"calendar_id": calendar_id})
    return CalendarResponse.model_validate(found, from_attributes=True)
