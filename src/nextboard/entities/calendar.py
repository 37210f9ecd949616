"""Calendar entity."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Calendar:
    id: int
    title: str
    description: str | None = None
    type: str | None = None
    created_by: int | None = None
    created_at: datetime | None = None
    assigned_to: Any = None
    permissions: Any = None
    shared_with: Any = None
