"""Board setting entity."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Setting:
    id: int
    name: str
    type: str | None
    value: Any = None
    default_value: Any = None
