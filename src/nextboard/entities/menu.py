"""Admin navigation menu state."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any

MenuData = dict[str, Any]


def default_menu_data() -> MenuData:
    """State for a member who has never touched the menu: dashboard selected."""
    return {
        "categories": [
            {
                "id": "general",
                "expanded": True,
                "items": [{"id": "dashboard", "selected": True}],
            },
            {
                "id": "forum-management",
                "expanded": False,
                "items": [
                    {"id": "manage-forums", "selected": False},
                    {"id": "manage-features", "selected": False},
                ],
            },
        ]
    }


@dataclass(frozen=True)
class MenuTracker:
    """One row of ``menu_tracker``: a member's expanded and selected menu entries."""

    id: int
    member_id: int
    data: MenuData
    last_updated: datetime | None = None

    def copy_data(self) -> MenuData:
        """A deep copy safe to mutate before writing back."""
        return copy.deepcopy(self.data)

    def data_json(self) -> str:
        return json.dumps(self.data)
