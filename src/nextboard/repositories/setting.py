"""Board settings, as read from the cached ``settings`` table."""

from __future__ import annotations

import json
from typing import Any

import structlog

from nextboard.config import Settings
from nextboard.data.cache import CacheProvider
from nextboard.data.db.base import Row
from nextboard.entities import Setting
from nextboard.repositories.base import find_row, same_id

logger = structlog.get_logger()

TABLE = "settings"


def decode_setting_value(setting_type: str | None, raw: Any, name: str = "") -> Any:
    """Decode a stored value according to the row's declared type.

    Raises:
        ValueError: If a ``float`` setting does not hold a number.
    """
    if raw is None:
        return None
    text = str(raw)
    if setting_type == "serialized":
        return json.loads(text) if text else None
    if setting_type == "bool":
        return text.lower() == "true"
    if setting_type == "number":
        return int(text)
    if setting_type == "float":
        try:
            return float(text)
        except ValueError:
            msg = f"Invalid float value for setting: {name}"
            raise ValueError(msg) from None
    if setting_type == "string":
        return text
    return raw


def load_setting_data_by_id(cache: CacheProvider, setting_id: int) -> Row | None:
    return find_row(cache, TABLE, lambda row: same_id(row.get("id"), setting_id))


def build_setting_from_data(data: Row | None, setting_id: int | None = None) -> Setting | None:
    if data is None:
        return None
    name = data.get("name") or ""
    setting_type = data.get("type")
    try:
        value = decode_setting_value(setting_type, data.get("value"), name)
        default_value = decode_setting_value(setting_type, data.get("default_value"), name)
    except ValueError as exc:
        logger.error("setting_decode_failed", name=name, error=str(exc))
        raise
    return Setting(
        id=int(data.get("id") or setting_id or 0),
        name=name,
        type=setting_type,
        value=value,
        default_value=default_value,
    )


def get_setting_by_id(cache: CacheProvider, setting_id: int) -> Setting | None:
    return build_setting_from_data(load_setting_data_by_id(cache, setting_id), setting_id)


def get_setting_by_name(cache: CacheProvider, name: str) -> Setting | None:
    return build_setting_from_data(find_row(cache, TABLE, lambda row: row.get("name") == name))


def _setting_name(attribute: str) -> str:
    """``account_lockout_enabled`` -> ``accountLockoutEnabled``."""
    head, *rest = attribute.split("_")
    return head + "".join(part.capitalize() for part in rest)


class BoardSettings:
    """Runtime board settings: the ``settings`` table first, env defaults second.

    Values are looked up on every access so a cache refresh of ``settings``
    takes effect immediately.
    """

    def __init__(self, cache: CacheProvider, defaults: Settings) -> None:
        self._cache = cache
        self._defaults = defaults

    def get(self, name: str, default: Any = None) -> Any:
        setting = get_setting_by_name(self._cache, name)
        if setting is None or setting.value is None:
            return default
        return setting.value

    def _lookup(self, attribute: str) -> Any:
        return self.get(_setting_name(attribute), getattr(self._defaults, attribute))

    @property
    def account_lockout_enabled(self) -> bool:
        return bool(self._lookup("account_lockout_enabled"))

    @property
    def account_lockout_max_failed_attempts(self) -> int:
        return int(self._lookup("account_lockout_max_failed_attempts"))

    @property
    def account_lockout_allow_expire(self) -> bool:
        return bool(self._lookup("account_lockout_allow_expire"))

    @property
    def account_lockout_expiration_minutes(self) -> int:
        return int(self._lookup("account_lockout_expiration_minutes"))

    @property
    def session_duration_minutes(self) -> int:
        return int(self._lookup("session_duration_minutes"))

    @property
    def remember_me_days(self) -> int:
        return int(self._lookup("remember_me_days"))

    @property
    def ip_match(self) -> bool:
        return bool(self._lookup("ip_match"))
