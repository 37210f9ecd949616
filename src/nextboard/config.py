"""Application settings via pydantic-settings."""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nextboard.constants import DEFAULT_CACHE_TABLES


class DatabaseKind(str, Enum):
    """Supported SQL engines."""

    MYSQL = "mysql"
    POSTGRES = "postgres"
    MSSQL = "mssql"
    ORACLE = "oracle"
    SQLITE = "sqlite"


_DATABASE_ALIASES = {
    "postgresql": DatabaseKind.POSTGRES,
    "postsgre": DatabaseKind.POSTGRES,
    "pg": DatabaseKind.POSTGRES,
    "oraclesql": DatabaseKind.ORACLE,
    "oracledb": DatabaseKind.ORACLE,
}


class CacheKind(str, Enum):
    """Supported cache providers."""

    MEMORY = "memory"
    REDIS = "redis"
    NONE = "none"


class Settings(BaseSettings):
    """Application configuration loaded from environment variables with NB_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="NB_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    base_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    log_format: str = "json"

    # --- Database ---
    database_provider: DatabaseKind = DatabaseKind.POSTGRES
    database_url: str | None = None
    database_host: str = "localhost"
    database_port: int | None = None
    database_user: str = "nextboard"
    database_password: str = ""
    database_name: str = "nextboard"
    database_table_prefix: str = ""
    database_pool_size: int = 10
    sqlite_database_path: str = "./database.sqlite"

    # --- Cache ---
    cache_enabled: bool = True
    cache_method: CacheKind = CacheKind.MEMORY
    cache_tables: list[str] = list(DEFAULT_CACHE_TABLES)
    redis_url: str = "redis://localhost:6379/0"
    cache_redis_prefix: str = "nextboard:cache"
    no_cache_fetch_on_update: bool = True

    # --- Cookies / sessions ---
    cookie_http_only: bool = True
    cookie_secure: bool = False
    cookie_path: str = "/"
    cookie_domain: str | None = None
    cookie_same_site: str = "lax"
    cookie_default_max_age_seconds: int = 60 * 60 * 24 * 30
    session_secret_key: str = "change-me"
    session_cookie_name: str = "nextboard.sid"

    # --- Auth (defaults; the settings table overrides these at runtime) ---
    account_lockout_enabled: bool = True
    account_lockout_max_failed_attempts: int = 5
    account_lockout_allow_expire: bool = True
    account_lockout_expiration_minutes: int = 15
    session_duration_minutes: int = 60
    remember_me_days: int = 365
    ip_match: bool = False

    @field_validator("database_provider", mode="before")
    @classmethod
    def _normalize_database_provider(cls, value: Any) -> Any:
        """Map engine aliases onto their canonical kind."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            return _DATABASE_ALIASES.get(lowered, lowered)
        return value

    @field_validator("cache_method", mode="before")
    @classmethod
    def _normalize_cache_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
