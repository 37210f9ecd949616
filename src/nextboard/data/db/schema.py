"""SQLAlchemy Core tables for the cache-backed core.

Timestamps are integer epoch seconds; JSON blobs are stored as text.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Column, Integer, MetaData, String, Table, Text

from nextboard.data.db.providers import SQLAlchemyProvider


def build_metadata(prefix: str = "") -> MetaData:
    """Table definitions with the deployment's table prefix applied."""
    metadata = MetaData()

    Table(
        f"{prefix}members",
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("username", String(64), nullable=False, unique=True),
        Column("display_name", String(64), nullable=True),
        Column("email_address", String(320), nullable=False, unique=True),
        Column("password_hash", String(256), nullable=True),
        Column("lockout", Text, nullable=True),
        Column("total_posts", Integer, nullable=False, server_default="0"),
        Column("joined", BigInteger, nullable=True),
        Column("last_online", BigInteger, nullable=True),
        Column("display_on_wo", Integer, nullable=False, server_default="1"),
    )

    Table(
        f"{prefix}member_devices",
        metadata,
        Column("id", String(64), primary_key=True),
        Column("member_id", Integer, nullable=False),
        Column("token", String(64), nullable=True),
        Column("user_agent", Text, nullable=True),
        Column("last_used_at", BigInteger, nullable=True),
    )

    Table(
        f"{prefix}sessions",
        metadata,
        Column("id", String(64), primary_key=True),
        Column("member_id", Integer, nullable=False, server_default="0"),
        Column("expires", BigInteger, nullable=True),
        Column("last_click", BigInteger, nullable=True),
        Column("location", Text, nullable=True),
        Column("ip_address", String(64), nullable=True),
        Column("user_agent", Text, nullable=True),
        Column("display_on_wo", Integer, nullable=False, server_default="0"),
        Column("is_admin", Integer, nullable=False, server_default="0"),
    )

    Table(
        f"{prefix}menu_tracker",
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("member_id", Integer, nullable=False, unique=True),
        Column("data", Text, nullable=False),
        Column("last_updated", BigInteger, nullable=True),
    )

    Table(
        f"{prefix}calendars",
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("title", String(255), nullable=False),
        Column("description", Text, nullable=True),
        Column("type", String(32), nullable=True),
        Column("created_by", Integer, nullable=True),
        Column("created_at", BigInteger, nullable=True),
        Column("assigned_to", Text, nullable=True),
        Column("permissions", Text, nullable=True),
        Column("shared_with", Text, nullable=True),
    )

    Table(
        f"{prefix}settings",
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("name", String(128), nullable=False, unique=True),
        Column("type", String(32), nullable=False),
        Column("value", Text, nullable=True),
        Column("default_value", Text, nullable=True),
    )

    return metadata


CORE_TABLES: tuple[str, ...] = ("members", "member_devices", "sessions", "menu_tracker", "calendars", "settings")


async def create_schema(db: SQLAlchemyProvider) -> None:
    """Create the core tables if they do not exist yet."""
    metadata = build_metadata(db.table_prefix)
    async with db.engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
