"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from nextboard.auth.password import hash_password
from nextboard.config import Settings
from nextboard.context import AppContext, build_context
from nextboard.data.db.schema import CORE_TABLES, create_schema
from nextboard.entities import Lockout
from nextboard.main import create_app

TEST_PASSWORD = "CorrectHorse9"

_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """SQLite-backed settings with the memory cache over the core tables."""
    return Settings(
        database_provider="sqlite",
        sqlite_database_path=str(tmp_path / "board.sqlite"),
        cache_enabled=True,
        cache_method="memory",
        cache_tables=list(CORE_TABLES),
        session_secret_key="test-secret",
        base_url="http://test",
        log_format="console",
        account_lockout_enabled=True,
        account_lockout_max_failed_attempts=3,
        account_lockout_allow_expire=True,
        account_lockout_expiration_minutes=15,
    )


@pytest_asyncio.fixture
async def context(settings: Settings) -> AsyncGenerator[AppContext, None]:
    """A started application context over a fresh database file."""
    ctx = build_context(settings)
    await ctx.db.connect()
    await create_schema(ctx.db)  # type: ignore[arg-type]
    await ctx.start()
    yield ctx
    await ctx.stop()


SeedMember = Callable[..., Awaitable[int]]


@pytest_asyncio.fixture
async def seed_member(context: AppContext) -> SeedMember:
    """Insert a member row and refresh the members mirror. Returns the new id."""

    async def _seed(
        username: str = "sam",
        email_address: str = "sam@example.com",
        password_hash: str | None = _PASSWORD_HASH,
        lockout: Lockout | None = None,
        display_on_wo: int = 1,
    ) -> int:
        query = (
            context.db.builder()
            .insert_into(
                "members",
                ["username", "display_name", "email_address", "password_hash", "lockout", "total_posts", "joined", "display_on_wo"],
                [
                    username,
                    username.title(),
                    email_address,
                    password_hash,
                    lockout.to_json() if lockout else None,
                    0,
                    1_700_000_000,
                    display_on_wo,
                ],
            )
            .build()
        )
        result = await context.db.execute(query)
        await context.cache.update("members")
        return int(result.insert_id)

    return _seed


@pytest.fixture
def member_password() -> str:
    return TEST_PASSWORD


@pytest_asyncio.fixture
async def member_id(seed_member: SeedMember) -> int:
    """The default member, password ``TEST_PASSWORD``."""
    return await seed_member()


InsertRow = Callable[[str, dict[str, Any]], Awaitable[Any]]


@pytest_asyncio.fixture
async def insert_row(context: AppContext) -> InsertRow:
    """Insert a raw row (JSON-encoding dict/list values) and refresh its mirror."""

    async def _insert(table: str, row: dict[str, Any]) -> Any:
        values = [json.dumps(v) if isinstance(v, (dict, list)) else v for v in row.values()]
        result = await context.db.execute(context.db.builder().insert_into(table, list(row), values).build())
        await context.cache.update(table)
        return result.insert_id

    return _insert


@pytest_asyncio.fixture
async def client(context: AppContext) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client over the app wired to the test context."""
    app = create_app(context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def signed_in_client(client: AsyncClient, member_id: int) -> AsyncClient:
    """Client that completed a real sign-in as the default member."""
    response = await client.post("/auth/signin", data={"identity": "sam", "password": TEST_PASSWORD})
    assert response.status_code == 303
    return client
