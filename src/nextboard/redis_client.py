"""Redis connection pool."""

import redis.asyncio as redis


def create_redis(url: str, max_connections: int = 50) -> redis.Redis:
    """Create a Redis client backed by its own connection pool."""
    return redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
    )


async def close_redis(client: redis.Redis) -> None:
    """Close the client and its connection pool."""
    await client.aclose()
