"""Shared FastAPI dependencies."""

from fastapi import Request

from nextboard.context import AppContext
from nextboard.data.cache import CacheProvider


def get_context(request: Request) -> AppContext:
    """The application context attached at startup."""
    return request.app.state.context  # type: ignore[no-any-return]


def get_cache(request: Request) -> CacheProvider:
    return get_context(request).cache
