"""Browser session helpers over Starlette's ``request.session``."""

from __future__ import annotations

import secrets

from starlette.requests import Request

from nextboard.constants import SESSION_ID
from nextboard.errors import SessionDestroyError


def session_id(request: Request) -> str:
    """Identifier of the current browser session, generated on first use."""
    return request.session.setdefault(SESSION_ID, secrets.token_hex(16))


def destroy_session(request: Request) -> None:
    """Drop every key of the current session.

    Raises:
        SessionDestroyError: If the session store is unavailable.
    """
    try:
        request.session.clear()
    except AssertionError as exc:
        msg = f"cannotDestroySession: {exc}"
        raise SessionDestroyError(msg) from exc
