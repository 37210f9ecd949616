"""Middleware registration."""

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from nextboard.auth.tracker import SessionTrackingMiddleware
from nextboard.config import Settings
from nextboard.middleware.error_handler import setup_error_handlers
from nextboard.middleware.logging import setup_logging
from nextboard.middleware.request_id import RequestIdMiddleware

# Probes must not create session rows.
UNTRACKED_PATHS = ("/health", "/ready", "/version")


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware in the correct order.

    FastAPI/Starlette executes middleware in reverse-add order (last added = outermost).
    Session tracking reads ``request.session``, so SessionMiddleware is added after it.
    """
    setup_logging(settings)
    setup_error_handlers(app)
    app.add_middleware(SessionTrackingMiddleware, exempt_paths=UNTRACKED_PATHS)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie=settings.session_cookie_name,
        max_age=settings.session_duration_minutes * 60,
        path=settings.cookie_path,
        same_site=settings.cookie_same_site,
        https_only=settings.cookie_secure,
        domain=settings.cookie_domain,
    )
    app.add_middleware(RequestIdMiddleware)
