"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nextboard.admincp.router import router as admincp_router
from nextboard.auth.router import router as auth_router
from nextboard.calendars.router import router as calendars_router
from nextboard.config import get_settings
from nextboard.context import AppContext, build_context
from nextboard.health.router import router as health_router
from nextboard.middleware import setup_middleware


def create_app(context: AppContext | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    With an explicit ``context`` the caller owns its lifecycle (tests start
    and stop it themselves). Otherwise one is built from settings and started
    by the lifespan.
    """
    settings = context.settings if context is not None else get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup and shutdown lifecycle."""
        if context is not None:
            yield
            return
        owned = build_context(settings)
        await owned.start()
        app.state.context = owned
        try:
            yield
        finally:
            await owned.stop()

    app = FastAPI(
        title="NextBoard",
        description="Cache-backed data access, authentication and admin menu state for the NextBoard forum",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(admincp_router)
    app.include_router(calendars_router)

    return app


app = create_app()
