"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from nextboard.context import AppContext
from nextboard.data.db.query_builder import SQLQuery
from nextboard.dependencies import get_context

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness check. Returns 200 while the process is alive."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(
    ctx: AppContext = Depends(get_context),  # noqa: B008
) -> dict[str, object]:
    """Readiness check: database round trip plus table cache status."""
    checks: dict[str, object] = {}

    # Database check
    try:
        await ctx.db.fetch_all(SQLQuery("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:
        checks["database"] = f"error: {exc}"

    # Cache check: how many configured tables currently hold rows
    loaded = sum(1 for table in ctx.cache.tables if ctx.cache.get(table))
    checks["cache"] = {"provider": ctx.cache.name, "tables": len(ctx.cache.tables), "loaded": loaded}

    all_ok = checks["database"] == "ok"
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version(ctx: AppContext = Depends(get_context)) -> dict[str, str]:  # noqa: B008
    """Return API version and environment."""
    return {
        "version": ctx.settings.app_version,
        "environment": ctx.settings.environment,
    }
