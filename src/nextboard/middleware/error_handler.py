"""Global error handler: consistent JSON error responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nextboard.errors import BoardError, InvalidPermissionsError, RequiredFieldError, SessionDestroyError

logger = structlog.get_logger()


def _board_error_body(exc: BoardError) -> dict[str, object]:
    body: dict[str, object] = {"detail": exc.message, "title": exc.title, "status": exc.status_code}
    if isinstance(exc, RequiredFieldError):
        body["field"] = exc.field
    if isinstance(exc, InvalidPermissionsError) and exc.permission:
        body["permission"] = exc.permission
    if exc.data:
        body["data"] = exc.data
    return body


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(BoardError)
    async def board_error_handler(request: Request, exc: BoardError) -> JSONResponse:
        """Domain errors carry their own status and title."""
        logger.info(
            "board_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            status=exc.status_code,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=_board_error_body(exc))

    @app.exception_handler(SessionDestroyError)
    async def session_destroy_handler(request: Request, exc: SessionDestroyError) -> JSONResponse:
        logger.error("session_destroy_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "title": "Session Error", "status": 500},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Handle HTTP exceptions with consistent JSON format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status": exc.status_code},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle validation errors with consistent JSON format."""
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions; always return JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "title": "General Error", "status": 500},
        )
