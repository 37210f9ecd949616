"""Error kinds raised by the core.

Domain errors carry a user-facing message plus optional structured data and
are mapped to an HTTP status by the boundary error handler. Infrastructure
errors (configuration, database) propagate unchanged to the caller.
"""

from __future__ import annotations

from typing import Any


class BoardError(Exception):
    """Base class for user-facing domain errors."""

    status_code = 500
    title = "General Error"

    def __init__(self, message: str, data: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data or {}


class NotFoundError(BoardError):
    """The requested resource does not exist."""

    status_code = 404
    title = "Not Found"


class InvalidPermissionsError(BoardError):
    """The current member lacks the permission for the requested action."""

    status_code = 403
    title = "Invalid Permissions"

    def __init__(self, message: str, permission: str | None = None, data: dict[str, Any] | None = None) -> None:
        super().__init__(message, data)
        self.permission = permission


class RequiredFieldError(BoardError):
    """A required input field was missing or empty."""

    status_code = 400
    title = "Missing Field"

    def __init__(self, message: str, field: str, data: dict[str, Any] | None = None) -> None:
        super().__init__(message, data)
        self.field = field


class ConfigurationError(Exception):
    """Unsupported or inconsistent configuration. Fatal at startup."""


class DatabaseError(Exception):
    """Database connection lifecycle failure."""


class QueryError(DatabaseError):
    """Malformed query object handed to a database provider."""


class SessionDestroyError(Exception):
    """The underlying browser session could not be destroyed."""
