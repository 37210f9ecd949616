"""Cookie access bound to one request/response pair."""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from nextboard.config import Settings


class CookieJar:
    """Reads come from the request, writes go to the response.

    Every cookie written here shares the configured flags (http-only, secure,
    path, domain, same-site).
    """

    def __init__(self, request: Request, response: Response, settings: Settings) -> None:
        self._request = request
        self._response = response
        self._settings = settings

    def get(self, name: str) -> str | None:
        return self._request.cookies.get(name) or None

    def exists(self, name: str) -> bool:
        return self.get(name) is not None

    def set(self, name: str, value: str, max_age: int | None = None) -> None:
        self._response.set_cookie(
            name,
            value,
            max_age=max_age if max_age is not None else self._settings.cookie_default_max_age_seconds,
            path=self._settings.cookie_path,
            domain=self._settings.cookie_domain,
            secure=self._settings.cookie_secure,
            httponly=self._settings.cookie_http_only,
            samesite=self._settings.cookie_same_site,  # type: ignore[arg-type]
        )

    def delete(self, name: str) -> None:
        self._response.delete_cookie(
            name,
            path=self._settings.cookie_path,
            domain=self._settings.cookie_domain,
            secure=self._settings.cookie_secure,
            httponly=self._settings.cookie_http_only,
            samesite=self._settings.cookie_same_site,  # type: ignore[arg-type]
        )
