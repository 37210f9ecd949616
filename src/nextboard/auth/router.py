"""Authentication router: sign in and sign out."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from nextboard.auth.dependencies import get_current_member
from nextboard.auth.schemas import SignInFailureResponse, SignInRequest
from nextboard.auth.service import complete_sign_in, sign_out, validate_credentials
from nextboard.constants import SESSION_SIGNIN_ERROR
from nextboard.context import AppContext
from nextboard.dependencies import get_context
from nextboard.entities import Member
from nextboard.errors import RequiredFieldError


router = APIRouter(prefix="/auth", tags=["Authentication"])


def safe_redirect(url: str | None, base_url: str) -> str:
    """Keep redirects on this board: relative paths or URLs on ``base_url``'s host."""
    if not url or "\\" in url:
        return base_url
    target = urlsplit(url)
    if not target.scheme and not target.netloc:
        return url if url.startswith("/") and not url.startswith("//") else base_url
    base = urlsplit(base_url)
    if (target.scheme, target.netloc) == (base.scheme, base.netloc):
        return url
    return base_url


async def _read_sign_in(request: Request) -> SignInRequest:
    payload: dict[str, Any]
    if request.headers.get("content-type", "").startswith("application/json"):
        payload = await request.json()
    else:
        payload = dict(await request.form())
    try:
        body = SignInRequest.model_validate(payload)
    except ValidationError as e:
        field = str(e.errors()[0]["loc"][0]) if e.errors() else "identity"
        msg = "Invalid sign in form."
        raise RequiredFieldError(msg, field=field) from e
    if not body.identity:
        msg = "Please enter your username or email address."
        raise RequiredFieldError(msg, field="identity")
    if not body.password:
        msg = "Please enter your password."
        raise RequiredFieldError(msg, field="password")
    return body


@router.post("/signin", response_model=None)
async def signin(
    request: Request,
    ctx: AppContext = Depends(get_context),  # noqa: B008
) -> RedirectResponse | JSONResponse:
    """Validate credentials; redirect on success, 401 with the failure details otherwise."""
    body = await _read_sign_in(request)
    result = await validate_credentials(ctx, body.identity, body.password)
    if not result.success:
        request.session[SESSION_SIGNIN_ERROR] = result.data.message
        return JSONResponse(status_code=401, content=SignInFailureResponse.from_result(result).model_dump())

    url = safe_redirect(body.referer or request.headers.get("referer"), ctx.settings.base_url)
    return await complete_sign_in(ctx, request, result.data.member, remember_me=body.remember_me, url=url)


@router.get("/signout", response_model=None)
async def signout(
    request: Request,
    ctx: AppContext = Depends(get_context),  # noqa: B008
    member: Member = Depends(get_current_member),  # noqa: B008
) -> RedirectResponse:
    """Tear down this browser's sign-in and return to the referring page."""
    url = safe_redirect(request.headers.get("referer"), ctx.settings.base_url)
    return await sign_out(ctx, request, member, url=url)
