"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from nextboard.auth.service import AuthResult


class SignInRequest(BaseModel):
    """Sign-in form. Accepted as form fields or JSON."""

    identity: str = Field("", max_length=320)
    password: str = Field("", max_length=1024)
    remember_me: bool = False
    referer: str | None = None

    @field_validator("identity")
    @classmethod
    def strip_identity(cls, v: str) -> str:
        return v.strip()

    @field_validator("remember_me", mode="before")
    @classmethod
    def checkbox(cls, v: object) -> object:
        """HTML checkboxes post "on"."""
        if isinstance(v, str) and v.lower() == "on":
            return True
        return v


class SignInFailureData(BaseModel):
    reason: str | None
    message: str | None
    attempts: int
    expires: int | None
    member_id: int


class SignInFailureResponse(BaseModel):
    success: bool = False
    data: SignInFailureData

    @classmethod
    def from_result(cls, result: AuthResult) -> SignInFailureResponse:
        data = result.data
        return cls(
            data=SignInFailureData(
                reason=data.reason.value if data.reason else None,
                message=data.message,
                attempts=data.attempts,
                expires=data.expires,
                member_id=data.member.id,
            )
        )
