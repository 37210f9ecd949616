"""FastAPI authentication dependencies."""

from __future__ import annotations

from fastapi import Depends, Request

from nextboard.entities import Member
from nextboard.errors import InvalidPermissionsError
from nextboard.repositories.member import guest_member


def get_current_member(request: Request) -> Member:
    """Member resolved by the session tracker for this request; guest otherwise."""
    member = getattr(request.state, "member", None)
    return member if member is not None else guest_member()


def require_member(member: Member = Depends(get_current_member)) -> Member:  # noqa: B008
    """
    Same as get_current_member but refuses guests.

    Raises InvalidPermissionsError (403) for guests.
    """
    if member.is_guest:
        msg = "You must be signed in to access this page."
        raise InvalidPermissionsError(msg, permission="member")
    return member
