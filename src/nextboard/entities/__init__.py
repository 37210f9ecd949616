"""Typed, immutable projections of cached rows."""

from nextboard.entities.calendar import Calendar
from nextboard.entities.member import Lockout, Member, MemberDevice, Session
from nextboard.entities.menu import MenuData, MenuTracker, default_menu_data
from nextboard.entities.setting import Setting

__all__ = [
    "Calendar",
    "Lockout",
    "Member",
    "MemberDevice",
    "MenuData",
    "MenuTracker",
    "Session",
    "Setting",
    "default_menu_data",
]
