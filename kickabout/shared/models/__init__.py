"""Shared data models for the kickabout service."""

from .attendance import AttendanceRecord, AttendanceStatus
from .game import Game, GameState
from .guest import GuestSlot, GuestStatus, Position
from .roster import AttendanceResult, GuestBuckets, Roster, RosterGuest, RosterPlayer
from .user import Profile, User, UserRole

__all__ = [
    "AttendanceRecord",
    "AttendanceResult",
    "AttendanceStatus",
    "Game",
    "GameState",
    "GuestBuckets",
    "GuestSlot",
    "GuestStatus",
    "Position",
    "Profile",
    "Roster",
    "RosterGuest",
    "RosterPlayer",
    "User",
    "UserRole",
]
