"""Shared repository layer for the kickabout service."""

from .attendance import AttendanceRepository
from .game import GameRepository
from .guest import GuestRepository
from .roster import RosterRepository
from .user import UserRepository

__all__ = [
    "AttendanceRepository",
    "GameRepository",
    "GuestRepository",
    "RosterRepository",
    "UserRepository",
]
