"""Services layer - business logic

Each service owns one component of the attendance engine and is built per
request from the shared connection pool.
"""

from .attendance_service import AttendanceService
from .auth_service import AuthService
from .game_service import GameService
from .guest_service import GuestService
from .roster_service import RosterService

__all__ = [
    "AttendanceService",
    "AuthService",
    "GameService",
    "GuestService",
    "RosterService",
]
