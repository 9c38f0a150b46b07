"""API Routers package

Routers are organized by component: games, attendance, guests.
"""

from . import attendance_router, games_router, guests_router

__all__ = [
    "attendance_router",
    "games_router",
    "guests_router",
]
