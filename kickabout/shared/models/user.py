"""Data models for the users and profiles tables (read-only here)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .guest import Position


class UserRole(StrEnum):
    PLAYER = "PLAYER"
    ADMIN = "ADMIN"


@dataclass
class User:
    id: str
    email: str
    role: UserRole = UserRole.PLAYER

    def __post_init__(self) -> None:
        self.role = UserRole(self.role)

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN


@dataclass
class Profile:
    """Player profile joined into roster entries."""

    user_id: str
    first_name: str
    last_name: str
    nickname: str
    rating: int
    primary_position: Position
    secondary_position: Position | None = None

    def __post_init__(self) -> None:
        self.primary_position = Position(self.primary_position)
        if self.secondary_position is not None:
            self.secondary_position = Position(self.secondary_position)
