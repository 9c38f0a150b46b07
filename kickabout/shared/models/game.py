"""Data model for the games table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class GameState(StrEnum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    ARCHIVED = "ARCHIVED"


@dataclass
class Game:
    """A scheduled match. At most one game is OPEN at a time."""

    id: UUID
    scheduled_at: datetime
    location: str
    markdown: str
    state: GameState
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.state = GameState(self.state)

    @property
    def is_open(self) -> bool:
        return self.state is GameState.OPEN
