"""Data model for the guest_players table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Position(StrEnum):
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    ATT = "ATT"


class GuestStatus(StrEnum):
    CONFIRMED = "CONFIRMED"
    WAITING = "WAITING"


@dataclass
class GuestSlot:
    """A non-registered player brought along by an attendee."""

    id: UUID
    game_id: UUID
    inviter_id: str
    display_name: str
    rating: int
    primary_position: Position
    status: GuestStatus
    secondary_position: Position | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.primary_position = Position(self.primary_position)
        if self.secondary_position is not None:
            self.secondary_position = Position(self.secondary_position)
        self.status = GuestStatus(self.status)
