"""Data model for the attendances table."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class AttendanceStatus(StrEnum):
    CONFIRMED = "CONFIRMED"
    WAITING = "WAITING"
    OUT = "OUT"
    LATE_CONFIRMED = "LATE_CONFIRMED"

    @property
    def counts_toward_cap(self) -> bool:
        return self in (AttendanceStatus.CONFIRMED, AttendanceStatus.LATE_CONFIRMED)


@dataclass
class AttendanceRecord:
    """One row per (game, player).

    ``requested_status`` is what the player last asked for; ``status`` is where
    the engine placed them. They differ only when a CONFIRMED request was
    waitlisted by the capacity cap.
    """

    id: UUID
    game_id: UUID
    player_id: str
    status: AttendanceStatus
    requested_status: AttendanceStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = AttendanceStatus(self.status)
        self.requested_status = AttendanceStatus(self.requested_status)

    @property
    def waitlisted_by_cap(self) -> bool:
        return (
            self.status is AttendanceStatus.WAITING
            and self.requested_status is AttendanceStatus.CONFIRMED
        )
