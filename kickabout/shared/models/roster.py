"""Derived roster view. Never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field

from .attendance import AttendanceRecord
from .guest import GuestSlot
from .user import Profile


@dataclass
class RosterPlayer:
    attendance: AttendanceRecord
    player: Profile | None = None


@dataclass
class RosterGuest:
    guest: GuestSlot
    inviter: Profile | None = None


@dataclass
class GuestBuckets:
    confirmed: list[RosterGuest] = field(default_factory=list)
    waiting: list[RosterGuest] = field(default_factory=list)


@dataclass
class Roster:
    """Players and guests of one game, split by bucket, first-come-first-served."""

    confirmed: list[RosterPlayer] = field(default_factory=list)
    waiting: list[RosterPlayer] = field(default_factory=list)
    guests: GuestBuckets = field(default_factory=GuestBuckets)

    @property
    def confirmed_total(self) -> int:
        """Headcount that counts toward the cap."""
        return len(self.confirmed) + len(self.guests.confirmed)


@dataclass
class AttendanceResult:
    roster: Roster
    requires_guest_removal_dialog: bool = False
