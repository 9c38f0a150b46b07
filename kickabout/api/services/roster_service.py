"""Roster projection: read-only aggregation of attendance and guest rows."""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg

from kickabout.shared.errors import GameNotFoundError
from kickabout.shared.models import (
    AttendanceStatus,
    GuestBuckets,
    GuestStatus,
    Roster,
    RosterGuest,
    RosterPlayer,
)
from kickabout.shared.repositories import GameRepository, RosterRepository

logger = logging.getLogger(__name__)


class RosterService:
    """Builds the four-bucket roster view of a game. Evaluates no business rules."""

    def __init__(
        self,
        pool: asyncpg.Pool,
        *,
        games: GameRepository | None = None,
        roster_repo: RosterRepository | None = None,
    ) -> None:
        self.pool = pool
        self.games = games or GameRepository(pool)
        self.roster_repo = roster_repo or RosterRepository(pool)

    async def project(self, game_id: UUID) -> Roster:
        if await self.games.get(game_id) is None:
            raise GameNotFoundError(game_id)

        # One snapshot for both lists so a concurrent write never shows half-applied
        async with self.pool.acquire() as conn:
            async with conn.transaction(isolation="repeatable_read", readonly=True):
                players = await self.roster_repo.fetch_players(conn, game_id)
                guests = await self.roster_repo.fetch_guests(conn, game_id)

        return self.partition(players, guests)

    @staticmethod
    def partition(players: list[RosterPlayer], guests: list[RosterGuest]) -> Roster:
        """Split already-ordered rows into buckets, preserving order."""
        roster = Roster(guests=GuestBuckets())
        for entry in players:
            status = entry.attendance.status
            if status.counts_toward_cap:
                roster.confirmed.append(entry)
            elif status is AttendanceStatus.WAITING:
                roster.waiting.append(entry)
        for entry in guests:
            if entry.guest.status is GuestStatus.CONFIRMED:
                roster.guests.confirmed.append(entry)
            else:
                roster.guests.waiting.append(entry)
        return roster
