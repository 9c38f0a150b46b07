"""Attendance registry: per-player status machine and the confirmed headcount cap."""

from __future__ import annotations

import logging
from typing import assert_never
from uuid import UUID

import asyncpg

from kickabout.shared.constants import MAX_TOTAL_PLAYERS
from kickabout.shared.errors import GameNotFoundError, GameNotOpenError, InvalidRequestError
from kickabout.shared.models import AttendanceRecord, AttendanceResult, AttendanceStatus
from kickabout.shared.repositories import (
    AttendanceRepository,
    GameRepository,
    GuestRepository,
    RosterRepository,
)

from .roster_service import RosterService

logger = logging.getLogger(__name__)


def parse_status(value: AttendanceStatus | str) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise InvalidRequestError(
            "action must be one of: " + ", ".join(s.value for s in AttendanceStatus)
        ) from None


class AttendanceService:
    """Moves players between CONFIRMED / WAITING / OUT / LATE_CONFIRMED.

    Every call is one transaction holding the game's row lock, so capacity
    decisions for the same game never interleave.
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        *,
        games: GameRepository | None = None,
        attendances: AttendanceRepository | None = None,
        guests: GuestRepository | None = None,
        roster_repo: RosterRepository | None = None,
        roster_service: RosterService | None = None,
    ) -> None:
        self.pool = pool
        self.games = games or GameRepository(pool)
        self.attendances = attendances or AttendanceRepository(pool)
        self.guests = guests or GuestRepository(pool)
        self.roster_repo = roster_repo or RosterRepository(pool)
        self.roster_service = roster_service or RosterService(
            pool, games=self.games, roster_repo=self.roster_repo
        )

    async def register_attendance(
        self,
        player_id: str,
        game_id: UUID,
        status: AttendanceStatus | str,
    ) -> AttendanceResult:
        """Apply a player's requested status and return the refreshed roster.

        ``requires_guest_removal_dialog`` is set when a player with guest slots
        drops OUT; the guests themselves are left untouched.
        """
        requested = parse_status(status)
        requires_dialog = False

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                game = await self.games.lock(conn, game_id)
                if game is None:
                    raise GameNotFoundError(game_id)
                if not game.is_open:
                    raise GameNotOpenError(game_id)

                current = await self.attendances.get(conn, game_id, player_id)
                placement = await self._placement(conn, game_id, current, requested)

                if current is None or (current.status, current.requested_status) != (
                    placement,
                    requested,
                ):
                    await self.attendances.upsert(
                        conn, game_id, player_id, status=placement, requested_status=requested
                    )
                    if current is None or current.status is not placement:
                        logger.info(
                            f"Player {player_id} on game {game_id}: "
                            f"{current.status if current else 'new'} -> {placement} "
                            f"(requested {requested})"
                        )

                if requested is AttendanceStatus.OUT and (
                    current is not None and current.status is not AttendanceStatus.OUT
                ):
                    guest_count = await self.guests.count_by_inviter(conn, game_id, player_id)
                    requires_dialog = guest_count > 0

        roster = await self.roster_service.project(game_id)
        return AttendanceResult(roster=roster, requires_guest_removal_dialog=requires_dialog)

    async def _placement(
        self,
        conn: asyncpg.Connection,
        game_id: UUID,
        current: AttendanceRecord | None,
        requested: AttendanceStatus,
    ) -> AttendanceStatus:
        """Status the player ends up in for this request."""
        match requested:
            case AttendanceStatus.CONFIRMED:
                if current is not None and current.status is AttendanceStatus.CONFIRMED:
                    return AttendanceStatus.CONFIRMED
                # First registration, or a repeat of a request the cap already turned away
                if current is None or current.waitlisted_by_cap:
                    confirmed = await self.roster_repo.count_confirmed(conn, game_id)
                    if confirmed >= MAX_TOTAL_PLAYERS:
                        return AttendanceStatus.WAITING
                # An existing attendee changing status is honored regardless of cap
                return AttendanceStatus.CONFIRMED
            case AttendanceStatus.WAITING:
                return AttendanceStatus.WAITING
            case AttendanceStatus.OUT:
                return AttendanceStatus.OUT
            case AttendanceStatus.LATE_CONFIRMED:
                # No cap check on the late path
                return AttendanceStatus.LATE_CONFIRMED
            case _:
                assert_never(requested)
