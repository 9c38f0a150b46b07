"""Guest registry: guest slots sharing the players' headcount cap."""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg

from kickabout.shared.constants import (
    GUEST_NAME_MAX_LENGTH,
    MAX_RATING,
    MAX_TOTAL_PLAYERS,
    MIN_RATING,
)
from kickabout.shared.errors import (
    GameClosedError,
    GameNotFoundError,
    GameNotOpenError,
    GuestNotFoundError,
    InvalidRequestError,
    InviterNotEligibleError,
)
from kickabout.shared.models import (
    AttendanceStatus,
    GameState,
    GuestSlot,
    GuestStatus,
    Position,
    Roster,
)
from kickabout.shared.repositories import (
    AttendanceRepository,
    GameRepository,
    GuestRepository,
    RosterRepository,
)

from .roster_service import RosterService

logger = logging.getLogger(__name__)


def _position(value: Position | str | None, field: str, *, required: bool) -> Position | None:
    if value is None or value == "":
        if required:
            raise InvalidRequestError(f"Missing required field: {field}")
        return None
    try:
        return Position(value)
    except ValueError:
        raise InvalidRequestError(
            f"{field} must be one of: " + ", ".join(p.value for p in Position)
        ) from None


def validate_guest_fields(
    display_name: str | None,
    rating: int,
    primary_position: Position | str | None,
    secondary_position: Position | str | None,
) -> tuple[str, int, Position, Position | None]:
    """Normalize guest input.

    Primary and secondary positions may be equal; only the profile form
    enforces that they differ.
    """
    name = (display_name or "").strip()
    if not name:
        raise InvalidRequestError("Missing required field: displayName")
    if len(name) > GUEST_NAME_MAX_LENGTH:
        raise InvalidRequestError(f"displayName must be at most {GUEST_NAME_MAX_LENGTH} characters")
    is_int = isinstance(rating, int) and not isinstance(rating, bool)
    if not is_int or not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRequestError(f"rating must be a number between {MIN_RATING} and {MAX_RATING}")
    primary = _position(primary_position, "primaryPosition", required=True)
    secondary = _position(secondary_position, "secondaryPosition", required=False)
    return name, rating, primary, secondary


class GuestService:
    """Adds, edits and removes guest slots."""

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

    async def create_guest_slot(
        self,
        inviter_id: str,
        game_id: UUID,
        *,
        display_name: str,
        rating: int,
        primary_position: Position | str,
        secondary_position: Position | str | None = None,
    ) -> Roster:
        """Add a guest; lands in WAITING when the combined cap is reached."""
        name, rating, primary, secondary = validate_guest_fields(
            display_name, rating, primary_position, secondary_position
        )

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                game = await self.games.lock(conn, game_id)
                if game is None:
                    raise GameNotFoundError(game_id)
                if not game.is_open:
                    raise GameNotOpenError(game_id, "guest registration")

                inviter = await self.attendances.get(conn, game_id, inviter_id)
                if inviter is None or inviter.status is AttendanceStatus.OUT:
                    raise InviterNotEligibleError(inviter_id)

                confirmed = await self.roster_repo.count_confirmed(conn, game_id)
                status = GuestStatus.CONFIRMED
                if confirmed >= MAX_TOTAL_PLAYERS:
                    status = GuestStatus.WAITING
                guest = await self.guests.insert(
                    conn,
                    game_id=game_id,
                    inviter_id=inviter_id,
                    display_name=name,
                    rating=rating,
                    primary_position=primary,
                    secondary_position=secondary,
                    status=status,
                )

        logger.info(
            f"Guest {guest.id} ({name}) added to game {game_id} by {inviter_id} as {status}"
        )
        return await self.roster_service.project(game_id)

    async def delete_guest_slot(self, guest_id: UUID) -> Roster:
        """Remove a guest unless its game is CLOSED (teams already balanced)."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                found = await self.guests.lock_with_game_state(conn, guest_id)
                if found is None:
                    raise GuestNotFoundError(guest_id)
                guest, game_state = found
                if game_state is GameState.CLOSED:
                    raise GameClosedError(guest.game_id)
                await self.guests.delete(conn, guest_id)

        logger.info(f"Guest {guest_id} removed from game {guest.game_id}")
        return await self.roster_service.project(guest.game_id)

    async def update_guest_slot(
        self,
        guest_id: UUID,
        *,
        display_name: str,
        rating: int,
        primary_position: Position | str,
        secondary_position: Position | str | None = None,
    ) -> GuestSlot:
        """Admin edit of a guest's details. Status and game are left as they are."""
        name, rating, primary, secondary = validate_guest_fields(
            display_name, rating, primary_position, secondary_position
        )
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                guest = await self.guests.update(
                    conn,
                    guest_id,
                    display_name=name,
                    rating=rating,
                    primary_position=primary,
                    secondary_position=secondary,
                )
        if guest is None:
            raise GuestNotFoundError(guest_id)
        logger.info(f"Guest {guest_id} updated")
        return guest

    async def get_guest(self, guest_id: UUID) -> GuestSlot | None:
        return await self.guests.get(guest_id)

    async def get_guests_by_inviter(self, game_id: UUID, inviter_id: str) -> list[GuestSlot]:
        return await self.guests.list_by_inviter(game_id, inviter_id)
