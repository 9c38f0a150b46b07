"""Read-side queries joining attendance and guest rows with profile data."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

import asyncpg

from ..models.attendance import AttendanceRecord
from ..models.guest import GuestSlot
from ..models.roster import RosterGuest, RosterPlayer
from ..models.user import Profile

_PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "nickname",
    "rating",
    "primary_position",
    "secondary_position",
)


def _profile(row: Mapping[str, Any], prefix: str) -> Profile | None:
    user_id = row[f"{prefix}user_id"]
    if user_id is None:
        return None
    return Profile(user_id=user_id, **{f: row[f"{prefix}{f}"] for f in _PROFILE_FIELDS})


class RosterRepository:
    """SQL behind the roster view and the shared headcount."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def count_confirmed(self, conn: asyncpg.Connection, game_id: UUID) -> int:
        """Confirmed players (incl. late) plus confirmed guests."""
        return await conn.fetchval(
            """
            SELECT
                (SELECT COUNT(*) FROM attendances
                 WHERE game_id = $1 AND status IN ('CONFIRMED', 'LATE_CONFIRMED'))
              + (SELECT COUNT(*) FROM guest_players
                 WHERE game_id = $1 AND status = 'CONFIRMED')
            """,
            game_id,
        )

    async def fetch_players(self, conn: asyncpg.Connection, game_id: UUID) -> list[RosterPlayer]:
        """Every non-OUT attendee, oldest registration first."""
        rows = await conn.fetch(
            """
            SELECT a.id, a.game_id, a.player_id, a.status, a.requested_status,
                   a.created_at, a.updated_at,
                   p.user_id AS p_user_id, p.first_name AS p_first_name,
                   p.last_name AS p_last_name, p.nickname AS p_nickname,
                   p.rating AS p_rating, p.primary_position AS p_primary_position,
                   p.secondary_position AS p_secondary_position
            FROM attendances a
            LEFT JOIN profiles p ON p.user_id = a.player_id
            WHERE a.game_id = $1 AND a.status <> 'OUT'
            ORDER BY a.created_at ASC, a.id ASC
            """,
            game_id,
        )
        return [
            RosterPlayer(
                attendance=AttendanceRecord(
                    id=row["id"],
                    game_id=row["game_id"],
                    player_id=row["player_id"],
                    status=row["status"],
                    requested_status=row["requested_status"],
                    created_at=row["created_at"],
                    updated_at=row["updated_at"],
                ),
                player=_profile(row, "p_"),
            )
            for row in rows
        ]

    async def fetch_guests(self, conn: asyncpg.Connection, game_id: UUID) -> list[RosterGuest]:
        """Every guest slot with its inviter's profile, oldest first."""
        rows = await conn.fetch(
            """
            SELECT gp.id, gp.game_id, gp.inviter_id, gp.display_name, gp.rating,
                   gp.primary_position, gp.secondary_position, gp.status,
                   gp.created_at, gp.updated_at,
                   p.user_id AS i_user_id, p.first_name AS i_first_name,
                   p.last_name AS i_last_name, p.nickname AS i_nickname,
                   p.rating AS i_rating, p.primary_position AS i_primary_position,
                   p.secondary_position AS i_secondary_position
            FROM guest_players gp
            LEFT JOIN profiles p ON p.user_id = gp.inviter_id
            WHERE gp.game_id = $1
            ORDER BY gp.created_at ASC, gp.id ASC
            """,
            game_id,
        )
        return [
            RosterGuest(
                guest=GuestSlot(
                    id=row["id"],
                    game_id=row["game_id"],
                    inviter_id=row["inviter_id"],
                    display_name=row["display_name"],
                    rating=row["rating"],
                    primary_position=row["primary_position"],
                    secondary_position=row["secondary_position"],
                    status=row["status"],
                    created_at=row["created_at"],
                    updated_at=row["updated_at"],
                ),
                inviter=_profile(row, "i_"),
            )
            for row in rows
        ]
