"""Repository for the guest_players table."""

from __future__ import annotations

from uuid import UUID

import asyncpg

from ..models.game import GameState
from ..models.guest import GuestSlot, GuestStatus, Position

_COLUMNS = (
    "id, game_id, inviter_id, display_name, rating, primary_position, "
    "secondary_position, status, created_at, updated_at"
)


def _position(value: Position | None) -> str | None:
    return value.value if value is not None else None


class GuestRepository:
    """Pure SQL operations for guest slots."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, guest_id: UUID) -> GuestSlot | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM guest_players WHERE id = $1", guest_id
            )
            return GuestSlot(**dict(row)) if row else None

    async def list_by_inviter(self, game_id: UUID, inviter_id: str) -> list[GuestSlot]:
        """Guests one player brought to a game, oldest first."""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(
                f"SELECT {_COLUMNS} FROM guest_players "
                "WHERE game_id = $1 AND inviter_id = $2 "
                "ORDER BY created_at ASC, id ASC",
                game_id,
                inviter_id,
            )
            return [GuestSlot(**dict(row)) for row in rows]

    async def count_by_inviter(
        self, conn: asyncpg.Connection, game_id: UUID, inviter_id: str
    ) -> int:
        return await conn.fetchval(
            "SELECT COUNT(*) FROM guest_players WHERE game_id = $1 AND inviter_id = $2",
            game_id,
            inviter_id,
        )

    async def lock_with_game_state(
        self, conn: asyncpg.Connection, guest_id: UUID
    ) -> tuple[GuestSlot, GameState] | None:
        """Fetch a guest with its game's state, locking both rows."""
        row = await conn.fetchrow(
            """
            SELECT gp.id, gp.game_id, gp.inviter_id, gp.display_name, gp.rating,
                   gp.primary_position, gp.secondary_position, gp.status,
                   gp.created_at, gp.updated_at, g.state AS game_state
            FROM guest_players gp
            JOIN games g ON g.id = gp.game_id
            WHERE gp.id = $1
            FOR UPDATE
            """,
            guest_id,
        )
        if not row:
            return None
        data = dict(row)
        game_state = GameState(data.pop("game_state"))
        return GuestSlot(**data), game_state

    async def insert(
        self,
        conn: asyncpg.Connection,
        *,
        game_id: UUID,
        inviter_id: str,
        display_name: str,
        rating: int,
        primary_position: Position,
        secondary_position: Position | None,
        status: GuestStatus,
    ) -> GuestSlot:
        row = await conn.fetchrow(
            f"""
            INSERT INTO guest_players
                (game_id, inviter_id, display_name, rating,
                 primary_position, secondary_position, status)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING {_COLUMNS}
            """,
            game_id,
            inviter_id,
            display_name,
            rating,
            primary_position.value,
            _position(secondary_position),
            status.value,
        )
        return GuestSlot(**dict(row))

    async def update(
        self,
        conn: asyncpg.Connection,
        guest_id: UUID,
        *,
        display_name: str,
        rating: int,
        primary_position: Position,
        secondary_position: Position | None,
    ) -> GuestSlot | None:
        row = await conn.fetchrow(
            f"""
            UPDATE guest_players SET
                display_name       = $2,
                rating             = $3,
                primary_position   = $4,
                secondary_position = $5,
                updated_at         = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            guest_id,
            display_name,
            rating,
            primary_position.value,
            _position(secondary_position),
        )
        return GuestSlot(**dict(row)) if row else None

    async def delete(self, conn: asyncpg.Connection, guest_id: UUID) -> bool:
        result = await conn.execute("DELETE FROM guest_players WHERE id = $1", guest_id)
        return result == "DELETE 1"
