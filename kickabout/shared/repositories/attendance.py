"""Repository for the attendances table."""

from __future__ import annotations

from uuid import UUID

import asyncpg

from ..models.attendance import AttendanceRecord, AttendanceStatus

_COLUMNS = "id, game_id, player_id, status, requested_status, created_at, updated_at"


class AttendanceRepository:
    """Pure SQL operations for attendances. One row per (game, player)."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(
        self, conn: asyncpg.Connection, game_id: UUID, player_id: str
    ) -> AttendanceRecord | None:
        row = await conn.fetchrow(
            f"SELECT {_COLUMNS} FROM attendances WHERE game_id = $1 AND player_id = $2",
            game_id,
            player_id,
        )
        return AttendanceRecord(**dict(row)) if row else None

    async def upsert(
        self,
        conn: asyncpg.Connection,
        game_id: UUID,
        player_id: str,
        *,
        status: AttendanceStatus,
        requested_status: AttendanceStatus,
    ) -> AttendanceRecord:
        """Insert or update the player's row. ``created_at`` keeps the first registration."""
        row = await conn.fetchrow(
            f"""
            INSERT INTO attendances (game_id, player_id, status, requested_status)
            VALUES ($1, $2, $3, $4)
            ON CONFLICT (game_id, player_id) DO UPDATE SET
                status           = EXCLUDED.status,
                requested_status = EXCLUDED.requested_status,
                updated_at       = NOW()
            RETURNING {_COLUMNS}
            """,
            game_id,
            player_id,
            status.value,
            requested_status.value,
        )
        return AttendanceRecord(**dict(row))
