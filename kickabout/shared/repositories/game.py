"""Repository for the games table."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

import asyncpg

from ..constants import GAME_CREATION_LOCK_KEY
from ..models.game import Game, GameState

_COLUMNS = "id, scheduled_at, location, markdown, state, created_by, created_at, updated_at"


class GameRepository:
    """Pure SQL operations for games.

    Methods taking ``conn`` run inside the caller's transaction; the others
    borrow a connection from the pool.
    """

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, game_id: UUID) -> Game | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(f"SELECT {_COLUMNS} FROM games WHERE id = $1", game_id)
            return Game(**dict(row)) if row else None

    async def get_open(self) -> Game | None:
        """Most recently created OPEN game."""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(
                f"SELECT {_COLUMNS} FROM games WHERE state = 'OPEN' "
                "ORDER BY created_at DESC LIMIT 1"
            )
            return Game(**dict(row)) if row else None

    async def lock_creation(self, conn: asyncpg.Connection) -> None:
        """Serialize game creation until the surrounding transaction ends."""
        await conn.execute("SELECT pg_advisory_xact_lock($1)", GAME_CREATION_LOCK_KEY)

    async def lock(self, conn: asyncpg.Connection, game_id: UUID) -> Game | None:
        """Fetch a game and hold its row lock for the rest of the transaction."""
        row = await conn.fetchrow(
            f"SELECT {_COLUMNS} FROM games WHERE id = $1 FOR UPDATE", game_id
        )
        return Game(**dict(row)) if row else None

    async def archive_open(self, conn: asyncpg.Connection) -> int:
        """Archive every OPEN game. Returns the number of archived rows."""
        result = await conn.execute(
            "UPDATE games SET state = 'ARCHIVED', updated_at = NOW() WHERE state = 'OPEN'"
        )
        # result is like "UPDATE N"
        return int(result.split()[-1])

    async def insert(
        self,
        conn: asyncpg.Connection,
        *,
        scheduled_at: datetime,
        location: str,
        markdown: str,
        created_by: str,
    ) -> Game:
        row = await conn.fetchrow(
            f"""
            INSERT INTO games (scheduled_at, location, markdown, state, created_by)
            VALUES ($1, $2, $3, 'OPEN', $4)
            RETURNING {_COLUMNS}
            """,
            scheduled_at,
            location,
            markdown,
            created_by,
        )
        return Game(**dict(row))

    async def set_state(self, conn: asyncpg.Connection, game_id: UUID, state: GameState) -> Game:
        row = await conn.fetchrow(
            f"""
            UPDATE games SET state = $2, updated_at = NOW()
            WHERE id = $1
            RETURNING {_COLUMNS}
            """,
            game_id,
            state.value,
        )
        return Game(**dict(row))
