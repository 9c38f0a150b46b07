"""Game lifecycle: publishing games and keeping a single OPEN game."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from uuid import UUID

import asyncpg

from kickabout.shared.errors import (
    GameNotFoundError,
    GameStateConflictError,
    InvalidRequestError,
)
from kickabout.shared.models import Game, GameState
from kickabout.shared.repositories import GameRepository

logger = logging.getLogger(__name__)


def parse_scheduled_at(value: datetime | str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are taken as UTC."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidRequestError("Invalid date format") from None
    if not isinstance(value, datetime):
        raise InvalidRequestError("Invalid date format")
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _required_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InvalidRequestError(f"Missing required field: {field}")
    return value.strip()


class GameService:
    """Creates, reads and closes games."""

    def __init__(self, pool: asyncpg.Pool, *, games: GameRepository | None = None) -> None:
        self.pool = pool
        self.games = games or GameRepository(pool)

    async def create_game(
        self,
        admin_id: str,
        *,
        scheduled_at: datetime | str,
        location: str,
        markdown: str,
    ) -> Game:
        """Archive every OPEN game and insert the new one in a single transaction."""
        when = parse_scheduled_at(scheduled_at)
        location = _required_text(location, "location")
        markdown = _required_text(markdown, "markdown")

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await self.games.lock_creation(conn)
                archived = await self.games.archive_open(conn)
                game = await self.games.insert(
                    conn,
                    scheduled_at=when,
                    location=location,
                    markdown=markdown,
                    created_by=admin_id,
                )

        logger.info(
            f"Game {game.id} created by {admin_id} for {when.isoformat()} ({archived} archived)"
        )
        return game

    async def get_open_game(self) -> Game | None:
        return await self.games.get_open()

    async def get_game(self, game_id: UUID) -> Game | None:
        return await self.games.get(game_id)

    async def close_game(self, game_id: UUID) -> Game:
        """Move an OPEN game to CLOSED (teams published)."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                game = await self.games.lock(conn, game_id)
                if game is None:
                    raise GameNotFoundError(game_id)
                if not game.is_open:
                    raise GameStateConflictError(game_id, game.state.value)
                game = await self.games.set_state(conn, game_id, GameState.CLOSED)

        logger.info(f"Game {game_id} closed")
        return game
