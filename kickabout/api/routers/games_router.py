"""Game lifecycle API routes."""

import logging
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from kickabout.api.core.dependencies import get_current_user, get_game_service, require_admin
from kickabout.api.services import GameService
from kickabout.shared.errors import KickaboutError
from kickabout.shared.models import User

from .schemas import CamelModel, GameResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["games"])


class GameCreate(CamelModel):
    scheduled_at: datetime
    location: str
    markdown: str


@router.post("/admin/game", response_model=GameResponse, status_code=201)
async def create_game(
    body: GameCreate,
    admin: User = Depends(require_admin),
    service: GameService = Depends(get_game_service),
) -> GameResponse:
    """Publish a new game; any OPEN game is archived."""
    try:
        game = await service.create_game(
            admin.id,
            scheduled_at=body.scheduled_at,
            location=body.location,
            markdown=body.markdown,
        )
        return GameResponse.from_game(game)
    except KickaboutError:
        raise
    except Exception as e:
        logger.exception(f"Failed to create game: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None


@router.post("/admin/game/{game_id}/close", response_model=GameResponse)
async def close_game(
    game_id: UUID,
    admin: User = Depends(require_admin),
    service: GameService = Depends(get_game_service),
) -> GameResponse:
    """Close an OPEN game once teams are published."""
    try:
        game = await service.close_game(game_id)
        logger.info(f"Admin {admin.id} closed game {game_id}")
        return GameResponse.from_game(game)
    except KickaboutError:
        raise
    except Exception as e:
        logger.exception(f"Failed to close game: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None


@router.get("/game/open", response_model=GameResponse)
async def get_open_game(
    user: User = Depends(get_current_user),
    service: GameService = Depends(get_game_service),
) -> GameResponse:
    """Current OPEN game. Polled by clients."""
    try:
        game = await service.get_open_game()
    except Exception as e:
        logger.exception(f"Failed to fetch open game: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None
    if game is None:
        raise HTTPException(status_code=404, detail="No open game found")
    return GameResponse.from_game(game)
