"""Attendance and roster API routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from kickabout.api.core.dependencies import (
    get_attendance_service,
    get_current_user,
    get_roster_service,
)
from kickabout.api.services import AttendanceService, RosterService
from kickabout.shared.errors import KickaboutError
from kickabout.shared.models import AttendanceStatus, User

from .schemas import AttendanceRosterResponse, CamelModel, RosterResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/game", tags=["attendance"])


class AttendanceRequest(CamelModel):
    action: AttendanceStatus


@router.get("/{game_id}/attendance", response_model=RosterResponse)
async def get_roster(
    game_id: UUID,
    user: User = Depends(get_current_user),
    service: RosterService = Depends(get_roster_service),
) -> RosterResponse:
    """Roster of a game. Polled by clients."""
    try:
        roster = await service.project(game_id)
        return RosterResponse.from_roster(roster)
    except KickaboutError:
        raise
    except Exception as e:
        logger.exception(f"Failed to fetch roster: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None


@router.post("/{game_id}/attendance", response_model=AttendanceRosterResponse)
async def register_attendance(
    game_id: UUID,
    body: AttendanceRequest,
    user: User = Depends(get_current_user),
    service: AttendanceService = Depends(get_attendance_service),
) -> AttendanceRosterResponse:
    """Set the caller's attendance status and return the refreshed roster."""
    try:
        result = await service.register_attendance(user.id, game_id, body.action)
        return AttendanceRosterResponse(
            **RosterResponse.roster_fields(result.roster),
            requires_guest_removal_dialog=result.requires_guest_removal_dialog,
        )
    except KickaboutError:
        raise
    except Exception as e:
        logger.exception(f"Failed to register attendance: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None
