"""Guest slot API routes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from kickabout.api.core.dependencies import get_current_user, get_guest_service, require_admin
from kickabout.api.services import GuestService
from kickabout.shared.errors import KickaboutError
from kickabout.shared.models import User

from .schemas import GuestFields, GuestSlotResponse, RosterResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["guests"])


@router.post("/games/{game_id}/guests", response_model=RosterResponse, status_code=201)
async def create_guest(
    game_id: UUID,
    body: GuestFields,
    user: User = Depends(get_current_user),
    service: GuestService = Depends(get_guest_service),
) -> RosterResponse:
    """Bring a guest to the game. Guests share the players' headcount cap."""
    try:
        roster = await service.create_guest_slot(
            user.id,
            game_id,
            display_name=body.display_name,
            rating=body.rating,
            primary_position=body.primary_position,
            secondary_position=body.secondary_position,
        )
        return RosterResponse.from_roster(roster)
    except KickaboutError:
        raise
    except Exception as e:
        logger.exception(f"Failed to create guest: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None


@router.get("/games/{game_id}/guests/mine", response_model=list[GuestSlotResponse])
async def list_my_guests(
    game_id: UUID,
    user: User = Depends(get_current_user),
    service: GuestService = Depends(get_guest_service),
) -> list[GuestSlotResponse]:
    """Guests the caller brought to this game."""
    try:
        guests = await service.get_guests_by_inviter(game_id, user.id)
    except Exception as e:
        logger.exception(f"Failed to list guests: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None
    return [GuestSlotResponse.from_guest(g) for g in guests]


@router.delete("/games/{game_id}/guests/{guest_id}", response_model=RosterResponse)
async def delete_guest(
    game_id: UUID,
    guest_id: UUID,
    user: User = Depends(get_current_user),
    service: GuestService = Depends(get_guest_service),
) -> RosterResponse:
    """Remove a guest. Only the inviter or an admin may do this."""
    try:
        guest = await service.get_guest(guest_id)
        if guest is None or guest.game_id != game_id:
            raise HTTPException(status_code=404, detail="Guest not found")

        if not user.is_admin:
            owned = await service.get_guests_by_inviter(game_id, user.id)
            if guest_id not in {g.id for g in owned}:
                logger.warning(f"User {user.id} denied deleting guest {guest_id}")
                raise HTTPException(
                    status_code=403, detail="Only the inviter can remove this guest"
                )

        roster = await service.delete_guest_slot(guest_id)
        return RosterResponse.from_roster(roster)
    except (HTTPException, KickaboutError):
        raise
    except Exception as e:
        logger.exception(f"Failed to delete guest: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None


@router.put("/admin/guests/{guest_id}", response_model=GuestSlotResponse)
async def update_guest(
    guest_id: UUID,
    body: GuestFields,
    admin: User = Depends(require_admin),
    service: GuestService = Depends(get_guest_service),
) -> GuestSlotResponse:
    """Admin correction of a guest's name, rating or positions."""
    try:
        guest = await service.update_guest_slot(
            guest_id,
            display_name=body.display_name,
            rating=body.rating,
            primary_position=body.primary_position,
            secondary_position=body.secondary_position,
        )
        logger.info(f"Admin {admin.id} edited guest {guest_id}")
        return GuestSlotResponse.from_guest(guest)
    except KickaboutError:
        raise
    except Exception as e:
        logger.exception(f"Failed to update guest: {e}")
        raise HTTPException(status_code=500, detail="Internal server error") from None
