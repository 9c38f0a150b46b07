"""Request / response models shared by the routers.

JSON keys are camelCase on the wire; fields keep snake_case names in Python.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from kickabout.shared.constants import GUEST_NAME_MAX_LENGTH, MAX_RATING, MIN_RATING
from kickabout.shared.models import (
    AttendanceStatus,
    Game,
    GameState,
    GuestSlot,
    GuestStatus,
    Position,
    Profile,
    Roster,
    RosterGuest,
    RosterPlayer,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================
# Response Models
# ============================================


class GameResponse(CamelModel):
    id: UUID
    scheduled_at: datetime
    location: str
    markdown: str
    state: GameState
    created_by: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_game(cls, game: Game) -> GameResponse:
        return cls(
            id=game.id,
            scheduled_at=game.scheduled_at,
            location=game.location,
            markdown=game.markdown,
            state=game.state,
            created_by=game.created_by,
            created_at=game.created_at,
            updated_at=game.updated_at,
        )


class ProfileResponse(CamelModel):
    user_id: str
    first_name: str
    last_name: str
    nickname: str
    rating: int
    primary_position: Position
    secondary_position: Position | None = None

    @classmethod
    def from_profile(cls, profile: Profile | None) -> ProfileResponse | None:
        if profile is None:
            return None
        return cls(
            user_id=profile.user_id,
            first_name=profile.first_name,
            last_name=profile.last_name,
            nickname=profile.nickname,
            rating=profile.rating,
            primary_position=profile.primary_position,
            secondary_position=profile.secondary_position,
        )


class GuestSlotResponse(CamelModel):
    id: UUID
    game_id: UUID
    inviter_id: str
    display_name: str
    rating: int
    primary_position: Position
    secondary_position: Position | None = None
    status: GuestStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_guest(cls, guest: GuestSlot) -> GuestSlotResponse:
        return cls(
            id=guest.id,
            game_id=guest.game_id,
            inviter_id=guest.inviter_id,
            display_name=guest.display_name,
            rating=guest.rating,
            primary_position=guest.primary_position,
            secondary_position=guest.secondary_position,
            status=guest.status,
            created_at=guest.created_at,
            updated_at=guest.updated_at,
        )


class RosterPlayerResponse(CamelModel):
    id: UUID
    game_id: UUID
    player_id: str
    status: AttendanceStatus
    requested_status: AttendanceStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None
    player: ProfileResponse | None = None

    @classmethod
    def from_entry(cls, entry: RosterPlayer) -> RosterPlayerResponse:
        record = entry.attendance
        return cls(
            id=record.id,
            game_id=record.game_id,
            player_id=record.player_id,
            status=record.status,
            requested_status=record.requested_status,
            created_at=record.created_at,
            updated_at=record.updated_at,
            player=ProfileResponse.from_profile(entry.player),
        )


class RosterGuestResponse(GuestSlotResponse):
    inviter: ProfileResponse | None = None

    @classmethod
    def from_entry(cls, entry: RosterGuest) -> RosterGuestResponse:
        base = GuestSlotResponse.from_guest(entry.guest)
        return cls(
            **base.model_dump(),
            inviter=ProfileResponse.from_profile(entry.inviter),
        )


class GuestBucketsResponse(CamelModel):
    confirmed: list[RosterGuestResponse]
    waiting: list[RosterGuestResponse]


class RosterResponse(CamelModel):
    confirmed: list[RosterPlayerResponse]
    waiting: list[RosterPlayerResponse]
    guests: GuestBucketsResponse

    @classmethod
    def roster_fields(cls, roster: Roster) -> dict:
        return {
            "confirmed": [RosterPlayerResponse.from_entry(e) for e in roster.confirmed],
            "waiting": [RosterPlayerResponse.from_entry(e) for e in roster.waiting],
            "guests": GuestBucketsResponse(
                confirmed=[RosterGuestResponse.from_entry(e) for e in roster.guests.confirmed],
                waiting=[RosterGuestResponse.from_entry(e) for e in roster.guests.waiting],
            ),
        }

    @classmethod
    def from_roster(cls, roster: Roster) -> RosterResponse:
        return cls(**cls.roster_fields(roster))


class AttendanceRosterResponse(RosterResponse):
    requires_guest_removal_dialog: bool = False


# ============================================
# Request Models
# ============================================


class GuestFields(CamelModel):
    display_name: str = Field(..., min_length=1, max_length=GUEST_NAME_MAX_LENGTH)
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING, strict=True)
    primary_position: Position
    secondary_position: Position | None = None

    @field_validator("display_name", mode="before")
    @classmethod
    def strip_display_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("secondary_position", mode="before")
    @classmethod
    def blank_secondary_is_none(cls, v: object) -> object:
        return None if v == "" else v
