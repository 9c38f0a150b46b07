from uuid import uuid4

import pytest

from kickabout.api.services.guest_service import validate_guest_fields
from kickabout.shared.constants import MAX_TOTAL_PLAYERS
from kickabout.shared.errors import (
    GameClosedError,
    GameNotFoundError,
    GameNotOpenError,
    GuestNotFoundError,
    InvalidRequestError,
    InviterNotEligibleError,
)
from kickabout.shared.models import AttendanceStatus, GuestStatus, Position

from .conftest import KICKOFF


@pytest.fixture
async def inviter(db, services, game):
    db.add_user("ines")
    await services.attendance.register_attendance("ines", game.id, AttendanceStatus.CONFIRMED)
    return "ines"


async def add_guest(services, inviter_id, game_id, name="Alex", **overrides):
    fields = {"display_name": name, "rating": 7, "primary_position": Position.ATT}
    fields.update(overrides)
    return await services.guests.create_guest_slot(inviter_id, game_id, **fields)


class TestCreateGuest:
    async def test_guest_confirmed_with_inviter_profile(self, services, game, inviter):
        roster = await add_guest(services, inviter, game.id, secondary_position="MID")

        [entry] = roster.guests.confirmed
        assert entry.guest.display_name == "Alex"
        assert entry.guest.status is GuestStatus.CONFIRMED
        assert entry.guest.secondary_position is Position.MID
        assert entry.inviter.nickname == "ines"
        assert roster.guests.waiting == []

    async def test_guest_waits_at_cap(self, services, game, inviter, fill_game):
        await fill_game(game.id, MAX_TOTAL_PLAYERS - 1)

        roster = await add_guest(services, inviter, game.id)

        assert [e.guest.display_name for e in roster.guests.waiting] == ["Alex"]
        assert roster.confirmed_total == MAX_TOTAL_PLAYERS

    async def test_guests_consume_shared_cap(self, services, game, inviter, fill_game):
        await fill_game(game.id, MAX_TOTAL_PLAYERS - 3)
        for name in ("G1", "G2", "G3"):
            await add_guest(services, inviter, game.id, name=name)

        roster = await services.roster.project(game.id)

        assert [e.guest.display_name for e in roster.guests.confirmed] == ["G1", "G2"]
        assert [e.guest.display_name for e in roster.guests.waiting] == ["G3"]
        assert roster.confirmed_total == MAX_TOTAL_PLAYERS

    async def test_waiting_inviter_may_invite(self, db, services, game):
        db.add_user("wes")
        await services.attendance.register_attendance("wes", game.id, AttendanceStatus.WAITING)
        roster = await add_guest(services, "wes", game.id)
        assert len(roster.guests.confirmed) == 1

    async def test_equal_positions_allowed(self, services, game, inviter):
        roster = await add_guest(
            services, inviter, game.id, primary_position="GK", secondary_position="GK"
        )
        guest = roster.guests.confirmed[0].guest
        assert guest.primary_position is guest.secondary_position is Position.GK

    async def test_name_is_trimmed(self, services, game, inviter):
        roster = await add_guest(services, inviter, game.id, name="  Alex  ")
        assert roster.guests.confirmed[0].guest.display_name == "Alex"

    async def test_unregistered_inviter_rejected(self, db, services, game):
        db.add_user("stranger")
        with pytest.raises(InviterNotEligibleError):
            await add_guest(services, "stranger", game.id)
        assert db.guests == {}

    async def test_out_inviter_rejected(self, db, services, game, inviter):
        await services.attendance.register_attendance(inviter, game.id, AttendanceStatus.OUT)
        with pytest.raises(InviterNotEligibleError, match="Only registered players"):
            await add_guest(services, inviter, game.id)

    async def test_unknown_game(self, services, inviter):
        with pytest.raises(GameNotFoundError):
            await add_guest(services, inviter, uuid4())

    async def test_closed_game_forbidden(self, db, services, game, inviter):
        await services.games.close_game(game.id)
        with pytest.raises(GameNotOpenError, match="guest registration"):
            await add_guest(services, inviter, game.id)
        assert db.guests == {}


class TestValidateGuestFields:
    def test_valid(self):
        assert validate_guest_fields(" Sam ", 10, "DEF", "") == ("Sam", 10, Position.DEF, None)

    @pytest.mark.parametrize("name", ["", "   ", None, "x" * 51])
    def test_bad_names(self, name):
        with pytest.raises(InvalidRequestError, match="displayName"):
            validate_guest_fields(name, 5, "DEF", None)

    def test_fifty_characters_allowed(self):
        name, *_ = validate_guest_fields("x" * 50, 5, "DEF", None)
        assert len(name) == 50

    @pytest.mark.parametrize("rating", [0, 11, -3, 5.5, "5", True])
    def test_bad_ratings(self, rating):
        with pytest.raises(InvalidRequestError, match="rating"):
            validate_guest_fields("Sam", rating, "DEF", None)

    @pytest.mark.parametrize(
        ("primary", "secondary"), [(None, None), ("STRIKER", None), ("DEF", "WING")]
    )
    def test_bad_positions(self, primary, secondary):
        with pytest.raises(InvalidRequestError, match="Position"):
            validate_guest_fields("Sam", 5, primary, secondary)


class TestDeleteGuest:
    async def test_delete_from_open_game(self, db, services, game, inviter):
        roster = await add_guest(services, inviter, game.id)
        guest_id = roster.guests.confirmed[0].guest.id

        roster = await services.guests.delete_guest_slot(guest_id)

        assert roster.guests.confirmed == []
        assert guest_id not in db.guests

    async def test_deleting_confirmed_guest_does_not_promote(
        self, services, game, inviter, fill_game
    ):
        await fill_game(game.id, MAX_TOTAL_PLAYERS - 2)
        first = (await add_guest(services, inviter, game.id, name="G1")).guests.confirmed[0]
        await add_guest(services, inviter, game.id, name="G2")

        roster = await services.guests.delete_guest_slot(first.guest.id)

        assert [e.guest.display_name for e in roster.guests.waiting] == ["G2"]

    async def test_closed_game_conflict(self, db, services, game, inviter):
        roster = await add_guest(services, inviter, game.id)
        guest_id = roster.guests.confirmed[0].guest.id
        await services.games.close_game(game.id)

        with pytest.raises(GameClosedError, match="without team rebalancing"):
            await services.guests.delete_guest_slot(guest_id)
        assert guest_id in db.guests

    async def test_archived_game_allows_delete(self, db, services, game, inviter):
        roster = await add_guest(services, inviter, game.id)
        guest_id = roster.guests.confirmed[0].guest.id
        await services.games.create_game(
            "admin", scheduled_at=KICKOFF, location="Pitch", markdown="Next week"
        )

        await services.guests.delete_guest_slot(guest_id)

        assert guest_id not in db.guests

    async def test_unknown_guest(self, services):
        with pytest.raises(GuestNotFoundError, match="Guest not found"):
            await services.guests.delete_guest_slot(uuid4())


class TestUpdateGuest:
    async def test_admin_edit_keeps_status(self, services, game, inviter, fill_game):
        await fill_game(game.id, MAX_TOTAL_PLAYERS - 1)
        roster = await add_guest(services, inviter, game.id)
        guest = roster.guests.waiting[0].guest

        updated = await services.guests.update_guest_slot(
            guest.id, display_name="Alexandre", rating=9, primary_position="MID"
        )

        assert updated.display_name == "Alexandre"
        assert updated.rating == 9
        assert updated.primary_position is Position.MID
        assert updated.secondary_position is None
        assert updated.status is GuestStatus.WAITING
        assert updated.created_at == guest.created_at

    async def test_unknown_guest(self, services):
        with pytest.raises(GuestNotFoundError):
            await services.guests.update_guest_slot(
                uuid4(), display_name="Sam", rating=5, primary_position="GK"
            )

    async def test_invalid_fields(self, services, game, inviter):
        roster = await add_guest(services, inviter, game.id)
        guest_id = roster.guests.confirmed[0].guest.id
        with pytest.raises(InvalidRequestError):
            await services.guests.update_guest_slot(
                guest_id, display_name="Sam", rating=12, primary_position="GK"
            )


class TestGuestsByInviter:
    async def test_lists_only_own_guests_in_order(self, db, services, game, inviter):
        db.add_user("other")
        await services.attendance.register_attendance("other", game.id, AttendanceStatus.CONFIRMED)
        await add_guest(services, inviter, game.id, name="First")
        await add_guest(services, "other", game.id, name="Theirs")
        await add_guest(services, inviter, game.id, name="Second")

        guests = await services.guests.get_guests_by_inviter(game.id, inviter)

        assert [g.display_name for g in guests] == ["First", "Second"]

    async def test_get_guest(self, services, game, inviter):
        roster = await add_guest(services, inviter, game.id)
        guest = roster.guests.confirmed[0].guest
        assert await services.guests.get_guest(guest.id) == guest
        assert await services.guests.get_guest(uuid4()) is None
