"""In-memory stand-ins for the asyncpg pool and the repositories.

The fake transaction snapshots every table on entry and restores it when the
block raises, mirroring asyncpg's rollback.
"""

from __future__ import annotations

import copy
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from uuid import UUID, uuid4

from kickabout.api.services import AttendanceService, GameService, GuestService, RosterService
from kickabout.shared.models import (
    AttendanceRecord,
    AttendanceStatus,
    Game,
    GameState,
    GuestSlot,
    GuestStatus,
    Position,
    Profile,
    RosterGuest,
    RosterPlayer,
    User,
    UserRole,
)

EPOCH = datetime(2026, 1, 1, tzinfo=UTC)


@dataclass
class FakeDatabase:
    games: dict[UUID, Game] = field(default_factory=dict)
    attendances: dict[tuple[UUID, str], AttendanceRecord] = field(default_factory=dict)
    guests: dict[UUID, GuestSlot] = field(default_factory=dict)
    users: dict[str, User] = field(default_factory=dict)
    profiles: dict[str, Profile] = field(default_factory=dict)
    transactions: list[dict] = field(default_factory=list)
    advisory_locks: int = 0
    writes: int = 0
    clock: int = 0

    _TABLES = ("games", "attendances", "guests", "users", "profiles")

    def now(self) -> datetime:
        self.clock += 1
        return EPOCH + timedelta(seconds=self.clock)

    def snapshot(self) -> dict:
        return {name: copy.deepcopy(getattr(self, name)) for name in self._TABLES}

    def restore(self, snapshot: dict) -> None:
        for name, table in snapshot.items():
            setattr(self, name, table)

    def add_user(
        self,
        user_id: str,
        *,
        role: UserRole = UserRole.PLAYER,
        nickname: str | None = None,
        profile: bool = True,
    ) -> User:
        user = User(id=user_id, email=f"{user_id}@example.com", role=role)
        self.users[user_id] = user
        if profile:
            self.profiles[user_id] = Profile(
                user_id=user_id,
                first_name=user_id.title(),
                last_name="Tester",
                nickname=nickname or user_id,
                rating=6,
                primary_position=Position.MID,
            )
        return user


class FakeConnection:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    @asynccontextmanager
    async def transaction(self, **kwargs):
        self.db.transactions.append(kwargs)
        snapshot = self.db.snapshot()
        try:
            yield
        except BaseException:
            self.db.restore(snapshot)
            raise


class FakePool:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    @asynccontextmanager
    async def acquire(self, timeout: float | None = None):
        yield FakeConnection(self.db)


class FakeGameRepository:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def get(self, game_id):
        return self.db.games.get(game_id)

    async def get_open(self):
        open_games = [g for g in self.db.games.values() if g.is_open]
        return max(open_games, key=lambda g: g.created_at, default=None)

    async def lock_creation(self, conn) -> None:
        self.db.advisory_locks += 1

    async def lock(self, conn, game_id):
        return self.db.games.get(game_id)

    async def archive_open(self, conn) -> int:
        archived = 0
        for game_id, game in list(self.db.games.items()):
            if game.is_open:
                self.db.games[game_id] = replace(
                    game, state=GameState.ARCHIVED, updated_at=self.db.now()
                )
                archived += 1
        return archived

    async def insert(self, conn, *, scheduled_at, location, markdown, created_by):
        now = self.db.now()
        game = Game(
            id=uuid4(),
            scheduled_at=scheduled_at,
            location=location,
            markdown=markdown,
            state=GameState.OPEN,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self.db.games[game.id] = game
        return game

    async def set_state(self, conn, game_id, state):
        game = replace(self.db.games[game_id], state=state, updated_at=self.db.now())
        self.db.games[game_id] = game
        return game


class FakeAttendanceRepository:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def get(self, conn, game_id, player_id):
        return self.db.attendances.get((game_id, player_id))

    async def upsert(self, conn, game_id, player_id, *, status, requested_status):
        self.db.writes += 1
        now = self.db.now()
        current = self.db.attendances.get((game_id, player_id))
        if current is None:
            record = AttendanceRecord(
                id=uuid4(),
                game_id=game_id,
                player_id=player_id,
                status=status,
                requested_status=requested_status,
                created_at=now,
                updated_at=now,
            )
        else:
            record = replace(
                current, status=status, requested_status=requested_status, updated_at=now
            )
        self.db.attendances[(game_id, player_id)] = record
        return record


class FakeGuestRepository:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    def _ordered(self, game_id):
        guests = [g for g in self.db.guests.values() if g.game_id == game_id]
        return sorted(guests, key=lambda g: (g.created_at, str(g.id)))

    async def get(self, guest_id):
        return self.db.guests.get(guest_id)

    async def list_by_inviter(self, game_id, inviter_id):
        return [g for g in self._ordered(game_id) if g.inviter_id == inviter_id]

    async def count_by_inviter(self, conn, game_id, inviter_id):
        return len(await self.list_by_inviter(game_id, inviter_id))

    async def lock_with_game_state(self, conn, guest_id):
        guest = self.db.guests.get(guest_id)
        if guest is None:
            return None
        return guest, self.db.games[guest.game_id].state

    async def insert(
        self,
        conn,
        *,
        game_id,
        inviter_id,
        display_name,
        rating,
        primary_position,
        secondary_position,
        status,
    ):
        self.db.writes += 1
        now = self.db.now()
        guest = GuestSlot(
            id=uuid4(),
            game_id=game_id,
            inviter_id=inviter_id,
            display_name=display_name,
            rating=rating,
            primary_position=primary_position,
            secondary_position=secondary_position,
            status=status,
            created_at=now,
            updated_at=now,
        )
        self.db.guests[guest.id] = guest
        return guest

    async def update(
        self, conn, guest_id, *, display_name, rating, primary_position, secondary_position
    ):
        current = self.db.guests.get(guest_id)
        if current is None:
            return None
        guest = replace(
            current,
            display_name=display_name,
            rating=rating,
            primary_position=primary_position,
            secondary_position=secondary_position,
            updated_at=self.db.now(),
        )
        self.db.guests[guest_id] = guest
        return guest

    async def delete(self, conn, guest_id):
        return self.db.guests.pop(guest_id, None) is not None


class FakeRosterRepository:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def count_confirmed(self, conn, game_id):
        players = sum(
            1
            for (g, _), record in self.db.attendances.items()
            if g == game_id and record.status.counts_toward_cap
        )
        guests = sum(
            1
            for guest in self.db.guests.values()
            if guest.game_id == game_id and guest.status is GuestStatus.CONFIRMED
        )
        return players + guests

    async def fetch_players(self, conn, game_id):
        records = [
            r
            for (g, _), r in self.db.attendances.items()
            if g == game_id and r.status is not AttendanceStatus.OUT
        ]
        records.sort(key=lambda r: (r.created_at, str(r.id)))
        return [
            RosterPlayer(attendance=r, player=self.db.profiles.get(r.player_id)) for r in records
        ]

    async def fetch_guests(self, conn, game_id):
        guests = [g for g in self.db.guests.values() if g.game_id == game_id]
        guests.sort(key=lambda g: (g.created_at, str(g.id)))
        return [RosterGuest(guest=g, inviter=self.db.profiles.get(g.inviter_id)) for g in guests]


class FakeUserRepository:
    def __init__(self, db: FakeDatabase) -> None:
        self.db = db

    async def get(self, user_id):
        return self.db.users.get(user_id)


def build_services(db: FakeDatabase) -> SimpleNamespace:
    """Wire the real services onto the in-memory repositories."""
    pool = FakePool(db)
    repos = {
        "games": FakeGameRepository(db),
        "attendances": FakeAttendanceRepository(db),
        "guests": FakeGuestRepository(db),
        "roster_repo": FakeRosterRepository(db),
    }
    roster = RosterService(pool, games=repos["games"], roster_repo=repos["roster_repo"])
    return SimpleNamespace(
        pool=pool,
        users=FakeUserRepository(db),
        games=GameService(pool, games=repos["games"]),
        roster=roster,
        attendance=AttendanceService(pool, roster_service=roster, **repos),
        guests=GuestService(pool, roster_service=roster, **repos),
    )
