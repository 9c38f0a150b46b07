"""Seed development users and print tokens for them.

Creates one admin and a squad of players with profiles. Existing rows are
updated in place, so the script can be re-run safely.

Usage:
    kickabout-seed             # Seed users and print a token for each
    kickabout-seed --quiet     # Seed users only
"""

import asyncio
import logging
import sys

from kickabout.api.core.config import get_settings
from kickabout.api.services import AuthService
from kickabout.shared.database import DatabaseManager, PoolConfig
from kickabout.shared.models import Position, Profile, UserRole
from kickabout.shared.repositories import UserRepository

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

ADMIN_ID = "dev_admin_1"

# (first name, last name, nickname, position, rating)
SAMPLE_PLAYERS = [
    ("Marco", "van Bergen", "Marco_VB", Position.GK, 8),
    ("Javier", "Rodriguez", "Javi_R", Position.DEF, 7),
    ("Ahmed", "El-Mansouri", "Ahmed_EM", Position.DEF, 6),
    ("Lucas", "Silva", "Lucas_S", Position.DEF, 8),
    ("Mohammed", "Hassan", "Mo_H", Position.DEF, 7),
    ("David", "Johnson", "Dave_J", Position.MID, 9),
    ("Kai", "Nakamura", "Kai_N", Position.MID, 6),
    ("Alessandro", "Rossi", "Alex_R", Position.MID, 8),
    ("Thiago", "Santos", "Thiago_S", Position.MID, 7),
    ("Omar", "Benali", "Omar_B", Position.MID, 5),
    ("Rafael", "Garcia", "Rafa_G", Position.ATT, 9),
    ("Kwame", "Asante", "Kwame_A", Position.ATT, 8),
    ("Dimitri", "Petrov", "Dimi_P", Position.ATT, 7),
    ("Carlos", "Mendez", "Carlos_M", Position.ATT, 6),
    ("Yuki", "Tanaka", "Yuki_T", Position.GK, 7),
    ("Viktor", "Johansson", "Viktor_J", Position.DEF, 8),
]


def _email(first_name: str, last_name: str) -> str:
    local = f"{first_name}.{last_name}".lower().replace(" ", "")
    return f"{local}@example.com"


async def seed(users: UserRepository, conn) -> list[tuple[str, str]]:
    """Upsert the admin and sample players. Returns (user id, nickname) pairs."""
    seeded: list[tuple[str, str]] = []

    await users.upsert_user(conn, ADMIN_ID, "admin@example.com", UserRole.ADMIN)
    await users.upsert_profile(
        conn,
        Profile(
            user_id=ADMIN_ID,
            first_name="Admin",
            last_name="User",
            nickname="Admin",
            rating=10,
            primary_position=Position.MID,
        ),
    )
    seeded.append((ADMIN_ID, "Admin"))

    for i, (first, last, nickname, position, rating) in enumerate(SAMPLE_PLAYERS, start=1):
        user_id = f"dev_player_{i}"
        await users.upsert_user(conn, user_id, _email(first, last), UserRole.PLAYER)
        await users.upsert_profile(
            conn,
            Profile(
                user_id=user_id,
                first_name=first,
                last_name=last,
                nickname=nickname,
                rating=rating,
                primary_position=position,
            ),
        )
        seeded.append((user_id, nickname))

    return seeded


async def run(print_tokens: bool) -> None:
    settings = get_settings()
    db = DatabaseManager(
        settings.database_url, PoolConfig(min_size=1, max_size=2, ssl=settings.database_ssl)
    )
    await db.connect()

    try:
        users = UserRepository(db.pool)
        async with db.pool.acquire() as conn:
            async with conn.transaction():
                seeded = await seed(users, conn)
        logger.info(f"Seeded {len(seeded)} users")
    finally:
        await db.disconnect()

    if print_tokens:
        auth = AuthService(
            settings.jwt_secret_key, settings.jwt_algorithm, settings.jwt_expire_days
        )
        for user_id, nickname in seeded:
            print(f"{nickname:<10} {user_id:<14} {auth.create_access_token(user_id)}")


def main() -> None:
    asyncio.run(run(print_tokens="--quiet" not in sys.argv))


if __name__ == "__main__":
    main()
