"""Repository for the users and profiles tables."""

from __future__ import annotations

import asyncpg

from ..models.user import Profile, User, UserRole


class UserRepository:
    """Role lookups for authorization, plus the upserts used by seeding."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool

    async def get(self, user_id: str) -> User | None:
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow("SELECT id, email, role FROM users WHERE id = $1", user_id)
            return User(**dict(row)) if row else None

    async def upsert_user(
        self, conn: asyncpg.Connection, user_id: str, email: str, role: UserRole
    ) -> User:
        row = await conn.fetchrow(
            """
            INSERT INTO users (id, email, role)
            VALUES ($1, $2, $3)
            ON CONFLICT (id) DO UPDATE SET
                email      = EXCLUDED.email,
                role       = EXCLUDED.role,
                updated_at = NOW()
            RETURNING id, email, role
            """,
            user_id,
            email,
            role.value,
        )
        return User(**dict(row))

    async def upsert_profile(self, conn: asyncpg.Connection, profile: Profile) -> None:
        await conn.execute(
            """
            INSERT INTO profiles
                (user_id, first_name, last_name, nickname, rating,
                 primary_position, secondary_position)
            VALUES ($1, $2, $3, $4, $5, $6, $7)
            ON CONFLICT (user_id) DO UPDATE SET
                first_name         = EXCLUDED.first_name,
                last_name          = EXCLUDED.last_name,
                nickname           = EXCLUDED.nickname,
                rating             = EXCLUDED.rating,
                primary_position   = EXCLUDED.primary_position,
                secondary_position = EXCLUDED.secondary_position,
                updated_at         = NOW()
            """,
            profile.user_id,
            profile.first_name,
            profile.last_name,
            profile.nickname,
            profile.rating,
            profile.primary_position.value,
            profile.secondary_position.value if profile.secondary_position else None,
        )
