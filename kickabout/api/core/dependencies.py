"""Dependency injection utilities for FastAPI"""

import logging

import asyncpg
from fastapi import Cookie, Depends, Header, HTTPException

from kickabout.api.services import (
    AttendanceService,
    AuthService,
    GameService,
    GuestService,
    RosterService,
)
from kickabout.shared.models import User
from kickabout.shared.repositories import UserRepository

from .config import get_settings
from .database import get_database_manager

logger = logging.getLogger(__name__)


# ============================================
# Infrastructure Dependencies
# ============================================


def get_auth_service() -> AuthService:
    settings = get_settings()
    return AuthService(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_days=settings.jwt_expire_days,
    )


def get_db_pool() -> asyncpg.Pool:
    db_manager = get_database_manager()
    if db_manager is None or not db_manager.is_connected:
        raise HTTPException(status_code=503, detail="Database not ready")
    return db_manager.pool


# ============================================
# Service Dependencies
# ============================================


def get_user_repository(pool: asyncpg.Pool = Depends(get_db_pool)) -> UserRepository:
    return UserRepository(pool)


def get_game_service(pool: asyncpg.Pool = Depends(get_db_pool)) -> GameService:
    return GameService(pool)


def get_roster_service(pool: asyncpg.Pool = Depends(get_db_pool)) -> RosterService:
    return RosterService(pool)


def get_attendance_service(pool: asyncpg.Pool = Depends(get_db_pool)) -> AttendanceService:
    return AttendanceService(pool)


def get_guest_service(pool: asyncpg.Pool = Depends(get_db_pool)) -> GuestService:
    return GuestService(pool)


# ============================================
# Authentication Dependencies
# ============================================


def _bearer_token(authorization: str | None, cookie_token: str | None) -> str | None:
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
        return None
    return cookie_token


async def get_current_user_id(
    authorization: str | None = Header(None),
    auth_token: str | None = Cookie(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """Return the caller's user id from a Bearer header or the auth_token cookie"""
    token = _bearer_token(authorization, auth_token)
    if not token:
        logger.warning("No auth token provided")
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")

    payload = auth_service.verify_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return str(payload["sub"])


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    user = await users.get(user_id)
    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        logger.warning(f"User {user.id} denied admin access")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
