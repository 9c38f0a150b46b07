"""JWT verification for incoming requests.

Tokens are issued by the login flow; ``create_access_token`` exists for
development seeding and tests.
"""

import logging
from datetime import UTC, datetime, timedelta

import jwt

logger = logging.getLogger(__name__)


class AuthService:
    """Encode and verify HS256 JWTs whose ``sub`` is the user id."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_days: int = 30):
        if not secret_key:
            raise ValueError("JWT secret key cannot be empty")

        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_days = expire_days

    def create_access_token(self, user_id: str) -> str:
        now = datetime.now(UTC)
        payload = {
            "sub": user_id,
            "exp": now + timedelta(days=self.expire_days),
            "iat": now,
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"JWT created for user: {user_id}")
        return token

    def verify_token(self, token: str) -> dict | None:
        """Return the payload of a valid token, or None."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("Token expired")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {e}")
            return None

        if not payload.get("sub"):
            logger.warning("Token missing sub")
            return None
        return payload
