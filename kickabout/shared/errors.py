"""Domain errors raised by the attendance engine.

Every error carries a ``kind`` that the HTTP layer maps to a status code, and a
stable message that callers may match on.
"""

from __future__ import annotations

from uuid import UUID


class KickaboutError(Exception):
    """Base class for expected, classifiable failures."""

    kind = "internal"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(KickaboutError):
    kind = "not_found"


class ForbiddenError(KickaboutError):
    kind = "forbidden"


class ConflictError(KickaboutError):
    kind = "conflict"


class InvalidRequestError(KickaboutError, ValueError):
    kind = "invalid"


class GameNotFoundError(NotFoundError):
    def __init__(self, game_id: UUID | str) -> None:
        super().__init__("Game not found")
        self.game_id = game_id


class GuestNotFoundError(NotFoundError):
    def __init__(self, guest_id: UUID | str) -> None:
        super().__init__("Guest not found")
        self.guest_id = guest_id


class GameNotOpenError(ForbiddenError):
    def __init__(self, game_id: UUID | str, action: str = "attendance changes") -> None:
        super().__init__(f"Game is not open for {action}")
        self.game_id = game_id


class InviterNotEligibleError(ForbiddenError):
    def __init__(self, inviter_id: str) -> None:
        super().__init__("Only registered players can invite guests")
        self.inviter_id = inviter_id


class GameClosedError(ConflictError):
    def __init__(self, game_id: UUID | str) -> None:
        super().__init__("Cannot delete guest from closed game without team rebalancing")
        self.game_id = game_id


class GameStateConflictError(ConflictError):
    def __init__(self, game_id: UUID | str, state: str) -> None:
        super().__init__(f"Game is {state}, only OPEN games can be closed")
        self.game_id = game_id
