"""Exception hierarchy for the SMS bridge."""

from __future__ import annotations


class SmsBridgeError(Exception):
    """Base exception for all SMS bridge errors."""


class TransportError(SmsBridgeError):
    """A call to the chat network failed (timeout, auth, not found, ...)."""

    def __init__(
        self,
        message: str,
        *,
        room_id: str | None = None,
        user_id: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.room_id = room_id
        self.user_id = user_id
        self.status_code = status_code


class InvariantViolationError(SmsBridgeError):
    """Bridge state diverged, or input could not be classified unambiguously."""


class AdminRoomError(SmsBridgeError):
    """An admin room could not be created for a user."""
