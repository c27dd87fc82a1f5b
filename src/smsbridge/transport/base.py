"""Abstract base class for the chat-network transport."""

from __future__ import annotations

from abc import ABC, abstractmethod

from smsbridge.models.room import Profile, RoomConfig


class BridgeTransport(ABC):
    """The chat-network operations the bridge core relies on.

    Implementations raise :class:`~smsbridge.core.errors.TransportError` for
    any network, auth or not-found failure. The core never retries; retry
    policy belongs to the implementation or its caller.
    """

    @property
    @abstractmethod
    def bot_user_id(self) -> str:
        """User ID of the bridge bot."""
        ...

    def get_bridge_bot_identity(self) -> str:
        return self.bot_user_id

    @abstractmethod
    async def get_joined_rooms(self) -> list[str]:
        """Rooms the bridge bot is currently joined to."""
        ...

    @abstractmethod
    async def get_joined_members(self, room_id: str) -> set[str]:
        """User IDs currently joined to *room_id*."""
        ...

    @abstractmethod
    async def create_room(self, config: RoomConfig) -> str:
        """Create a room as the bridge bot and return its room ID."""
        ...

    @abstractmethod
    async def join_room_as(self, user_id: str, room_id: str) -> None:
        """Join *room_id* on behalf of a bridge-controlled *user_id*."""
        ...

    @abstractmethod
    async def send_text(self, room_id: str, text: str) -> None:
        """Post a plain-text notice into *room_id* as the bridge bot."""
        ...

    @abstractmethod
    async def set_profile(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        avatar_ref: str | None = None,
    ) -> None:
        """Update the display name and/or avatar of a bridge-controlled user."""
        ...

    @abstractmethod
    async def get_profile(self, user_id: str) -> Profile:
        """Fetch the public profile of *user_id*."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release resources. Override in subclasses that hold connections."""
