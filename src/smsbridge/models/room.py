"""Transport-facing room and profile models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StateEvent(BaseModel):
    """An initial state event applied when a room is created."""

    type: str
    state_key: str = ""
    content: dict[str, Any] = Field(default_factory=dict)


class RoomConfig(BaseModel):
    """Options for creating a room through the transport."""

    invitees: list[str] = Field(default_factory=list)
    visibility: str = "private"
    preset: str = "trusted_private_chat"
    is_direct: bool = False
    name: str | None = None
    initial_state: list[StateEvent] = Field(default_factory=list)

    @classmethod
    def admin_room(cls, owner: str) -> RoomConfig:
        """Private direct chat between the bot and *owner*, guests may join."""
        return cls(
            invitees=[owner],
            visibility="private",
            preset="trusted_private_chat",
            is_direct=True,
            initial_state=[
                StateEvent(type="m.room.guest_access", content={"guest_access": "can_join"})
            ],
        )


class Profile(BaseModel):
    """Public profile of a chat user."""

    user_id: str
    display_name: str | None = None
    avatar_ref: str | None = None
