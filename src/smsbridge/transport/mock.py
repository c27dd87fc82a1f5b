"""Mock transport for testing."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from uuid import uuid4

from smsbridge.core.errors import TransportError
from smsbridge.models.room import Profile, RoomConfig
from smsbridge.transport.base import BridgeTransport


class MockTransport(BridgeTransport):
    """In-memory chat network that records every call.

    Rooms and their members live in ``rooms``. Failures can be injected per
    method with :meth:`fail`, and ``delay`` makes every call yield to the
    event loop first so concurrent callers interleave.
    """

    def __init__(self, bot_user_id: str = "@smsbot:example.org", delay: float = 0.0) -> None:
        self._bot_user_id = bot_user_id
        self.delay = delay
        self.rooms: dict[str, set[str]] = {}
        self.created: list[RoomConfig] = []
        self.joins: list[tuple[str, str]] = []
        self.sent: list[tuple[str, str]] = []
        self.profiles: dict[str, Profile] = {}
        self.profile_updates: list[dict[str, str | None]] = []
        self._failures: dict[str, TransportError] = {}
        self.closed = False

    @property
    def bot_user_id(self) -> str:
        return self._bot_user_id

    def add_room(self, room_id: str, members: Iterable[str]) -> None:
        """Seed a room the bot is joined to."""
        self.rooms[room_id] = set(members)

    def fail(self, method: str, error: TransportError | None = None) -> None:
        """Make every subsequent call to *method* raise."""
        self._failures[method] = error or TransportError(f"{method} failed")

    def recover(self, method: str) -> None:
        self._failures.pop(method, None)

    async def _enter(self, method: str) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        else:
            await asyncio.sleep(0)
        error = self._failures.get(method)
        if error is not None:
            raise error

    async def get_joined_rooms(self) -> list[str]:
        await self._enter("get_joined_rooms")
        return [room_id for room_id, members in self.rooms.items() if self._bot_user_id in members]

    async def get_joined_members(self, room_id: str) -> set[str]:
        await self._enter("get_joined_members")
        if room_id not in self.rooms:
            raise TransportError(f"Room {room_id} not found", room_id=room_id, status_code=404)
        return set(self.rooms[room_id])

    async def create_room(self, config: RoomConfig) -> str:
        await self._enter("create_room")
        room_id = f"!{uuid4().hex[:12]}:example.org"
        self.created.append(config)
        # Invitees accept immediately.
        self.rooms[room_id] = {self._bot_user_id, *config.invitees}
        return room_id

    async def join_room_as(self, user_id: str, room_id: str) -> None:
        await self._enter("join_room_as")
        self.joins.append((user_id, room_id))
        self.rooms.setdefault(room_id, set()).add(user_id)

    async def send_text(self, room_id: str, text: str) -> None:
        await self._enter("send_text")
        self.sent.append((room_id, text))

    async def set_profile(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        avatar_ref: str | None = None,
    ) -> None:
        await self._enter("set_profile")
        self.profile_updates.append(
            {"user_id": user_id, "display_name": display_name, "avatar_ref": avatar_ref}
        )
        current = self.profiles.get(user_id, Profile(user_id=user_id))
        update: dict[str, str] = {}
        if display_name is not None:
            update["display_name"] = display_name
        if avatar_ref is not None:
            update["avatar_ref"] = avatar_ref
        self.profiles[user_id] = current.model_copy(update=update)

    async def get_profile(self, user_id: str) -> Profile:
        await self._enter("get_profile")
        return self.profiles.get(user_id, Profile(user_id=user_id))

    def sent_to(self, room_id: str) -> list[str]:
        return [text for rid, text in self.sent if rid == room_id]

    async def close(self) -> None:
        self.closed = True
