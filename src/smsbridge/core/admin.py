"""Admin room event handling."""

from __future__ import annotations

import logging

from smsbridge.models.event import InboundEvent
from smsbridge.models.session import AdminSession

logger = logging.getLogger("smsbridge.admin")


class AdminRoom:
    """Event handler bound to one :class:`AdminSession`.

    Admin rooms have no command grammar yet; events are recorded and logged
    so the room is ready for one.
    """

    def __init__(self, session: AdminSession, bot_user_id: str, history_size: int = 50) -> None:
        self._session = session
        self._bot_user_id = bot_user_id
        self._history_size = history_size
        self.history: list[InboundEvent] = []

    @property
    def session(self) -> AdminSession:
        return self._session

    @property
    def room_id(self) -> str:
        return self._session.room_id

    @property
    def owner(self) -> str:
        return self._session.owner

    async def handle_event(self, event: InboundEvent) -> None:
        if event.room_id != self.room_id:
            logger.warning(
                "Admin room %s received event for room %s, ignoring",
                self.room_id,
                event.room_id,
            )
            return
        if event.sender == self._bot_user_id:
            return

        self.history.append(event)
        if len(self.history) > self._history_size:
            del self.history[: len(self.history) - self._history_size]

        logger.debug(
            "Admin room %s (owner %s) got %s from %s",
            self.room_id,
            self.owner,
            event.event_type,
            event.sender,
            extra={"room_id": self.room_id, "user_id": event.sender},
        )
