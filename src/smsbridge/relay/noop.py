"""Relay that accepts messages and drops them."""

from __future__ import annotations

import logging

from smsbridge.models.event import MessageEvent
from smsbridge.relay.base import MessageRelay

logger = logging.getLogger("smsbridge.relay")


class NoopMessageRelay(MessageRelay):
    """Default relay used until an SMS carrier is wired in."""

    async def relay(self, event: MessageEvent) -> None:
        logger.debug(
            "No SMS relay configured, dropping message from %s in %s",
            event.sender,
            event.room_id,
        )
