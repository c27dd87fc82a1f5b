"""Mock message relay for testing."""

from __future__ import annotations

from smsbridge.models.event import MessageEvent
from smsbridge.relay.base import MessageRelay


class MockMessageRelay(MessageRelay):
    """Records relayed messages for verification in tests."""

    def __init__(self, error: BaseException | None = None) -> None:
        self.relayed: list[MessageEvent] = []
        self.error = error

    async def relay(self, event: MessageEvent) -> None:
        if self.error is not None:
            raise self.error
        self.relayed.append(event)
