"""Abstract base class for the chat → SMS message relay."""

from __future__ import annotations

from abc import ABC, abstractmethod

from smsbridge.models.event import MessageEvent


class MessageRelay(ABC):
    """Hands chat messages over to the SMS side of the bridge."""

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def relay(self, event: MessageEvent) -> None:
        """Deliver *event* to the SMS carrier, or queue it."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release resources. Override in subclasses that hold connections."""
