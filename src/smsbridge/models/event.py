"""Inbound transport event models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from smsbridge.models.enums import EventKind

MEMBER_EVENT_TYPE = "m.room.member"
MESSAGE_EVENT_TYPE = "m.room.message"


class _BaseEvent(BaseModel):
    event_id: str | None = None
    event_type: str
    sender: str
    room_id: str
    content: dict[str, Any] = Field(default_factory=dict)
    received_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class MemberEvent(_BaseEvent):
    """A membership change (invite, join, leave, ...)."""

    kind: Literal[EventKind.MEMBER] = EventKind.MEMBER
    event_type: str = MEMBER_EVENT_TYPE
    state_key: str
    membership: str


class MessageEvent(_BaseEvent):
    """A message posted into a room."""

    kind: Literal[EventKind.MESSAGE] = EventKind.MESSAGE
    event_type: str = MESSAGE_EVENT_TYPE
    body: str = ""
    msgtype: str = "m.text"


class OtherEvent(_BaseEvent):
    """Any event the bridge does not act on beyond admin dispatch."""

    kind: Literal[EventKind.OTHER] = EventKind.OTHER
    state_key: str | None = None


InboundEvent = Annotated[
    MemberEvent | MessageEvent | OtherEvent,
    Field(discriminator="kind"),
]


def parse_event(raw: dict[str, Any]) -> MemberEvent | MessageEvent | OtherEvent:
    """Convert a raw transport payload into a typed inbound event.

    Accepts the loosely structured shape delivered by the homeserver
    (``type``, ``sender``, ``room_id``, ``state_key``, ``content``) and picks
    the matching variant. ``membership`` is read from the top level first and
    falls back to ``content.membership``.

    Raises:
        pydantic.ValidationError: If required fields are missing.
    """
    content = raw.get("content")
    if not isinstance(content, dict):
        content = {}
    event_type = raw.get("type", "")
    common: dict[str, Any] = {
        "event_id": raw.get("event_id"),
        "event_type": event_type,
        "sender": raw.get("sender"),
        "room_id": raw.get("room_id"),
        "content": content,
    }

    if event_type == MEMBER_EVENT_TYPE:
        membership = raw.get("membership") or content.get("membership")
        if raw.get("state_key") is not None and membership:
            return MemberEvent(
                **common,
                state_key=raw["state_key"],
                membership=membership,
            )

    if event_type == MESSAGE_EVENT_TYPE:
        return MessageEvent(
            **common,
            body=str(content.get("body", "")),
            msgtype=str(content.get("msgtype", "m.text")),
        )

    return OtherEvent(**common, state_key=raw.get("state_key"))
