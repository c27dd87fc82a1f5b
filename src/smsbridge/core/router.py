"""Inbound event router — the bridge's single entry point for transport events."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from smsbridge.core.admin import AdminRoom
from smsbridge.core.classifier import RoomClassifier
from smsbridge.core.directory import BridgeDirectory
from smsbridge.core.errors import SmsBridgeError
from smsbridge.identity.resolver import VirtualIdentityResolver
from smsbridge.models.enums import Membership
from smsbridge.models.event import (
    InboundEvent,
    MemberEvent,
    MessageEvent,
    OtherEvent,
    parse_event,
)
from smsbridge.models.session import ClassificationResult
from smsbridge.relay.base import MessageRelay
from smsbridge.relay.noop import NoopMessageRelay
from smsbridge.telemetry.base import Attr, SpanKind, TelemetryProvider
from smsbridge.telemetry.noop import NoopTelemetryProvider
from smsbridge.transport.base import BridgeTransport

logger = logging.getLogger("smsbridge.router")


class EventRouter:
    """Dispatches each inbound event independently.

    For every event, in order and without short-circuiting:

    1. If the room is an admin room, its :class:`AdminRoom` handles the event.
    2. An invite for a bridge-controlled user is accepted on that user's
       behalf and the room is classified as new.
    3. A message not sent by the bridge bot is handed to the message relay.

    No failure escapes :meth:`on_inbound_event`; a broken room never stalls
    the events that follow it.
    """

    def __init__(
        self,
        transport: BridgeTransport,
        directory: BridgeDirectory,
        classifier: RoomClassifier,
        resolver: VirtualIdentityResolver,
        *,
        relay: MessageRelay | None = None,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        self._transport = transport
        self._directory = directory
        self._classifier = classifier
        self._resolver = resolver
        self._relay = relay or NoopMessageRelay()
        self._telemetry = telemetry or NoopTelemetryProvider()
        self._admin_rooms: dict[str, AdminRoom] = {}

    @property
    def relay(self) -> MessageRelay:
        return self._relay

    async def on_inbound_event(self, event: InboundEvent | dict[str, Any]) -> None:
        """Handle one transport event. Only cancellation propagates."""
        try:
            parsed = event if not isinstance(event, dict) else parse_event(event)
        except ValidationError:
            logger.warning("Dropping malformed event: %r", event, exc_info=True)
            return

        try:
            with self._telemetry.span(
                SpanKind.INBOUND_EVENT,
                "router.on_inbound_event",
                room_id=parsed.room_id,
                attributes={Attr.EVENT_TYPE: parsed.event_type, Attr.EVENT_KIND: parsed.kind},
            ):
                await self._dispatch(parsed)
        except SmsBridgeError as exc:
            logger.error(
                "Failed to process %s in room %s from %s: %s",
                parsed.event_type,
                parsed.room_id,
                parsed.sender,
                exc,
                extra={"room_id": parsed.room_id, "user_id": parsed.sender},
            )
        except Exception:
            logger.exception(
                "Unexpected error processing %s in room %s",
                parsed.event_type,
                parsed.room_id,
                extra={"room_id": parsed.room_id, "user_id": parsed.sender},
            )

    async def _dispatch(self, event: InboundEvent) -> None:
        await self._dispatch_admin(event)

        match event:
            case MemberEvent():
                if self._is_bridge_invite(event):
                    await self._accept_invite(event)
            case MessageEvent():
                if event.sender != self._transport.bot_user_id:
                    await self._relay.relay(event)
            case OtherEvent():
                pass

    async def _dispatch_admin(self, event: InboundEvent) -> None:
        admin_room = self.admin_room(event.room_id)
        if admin_room is None:
            return
        try:
            await admin_room.handle_event(event)
        except Exception:
            # Invite handling and relaying still run for this event.
            logger.exception(
                "Admin room %s failed to handle %s",
                event.room_id,
                event.event_type,
                extra={"room_id": event.room_id, "user_id": event.sender},
            )

    def _is_bridge_invite(self, event: MemberEvent) -> bool:
        return event.membership == Membership.INVITE and self._resolver.is_bridge_controlled(
            event.state_key
        )

    async def _accept_invite(self, event: MemberEvent) -> None:
        logger.info(
            "%s received invite to room %s",
            event.state_key,
            event.room_id,
            extra={"room_id": event.room_id, "user_id": event.state_key},
        )
        await self._transport.join_room_as(event.state_key, event.room_id)
        await self._classifier.classify(event.room_id, new_room=True)

    def admin_room(self, room_id: str) -> AdminRoom | None:
        """The handler for *room_id* if the directory knows it as an admin room."""
        session = self._directory.get_by_room(room_id)
        if session is None:
            return None
        handler = self._admin_rooms.get(room_id)
        if handler is None or handler.session is not session:
            handler = AdminRoom(session, self._transport.bot_user_id)
            self._admin_rooms[room_id] = handler
        return handler

    async def reconcile(self) -> list[ClassificationResult]:
        """Re-classify every room the bot is in, after a (re)start.

        Rooms are classified concurrently and without welcome notices.
        A room that fails is logged and left for the next scan or event.

        Raises:
            TransportError: The joined-room list itself could not be fetched.
        """
        with self._telemetry.span(SpanKind.RECONCILE, "router.reconcile") as span_id:
            room_ids = await self._transport.get_joined_rooms()
            logger.info("Reconciling %d joined rooms", len(room_ids))
            outcomes = await asyncio.gather(
                *(self._classifier.classify(room_id, new_room=False) for room_id in room_ids),
                return_exceptions=True,
            )

            results: list[ClassificationResult] = []
            failures = 0
            for room_id, outcome in zip(room_ids, outcomes, strict=True):
                if isinstance(outcome, ClassificationResult):
                    results.append(outcome)
                    continue
                if not isinstance(outcome, Exception):
                    raise outcome
                failures += 1
                logger.error(
                    "Failed to classify room %s during startup: %s",
                    room_id,
                    outcome,
                    exc_info=outcome if not isinstance(outcome, SmsBridgeError) else None,
                    extra={"room_id": room_id},
                )

            self._telemetry.set_attribute(span_id, Attr.RECONCILE_ROOMS, len(room_ids))
            self._telemetry.set_attribute(span_id, Attr.RECONCILE_FAILURES, failures)
        return results
