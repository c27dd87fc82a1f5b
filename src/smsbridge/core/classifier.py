"""Room classification — admin room or ordinary bridged room."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Collection

from smsbridge.core.directory import BridgeDirectory
from smsbridge.core.errors import InvariantViolationError, TransportError
from smsbridge.core.locks import InMemoryLockManager, KeyedLockManager, room_key
from smsbridge.models.enums import RoomCategory
from smsbridge.models.session import AdminSession, ClassificationResult
from smsbridge.telemetry.base import Attr, SpanKind, TelemetryProvider
from smsbridge.telemetry.noop import NoopTelemetryProvider
from smsbridge.transport.base import BridgeTransport

logger = logging.getLogger("smsbridge.classifier")


def decide_owner(
    members: Collection[str], bot_user_id: str, forced_owner: str | None = None
) -> str | None:
    """Return the admin-room owner implied by *members*, or ``None``.

    A room is an admin room when an owner is forced, or when exactly two
    users are joined: the bot and the owner.

    Raises:
        InvariantViolationError: Two members, no forced owner, and the bot is
            not one of them.
    """
    if forced_owner:
        return forced_owner
    if len(members) != 2:
        return None
    if bot_user_id not in members:
        raise InvariantViolationError(
            f"Two-member room without the bridge bot: {sorted(members)}"
        )
    (other,) = set(members) - {bot_user_id}
    return other


class RoomClassifier:
    """Decides a room's category from its live membership.

    Nothing about classification is persisted: the same membership always
    yields the same answer, so startup scans simply classify again. Calls for
    the same room are serialised on the room's lock.
    """

    def __init__(
        self,
        transport: BridgeTransport,
        directory: BridgeDirectory,
        *,
        lock_manager: KeyedLockManager | None = None,
        welcome_message: str | None = None,
        membership_timeout: float = 10.0,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        self._transport = transport
        self._directory = directory
        self._lock_manager = lock_manager or InMemoryLockManager()
        self._welcome_message = welcome_message
        self._membership_timeout = membership_timeout
        self._telemetry = telemetry or NoopTelemetryProvider()

    @property
    def directory(self) -> BridgeDirectory:
        return self._directory

    async def classify(
        self,
        room_id: str,
        forced_owner: str | None = None,
        new_room: bool = False,
    ) -> ClassificationResult:
        """Classify *room_id* and register its admin session if it has one.

        Args:
            room_id: Room to classify.
            forced_owner: Treat the room as this user's admin room regardless
                of membership (used right after the bridge creates one).
            new_room: The room was just created or joined, as opposed to being
                found by a startup scan. Only new admin rooms get the welcome
                notice.

        Raises:
            TransportError: The member list could not be fetched. Nothing was
                registered; the call can be retried.
            InvariantViolationError: Membership is degenerate or conflicts with
                an existing registration.
        """
        logger.info("Request to bridge room %s", room_id, extra={"room_id": room_id})
        t0 = time.monotonic()
        with self._telemetry.span(
            SpanKind.CLASSIFY,
            "classifier.classify",
            room_id=room_id,
            attributes={Attr.CLASSIFY_NEW_ROOM: new_room},
        ) as span_id:
            async with self._lock_manager.locked(room_key(room_id)):
                result = await self._classify_locked(room_id, forced_owner, new_room)
            self._telemetry.set_attribute(span_id, Attr.CLASSIFY_CATEGORY, str(result.category))
            self._telemetry.set_attribute(span_id, Attr.CLASSIFY_MEMBER_COUNT, result.member_count)
            self._telemetry.set_attribute(span_id, Attr.CLASSIFY_CREATED, result.created)

        self._telemetry.record_metric(
            "smsbridge.classify.ms",
            (time.monotonic() - t0) * 1000,
            unit="ms",
            attributes={Attr.CLASSIFY_CATEGORY: str(result.category)},
        )
        return result

    async def _classify_locked(
        self, room_id: str, forced_owner: str | None, new_room: bool
    ) -> ClassificationResult:
        members = await self._fetch_members(room_id)
        owner = decide_owner(members, self._transport.bot_user_id, forced_owner)

        if owner is None:
            logger.debug(
                "Room %s has %d members, treating as ordinary room", room_id, len(members)
            )
            return ClassificationResult(
                room_id=room_id,
                category=RoomCategory.ORDINARY,
                member_count=len(members),
            )

        existing = self._directory.get_by_room(room_id)
        if existing is not None and existing.owner == owner:
            return ClassificationResult(
                room_id=room_id,
                category=RoomCategory.ADMIN,
                session=existing,
                member_count=len(members),
            )

        session = self._directory.put(room_id, AdminSession(room_id=room_id, owner=owner))
        logger.info(
            "Added admin room %s for user %s",
            room_id,
            owner,
            extra={"room_id": room_id, "user_id": owner},
        )

        welcomed = False
        if new_room and self._welcome_message:
            welcomed = await self._send_welcome(room_id)

        return ClassificationResult(
            room_id=room_id,
            category=RoomCategory.ADMIN,
            session=session,
            member_count=len(members),
            created=True,
            welcomed=welcomed,
        )

    async def _fetch_members(self, room_id: str) -> set[str]:
        try:
            return await asyncio.wait_for(
                self._transport.get_joined_members(room_id),
                timeout=self._membership_timeout,
            )
        except TimeoutError as exc:
            raise TransportError(
                f"Timed out after {self._membership_timeout}s fetching members of {room_id}",
                room_id=room_id,
            ) from exc

    async def _send_welcome(self, room_id: str) -> bool:
        assert self._welcome_message is not None
        try:
            await self._transport.send_text(room_id, self._welcome_message)
        except TransportError:
            logger.warning(
                "Failed to send welcome notice to admin room %s",
                room_id,
                exc_info=True,
                extra={"room_id": room_id},
            )
            return False
        return True
