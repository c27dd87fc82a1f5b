"""SmsBridge — wires the bridge core together and runs its startup routine."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from smsbridge.config import SmsBridgeConfig
from smsbridge.core.classifier import RoomClassifier
from smsbridge.core.directory import BridgeDirectory
from smsbridge.core.errors import AdminRoomError, TransportError
from smsbridge.core.locks import InMemoryLockManager, KeyedLockManager, owner_key
from smsbridge.core.profile import BotProfileUpdater
from smsbridge.core.router import EventRouter
from smsbridge.identity.phone import is_canonical, normalize_phone
from smsbridge.identity.resolver import VirtualIdentityResolver
from smsbridge.models.event import InboundEvent
from smsbridge.models.room import RoomConfig
from smsbridge.models.session import AdminSession, ClassificationResult
from smsbridge.relay.base import MessageRelay
from smsbridge.store.base import AccountDataStore
from smsbridge.store.memory import InMemoryAccountDataStore
from smsbridge.telemetry.base import Attr, SpanKind, TelemetryProvider
from smsbridge.telemetry.noop import NoopTelemetryProvider
from smsbridge.transport.base import BridgeTransport

logger = logging.getLogger("smsbridge.bridge")


class SmsBridge:
    """Central object tying transport, directory, classifier and router."""

    def __init__(
        self,
        config: SmsBridgeConfig,
        transport: BridgeTransport,
        *,
        store: AccountDataStore | None = None,
        relay: MessageRelay | None = None,
        directory: BridgeDirectory | None = None,
        lock_manager: KeyedLockManager | None = None,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        """Initialise the bridge.

        Args:
            config: Bridge configuration.
            transport: Chat-network transport the bot acts through.
            store: Account-data store. Defaults to ``InMemoryAccountDataStore``.
            relay: Where chat messages go. Defaults to ``NoopMessageRelay``.
            directory: Admin room registry. A fresh one is created by default;
                pass one in to share or inspect it.
            lock_manager: Keyed locking backend. Defaults to
                ``InMemoryLockManager`` sized by ``config.max_locks``.
            telemetry: Span/metric provider. Defaults to
                ``NoopTelemetryProvider``.
        """
        logger.info("Constructing bridge")
        self._config = config
        self._transport = transport
        self._store = store or InMemoryAccountDataStore()
        self._directory = directory if directory is not None else BridgeDirectory()
        self._lock_manager = lock_manager or InMemoryLockManager(max_locks=config.max_locks)
        self._telemetry = telemetry or NoopTelemetryProvider()
        self._resolver = VirtualIdentityResolver(transport.bot_user_id, config.domain)
        self._classifier = RoomClassifier(
            transport,
            self._directory,
            lock_manager=self._lock_manager,
            welcome_message=config.welcome_message,
            membership_timeout=config.membership_timeout,
            telemetry=self._telemetry,
        )
        self._router = EventRouter(
            transport,
            self._directory,
            self._classifier,
            self._resolver,
            relay=relay,
            telemetry=self._telemetry,
        )
        self._profile = BotProfileUpdater(
            transport, self._store, config.bot, telemetry=self._telemetry
        )

    @property
    def config(self) -> SmsBridgeConfig:
        return self._config

    @property
    def transport(self) -> BridgeTransport:
        return self._transport

    @property
    def directory(self) -> BridgeDirectory:
        return self._directory

    @property
    def resolver(self) -> VirtualIdentityResolver:
        return self._resolver

    @property
    def classifier(self) -> RoomClassifier:
        return self._classifier

    @property
    def router(self) -> EventRouter:
        return self._router

    @property
    def bot_user_id(self) -> str:
        return self._transport.bot_user_id

    def virtual_identity(self, phone_number: str) -> str:
        """Virtual chat identity representing *phone_number*.

        Canonical digit strings are used as given. Anything else, such as
        ``"+1 (650) 253-0000"``, is normalised first, which needs the
        ``phonenumbers`` extra.

        Raises:
            ValueError: *phone_number* is not a valid phone number.
        """
        if not is_canonical(phone_number):
            phone_number = normalize_phone(phone_number, self._config.default_region)
        return self._resolver.identity_for_number(phone_number)

    async def start(self) -> list[ClassificationResult]:
        """Run the startup routine: refresh the bot profile, then re-scan rooms."""
        logger.info("Starting bridge")
        await self._profile.update()
        return await self._router.reconcile()

    async def on_inbound_event(self, event: InboundEvent | dict[str, Any]) -> None:
        """Entry point for the transport runtime. Never raises."""
        await self._router.on_inbound_event(event)

    async def get_or_create_admin_room(self, user_id: str) -> AdminSession:
        """Return *user_id*'s admin session, creating the room if needed.

        Serialised per owner: concurrent calls for one user create at most
        one room, and later callers get the session the first one made.

        Raises:
            TransportError: Room creation or membership lookup failed.
            AdminRoomError: The new room did not classify as an admin room.
            InvariantViolationError: The new room conflicts with an existing
                registration.
        """
        existing = self._directory.get_by_owner(user_id)
        if existing is not None:
            return existing

        async with self._lock_manager.locked(owner_key(user_id)):
            existing = self._directory.get_by_owner(user_id)
            if existing is not None:
                return existing

            with self._telemetry.span(
                SpanKind.ADMIN_ROOM_CREATE,
                "bridge.create_admin_room",
                attributes={Attr.USER_ID: user_id},
            ):
                room_id = await self._create_room(RoomConfig.admin_room(user_id))
                logger.info(
                    "Created admin room %s for %s",
                    room_id,
                    user_id,
                    extra={"room_id": room_id, "user_id": user_id},
                )
                result = await self._classifier.classify(room_id, forced_owner=user_id)

            if result.session is None:
                raise AdminRoomError(f"Could not create admin room for {user_id}")
            return result.session

    async def _create_room(self, room_config: RoomConfig) -> str:
        timeout = self._config.create_room_timeout
        try:
            return await asyncio.wait_for(
                self._transport.create_room(room_config), timeout=timeout
            )
        except TimeoutError as exc:
            raise TransportError(f"Timed out after {timeout}s creating room") from exc

    async def close(self) -> None:
        """Close the relay, the transport and the telemetry provider."""
        await self._router.relay.close()
        await self._transport.close()
        self._telemetry.close()

    async def __aenter__(self) -> SmsBridge:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
