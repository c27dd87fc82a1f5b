"""Tests for SmsBridge startup and admin room creation."""

from __future__ import annotations

import asyncio

import pytest

from smsbridge.config import SmsBridgeConfig
from smsbridge.core.bridge import SmsBridge
from smsbridge.core.directory import BridgeDirectory
from smsbridge.core.errors import AdminRoomError, TransportError
from smsbridge.models.enums import RoomCategory
from smsbridge.models.room import RoomConfig
from smsbridge.models.session import ClassificationResult
from smsbridge.relay.mock import MockMessageRelay
from smsbridge.telemetry.base import Attr, SpanKind
from smsbridge.telemetry.mock import MockTelemetryProvider
from smsbridge.transport.mock import MockTransport
from tests.conftest import ALICE, BOB, BOT, CAROL, invite_event, make_config


class TestStart:
    async def test_startup_scan_classifies_without_welcome(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        transport.add_room("!bob", {BOT, BOB})
        transport.add_room("!group", {BOT, ALICE, CAROL})
        transport.add_room("!not-joined", {ALICE, CAROL})

        results = await bridge.start()

        assert {r.room_id for r in results} == {"!bob", "!group"}
        session = bridge.directory.get_by_owner(BOB)
        assert session is not None
        assert session.room_id == "!bob"
        assert len(bridge.directory) == 1
        assert transport.sent == []

    async def test_startup_scan_is_idempotent(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        transport.add_room("!bob", {BOT, BOB})
        await bridge.start()
        await bridge.start()
        assert len(bridge.directory) == 1
        assert transport.sent == []

    async def test_failing_room_does_not_stop_scan(
        self, config: SmsBridgeConfig, telemetry: MockTelemetryProvider
    ) -> None:
        class _FlakyTransport(MockTransport):
            async def get_joined_members(self, room_id: str) -> set[str]:
                if room_id == "!broken":
                    raise TransportError("boom", room_id=room_id)
                return await super().get_joined_members(room_id)

        transport = _FlakyTransport(bot_user_id=BOT)
        transport.add_room("!broken", {BOT, ALICE})
        transport.add_room("!bob", {BOT, BOB})
        bridge = SmsBridge(config, transport, telemetry=telemetry)

        results = await bridge.start()

        assert [r.room_id for r in results] == ["!bob"]
        assert bridge.directory.get_by_owner(BOB) is not None
        assert bridge.directory.get_by_room("!broken") is None
        span = telemetry.get_spans(SpanKind.RECONCILE)[0]
        assert span.attributes[Attr.RECONCILE_ROOMS] == 2
        assert span.attributes[Attr.RECONCILE_FAILURES] == 1

    async def test_joined_rooms_failure_propagates(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        transport.fail("get_joined_rooms")
        with pytest.raises(TransportError):
            await bridge.start()

    async def test_start_updates_profile(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        await bridge.start()
        profile = await transport.get_profile(BOT)
        assert profile.display_name == "SMS Bridge"

    async def test_scan_then_invite_does_not_rewelcome(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        transport.add_room("!bob", {BOT, BOB})
        await bridge.start()
        await bridge.on_inbound_event(invite_event("!bob", BOT, sender=BOB))
        assert transport.sent == []
        assert len(bridge.directory) == 1


class TestGetOrCreateAdminRoom:
    async def test_creates_private_direct_room(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        session = await bridge.get_or_create_admin_room(ALICE)

        assert session.owner == ALICE
        assert bridge.directory.get_by_owner(ALICE) == session
        assert len(transport.created) == 1
        assert transport.created[0] == RoomConfig.admin_room(ALICE)

    async def test_returns_existing_session(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        transport.add_room("!alice", {BOT, ALICE})
        await bridge.start()

        session = await bridge.get_or_create_admin_room(ALICE)

        assert session.room_id == "!alice"
        assert transport.created == []

    async def test_concurrent_calls_create_one_room(self, config: SmsBridgeConfig) -> None:
        transport = MockTransport(bot_user_id=BOT, delay=0.01)
        bridge = SmsBridge(config, transport)

        sessions = await asyncio.gather(
            *(bridge.get_or_create_admin_room(ALICE) for _ in range(5))
        )

        assert len(transport.created) == 1
        assert len({s.room_id for s in sessions}) == 1
        assert len(bridge.directory) == 1

    async def test_different_owners_do_not_block_each_other(
        self, config: SmsBridgeConfig
    ) -> None:
        transport = MockTransport(bot_user_id=BOT, delay=0.01)
        bridge = SmsBridge(config, transport)

        alice, bob = await asyncio.gather(
            bridge.get_or_create_admin_room(ALICE),
            bridge.get_or_create_admin_room(BOB),
        )

        assert alice.room_id != bob.room_id
        assert len(transport.created) == 2

    async def test_create_failure_propagates(
        self, bridge: SmsBridge, transport: MockTransport
    ) -> None:
        transport.fail("create_room")
        with pytest.raises(TransportError):
            await bridge.get_or_create_admin_room(ALICE)
        assert len(bridge.directory) == 0

    async def test_create_timeout(self) -> None:
        transport = MockTransport(bot_user_id=BOT, delay=0.5)
        bridge = SmsBridge(make_config(create_room_timeout=0.01), transport)
        with pytest.raises(TransportError):
            await bridge.get_or_create_admin_room(ALICE)

    async def test_unclassifiable_room_raises(
        self, bridge: SmsBridge, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def _ordinary(room_id: str, **_: object) -> ClassificationResult:
            return ClassificationResult(room_id=room_id, category=RoomCategory.ORDINARY)

        monkeypatch.setattr(bridge.classifier, "classify", _ordinary)

        with pytest.raises(AdminRoomError):
            await bridge.get_or_create_admin_room(ALICE)

    async def test_records_span(self, bridge: SmsBridge, telemetry: MockTelemetryProvider) -> None:
        await bridge.get_or_create_admin_room(ALICE)
        spans = telemetry.get_spans(SpanKind.ADMIN_ROOM_CREATE)
        assert len(spans) == 1
        assert spans[0].attributes[Attr.USER_ID] == ALICE


class TestWiring:
    def test_injected_directory_is_used(
        self, config: SmsBridgeConfig, transport: MockTransport
    ) -> None:
        directory = BridgeDirectory()
        bridge = SmsBridge(config, transport, directory=directory)
        assert bridge.directory is directory
        assert bridge.classifier.directory is directory

    def test_virtual_identity(self, bridge: SmsBridge) -> None:
        assert bridge.virtual_identity("15551234567") == "@_sms_15551234567:example.org"
        assert bridge.resolver.is_bridge_controlled(BOT)

    async def test_close(self, config: SmsBridgeConfig, transport: MockTransport) -> None:
        async with SmsBridge(config, transport, relay=MockMessageRelay()):
            pass
        assert transport.closed is True
