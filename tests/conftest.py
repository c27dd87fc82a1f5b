"""Shared test fixtures and helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import pytest

from smsbridge.config import HomeserverConfig, SmsBridgeConfig
from smsbridge.core.bridge import SmsBridge
from smsbridge.core.classifier import RoomClassifier
from smsbridge.core.directory import BridgeDirectory
from smsbridge.relay.mock import MockMessageRelay
from smsbridge.store.memory import InMemoryAccountDataStore
from smsbridge.telemetry.mock import MockTelemetryProvider
from smsbridge.transport.mock import MockTransport

DOMAIN = "example.org"
BOT = "@smsbot:example.org"
ALICE = "@alice:example.org"
BOB = "@bob:example.org"
CAROL = "@carol:example.org"
WELCOME = "Welcome to your admin room"


@pytest.fixture
def advance() -> Callable[[int], Coroutine[Any, Any, None]]:
    """Yield control to let pending tasks run without real delay."""

    async def _advance(n: int = 5) -> None:
        for _ in range(n):
            await asyncio.sleep(0)

    return _advance


def make_config(**overrides: Any) -> SmsBridgeConfig:
    defaults: dict[str, Any] = {
        "homeserver": HomeserverConfig(url="https://matrix.example.org/", domain=DOMAIN),
        "as_token": "as-secret",
        "bot_localpart": "smsbot",
        "welcome_message": WELCOME,
    }
    defaults.update(overrides)
    return SmsBridgeConfig(**defaults)


def invite_event(room_id: str, invitee: str, sender: str = ALICE) -> dict[str, Any]:
    return {
        "type": "m.room.member",
        "sender": sender,
        "room_id": room_id,
        "state_key": invitee,
        "content": {"membership": "invite"},
    }


def message_event(room_id: str, sender: str = ALICE, body: str = "hello") -> dict[str, Any]:
    return {
        "type": "m.room.message",
        "sender": sender,
        "room_id": room_id,
        "content": {"msgtype": "m.text", "body": body},
    }


@pytest.fixture
def config() -> SmsBridgeConfig:
    return make_config()


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport(bot_user_id=BOT)


@pytest.fixture
def directory() -> BridgeDirectory:
    return BridgeDirectory()


@pytest.fixture
def telemetry() -> MockTelemetryProvider:
    return MockTelemetryProvider()


@pytest.fixture
def relay() -> MockMessageRelay:
    return MockMessageRelay()


@pytest.fixture
def classifier(transport: MockTransport, directory: BridgeDirectory) -> RoomClassifier:
    return RoomClassifier(transport, directory, welcome_message=WELCOME)


@pytest.fixture
def bridge(
    config: SmsBridgeConfig,
    transport: MockTransport,
    relay: MockMessageRelay,
    telemetry: MockTelemetryProvider,
) -> SmsBridge:
    return SmsBridge(
        config,
        transport,
        store=InMemoryAccountDataStore(),
        relay=relay,
        telemetry=telemetry,
    )
