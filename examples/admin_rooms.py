"""Admin rooms — classification, welcome notices and startup reconciliation.

Runs the bridge against the in-memory MockTransport. Shows:
- Startup reconciliation of rooms the bot is already in
- A virtual SMS user being invited into a new room
- get_or_create_admin_room() returning one room per owner under concurrency
- Chat messages handed to the message relay

Run with:
    uv run python examples/admin_rooms.py
"""

from __future__ import annotations

import asyncio
import logging

from smsbridge import (
    ConsoleTelemetryProvider,
    HomeserverConfig,
    MockMessageRelay,
    MockTransport,
    SmsBridge,
    SmsBridgeConfig,
)

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

BOT = "@smsbot:example.org"


async def main() -> None:
    config = SmsBridgeConfig(
        homeserver=HomeserverConfig(url="https://matrix.example.org", domain="example.org"),
        as_token="not-a-real-token",
    )
    transport = MockTransport(bot_user_id=BOT)
    relay = MockMessageRelay()

    # Rooms the bot was already in before this run
    transport.add_room("!dm-alice:example.org", {BOT, "@alice:example.org"})
    transport.add_room(
        "!family:example.org", {BOT, "@alice:example.org", "@bob:example.org"}
    )

    async with SmsBridge(
        config, transport, relay=relay, telemetry=ConsoleTelemetryProvider()
    ) as bridge:
        results = await bridge.start()
        for result in results:
            print(f"{result.room_id}: {result.category} ({result.member_count} members)")

        # Bob invites a phone number into a fresh room
        sms_user = bridge.virtual_identity("15551234567")
        transport.add_room("!new:example.org", {BOT, "@bob:example.org"})
        await bridge.on_inbound_event(
            {
                "type": "m.room.member",
                "sender": "@bob:example.org",
                "room_id": "!new:example.org",
                "state_key": sms_user,
                "content": {"membership": "invite"},
            }
        )
        print(f"{sms_user} joined: {transport.joins}")

        # Two concurrent requests for Carol's admin room create a single room
        first, second = await asyncio.gather(
            bridge.get_or_create_admin_room("@carol:example.org"),
            bridge.get_or_create_admin_room("@carol:example.org"),
        )
        print(f"Carol's admin room: {first.room_id} (same: {first.room_id == second.room_id})")

        await bridge.on_inbound_event(
            {
                "type": "m.room.message",
                "sender": "@alice:example.org",
                "room_id": "!family:example.org",
                "content": {"msgtype": "m.text", "body": "Dinner at 7?"},
            }
        )
        print(f"Relayed: {[event.body for event in relay.relayed]}")


if __name__ == "__main__":
    asyncio.run(main())
