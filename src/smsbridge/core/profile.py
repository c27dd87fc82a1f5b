"""Keeps the bridge bot's display name and avatar in line with config."""

from __future__ import annotations

import logging

from smsbridge.config import BotAppearance
from smsbridge.core.errors import SmsBridgeError
from smsbridge.store.base import AccountDataStore
from smsbridge.telemetry.base import SpanKind, TelemetryProvider
from smsbridge.telemetry.noop import NoopTelemetryProvider
from smsbridge.transport.base import BridgeTransport

logger = logging.getLogger("smsbridge.profile")

ACCOUNT_DATA_KEY = "bridge"


class BotProfileUpdater:
    """Applies :class:`BotAppearance` to the bridge bot.

    The avatar source URL last applied is remembered in account data under
    ``"bridge"`` so the image is only re-uploaded when the configured URL
    changes. The display name is compared against the live profile.
    """

    def __init__(
        self,
        transport: BridgeTransport,
        store: AccountDataStore,
        appearance: BotAppearance,
        *,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._appearance = appearance
        self._telemetry = telemetry or NoopTelemetryProvider()

    async def update(self) -> None:
        """Bring the bot profile up to date. Failures are logged, never raised."""
        logger.info("Updating appearance of bridge bot")
        try:
            with self._telemetry.span(SpanKind.PROFILE_SYNC, "profile.update"):
                await self._update_avatar()
                await self._update_display_name()
        except Exception:
            logger.exception("Unexpected error updating bridge bot profile")

    async def _update_avatar(self) -> None:
        bot = self._transport.bot_user_id
        desired = self._appearance.avatar_url
        try:
            record = await self._store.get_account_data(ACCOUNT_DATA_KEY)
            if record.get("avatarUrl") == desired:
                return
            logger.info("Updating avatar for bridge bot")
            await self._transport.set_profile(bot, avatar_ref=desired)
            record["avatarUrl"] = desired
            await self._store.set_account_data(ACCOUNT_DATA_KEY, record)
        except SmsBridgeError:
            logger.warning("Failed to update bridge bot avatar", exc_info=True)

    async def _update_display_name(self) -> None:
        bot = self._transport.bot_user_id
        desired = self._appearance.display_name
        try:
            profile = await self._transport.get_profile(bot)
            if profile.display_name == desired:
                return
            logger.info(
                "Updating display name from %r to %r", profile.display_name, desired
            )
            await self._transport.set_profile(bot, display_name=desired)
        except SmsBridgeError:
            logger.warning("Failed to update bridge bot display name", exc_info=True)
