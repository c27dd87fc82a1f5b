"""Tests for bridge configuration models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from smsbridge.config import DEFAULT_AVATAR_URL, HomeserverConfig, SmsBridgeConfig
from tests.conftest import make_config


class TestSmsBridgeConfig:
    def test_defaults(self) -> None:
        cfg = SmsBridgeConfig(
            homeserver=HomeserverConfig(url="https://hs.example.org", domain="example.org"),
            as_token="token",
        )
        assert cfg.bot_user_id == "@smsbot:example.org"
        assert cfg.bot.display_name == "SMS Bridge"
        assert cfg.bot.avatar_url == DEFAULT_AVATAR_URL
        assert cfg.welcome_message.startswith("Hello!")
        assert cfg.membership_timeout == 10.0
        assert cfg.create_room_timeout == 30.0

    def test_url_trailing_slash_stripped(self) -> None:
        assert make_config().homeserver.url == "https://matrix.example.org"

    def test_token_is_secret(self) -> None:
        cfg = make_config()
        assert "as-secret" not in repr(cfg)
        assert cfg.as_token.get_secret_value() == "as-secret"

    def test_virtual_prefix_rejected_for_bot(self) -> None:
        with pytest.raises(ValidationError, match="_sms_"):
            make_config(bot_localpart="_sms_bot")

    @pytest.mark.parametrize("field", ["membership_timeout", "create_room_timeout"])
    def test_timeouts_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError):
            make_config(**{field: 0})
