"""SMS bridge configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr, field_validator

from smsbridge.identity.resolver import VIRTUAL_LOCALPART_PREFIX

DEFAULT_AVATAR_URL = (
    "https://t2bot.io/_matrix/media/v1/download/t2l.io/SOZlqpJCUoecxNFZGGnDEhEy"
)

DEFAULT_WELCOME_MESSAGE = (
    "Hello! This room can be used to manage various aspects of the bridge. "
    "Although this currently doesn't do anything, it will be more active in the future."
)


class HomeserverConfig(BaseModel):
    """Where the chat homeserver lives and which domain it serves."""

    url: str
    domain: str

    @field_validator("url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class BotAppearance(BaseModel):
    """Desired profile of the bridge bot."""

    display_name: str = "SMS Bridge"
    avatar_url: str = DEFAULT_AVATAR_URL


class SmsBridgeConfig(BaseModel):
    """Top-level bridge configuration.

    Attributes:
        homeserver: Homeserver URL and server name.
        as_token: Application service token used for every transport call.
        bot_localpart: Localpart of the bridge bot user.
        bot: Desired bot display name and avatar.
        welcome_message: Notice posted into freshly created admin rooms.
        default_region: Region assumed for phone numbers typed without a
            country code.
        membership_timeout: Seconds to wait for a room's member list.
        create_room_timeout: Seconds to wait for room creation.
        request_timeout: Default HTTP timeout for the Matrix transport.
        max_locks: Upper bound on cached per-room/per-owner locks.
    """

    homeserver: HomeserverConfig
    as_token: SecretStr
    bot_localpart: str = "smsbot"
    bot: BotAppearance = Field(default_factory=BotAppearance)
    welcome_message: str = DEFAULT_WELCOME_MESSAGE
    default_region: str = "US"
    membership_timeout: float = Field(default=10.0, gt=0)
    create_room_timeout: float = Field(default=30.0, gt=0)
    request_timeout: float = Field(default=30.0, gt=0)
    max_locks: int = Field(default=1024, ge=1)

    @field_validator("bot_localpart")
    @classmethod
    def _not_virtual(cls, value: str) -> str:
        if value.startswith(VIRTUAL_LOCALPART_PREFIX):
            raise ValueError(
                f"bot_localpart must not start with {VIRTUAL_LOCALPART_PREFIX!r}"
            )
        return value

    @property
    def domain(self) -> str:
        return self.homeserver.domain

    @property
    def bot_user_id(self) -> str:
        return f"@{self.bot_localpart}:{self.homeserver.domain}"
