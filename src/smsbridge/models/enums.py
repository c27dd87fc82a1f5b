"""String enums for the SMS bridge."""

from __future__ import annotations

from enum import StrEnum, unique


@unique
class RoomCategory(StrEnum):
    ADMIN = "admin"
    ORDINARY = "ordinary"


@unique
class EventKind(StrEnum):
    MEMBER = "member"
    MESSAGE = "message"
    OTHER = "other"


@unique
class Membership(StrEnum):
    INVITE = "invite"
    JOIN = "join"
    LEAVE = "leave"
    BAN = "ban"
    KNOCK = "knock"
