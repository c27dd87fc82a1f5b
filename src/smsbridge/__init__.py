"""smsbridge - Async bridge between a federated chat network and SMS."""

from smsbridge._version import __version__
from smsbridge.config import BotAppearance, HomeserverConfig, SmsBridgeConfig
from smsbridge.core.admin import AdminRoom
from smsbridge.core.bridge import SmsBridge
from smsbridge.core.classifier import RoomClassifier, decide_owner
from smsbridge.core.directory import BridgeDirectory
from smsbridge.core.errors import (
    AdminRoomError,
    InvariantViolationError,
    SmsBridgeError,
    TransportError,
)
from smsbridge.core.locks import InMemoryLockManager, KeyedLockManager
from smsbridge.core.profile import BotProfileUpdater
from smsbridge.core.router import EventRouter
from smsbridge.identity.phone import is_canonical, is_valid_phone, normalize_phone
from smsbridge.identity.resolver import VirtualIdentityResolver
from smsbridge.models.enums import EventKind, Membership, RoomCategory
from smsbridge.models.event import (
    InboundEvent,
    MemberEvent,
    MessageEvent,
    OtherEvent,
    parse_event,
)
from smsbridge.models.room import Profile, RoomConfig, StateEvent
from smsbridge.models.session import AdminSession, ClassificationResult
from smsbridge.relay import MessageRelay, MockMessageRelay, NoopMessageRelay
from smsbridge.store.base import AccountDataStore
from smsbridge.store.memory import InMemoryAccountDataStore
from smsbridge.telemetry import (
    Attr,
    ConsoleTelemetryProvider,
    MockTelemetryProvider,
    NoopTelemetryProvider,
    SpanKind,
    TelemetryProvider,
)
from smsbridge.transport import BridgeTransport, MatrixAppserviceTransport, MockTransport

__all__ = [
    "AccountDataStore",
    "AdminRoom",
    "AdminRoomError",
    "AdminSession",
    "Attr",
    "BotAppearance",
    "BotProfileUpdater",
    "BridgeDirectory",
    "BridgeTransport",
    "ClassificationResult",
    "ConsoleTelemetryProvider",
    "EventKind",
    "EventRouter",
    "HomeserverConfig",
    "InMemoryAccountDataStore",
    "InMemoryLockManager",
    "InboundEvent",
    "InvariantViolationError",
    "KeyedLockManager",
    "MatrixAppserviceTransport",
    "MemberEvent",
    "Membership",
    "MessageEvent",
    "MessageRelay",
    "MockMessageRelay",
    "MockTelemetryProvider",
    "MockTransport",
    "NoopMessageRelay",
    "NoopTelemetryProvider",
    "OtherEvent",
    "Profile",
    "RoomCategory",
    "RoomClassifier",
    "RoomConfig",
    "SmsBridge",
    "SmsBridgeConfig",
    "SmsBridgeError",
    "SpanKind",
    "StateEvent",
    "TelemetryProvider",
    "TransportError",
    "VirtualIdentityResolver",
    "__version__",
    "decide_owner",
    "is_canonical",
    "is_valid_phone",
    "normalize_phone",
    "parse_event",
]
