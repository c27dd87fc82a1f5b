"""Chat → SMS message relays."""

from smsbridge.relay.base import MessageRelay
from smsbridge.relay.mock import MockMessageRelay
from smsbridge.relay.noop import NoopMessageRelay

__all__ = ["MessageRelay", "MockMessageRelay", "NoopMessageRelay"]
