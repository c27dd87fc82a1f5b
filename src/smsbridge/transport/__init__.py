"""Chat-network transports."""

from smsbridge.transport.base import BridgeTransport
from smsbridge.transport.matrix import MatrixAppserviceTransport
from smsbridge.transport.mock import MockTransport

__all__ = ["BridgeTransport", "MatrixAppserviceTransport", "MockTransport"]
