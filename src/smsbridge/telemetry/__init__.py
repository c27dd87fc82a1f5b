"""Telemetry provider system for the SMS bridge."""

from smsbridge.telemetry.base import Attr, Span, SpanKind, TelemetryProvider
from smsbridge.telemetry.console import ConsoleTelemetryProvider
from smsbridge.telemetry.mock import MockTelemetryProvider
from smsbridge.telemetry.noop import NoopTelemetryProvider

__all__ = [
    "Attr",
    "ConsoleTelemetryProvider",
    "MockTelemetryProvider",
    "NoopTelemetryProvider",
    "Span",
    "SpanKind",
    "TelemetryProvider",
]
