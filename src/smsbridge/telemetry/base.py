"""Telemetry provider ABC, Span dataclass, SpanKind enum, and Attr constants."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class SpanKind(StrEnum):
    """Span classifications for telemetry."""

    INBOUND_EVENT = "bridge.inbound"
    CLASSIFY = "bridge.classify"
    RECONCILE = "bridge.reconcile"
    ADMIN_ROOM_CREATE = "bridge.admin_room.create"
    PROFILE_SYNC = "bridge.profile_sync"
    TRANSPORT_REQUEST = "transport.request"
    CUSTOM = "custom"


class Attr:
    """Well-known attribute key constants for telemetry spans and metrics."""

    # Common
    ROOM_ID = "room_id"
    USER_ID = "user_id"
    EVENT_TYPE = "event.type"
    EVENT_KIND = "event.kind"

    # Classification
    CLASSIFY_CATEGORY = "classify.category"
    CLASSIFY_MEMBER_COUNT = "classify.member_count"
    CLASSIFY_CREATED = "classify.created"
    CLASSIFY_NEW_ROOM = "classify.new_room"

    # Reconcile
    RECONCILE_ROOMS = "reconcile.rooms"
    RECONCILE_FAILURES = "reconcile.failures"

    # Transport
    TRANSPORT_METHOD = "transport.method"
    TRANSPORT_PATH = "transport.path"
    TRANSPORT_STATUS = "transport.status"


@dataclass
class Span:
    """Represents a telemetry span."""

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])
    kind: SpanKind = SpanKind.CUSTOM
    name: str = ""
    parent_id: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    status: str = "ok"
    error_message: str | None = None
    room_id: str | None = None

    @property
    def duration_ms(self) -> float | None:
        """Duration in milliseconds, or None if not yet ended."""
        if self.end_time is None:
            return None
        delta = self.end_time - self.start_time
        return delta.total_seconds() * 1000


class TelemetryProvider(ABC):
    """Abstract base class for telemetry providers.

    Providers collect span and metric data from bridge operations.
    The default ``NoopTelemetryProvider`` has zero overhead.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name for identification."""
        ...

    @abstractmethod
    def start_span(
        self,
        kind: SpanKind,
        name: str,
        *,
        parent_id: str | None = None,
        attributes: dict[str, Any] | None = None,
        room_id: str | None = None,
    ) -> str:
        """Start a new telemetry span.

        Returns:
            A unique span ID string.
        """
        ...

    @abstractmethod
    def end_span(
        self,
        span_id: str,
        *,
        status: str = "ok",
        error_message: str | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """End a previously started span."""
        ...

    @abstractmethod
    def set_attribute(self, span_id: str, key: str, value: Any) -> None:
        """Set an attribute on an active span."""
        ...

    @abstractmethod
    def record_metric(
        self,
        name: str,
        value: float,
        *,
        unit: str = "",
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """Record a metric value."""
        ...

    def close(self) -> None:  # noqa: B027
        """Close the provider and flush any pending data."""

    def reset(self) -> None:  # noqa: B027
        """Reset internal state (useful for testing)."""

    @contextmanager
    def span(
        self,
        kind: SpanKind,
        name: str,
        **kwargs: Any,
    ) -> Generator[str, None, None]:
        """Context manager for span lifecycle.

        Yields the span ID. The span is always ended on exit, with error
        status for any exception, cancellation included.
        """
        span_id = self.start_span(kind, name, **kwargs)
        try:
            yield span_id
        except BaseException as exc:
            self.end_span(span_id, status="error", error_message=str(exc) or type(exc).__name__)
            raise
        self.end_span(span_id)
