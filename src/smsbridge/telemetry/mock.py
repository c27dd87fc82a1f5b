"""Recording telemetry provider for tests."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from smsbridge.telemetry.base import Span, SpanKind, TelemetryProvider


class MockTelemetryProvider(TelemetryProvider):
    """Keeps every finished span and metric in memory.

    Example::

        telemetry = MockTelemetryProvider()
        bridge = SmsBridge(config, transport, telemetry=telemetry)
        await bridge.start()
        (scan,) = telemetry.get_spans(SpanKind.RECONCILE)
        assert scan.attributes[Attr.RECONCILE_FAILURES] == 0
    """

    def __init__(self) -> None:
        self.active: dict[str, Span] = {}
        self.spans: list[Span] = []
        self.metrics: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "mock"

    def get_spans(self, kind: SpanKind, *, room_id: str | None = None) -> list[Span]:
        """Finished spans of *kind*, optionally only those for *room_id*."""
        return [
            s for s in self.spans if s.kind == kind and (room_id is None or s.room_id == room_id)
        ]

    def metric_values(self, name: str) -> list[float]:
        return [m["value"] for m in self.metrics if m["name"] == name]

    def start_span(
        self,
        kind: SpanKind,
        name: str,
        *,
        parent_id: str | None = None,
        attributes: dict[str, Any] | None = None,
        room_id: str | None = None,
    ) -> str:
        span = Span(
            kind=kind,
            name=name,
            parent_id=parent_id,
            attributes=dict(attributes or {}),
            room_id=room_id,
        )
        self.active[span.id] = span
        return span.id

    def end_span(
        self,
        span_id: str,
        *,
        status: str = "ok",
        error_message: str | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        span = self.active.pop(span_id, None)
        if span is None:
            return
        span.end_time = datetime.now(UTC)
        span.status = status
        span.error_message = error_message
        span.attributes.update(attributes or {})
        self.spans.append(span)

    def set_attribute(self, span_id: str, key: str, value: Any) -> None:
        if span_id in self.active:
            self.active[span_id].attributes[key] = value

    def record_metric(
        self,
        name: str,
        value: float,
        *,
        unit: str = "",
        attributes: dict[str, Any] | None = None,
    ) -> None:
        self.metrics.append(
            {"name": name, "value": value, "unit": unit, "attributes": dict(attributes or {})}
        )

    def reset(self) -> None:
        self.active.clear()
        self.spans.clear()
        self.metrics.clear()
