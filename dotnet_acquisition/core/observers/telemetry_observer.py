"""
TelemetryObserver — aggregate acquisition outcomes into counters.

Only subscribed when telemetry is enabled (see
``AcquisitionSettings.telemetry_enabled``).  Records event types and
failure kinds; never script output text.
"""

from __future__ import annotations

from dotnet_acquisition.core.models.events import AcquisitionEvent
from dotnet_acquisition.core.observability.metrics import MetricsRegistry


class TelemetryObserver:
    def __init__(self, registry: MetricsRegistry | None = None) -> None:
        self.registry = registry or MetricsRegistry()

    def post(self, event: AcquisitionEvent) -> None:
        self.registry.counter("acquisition.events", type=event.event_name).inc()
        if event.failure_kind is not None:
            self.registry.counter("acquisition.failures", kind=str(event.failure_kind)).inc()
        elif event.terminal:
            self.registry.counter("acquisition.completed").inc()

    def dispose(self) -> None:
        pass
