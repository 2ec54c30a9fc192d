"""
Event sinks — things that subscribe to the EventStream.

Each observer exposes ``post(event)`` and ``dispose()``.
"""

from dotnet_acquisition.core.observers.logging_observer import LoggingObserver
from dotnet_acquisition.core.observers.telemetry_observer import TelemetryObserver

__all__ = ["LoggingObserver", "TelemetryObserver"]
