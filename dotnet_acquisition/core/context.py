"""
Acquisition context — the session object that owns the event stream.

One context per host session.  It is created by whichever entry point
starts the session and passed (or its parts passed) explicitly:

    - CLI:    main.py → create_context(settings)
    - Tests:  AcquisitionContext built around a bare EventStream

It subscribes the standard observers (durable log file, telemetry when
enabled), hands out pipeline components wired to its stream, and
``dispose()`` unsubscribes and closes everything it created.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from dotnet_acquisition.core.config.loader import AcquisitionSettings
from dotnet_acquisition.core.models.events import AcquisitionEvent
from dotnet_acquisition.core.observers.logging_observer import LoggingObserver
from dotnet_acquisition.core.observers.telemetry_observer import TelemetryObserver
from dotnet_acquisition.core.platform import Platform
from dotnet_acquisition.core.services.acquisition.dependency_prober import (
    NativeDependencyProber,
    RemediationPrompt,
)
from dotnet_acquisition.core.services.acquisition.invoker import AcquisitionInvoker
from dotnet_acquisition.core.services.event_stream import EventStream, Subscription
from dotnet_acquisition.core.services.reachability import HttpReachabilityProbe, OnlineProbe
from dotnet_acquisition.core.services.script_locator import LocalScriptLocator, ScriptLocator

logger = logging.getLogger(__name__)


class Observer(Protocol):
    def post(self, event: AcquisitionEvent) -> None: ...

    def dispose(self) -> None: ...


@dataclass
class AcquisitionContext:
    settings: AcquisitionSettings
    event_stream: EventStream = field(default_factory=EventStream)
    platform: Platform | None = None
    logging_observer: LoggingObserver | None = None
    telemetry: TelemetryObserver | None = None
    _observers: list[Any] = field(default_factory=list)
    _subscriptions: list[Subscription] = field(default_factory=list)

    def add_observer(self, observer: Observer) -> Subscription:
        sub = self.event_stream.subscribe(observer.post)
        self._observers.append(observer)
        self._subscriptions.append(sub)
        return sub

    @property
    def log_file(self) -> Path | None:
        return self.logging_observer.log_file if self.logging_observer else None

    def create_invoker(
        self,
        script_locator: ScriptLocator | None = None,
        online_probe: OnlineProbe | None = None,
    ) -> AcquisitionInvoker:
        locator = script_locator or LocalScriptLocator(self.settings.script_dir, self.platform)
        probe = online_probe or HttpReachabilityProbe(
            self.settings.online_probe_url,
            self.settings.online_probe_timeout_s,
        )
        return AcquisitionInvoker.from_settings(
            self.settings, self.event_stream, locator, probe, platform=self.platform,
        )

    def create_dependency_prober(self, prompt: RemediationPrompt) -> NativeDependencyProber:
        return NativeDependencyProber(
            self.event_stream,
            prompt,
            platform=self.platform,
            timeout_s=self.settings.dependency_probe_timeout_s,
        )

    def dispose(self) -> None:
        if self.telemetry is not None:
            logger.debug("Session telemetry: %s", self.telemetry.registry.to_dict())
        for sub in self._subscriptions:
            sub.dispose()
        for observer in self._observers:
            try:
                observer.dispose()
            except Exception:
                logger.exception("Failed to dispose observer %r", observer)
        self._subscriptions.clear()
        self._observers.clear()


def create_context(
    settings: AcquisitionSettings,
    *,
    platform: Platform | None = None,
    log_file: Path | None = None,
) -> AcquisitionContext:
    """Build a session context with the standard observers subscribed."""
    ctx = AcquisitionContext(settings=settings, platform=platform)

    if log_file is None:
        log_file = settings.log_dir / f"DotNetAcquisition{int(time.time() * 1000)}.txt"
    ctx.logging_observer = LoggingObserver(log_file)
    ctx.add_observer(ctx.logging_observer)

    if settings.telemetry_enabled():
        ctx.telemetry = TelemetryObserver()
        ctx.add_observer(ctx.telemetry)

    logger.debug("Acquisition context ready (log=%s, telemetry=%s)", log_file, ctx.telemetry is not None)
    return ctx
