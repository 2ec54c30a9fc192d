"""
Acquisition invoker — build, run, classify, report.

One ``install()`` call is one attempt and posts exactly one terminal
event before it returns or raises:

    build command ──► run script ──► classify ──► post events ──► return / raise
          │                │
          └── raises ──────┴──► UnexpectedError event, original exception re-raised

Concurrent calls are independent; any single-flight policy belongs to
whoever calls ``install()``.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotnet_acquisition.core.config.loader import AcquisitionSettings
from dotnet_acquisition.core.models.events import UnexpectedError
from dotnet_acquisition.core.models.request import InstallRequest
from dotnet_acquisition.core.platform import Platform
from dotnet_acquisition.core.services.acquisition.command_builder import CommandBuilder
from dotnet_acquisition.core.services.acquisition.failure_classifier import FailureClassifier
from dotnet_acquisition.core.services.acquisition.process_runner import ProcessRunner
from dotnet_acquisition.core.services.event_stream import EventStream
from dotnet_acquisition.core.services.reachability import OnlineProbe
from dotnet_acquisition.core.services.script_locator import ScriptLocator

logger = logging.getLogger(__name__)


class AcquisitionInvoker:
    """Install one .NET runtime version through the install script.

    Args:
        event_stream: Where every step reports.
        script_locator: Provides the install script path.
        online_probe: Consulted only when the script fails.
        platform: Target platform (default: current).
        runner: Process runner (default: 30 s / 500 KiB bounds).
    """

    def __init__(
        self,
        event_stream: EventStream,
        script_locator: ScriptLocator,
        online_probe: OnlineProbe,
        *,
        platform: Platform | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        self._events = event_stream
        self._platform = platform
        self._builder = CommandBuilder(script_locator, platform)
        self._runner = runner or ProcessRunner()
        self._classifier = FailureClassifier(online_probe)

    @classmethod
    def from_settings(
        cls,
        settings: AcquisitionSettings,
        event_stream: EventStream,
        script_locator: ScriptLocator,
        online_probe: OnlineProbe,
        *,
        platform: Platform | None = None,
    ) -> AcquisitionInvoker:
        runner = ProcessRunner(
            timeout_s=settings.timeout_s,
            max_buffer_bytes=settings.max_buffer_bytes,
        )
        return cls(event_stream, script_locator, online_probe, platform=platform, runner=runner)

    async def install(self, request: InstallRequest) -> Path:
        """Run the install script for ``request``.

        Returns:
            ``request.dotnet_path`` once the script succeeded.

        Raises:
            AcquisitionError: The script ran and failed (offline,
                reported an error, or wrote to stderr).
            Exception: Whatever building or spawning the command raised,
                unmodified.
        """
        logger.info("Installing .NET %s into %s", request.version, request.install_dir)
        try:
            command = self._builder.build(request.version, request.install_dir)
            outcome = await self._runner.run(command, self._platform)
        except Exception as exc:
            logger.error("Could not invoke install script for %s: %s", request.version, exc)
            self._events.post(UnexpectedError(cause=exc, version=request.version))
            raise

        result = await asyncio.to_thread(self._classifier.classify, outcome, request)
        for event in result.events:
            self._events.post(event)

        if result.error is not None:
            logger.error("Install of .NET %s failed (%s): %s", request.version, result.kind, result.error)
            raise result.error

        logger.info("Installed .NET %s at %s", request.version, request.dotnet_path)
        return request.dotnet_path
