"""
Failure classifier — map a ProcessOutcome to success or one FailureKind.

Decision order (first match wins for the terminal decision):

    1. stdout non-empty           → ScriptOutput            (informational)
    2. stderr non-empty           → ScriptOutput[stderr]    (informational)
    3. process error
         probe says offline       → Offline                 OfflineFailure
         otherwise                → InstallerReportedError  InstallError
    4. stderr non-empty           → InstallerProducedStderr ScriptError
    5. otherwise                  → success                 AcquisitionCompleted

A hard process failure outranks incidental stderr text, and only hard
failures consult the network.  Step 4 treats any stderr output from a
zero-exit run as a failure: the install scripts are silent on success.

The classifier never posts events; it returns them in order for the
caller to post.  Given the same outcome and probe answer it always
returns the same kind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from dotnet_acquisition.core.models.events import (
    AcquisitionCompleted,
    AcquisitionEvent,
    InstallError,
    OfflineFailure,
    ScriptError,
    ScriptOutput,
)
from dotnet_acquisition.core.models.request import FailureKind, InstallRequest, ProcessOutcome
from dotnet_acquisition.core.services.acquisition.errors import (
    AcquisitionError,
    InstallerReportedError,
    InstallerStderrError,
    OfflineError,
)
from dotnet_acquisition.core.services.reachability import OnlineProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Result of classifying one outcome.

    ``kind`` and ``error`` are None on success.  ``events`` always ends
    with exactly one terminal event.
    """

    kind: FailureKind | None
    events: tuple[AcquisitionEvent, ...]
    error: AcquisitionError | None = None

    @property
    def ok(self) -> bool:
        return self.kind is None

    @property
    def terminal_event(self) -> AcquisitionEvent:
        return self.events[-1]


class FailureClassifier:
    def __init__(self, online_probe: OnlineProbe) -> None:
        self._online_probe = online_probe

    def _is_online(self) -> bool:
        """Ask the probe; a probe that blows up counts as online."""
        try:
            return bool(self._online_probe.is_online())
        except Exception:
            logger.warning("Reachability probe raised; assuming online", exc_info=True)
            return True

    def classify(self, outcome: ProcessOutcome, request: InstallRequest) -> Classification:
        version = request.version
        events: list[AcquisitionEvent] = []

        if outcome.stdout:
            events.append(ScriptOutput(version=version, text=outcome.stdout))
        if outcome.stderr:
            events.append(ScriptOutput(version=version, text=outcome.stderr, channel="stderr"))

        if outcome.error is not None:
            if not self._is_online():
                error: AcquisitionError = OfflineError(version)
                events.append(OfflineFailure(cause=error, version=version))
                return Classification(FailureKind.OFFLINE, tuple(events), error)

            error = InstallerReportedError(version, outcome.error)
            events.append(InstallError(cause=outcome.error, version=version))
            return Classification(FailureKind.INSTALLER_REPORTED_ERROR, tuple(events), error)

        if outcome.stderr:
            error = InstallerStderrError(version, outcome.stderr)
            events.append(ScriptError(cause=error, version=version))
            return Classification(FailureKind.INSTALLER_PRODUCED_STDERR, tuple(events), error)

        events.append(AcquisitionCompleted(version=version, dotnet_path=request.dotnet_path))
        return Classification(None, tuple(events))
