"""
Acquisition events — immutable records posted to the EventStream.

Every step of an acquisition emits one of these.  Terminal events
(``terminal = True``) conclude an attempt; exactly one is posted per
attempt, optionally preceded by ScriptOutput events.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Literal

from dotnet_acquisition.core.models.request import FailureKind


@dataclass(frozen=True)
class AcquisitionEvent:
    """Base class for everything posted to the event stream."""

    event_name: ClassVar[str] = "acquisition:event"
    terminal: ClassVar[bool] = False
    failure_kind: ClassVar[FailureKind | None] = None

    def describe(self) -> str:
        """One-line human-readable summary (used by log sinks)."""
        return self.event_name

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.event_name, "message": self.describe()}


@dataclass(frozen=True)
class AcquisitionCompleted(AcquisitionEvent):
    event_name: ClassVar[str] = "acquisition:completed"
    terminal: ClassVar[bool] = True

    version: str
    dotnet_path: Path

    def describe(self) -> str:
        return f".NET {self.version} installed at {self.dotnet_path}"

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "version": self.version,
            "dotnet_path": str(self.dotnet_path),
        }


@dataclass(frozen=True)
class ScriptOutput(AcquisitionEvent):
    """Text the installer wrote; informational, never terminal."""

    event_name: ClassVar[str] = "acquisition:script_output"

    version: str
    text: str
    channel: Literal["stdout", "stderr"] = "stdout"

    def describe(self) -> str:
        if self.channel == "stderr":
            return f"STDERR: {self.text}"
        return self.text

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "version": self.version,
            "channel": self.channel,
        }


@dataclass(frozen=True)
class _FailureEvent(AcquisitionEvent):
    terminal: ClassVar[bool] = True

    version: str
    cause: BaseException

    def describe(self) -> str:
        return f"{self.event_name} ({self.version}): {self.cause}"

    def to_dict(self) -> dict[str, Any]:
        return {
            **super().to_dict(),
            "version": self.version,
            "failure_kind": str(self.failure_kind),
            "error": str(self.cause),
            "error_type": type(self.cause).__name__,
        }


@dataclass(frozen=True)
class InstallError(_FailureEvent):
    """The installer process failed while the network was reachable."""

    event_name: ClassVar[str] = "acquisition:install_error"
    failure_kind: ClassVar[FailureKind | None] = FailureKind.INSTALLER_REPORTED_ERROR


@dataclass(frozen=True)
class ScriptError(_FailureEvent):
    """The installer exited cleanly but wrote to stderr."""

    event_name: ClassVar[str] = "acquisition:script_error"
    failure_kind: ClassVar[FailureKind | None] = FailureKind.INSTALLER_PRODUCED_STDERR


@dataclass(frozen=True)
class OfflineFailure(_FailureEvent):
    event_name: ClassVar[str] = "acquisition:offline"
    failure_kind: ClassVar[FailureKind | None] = FailureKind.OFFLINE


@dataclass(frozen=True)
class UnexpectedError(_FailureEvent):
    """Building or spawning the installer command raised."""

    event_name: ClassVar[str] = "acquisition:unexpected_error"
    failure_kind: ClassVar[FailureKind | None] = FailureKind.UNEXPECTED_INVOCATION_ERROR


@dataclass(frozen=True)
class MissingNativeDependencies(AcquisitionEvent):
    event_name: ClassVar[str] = "acquisition:missing_native_dependencies"

    def describe(self) -> str:
        return "The .NET runtime could not start: native Linux dependencies are missing"
