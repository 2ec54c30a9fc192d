"""
Acquisition errors.

Two layers:
    InstallScriptError      — what the process runner observed
                              (non-zero exit, timeout kill, output cap).
    AcquisitionError        — what the caller sees, tagged with exactly
                              one FailureKind.

UnexpectedInvocationError has no exception class of its own: the
original exception is re-raised unmodified and the kind is carried by
the UnexpectedError event.
"""

from __future__ import annotations

from dotnet_acquisition.core.models.request import FailureKind


# ── Process-level errors ────────────────────────────────────────


class InstallScriptError(Exception):
    """The installer process did not finish cleanly."""


class ProcessExitError(InstallScriptError):
    def __init__(self, returncode: int, command: str = "") -> None:
        self.returncode = returncode
        self.command = command
        super().__init__(f"Command failed (exit {returncode}): {command}")


class ProcessTimeoutError(InstallScriptError):
    def __init__(self, timeout_s: float, command: str = "") -> None:
        self.timeout_s = timeout_s
        self.command = command
        super().__init__(f"Command timed out ({timeout_s:g}s) and was killed: {command}")


class OutputLimitExceededError(InstallScriptError):
    def __init__(self, limit_bytes: int) -> None:
        self.limit_bytes = limit_bytes
        super().__init__(f"Installer output exceeded {limit_bytes} bytes; process killed")


# ── Caller-facing errors ────────────────────────────────────────


class AcquisitionError(Exception):
    """A classified acquisition failure."""

    kind: FailureKind

    def __init__(self, message: str, version: str) -> None:
        self.version = version
        super().__init__(message)


class OfflineError(AcquisitionError):
    kind = FailureKind.OFFLINE

    def __init__(self, version: str) -> None:
        super().__init__("No internet connection: Cannot install .NET", version)


class InstallerReportedError(AcquisitionError):
    kind = FailureKind.INSTALLER_REPORTED_ERROR

    def __init__(self, version: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Failed to install .NET {version}: {cause}", version)
        self.__cause__ = cause


class InstallerStderrError(AcquisitionError):
    kind = FailureKind.INSTALLER_PRODUCED_STDERR

    def __init__(self, version: str, stderr: str) -> None:
        self.stderr = stderr
        super().__init__(stderr, version)


class ScriptNotFoundError(FileNotFoundError):
    """The dotnet-install script could not be located."""
