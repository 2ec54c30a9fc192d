"""
Request, command and outcome models — the acquisition I/O contract.

An InstallRequest goes in, a ResolvedCommand is built from it, the
runner turns that into a ProcessOutcome, and the classifier maps the
outcome to success or exactly one FailureKind.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Versions reach the installer through a shell command line unquoted
_VERSION_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._+-]*")


class FailureKind(StrEnum):
    """The complete taxonomy of acquisition failures."""

    OFFLINE = "offline"
    INSTALLER_REPORTED_ERROR = "installer_reported_error"
    INSTALLER_PRODUCED_STDERR = "installer_produced_stderr"
    UNEXPECTED_INVOCATION_ERROR = "unexpected_invocation_error"


class InstallRequest(BaseModel):
    """One acquisition call: which version, where, and the resulting binary.

    ``version`` is passed to the installer verbatim — resolution of
    channels like ``6.0`` happens before a request is built.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    install_dir: Path
    dotnet_path: Path

    @field_validator("version")
    @classmethod
    def _version_is_shell_safe(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("version must not be empty")
        if not _VERSION_PATTERN.fullmatch(v):
            raise ValueError(
                f"version {v!r} may only contain letters, digits and . _ + -"
            )
        return v


class ResolvedCommand(BaseModel):
    """A platform-correct installer invocation.

    ``arguments`` are already quoted for the target shell; only the
    executable path is quoted at render time.
    """

    model_config = ConfigDict(frozen=True)

    executable_path: str
    arguments: list[str] = Field(default_factory=list)
    platform_shell_prefix: str | None = None

    @property
    def command_line(self) -> str:
        """Render the full command line for the shell."""
        parts = [f'"{self.executable_path}"', *self.arguments]
        if self.platform_shell_prefix:
            parts.insert(0, self.platform_shell_prefix)
        return " ".join(parts)

    def with_shell_prefix(self, prefix: str | None) -> ResolvedCommand:
        """Return a copy wrapped with ``prefix`` (no-op when None)."""
        if prefix is None:
            return self
        return self.model_copy(update={"platform_shell_prefix": prefix})


@dataclass(frozen=True)
class ProcessOutcome:
    """What one installer run produced.

    ``error`` is non-None when the process exited non-zero, was killed
    (timeout or output cap), and None on a clean exit.
    """

    error: BaseException | None = None
    stdout: str = ""
    stderr: str = ""
    returncode: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
