"""
Native-dependency prober (Linux only).

A .NET process that cannot load a native library it needs dies from a
signal instead of exiting with a code.  The prober runs a caller-chosen
test command, looks only at the termination signal, and when it matches
posts MissingNativeDependencies and prompts the user.  It never tries
to install anything itself, and it never changes the outcome of the
command that asked for the check.
"""

from __future__ import annotations

import logging
import signal
import subprocess
from typing import Protocol, Sequence

from dotnet_acquisition.core.models.events import MissingNativeDependencies
from dotnet_acquisition.core.platform import Platform, capabilities_for
from dotnet_acquisition.core.services.event_stream import EventStream

logger = logging.getLogger(__name__)

MISSING_DEPENDENCY_SIGNAL = signal.SIGILL
MISSING_DEPENDENCY_MESSAGE = "Failed to run .NET tooling."


class RemediationPrompt(Protocol):
    def prompt_install(self, message: str) -> None:
        ...


def signal_indicates_missing_dependencies(signum: int | None) -> bool:
    """True when ``signum`` is the missing-shared-library signal."""
    return signum is not None and signum == MISSING_DEPENDENCY_SIGNAL


def _termination_signal(returncode: int) -> int | None:
    # subprocess reports death-by-signal N as returncode -N
    return -returncode if returncode < 0 else None


class NativeDependencyProber:
    """Detect missing Linux dependencies by running a test command.

    Args:
        event_stream: Receives MissingNativeDependencies on a positive probe.
        prompt: Remediation prompt shown on a positive probe.
        platform: Platform to gate on (default: current).
        timeout_s: Limit for the test command; a timeout is a negative result.
    """

    def __init__(
        self,
        event_stream: EventStream,
        prompt: RemediationPrompt,
        *,
        platform: Platform | None = None,
        timeout_s: float | None = 60.0,
    ) -> None:
        self._events = event_stream
        self._prompt = prompt
        self._caps = capabilities_for(platform)
        self._timeout_s = timeout_s

    def probe(self, command: str, args: Sequence[str] = ()) -> bool:
        if not self._caps.probes_native_dependencies:
            logger.debug("Native dependency probe skipped on %s", self._caps.platform)
            return False

        cmd = [command, *args]
        logger.debug("Probing native dependencies with %s", cmd)
        try:
            result = subprocess.run(cmd, capture_output=True, timeout=self._timeout_s)
        except subprocess.TimeoutExpired:
            logger.warning("Dependency test command timed out (%ss): %s", self._timeout_s, cmd)
            return False
        except OSError as e:
            logger.warning("Dependency test command could not start: %s (%s)", cmd, e)
            return False

        if not signal_indicates_missing_dependencies(_termination_signal(result.returncode)):
            return False

        logger.info("Test command %s killed by %s: native dependencies missing", cmd, MISSING_DEPENDENCY_SIGNAL.name)
        self._events.post(MissingNativeDependencies())
        self._prompt.prompt_install(MISSING_DEPENDENCY_MESSAGE)
        return True
