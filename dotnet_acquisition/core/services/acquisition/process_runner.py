"""
Process runner — the SINGLE PLACE where install scripts are executed.

Bounds are enforced here, not by the script:
    - combined stdout+stderr capture is capped (500 KiB by default);
      going over the cap kills the process
    - wall-clock timeout (30 s by default), after which the whole
      process group is killed with SIGKILL, including background
      children that outlived the shell

Either way the awaited ``run()`` completes with a ProcessOutcome whose
``error`` is set; a killed installer is classified like any other
failed one.  Spawn failures raise out of ``run()`` because there is no
outcome to report.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time
from pathlib import Path

from dotnet_acquisition.core.models.request import ProcessOutcome, ResolvedCommand
from dotnet_acquisition.core.platform import Platform, capabilities_for
from dotnet_acquisition.core.services.acquisition.errors import (
    InstallScriptError,
    OutputLimitExceededError,
    ProcessExitError,
    ProcessTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0
DEFAULT_MAX_BUFFER_BYTES = 500 * 1024

_CHUNK_SIZE = 8192
# Time allowed for the pipes to reach EOF after the group is killed
_KILL_GRACE_S = 2.0


class _OutputBudget:
    """Byte budget shared by the stdout and stderr readers."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.used = 0

    def take(self, n: int) -> int:
        allowed = max(0, min(n, self.limit - self.used))
        self.used += allowed
        return allowed


async def _pump(stream: asyncio.StreamReader, sink: bytearray, budget: _OutputBudget) -> None:
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            return
        allowed = budget.take(len(chunk))
        sink.extend(chunk[:allowed])
        if allowed < len(chunk):
            raise OutputLimitExceededError(budget.limit)


def _kill(proc: asyncio.subprocess.Process) -> None:
    try:
        if os.name == "posix":
            # The shell leads its own process group. Kill the group even if
            # the shell has exited: background children may still hold the pipes.
            os.killpg(proc.pid, signal.SIGKILL)
        elif proc.returncode is None:
            proc.kill()
    except (ProcessLookupError, PermissionError):
        # Group already gone (PermissionError: only zombies left on macOS)
        pass


class ProcessRunner:
    """Run installer commands with output and time bounds.

    Args:
        timeout_s: Wall-clock limit before the process is killed.
        max_buffer_bytes: Combined stdout+stderr capture limit.
        cwd: Working directory (default: the caller's cwd at run time).
    """

    def __init__(
        self,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        max_buffer_bytes: int = DEFAULT_MAX_BUFFER_BYTES,
        cwd: str | Path | None = None,
    ) -> None:
        self.timeout_s = timeout_s
        self.max_buffer_bytes = max_buffer_bytes
        self.cwd = cwd

    async def run(self, command: ResolvedCommand, platform: Platform | None = None) -> ProcessOutcome:
        caps = capabilities_for(platform)
        command_line = command.with_shell_prefix(caps.shell_prefix).command_line
        cwd = str(self.cwd) if self.cwd else os.getcwd()

        logger.debug("Executing: %s (cwd=%s)", command_line, cwd)
        start = time.monotonic()

        proc = await asyncio.create_subprocess_shell(
            command_line,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
            start_new_session=os.name == "posix",
        )

        stdout, stderr = bytearray(), bytearray()
        budget = _OutputBudget(self.max_buffer_bytes)
        tasks = [
            asyncio.ensure_future(_pump(proc.stdout, stdout, budget)),
            asyncio.ensure_future(_pump(proc.stderr, stderr, budget)),
            asyncio.ensure_future(proc.wait()),
        ]

        # asyncio.wait leaves unfinished readers running, so they can drain
        # to EOF once the process group is dead
        done, pending = await asyncio.wait(
            tasks, timeout=self.timeout_s, return_when=asyncio.FIRST_EXCEPTION,
        )
        error: BaseException | None = next(
            (t.exception() for t in done if not t.cancelled() and t.exception() is not None),
            None,
        )
        if error is None and pending:
            error = ProcessTimeoutError(self.timeout_s, command_line)

        if error is not None:
            logger.warning("%s", error)
            _kill(proc)
            if pending:
                _, stuck = await asyncio.wait(pending, timeout=_KILL_GRACE_S)
                for task in stuck:
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            await proc.wait()
            if not isinstance(error, InstallScriptError):
                raise error
        elif proc.returncode != 0:
            error = ProcessExitError(proc.returncode, command_line)

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            "Install script finished (exit=%s, %dms, stdout=%dB, stderr=%dB)",
            proc.returncode, elapsed_ms, len(stdout), len(stderr),
        )

        return ProcessOutcome(
            error=error,
            stdout=stdout.decode("utf-8", "replace"),
            stderr=stderr.decode("utf-8", "replace"),
            returncode=proc.returncode,
        )
