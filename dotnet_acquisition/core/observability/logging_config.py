"""
Process logging for the dotnet-acquire CLI.

``setup_logging`` runs once from the CLI group callback; library modules
only ever call ``logging.getLogger(__name__)``.

Console level precedence:
    --debug / --verbose / --quiet  >  DOTNET_ACQUISITION_LOG_LEVEL  >  WARNING

A second, file-backed handler is attached when DOTNET_ACQUISITION_LOG_FILE
is set; DOTNET_ACQUISITION_LOG_FILE_LEVEL picks its level independently.
This is the developer log, separate from the per-session acquisition log
written by LoggingObserver.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_ENV_VAR = "DOTNET_ACQUISITION_LOG_LEVEL"
LOG_FILE_ENV_VAR = "DOTNET_ACQUISITION_LOG_FILE"
LOG_FILE_LEVEL_ENV_VAR = "DOTNET_ACQUISITION_LOG_FILE_LEVEL"

# ── Formats per console level ───────────────────────────────────

_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_CONSOLE_DEFAULT_FORMAT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Chatty below WARNING and never useful to someone installing a runtime.
_NOISY_LOGGERS = ("asyncio", "urllib3")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, falling back to the env var."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install the console handler, and the file handler when asked.

    Replaces any handlers already on the root logger, so calling it twice
    (as CliRunner-driven tests do) does not duplicate output.
    """
    console_level = _parse_level(level)
    fmt, datefmt = _format_for(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_level = _parse_level(log_file_level) if log_file_level else console_level

        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def _format_for(level: int) -> tuple[str, str | None]:
    for threshold in sorted(_CONSOLE_FORMATS):
        if level <= threshold:
            return _CONSOLE_FORMATS[threshold]
    return _CONSOLE_DEFAULT_FORMAT


def _parse_level(level: str | None) -> int:
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
