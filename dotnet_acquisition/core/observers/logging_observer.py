"""
LoggingObserver — durable per-session acquisition log.

Writes one line per event to a log file so that a failed install can be
diagnosed after the fact (the CLI points users at this file on error).
Events are mirrored to the module logger at DEBUG.
"""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime
from pathlib import Path

from dotnet_acquisition.core.models.events import AcquisitionEvent

logger = logging.getLogger(__name__)


class LoggingObserver:
    def __init__(self, log_file: Path) -> None:
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._fh = self.log_file.open("a", encoding="utf-8")

    def post(self, event: AcquisitionEvent) -> None:
        line = f"{datetime.now(UTC).isoformat()} {event.event_name} {event.describe()}"
        logger.debug("%s", line)
        with self._lock:
            if self._fh.closed:
                return
            self._fh.write(line.rstrip("\n") + "\n")
            self._fh.flush()

    def dispose(self) -> None:
        with self._lock:
            if not self._fh.closed:
                self._fh.close()
