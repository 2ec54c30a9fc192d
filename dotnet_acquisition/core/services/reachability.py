"""
Network reachability — best-effort "are we online?" probe.

Only used to label a failed install as offline vs. installer error.
Never retries anything and never raises.
"""

from __future__ import annotations

import logging
import time
import urllib.error
import urllib.request
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_PROBE_URL = "https://dotnet.microsoft.com/"


class OnlineProbe(Protocol):
    def is_online(self) -> bool:
        ...


class HttpReachabilityProbe:
    """HEAD-request a well-known endpoint with a short timeout.

    Args:
        url: Endpoint to probe.
        timeout_s: Socket timeout; bounds how long classification can block.
    """

    def __init__(self, url: str = DEFAULT_PROBE_URL, timeout_s: float = 5.0) -> None:
        self.url = url
        self.timeout_s = timeout_s

    def is_online(self) -> bool:
        start = time.monotonic()
        try:
            # A malformed URL fails here; it counts as unreachable
            req = urllib.request.Request(
                self.url,
                method="HEAD",
                headers={"User-Agent": "dotnet-acquisition/1.0"},
            )
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                elapsed = int((time.monotonic() - start) * 1000)
                logger.debug("Reachability %s → %s (%dms)", self.url, resp.getcode(), elapsed)
                return True
        except urllib.error.HTTPError as exc:
            # The server answered; any status proves connectivity
            logger.debug("Reachability %s → HTTP %s", self.url, exc.code)
            return True
        except Exception as exc:
            elapsed = int((time.monotonic() - start) * 1000)
            logger.info("Reachability probe failed for %s after %dms: %s", self.url, elapsed, str(exc)[:200])
            return False
