"""
EventStream — in-process pub/sub for acquisition events.

Every acquisition step posts exactly one event here.  Sinks (log file,
console, telemetry) subscribe; the pipeline never knows which exist.

Thread safety model
───────────────────
- ``_lock`` protects ``_seq``, ``_buffer`` and ``_subscribers``.
- ``post()`` snapshots the subscriber list under the lock and delivers
  outside it, so handlers may subscribe/unsubscribe during delivery.
- A handler that raises is logged and skipped; remaining handlers still
  receive the event and the poster never sees the exception.

One instance per host session, passed explicitly to every component
(see ``dotnet_acquisition.core.context``).  There is no module-level
singleton.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Callable

from dotnet_acquisition.core.models.events import AcquisitionEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[AcquisitionEvent], None]


class Subscription:
    """Handle returned by :meth:`EventStream.subscribe`."""

    def __init__(self, stream: EventStream, handler: EventHandler) -> None:
        self._stream = stream
        self.handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def dispose(self) -> None:
        """Stop receiving events.  Safe to call more than once."""
        if self._active:
            self._active = False
            self._stream._remove(self)


class EventStream:
    """Synchronous, ordered fan-out of acquisition events.

    Parameters
    ----------
    buffer_size : int
        Number of recently posted events kept for :meth:`recent`.
    """

    def __init__(self, *, buffer_size: int = 200) -> None:
        self._lock = threading.Lock()
        self._seq: int = 0
        self._buffer: deque[tuple[int, AcquisitionEvent]] = deque(maxlen=buffer_size)
        self._subscribers: list[Subscription] = []

    # ── Properties ──────────────────────────────────────────────

    @property
    def seq(self) -> int:
        """Number of events posted so far."""
        with self._lock:
            return self._seq

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    # ── Subscribing ─────────────────────────────────────────────

    def subscribe(self, handler: EventHandler) -> Subscription:
        """Register ``handler``; it sees every event posted from now on."""
        sub = Subscription(self, handler)
        with self._lock:
            self._subscribers.append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        with self._lock:
            if sub in self._subscribers:
                self._subscribers.remove(sub)

    # ── Posting ─────────────────────────────────────────────────

    def post(self, event: AcquisitionEvent) -> None:
        """Deliver ``event`` to every current subscriber, in subscription order."""
        with self._lock:
            self._seq += 1
            self._buffer.append((self._seq, event))
            targets = list(self._subscribers)

        logger.debug("event %s", event.event_name)

        for sub in targets:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception:
                logger.exception("Event handler %r failed on %s", sub.handler, event.event_name)

    # ── Replay ──────────────────────────────────────────────────

    def recent(self, limit: int | None = None) -> list[AcquisitionEvent]:
        """Most recently posted events, oldest first."""
        with self._lock:
            events = [event for _, event in self._buffer]
        if limit is not None:
            return events[-limit:] if limit > 0 else []
        return events
