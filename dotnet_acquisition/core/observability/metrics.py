"""
Metrics — lightweight in-process counters.

No external dependencies.  The telemetry observer aggregates
acquisition outcomes here; the session context logs a snapshot
when it is disposed.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Counter:
    """Monotonically increasing counter."""

    name: str
    value: int = 0
    labels: dict[str, str] = field(default_factory=dict)

    def inc(self, n: int = 1) -> None:
        self.value += n

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "type": "counter", "value": self.value, "labels": self.labels}


class MetricsRegistry:
    """Central registry for all counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, Counter] = {}

    def counter(self, name: str, **labels: str) -> Counter:
        """Get or create a counter."""
        key = f"{name}:{sorted(labels.items())}" if labels else name
        with self._lock:
            if key not in self._counters:
                self._counters[key] = Counter(name=name, labels=labels)
            return self._counters[key]

    def total(self, name: str) -> int:
        """Sum of every counter called ``name`` across all label sets."""
        with self._lock:
            return sum(c.value for c in self._counters.values() if c.name == name)

    def to_dict(self) -> dict[str, list[dict]]:
        with self._lock:
            return {"counters": [c.to_dict() for c in self._counters.values()]}
