"""Thread-safe event log for alert and contact events exposed via the API."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SimEvent:
    """A single simulation event for the API event feed.

    ``category`` is ``"alert"`` for hunt-state changes, ``"contact"`` for
    an agent touching the target, ``"key"`` and ``"exit"`` for target
    pickups and ``"system"`` for lifecycle notes.
    """

    frame: int
    category: str
    message: str
    agent_ids: tuple[int, ...] = ()


class EventLog:
    """Bounded event log. The WorldLoop appends; API readers copy slices."""

    __slots__ = ("_buffer", "_lock")

    def __init__(self, maxlen: int | None = 2000) -> None:
        self._buffer: deque[SimEvent] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffer)

    def append(self, event: SimEvent) -> None:
        with self._lock:
            self._buffer.append(event)

    def append_many(self, events: list[SimEvent]) -> None:
        with self._lock:
            self._buffer.extend(events)

    def since_frame(self, frame: int) -> list[SimEvent]:
        """Return all events with frame >= *frame*."""
        with self._lock:
            return [e for e in self._buffer if e.frame >= frame]

    def latest(self, count: int = 50) -> list[SimEvent]:
        """Return the *count* most recent events, oldest first."""
        if count <= 0:
            return []
        with self._lock:
            items = list(self._buffer)
        return items[-count:]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
