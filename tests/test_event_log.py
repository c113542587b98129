"""Tests for the bounded, thread-safe event log."""

import sys
import os
import threading

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from shadow_ai.utils.event_log import EventLog, SimEvent


def _ev(frame: int, category: str = "alert") -> SimEvent:
    return SimEvent(frame=frame, category=category, message=f"event at {frame}")


class TestEventLog:
    def test_since_frame(self):
        log = EventLog()
        log.append_many([_ev(1), _ev(2), _ev(3)])
        assert [e.frame for e in log.since_frame(2)] == [2, 3]
        assert log.since_frame(10) == []

    def test_latest(self):
        log = EventLog()
        for f in range(10):
            log.append(_ev(f))
        assert [e.frame for e in log.latest(3)] == [7, 8, 9]
        assert log.latest(0) == []
        assert len(log.latest(100)) == 10

    def test_bounded(self):
        log = EventLog(maxlen=5)
        log.append_many([_ev(f) for f in range(12)])
        assert len(log) == 5
        assert [e.frame for e in log.latest(5)] == [7, 8, 9, 10, 11]

    def test_clear(self):
        log = EventLog()
        log.append(_ev(1, "contact"))
        log.clear()
        assert len(log) == 0

    def test_concurrent_appends(self):
        log = EventLog(maxlen=None)

        def writer(offset: int) -> None:
            for i in range(500):
                log.append(_ev(offset + i))

        threads = [threading.Thread(target=writer, args=(n * 1000,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(log) == 2000
