# Area: Test Support
"""Shared fixtures: a hand-driven scheduler and clock for timers."""

import heapq
import itertools

import pytest

from buzzer_quiz._timer import TimerFactory


class ManualHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler with a fake clock. Nothing runs until advance() is called;
    callbacks due at the same time run in the order they were scheduled.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._queue = []
        self._sequence = itertools.count()

    def clock(self) -> float:
        return self.now

    def call_later(self, delay, callback, *args):
        handle = ManualHandle()
        due = self.now + max(delay, 0.0)
        heapq.heappush(self._queue, (due, next(self._sequence), handle, callback, args))
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            if not handle.cancelled:
                callback(*args)
        self.now = target

    def advance_ms(self, milliseconds: float) -> None:
        self.advance(milliseconds / 1000.0)

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def timer_factory(scheduler):
    return TimerFactory(scheduler=scheduler, clock=scheduler.clock)
