# Area: Timer
"""
buzzer_quiz._timer.countdown — Pausable countdown timer
=======================================================

A countdown that can be paused and resumed any number of times and
finishes exactly once. Time is measured with a monotonic clock; the
timer re-arms itself on a scheduler at roughly 30 updates per second
so display sinks stay current.

The scheduler is anything with ``call_later(delay, callback)`` that
returns a cancellable handle. A running asyncio event loop satisfies
this and is used when no scheduler is given.
"""

from __future__ import annotations
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, List, Optional, Protocol, Union

if TYPE_CHECKING:
    from .sinks import CountdownObserver

logger = logging.getLogger("buzzer_quiz.timer")

DESIRED_FRAME_RATE_HZ = 30
UPDATE_INTERVAL_MS = 1000 / DESIRED_FRAME_RATE_HZ

# Remaining time below this is treated as zero (float drift between ticks)
_FINISH_TOLERANCE_MS = 1e-6


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Minimal interface of asyncio.AbstractEventLoop used by timers."""

    def call_later(self, delay: float, callback: Callable[..., object], *args) -> TimerHandle: ...


class CountdownTimer:
    """
    Countdown over a fixed duration in milliseconds.

    Lifecycle: created -> running <-> paused -> finished. Calling an
    operation that does not apply to the current phase (starting twice,
    pausing while paused, resuming after finish) is logged and ignored.

    Attributes:
        label: Human readable name used in log lines
    """

    def __init__(
        self,
        duration_ms: int,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        label: str = "countdown",
    ):
        if isinstance(duration_ms, bool) or not isinstance(duration_ms, int):
            raise TypeError(f"duration_ms must be an integer, got {duration_ms!r}")
        if duration_ms < 1:
            raise ValueError(f"duration_ms must be at least 1, got {duration_ms}")

        self.label = label
        self._max_duration_ms = duration_ms
        self._remaining_ms = float(duration_ms)
        self._scheduler = scheduler
        self._clock = clock
        self._last_update: Optional[float] = None
        self._handle: Optional[TimerHandle] = None
        self._started = False
        self._paused = False
        self._finished = False
        self._observers: List["CountdownObserver"] = []
        self._finish_callbacks: List[Callable[[], None]] = []

    # ── Properties ────────────────────────────────────────────────

    @property
    def max_duration_ms(self) -> int:
        return self._max_duration_ms

    @property
    def remaining_ms(self) -> float:
        """Remaining time, including time elapsed since the last tick."""
        if self.is_running:
            elapsed_ms = (self._now() - self._last_update) * 1000.0
            return max(self._remaining_ms - elapsed_ms, 0.0)
        return self._remaining_ms

    @property
    def elapsed_ms(self) -> float:
        return self._max_duration_ms - self.remaining_ms

    @property
    def is_started(self) -> bool:
        return self._started

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def is_running(self) -> bool:
        return self._started and not self._paused and not self._finished

    # ── Observers ─────────────────────────────────────────────────

    def add_observer(self, observer: "CountdownObserver") -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: "CountdownObserver") -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def add_finish_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback run once, after observers, when time runs out."""
        self._finish_callbacks.append(callback)

    # ── Control ───────────────────────────────────────────────────

    def start(self) -> None:
        if self._started:
            logger.warning(f"start() ignored for {self.label}: already started")
            return
        self._started = True
        self._last_update = self._now()
        self._notify("on_start")
        self._arm()

    def pause(self) -> None:
        if not self.is_running:
            logger.debug(f"pause() ignored for {self.label}: not running")
            return
        self._cancel_handle()
        self._subtract_elapsed()
        self._paused = True
        self._notify("on_pause")

    def resume(self) -> None:
        if not self._started or not self._paused or self._finished:
            logger.debug(f"resume() ignored for {self.label}: not paused")
            return
        self._paused = False
        self._last_update = self._now()
        self._notify("on_resume")
        self._arm()

    def start_or_resume(self) -> None:
        if not self._started:
            self.start()
        else:
            self.resume()

    def set_paused(self, paused: bool) -> None:
        if paused:
            self.pause()
        else:
            self.resume()

    def toggle_paused(self) -> None:
        self.set_paused(not self._paused)

    # ── Internals ─────────────────────────────────────────────────

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return time.monotonic()

    def _get_scheduler(self) -> Scheduler:
        if self._scheduler is None:
            self._scheduler = asyncio.get_running_loop()
        return self._scheduler

    def _subtract_elapsed(self) -> None:
        now = self._now()
        self._remaining_ms = max(
            self._remaining_ms - (now - self._last_update) * 1000.0, 0.0
        )
        self._last_update = now

    def _arm(self) -> None:
        delay_ms = min(UPDATE_INTERVAL_MS, self._remaining_ms)
        self._handle = self._get_scheduler().call_later(delay_ms / 1000.0, self._on_tick)

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_tick(self) -> None:
        self._handle = None
        if not self.is_running:
            return
        self._subtract_elapsed()
        if self._remaining_ms <= _FINISH_TOLERANCE_MS:
            self._finish()
            return
        self._notify("on_tick")
        self._arm()

    def _finish(self) -> None:
        self._finished = True
        self._remaining_ms = 0.0
        self._cancel_handle()
        logger.debug(f"{self.label} finished")
        self._notify("on_finish")
        for callback in list(self._finish_callbacks):
            callback()

    def _notify(self, hook: str) -> None:
        for observer in list(self._observers):
            getattr(observer, hook)(self)


@dataclass(frozen=True)
class CreateNew:
    """Start a fresh countdown of the given duration."""
    duration_ms: int

    def resolve(self, factory: "TimerFactory", label: str = "countdown") -> CountdownTimer:
        return factory.create(self.duration_ms, label=label)


@dataclass(frozen=True)
class ResumeExisting:
    """Continue a countdown that was paused earlier."""
    timer: CountdownTimer

    def resolve(self, factory: "TimerFactory", label: str = "countdown") -> CountdownTimer:
        return self.timer


CountdownSource = Union[CreateNew, ResumeExisting]


class TimerFactory:
    """Creates timers that share one scheduler and clock."""

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.scheduler = scheduler
        self.clock = clock

    def create(self, duration_ms: int, label: str = "countdown") -> CountdownTimer:
        return CountdownTimer(
            duration_ms, scheduler=self.scheduler, clock=self.clock, label=label
        )
