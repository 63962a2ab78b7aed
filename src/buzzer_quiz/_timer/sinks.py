# Area: Timer
"""
buzzer_quiz._timer.sinks — Countdown display sinks
==================================================

Write-only observers that mirror a CountdownTimer: a text readout,
a progress bar and the row of countdown lights shown under the team
that is answering. Sinks never feed anything back into the timer.
"""

from __future__ import annotations
import math
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

if TYPE_CHECKING:
    from ..collaborators import AudioPlayer
    from .countdown import CountdownTimer


class CountdownObserver:
    """Base observer; every hook is a no-op."""

    def on_start(self, timer: "CountdownTimer") -> None:
        pass

    def on_tick(self, timer: "CountdownTimer") -> None:
        pass

    def on_pause(self, timer: "CountdownTimer") -> None:
        pass

    def on_resume(self, timer: "CountdownTimer") -> None:
        pass

    def on_finish(self, timer: "CountdownTimer") -> None:
        pass


def format_remaining(remaining_ms: float) -> str:
    """
    Format remaining time for the text readout.

    Under a minute shows tenths of a second ("4.2 sec"), longer
    durations show whole minutes and seconds ("2 min 5 sec").
    """
    seconds = max(remaining_ms, 0.0) / 1000.0
    if seconds > 60:
        minutes = int(seconds // 60)
        return f"{minutes} min {int(seconds - minutes * 60)} sec"
    return f"{seconds:.1f} sec"


class TextReadout(CountdownObserver):
    """Keeps a text rendering of the remaining time."""

    FINISHED_TEXT = "Done"

    def __init__(self, on_change: Optional[Callable[[str], None]] = None):
        self.text = ""
        self.paused = False
        self._on_change = on_change

    def _render(self, text: str) -> None:
        if text != self.text:
            self.text = text
            if self._on_change is not None:
                self._on_change(text)

    def on_start(self, timer):
        self.paused = False
        self._render(format_remaining(timer.remaining_ms))

    def on_tick(self, timer):
        self._render(format_remaining(timer.remaining_ms))

    def on_pause(self, timer):
        self.paused = True
        self._render(format_remaining(timer.remaining_ms))

    def on_resume(self, timer):
        self.paused = False

    def on_finish(self, timer):
        self.paused = False
        self._render(self.FINISHED_TEXT)


class ProgressBar(CountdownObserver):
    """Progress bar whose value is the remaining time."""

    def __init__(self, hide_on_finish: bool = False):
        self.value = 0.0
        self.maximum = 0
        self.paused = False
        self.visible = False
        self._hide_on_finish = hide_on_finish

    @property
    def fraction(self) -> float:
        if not self.maximum:
            return 0.0
        return self.value / self.maximum

    def on_start(self, timer):
        self.maximum = timer.max_duration_ms
        self.value = timer.remaining_ms
        self.visible = True
        self.paused = False

    def on_tick(self, timer):
        self.value = timer.remaining_ms

    def on_pause(self, timer):
        self.value = timer.remaining_ms
        self.paused = True

    def on_resume(self, timer):
        self.paused = False

    def on_finish(self, timer):
        self.value = 0.0
        self.paused = False
        if self._hide_on_finish:
            self.visible = False


class CountdownLights(CountdownObserver):
    """
    Row of lights numbered 5,4,3,2,1,2,3,4,5 counting down the last seconds.

    Lights whose number is at least ceil(remaining seconds) + 1 are off.
    Each time that threshold changes a tick cue plays, except for the
    first threshold after start and the final one.
    """

    LIGHT_NUMBERS: Sequence[int] = (5, 4, 3, 2, 1, 2, 3, 4, 5)
    TICK_CUE = "tick"

    def __init__(self, audio: Optional["AudioPlayer"] = None):
        self.lit: List[bool] = [False] * len(self.LIGHT_NUMBERS)
        self._audio = audio
        self._threshold: Optional[int] = None

    @property
    def lit_count(self) -> int:
        return sum(self.lit)

    @staticmethod
    def threshold_for(remaining_ms: float) -> int:
        return math.ceil(max(remaining_ms, 0.0) / 1000.0) + 1

    def on_start(self, timer):
        self.lit = [True] * len(self.LIGHT_NUMBERS)
        self._threshold = None
        self._update(timer.remaining_ms)

    def on_tick(self, timer):
        self._update(timer.remaining_ms)

    def on_pause(self, timer):
        self._update(timer.remaining_ms)

    def on_finish(self, timer):
        self.lit = [False] * len(self.LIGHT_NUMBERS)
        self._threshold = None

    def _update(self, remaining_ms: float) -> None:
        threshold = self.threshold_for(remaining_ms)
        if threshold == self._threshold:
            return
        first = self._threshold is None
        self._threshold = threshold
        self.lit = [
            is_lit and number < threshold
            for is_lit, number in zip(self.lit, self.LIGHT_NUMBERS)
        ]
        if not first and threshold != 1 and self._audio is not None:
            self._audio.play(self.TICK_CUE)
