# Area: Timer
"""
Countdown timing for the quiz engine.

This package contains:
- CountdownTimer and TimerFactory
- CountdownSource variants (CreateNew, ResumeExisting)
- Display sinks (text readout, progress bar, countdown lights)
"""

from .countdown import (
    CountdownTimer,
    CountdownSource,
    CreateNew,
    ResumeExisting,
    Scheduler,
    TimerFactory,
    UPDATE_INTERVAL_MS,
)
from .sinks import (
    CountdownObserver,
    CountdownLights,
    ProgressBar,
    TextReadout,
    format_remaining,
)

__all__ = [
    "CountdownTimer",
    "CountdownSource",
    "CreateNew",
    "ResumeExisting",
    "Scheduler",
    "TimerFactory",
    "UPDATE_INTERVAL_MS",
    "CountdownObserver",
    "CountdownLights",
    "ProgressBar",
    "TextReadout",
    "format_remaining",
]
