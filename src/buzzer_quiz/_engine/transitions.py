# Area: Engine
"""
buzzer_quiz._engine.transitions — Transition kinds
==================================================

Five kinds of transition leave a state: a named manual trigger, a key
press, an awaitable completing, a countdown running out, and an
immediate if/else branch. Every transition carries its ``type`` tag
and the engine dispatches on that tag.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union


class TransitionType(Enum):
    """Kind of a transition."""
    MANUAL_TRIGGER = "manualTrigger"
    KEYBOARD = "keyboard"
    PROMISE = "promise"
    TIMEOUT = "timeout"
    IF = "if"


class CountdownBehavior(Enum):
    """
    What happens to a state's countdown when the state is re-entered.

    RESET_EVERY_ENTRY: a fresh countdown starts on every entry.
    CONTINUE_UNTIL_RESET: a paused countdown resumes where it stopped
        until the engine is told to reset it.
    """
    RESET_EVERY_ENTRY = "new"
    CONTINUE_UNTIL_RESET = "continue"


@dataclass(frozen=True)
class Callback:
    """A hook with a label so logs and diagnostics can name it."""
    label: str
    fn: Callable[..., Any]

    def __call__(self, *args: Any) -> Any:
        return self.fn(*args)


@dataclass(frozen=True)
class KeyPress:
    """A single-character key press, passed to keyboard hooks."""
    key: str

    @property
    def team_index(self) -> Optional[int]:
        """Zero-based team index for keys '1'..'9', otherwise None."""
        if len(self.key) == 1 and self.key in "123456789":
            return int(self.key) - 1
        return None


@dataclass
class Branch:
    """One side of an If transition."""
    destination: str
    on_transition: Optional[Callback] = None


@dataclass
class ManualTrigger:
    trigger_name: str
    destination: str
    guard: Optional[Callback] = None
    on_transition: Optional[Callback] = None
    type: TransitionType = field(default=TransitionType.MANUAL_TRIGGER, init=False)

    @property
    def label(self) -> str:
        return f"manual:{self.trigger_name}"

    def destinations(self) -> List[str]:
        return [self.destination]


@dataclass
class Keyboard:
    """Taken when one of ``keys`` is pressed. Keys match case-insensitively."""
    keys: Iterable[str]
    destination: str
    guard: Optional[Callback] = None
    on_transition: Optional[Callback] = None
    type: TransitionType = field(default=TransitionType.KEYBOARD, init=False)

    def __post_init__(self):
        self.keys = frozenset(key.lower() for key in self.keys)

    @property
    def label(self) -> str:
        return "keyboard:" + "".join(sorted(self.keys))

    def matches(self, key: str) -> bool:
        return key.lower() in self.keys

    def destinations(self) -> List[str]:
        return [self.destination]


@dataclass
class Promise:
    """Taken when the awaitable returned by ``start`` completes."""
    start: Callable[[], Awaitable[Any]]
    destination: str
    name: str = "promise"
    guard: Optional[Callback] = None
    type: TransitionType = field(default=TransitionType.PROMISE, init=False)

    @property
    def label(self) -> str:
        return f"promise:{self.name}"

    def destinations(self) -> List[str]:
        return [self.destination]


@dataclass
class Timeout:
    """
    Taken when the state's countdown finishes.

    ``duration_ms`` is an int or a zero-argument callable returning one,
    evaluated when a fresh countdown is created. ``on_countdown`` runs
    with (timer, context) each time the countdown starts or resumes so
    displays can be attached.
    """
    duration_ms: Union[int, Callable[[], int]]
    destination: str
    behavior: CountdownBehavior = CountdownBehavior.RESET_EVERY_ENTRY
    guard: Optional[Callback] = None
    on_transition: Optional[Callback] = None
    on_countdown: Optional[Callback] = None
    type: TransitionType = field(default=TransitionType.TIMEOUT, init=False)

    @property
    def label(self) -> str:
        return f"timeout:{self.behavior.value}"

    def resolve_duration(self) -> int:
        if callable(self.duration_ms):
            return self.duration_ms()
        return self.duration_ms

    def destinations(self) -> List[str]:
        return [self.destination]


@dataclass
class If:
    """Taken immediately on entry: ``then`` when condition holds, else ``otherwise``."""
    condition: Callback
    then: Branch
    otherwise: Branch
    type: TransitionType = field(default=TransitionType.IF, init=False)

    @property
    def label(self) -> str:
        return f"if:{self.condition.label}"

    def destinations(self) -> List[str]:
        return [self.then.destination, self.otherwise.destination]


Transition = Union[ManualTrigger, Keyboard, Promise, Timeout, If]
