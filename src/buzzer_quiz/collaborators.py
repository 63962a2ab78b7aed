"""
buzzer_quiz.collaborators — Outer surfaces of the game
======================================================

The engine and game only talk to the outside world through these
interfaces: the audience presentation, sound cues, the operator's
console and the source of clues. Terminal and null implementations
are provided for the command line runner and for tests.
"""

from __future__ import annotations
import logging
import sys
from typing import Any, Awaitable, Callable, FrozenSet, Mapping, Protocol, TextIO, Union

logger = logging.getLogger("buzzer_quiz.collaborators")

SLIDE_NAMES: FrozenSet[str] = frozenset({
    "slide-logo",
    "slide-spinner",
    "slide-clue-category-and-value",
    "slide-clue-question",
    "slide-clue-answer",
    "slide-game-end",
})

# Raw clue records as returned by a clue source; validated by the game
ClueSource = Callable[[], Awaitable[Union[Mapping[str, Any], Any]]]


class Presentation(Protocol):
    """Audience-facing slides."""

    @property
    def slide_names(self) -> FrozenSet[str]: ...

    def show_slide(self, slide_name: str) -> None: ...


class AudioPlayer(Protocol):
    def play(self, cue_name: str) -> None: ...


class OperatorConsole(Protocol):
    """What the human running the game sees."""

    def set_instructions(self, text: str) -> None: ...

    def show_message(self, text: str) -> None: ...

    def alert(self, message: str) -> None: ...


class LoggingPresentation:
    """Presentation that records the slide shown and logs it."""

    def __init__(self, slide_names: FrozenSet[str] = SLIDE_NAMES):
        self._slide_names = frozenset(slide_names)
        self.current_slide = None

    @property
    def slide_names(self) -> FrozenSet[str]:
        return self._slide_names

    def show_slide(self, slide_name: str) -> None:
        self.current_slide = slide_name
        logger.debug(f"Slide: {slide_name}")


class NullAudioPlayer:
    def play(self, cue_name: str) -> None:
        pass


class LoggingAudioPlayer:
    """Logs each cue instead of playing it; keeps the last cues for inspection."""

    def __init__(self):
        self.played = []

    def play(self, cue_name: str) -> None:
        self.played.append(cue_name)
        logger.debug(f"Sound cue: {cue_name}")


class TerminalConsole:
    """Operator console on a text terminal."""

    def __init__(self, out: TextIO = None, err: TextIO = None):
        self._out = out or sys.stdout
        self._err = err or sys.stderr

    def set_instructions(self, text: str) -> None:
        print(f"[operator] {text}", file=self._out, flush=True)

    def show_message(self, text: str) -> None:
        print(text, file=self._out, flush=True)

    def alert(self, message: str) -> None:
        print(f"\a[ALERT] {message}", file=self._err, flush=True)
