"""
buzzer_quiz.game — Quiz game assembly
=====================================

QuizGame builds the teams, the Operator and the state machine from
settings and collaborators, and exposes the inputs the outside world
sends in: key presses, manual triggers and pause.
"""

from __future__ import annotations
import logging
from typing import Callable, Optional

from ._engine import StateMachine
from ._game import GameSnapshot, Operator, Team, build_quiz_states
from ._timer import Scheduler, TextReadout, TimerFactory
from .collaborators import (
    AudioPlayer, ClueSource, LoggingPresentation, NullAudioPlayer,
    OperatorConsole, Presentation, TerminalConsole,
)
from .settings import Settings

logger = logging.getLogger("buzzer_quiz.game")


class QuizGame:
    """
    A complete game wired together.

    Attributes:
        settings: Game settings
        teams: Teams in key order
        operator: Hooks and guards used by the flow
        state_machine: Engine running the flow
        countdown_readout: Text readout of the present phase countdown
    """

    def __init__(
        self,
        clue_source: ClueSource,
        settings: Optional[Settings] = None,
        presentation: Optional[Presentation] = None,
        audio: Optional[AudioPlayer] = None,
        console: Optional[OperatorConsole] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings or Settings()
        self.presentation = presentation or LoggingPresentation()
        self.audio = audio or NullAudioPlayer()
        self.console = console or TerminalConsole()
        self.timer_factory = TimerFactory(scheduler=scheduler, clock=clock)

        self.teams = [
            Team(index, self.settings, self.timer_factory, audio=self.audio)
            for index in range(self.settings.team_count)
        ]
        self.operator = Operator(
            self.settings, self.teams, clue_source, self.timer_factory,
            audio=self.audio, console=self.console,
        )
        self.state_machine = StateMachine(
            build_quiz_states(self.operator, self.settings),
            timer_factory=self.timer_factory,
            initial_state="idle",
            presentation=self.presentation,
            console=self.console,
        )
        self.operator.attach_state_machine(self.state_machine)

        self.countdown_readout = TextReadout()
        self.state_machine.add_countdown_observer(self.countdown_readout)

    @property
    def present_state_name(self) -> str:
        return self.state_machine.present_state_name

    def start(self) -> None:
        """Show the idle state; the game itself begins on the startGame trigger."""
        self.state_machine.enter_initial_state()

    def press_key(self, key: str, text_input_focused: bool = False) -> bool:
        return self.state_machine.handle_keyboard_event(key, text_input_focused)

    def trigger(self, trigger_name: str) -> bool:
        return self.state_machine.manual_trigger(trigger_name)

    def set_paused(self, paused: bool) -> None:
        self.operator.set_paused(paused)

    def toggle_paused(self) -> None:
        self.operator.toggle_paused()

    @property
    def is_paused(self) -> bool:
        return self.operator.is_paused

    def snapshot(self) -> GameSnapshot:
        return self.operator.snapshot()

    async def drain(self) -> None:
        await self.state_machine.drain()
