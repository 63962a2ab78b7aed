# Area: Game
"""
buzzer_quiz._game.team — Team state, lockout and scoring
========================================================

Each team has a buzzer state. A team that buzzes while the question
is still being read is locked out for a short time; any state the game
assigns during the lockout is remembered and applied when it ends.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from .._timer import CountdownLights, CountdownTimer, ProgressBar, TimerFactory

if TYPE_CHECKING:
    from ..collaborators import AudioPlayer
    from ..settings import Settings
    from .clue import Clue

logger = logging.getLogger("buzzer_quiz.team")


class TeamState(Enum):
    """
    Buzzer state of a team.

    BUZZERS_OFF -> READING_QUESTION (question shown)
    READING_QUESTION -> LOCKOUT (buzzed too early)
    READING_QUESTION -> CAN_ANSWER (operator done reading)
    CAN_ANSWER -> ANSWERING (buzzed first)
    ANSWERING -> CAN_ANSWER or ALREADY_ANSWERED (wrong answer or timeout)
    any -> BUZZERS_OFF (answer shown)
    """
    BUZZERS_OFF = "buzzers-off"
    READING_QUESTION = "reading-question"
    CAN_ANSWER = "can-answer"
    ANSWERING = "answering"
    ALREADY_ANSWERED = "already-answered"
    LOCKOUT = "lockout"


@dataclass
class TeamStatistics:
    questions_not_buzzed: int = 0
    questions_buzzed_then_answered_right: int = 0
    questions_buzzed_then_answered_wrong_or_timed_out: int = 0
    money_at_end_of_each_round: List[int] = field(default_factory=list)


class Team:
    """
    One team: buzzer state, money and statistics.

    Attributes:
        index: Zero-based team index; the team's key is index + 1
        name: Display name
        money: Current score
        has_buzzed_for_current_clue: Set once the team buzzes on the present clue
        lockout_bar: Progress bar mirroring the lockout countdown
        countdown_lights: Lights shown while this team is answering
    """

    def __init__(
        self,
        index: int,
        settings: "Settings",
        timer_factory: TimerFactory,
        audio: Optional["AudioPlayer"] = None,
        name: Optional[str] = None,
    ):
        self.index = index
        self.name = name or f"Team {index + 1}"
        self.money = 0
        self.statistics = TeamStatistics()
        self.has_buzzed_for_current_clue = False
        self.lockout_bar = ProgressBar(hide_on_finish=True)
        self.countdown_lights = CountdownLights(audio)
        self._settings = settings
        self._timer_factory = timer_factory
        self._audio = audio
        self._state = TeamState.BUZZERS_OFF
        self._state_to_restore: Optional[TeamState] = None
        self._lockout_timer: Optional[CountdownTimer] = None

    @property
    def state(self) -> TeamState:
        return self._state

    @property
    def state_to_restore(self) -> Optional[TeamState]:
        """State to apply when the present lockout ends."""
        return self._state_to_restore

    # ── State ─────────────────────────────────────────────────────

    def set_state(self, target: TeamState, end_lockout: bool = False) -> None:
        """
        Change state, or remember it for later while locked out.

        Args:
            target: New state
            end_lockout: Apply immediately even during a lockout
        """
        if not isinstance(target, TeamState):
            raise ValueError(f"not a team state: {target!r}")

        if self._state is TeamState.LOCKOUT and not end_lockout:
            self._state_to_restore = target
            logger.debug(f"{self.name} locked out, will change to {target.value} afterwards")
            return

        self._state = target
        if target is not TeamState.LOCKOUT:
            self._state_to_restore = None
            if self._lockout_timer is not None:
                # Lockout cut short, the timer never finishes
                self._lockout_timer.pause()
                self._lockout_timer = None
                self.lockout_bar.visible = False

    def can_buzz(self) -> bool:
        return self._state is TeamState.CAN_ANSWER

    def can_be_locked_out(self) -> bool:
        return self._state is TeamState.READING_QUESTION

    def start_lockout(self) -> bool:
        """Lock the team out for the lockout duration. Returns False if not applicable."""
        if not self.can_be_locked_out():
            logger.debug(f"{self.name} cannot be locked out in state {self._state.value}")
            return False

        self._state_to_restore = self._state
        self._state = TeamState.LOCKOUT
        timer = self._timer_factory.create(
            self._settings.duration_lockout_ms, label=f"{self.name} lockout"
        )
        timer.add_observer(self.lockout_bar)
        timer.add_finish_callback(self.end_lockout)
        self._lockout_timer = timer
        timer.start()
        logger.info(f"{self.name} buzzed too early, locked out")
        return True

    def end_lockout(self) -> None:
        if self._state is not TeamState.LOCKOUT:
            return
        restore = self._state_to_restore or TeamState.READING_QUESTION
        self._lockout_timer = None
        self.set_state(restore, end_lockout=True)
        logger.debug(f"{self.name} lockout over, now {restore.value}")

    def set_paused(self, paused: bool) -> None:
        if self._lockout_timer is not None:
            self._lockout_timer.set_paused(paused)

    # ── Answering ─────────────────────────────────────────────────

    def start_answer(self) -> None:
        self.has_buzzed_for_current_clue = True
        self.set_state(TeamState.ANSWERING)

    def handle_answer_correct(self, clue: "Clue") -> None:
        self.money_add(clue.value)
        self.statistics.questions_buzzed_then_answered_right += 1
        if self._audio is not None:
            self._audio.play("answerCorrect")

    def handle_answer_wrong_or_timeout(self, clue: "Clue") -> None:
        self.money_subtract(round(clue.value * self._settings.wrong_answer_penalty_multiplier))
        self.statistics.questions_buzzed_then_answered_wrong_or_timed_out += 1
        if self._audio is not None:
            self._audio.play("answerWrong")
        if self._settings.allow_multiple_answers_to_same_question:
            self.set_state(TeamState.CAN_ANSWER)
        else:
            self.set_state(TeamState.ALREADY_ANSWERED)

    # ── Money ─────────────────────────────────────────────────────

    def money_add(self, amount: int) -> None:
        self.money += amount

    def money_subtract(self, amount: int) -> None:
        self.money -= amount

    def money_set(self, amount: int) -> None:
        self.money = amount

    def record_end_of_round(self) -> None:
        self.statistics.money_at_end_of_each_round.append(self.money)

    def reset(self) -> None:
        """Back to the start-of-game state."""
        self.set_state(TeamState.BUZZERS_OFF, end_lockout=True)
        self.money = 0
        self.statistics = TeamStatistics()
        self.has_buzzed_for_current_clue = False
