# Area: Game
"""
buzzer_quiz._game.operator — Game-phase side effects
====================================================

The Operator owns the teams, the present clue and the overall game
clock. Its methods are the hooks and guards referenced by the game
flow table: they update team states, score answers, play sound cues
and tell the human operator what to do next.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, List, Optional

from .._timer import CountdownTimer, TimerFactory
from ..errors import InvalidTeamError
from .clue import Clue, fetch_clue_with_retries
from .snapshot import GameSnapshot, build_snapshot
from .team import Team, TeamState

if TYPE_CHECKING:
    from .._engine import KeyPress, StateMachine
    from ..collaborators import AudioPlayer, ClueSource, OperatorConsole
    from ..settings import Settings

logger = logging.getLogger("buzzer_quiz.operator")

WAIT_FOR_BUZZES_STATE = "waitForBuzzes"


class Operator:
    """
    Hooks and guards for the game flow.

    Attributes:
        teams: Teams in key order (key '1' is teams[0])
        present_clue: Clue currently in play
        team_presently_answering: Team that buzzed in, while it answers
        rounds_played: Number of clues completed
    """

    def __init__(
        self,
        settings: "Settings",
        teams: List[Team],
        clue_source: "ClueSource",
        timer_factory: TimerFactory,
        audio: "AudioPlayer",
        console: "OperatorConsole",
    ):
        self.settings = settings
        self.teams = teams
        self.present_clue: Optional[Clue] = None
        self.team_presently_answering: Optional[Team] = None
        self.rounds_played = 0
        self._clue_source = clue_source
        self._timer_factory = timer_factory
        self._audio = audio
        self._console = console
        self._state_machine: Optional["StateMachine"] = None
        self._game_timer: Optional[CountdownTimer] = None
        self._paused = False

    def attach_state_machine(self, state_machine: "StateMachine") -> None:
        self._state_machine = state_machine

    @property
    def game_timer(self) -> Optional[CountdownTimer]:
        return self._game_timer

    @property
    def is_paused(self) -> bool:
        return self._paused

    def team_for_key(self, press: "KeyPress") -> Optional[Team]:
        index = press.team_index
        if index is None or index >= len(self.teams):
            return None
        return self.teams[index]

    def get_team(self, index: int) -> Team:
        if not 0 <= index < len(self.teams):
            raise InvalidTeamError(index, len(self.teams))
        return self.teams[index]

    def set_all_teams_state(self, target: TeamState, end_lockout: bool = False) -> None:
        for team in self.teams:
            team.set_state(target, end_lockout)

    # ── Game start / end ──────────────────────────────────────────

    def start_game(self) -> None:
        self._game_timer = self._timer_factory.create(
            self.settings.game_time_limit_ms, label="game time limit"
        )
        self._game_timer.start()
        if self._paused:
            self._game_timer.pause()
        logger.info(f"Game started with {len(self.teams)} teams")

    def should_game_end(self) -> bool:
        threshold = self.settings.team_money_when_game_should_end
        if any(team.money >= threshold for team in self.teams):
            return True
        return self._game_timer is not None and self._game_timer.is_finished

    def record_end_of_round(self, press: Optional["KeyPress"] = None) -> None:
        self.rounds_played += 1
        for team in self.teams:
            team.record_end_of_round()

    def game_end(self, press: Optional["KeyPress"] = None) -> None:
        if self._game_timer is not None:
            self._game_timer.pause()
        self._audio.play("musicClosing")
        snapshot = self.snapshot()
        lines = ["Final standings:"]
        for place, team in enumerate(snapshot.ranking(), start=1):
            lines.append(f"  {place}. {team.name}: {team.money}")
        self._console.show_message("\n".join(lines))
        logger.info(f"Game over after {self.rounds_played} rounds")

    def reset_game(self) -> None:
        for team in self.teams:
            team.reset()
        if self._game_timer is not None:
            self._game_timer.pause()
        self._game_timer = None
        self.present_clue = None
        self.team_presently_answering = None
        self.rounds_played = 0
        logger.info("Game reset")

    # ── Clue ──────────────────────────────────────────────────────

    async def fetch_clue(self) -> Clue:
        clue = await fetch_clue_with_retries(self._clue_source, self.settings.clue_fetch_max_tries)
        self.present_clue = clue
        logger.info(f"Clue fetched: {clue.category} for {clue.value}")
        return clue

    def show_clue_category(self, press: Optional["KeyPress"] = None) -> None:
        clue = self._require_clue()
        self._console.show_message(f"{clue.category} for {clue.value}")

    def show_clue_question(self) -> None:
        clue = self._require_clue()
        for team in self.teams:
            team.has_buzzed_for_current_clue = False
        self.set_all_teams_state(TeamState.READING_QUESTION)
        self._console.show_message(f"Q: {clue.question}\nA: {clue.answer}")

    def skip_clue(self) -> None:
        self.set_all_teams_state(TeamState.BUZZERS_OFF, end_lockout=True)
        logger.info("Clue skipped")

    # ── Buzzing ───────────────────────────────────────────────────

    def can_team_be_locked_out(self, press: "KeyPress") -> bool:
        team = self.team_for_key(press)
        return team is not None and team.can_be_locked_out()

    def team_lockout(self, press: "KeyPress") -> None:
        team = self.team_for_key(press)
        if team is not None:
            team.start_lockout()

    def done_reading_clue_question(self, press: Optional["KeyPress"] = None) -> None:
        self.set_all_teams_state(TeamState.CAN_ANSWER)
        if self._state_machine is not None:
            self._state_machine.reset_countdown(WAIT_FOR_BUZZES_STATE)

    def can_team_buzz(self, press: "KeyPress") -> bool:
        team = self.team_for_key(press)
        return team is not None and team.can_buzz()

    def team_answer_start(self, press: Optional["KeyPress"]) -> None:
        team = self.team_for_key(press) if press is not None else None
        if team is None:
            raise InvalidTeamError(getattr(press, "key", None), len(self.teams))
        self.team_presently_answering = team
        self._audio.play("teamBuzz")
        team.start_answer()
        logger.info(f"{team.name} buzzed in")

    def attach_answer_countdown(self, timer: CountdownTimer, press: Optional["KeyPress"]) -> None:
        if self.team_presently_answering is not None:
            timer.add_observer(self.team_presently_answering.countdown_lights)

    def play_question_timeout(self) -> None:
        self._audio.play("questionTimeout")

    # ── Judging ───────────────────────────────────────────────────

    def answer_correct(self, press: Optional["KeyPress"] = None) -> None:
        team = self._require_answering_team()
        team.handle_answer_correct(self._require_clue())
        self.team_presently_answering = None

    def answer_wrong_or_timeout(self, press: Optional["KeyPress"] = None) -> None:
        team = self._require_answering_team()
        team.handle_answer_wrong_or_timeout(self._require_clue())
        self.team_presently_answering = None

    def have_all_teams_answered(self) -> bool:
        if self.settings.allow_multiple_answers_to_same_question:
            # Teams keep answering until the buzz window runs out
            return False
        return all(team.state is TeamState.ALREADY_ANSWERED for team in self.teams)

    def show_answer(self, press: Optional["KeyPress"] = None) -> None:
        clue = self._require_clue()
        for team in self.teams:
            if not team.has_buzzed_for_current_clue:
                team.statistics.questions_not_buzzed += 1
        self.set_all_teams_state(TeamState.BUZZERS_OFF)
        self._console.show_message(f"Answer: {clue.answer}")

    # ── Pause / snapshot ──────────────────────────────────────────

    def set_paused(self, paused: bool) -> None:
        """Pause everything: the engine, the game clock and team lockouts."""
        self._paused = paused
        if self._state_machine is not None:
            self._state_machine.set_paused(paused)
        if self._game_timer is not None:
            self._game_timer.set_paused(paused)
        for team in self.teams:
            team.set_paused(paused)

    def toggle_paused(self) -> None:
        self.set_paused(not self._paused)

    def snapshot(self) -> GameSnapshot:
        elapsed = self._game_timer.elapsed_ms if self._game_timer is not None else 0
        state_name = self._state_machine.present_state_name if self._state_machine else ""
        return build_snapshot(state_name, self.teams, elapsed, self.rounds_played)

    def _require_clue(self) -> Clue:
        if self.present_clue is None:
            raise RuntimeError("no clue is in play")
        return self.present_clue

    def _require_answering_team(self) -> Team:
        if self.team_presently_answering is None:
            raise RuntimeError("no team is answering")
        return self.team_presently_answering
