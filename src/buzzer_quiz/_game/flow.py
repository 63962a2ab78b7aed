# Area: Game
"""
buzzer_quiz._game.flow — The quiz round as a state table
========================================================

One clue is played per loop:

    idle -> fetchClue -> showClueCategoryAndValue -> showClueQuestion
         -> waitForBuzzes -> waitForTeamAnswer -> answerWrongOrTimeout
         -> showAnswer -> checkGameEnd -> (fetchClue | gameEnd)

Digit keys '1'..'9' are team buzzers, space means the operator has
finished reading the question, 'y' and 'n' judge an answer.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List

from .._engine import (
    Branch, Callback, CountdownBehavior, If, Keyboard, ManualTrigger,
    Promise, StateMachineState, Timeout,
)

if TYPE_CHECKING:
    from ..settings import Settings
    from .operator import Operator

TEAM_KEYS = "123456789"

IDLE = "idle"
FETCH_CLUE = "fetchClue"
SHOW_CLUE_CATEGORY_AND_VALUE = "showClueCategoryAndValue"
SHOW_CLUE_QUESTION = "showClueQuestion"
WAIT_FOR_BUZZES = "waitForBuzzes"
WAIT_FOR_TEAM_ANSWER = "waitForTeamAnswer"
ANSWER_WRONG_OR_TIMEOUT = "answerWrongOrTimeout"
SHOW_ANSWER = "showAnswer"
CHECK_GAME_END = "checkGameEnd"
GAME_END = "gameEnd"


def build_quiz_states(operator: "Operator", settings: "Settings") -> List[StateMachineState]:
    """Build the state table for a game using ``operator`` for all side effects."""
    team_keys = TEAM_KEYS[:settings.team_count]
    op = operator

    return [
        StateMachineState(
            name=IDLE,
            slide="slide-logo",
            instructions="Type :start to start the game",
            transitions=[
                ManualTrigger(
                    "startGame", FETCH_CLUE,
                    on_transition=Callback("startGame", op.start_game),
                ),
            ],
        ),
        StateMachineState(
            name=FETCH_CLUE,
            slide="slide-spinner",
            instructions="Loading clue...",
            transitions=[
                Promise(start=op.fetch_clue, destination=SHOW_CLUE_CATEGORY_AND_VALUE, name="fetchClue"),
            ],
        ),
        StateMachineState(
            name=SHOW_CLUE_CATEGORY_AND_VALUE,
            slide="slide-clue-category-and-value",
            instructions="Read the category and value",
            on_enter=Callback("showClueCategory", op.show_clue_category),
            transitions=[
                Timeout(
                    settings.display_duration_category_ms, SHOW_CLUE_QUESTION,
                    on_transition=Callback("showClueQuestion", op.show_clue_question),
                ),
            ],
        ),
        StateMachineState(
            name=SHOW_CLUE_QUESTION,
            slide="slide-clue-question",
            instructions="Read the question out loud, then press space. Type :skip to skip",
            transitions=[
                Keyboard(
                    " ", WAIT_FOR_BUZZES,
                    on_transition=Callback("doneReadingClueQuestion", op.done_reading_clue_question),
                ),
                Keyboard(
                    team_keys, SHOW_CLUE_QUESTION,
                    guard=Callback("canTeamBeLockedOut", op.can_team_be_locked_out),
                    on_transition=Callback("teamLockout", op.team_lockout),
                ),
                ManualTrigger(
                    "skipClue", FETCH_CLUE,
                    on_transition=Callback("skipClue", op.skip_clue),
                ),
            ],
        ),
        StateMachineState(
            name=WAIT_FOR_BUZZES,
            slide="slide-clue-question",
            instructions="Waiting for a team to buzz in",
            transitions=[
                Keyboard(
                    team_keys, WAIT_FOR_TEAM_ANSWER,
                    guard=Callback("canTeamBuzz", op.can_team_buzz),
                ),
                Timeout(
                    settings.timeout_wait_for_buzzes_ms, SHOW_ANSWER,
                    behavior=CountdownBehavior.CONTINUE_UNTIL_RESET,
                    on_transition=Callback("playQuestionTimeout", op.play_question_timeout),
                ),
            ],
        ),
        StateMachineState(
            name=WAIT_FOR_TEAM_ANSWER,
            slide="slide-clue-question",
            instructions="Press y if the answer is right, n if it is wrong",
            on_enter=Callback("teamAnswerStart", op.team_answer_start),
            transitions=[
                Keyboard(
                    "y", SHOW_ANSWER,
                    on_transition=Callback("answerCorrect", op.answer_correct),
                ),
                Keyboard("n", ANSWER_WRONG_OR_TIMEOUT),
                Timeout(
                    settings.timeout_wait_for_answer_ms, ANSWER_WRONG_OR_TIMEOUT,
                    behavior=CountdownBehavior.RESET_EVERY_ENTRY,
                    on_countdown=Callback("attachAnswerCountdown", op.attach_answer_countdown),
                ),
            ],
        ),
        StateMachineState(
            name=ANSWER_WRONG_OR_TIMEOUT,
            on_enter=Callback("answerWrongOrTimeout", op.answer_wrong_or_timeout),
            transitions=[
                If(
                    condition=Callback("haveAllTeamsAnswered", op.have_all_teams_answered),
                    then=Branch(SHOW_ANSWER),
                    otherwise=Branch(WAIT_FOR_BUZZES),
                ),
            ],
        ),
        StateMachineState(
            name=SHOW_ANSWER,
            slide="slide-clue-answer",
            on_enter=Callback("showAnswer", op.show_answer),
            transitions=[
                Timeout(settings.display_duration_answer_ms, CHECK_GAME_END),
            ],
        ),
        StateMachineState(
            name=CHECK_GAME_END,
            on_enter=Callback("recordEndOfRound", op.record_end_of_round),
            transitions=[
                If(
                    condition=Callback("shouldGameEnd", op.should_game_end),
                    then=Branch(GAME_END),
                    otherwise=Branch(FETCH_CLUE),
                ),
            ],
        ),
        StateMachineState(
            name=GAME_END,
            slide="slide-game-end",
            instructions="Game over. Type :reset to play again",
            on_enter=Callback("gameEnd", op.game_end),
            transitions=[
                ManualTrigger(
                    "reset", IDLE,
                    on_transition=Callback("resetGame", op.reset_game),
                ),
            ],
        ),
    ]
