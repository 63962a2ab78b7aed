"""
buzzer_quiz — Timed multi-team buzzer quiz
==========================================

Runs a live quiz: clues are fetched and shown, teams buzz in with
number keys, the operator judges answers, and scores are kept until
a team reaches the target or time runs out.

Quick Start:
    from buzzer_quiz import QuizGame, GameRunner, JsonFileClueSource
    game = QuizGame(JsonFileClueSource("clues.json"))
    asyncio.run(GameRunner(game).run())

Building blocks:
    CountdownTimer  - pausable countdown driven by the event loop
    StateMachine    - runs a declarative table of states and transitions
    Team            - buzzer state with early-buzz lockout
"""

from ._engine import (
    Branch,
    Callback,
    CountdownBehavior,
    Diagnostic,
    If,
    Keyboard,
    KeyPress,
    ManualTrigger,
    Promise,
    StateMachine,
    StateMachineState,
    Timeout,
    TransitionType,
)
from ._game import (
    Clue,
    GameSnapshot,
    JsonFileClueSource,
    Operator,
    Team,
    TeamSnapshot,
    TeamState,
    build_quiz_states,
    fetch_clue_with_retries,
)
from ._shared import setup_logging
from ._timer import (
    CountdownLights,
    CountdownObserver,
    CountdownTimer,
    CreateNew,
    ProgressBar,
    ResumeExisting,
    TextReadout,
    TimerFactory,
)
from .errors import (
    BuzzerQuizError,
    InvalidTeamError,
    PromiseTransitionError,
    UnknownStateError,
)
from .game import QuizGame
from .runner import GameRunner
from .settings import Settings, load_settings

__version__ = "1.0.0"

__all__ = [
    # Engine
    "Branch",
    "Callback",
    "CountdownBehavior",
    "Diagnostic",
    "If",
    "Keyboard",
    "KeyPress",
    "ManualTrigger",
    "Promise",
    "StateMachine",
    "StateMachineState",
    "Timeout",
    "TransitionType",
    # Game
    "Clue",
    "GameSnapshot",
    "JsonFileClueSource",
    "Operator",
    "Team",
    "TeamSnapshot",
    "TeamState",
    "build_quiz_states",
    "fetch_clue_with_retries",
    "QuizGame",
    "GameRunner",
    # Timer
    "CountdownLights",
    "CountdownObserver",
    "CountdownTimer",
    "CreateNew",
    "ProgressBar",
    "ResumeExisting",
    "TextReadout",
    "TimerFactory",
    # Errors
    "BuzzerQuizError",
    "InvalidTeamError",
    "PromiseTransitionError",
    "UnknownStateError",
    # Config
    "Settings",
    "load_settings",
    "setup_logging",
]
