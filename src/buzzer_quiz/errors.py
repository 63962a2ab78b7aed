"""
buzzer_quiz.errors — Custom exception classes
==============================================

Defines the exception hierarchy for fatal game conditions.
Errors that the operator must see carry enough context for a
structured error block.
"""

from __future__ import annotations
from typing import Any, Optional

from .error_formatter import format_error_block


class BuzzerQuizError(Exception):
    """Base exception for all buzzer_quiz errors."""
    pass


class UnknownStateError(BuzzerQuizError):
    """Raised when the engine is asked to enter a state that does not exist."""

    def __init__(self, state_name: str, known_states: Optional[list] = None):
        self.state_name = state_name
        self.known_states = sorted(known_states or [])
        super().__init__(f"can't go to state named {state_name!r}, state not found")

    def format_error_log(self) -> str:
        return format_error_block(
            error_type="UNKNOWN_STATE",
            state_name=self.state_name,
            transition_label=None,
            details={"known_states": self.known_states},
            cause=None,
        )


class PromiseTransitionError(BuzzerQuizError):
    """Raised when the awaitable of a promise transition fails."""

    def __init__(self, state_name: str, transition_label: str, cause: BaseException):
        self.state_name = state_name
        self.transition_label = transition_label
        self.cause = cause
        super().__init__(
            f"promise rejected in state {state_name!r} ({transition_label}): {cause}"
        )

    def format_error_log(self) -> str:
        return format_error_block(
            error_type="PROMISE_REJECTED",
            state_name=self.state_name,
            transition_label=self.transition_label,
            details=None,
            cause=self.cause,
        )


class InvalidTeamError(BuzzerQuizError):
    """Raised when a team index does not name a team in the game."""

    def __init__(self, team_index: Any, team_count: int):
        self.team_index = team_index
        self.team_count = team_count
        super().__init__(f"no team with index {team_index!r} (team count is {team_count})")

