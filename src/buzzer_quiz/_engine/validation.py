# Area: Engine
"""
buzzer_quiz._engine.validation — State table checks
===================================================

Checks a list of states before the engine runs it. Problems are
returned as diagnostics rather than raised so that a single table
can report every mistake at once.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .states import StateMachineState
from .transitions import Callback, TransitionType


@dataclass(frozen=True)
class Diagnostic:
    """One problem found in a state table."""
    state_name: str
    transition_index: Optional[int]
    message: str

    def __str__(self) -> str:
        if self.transition_index is None:
            return f"state {self.state_name!r}: {self.message}"
        return (
            f"state {self.state_name!r}, transition {self.transition_index}: "
            f"{self.message}"
        )


def validate_states(
    states: Iterable[StateMachineState],
    slide_names: Optional[Iterable[str]] = None,
) -> Tuple[Dict[str, StateMachineState], List[Diagnostic]]:
    """
    Build the name -> state map and collect diagnostics.

    Args:
        states: States in declaration order
        slide_names: Known slide names; slides are not checked when None

    Returns:
        (state_map, diagnostics). When a name is declared twice the
        first declaration wins.
    """
    state_map: Dict[str, StateMachineState] = {}
    diagnostics: List[Diagnostic] = []
    known_slides = set(slide_names) if slide_names is not None else None

    # Pass 1: names and slides
    for state in states:
        if not isinstance(state.name, str) or not state.name:
            diagnostics.append(Diagnostic(repr(state.name), None, "state name must be a non-empty string"))
            continue
        if state.name in state_map:
            diagnostics.append(Diagnostic(state.name, None, "duplicate state name"))
            continue
        state_map[state.name] = state
        if known_slides is not None and state.slide is not None and state.slide not in known_slides:
            diagnostics.append(Diagnostic(state.name, None, f"unknown slide {state.slide!r}"))

    # Pass 2: transitions, now that every state name is known
    for state in state_map.values():
        diagnostics.extend(_check_transitions(state, state_map))

    return state_map, diagnostics


def _check_transitions(
    state: StateMachineState, state_map: Dict[str, StateMachineState]
) -> List[Diagnostic]:
    found: List[Diagnostic] = []
    keys_seen: Dict[str, int] = {}
    timeout_count = 0
    if_count = 0

    def report(index: int, message: str) -> None:
        found.append(Diagnostic(state.name, index, message))

    for index, transition in enumerate(state.transitions):
        kind = getattr(transition, "type", None)
        if not isinstance(kind, TransitionType):
            report(index, f"unknown transition type {kind!r}")
            continue

        for destination in transition.destinations():
            if destination not in state_map:
                report(index, f"unknown destination state {destination!r}")

        if kind is TransitionType.KEYBOARD:
            if not transition.keys:
                report(index, "keyboard transition has no keys")
            for key in sorted(transition.keys):
                if len(key) != 1:
                    report(index, f"key {key!r} is not a single character")
                elif key in keys_seen:
                    report(index, f"key {key!r} already used by transition {keys_seen[key]}")
                else:
                    keys_seen[key] = index

        elif kind is TransitionType.TIMEOUT:
            timeout_count += 1
            if timeout_count == 2:
                report(index, "more than one timeout transition, only the first eligible one is used")
            duration = transition.duration_ms
            if not callable(duration) and (
                isinstance(duration, bool) or not isinstance(duration, int) or duration < 1
            ):
                report(index, f"timeout duration must be a positive integer, got {duration!r}")

        elif kind is TransitionType.MANUAL_TRIGGER:
            if not transition.trigger_name:
                report(index, "manual trigger has no name")

        elif kind is TransitionType.PROMISE:
            if not callable(transition.start):
                report(index, "promise transition start is not callable")

        elif kind is TransitionType.IF:
            if_count += 1
            if if_count == 2:
                report(index, "more than one if transition, only the first is used")
            if not isinstance(transition.condition, Callback):
                report(index, "if transition condition must be a Callback")

    return found
