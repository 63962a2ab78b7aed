# Area: Engine
"""
Declarative state machine engine.

This package contains:
- Transition kinds and their type tag
- State definitions and table validation
- The StateMachine that runs a state table
"""

from .state_machine import StateMachine
from .states import StateMachineState
from .transitions import (
    Branch,
    Callback,
    CountdownBehavior,
    If,
    Keyboard,
    KeyPress,
    ManualTrigger,
    Promise,
    Timeout,
    Transition,
    TransitionType,
)
from .validation import Diagnostic, validate_states

__all__ = [
    "StateMachine",
    "StateMachineState",
    "Branch",
    "Callback",
    "CountdownBehavior",
    "If",
    "Keyboard",
    "KeyPress",
    "ManualTrigger",
    "Promise",
    "Timeout",
    "Transition",
    "TransitionType",
    "Diagnostic",
    "validate_states",
]
