# Area: Engine
"""Declarative state definition for the quiz engine."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from .transitions import Callback, Transition, TransitionType


@dataclass
class StateMachineState:
    """
    A named state with its slide, operator instructions, hooks and
    outgoing transitions. Transitions are tried in declaration order.
    """
    name: str
    transitions: List[Transition] = field(default_factory=list)
    on_enter: Optional[Callback] = None
    on_exit: Optional[Callback] = None
    slide: Optional[str] = None
    instructions: Optional[str] = None

    def transitions_of(self, kind: TransitionType) -> Iterator[Transition]:
        for transition in self.transitions:
            if transition.type is kind:
                yield transition
