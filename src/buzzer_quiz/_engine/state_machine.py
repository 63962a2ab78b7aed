# Area: Engine
"""
buzzer_quiz._engine.state_machine — Quiz state machine engine
=============================================================

Runs a declarative table of states. Key presses and named manual
triggers are matched against the present state's transitions; timeout
transitions are driven by one countdown per state, promise transitions
by asyncio tasks, and if transitions are followed right after entry.

Entering a state always happens in this order: pause the countdown of
the state being left, run its exit hook, switch states, show the slide,
run the entry hook, then start the countdown, the promise or the
if-branch of the new state.
"""

from __future__ import annotations
import asyncio
import functools
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Dict, Iterable, List, Optional, Set, Tuple

from .._shared.logging_config import log_fatal_error
from .._timer import CountdownObserver, CountdownTimer, CreateNew, ResumeExisting, TimerFactory
from ..errors import PromiseTransitionError, UnknownStateError
from .states import StateMachineState
from .transitions import (
    CountdownBehavior, KeyPress, Promise, Timeout, Transition, TransitionType,
)
from .validation import validate_states

if TYPE_CHECKING:
    from ..collaborators import OperatorConsole, Presentation

logger = logging.getLogger("buzzer_quiz.engine")


class StateMachine:
    """
    Executes a state table.

    Attributes:
        diagnostics: Problems found when the table was validated
        history: (from_state, to_state) pairs, oldest first, bounded
        fatal_error: The error that stopped the game, if any
    """

    HISTORY_LIMIT = 200

    def __init__(
        self,
        states: Iterable[StateMachineState],
        timer_factory: TimerFactory,
        initial_state: Optional[str] = None,
        presentation: Optional["Presentation"] = None,
        console: Optional["OperatorConsole"] = None,
    ):
        states = list(states)
        self._timer_factory = timer_factory
        self._presentation = presentation
        self._console = console

        slide_names = presentation.slide_names if presentation is not None else None
        self._state_map, self.diagnostics = validate_states(states, slide_names)
        for diagnostic in self.diagnostics:
            logger.warning(f"State table problem: {diagnostic}")

        if initial_state is None:
            initial_state = states[0].name if states else ""
        if initial_state not in self._state_map:
            raise UnknownStateError(initial_state, list(self._state_map))

        self._present = self._state_map[initial_state]
        self._timers: Dict[str, CountdownTimer] = {}
        self._observers: List[CountdownObserver] = []
        self._pending: Set[asyncio.Task] = set()
        self._entry_count = 0
        self._paused = False
        self.history: List[Tuple[Optional[str], str]] = [(None, initial_state)]
        self.fatal_error: Optional[Exception] = None

    # ── Queries ───────────────────────────────────────────────────

    @property
    def present_state(self) -> StateMachineState:
        return self._present

    @property
    def present_state_name(self) -> str:
        return self._present.name

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def state_names(self) -> List[str]:
        return list(self._state_map)

    def get_countdown_timer(self, state_name: str) -> Optional[CountdownTimer]:
        """The countdown currently owned by a state, if any."""
        return self._timers.get(state_name)

    def add_countdown_observer(self, observer: CountdownObserver) -> None:
        """Attach an observer to every state countdown created from now on."""
        self._observers.append(observer)

    # ── Inputs ────────────────────────────────────────────────────

    def handle_keyboard_event(self, key: str, text_input_focused: bool = False) -> bool:
        """
        Take the first keyboard transition matching ``key`` whose guard passes.

        Returns:
            True if a transition was taken
        """
        if text_input_focused or len(key) != 1:
            return False
        if self._paused:
            logger.debug(f"Ignoring key {key!r} while paused")
            return False

        press = KeyPress(key)
        for transition in self._present.transitions_of(TransitionType.KEYBOARD):
            if not transition.matches(key):
                continue
            if transition.guard is not None and not transition.guard(press):
                continue
            if transition.on_transition is not None:
                transition.on_transition(press)
            self.go_to_state(transition.destination, press)
            return True
        return False

    def manual_trigger(self, trigger_name: str) -> bool:
        """
        Take the first manual transition named ``trigger_name`` whose guard passes.

        Returns:
            True if a transition was taken
        """
        for transition in self._present.transitions_of(TransitionType.MANUAL_TRIGGER):
            if transition.trigger_name != trigger_name:
                continue
            if transition.guard is not None and not transition.guard():
                continue
            if transition.on_transition is not None:
                transition.on_transition()
            self.go_to_state(transition.destination)
            return True
        logger.warning(
            f"Manual trigger {trigger_name!r} has no eligible transition "
            f"in state {self._present.name!r}"
        )
        return False

    def set_paused(self, paused: bool) -> None:
        self._paused = paused
        timer = self._timers.get(self._present.name)
        if timer is not None:
            timer.set_paused(paused)
        logger.info("Game paused" if paused else "Game resumed")

    def toggle_paused(self) -> None:
        self.set_paused(not self._paused)

    def reset_countdown(self, state_name: str) -> None:
        """Discard a state's saved countdown so its next entry starts fresh."""
        timer = self._timers.pop(state_name, None)
        if timer is not None:
            timer.pause()
            logger.debug(f"Countdown for {state_name!r} reset")

    # ── Transitions ───────────────────────────────────────────────

    def enter_initial_state(self) -> None:
        """Run the entry effects of the initial state without leaving anything."""
        self._enter(self._present, None)

    def go_to_state(self, state_name: str, context: Optional[KeyPress] = None) -> None:
        """
        Leave the present state and enter ``state_name``.

        Raises:
            UnknownStateError: If no state has that name
        """
        if state_name not in self._state_map:
            error = UnknownStateError(state_name, list(self._state_map))
            self.fatal_error = error
            log_fatal_error(error)
            raise error

        leaving = self._present
        timer = self._timers.get(leaving.name)
        if timer is not None:
            timer.pause()
        if leaving.on_exit is not None:
            leaving.on_exit()

        self._present = self._state_map[state_name]
        self.history.append((leaving.name, state_name))
        if len(self.history) > self.HISTORY_LIMIT:
            del self.history[0]
        logger.info(f"{leaving.name} -> {state_name}")

        self._enter(self._present, context)

    def _enter(self, state: StateMachineState, context: Optional[KeyPress]) -> None:
        self._entry_count += 1
        entry_id = self._entry_count

        if state.slide is not None and self._presentation is not None:
            if state.slide in self._presentation.slide_names:
                self._presentation.show_slide(state.slide)
            else:
                logger.warning(f"Unknown slide {state.slide!r} for state {state.name!r}")
        if state.instructions is not None and self._console is not None:
            self._console.set_instructions(state.instructions)
        if state.on_enter is not None:
            state.on_enter(context)

        # Entry hook may have moved on already
        if entry_id != self._entry_count:
            return

        self._start_countdown(state, context)
        self._start_promise(state, entry_id)
        self._follow_if(state, context)

    def _first_eligible(self, state: StateMachineState, kind: TransitionType) -> Optional[Transition]:
        for transition in state.transitions_of(kind):
            if transition.guard is None or transition.guard():
                return transition
        return None

    # ── Timeout ───────────────────────────────────────────────────

    def _start_countdown(self, state: StateMachineState, context: Optional[KeyPress]) -> None:
        transition = self._first_eligible(state, TransitionType.TIMEOUT)
        if transition is None:
            return

        existing = self._timers.get(state.name)
        if (
            transition.behavior is CountdownBehavior.CONTINUE_UNTIL_RESET
            and existing is not None
            and not existing.is_finished
        ):
            source = ResumeExisting(existing)
        else:
            source = CreateNew(transition.resolve_duration())

        timer = source.resolve(self._timer_factory, label=f"{state.name} countdown")
        if timer is not existing:
            self._timers[state.name] = timer
            for observer in self._observers:
                timer.add_observer(observer)
            timer.add_finish_callback(
                functools.partial(self._on_countdown_finished, state.name, timer, transition)
            )

        if transition.on_countdown is not None:
            transition.on_countdown(timer, context)
        timer.start_or_resume()
        if self._paused:
            timer.pause()

    def _on_countdown_finished(self, state_name: str, timer: CountdownTimer, transition: Timeout) -> None:
        if self._present.name != state_name or self._timers.get(state_name) is not timer:
            logger.debug(f"Ignoring stale countdown of {state_name!r}")
            return
        if transition.on_transition is not None:
            transition.on_transition()
        self.go_to_state(transition.destination)

    # ── Promise ───────────────────────────────────────────────────

    def _start_promise(self, state: StateMachineState, entry_id: int) -> None:
        transition = self._first_eligible(state, TransitionType.PROMISE)
        if transition is None:
            return
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._await_promise(state.name, transition, entry_id))
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)

    async def _await_promise(self, state_name: str, transition: Promise, entry_id: int) -> None:
        try:
            awaitable: Awaitable[Any] = transition.start()
            await awaitable
        except Exception as exc:
            error = PromiseTransitionError(state_name, transition.label, exc)
            self.fatal_error = error
            if self._console is not None:
                self._console.alert(str(error))
            log_fatal_error(error)
            raise error from exc

        if entry_id != self._entry_count:
            logger.debug(f"Dropping completion of {transition.label} for stale entry of {state_name!r}")
            return
        self.go_to_state(transition.destination)

    def _on_task_done(self, task: "asyncio.Task") -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            task.get_loop().call_exception_handler({
                "message": "Promise transition failed",
                "exception": exc,
                "task": task,
            })

    async def drain(self) -> None:
        """Wait for outstanding promise transitions; re-raises their errors."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ── If ────────────────────────────────────────────────────────

    def _follow_if(self, state: StateMachineState, context: Optional[KeyPress]) -> None:
        transition = next(state.transitions_of(TransitionType.IF), None)
        if transition is None:
            return
        branch = transition.then if transition.condition() else transition.otherwise
        if branch.on_transition is not None:
            branch.on_transition()
        self.go_to_state(branch.destination, context)
