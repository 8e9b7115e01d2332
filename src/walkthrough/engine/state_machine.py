"""Tutorial state machine: the single owner of one run's state.

Every public operation folds an action into the current ``TutorialRunState``
through ``transition``, stores the result, re-syncs the auto-advance timer
and then notifies listeners. Operations run synchronously on the caller's
thread, so two user actions can never interleave.

Auto-advance
------------
While the run is playing and the current step declares
``auto_advance_after_ms`` one single-shot timer is armed. The timer carries a
token ``(generation, step_index, delay)``; when it fires the machine ignores it
unless the token is still the armed one and the run still sits on that step,
is playing, not completed and not disposed. The timer is re-armed only when
the step index, the playing flag or the step's delay changes.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Tuple

from ..models import Tutorial, TutorialStep, validate_tutorial
from ..services.event_bus import EventBus, TourEvent
from .run_state import (
    Advance,
    JumpToStep,
    Restart,
    Retreat,
    RunAction,
    ToggleHints,
    TogglePlay,
    TutorialRunState,
    elapsed_minutes,
    initial_run_state,
    progress_percent,
    transition,
)
from .scheduler import TimerHandle, TimerScheduler

__all__ = ["TutorialStateMachine", "StateListener"]

_log = logging.getLogger(__name__)

StateListener = Callable[[TutorialRunState], None]

# (generation, step index, delay) of the currently armed auto-advance timer
_TimerToken = Tuple[int, int, int]


def _wall_clock_ms() -> float:
    return time.time() * 1000.0


class TutorialStateMachine:
    """Drives one run of ``tutorial``.

    Parameters
    ----------
    tutorial:
        Validated on construction; an empty step list or duplicate step ids
        raise ``TutorialDefinitionError``.
    on_complete:
        Called with the tutorial id exactly once per run, when the final
        ``advance`` completes the run.
    on_exit:
        Called by ``request_exit``.
    auto_play:
        Initial value of ``is_playing``.
    scheduler:
        Timer source for auto-advance; defaults to a ``QtTimerScheduler``.
    clock:
        Returns the current time in milliseconds.
    event_bus:
        Optional bus receiving ``TourEvent`` notifications.
    """

    def __init__(
        self,
        tutorial: Tutorial,
        *,
        on_complete: Optional[Callable[[str], None]] = None,
        on_exit: Optional[Callable[[], None]] = None,
        auto_play: bool = False,
        scheduler: Optional[TimerScheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self._tutorial = validate_tutorial(tutorial)
        self._on_complete = on_complete
        self._on_exit = on_exit
        if scheduler is None:
            from .scheduler import QtTimerScheduler

            scheduler = QtTimerScheduler()
        self._scheduler = scheduler
        self._clock = clock or _wall_clock_ms
        self._bus = event_bus
        self._listeners: List[StateListener] = []
        self._timer: Optional[TimerHandle] = None
        self._timer_token: Optional[_TimerToken] = None
        self._generation = 0
        self._disposed = False
        self._state = initial_run_state(
            self._tutorial.step_count, auto_play=auto_play, now_ms=self._clock()
        )
        _log.debug(
            "Run started for tutorial %s (%d steps, auto_play=%s)",
            self._tutorial.id,
            self._tutorial.step_count,
            auto_play,
        )
        self._publish(TourEvent.RUN_STARTED, {"auto_play": bool(auto_play)})
        self._sync_timer()

    # Read projection -------------------------------------------------
    @property
    def tutorial(self) -> Tutorial:
        return self._tutorial

    @property
    def state(self) -> TutorialRunState:
        return self._state

    @property
    def step_count(self) -> int:
        return self._tutorial.step_count

    @property
    def current_step(self) -> TutorialStep:
        return self._tutorial.steps[self._state.current_index]

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def now_ms(self) -> float:
        return self._clock()

    def progress_percent(self) -> float:
        return progress_percent(self._state, self.step_count)

    def elapsed_minutes(self) -> int:
        return elapsed_minutes(self._state, self._clock())

    def has_armed_timer(self) -> bool:
        return self._timer is not None and self._timer.is_active()

    # Listeners ---------------------------------------------------------
    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # Transitions -------------------------------------------------------
    def advance(self) -> TutorialRunState:
        return self._dispatch(Advance())

    def retreat(self) -> TutorialRunState:
        return self._dispatch(Retreat())

    def toggle_play(self) -> TutorialRunState:
        return self._dispatch(TogglePlay())

    def restart(self) -> TutorialRunState:
        return self._dispatch(Restart())

    def jump_to_step(self, index: int) -> TutorialRunState:
        return self._dispatch(JumpToStep(index))

    def toggle_hints(self) -> TutorialRunState:
        return self._dispatch(ToggleHints())

    def request_exit(self) -> None:
        if self._disposed:
            return
        _log.info("Exit requested for tutorial %s", self._tutorial.id)
        self._publish(TourEvent.RUN_EXITED, {"completed": self._state.is_completed})
        if self._on_exit is not None:
            self._on_exit()

    def dispose(self) -> None:
        """Cancel any pending timer and drop listeners; safe to call twice."""
        if self._disposed:
            return
        self._cancel_timer()
        self._disposed = True
        self._listeners.clear()
        _log.debug("Run disposed for tutorial %s", self._tutorial.id)
        self._publish(TourEvent.RUN_DISPOSED, None)

    # Internal ----------------------------------------------------------
    def _dispatch(self, action: RunAction) -> TutorialRunState:
        if self._disposed:
            _log.debug("Ignoring %s after dispose", type(action).__name__)
            return self._state
        previous = self._state
        new_state = transition(
            previous, action, step_count=self.step_count, now_ms=self._clock()
        )
        if new_state == previous:
            return previous
        self._state = new_state
        _log.debug(
            "%s: step %d -> %d (playing=%s, completed=%s)",
            type(action).__name__,
            previous.current_index,
            new_state.current_index,
            new_state.is_playing,
            new_state.is_completed,
        )
        self._sync_timer()
        self._announce(action, previous, new_state)
        for listener in list(self._listeners):
            listener(new_state)
        if new_state.is_completed and not previous.is_completed:
            _log.info("Tutorial %s completed", self._tutorial.id)
            if self._on_complete is not None:
                self._on_complete(self._tutorial.id)
        return new_state

    def _announce(
        self, action: RunAction, previous: TutorialRunState, new_state: TutorialRunState
    ) -> None:
        if self._bus is None:
            return
        if isinstance(action, Restart):
            self._publish(TourEvent.RUN_RESTARTED, None)
        if new_state.current_index != previous.current_index:
            self._publish(
                TourEvent.STEP_CHANGED,
                {
                    "from": previous.current_index,
                    "to": new_state.current_index,
                    "step": self.current_step.id,
                },
            )
        if new_state.is_playing != previous.is_playing:
            self._publish(TourEvent.PLAYBACK_TOGGLED, {"playing": new_state.is_playing})
        if new_state.show_hints != previous.show_hints:
            self._publish(TourEvent.HINTS_TOGGLED, {"visible": new_state.show_hints})
        if new_state.is_completed and not previous.is_completed:
            self._publish(
                TourEvent.RUN_COMPLETED,
                {"interactions": new_state.interaction_count},
            )

    def _publish(self, name: TourEvent, payload: Optional[dict]) -> None:
        if self._bus is None:
            return
        body = {"tutorial": self._tutorial.id}
        if payload:
            body.update(payload)
        self._bus.publish(name, body)

    def _desired_token(self) -> Optional[Tuple[int, int]]:
        state = self._state
        if self._disposed or state.is_completed or not state.is_playing:
            return None
        delay = self.current_step.auto_advance_after_ms
        if not delay:
            return None
        return state.current_index, int(delay)

    def _sync_timer(self) -> None:
        desired = self._desired_token()
        armed = self._timer_token[1:] if self._timer_token is not None else None
        if desired == armed and (desired is None or self.has_armed_timer()):
            return
        self._cancel_timer()
        if desired is None:
            return
        index, delay = desired
        self._generation += 1
        token: _TimerToken = (self._generation, index, delay)
        self._timer_token = token
        self._timer = self._scheduler.schedule(delay, lambda: self._on_timer_fired(token))
        _log.debug("Auto-advance armed for step %d in %d ms", index, delay)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = None
        self._timer_token = None

    def _on_timer_fired(self, token: _TimerToken) -> None:
        if self._disposed or token != self._timer_token:
            _log.debug("Discarding stale auto-advance timer %s", token)
            return
        self._timer = None
        self._timer_token = None
        _, index, _ = token
        state = self._state
        if state.is_completed or not state.is_playing or state.current_index != index:
            _log.debug("Discarding auto-advance for step %d; run moved on", index)
            return
        self.advance()
