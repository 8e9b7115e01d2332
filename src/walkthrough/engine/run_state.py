"""Run state and the pure transition function of a tutorial run.

``TutorialRunState`` is an immutable value. Every user or timer event is
expressed as an action and folded into a new state by ``transition``; the
state machine is the single writer that stores the result. Keeping the
transition pure means each rule can be tested without Qt, timers or clocks.

Rules
-----
* ``Advance`` on the last step records that step's elapsed time, marks the
  run completed and stops playback. Further advances are no-ops.
* ``Advance`` elsewhere marks the current index completed, records its
  elapsed time, moves forward and counts one interaction.
* ``Retreat`` clamps at 0 but always counts an interaction.
* ``JumpToStep`` clamps the index into range, counts an interaction and does
  not touch ``completed_steps``.
* ``Restart`` returns to a fresh, paused run with a new start timestamp.
* Once completed only ``Restart`` and ``ToggleHints`` change anything.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Tuple, Union

__all__ = [
    "RunProgress",
    "TutorialRunState",
    "Advance",
    "Retreat",
    "TogglePlay",
    "Restart",
    "JumpToStep",
    "ToggleHints",
    "RunAction",
    "initial_run_state",
    "transition",
    "progress_percent",
    "elapsed_minutes",
]


@dataclass(frozen=True)
class RunProgress:
    start_timestamp_ms: float
    per_step_elapsed_ms: Tuple[Optional[int], ...]
    interaction_count: int = 0

    def with_elapsed(self, index: int, now_ms: float) -> "RunProgress":
        elapsed = list(self.per_step_elapsed_ms)
        elapsed[index] = int(now_ms - self.start_timestamp_ms)
        return replace(self, per_step_elapsed_ms=tuple(elapsed))

    def bumped(self) -> "RunProgress":
        return replace(self, interaction_count=self.interaction_count + 1)


@dataclass(frozen=True)
class TutorialRunState:
    current_index: int
    progress: RunProgress
    is_playing: bool = False
    is_completed: bool = False
    completed_steps: FrozenSet[int] = field(default_factory=frozenset)
    show_hints: bool = False

    @property
    def is_running(self) -> bool:
        return not self.is_completed

    @property
    def interaction_count(self) -> int:
        return self.progress.interaction_count


# Actions ---------------------------------------------------------------


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Retreat:
    pass


@dataclass(frozen=True)
class TogglePlay:
    pass


@dataclass(frozen=True)
class Restart:
    pass


@dataclass(frozen=True)
class JumpToStep:
    index: int


@dataclass(frozen=True)
class ToggleHints:
    pass


RunAction = Union[Advance, Retreat, TogglePlay, Restart, JumpToStep, ToggleHints]


def _fresh_progress(step_count: int, now_ms: float) -> RunProgress:
    return RunProgress(start_timestamp_ms=now_ms, per_step_elapsed_ms=(None,) * step_count)


def initial_run_state(step_count: int, *, auto_play: bool, now_ms: float) -> TutorialRunState:
    if step_count <= 0:
        raise ValueError("A run needs at least one step")
    return TutorialRunState(
        current_index=0,
        progress=_fresh_progress(step_count, now_ms),
        is_playing=bool(auto_play),
    )


def transition(
    state: TutorialRunState, action: RunAction, *, step_count: int, now_ms: float
) -> TutorialRunState:
    """Return the state that results from applying ``action`` to ``state``."""
    last = step_count - 1

    if isinstance(action, ToggleHints):
        return replace(state, show_hints=not state.show_hints)

    if isinstance(action, Restart):
        return TutorialRunState(
            current_index=0,
            progress=_fresh_progress(step_count, now_ms),
            is_playing=False,
            is_completed=False,
            completed_steps=frozenset(),
            show_hints=state.show_hints,
        )

    if state.is_completed:
        return state

    if isinstance(action, Advance):
        index = state.current_index
        progress = state.progress.with_elapsed(index, now_ms)
        if index >= last:
            return replace(state, progress=progress, is_completed=True, is_playing=False)
        return replace(
            state,
            current_index=index + 1,
            completed_steps=state.completed_steps | {index},
            progress=progress.bumped(),
        )

    if isinstance(action, Retreat):
        return replace(
            state,
            current_index=max(0, state.current_index - 1),
            progress=state.progress.bumped(),
        )

    if isinstance(action, TogglePlay):
        return replace(state, is_playing=not state.is_playing)

    if isinstance(action, JumpToStep):
        return replace(
            state,
            current_index=max(0, min(last, int(action.index))),
            progress=state.progress.bumped(),
        )

    raise TypeError(f"Unsupported run action: {action!r}")


def progress_percent(state: TutorialRunState, step_count: int) -> float:
    return (state.current_index + 1) / step_count * 100


def elapsed_minutes(state: TutorialRunState, now_ms: float) -> int:
    return math.floor((now_ms - state.progress.start_timestamp_ms) / 60000)
