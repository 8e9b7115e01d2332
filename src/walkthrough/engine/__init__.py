"""Tutorial run state, transitions and the state machine that owns them."""

from __future__ import annotations

from .run_state import (  # noqa: F401
    Advance,
    JumpToStep,
    Restart,
    Retreat,
    RunProgress,
    ToggleHints,
    TogglePlay,
    TutorialRunState,
    elapsed_minutes,
    initial_run_state,
    progress_percent,
    transition,
)
from .state_machine import StateListener, TutorialStateMachine  # noqa: F401
from .scheduler import TimerHandle, TimerScheduler  # noqa: F401
