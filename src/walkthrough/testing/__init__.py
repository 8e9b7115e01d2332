"""Testing utilities for the walkthrough engine.

Nothing here imports PyQt, so state machine tests stay fast and headless.
"""

from __future__ import annotations

__all__ = ["FakeClock", "ManualTimerScheduler", "ManualTimerHandle"]

from .fake_timers import FakeClock, ManualTimerHandle, ManualTimerScheduler
