"""Deterministic virtual time for exercising auto-advance without an event loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

__all__ = ["FakeClock", "ManualTimerScheduler", "ManualTimerHandle"]


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0) -> None:
        self._now = float(start_ms)

    def __call__(self) -> float:
        return self._now

    def advance(self, ms: float) -> None:
        if ms < 0:
            raise ValueError("time cannot move backwards")
        self._now += ms

    def set(self, now_ms: float) -> None:
        self._now = float(now_ms)


@dataclass(eq=False)
class ManualTimerHandle:
    due_ms: float
    callback: Callable[[], None]
    seq: int
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    def is_active(self) -> bool:
        return not (self.cancelled or self.fired)


@dataclass
class ManualTimerScheduler:
    """``TimerScheduler`` whose timers fire only from ``advance``.

    Timers due at the same instant fire in scheduling order. Callbacks may
    schedule new timers; those fire within the same ``advance`` call when
    they fall due inside the window.
    """

    clock: FakeClock = field(default_factory=FakeClock)
    _timers: List[ManualTimerHandle] = field(default_factory=list)
    _seq: int = 0
    scheduled_delays: List[int] = field(default_factory=list)

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> ManualTimerHandle:
        self._seq += 1
        handle = ManualTimerHandle(due_ms=self.clock() + delay_ms, callback=callback, seq=self._seq)
        self._timers.append(handle)
        self.scheduled_delays.append(int(delay_ms))
        return handle

    def pending(self) -> List[ManualTimerHandle]:
        return [t for t in self._timers if t.is_active()]

    def pending_count(self) -> int:
        return len(self.pending())

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` firing due timers; returns fire count."""
        target = self.clock() + ms
        fired = 0
        while True:
            nxt = self._next_due(target)
            if nxt is None:
                break
            self.clock.set(nxt.due_ms)
            nxt.fired = True
            fired += 1
            nxt.callback()
        self.clock.set(target)
        self._timers = [t for t in self._timers if t.is_active()]
        return fired

    def _next_due(self, limit_ms: float) -> Optional[ManualTimerHandle]:
        due = [t for t in self._timers if t.is_active() and t.due_ms <= limit_ms]
        if not due:
            return None
        return min(due, key=lambda t: (t.due_ms, t.seq))
