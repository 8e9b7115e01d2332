"""Single-shot timer scheduling used by auto-advance.

The state machine only needs "call this once after N ms, unless cancelled".
``QtTimerScheduler`` provides that on the Qt event loop; tests use
``walkthrough.testing.ManualTimerScheduler`` which implements the same
protocol against a virtual clock.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from PyQt6 import sip
from PyQt6.QtCore import QObject, QTimer

__all__ = ["TimerHandle", "TimerScheduler", "QtTimerScheduler"]

_log = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...  # pragma: no cover - structural

    def is_active(self) -> bool: ...  # pragma: no cover - structural


class TimerScheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...  # pragma: no cover


class _QtTimerHandle:
    def __init__(self, owner: "QtTimerScheduler", timer: QTimer) -> None:
        self._owner = owner
        self._timer: Optional[QTimer] = timer

    def cancel(self) -> None:
        timer = self._timer
        if timer is None:
            return
        self._timer = None
        self._owner._forget(self)
        # already gone when the parent was destroyed first
        if sip.isdeleted(timer):
            return
        timer.stop()
        timer.deleteLater()

    def is_active(self) -> bool:
        timer = self._timer
        return timer is not None and not sip.isdeleted(timer) and timer.isActive()

    def _fired(self) -> None:
        timer = self._timer
        self._timer = None
        self._owner._forget(self)
        if timer is not None:
            timer.deleteLater()


class QtTimerScheduler:
    """Schedules callbacks with one single-shot ``QTimer`` each."""

    def __init__(self, parent: Optional[QObject] = None) -> None:
        self._parent = parent
        self._handles: List[_QtTimerHandle] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> _QtTimerHandle:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        handle = _QtTimerHandle(self, timer)

        def _on_timeout() -> None:
            handle._fired()
            callback()

        timer.timeout.connect(_on_timeout)  # type: ignore[attr-defined]
        self._handles.append(handle)
        timer.start(max(0, int(delay_ms)))
        _log.debug("Scheduled single-shot timer for %d ms", delay_ms)
        return handle

    def pending_count(self) -> int:
        return len(self._handles)

    def cancel_all(self) -> None:
        for handle in list(self._handles):
            handle.cancel()

    def _forget(self, handle: _QtTimerHandle) -> None:
        if handle in self._handles:
            self._handles.remove(handle)
