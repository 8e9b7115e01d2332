"""Debounced resize notifications for overlay geometry.

Measuring the target and repositioning the overlay is a layout read, so it
should not run for every intermediate size while the user drags a window
corner. ``LayoutReflowCoordinator`` collects resize events of watched widgets
and invokes each widget's callback once, ``debounce_ms`` after the last
resize (last event wins).

``unwatch`` removes the event filter again; the tutorial panel calls it on
teardown so repeated tutorial launches do not pile up listeners.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from PyQt6.QtCore import QEvent, QObject, QSize, QTimer
from PyQt6.QtWidgets import QWidget

__all__ = ["LayoutReflowCoordinator"]

_log = logging.getLogger(__name__)


@dataclass
class _Watched:
    widget: QWidget
    callback: Callable[[QSize], None]


class LayoutReflowCoordinator(QObject):
    """Debounce resize-induced work for watched widgets."""

    def __init__(self, debounce_ms: int = 90, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._debounce_ms = max(10, min(debounce_ms, 2000))
        self._watched: Dict[int, _Watched] = {}
        self._dirty_ids: Set[int] = set()
        self._timer: Optional[QTimer] = None

    # Configuration -----------------------------------------------------
    def set_debounce_ms(self, ms: int) -> None:
        self._debounce_ms = max(10, min(ms, 2000))

    @property
    def debounce_ms(self) -> int:
        return self._debounce_ms

    # Registration ------------------------------------------------------
    def watch(self, widget: QWidget, callback: Callable[[QSize], None]) -> None:
        wid = id(widget)
        if wid not in self._watched:
            self._watched[wid] = _Watched(widget=widget, callback=callback)
            widget.installEventFilter(self)

    def unwatch(self, widget: QWidget) -> None:
        wid = id(widget)
        watched = self._watched.pop(wid, None)
        self._dirty_ids.discard(wid)
        if watched is not None:
            watched.widget.removeEventFilter(self)
        if not self._dirty_ids:
            self._stop_timer()

    # Introspection -----------------------------------------------------
    def pending_count(self) -> int:
        return len(self._dirty_ids)

    def watched_count(self) -> int:
        return len(self._watched)

    # Control -----------------------------------------------------------
    def force_commit(self) -> None:
        if self._dirty_ids:
            self._flush()

    # Internal ----------------------------------------------------------
    def _schedule(self) -> None:
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.setSingleShot(True)
            self._timer.timeout.connect(self._flush)  # type: ignore[attr-defined]
        self._timer.start(self._debounce_ms)

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.stop()
            self._timer.deleteLater()
            self._timer = None

    def _flush(self) -> None:
        dirty = list(self._dirty_ids)
        self._dirty_ids.clear()
        self._stop_timer()
        for wid in dirty:
            watched = self._watched.get(wid)
            if watched is None or not watched.widget.isVisible():
                continue
            _log.debug("Committing debounced resize for %s", watched.widget.objectName() or wid)
            watched.callback(watched.widget.size())

    # Qt Event Filter ---------------------------------------------------
    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() == QEvent.Type.Resize:
            wid = id(obj)
            if wid in self._watched:
                self._dirty_ids.add(wid)
                self._schedule()
        return super().eventFilter(obj, event)
