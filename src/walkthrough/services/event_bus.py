"""Synchronous publish/subscribe bus for walkthrough lifecycle events.

The state machine and the panel publish what happened (a run started, the
current step changed, a target could not be found, ...) and any number of
observers (analytics adapters, toast layers, debug panels) subscribe without
the engine knowing about them.

Properties:
 - No Qt dependency; dispatch happens on the publishing thread.
 - One failing handler never breaks the publish cycle; failures are kept in
   ``EventBus.errors`` for inspection.
 - One-shot (``once``) subscriptions and explicit unsubscribe handles.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Dict, List, Protocol

__all__ = [
    "TourEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
    "get_event_bus",
]


class TourEvent(str, Enum):
    RUN_STARTED = "run_started"
    STEP_CHANGED = "step_changed"
    PLAYBACK_TOGGLED = "playback_toggled"
    HINTS_TOGGLED = "hints_toggled"
    RUN_COMPLETED = "run_completed"
    RUN_RESTARTED = "run_restarted"
    RUN_EXITED = "run_exited"
    RUN_DISPOSED = "run_disposed"
    TARGET_MISSING = "target_missing"
    LOG_RECORD_ADDED = "log_record_added"


@dataclass
class Event:
    name: str  # TourEvent value or custom string
    payload: Any
    timestamp: float


class EventHandler(Protocol):
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True

    def cancel(self) -> None:
        self.active = False


def _key(name: str | TourEvent) -> str:
    return name.value if isinstance(name, TourEvent) else name


class EventBus:
    """Synchronous event dispatcher.

    Handlers are invoked while the lock is NOT held (subscribers are copied
    first) so a handler may subscribe or unsubscribe re-entrantly.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []

    # Subscription management ------------------------------------------
    def subscribe(
        self, name: str | TourEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(event=_key(name), handler=handler, once=once)
        with self._lock:
            self._subs.setdefault(sub.event, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if bucket:
                self._subs[sub.event] = [s for s in bucket if s is not sub]
                if not self._subs[sub.event]:
                    self._subs.pop(sub.event, None)
        sub.active = False

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # Publishing -------------------------------------------------------
    def publish(self, name: str | TourEvent, payload: Any = None) -> Event:
        key = _key(name)
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
        finished: List[Subscription] = []
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - isolate handler failures
                with self._lock:
                    self._errors.append((evt, exc))
            else:
                if sub.once:
                    finished.append(sub)
        for sub in finished:
            self.unsubscribe(sub)
        return evt

    # Introspection ----------------------------------------------------
    def subscriber_count(self, name: str | TourEvent) -> int:
        with self._lock:
            return len(self._subs.get(_key(name), ()))

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)


def get_event_bus() -> EventBus | None:
    """Return the registered bus, or None when the host did not register one."""
    from .service_locator import services

    bus = services.try_get("event_bus")
    return bus if isinstance(bus, EventBus) else None
