"""Process-wide service registry for the walkthrough engine.

Shared collaborators (the event bus and the logging service) are looked up
by a string key so a host can hand the engine its own instances once at
start-up instead of passing them to every panel.

    from walkthrough.services.service_locator import services
    services.register("event_bus", EventBus())
    bus = services.try_get("event_bus")
"""

from __future__ import annotations

from threading import RLock
from typing import Any, Dict

__all__ = ["ServiceLocator", "services", "ServiceAlreadyRegisteredError", "ServiceNotFoundError"]


class ServiceAlreadyRegisteredError(RuntimeError):
    """Raised when a key is registered twice without allow_override."""


class ServiceNotFoundError(KeyError):
    """Raised by ``get`` for an unknown key."""


class ServiceLocator:
    """Thread-safe mapping of service keys to instances."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: Dict[str, Any] = {}

    def register(self, key: str, value: Any, *, allow_override: bool = False) -> None:
        with self._lock:
            if key in self._entries and not allow_override:
                raise ServiceAlreadyRegisteredError(f"Service '{key}' already registered")
            self._entries[key] = value

    def get(self, key: str) -> Any:
        with self._lock:
            if key not in self._entries:
                raise ServiceNotFoundError(key)
            return self._entries[key]

    def try_get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._entries.get(key, default)

    def unregister(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


services = ServiceLocator()
