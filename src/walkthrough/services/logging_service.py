"""Ring-buffer capture of walkthrough log records.

Engine modules log through ordinary ``logging.getLogger(__name__)`` loggers,
all of which live under the ``walkthrough`` namespace. ``LoggingService``
attaches a handler to that namespace and keeps the most recent records in
memory so a host debug panel can show what the engine did (transitions,
missing targets, exits) and export it as JSON Lines.

When an ``EventBus`` is registered in the service locator every captured
record is also published as ``TourEvent.LOG_RECORD_ADDED``.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from threading import RLock
from typing import Deque, List, Optional

from .event_bus import TourEvent, get_event_bus
from .service_locator import services

__all__ = [
    "LogEntry",
    "LoggingService",
    "get_logging_service",
]


@dataclass(frozen=True)
class LogEntry:
    level: str
    name: str
    message: str
    created: float


class _RingBufferHandler(logging.Handler):
    def __init__(self, svc: "LoggingService") -> None:
        super().__init__()
        self._svc = svc

    def emit(self, record: logging.LogRecord) -> None:
        self._svc._ingest_record(record)


class LoggingService:
    def __init__(self, capacity: int = 500, *, logger_name: str = "walkthrough") -> None:
        self._capacity = max(1, capacity)
        self._logger_name = logger_name
        self._lock = RLock()
        self._entries: Deque[LogEntry] = deque(maxlen=self._capacity)
        self._handler = _RingBufferHandler(self)
        self._handler.setLevel(logging.DEBUG)
        self._attached = False

    # Lifecycle --------------------------------------------------------
    def attach(self, level: int = logging.DEBUG) -> None:
        if self._attached:
            return
        logger = logging.getLogger(self._logger_name)
        logger.addHandler(self._handler)
        if logger.level == logging.NOTSET or logger.level > level:
            logger.setLevel(level)
        self._attached = True

    def detach(self) -> None:
        if not self._attached:
            return
        logging.getLogger(self._logger_name).removeHandler(self._handler)
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    # Internal ingestion -----------------------------------------------
    def _ingest_record(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)
        bus = get_event_bus()
        if bus is not None:
            bus.publish(
                TourEvent.LOG_RECORD_ADDED,
                {"level": entry.level, "name": entry.name, "message": entry.message[:120]},
            )

    # Query ------------------------------------------------------------
    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, level: str | None = None, name_contains: str | None = None
    ) -> List[LogEntry]:
        out: List[LogEntry] = []
        for e in self.recent():
            if level and e.level != level:
                continue
            if name_contains and name_contains not in e.name:
                continue
            out.append(e)
        return out

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    # Export ------------------------------------------------------------
    def export_jsonl(
        self,
        path: str | Path,
        *,
        level: str | None = None,
        name_contains: str | None = None,
        append: bool = False,
    ) -> int:
        """Write filtered entries as JSON Lines; returns the number written."""
        entries = self.filter(level=level, name_contains=name_contains)
        with open(path, "a" if append else "w", encoding="utf-8") as handle:
            for e in entries:
                handle.write(
                    json.dumps(
                        {
                            "level": e.level,
                            "name": e.name,
                            "message": e.message,
                            "created": e.created,
                        },
                        sort_keys=True,
                    )
                    + "\n"
                )
        return len(entries)


def get_logging_service() -> LoggingService:
    svc = services.try_get("logging_service")
    if svc is None:
        svc = LoggingService()
        services.register("logging_service", svc)
    return svc
