from __future__ import annotations

import json
import logging

import pytest

from walkthrough.services.event_bus import EventBus, TourEvent
from walkthrough.services.logging_service import LoggingService, get_logging_service
from walkthrough.services.service_locator import services


@pytest.fixture
def svc():
    service = LoggingService(capacity=3)
    service.attach()
    yield service
    service.detach()


def test_captures_records_under_namespace(svc):
    logging.getLogger("walkthrough.engine.state_machine").info("advanced to %d", 2)
    logging.getLogger("elsewhere").info("ignored")
    entries = svc.recent()
    assert [e.message for e in entries] == ["advanced to 2"]
    assert entries[0].level == "INFO"
    assert entries[0].name == "walkthrough.engine.state_machine"


def test_ring_buffer_capacity(svc):
    log = logging.getLogger("walkthrough.test")
    for i in range(5):
        log.warning("m%d", i)
    assert [e.message for e in svc.recent()] == ["m2", "m3", "m4"]
    assert [e.message for e in svc.recent(limit=1)] == ["m4"]


def test_filter_and_clear(svc):
    logging.getLogger("walkthrough.views.tutorial_panel").debug("a")
    logging.getLogger("walkthrough.engine").warning("b")
    assert [e.message for e in svc.filter(level="WARNING")] == ["b"]
    assert [e.message for e in svc.filter(name_contains="views")] == ["a"]
    svc.clear()
    assert svc.recent() == []


def test_detach_stops_capture(svc):
    svc.detach()
    assert not svc.attached
    logging.getLogger("walkthrough.x").error("late")
    assert svc.recent() == []


def test_export_jsonl(svc, tmp_path):
    logging.getLogger("walkthrough.a").info("one")
    logging.getLogger("walkthrough.b").error("two")
    path = tmp_path / "log.jsonl"
    assert svc.export_jsonl(path) == 2
    assert svc.export_jsonl(path, level="ERROR", append=True) == 1
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [line["message"] for line in lines] == ["one", "two", "two"]
    assert set(lines[0]) == {"level", "name", "message", "created"}


def test_publishes_on_registered_bus(svc):
    bus = EventBus()
    services.register("event_bus", bus)
    got = []
    bus.subscribe(TourEvent.LOG_RECORD_ADDED, lambda e: got.append(e.payload["message"]))
    logging.getLogger("walkthrough.c").info("hello")
    assert got == ["hello"]


def test_get_logging_service_registers_singleton():
    first = get_logging_service()
    assert get_logging_service() is first
    assert services.get("logging_service") is first
