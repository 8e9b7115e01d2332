# Shared fixtures for the walkthrough test-suite.
#
# Qt runs on the offscreen platform so widget tests work without a display;
# the variable must be set before pytest-qt creates the QApplication.

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402

from walkthrough.models import Tutorial, TutorialStep  # noqa: E402
from walkthrough.services.service_locator import services  # noqa: E402
from walkthrough.testing import FakeClock, ManualTimerScheduler  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_services():
    yield
    services.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return ManualTimerScheduler(clock=clock)


def make_tutorial(*entries, tutorial_id="demo", **kwargs):
    """Build a tutorial from (id, delay) pairs or plain ids."""
    steps = []
    for entry in entries:
        if isinstance(entry, TutorialStep):
            steps.append(entry)
            continue
        step_id, delay = entry if isinstance(entry, tuple) else (entry, None)
        steps.append(
            TutorialStep(id=step_id, title=step_id.upper(), auto_advance_after_ms=delay)
        )
    return Tutorial(id=tutorial_id, title="Demo tutorial", steps=tuple(steps), **kwargs)


@pytest.fixture
def tutorial_factory():
    return make_tutorial


@pytest.fixture
def abc_tutorial():
    """Three steps; the first auto-advances after 3000 ms."""
    return make_tutorial(("a", 3000), "b", "c")
