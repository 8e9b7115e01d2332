"""Tests for the panel projections (no QApplication needed)."""

from __future__ import annotations

from walkthrough.engine.run_state import (
    Advance,
    JumpToStep,
    ToggleHints,
    TogglePlay,
    initial_run_state,
    transition,
)
from walkthrough.models import Difficulty, TutorialStep
from walkthrough.viewmodels.tutorial_viewmodel import (
    StepStatus,
    build_step_overview,
    completion_summary,
    difficulty_variant,
    hints_button_label,
    play_button_label,
    progress_label,
    visible_hints,
)

T0 = 5_000_000.0


def _run(tutorial, *actions):
    state = initial_run_state(tutorial.step_count, auto_play=False, now_ms=T0)
    for action in actions:
        state = transition(state, action, step_count=tutorial.step_count, now_ms=T0)
    return state


def test_overview_markers(tutorial_factory):
    tut = tutorial_factory("a", "b", "c")
    items = build_step_overview(tut, _run(tut, Advance()))
    assert [i.status for i in items] == [StepStatus.COMPLETED, StepStatus.CURRENT, StepStatus.PENDING]
    assert [i.marker for i in items] == ["✓", "●", "○"]
    assert items[1].as_text().endswith("Current")
    assert "Current" not in items[0].as_text()


def test_completed_marker_wins_over_current(tutorial_factory):
    tut = tutorial_factory("a", "b", "c")
    state = _run(tut, Advance(), JumpToStep(0))
    first = build_step_overview(tut, state)[0]
    assert first.status is StepStatus.COMPLETED
    assert first.is_current
    assert first.as_text().endswith("Current")


def test_labels(tutorial_factory):
    tut = tutorial_factory("a", "b", "c", "d")
    state = _run(tut, Advance())
    assert progress_label(state, 4) == "2 / 4"
    assert play_button_label(state) == "Play"
    assert play_button_label(_run(tut, TogglePlay())) == "Pause"
    assert hints_button_label(state) == "Show Hints"
    assert hints_button_label(_run(tut, ToggleHints())) == "Hide Hints"


def test_difficulty_variant():
    assert difficulty_variant(Difficulty.BEGINNER) == "default"
    assert difficulty_variant(Difficulty.INTERMEDIATE) == "secondary"
    assert difficulty_variant(Difficulty.ADVANCED) == "destructive"
    assert difficulty_variant("advanced") == "destructive"


def test_visible_hints_follow_toggle(tutorial_factory):
    step = TutorialStep(id="a", title="A", hints=("h1", "h2"))
    tut = tutorial_factory(step)
    assert visible_hints(step, _run(tut)) == ()
    assert visible_hints(step, _run(tut, ToggleHints())) == ("h1", "h2")


def test_completion_summary(tutorial_factory):
    tut = tutorial_factory("a", "b")
    state = _run(tut, Advance(), Advance())
    summary = completion_summary(tut, state, T0 + 2 * 60_000 + 30_000)
    assert summary.title == "Tutorial Completed!"
    assert "Demo tutorial" in summary.message
    assert summary.time_text == "2m"
    assert summary.interactions == 1
