"""Tests for the pure run-state transition function."""

from __future__ import annotations

import pytest

from walkthrough.engine.run_state import (
    Advance,
    JumpToStep,
    Restart,
    Retreat,
    ToggleHints,
    TogglePlay,
    elapsed_minutes,
    initial_run_state,
    progress_percent,
    transition,
)

N = 3
T0 = 1_000_000.0


def _apply(state, action, now=T0):
    return transition(state, action, step_count=N, now_ms=now)


def test_initial_state():
    state = initial_run_state(N, auto_play=True, now_ms=T0)
    assert state.current_index == 0
    assert state.is_playing is True
    assert state.is_completed is False
    assert state.completed_steps == frozenset()
    assert state.show_hints is False
    assert state.progress.per_step_elapsed_ms == (None, None, None)
    assert state.interaction_count == 0


def test_initial_state_requires_steps():
    with pytest.raises(ValueError):
        initial_run_state(0, auto_play=False, now_ms=T0)


def test_advance_records_elapsed_and_completed_step():
    state = _apply(initial_run_state(N, auto_play=False, now_ms=T0), Advance(), now=T0 + 1500)
    assert state.current_index == 1
    assert state.completed_steps == frozenset({0})
    assert state.progress.per_step_elapsed_ms == (1500, None, None)
    assert state.interaction_count == 1


def test_final_advance_completes_and_stops_playing():
    state = initial_run_state(N, auto_play=True, now_ms=T0)
    state = _apply(state, Advance())
    state = _apply(state, Advance())
    final = _apply(state, Advance(), now=T0 + 9000)
    assert final.is_completed
    assert not final.is_playing
    assert final.current_index == 2
    assert final.progress.per_step_elapsed_ms[2] == 9000
    # the final step is not added and the interaction count is unchanged
    assert final.completed_steps == frozenset({0, 1})
    assert final.interaction_count == 2


def test_advance_after_completion_is_noop():
    state = initial_run_state(1, auto_play=False, now_ms=T0)
    done = transition(state, Advance(), step_count=1, now_ms=T0)
    assert transition(done, Advance(), step_count=1, now_ms=T0 + 10) == done


def test_retreat_clamps_and_counts():
    state = _apply(initial_run_state(N, auto_play=False, now_ms=T0), Retreat())
    assert state.current_index == 0
    assert state.interaction_count == 1


def test_toggle_play_flips():
    state = initial_run_state(N, auto_play=False, now_ms=T0)
    assert _apply(state, TogglePlay()).is_playing is True
    assert _apply(_apply(state, TogglePlay()), TogglePlay()).is_playing is False


def test_jump_does_not_mark_completed_and_clamps():
    state = initial_run_state(N, auto_play=False, now_ms=T0)
    jumped = _apply(state, JumpToStep(2))
    assert jumped.current_index == 2
    assert jumped.completed_steps == frozenset()
    assert jumped.interaction_count == 1
    assert _apply(state, JumpToStep(99)).current_index == 2
    assert _apply(state, JumpToStep(-5)).current_index == 0


def test_restart_resets_run_but_keeps_hint_visibility():
    state = initial_run_state(N, auto_play=True, now_ms=T0)
    state = _apply(_apply(state, Advance()), ToggleHints())
    fresh = _apply(state, Restart(), now=T0 + 5000)
    assert fresh.current_index == 0
    assert fresh.is_playing is False
    assert fresh.completed_steps == frozenset()
    assert fresh.interaction_count == 0
    assert fresh.progress.start_timestamp_ms == T0 + 5000
    assert fresh.show_hints is True


def test_completed_run_ignores_navigation_but_allows_hints():
    state = initial_run_state(1, auto_play=False, now_ms=T0)
    done = transition(state, Advance(), step_count=1, now_ms=T0)
    for action in (Retreat(), TogglePlay(), JumpToStep(0)):
        assert transition(done, action, step_count=1, now_ms=T0) == done
    assert transition(done, ToggleHints(), step_count=1, now_ms=T0).show_hints is True


def test_progress_percent_and_elapsed_minutes():
    state = initial_run_state(4, auto_play=False, now_ms=T0)
    assert progress_percent(state, 4) == 25.0
    assert elapsed_minutes(state, T0 + 59_999) == 0
    assert elapsed_minutes(state, T0 + 125_000) == 2


def test_unknown_action_raises():
    with pytest.raises(TypeError):
        _apply(initial_run_state(N, auto_play=False, now_ms=T0), object())
