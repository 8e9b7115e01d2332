"""Projections of a tutorial run for the panel widgets.

Separates derivation logic from the Qt panel so tests can exercise labels,
step overview markers and the completion summary without a QApplication.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from ..engine.run_state import TutorialRunState, elapsed_minutes
from ..models import Difficulty, Tutorial, TutorialStep


class StepStatus(str, Enum):
    COMPLETED = "completed"
    CURRENT = "current"
    PENDING = "pending"

    @property
    def marker(self) -> str:
        return _MARKERS[self]


_MARKERS = {
    StepStatus.COMPLETED: "✓",
    StepStatus.CURRENT: "●",
    StepStatus.PENDING: "○",
}

_DIFFICULTY_VARIANTS = {
    Difficulty.BEGINNER: "default",
    Difficulty.INTERMEDIATE: "secondary",
    Difficulty.ADVANCED: "destructive",
}


@dataclass(frozen=True)
class StepOverviewItem:
    index: int
    step_id: str
    title: str
    status: StepStatus
    is_current: bool

    @property
    def marker(self) -> str:
        return self.status.marker

    def as_text(self) -> str:
        text = f"{self.marker}  {self.title}"
        if self.is_current:
            text += "    Current"
        return text


@dataclass(frozen=True)
class CompletionSummary:
    title: str
    message: str
    minutes: int
    interactions: int

    @property
    def time_text(self) -> str:
        return f"{self.minutes}m"


def build_step_overview(tutorial: Tutorial, state: TutorialRunState) -> List[StepOverviewItem]:
    """One entry per step; a completed checkmark wins over the current marker."""
    items: List[StepOverviewItem] = []
    for index, step in enumerate(tutorial.steps):
        is_current = index == state.current_index
        if index in state.completed_steps:
            status = StepStatus.COMPLETED
        elif is_current:
            status = StepStatus.CURRENT
        else:
            status = StepStatus.PENDING
        items.append(
            StepOverviewItem(
                index=index, step_id=step.id, title=step.title, status=status, is_current=is_current
            )
        )
    return items


def progress_label(state: TutorialRunState, step_count: int) -> str:
    return f"{state.current_index + 1} / {step_count}"


def difficulty_variant(difficulty: Difficulty) -> str:
    return _DIFFICULTY_VARIANTS.get(Difficulty(difficulty), "default")


def play_button_label(state: TutorialRunState) -> str:
    return "Pause" if state.is_playing else "Play"


def hints_button_label(state: TutorialRunState) -> str:
    return "Hide Hints" if state.show_hints else "Show Hints"


def visible_hints(step: TutorialStep, state: TutorialRunState) -> Tuple[str, ...]:
    if not state.show_hints:
        return ()
    return tuple(step.hints)


def completion_summary(tutorial: Tutorial, state: TutorialRunState, now_ms: float) -> CompletionSummary:
    return CompletionSummary(
        title="Tutorial Completed!",
        message=f'Great job! You\'ve completed the "{tutorial.title}" tutorial.',
        minutes=elapsed_minutes(state, now_ms),
        interactions=state.interaction_count,
    )


__all__ = [
    "StepStatus",
    "StepOverviewItem",
    "CompletionSummary",
    "build_step_overview",
    "progress_label",
    "difficulty_variant",
    "play_button_label",
    "hints_button_label",
    "visible_hints",
    "completion_summary",
]
