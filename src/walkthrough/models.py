"""Immutable step sequence model for guided walkthroughs.

A ``Tutorial`` is owned by the host and never mutated by the engine. Step
``content`` and ``target`` are opaque: the engine hands ``content`` to the
content renderer and ``target`` to the target locator without looking inside.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

__all__ = [
    "StepAction",
    "TutorialCategory",
    "Difficulty",
    "TutorialStep",
    "Tutorial",
    "TutorialDefinitionError",
    "validate_tutorial",
    "tutorial_from_dict",
    "tutorial_summary",
]


class StepAction(str, Enum):
    CLICK = "click"
    TYPE = "type"
    HOVER = "hover"
    SCROLL = "scroll"
    WAIT = "wait"


class TutorialCategory(str, Enum):
    GETTING_STARTED = "getting-started"
    COMPONENTS = "components"
    ADVANCED = "advanced"
    ACCESSIBILITY = "accessibility"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class TutorialDefinitionError(ValueError):
    """Raised when a tutorial violates its construction contract."""


@dataclass(frozen=True)
class TutorialStep:
    id: str
    title: str
    description: str = ""
    content: Any = None
    target: Optional[str] = None  # opaque selector resolved by the target locator
    action: Optional[StepAction] = None
    action_data: Any = None
    hints: Tuple[str, ...] = ()
    auto_advance_after_ms: Optional[int] = None

    def __post_init__(self) -> None:
        # Accept any iterable of hints but store a tuple so steps stay hashable.
        if not isinstance(self.hints, tuple):
            object.__setattr__(self, "hints", tuple(self.hints))

    def first_hint(self) -> Optional[str]:
        return self.hints[0] if self.hints else None


@dataclass(frozen=True)
class Tutorial:
    id: str
    title: str
    steps: Tuple[TutorialStep, ...]
    description: str = ""
    category: TutorialCategory = TutorialCategory.GETTING_STARTED
    difficulty: Difficulty = Difficulty.BEGINNER
    estimated_minutes: int = 5
    prerequisites: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not isinstance(self.steps, tuple):
            object.__setattr__(self, "steps", tuple(self.steps))
        if not isinstance(self.prerequisites, frozenset):
            object.__setattr__(self, "prerequisites", frozenset(self.prerequisites))

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def step_ids(self) -> List[str]:
        return [s.id for s in self.steps]

    def step_at(self, index: int) -> TutorialStep:
        return self.steps[index]


def validate_tutorial(tutorial: Tutorial) -> Tutorial:
    """Check the construction contract and return the tutorial unchanged.

    Raises ``TutorialDefinitionError`` for an empty step sequence, duplicate
    step ids, a non-positive estimate or a non-positive auto-advance delay.
    """
    if not tutorial.steps:
        raise TutorialDefinitionError(f"Tutorial '{tutorial.id}' has no steps")
    if tutorial.estimated_minutes <= 0:
        raise TutorialDefinitionError(
            f"Tutorial '{tutorial.id}' estimated_minutes must be positive"
        )
    seen = set()
    for step in tutorial.steps:
        if step.id in seen:
            raise TutorialDefinitionError(
                f"Duplicate step id '{step.id}' in tutorial '{tutorial.id}'"
            )
        seen.add(step.id)
        if step.auto_advance_after_ms is not None and step.auto_advance_after_ms <= 0:
            raise TutorialDefinitionError(
                f"Step '{step.id}' auto_advance_after_ms must be a positive integer"
            )
    return tutorial


def _enum_value(enum_cls, raw: Any, what: str):
    if raw is None or isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(raw)
    except ValueError:
        raise TutorialDefinitionError(f"Unknown {what}: {raw!r}") from None


def _step_from_dict(raw: Mapping[str, Any]) -> TutorialStep:
    delay = raw.get("autoAdvanceAfterMs", raw.get("duration"))
    return TutorialStep(
        id=str(raw.get("id", "")),
        title=str(raw.get("title", "")),
        description=str(raw.get("description", "")),
        content=raw.get("content"),
        target=raw.get("target"),
        action=_enum_value(StepAction, raw.get("action"), "step action"),
        action_data=raw.get("actionData"),
        hints=tuple(raw.get("hints", ()) or ()),
        auto_advance_after_ms=int(delay) if delay is not None else None,
    )


def tutorial_from_dict(raw: Mapping[str, Any]) -> Tutorial:
    """Build and validate a ``Tutorial`` from a camelCase mapping."""
    steps: Iterable[Mapping[str, Any]] = raw.get("steps", ()) or ()
    tutorial = Tutorial(
        id=str(raw.get("id", "")),
        title=str(raw.get("title", "")),
        description=str(raw.get("description", "")),
        category=_enum_value(
            TutorialCategory, raw.get("category", "getting-started"), "tutorial category"
        ),
        difficulty=_enum_value(Difficulty, raw.get("difficulty", "beginner"), "difficulty"),
        estimated_minutes=int(raw.get("estimatedTime", raw.get("estimatedMinutes", 5))),
        prerequisites=frozenset(raw.get("prerequisites", ()) or ()),
        steps=tuple(_step_from_dict(s) for s in steps),
    )
    return validate_tutorial(tutorial)


def tutorial_summary(tutorial: Tutorial) -> Dict[str, Any]:
    """Serializable header information (no step content)."""
    return {
        "id": tutorial.id,
        "title": tutorial.title,
        "category": tutorial.category.value,
        "difficulty": tutorial.difficulty.value,
        "estimatedMinutes": tutorial.estimated_minutes,
        "steps": tutorial.step_ids(),
    }
