"""Tutorial catalog registry and the built-in showcase tutorials.

The registry is a plain module-level mapping: hosts register the tutorials
they ship, look them up by id and filter by category or difficulty.
Prerequisites are informational; ``missing_prerequisites`` lets a host show a
"complete X first" note, the engine itself never blocks a run.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .models import (
    Difficulty,
    StepAction,
    Tutorial,
    TutorialCategory,
    TutorialStep,
    validate_tutorial,
)

__all__ = [
    "TutorialNotFoundError",
    "register_tutorial",
    "get_tutorial",
    "find_tutorial",
    "list_tutorials",
    "clear_tutorials",
    "tutorials_by_category",
    "tutorials_by_difficulty",
    "missing_prerequisites",
    "builtin_tutorials",
    "register_builtin_tutorials",
]


class TutorialNotFoundError(KeyError):
    """Raised when a tutorial id is not registered."""


_registry: Dict[str, Tutorial] = {}


def register_tutorial(tutorial: Tutorial) -> None:
    if tutorial.id in _registry:
        raise ValueError(f"Tutorial already registered: {tutorial.id}")
    _registry[tutorial.id] = validate_tutorial(tutorial)


def get_tutorial(tutorial_id: str) -> Tutorial:
    try:
        return _registry[tutorial_id]
    except KeyError:
        raise TutorialNotFoundError(tutorial_id) from None


def find_tutorial(tutorial_id: str) -> Optional[Tutorial]:
    return _registry.get(tutorial_id)


def list_tutorials() -> List[Tutorial]:
    return list(_registry.values())


def clear_tutorials() -> None:
    _registry.clear()


def tutorials_by_category(category: TutorialCategory | str) -> List[Tutorial]:
    wanted = TutorialCategory(category)
    return [t for t in _registry.values() if t.category is wanted]


def tutorials_by_difficulty(difficulty: Difficulty | str) -> List[Tutorial]:
    wanted = Difficulty(difficulty)
    return [t for t in _registry.values() if t.difficulty is wanted]


def missing_prerequisites(tutorial: Tutorial, completed_ids: Iterable[str]) -> List[str]:
    done = set(completed_ids)
    return sorted(p for p in tutorial.prerequisites if p not in done)


# ---------------------------------------------------------------------------
# Built-in showcase tutorials
# ---------------------------------------------------------------------------


def _getting_started() -> Tutorial:
    return Tutorial(
        id="getting-started",
        title="Getting Started with Component Showcase",
        description="Learn the basics of navigating and using the component showcase",
        category=TutorialCategory.GETTING_STARTED,
        difficulty=Difficulty.BEGINNER,
        estimated_minutes=5,
        steps=(
            TutorialStep(
                id="welcome",
                title="Welcome to Component Showcase",
                description="Let's explore the main features of the component showcase",
                content=(
                    "<p>This interactive guide will help you learn how to:</p>"
                    "<ul><li>Navigate through components</li>"
                    "<li>View live examples and code</li>"
                    "<li>Copy code snippets</li>"
                    "<li>Search and filter components</li>"
                    "<li>Switch between component versions</li></ul>"
                    "<p>This tutorial will take approximately 5 minutes to complete.</p>"
                ),
                auto_advance_after_ms=3000,
            ),
            TutorialStep(
                id="sidebar-navigation",
                title="Sidebar Navigation",
                description="The sidebar shows all available components organized alphabetically",
                target="#sidebar",
                content=(
                    "<p>The sidebar on the left contains all available components:</p>"
                    "<ul><li>Components are listed alphabetically</li>"
                    "<li>Each component shows its category and dependencies</li>"
                    "<li>Click any component to view its details</li></ul>"
                ),
                hints=(
                    "Look for the component list on the left side of the screen",
                    "Each component shows colored dots indicating available versions",
                ),
            ),
            TutorialStep(
                id="search-functionality",
                title="Search Components",
                description="Use the search bar to quickly find components",
                target="#search-input",
                action=StepAction.TYPE,
                action_data={"text": "button"},
                content=(
                    "<p>The search bar helps you find components quickly:</p>"
                    "<ul><li>Search by component name, description, or category</li>"
                    "<li>Use fuzzy search - typos are okay!</li>"
                    "<li>Try searching for \"button\" to see it in action</li></ul>"
                ),
                hints=(
                    "The search bar is at the top of the sidebar",
                    "Try typing \"but\" to find button-related components",
                ),
            ),
            TutorialStep(
                id="component-tabs",
                title="Component Detail Tabs",
                description="Each component has four main tabs with different information",
                content=(
                    "<p>When you select a component, you'll see four tabs:</p>"
                    "<ul><li><b>Preview:</b> Live examples</li>"
                    "<li><b>Code:</b> Copy-paste snippets</li>"
                    "<li><b>Dependencies:</b> Installation info</li>"
                    "<li><b>Accessibility:</b> A11y testing</li></ul>"
                ),
                hints=(
                    "Tabs are located at the top of the main content area",
                    "Each tab provides different types of information about the component",
                ),
            ),
            TutorialStep(
                id="keyboard-shortcuts",
                title="Keyboard Shortcuts",
                description="Learn useful keyboard shortcuts for faster navigation",
                content=(
                    "<ul><li><b>/</b> Focus search</li>"
                    "<li><b>Up/Down</b> Move through the component list</li>"
                    "<li><b>Enter</b> Open the selected component</li>"
                    "<li><b>?</b> Show all shortcuts</li></ul>"
                ),
                hints=(
                    "Press ? to see all available keyboard shortcuts",
                    "Keyboard shortcuts work from anywhere in the showcase",
                ),
            ),
        ),
    )


def _button_deep_dive() -> Tutorial:
    return Tutorial(
        id="button-component-deep-dive",
        title="Button Component Deep Dive",
        description="Learn everything about the Button component and its variants",
        category=TutorialCategory.COMPONENTS,
        difficulty=Difficulty.BEGINNER,
        estimated_minutes=8,
        prerequisites=frozenset({"getting-started"}),
        steps=(
            TutorialStep(
                id="button-overview",
                title="Button Component Overview",
                description="Understanding the Button component and its use cases",
                content="Buttons trigger actions, submit forms, and navigate between pages.",
            ),
            TutorialStep(
                id="button-variants",
                title="Button Variants",
                description="Explore different button styles and when to use them",
                content="Default, secondary, outline, ghost, link and destructive variants.",
                hints=(
                    "Each variant serves a different purpose in your UI hierarchy",
                    "Use destructive variant sparingly for important delete actions",
                ),
            ),
            TutorialStep(
                id="button-sizes",
                title="Button Sizes",
                description="Learn about different button sizes and their use cases",
                content="Small, default, large and icon-only sizes.",
                hints=(
                    "Choose button size based on the importance and context of the action",
                    "Icon buttons should always have proper aria-labels for accessibility",
                ),
            ),
            TutorialStep(
                id="button-states",
                title="Button States",
                description="Understanding different button states and interactions",
                content=(
                    "Always provide visual feedback for button states to improve user experience."
                ),
                hints=(
                    "Disabled buttons should clearly indicate why they're disabled",
                    "Loading states help users understand that their action is being processed",
                ),
            ),
            TutorialStep(
                id="button-code-example",
                title="Button Code Examples",
                description="See how to implement buttons in your code",
                content="Copy this code and paste it into your component to get started!",
                hints=(
                    "Always import the Button component from the correct path",
                    "Use the variant prop to change the button style",
                ),
            ),
        ),
    )


def _forms() -> Tutorial:
    return Tutorial(
        id="form-components-tutorial",
        title="Building Forms with Components",
        description="Learn how to create forms using Input, Button, and validation",
        category=TutorialCategory.COMPONENTS,
        difficulty=Difficulty.INTERMEDIATE,
        estimated_minutes=12,
        prerequisites=frozenset({"getting-started", "button-component-deep-dive"}),
        steps=(
            TutorialStep(
                id="form-overview",
                title="Form Components Overview",
                description="Understanding the components needed for forms",
                content="Forms combine labels, inputs and buttons.",
            ),
            TutorialStep(
                id="basic-form",
                title="Creating a Basic Form",
                description="Build a simple form with validation",
                content="A name field, an email field and a submit button.",
                hints=(
                    "Always use proper input types (email, tel, etc.) for better UX",
                    "Labels should be associated with their inputs for accessibility",
                ),
            ),
            TutorialStep(
                id="form-validation",
                title="Form Validation",
                description="Adding validation and error handling",
                content="Show an error message next to the field that failed validation.",
                hints=(
                    "Use red borders and text to indicate validation errors",
                    "Provide helpful error messages that explain how to fix the issue",
                ),
            ),
        ),
    )


def _accessibility() -> Tutorial:
    return Tutorial(
        id="accessibility-best-practices",
        title="Accessibility Best Practices",
        description="Learn how to make your components accessible to all users",
        category=TutorialCategory.ACCESSIBILITY,
        difficulty=Difficulty.INTERMEDIATE,
        estimated_minutes=15,
        prerequisites=frozenset({"getting-started"}),
        steps=(
            TutorialStep(
                id="accessibility-overview",
                title="Why Accessibility Matters",
                description="Understanding the importance of accessible design",
                content="Accessible components work for keyboard, screen reader and low-vision users.",
            ),
            TutorialStep(
                id="keyboard-navigation",
                title="Keyboard Navigation",
                description="Ensuring all interactive elements are keyboard accessible",
                content=(
                    "Use Tab to move forward, Shift+Tab to move backward, "
                    "Enter/Space to activate."
                ),
                hints=(
                    "Test your components using only the keyboard",
                    "Ensure focus indicators are clearly visible",
                ),
            ),
            TutorialStep(
                id="aria-labels",
                title="ARIA Labels and Descriptions",
                description="Using ARIA attributes to provide context for screen readers",
                content="Icon-only controls need an accessible name.",
                hints=(
                    "Use aria-label for elements without visible text",
                    "Use aria-describedby to provide additional context",
                ),
            ),
        ),
    )


def builtin_tutorials() -> List[Tutorial]:
    return [_getting_started(), _button_deep_dive(), _forms(), _accessibility()]


def register_builtin_tutorials() -> List[Tutorial]:
    """Register every built-in tutorial not yet present; returns the new ones."""
    added: List[Tutorial] = []
    for tutorial in builtin_tutorials():
        if tutorial.id not in _registry:
            register_tutorial(tutorial)
            added.append(tutorial)
    return added
