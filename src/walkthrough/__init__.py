"""Walkthrough public API.

Curated, intentionally small surface for hosts that embed guided tutorials:
the tutorial data model, the catalog, the state machine and the
infrastructure services. Widgets live in ``walkthrough.views`` and are not
imported here, so importing the package never creates Qt widgets.
"""

from __future__ import annotations

# Data model
from .models import (  # noqa: F401
    Difficulty,
    StepAction,
    Tutorial,
    TutorialCategory,
    TutorialDefinitionError,
    TutorialStep,
    tutorial_from_dict,
    validate_tutorial,
)
from .catalog import (  # noqa: F401
    TutorialNotFoundError,
    find_tutorial,
    get_tutorial,
    list_tutorials,
    register_builtin_tutorials,
    register_tutorial,
)

# Engine
from .engine import TutorialRunState, TutorialStateMachine  # noqa: F401

# Infrastructure
from .services.service_locator import (  # noqa: F401
    services,
    ServiceLocator,
    ServiceAlreadyRegisteredError,
    ServiceNotFoundError,
)
from .services.event_bus import EventBus, Event, TourEvent  # noqa: F401
from .services.settings_service import WalkthroughSettings  # noqa: F401

__all__ = [
    "Difficulty",
    "StepAction",
    "Tutorial",
    "TutorialCategory",
    "TutorialDefinitionError",
    "TutorialStep",
    "tutorial_from_dict",
    "validate_tutorial",
    "TutorialNotFoundError",
    "find_tutorial",
    "get_tutorial",
    "list_tutorials",
    "register_builtin_tutorials",
    "register_tutorial",
    "TutorialRunState",
    "TutorialStateMachine",
    "services",
    "ServiceLocator",
    "ServiceAlreadyRegisteredError",
    "ServiceNotFoundError",
    "EventBus",
    "Event",
    "TourEvent",
    "WalkthroughSettings",
]

__version__ = "0.1.0"
