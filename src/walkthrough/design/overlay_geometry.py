"""Pure layout of the highlight overlay for one step.

``compute_overlay`` turns (step, target rectangle, step number, total) into
an ``OverlayModel`` describing everything the overlay widget draws. Keeping
this free of Qt lets the clamping rules be tested headlessly:

* frame = target grown by ``highlight_margin`` on every side
* callout top = target bottom + ``callout_gap``
* callout left = max(viewport_margin, min(target.left,
  viewport_width - callout_reserved_width))
* only the first hint is shown; the full list lives in the step panel
* Previous is disabled on step 1
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..models import StepAction, TutorialStep
from ..services.settings_service import WalkthroughSettings
from ..services.target_locator import TargetRect

__all__ = ["ACTION_GLYPHS", "OverlayModel", "compute_overlay", "callout_left"]

# Only pointer-style actions get a glyph in the callout header.
ACTION_GLYPHS: Dict[StepAction, str] = {
    StepAction.CLICK: "\U0001F5B1",  # mouse
    StepAction.TYPE: "⌨",  # keyboard
    StepAction.HOVER: "\U0001F441",  # eye
}


@dataclass(frozen=True)
class OverlayModel:
    target: TargetRect
    frame: TargetRect
    callout_top: int
    callout_left: int
    callout_width: int
    counter_text: str
    action_glyph: Optional[str]
    title: str
    description: str
    hint: Optional[str]
    previous_enabled: bool


def callout_left(target: TargetRect, viewport_width: int, settings: WalkthroughSettings) -> int:
    return max(
        settings.viewport_margin,
        min(target.left, viewport_width - settings.callout_reserved_width),
    )


def compute_overlay(
    step: TutorialStep,
    target_rect: Optional[TargetRect],
    step_number: int,
    total_steps: int,
    *,
    viewport_width: int,
    settings: Optional[WalkthroughSettings] = None,
) -> Optional[OverlayModel]:
    """Return the overlay layout, or None when there is nothing to highlight."""
    if target_rect is None:
        return None
    cfg = settings or WalkthroughSettings.instance
    return OverlayModel(
        target=target_rect,
        frame=target_rect.inflated(cfg.highlight_margin),
        callout_top=target_rect.bottom + cfg.callout_gap,
        callout_left=callout_left(target_rect, viewport_width, cfg),
        callout_width=cfg.callout_width,
        counter_text=f"Step {step_number} of {total_steps}",
        action_glyph=ACTION_GLYPHS.get(step.action) if step.action else None,
        title=step.title,
        description=step.description,
        hint=step.first_hint(),
        previous_enabled=step_number != 1,
    )
