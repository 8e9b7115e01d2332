"""Runtime settings for overlay geometry and resize handling.

The defaults reproduce the showcase look (4px highlight outset, callout 16px
below the target, callout clamped 16px from the left edge and 400px from the
right edge). Hosts may replace ``WalkthroughSettings.instance`` or pass their
own instance to the panel; ``from_env`` reads ``WALKTHROUGH_*`` variables so
a deployment can tune values without code changes.

Environment variables (all optional):
 - WALKTHROUGH_HIGHLIGHT_MARGIN (int px)
 - WALKTHROUGH_CALLOUT_GAP (int px)
 - WALKTHROUGH_CALLOUT_WIDTH (int px)
 - WALKTHROUGH_CALLOUT_RESERVED_WIDTH (int px)
 - WALKTHROUGH_VIEWPORT_MARGIN (int px)
 - WALKTHROUGH_RESIZE_DEBOUNCE_MS (int ms)
 - WALKTHROUGH_DIM_ALPHA (int 0..255)
 - WALKTHROUGH_SCROLL_INTO_VIEW ("1"/"true"/"yes"/"on" or anything else)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import ClassVar, Mapping, Optional

__all__ = ["WalkthroughSettings"]

_log = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


@dataclass(frozen=True)
class WalkthroughSettings:
    """Overlay and resize tuning knobs.

    Attributes:
        highlight_margin: Pixels the highlight frame extends past the target.
        callout_gap: Vertical distance between target bottom and callout.
        callout_width: Fixed width of the callout card.
        callout_reserved_width: Horizontal room kept free at the right edge
            when clamping the callout's left coordinate.
        viewport_margin: Minimum distance of the callout from the left edge.
        resize_debounce_ms: Quiet period before geometry is re-resolved after
            the root widget is resized.
        dim_alpha: Alpha (0..255) of the dimming layer.
        scroll_into_view: Whether the locator scrolls targets into view.
    """

    instance: ClassVar["WalkthroughSettings"]

    highlight_margin: int = 4
    callout_gap: int = 16
    callout_width: int = 384
    callout_reserved_width: int = 400
    viewport_margin: int = 16
    resize_debounce_ms: int = 90
    dim_alpha: int = 128
    scroll_into_view: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "highlight_margin", _clamp(int(self.highlight_margin), 0, 64))
        object.__setattr__(self, "callout_gap", _clamp(int(self.callout_gap), 0, 256))
        object.__setattr__(self, "callout_width", _clamp(int(self.callout_width), 120, 1200))
        object.__setattr__(
            self, "callout_reserved_width", _clamp(int(self.callout_reserved_width), 0, 2000)
        )
        object.__setattr__(self, "viewport_margin", _clamp(int(self.viewport_margin), 0, 256))
        object.__setattr__(
            self, "resize_debounce_ms", _clamp(int(self.resize_debounce_ms), 10, 2000)
        )
        object.__setattr__(self, "dim_alpha", _clamp(int(self.dim_alpha), 0, 255))

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, *, base: Optional["WalkthroughSettings"] = None
    ) -> "WalkthroughSettings":
        """Build settings from ``WALKTHROUGH_*`` variables layered over ``base``.

        Unparseable values are ignored with a warning.
        """
        env = os.environ if environ is None else environ
        settings = base or cls()
        changes: dict[str, object] = {}
        for field_name in (
            "highlight_margin",
            "callout_gap",
            "callout_width",
            "callout_reserved_width",
            "viewport_margin",
            "resize_debounce_ms",
            "dim_alpha",
        ):
            raw = env.get(f"WALKTHROUGH_{field_name.upper()}")
            if raw is None or not raw.strip():
                continue
            try:
                changes[field_name] = int(raw.strip())
            except ValueError:
                _log.warning("Ignoring invalid WALKTHROUGH_%s=%r", field_name.upper(), raw)
        raw_scroll = env.get("WALKTHROUGH_SCROLL_INTO_VIEW")
        if raw_scroll is not None and raw_scroll.strip():
            changes["scroll_into_view"] = raw_scroll.strip().lower() in _TRUTHY
        return replace(settings, **changes) if changes else settings


WalkthroughSettings.instance = WalkthroughSettings.from_env()
