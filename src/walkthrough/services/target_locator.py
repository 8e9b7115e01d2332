"""Resolve a step's target selector to on-screen geometry.

Selectors are small strings chosen by the host:

    #search-input                 widget whose objectName is "search-input"
    QLineEdit                     first visible widget of that Qt class
    QPushButton#save              class and objectName together
    [role=primary]                dynamic property match (str comparison)
    QPushButton[role=primary]     class plus property

Resolution happens every time ``locate`` is called because a target may only
exist (or be visible) once its step is current, e.g. on a tab page that is
shown on selection. Hidden widgets count as missing. A missing target is a
normal outcome and is reported as ``None``.

Rectangles are expressed in the coordinate space of the locator's root
widget, which is also the parent of the overlay.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional

from PyQt6.QtCore import QPoint, QRect
from PyQt6.QtWidgets import QScrollArea, QWidget

__all__ = ["TargetRect", "Selector", "parse_selector", "TargetLocator"]

_log = logging.getLogger(__name__)

_SELECTOR_RE = re.compile(
    r"^(?P<type>[A-Za-z_][\w]*)?"
    r"(?:#(?P<name>[\w\-.:]+))?"
    r"(?:\[(?P<prop>[\w\-]+)=(?P<value>[^\]]*)\])?$"
)


@dataclass(frozen=True)
class TargetRect:
    top: int
    left: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def inflated(self, margin: int) -> "TargetRect":
        return TargetRect(
            top=self.top - margin,
            left=self.left - margin,
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
        )

    def contains(self, x: int, y: int) -> bool:
        return self.left <= x < self.right and self.top <= y < self.bottom

    @classmethod
    def from_qrect(cls, rect: QRect) -> "TargetRect":
        return cls(top=rect.y(), left=rect.x(), width=rect.width(), height=rect.height())

    def to_qrect(self) -> QRect:
        return QRect(self.left, self.top, self.width, self.height)


@dataclass(frozen=True)
class Selector:
    type_name: Optional[str] = None
    object_name: Optional[str] = None
    property_name: Optional[str] = None
    property_value: Optional[str] = None

    def matches(self, widget: QWidget) -> bool:
        if self.object_name is not None and widget.objectName() != self.object_name:
            return False
        if self.type_name is not None and not _is_instance_of(widget, self.type_name):
            return False
        if self.property_name is not None:
            value = widget.property(self.property_name)
            if value is None or str(value) != self.property_value:
                return False
        return True


def _is_instance_of(widget: QWidget, type_name: str) -> bool:
    meta = widget.metaObject()
    while meta is not None:
        if meta.className() == type_name:
            return True
        meta = meta.superClass()
    return any(cls.__name__ == type_name for cls in type(widget).__mro__)


def parse_selector(text: str) -> Selector:
    """Parse a selector string; raises ``ValueError`` when malformed."""
    cleaned = (text or "").strip()
    match = _SELECTOR_RE.match(cleaned)
    if not cleaned or match is None:
        raise ValueError(f"Unsupported target selector: {text!r}")
    parts = match.groupdict()
    if not any(parts.values()):
        raise ValueError(f"Unsupported target selector: {text!r}")
    return Selector(
        type_name=parts["type"],
        object_name=parts["name"],
        property_name=parts["prop"],
        property_value=parts["value"],
    )


class TargetLocator:
    """Finds target widgets under ``root`` and measures them in root coordinates."""

    def __init__(self, root: QWidget, *, scroll_into_view: bool = True) -> None:
        self._root = root
        self._scroll_into_view = scroll_into_view
        self._ignored: List[QWidget] = []

    @property
    def root(self) -> QWidget:
        return self._root

    def ignore(self, widget: QWidget) -> None:
        """Never match ``widget`` or its descendants (e.g. the overlay itself)."""
        if widget not in self._ignored:
            self._ignored.append(widget)

    def find_widget(self, selector: Optional[str]) -> Optional[QWidget]:
        if not selector:
            return None
        try:
            parsed = parse_selector(selector)
        except ValueError:
            _log.warning("Ignoring malformed target selector %r", selector)
            return None
        for widget in self._root.findChildren(QWidget):
            if self._is_ignored(widget):
                continue
            if parsed.matches(widget) and widget.isVisible():
                return widget
        return None

    def _is_ignored(self, widget: QWidget) -> bool:
        return any(w is widget or w.isAncestorOf(widget) for w in self._ignored)

    def locate(self, selector: Optional[str]) -> Optional[TargetRect]:
        """Return the target's rectangle, scrolling it into view first.

        Returns ``None`` when the selector is empty, malformed or matches no
        visible widget.
        """
        widget = self.find_widget(selector)
        if widget is None:
            if selector:
                _log.debug("Target %r not found", selector)
            return None
        if self._scroll_into_view:
            self._ensure_visible(widget)
        top_left = widget.mapTo(self._root, QPoint(0, 0))
        return TargetRect(
            top=top_left.y(), left=top_left.x(), width=widget.width(), height=widget.height()
        )

    def _ensure_visible(self, widget: QWidget) -> None:
        child = widget
        parent = widget.parentWidget()
        while parent is not None:
            if isinstance(parent, QScrollArea) and parent.widget() is not None:
                parent.ensureWidgetVisible(child, 50, 50)
                child = parent
            if parent is self._root:
                break
            parent = parent.parentWidget()
