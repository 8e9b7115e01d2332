"""Step progress bar used by the tutorial panel.

``StepProgressBar`` takes an explicit fraction (0..1) and paints a flat
horizontal bar. QSS can theme it through:

 - objectName: stepProgressBar
 - dynamic property 'state': one of 'empty', 'partial', 'complete'
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QSize
from PyQt6.QtGui import QColor, QPainter
from PyQt6.QtWidgets import QSizePolicy, QWidget

__all__ = ["StepProgressBar"]


class StepProgressBar(QWidget):
    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("stepProgressBar")
        self._value: float = 0.0
        self._bar_color = QColor(80, 140, 220)
        self._track_color = QColor(40, 40, 40, 80)
        self.setFixedHeight(8)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self._update_state_property()

    def set_progress(self, value: float) -> None:
        self._value = max(0.0, min(1.0, float(value)))
        self._update_state_property()
        self.update()

    def set_percent(self, percent: float) -> None:
        self.set_progress(float(percent) / 100.0)

    def progress(self) -> float:
        return self._value

    def state(self) -> str:
        return str(self.property("state"))

    def sizeHint(self) -> QSize:  # noqa: N802
        return QSize(160, 8)

    def _update_state_property(self) -> None:
        if self._value <= 0.0:
            state = "empty"
        elif self._value >= 0.999:
            state = "complete"
        else:
            state = "partial"
        if self.property("state") != state:
            self.setProperty("state", state)
            # re-polish so state-dependent QSS applies
            self.style().unpolish(self)
            self.style().polish(self)

    def paintEvent(self, event):  # type: ignore[override]
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing, False)
        rect = self.rect()
        p.fillRect(rect, self._track_color)
        w = int(rect.width() * self._value)
        if w > 0:
            p.fillRect(0, 0, w, rect.height(), self._bar_color)
        p.end()
