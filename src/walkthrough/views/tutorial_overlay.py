"""Highlight overlay drawn on top of the host window.

``TutorialOverlay`` is a child of the overlay root and always covers the
root's full rectangle. It paints a translucent dim layer everywhere except
a hole over the highlight frame, outlines the frame and hosts a
``CalloutWidget`` with the step counter, action glyph, title, description,
first hint and Previous/Next buttons.

The widget mask excludes the target rectangle so clicks and typing reach
the highlighted widget through the hole; everything else under the dim layer
is blocked while a step is presented.

Geometry comes from ``walkthrough.design.overlay_geometry.OverlayModel``;
this module only turns it into pixels.
"""

from __future__ import annotations

import html
import logging
from typing import Optional

from PyQt6 import sip
from PyQt6.QtCore import QEvent, QObject, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import QColor, QPainter, QPainterPath, QPen, QRegion
from PyQt6.QtWidgets import QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from ..design.overlay_geometry import OverlayModel
from ..services.settings_service import WalkthroughSettings

__all__ = ["TutorialOverlay", "CalloutWidget"]

_log = logging.getLogger(__name__)

_FRAME_COLOR = QColor(59, 130, 246)
_FRAME_RADIUS = 8.0


class CalloutWidget(QWidget):
    """Card positioned under the highlighted target."""

    previous_clicked = pyqtSignal()
    next_clicked = pyqtSignal()

    def __init__(self, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.setObjectName("tutorialCallout")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setAutoFillBackground(True)

        self.counter_label = QLabel(self)
        self.counter_label.setObjectName("calloutCounter")
        self.glyph_label = QLabel(self)
        self.glyph_label.setObjectName("calloutGlyph")
        self.title_label = QLabel(self)
        self.title_label.setObjectName("calloutTitle")
        self.title_label.setWordWrap(True)
        font = self.title_label.font()
        font.setBold(True)
        self.title_label.setFont(font)
        self.description_label = QLabel(self)
        self.description_label.setObjectName("calloutDescription")
        self.description_label.setWordWrap(True)
        self.hint_label = QLabel(self)
        self.hint_label.setObjectName("calloutHint")
        self.hint_label.setWordWrap(True)
        self.hint_label.setTextFormat(Qt.TextFormat.RichText)

        self.previous_button = QPushButton("‹ Previous", self)
        self.previous_button.setObjectName("calloutPrevious")
        self.next_button = QPushButton("Next ›", self)
        self.next_button.setObjectName("calloutNext")
        self.previous_button.clicked.connect(self.previous_clicked.emit)  # type: ignore[attr-defined]
        self.next_button.clicked.connect(self.next_clicked.emit)  # type: ignore[attr-defined]

        header = QHBoxLayout()
        header.addWidget(self.counter_label)
        header.addStretch(1)
        header.addWidget(self.glyph_label)
        buttons = QHBoxLayout()
        buttons.addWidget(self.previous_button)
        buttons.addStretch(1)
        buttons.addWidget(self.next_button)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)
        layout.addLayout(header)
        layout.addWidget(self.title_label)
        layout.addWidget(self.description_label)
        layout.addWidget(self.hint_label)
        layout.addLayout(buttons)

    def apply(self, model: OverlayModel) -> None:
        self.counter_label.setText(model.counter_text)
        self.glyph_label.setText(model.action_glyph or "")
        self.glyph_label.setVisible(model.action_glyph is not None)
        self.title_label.setText(model.title)
        self.description_label.setText(model.description)
        if model.hint:
            self.hint_label.setText(f"<b>Hint:</b> {html.escape(model.hint)}")
            self.hint_label.show()
        else:
            self.hint_label.clear()
            self.hint_label.hide()
        self.previous_button.setEnabled(model.previous_enabled)
        self.setFixedWidth(model.callout_width)
        self.adjustSize()
        self.move(model.callout_left, model.callout_top)


class TutorialOverlay(QWidget):
    """Dim layer with a highlight hole and a callout; hidden until presented."""

    previous_requested = pyqtSignal()
    next_requested = pyqtSignal()

    def __init__(self, root: QWidget, settings: Optional[WalkthroughSettings] = None):
        super().__init__(root)
        self.setObjectName("tutorialOverlay")
        self.setAttribute(Qt.WidgetAttribute.WA_NoSystemBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground, True)
        self._root = root
        self._settings = settings or WalkthroughSettings.instance
        self._model: Optional[OverlayModel] = None
        self.callout = CalloutWidget(self)
        self.callout.previous_clicked.connect(self.previous_requested.emit)  # type: ignore[attr-defined]
        self.callout.next_clicked.connect(self.next_requested.emit)  # type: ignore[attr-defined]
        self.setGeometry(root.rect())
        root.installEventFilter(self)
        self.hide()

    # Public API --------------------------------------------------------
    def model(self) -> Optional[OverlayModel]:
        return self._model

    def present(self, model: Optional[OverlayModel]) -> None:
        """Show the overlay for ``model``; ``None`` hides it."""
        self._model = model
        if model is None:
            self.clearMask()
            self.hide()
            return
        _log.debug("Presenting overlay: %s at %s", model.counter_text, model.target)
        self.setGeometry(self._root.rect())
        self.callout.apply(model)
        self._apply_mask()
        self.show()
        self.raise_()
        self.update()

    def detach(self) -> None:
        """Stop following the root and hide; used on panel teardown."""
        if not sip.isdeleted(self._root):
            self._root.removeEventFilter(self)
        self.present(None)

    def hole_rect(self):
        return self._model.target.to_qrect() if self._model is not None else None

    # Internal ----------------------------------------------------------
    def _apply_mask(self) -> None:
        region = QRegion(self.rect())
        hole = self.hole_rect()
        if hole is not None:
            region = region.subtracted(QRegion(hole))
        self.setMask(region)

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:  # noqa: N802
        if obj is self._root and event.type() == QEvent.Type.Resize:
            self.setGeometry(self._root.rect())
            if self._model is not None:
                self._apply_mask()
        return super().eventFilter(obj, event)

    def paintEvent(self, event):  # type: ignore[override]
        if self._model is None:
            return
        frame = QRectF(self._model.frame.to_qrect())
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.Antialiasing, True)
        dim = QPainterPath()
        dim.addRect(QRectF(self.rect()))
        hole = QPainterPath()
        hole.addRoundedRect(frame, _FRAME_RADIUS, _FRAME_RADIUS)
        p.fillPath(dim.subtracted(hole), QColor(0, 0, 0, self._settings.dim_alpha))
        pen = QPen(_FRAME_COLOR)
        pen.setWidth(2)
        p.setPen(pen)
        p.setBrush(Qt.BrushStyle.NoBrush)
        p.drawRoundedRect(frame.adjusted(1, 1, -1, -1), _FRAME_RADIUS, _FRAME_RADIUS)
        p.end()
