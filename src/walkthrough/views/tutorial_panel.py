"""Interactive tutorial panel: the widget a host embeds to run a tutorial.

The panel owns one ``TutorialStateMachine`` and renders its state:

Running view
    Header (title, description, difficulty badge, estimated minutes),
    progress ("k / N" plus bar), the current step card (title, "Step k",
    description, rendered content, full hint list when hints are shown),
    controls (Previous, Play/Pause, Show/Hide Hints, Next) and the step
    overview list. Clicking an overview entry jumps to that step.

Completed view
    "Tutorial Completed!", time taken, interaction count, Restart Tutorial
    and Continue Exploring (forwards to ``on_exit``).

When ``overlay_root`` is supplied the panel also drives a
``TutorialOverlay`` on it. The overlay is re-resolved after every state
change and, debounced, after the root is resized. Steps without a target,
missing targets and the Completed view hide it.

``shutdown`` (also run from ``closeEvent``) disposes the machine, which
cancels any pending auto-advance timer, stops watching the root and removes
the overlay. Embedded panels never receive ``closeEvent``, so the same
release also runs when the panel is destroyed.
"""

from __future__ import annotations

import html
import logging
from typing import Any, Callable, Dict, Optional

from PyQt6 import sip
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from ..components.progress_indicator import StepProgressBar
from ..design.overlay_geometry import compute_overlay
from ..engine.run_state import TutorialRunState
from ..engine.scheduler import QtTimerScheduler, TimerScheduler
from ..engine.state_machine import TutorialStateMachine
from ..models import Tutorial
from ..services.event_bus import EventBus, TourEvent, get_event_bus
from ..services.layout_reflow_coordinator import LayoutReflowCoordinator
from ..services.settings_service import WalkthroughSettings
from ..services.target_locator import TargetLocator
from ..viewmodels.tutorial_viewmodel import (
    build_step_overview,
    completion_summary,
    difficulty_variant,
    hints_button_label,
    play_button_label,
    progress_label,
    visible_hints,
)
from .tutorial_overlay import TutorialOverlay

__all__ = ["InteractiveTutorialPanel", "default_content_renderer", "ContentRenderer"]

_log = logging.getLogger(__name__)

ContentRenderer = Callable[[Any], Optional[QWidget]]


def default_content_renderer(content: Any) -> Optional[QWidget]:
    """Widgets pass through, callables are invoked, anything else becomes a label.

    Strings that look like markup render as rich text; anything else is shown
    verbatim.
    """
    if content is None:
        return None
    if isinstance(content, QWidget):
        return content
    if callable(content):
        produced = content()
        if produced is None or isinstance(produced, QWidget):
            return produced
        content = produced
    label = QLabel(str(content))
    label.setWordWrap(True)
    label.setTextFormat(Qt.TextFormat.AutoText)
    return label


def _release_on_destroy(
    machine: TutorialStateMachine, overlay: Optional[TutorialOverlay]
) -> Callable[..., None]:
    # must not reference the panel: it runs while the panel is being destroyed
    def _release(*_args: Any) -> None:
        machine.dispose()
        if overlay is not None and not sip.isdeleted(overlay):
            overlay.detach()
            overlay.deleteLater()

    return _release


def _badge(text: str, variant: str, parent: QWidget) -> QLabel:
    label = QLabel(text, parent)
    label.setObjectName("badge")
    label.setProperty("variant", variant)
    return label


class InteractiveTutorialPanel(QWidget):
    state_changed = pyqtSignal(object)

    def __init__(
        self,
        tutorial: Tutorial,
        *,
        overlay_root: Optional[QWidget] = None,
        on_complete: Optional[Callable[[str], None]] = None,
        on_exit: Optional[Callable[[], None]] = None,
        auto_play: bool = False,
        content_renderer: Optional[ContentRenderer] = None,
        scheduler: Optional[TimerScheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        settings: Optional[WalkthroughSettings] = None,
        event_bus: Optional[EventBus] = None,
        parent: Optional[QWidget] = None,
    ):
        super().__init__(parent)
        self.setObjectName("interactiveTutorialPanel")
        self._settings = settings or WalkthroughSettings.instance
        self._bus = event_bus if event_bus is not None else get_event_bus()
        self._render_content = content_renderer or default_content_renderer
        self._content_cache: Dict[int, Optional[QWidget]] = {}
        self._shut_down = False
        self._overlay_root = overlay_root
        self._overlay: Optional[TutorialOverlay] = None
        self._locator: Optional[TargetLocator] = None
        self._reflow: Optional[LayoutReflowCoordinator] = None

        self._build_ui(tutorial)
        self._machine = TutorialStateMachine(
            tutorial,
            on_complete=on_complete,
            on_exit=on_exit,
            auto_play=auto_play,
            scheduler=scheduler or QtTimerScheduler(self),
            clock=clock,
            event_bus=self._bus,
        )
        self._remove_listener = self._machine.add_listener(self._on_state)
        if overlay_root is not None:
            self._install_overlay(overlay_root)
        self.destroyed.connect(_release_on_destroy(self._machine, self._overlay))  # type: ignore[attr-defined]
        self._render(self._machine.state)
        self.refresh_overlay()

    # Accessors ---------------------------------------------------------
    @property
    def machine(self) -> TutorialStateMachine:
        return self._machine

    @property
    def tutorial(self) -> Tutorial:
        return self._machine.tutorial

    @property
    def overlay(self) -> Optional[TutorialOverlay]:
        return self._overlay

    @property
    def locator(self) -> Optional[TargetLocator]:
        return self._locator

    @property
    def reflow(self) -> Optional[LayoutReflowCoordinator]:
        return self._reflow

    def is_showing_completed(self) -> bool:
        return self.pages.currentWidget() is self.completed_page

    # UI construction ---------------------------------------------------
    def _build_ui(self, tutorial: Tutorial) -> None:
        self.pages = QStackedWidget(self)
        self.running_page = QWidget(self.pages)
        self.completed_page = QWidget(self.pages)
        self.pages.addWidget(self.running_page)
        self.pages.addWidget(self.completed_page)
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.addWidget(self.pages)
        self._build_running_page(tutorial)
        self._build_completed_page()

    def _build_running_page(self, tutorial: Tutorial) -> None:
        page = self.running_page
        layout = QVBoxLayout(page)

        header = QHBoxLayout()
        titles = QVBoxLayout()
        self.title_label = QLabel(tutorial.title, page)
        self.title_label.setObjectName("tutorialTitle")
        font = self.title_label.font()
        font.setBold(True)
        if font.pointSize() > 0:
            font.setPointSize(font.pointSize() + 2)
        self.title_label.setFont(font)
        self.description_label = QLabel(tutorial.description, page)
        self.description_label.setObjectName("tutorialDescription")
        self.description_label.setWordWrap(True)
        titles.addWidget(self.title_label)
        titles.addWidget(self.description_label)
        header.addLayout(titles, 1)
        self.difficulty_badge = _badge(
            tutorial.difficulty.value, difficulty_variant(tutorial.difficulty), page
        )
        self.difficulty_badge.setObjectName("difficultyBadge")
        self.duration_badge = _badge(f"{tutorial.estimated_minutes}min", "outline", page)
        self.duration_badge.setObjectName("durationBadge")
        header.addWidget(self.difficulty_badge)
        header.addWidget(self.duration_badge)
        layout.addLayout(header)

        progress_row = QHBoxLayout()
        progress_row.addWidget(QLabel("Progress", page))
        progress_row.addStretch(1)
        self.progress_text = QLabel(page)
        self.progress_text.setObjectName("progressLabel")
        progress_row.addWidget(self.progress_text)
        layout.addLayout(progress_row)
        self.progress_bar = StepProgressBar(page)
        layout.addWidget(self.progress_bar)

        card = QFrame(page)
        card.setObjectName("stepCard")
        card.setFrameShape(QFrame.Shape.StyledPanel)
        card_layout = QVBoxLayout(card)
        card_header = QHBoxLayout()
        self.step_title_label = QLabel(card)
        self.step_title_label.setObjectName("stepTitle")
        self.step_number_label = _badge("", "outline", card)
        self.step_number_label.setObjectName("stepNumber")
        card_header.addWidget(self.step_title_label, 1)
        card_header.addWidget(self.step_number_label)
        card_layout.addLayout(card_header)
        self.step_description_label = QLabel(card)
        self.step_description_label.setObjectName("stepDescription")
        self.step_description_label.setWordWrap(True)
        card_layout.addWidget(self.step_description_label)
        self.content_stack = QStackedWidget(card)
        self.content_stack.setObjectName("stepContent")
        card_layout.addWidget(self.content_stack)
        self.hints_label = QLabel(card)
        self.hints_label.setObjectName("stepHints")
        self.hints_label.setWordWrap(True)
        self.hints_label.setTextFormat(Qt.TextFormat.RichText)
        card_layout.addWidget(self.hints_label)
        layout.addWidget(card)

        controls = QHBoxLayout()
        self.previous_button = QPushButton("‹ Previous", page)
        self.previous_button.setObjectName("previousButton")
        self.play_button = QPushButton(page)
        self.play_button.setObjectName("playButton")
        self.hints_button = QPushButton(page)
        self.hints_button.setObjectName("hintsButton")
        self.next_button = QPushButton("Next ›", page)
        self.next_button.setObjectName("nextButton")
        controls.addWidget(self.previous_button)
        controls.addWidget(self.play_button)
        controls.addStretch(1)
        controls.addWidget(self.hints_button)
        controls.addWidget(self.next_button)
        layout.addLayout(controls)
        self.previous_button.clicked.connect(lambda: self._machine.retreat())  # type: ignore[attr-defined]
        self.play_button.clicked.connect(lambda: self._machine.toggle_play())  # type: ignore[attr-defined]
        self.hints_button.clicked.connect(lambda: self._machine.toggle_hints())  # type: ignore[attr-defined]
        self.next_button.clicked.connect(lambda: self._machine.advance())  # type: ignore[attr-defined]

        layout.addWidget(QLabel("Tutorial Steps", page))
        self.overview_list = QListWidget(page)
        self.overview_list.setObjectName("stepOverview")
        for step in tutorial.steps:
            self.overview_list.addItem(QListWidgetItem(step.title))
        self.overview_list.itemClicked.connect(self._on_overview_clicked)  # type: ignore[attr-defined]
        layout.addWidget(self.overview_list, 1)

    def _build_completed_page(self) -> None:
        page = self.completed_page
        layout = QVBoxLayout(page)
        self.completed_title = QLabel("Tutorial Completed!", page)
        self.completed_title.setObjectName("completedTitle")
        self.completed_title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.completed_message = QLabel(page)
        self.completed_message.setObjectName("completedMessage")
        self.completed_message.setWordWrap(True)
        self.completed_message.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.completed_title)
        layout.addWidget(self.completed_message)

        stats = QHBoxLayout()
        self.time_taken_label = QLabel(page)
        self.time_taken_label.setObjectName("timeTaken")
        self.interactions_label = QLabel(page)
        self.interactions_label.setObjectName("interactionCount")
        for value, caption in (
            (self.time_taken_label, "Time Taken"),
            (self.interactions_label, "Interactions"),
        ):
            column = QVBoxLayout()
            value.setAlignment(Qt.AlignmentFlag.AlignCenter)
            column.addWidget(value)
            caption_label = QLabel(caption, page)
            caption_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            column.addWidget(caption_label)
            stats.addLayout(column)
        layout.addLayout(stats)

        buttons = QHBoxLayout()
        self.restart_button = QPushButton("Restart Tutorial", page)
        self.restart_button.setObjectName("restartButton")
        self.continue_button = QPushButton("Continue Exploring", page)
        self.continue_button.setObjectName("continueButton")
        buttons.addWidget(self.restart_button)
        buttons.addWidget(self.continue_button)
        layout.addLayout(buttons)
        layout.addStretch(1)
        self.restart_button.clicked.connect(lambda: self._machine.restart())  # type: ignore[attr-defined]
        self.continue_button.clicked.connect(lambda: self._machine.request_exit())  # type: ignore[attr-defined]

    def _install_overlay(self, root: QWidget) -> None:
        self._locator = TargetLocator(root, scroll_into_view=self._settings.scroll_into_view)
        self._overlay = TutorialOverlay(root, self._settings)
        self._locator.ignore(self._overlay)
        self._overlay.previous_requested.connect(lambda: self._machine.retreat())  # type: ignore[attr-defined]
        self._overlay.next_requested.connect(lambda: self._machine.advance())  # type: ignore[attr-defined]
        self._reflow = LayoutReflowCoordinator(self._settings.resize_debounce_ms, self)
        self._reflow.watch(root, lambda _size: self.refresh_overlay())

    # Rendering ---------------------------------------------------------
    def _on_state(self, state: TutorialRunState) -> None:
        self._render(state)
        self.refresh_overlay()
        self.state_changed.emit(state)

    def _render(self, state: TutorialRunState) -> None:
        tutorial = self._machine.tutorial
        if state.is_completed:
            summary = completion_summary(tutorial, state, self._machine.now_ms())
            self.completed_message.setText(summary.message)
            self.time_taken_label.setText(summary.time_text)
            self.interactions_label.setText(str(summary.interactions))
            self.pages.setCurrentWidget(self.completed_page)
            return

        self.pages.setCurrentWidget(self.running_page)
        step = tutorial.steps[state.current_index]
        self.progress_text.setText(progress_label(state, tutorial.step_count))
        self.progress_bar.set_percent(self._machine.progress_percent())
        self.step_title_label.setText(step.title)
        self.step_number_label.setText(f"Step {state.current_index + 1}")
        self.step_description_label.setText(step.description)
        self._show_content(state.current_index)

        hints = visible_hints(step, state)
        if hints:
            items = "".join(f"<li>{html.escape(h)}</li>" for h in hints)
            self.hints_label.setText(f"<b>Hints:</b><ul>{items}</ul>")
            self.hints_label.show()
        else:
            self.hints_label.clear()
            self.hints_label.hide()

        self.previous_button.setEnabled(state.current_index != 0)
        self.play_button.setText(play_button_label(state))
        self.hints_button.setText(hints_button_label(state))

        for item in build_step_overview(tutorial, state):
            row = self.overview_list.item(item.index)
            row.setText(item.as_text())
            row.setData(Qt.ItemDataRole.UserRole, item.status.value)
        self.overview_list.setCurrentRow(state.current_index)

    def _show_content(self, index: int) -> None:
        if index not in self._content_cache:
            widget = self._render_content(self._machine.tutorial.steps[index].content)
            if widget is not None:
                self.content_stack.addWidget(widget)
            self._content_cache[index] = widget
        widget = self._content_cache[index]
        if widget is None:
            self.content_stack.hide()
        else:
            self.content_stack.setCurrentWidget(widget)
            self.content_stack.show()

    def refresh_overlay(self) -> None:
        """Re-resolve the current step's target and present or hide the overlay."""
        if self._overlay is None or self._locator is None:
            return
        state = self._machine.state
        if self._shut_down or state.is_completed:
            self._overlay.present(None)
            return
        step = self._machine.current_step
        if not step.target:
            self._overlay.present(None)
            return
        rect = self._locator.locate(step.target)
        if rect is None:
            _log.debug("Step %s target %r missing; hiding overlay", step.id, step.target)
            if self._bus is not None:
                self._bus.publish(
                    TourEvent.TARGET_MISSING,
                    {"tutorial": self._machine.tutorial.id, "step": step.id, "target": step.target},
                )
            self._overlay.present(None)
            return
        model = compute_overlay(
            step,
            rect,
            state.current_index + 1,
            self._machine.step_count,
            viewport_width=self._locator.root.width(),
            settings=self._settings,
        )
        self._overlay.present(model)

    def _on_overview_clicked(self, item: QListWidgetItem) -> None:
        self._machine.jump_to_step(self.overview_list.row(item))

    # Teardown ----------------------------------------------------------
    def shutdown(self) -> None:
        """Dispose the run and remove the overlay; safe to call more than once."""
        if self._shut_down:
            return
        self._shut_down = True
        self._remove_listener()
        self._machine.dispose()
        if self._reflow is not None and self._overlay_root is not None:
            self._reflow.unwatch(self._overlay_root)
        if self._overlay is not None:
            self._overlay.detach()
            self._overlay.setParent(None)
            self._overlay.deleteLater()
            self._overlay = None
        _log.debug("Tutorial panel for %s shut down", self._machine.tutorial.id)

    def closeEvent(self, event: QCloseEvent):  # type: ignore[override]
        self.shutdown()
        super().closeEvent(event)
