"""Demo host for `python -m walkthrough` or external callers.

Builds a small window that contains the widgets the built-in tutorials point
at (a ``#sidebar`` list and a ``#search-input`` field), registers the
built-in catalog and runs one tutorial in an ``InteractiveTutorialPanel``
with its overlay drawn over the window.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from PyQt6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMainWindow,
    QVBoxLayout,
    QWidget,
)

from .catalog import find_tutorial, list_tutorials, register_builtin_tutorials
from .models import Tutorial
from .services.event_bus import EventBus
from .services.logging_service import get_logging_service
from .services.service_locator import services
from .services.settings_service import WalkthroughSettings
from .views.tutorial_panel import InteractiveTutorialPanel

__all__ = ["DemoWindow", "build_parser", "main"]

_log = logging.getLogger(__name__)

_SIDEBAR_SECTIONS = ("Buttons", "Forms", "Navigation", "Overlays", "Data Display")


class DemoWindow(QMainWindow):
    """Host window: sample widgets on the left, tutorial panel on the right."""

    def __init__(
        self,
        tutorial: Tutorial,
        *,
        auto_play: bool = False,
        event_bus: Optional[EventBus] = None,
        settings: Optional[WalkthroughSettings] = None,
    ):
        super().__init__()
        self.setWindowTitle(f"Walkthrough - {tutorial.title}")
        self.resize(1100, 720)
        self.exit_requested = False

        central = QWidget(self)
        row = QHBoxLayout(central)

        self.sidebar = QListWidget(central)
        self.sidebar.setObjectName("sidebar")
        self.sidebar.addItems(list(_SIDEBAR_SECTIONS))
        self.sidebar.setFixedWidth(200)
        row.addWidget(self.sidebar)

        main_column = QVBoxLayout()
        self.search_input = QLineEdit(central)
        self.search_input.setObjectName("search-input")
        self.search_input.setPlaceholderText("Search components...")
        main_column.addWidget(self.search_input)
        preview = QLabel("Select a component from the sidebar to preview it.", central)
        preview.setObjectName("componentPreview")
        preview.setWordWrap(True)
        main_column.addWidget(preview, 1)
        row.addLayout(main_column, 1)

        self.panel = InteractiveTutorialPanel(
            tutorial,
            overlay_root=self,
            on_complete=self._on_complete,
            on_exit=self._on_exit,
            auto_play=auto_play,
            settings=settings,
            event_bus=event_bus,
            parent=central,
        )
        self.panel.setFixedWidth(380)
        row.addWidget(self.panel)
        self.setCentralWidget(central)

    def _on_complete(self, tutorial_id: str) -> None:
        _log.info("Demo host: tutorial %s completed", tutorial_id)

    def _on_exit(self) -> None:
        self.exit_requested = True
        self.close()

    def showEvent(self, event):  # type: ignore[override]
        super().showEvent(event)
        self.panel.refresh_overlay()

    def closeEvent(self, event):  # type: ignore[override]
        self.panel.shutdown()
        super().closeEvent(event)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walkthrough", description="Run a built-in interactive tutorial."
    )
    parser.add_argument("--tutorial", default="getting-started", help="Tutorial id to run")
    parser.add_argument("--autoplay", action="store_true", help="Start with auto-advance on")
    parser.add_argument("--list", action="store_true", help="List tutorial ids and exit")
    parser.add_argument(
        "--log-level", default="INFO", help="Root log level (DEBUG, INFO, WARNING, ...)"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:  # pragma: no cover - runtime
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    register_builtin_tutorials()
    if args.list:
        lines: List[str] = [f"{t.id}\t{t.title}" for t in list_tutorials()]
        print("\n".join(lines))  # noqa: T201
        return 0
    tutorial = find_tutorial(args.tutorial)
    if tutorial is None:
        print(f"Unknown tutorial: {args.tutorial}", file=sys.stderr)  # noqa: T201
        return 2

    bus = services.try_get("event_bus")
    if bus is None:
        bus = EventBus()
        services.register("event_bus", bus)
    get_logging_service().attach()

    app = QApplication.instance() or QApplication(sys.argv)
    win = DemoWindow(tutorial, auto_play=args.autoplay, event_bus=bus)
    win.show()
    return app.exec()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
