from __future__ import annotations

from walkthrough.catalog import builtin_tutorials
from walkthrough.launcher import DemoWindow, build_parser


def _getting_started():
    return next(t for t in builtin_tutorials() if t.id == "getting-started")


def test_parser_defaults_and_flags():
    args = build_parser().parse_args([])
    assert args.tutorial == "getting-started"
    assert not args.autoplay
    args = build_parser().parse_args(["--tutorial", "form-components-tutorial", "--autoplay"])
    assert args.tutorial == "form-components-tutorial"
    assert args.autoplay


def test_demo_window_highlights_builtin_targets(qtbot):
    win = DemoWindow(_getting_started())
    qtbot.addWidget(win)
    win.show()
    qtbot.waitExposed(win)
    panel = win.panel
    assert panel.locator.root is win
    panel.machine.advance()
    model = panel.overlay.model()
    assert model is not None
    assert model.title == "Sidebar Navigation"
    panel.machine.advance()
    assert panel.overlay.model().action_glyph is not None


def test_continue_exploring_closes_window(qtbot):
    win = DemoWindow(_getting_started())
    qtbot.addWidget(win)
    win.show()
    for _ in range(win.panel.tutorial.step_count):
        win.panel.machine.advance()
    assert win.panel.is_showing_completed()
    win.panel.continue_button.click()
    assert win.exit_requested
    assert win.panel.machine.is_disposed
