from __future__ import annotations

import logging

import pytest
from PyQt6.QtWidgets import QLabel, QLineEdit, QPushButton, QScrollArea, QVBoxLayout, QWidget

from walkthrough.services.target_locator import TargetLocator, TargetRect, parse_selector


@pytest.fixture
def root(qtbot):
    w = QWidget()
    w.resize(600, 400)
    search = QLineEdit(w)
    search.setObjectName("search-input")
    search.setGeometry(20, 30, 200, 24)
    save = QPushButton("Save", w)
    save.setObjectName("save")
    save.setProperty("role", "primary")
    save.setGeometry(300, 100, 80, 30)
    hidden = QPushButton("Hidden", w)
    hidden.setObjectName("hidden")
    hidden.hide()
    qtbot.addWidget(w)
    w.show()
    qtbot.waitExposed(w)
    return w


def test_parse_selector_forms():
    assert parse_selector("#search-input").object_name == "search-input"
    s = parse_selector("QPushButton#save")
    assert (s.type_name, s.object_name) == ("QPushButton", "save")
    p = parse_selector("QPushButton[role=primary]")
    assert (p.type_name, p.property_name, p.property_value) == ("QPushButton", "role", "primary")
    assert parse_selector("QLineEdit").type_name == "QLineEdit"


@pytest.mark.parametrize("bad", ["", "   ", "#", "div > span", "[role]"])
def test_parse_selector_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_selector(bad)


def test_locate_by_object_name(root):
    loc = TargetLocator(root)
    assert loc.locate("#search-input") == TargetRect(top=30, left=20, width=200, height=24)


def test_locate_by_type_and_property(root):
    loc = TargetLocator(root)
    rect = loc.locate("QPushButton[role=primary]")
    assert rect == TargetRect(top=100, left=300, width=80, height=30)
    assert loc.locate("QPushButton#save") == rect


def test_hidden_and_missing_targets_are_none(root):
    loc = TargetLocator(root)
    assert loc.locate("#hidden") is None
    assert loc.locate("#does-not-exist") is None
    assert loc.locate(None) is None
    assert loc.locate("") is None


def test_malformed_selector_is_treated_as_missing(root, caplog):
    loc = TargetLocator(root)
    with caplog.at_level(logging.WARNING, logger="walkthrough.services.target_locator"):
        assert loc.locate("div > span") is None
    assert "malformed" in caplog.text


def test_ignored_subtree_is_skipped(root):
    layer = QWidget(root)
    decoy = QLabel("decoy", layer)
    decoy.setObjectName("decoy")
    layer.show()
    loc = TargetLocator(root)
    assert loc.find_widget("#decoy") is decoy
    loc.ignore(layer)
    assert loc.find_widget("#decoy") is None


def test_nested_target_maps_to_root_coordinates(qtbot):
    root = QWidget()
    root.resize(400, 300)
    inner = QWidget(root)
    inner.setGeometry(50, 60, 200, 200)
    target = QPushButton("x", inner)
    target.setObjectName("inner-target")
    target.setGeometry(10, 20, 40, 20)
    qtbot.addWidget(root)
    root.show()
    rect = TargetLocator(root).locate("#inner-target")
    assert rect == TargetRect(top=80, left=60, width=40, height=20)


def test_scrolls_target_into_view(qtbot):
    root = QWidget()
    root.resize(300, 200)
    layout = QVBoxLayout(root)
    area = QScrollArea(root)
    layout.addWidget(area)
    content = QWidget()
    content.setFixedSize(260, 2000)
    far = QPushButton("far", content)
    far.setObjectName("far")
    far.setGeometry(10, 1800, 80, 30)
    area.setWidget(content)
    qtbot.addWidget(root)
    root.show()
    qtbot.waitExposed(root)
    assert area.verticalScrollBar().value() == 0
    rect = TargetLocator(root).locate("#far")
    assert area.verticalScrollBar().value() > 0
    assert rect is not None
    assert 0 <= rect.top < root.height()


def test_target_rect_helpers():
    r = TargetRect(top=10, left=20, width=30, height=40)
    assert (r.right, r.bottom) == (50, 50)
    assert r.inflated(4) == TargetRect(top=6, left=16, width=38, height=48)
    assert r.contains(20, 10)
    assert not r.contains(50, 10)
    assert TargetRect.from_qrect(r.to_qrect()) == r
