"""Tests for the tutorial catalog registry and built-in tutorials."""

from __future__ import annotations

import pytest

from walkthrough import catalog
from walkthrough.models import Difficulty, TutorialCategory


@pytest.fixture(autouse=True)
def _empty_catalog():
    catalog.clear_tutorials()
    yield
    catalog.clear_tutorials()


def test_register_and_get(tutorial_factory):
    tut = tutorial_factory("a", tutorial_id="one")
    catalog.register_tutorial(tut)
    assert catalog.get_tutorial("one") is tut
    assert catalog.find_tutorial("one") is tut
    assert catalog.list_tutorials() == [tut]


def test_duplicate_registration_raises(tutorial_factory):
    catalog.register_tutorial(tutorial_factory("a", tutorial_id="one"))
    with pytest.raises(ValueError):
        catalog.register_tutorial(tutorial_factory("b", tutorial_id="one"))


def test_missing_tutorial():
    with pytest.raises(catalog.TutorialNotFoundError):
        catalog.get_tutorial("nope")
    assert catalog.find_tutorial("nope") is None
    assert issubclass(catalog.TutorialNotFoundError, KeyError)


def test_builtins_are_valid_and_registered_once():
    added = catalog.register_builtin_tutorials()
    ids = [t.id for t in added]
    assert ids == [
        "getting-started",
        "button-component-deep-dive",
        "form-components-tutorial",
        "accessibility-best-practices",
    ]
    assert catalog.register_builtin_tutorials() == []
    assert len(catalog.list_tutorials()) == 4


def test_getting_started_shape():
    tut = next(t for t in catalog.builtin_tutorials() if t.id == "getting-started")
    welcome, sidebar, search = tut.steps[:3]
    assert welcome.auto_advance_after_ms == 3000
    assert sidebar.target == "#sidebar"
    assert search.target == "#search-input"
    assert search.action is not None and search.action.value == "type"


def test_filters():
    catalog.register_builtin_tutorials()
    beginners = catalog.tutorials_by_difficulty("beginner")
    assert "getting-started" in [t.id for t in beginners]
    assert all(t.difficulty is Difficulty.BEGINNER for t in beginners)
    accessibility = catalog.tutorials_by_category(TutorialCategory.ACCESSIBILITY)
    assert [t.id for t in accessibility] == ["accessibility-best-practices"]


def test_missing_prerequisites(tutorial_factory):
    tut = tutorial_factory("a", prerequisites={"zeta", "alpha"})
    assert catalog.missing_prerequisites(tut, []) == ["alpha", "zeta"]
    assert catalog.missing_prerequisites(tut, ["zeta"]) == ["alpha"]
    assert catalog.missing_prerequisites(tut, ["alpha", "zeta"]) == []
