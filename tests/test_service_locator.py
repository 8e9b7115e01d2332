from __future__ import annotations

import pytest

from walkthrough.services.service_locator import (
    ServiceAlreadyRegisteredError,
    ServiceLocator,
    ServiceNotFoundError,
)


def test_register_and_get():
    loc = ServiceLocator()
    loc.register("a", 1)
    assert loc.get("a") == 1
    assert loc.try_get("a") == 1


def test_duplicate_register_requires_override():
    loc = ServiceLocator()
    loc.register("a", 1)
    with pytest.raises(ServiceAlreadyRegisteredError):
        loc.register("a", 2)
    loc.register("a", 2, allow_override=True)
    assert loc.get("a") == 2


def test_missing_key():
    loc = ServiceLocator()
    with pytest.raises(ServiceNotFoundError):
        loc.get("missing")
    assert loc.try_get("missing") is None
    assert loc.try_get("missing", "d") == "d"


def test_falsy_values_are_returned():
    loc = ServiceLocator()
    loc.register("zero", 0)
    assert loc.try_get("zero", "d") == 0


def test_unregister_and_clear():
    loc = ServiceLocator()
    loc.register("a", 1)
    loc.register("b", 2)
    loc.unregister("a")
    loc.unregister("a")
    assert loc.try_get("a") is None
    assert loc.get("b") == 2
    loc.clear()
    assert loc.try_get("b") is None
