"""Tests for nested drivers declared with ``Driver.namespace``."""

from __future__ import annotations

import pytest

from switchyard.core.exceptions import (
    AlreadyImplementedError,
    HandlerResolutionError,
    MissingBlockError,
)
from switchyard.services import runtime
from switchyard.services.driver import Driver

# pylint: disable=missing-function-docstring,missing-class-docstring,too-few-public-methods


class Abc:
    def hi(self) -> type:
        return type(self)

    class Bob:
        def __init__(self) -> None:
            self.calls = 0

        def hi(self) -> type:
            self.calls += 1
            return type(self)

        class Deep:
            def where(self) -> str:
                return "abc-deep"


class Xyz:
    def hi(self) -> type:
        return type(self)

    class Bob:
        def hi(self) -> type:
            return type(self)

        class Deep:
            def where(self) -> str:
                return "xyz-deep"


class Lonely:
    pass


def _declare_bob(ns: Driver) -> None:
    ns.define_action("hi")


@pytest.fixture(name="driver")
def _driver() -> Driver:
    driver = Driver("MissDaisy", path=__name__)
    driver.register_handler("abc")
    driver.register_handler("xyz")
    driver.set_default_handler("abc")
    driver.namespace("bob", _declare_bob)
    return driver


def test_namespace_registers_suffixed_handlers(driver: Driver) -> None:
    """Each parent handler maps to its nested class of the namespace name."""
    assert driver.bob.handlers == {"abc": Abc.Bob, "xyz": Xyz.Bob}
    assert driver.bob.parent_driver is driver
    assert driver.bob.name == "MissDaisy.Bob"


def test_namespace_calls_registered_action(driver: Driver) -> None:
    assert driver.bob.hi() is Abc.Bob


def test_namespace_unknown_action_raises(driver: Driver) -> None:
    with pytest.raises(AttributeError):
        driver.bob.bye()


def test_namespace_tracks_parent_handler(driver: Driver) -> None:
    """Sub-driver dispatch follows the parent's live current handler."""
    for handler, expected in (("abc", Abc.Bob), ("xyz", Xyz.Bob)):
        assert driver.with_handler(handler, lambda d: d.bob.hi()) is expected
    assert driver.bob.hi() is Abc.Bob
    driver.set_current_handler("xyz")
    assert driver.bob.current_handler == "xyz"
    assert driver.bob.hi() is Xyz.Bob


def test_namespace_is_reference_stable(driver: Driver) -> None:
    """Repeated access returns the same sub-driver and handler instances."""
    first = driver.bob
    first.hi()
    first.hi()
    assert driver.bob is first
    assert driver.bob.current_handler_instance().calls == 2


def test_namespace_requires_body(driver: Driver) -> None:
    with pytest.raises(MissingBlockError) as excinfo:
        driver.namespace("other")
    assert excinfo.value.operation == "namespace"


def test_namespace_name_collision(driver: Driver) -> None:
    with pytest.raises(AlreadyImplementedError):
        driver.namespace("bob", _declare_bob)
    with pytest.raises(AlreadyImplementedError):
        driver.define_action("bob")
    with pytest.raises(AlreadyImplementedError):
        driver.namespace("handlers", _declare_bob)


def test_namespace_handlers_fixed_at_first_access(driver: Driver) -> None:
    """Handlers registered on the parent later are not propagated."""
    _ = driver.bob
    driver.register_handler("late", implementation=Xyz)
    assert "late" not in driver.bob.handlers


def test_nested_namespaces(driver: Driver) -> None:
    """Namespaces nest and still follow the top-level handler."""
    driver.bob.namespace("deep", lambda ns: ns.define_action("where"))
    with driver.use_handler("xyz"):
        assert driver.bob.deep.where() == "xyz-deep"
        assert driver.bob.deep.current_handler == "xyz"


def test_namespace_missing_nested_class_raises() -> None:
    """First access fails if a handler has no class for the namespace."""
    driver = Driver("Sparse", path=__name__)
    driver.register_handler("lonely")
    driver.namespace("bob", _declare_bob)
    with pytest.raises(HandlerResolutionError) as excinfo:
        _ = driver.bob
    assert excinfo.value.path == f"{__name__}.Lonely.Bob"


def test_namespaces_are_listed(driver: Driver) -> None:
    assert driver.namespaces == ("bob",)
    assert "bob" in dir(driver)


def test_namespace_with_locally_defined_classes() -> None:
    """Nested classes resolve by attribute, not by re-importing a path."""

    class Enom:
        class Nameservers:
            def list(self) -> list[str]:
                return ["ns1.enom.test"]

    driver = Driver("Local")
    driver.register_handler("enom", implementation=Enom)
    driver.set_default_handler("enom")
    driver.namespace("nameservers", lambda ns: ns.define_action("list"))

    assert driver.nameservers.handlers == {"enom": Enom.Nameservers}
    assert driver.nameservers.list() == ["ns1.enom.test"]


def test_namespace_factory_without_nested_class() -> None:
    """A factory handler has nothing to nest and fails with its path."""

    def make_abc() -> Abc:
        return Abc()

    driver = Driver("Factory")
    driver.register_handler("abc", implementation=make_abc)
    driver.namespace("bob", _declare_bob)
    with pytest.raises(HandlerResolutionError) as excinfo:
        _ = driver.bob
    assert excinfo.value.path.endswith("make_abc.Bob")


def test_failed_namespace_build_leaves_no_registered_driver() -> None:
    """Sub-drivers join the global registry only after a successful build."""
    driver = Driver("Sparse", path=__name__)
    driver.register_handler("lonely")
    driver.namespace("bob", _declare_bob)
    for _ in range(3):
        with pytest.raises(HandlerResolutionError):
            _ = driver.bob
    assert runtime.all_drivers() == [driver]


def test_failing_namespace_body_is_not_cached(driver: Driver) -> None:
    """A raising body propagates, registers nothing, and is retried next access."""
    calls = []

    def body(ns: Driver) -> None:
        calls.append(ns)
        raise RuntimeError("bad declaration")

    driver.namespace("broken", body)
    for _ in range(2):
        with pytest.raises(RuntimeError, match="bad declaration"):
            _ = driver.broken
    assert len(calls) == 2
    assert runtime.all_drivers() == [driver]
