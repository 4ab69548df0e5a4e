"""Process-wide registry of drivers.

Every :class:`~switchyard.services.driver.Driver` adds itself here on
creation so tooling and tests can enumerate the drivers in a process.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - type narrowing only
    from .driver import Driver

_registry: list["Driver"] = []


def register_driver(driver: "Driver") -> None:
    """Record ``driver`` in the process-wide registry."""
    _registry.append(driver)


def all_drivers() -> list["Driver"]:
    """Return every registered driver in creation order."""
    return list(_registry)


def get_driver(name: str) -> Optional["Driver"]:
    """Return the most recently created driver called ``name``, if any."""
    for driver in reversed(_registry):
        if driver.name == name:
            return driver
    return None


def clear_drivers() -> None:
    """Reset the registry (used primarily in tests)."""
    _registry.clear()


__all__ = ["register_driver", "all_drivers", "get_driver", "clear_drivers"]
