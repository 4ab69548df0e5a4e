"""Core exception types raised by drivers and their registries."""

from __future__ import annotations

from typing import Any


class SwitchyardError(Exception):
    """Base error for driver misuse."""


class NoHandlerError(SwitchyardError, LookupError):
    """Raised when a handler is requested without a name (eg: ``handlers[None]``)."""

    def __init__(self) -> None:
        super().__init__("No handler selected")


class InvalidHandlerError(SwitchyardError, LookupError):
    """Raised when a handler name was never registered."""

    def __init__(self, key: Any) -> None:
        self.key = key
        super().__init__(f"Invalid handler '{key}'")


class HandlerResolutionError(SwitchyardError):
    """Raised when a handler implementation path cannot be imported."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Unknown handler '{path}'")


class MissingBlockError(SwitchyardError):
    """Raised when an operation that requires a body callable gets none."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} requires a body callable")


class AlreadyImplementedError(SwitchyardError):
    """Raised when a member would shadow an existing driver member."""

    def __init__(self, driver: Any, method: str) -> None:
        self.driver = driver
        self.method = method
        super().__init__(f"{driver!r}.{method}")


__all__ = [
    "SwitchyardError",
    "NoHandlerError",
    "InvalidHandlerError",
    "HandlerResolutionError",
    "MissingBlockError",
    "AlreadyImplementedError",
]
