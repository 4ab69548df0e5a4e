"""Pluggable-strategy dispatch: drivers, handlers, actions, and namespaces."""

from switchyard.core.exceptions import (
    AlreadyImplementedError,
    HandlerResolutionError,
    InvalidHandlerError,
    MissingBlockError,
    NoHandlerError,
    SwitchyardError,
)
from switchyard.core.ports import Handler
from switchyard.services import (
    Driver,
    HandlerRegistry,
    all_drivers,
    clear_drivers,
    expose_driver,
    get_driver,
)

__version__ = "0.1.0"

__all__ = [
    "Driver",
    "Handler",
    "HandlerRegistry",
    "expose_driver",
    "all_drivers",
    "clear_drivers",
    "get_driver",
    "SwitchyardError",
    "NoHandlerError",
    "InvalidHandlerError",
    "HandlerResolutionError",
    "MissingBlockError",
    "AlreadyImplementedError",
]
