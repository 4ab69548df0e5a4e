"""Dispatch services: drivers, their registries, and delegation helpers."""

from __future__ import annotations

from .delegation import expose_driver
from .driver import Driver
from .registry import HandlerRegistry
from .runtime import all_drivers, clear_drivers, get_driver

__all__ = [
    "Driver",
    "HandlerRegistry",
    "expose_driver",
    "all_drivers",
    "clear_drivers",
    "get_driver",
]
