"""Protocol and base class for handler implementations."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from typing import Any, Callable, ClassVar, Protocol, Union, runtime_checkable


@runtime_checkable
class SetupCapable(Protocol):
    """Handler exposing a one-time setup hook run right after construction."""

    def setup_handler(self) -> None:
        """Prepare the handler (open clients, read config, ...)."""
        ...


class Handler:
    """Optional base class marking a strategy implementation.

    Each subclass gets its own class-level ``config`` mapping, seeded by the
    ``config`` callable passed to :meth:`Driver.register_handler`. Subclasses
    override :meth:`setup_handler` for one-time initialization.
    """

    config: ClassVar[dict[str, Any]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.config = {}

    def setup_handler(self) -> None:
        """No-op setup hook."""


HandlerFactory = Callable[[], Any]
Implementation = Union[type, HandlerFactory, str]
ConfigBlock = Callable[[dict[str, Any]], Any]


__all__ = ["SetupCapable", "Handler", "HandlerFactory", "Implementation", "ConfigBlock"]
