"""Handler registry mapping with strict lookups."""

from __future__ import annotations

from typing import Any

from switchyard.core.exceptions import InvalidHandlerError, NoHandlerError


class HandlerRegistry(dict):
    """Mapping of handler name -> implementation.

    Subscript access is strict: ``registry[None]`` raises
    :class:`NoHandlerError` and an unregistered key raises
    :class:`InvalidHandlerError`. ``get``, ``in`` and iteration keep plain
    dict semantics.
    """

    def __missing__(self, key: Any) -> Any:
        if key is None:
            raise NoHandlerError()
        raise InvalidHandlerError(key)

    def names(self) -> list[str]:
        """Return registered handler names in registration order."""

        return list(self.keys())


__all__ = ["HandlerRegistry"]
