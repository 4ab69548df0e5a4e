"""Expose a driver's operations as instance members of a consumer class."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from switchyard.core.logging import get_logger

from .driver import Driver

logger = get_logger(__name__)

T = TypeVar("T", bound=type)


def _forward_call(driver: Driver, name: str) -> Callable[..., Any]:
    def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
        del self
        return getattr(driver, name)(*args, **kwargs)

    forward.__name__ = name
    forward.__qualname__ = f"{driver.name}.{name}"
    forward.__doc__ = f"Forward to ``{driver.name}.{name}``."
    return forward


def _forward_attribute(driver: Driver, name: str) -> property:
    return property(
        lambda self: getattr(driver, name), doc=f"Read ``{driver.name}.{name}``."
    )


def expose_driver(driver: Driver) -> Callable[[T], T]:
    """Class decorator forwarding every public operation of ``driver``.

    Operations are snapshotted at decoration time; members the class defines
    itself are left untouched.

    Example::

        @expose_driver(domain)
        class Service:
            pass

        Service().transfer("example.com")  # domain.transfer(...)
    """

    def decorator(cls: T) -> T:
        exposed = []
        for name in driver.public_operations():
            if name in vars(cls):
                continue
            descriptor = getattr(type(driver), name, None)
            if isinstance(descriptor, property) or name in driver.namespaces:
                setattr(cls, name, _forward_attribute(driver, name))
            else:
                setattr(cls, name, _forward_call(driver, name))
            exposed.append(name)
        logger.debug("Exposed %d operations of %s on %s", len(exposed), driver.name, cls.__name__)
        return cls

    return decorator


__all__ = ["expose_driver"]
