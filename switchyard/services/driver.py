"""Driver: a facade dispatching named actions to swappable handlers.

A driver owns a registry of handler implementations, resolves the current
handler (override, else default, else the parent driver's choice for
namespaces) and forwards each action to a lazily built, cached instance of
that handler.

Example::

    domain = Driver("Domain", path="myapp.domain")
    domain.register_handler("enom")
    domain.register_handler("opensrs")
    domain.define_action("transfer")
    domain.namespace("nameservers", lambda ns: ns.define_action("list"))
    domain.set_default_handler("opensrs")

    domain.transfer("example.com")            # OpenSRS().transfer(...)
    with domain.use_handler("enom"):
        domain.nameservers.list()             # Enom.Nameservers().list()
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional

from switchyard.core.config import settings
from switchyard.core.exceptions import (
    AlreadyImplementedError,
    HandlerResolutionError,
    MissingBlockError,
)
from switchyard.core.logging import dispatch_context, get_logger
from switchyard.core.naming import camelize, qualified_path, resolve_path
from switchyard.core.ports import ConfigBlock, Implementation, SetupCapable

from .registry import HandlerRegistry
from .runtime import register_driver

logger = get_logger(__name__)

NamespaceBody = Callable[["Driver"], Any]


def _handler_config(implementation: Any) -> Optional[dict[str, Any]]:
    """Return the class-level config mapping, creating it when absent.

    An existing non-dict ``config`` member is left untouched and ``None`` is
    returned.
    """

    if hasattr(implementation, "config"):
        existing = getattr(implementation, "config")
        return existing if isinstance(existing, dict) else None
    try:
        setattr(implementation, "config", {})
    except (AttributeError, TypeError):
        return None
    return implementation.config


def _describe(implementation: Any) -> str:
    try:
        return qualified_path(implementation)
    except HandlerResolutionError:
        return repr(implementation)


class Driver:  # pylint: disable=too-many-instance-attributes
    """Facade exposing actions backed by a registry of handlers."""

    def __init__(
        self,
        name: str,
        *,
        path: Optional[str] = None,
        parent: Optional["Driver"] = None,
        register: bool = True,
    ) -> None:
        self.name = name
        self.path = path or name
        self.parent_driver = parent
        self._handlers = HandlerRegistry()
        self._default_handler: Optional[str] = None
        self._current_handler: ContextVar[Optional[str]] = ContextVar(
            f"switchyard.{name}.current_handler", default=None
        )
        self._handler_instances: dict[str, Any] = {}
        self._members: dict[str, Callable[..., Any]] = {}
        self._actions: list[str] = []
        self._namespace_bodies: dict[str, NamespaceBody] = {}
        self._namespaces: dict[str, "Driver"] = {}
        if register:
            register_driver(self)
        logger.debug("Created driver %s (path=%s)", self.name, self.path)

    def __repr__(self) -> str:
        return f"Driver({self.name!r})"

    def __getattr__(self, name: str) -> Any:
        # Only reached when regular attribute lookup fails.
        namespace_bodies = self.__dict__.get("_namespace_bodies", {})
        if name in namespace_bodies:
            return self._namespace_driver(name)
        members = self.__dict__.get("_members", {})
        if name in members:
            return members[name]
        raise AttributeError(f"{self!r} has no action or namespace '{name}'")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._members) | set(self._namespace_bodies))

    @staticmethod
    def is_driver(obj: Any) -> bool:
        """Return whether ``obj`` is built with this mechanism."""

        return isinstance(obj, Driver)

    # ------------------------------------------------------------------
    # Handler registry
    # ------------------------------------------------------------------

    @property
    def handlers(self) -> HandlerRegistry:
        """Registered handlers: name -> implementation.

        ``handlers[None]`` raises ``NoHandlerError``; an unknown name raises
        ``InvalidHandlerError``.
        """

        return self._handlers

    def register_handler(
        self,
        name: str,
        *,
        implementation: Optional[Implementation] = None,
        config: Optional[ConfigBlock] = None,
    ) -> Any:
        """Register a handler under ``name``.

        Args:
            name: Handler name (eg: ``"enom"``).
            implementation: Class or zero-argument factory, or a dotted import
                path. Defaults to ``f"{self.path}.{camelize(name)}"``.
            config: Optional callable receiving the implementation's
                class-level config dict.

        Returns:
            The registered implementation.

        Raises:
            HandlerResolutionError: if a dotted path cannot be resolved.
        """

        if implementation is None:
            implementation = f"{self.path}.{camelize(name)}"
        if isinstance(implementation, str):
            implementation = resolve_path(implementation)
        if not callable(implementation):
            raise HandlerResolutionError(repr(implementation))

        handler_config = _handler_config(implementation)
        if config is not None:
            if handler_config is None:
                raise TypeError(f"{implementation!r} cannot hold handler config")
            config(handler_config)

        if name in self._handlers:
            logger.debug("Replacing handler %s on %s", name, self.name)
        self._handlers[name] = implementation
        logger.debug(
            "Registered handler %s on %s (%s)",
            name,
            self.name,
            getattr(implementation, "__qualname__", repr(implementation)),
        )
        return implementation

    # ------------------------------------------------------------------
    # Current handler resolution
    # ------------------------------------------------------------------

    @property
    def default_handler(self) -> Optional[str]:
        """Fallback handler name used when no override is active."""

        if self._default_handler is not None:
            return self._default_handler
        return settings.SWITCHYARD_DEFAULT_HANDLERS.get(self.name)

    def set_default_handler(self, name: Optional[str]) -> Optional[str]:
        """Set the fallback handler name."""

        self._default_handler = name
        return name

    def set_current_handler(self, name: Optional[str]) -> Optional[str]:
        """Set (or clear with ``None``) the override for the current context."""

        self._current_handler.set(name)
        return name

    @property
    def current_handler(self) -> Optional[str]:
        """Handler name used for dispatch right now.

        Namespaces follow their parent; otherwise the override wins over the
        default.
        """

        if self.parent_driver is not None:
            parent_handler = self.parent_driver.current_handler
            if parent_handler is not None:
                return parent_handler
        override = self._current_handler.get()
        if override is not None:
            return override
        return self.default_handler

    @contextmanager
    def use_handler(self, name: Optional[str]) -> Iterator["Driver"]:
        """Temporarily switch the current handler for the enclosed block."""

        token = self._current_handler.set(name)
        logger.debug("Switched %s to handler %s", self.name, name)
        try:
            yield self
        finally:
            self._current_handler.reset(token)

    def with_handler(
        self, name: Optional[str], body: Optional[Callable[["Driver"], Any]] = None
    ) -> Any:
        """Call ``body(self)`` with ``name`` as the current handler.

        The previous override is restored even if ``body`` raises; the error
        propagates unchanged.

        Raises:
            MissingBlockError: if ``body`` is not given.
        """

        if body is None:
            raise MissingBlockError("with_handler")
        with self.use_handler(name):
            return body(self)

    # ------------------------------------------------------------------
    # Handler instances
    # ------------------------------------------------------------------

    @property
    def handler_instances(self) -> Mapping[str, Any]:
        """Read-only view of the constructed handler instances."""

        return MappingProxyType(self._handler_instances)

    def reset_handler_instances(self) -> None:
        """Drop every cached handler instance."""

        self._handler_instances.clear()

    def current_handler_instance(self) -> Any:
        """Return the (cached) instance of the current handler.

        The instance is built on first use and its ``setup_handler`` hook,
        when present, runs once right after construction.
        """

        name = self.current_handler
        if name in self._handler_instances:
            return self._handler_instances[name]

        implementation = self._handlers[name]
        instance = implementation()
        if isinstance(instance, SetupCapable):
            instance.setup_handler()
        self._handler_instances[name] = instance
        logger.info("Initialized handler %s for %s", name, self.name)
        return instance

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    @property
    def actions(self) -> tuple[str, ...]:
        """Defined action names, aliases included."""

        return tuple(self._actions)

    @property
    def namespaces(self) -> tuple[str, ...]:
        """Declared namespace names."""

        return tuple(self._namespace_bodies)

    def public_operations(self) -> list[str]:
        """Names of every public operation this driver exposes."""

        api = [attr for attr in dir(type(self)) if not attr.startswith("_")]
        return api + list(self._members) + list(self._namespace_bodies)

    def _has_member(self, name: str) -> bool:
        return (
            name in self._members
            or name in self._namespace_bodies
            or name in self.__dict__
            or hasattr(type(self), name)
        )

    def create_method(self, name: str, fn: Callable[..., Any]) -> Callable[..., Any]:
        """Install ``fn`` as ``self.<name>``.

        Raises:
            AlreadyImplementedError: if ``name`` is already a member.
        """

        if self._has_member(name):
            raise AlreadyImplementedError(self, name)
        self._members[name] = fn
        return fn

    def define_action(
        self,
        name: str,
        *,
        delegate_to: Optional[str] = None,
        alias: Optional[str] = None,
    ) -> Callable[..., Any]:
        """Define an action forwarding to the current handler instance.

        Args:
            name: Action name.
            delegate_to: Handler method to call. Defaults to ``name``.
            alias: Optional second name for the same action.

        Returns:
            The action callable.
        """

        method = delegate_to or name
        if alias == name:
            raise AlreadyImplementedError(self, alias)
        for member in (name, alias):
            if member is not None and self._has_member(member):
                raise AlreadyImplementedError(self, member)

        def action(*args: Any, **kwargs: Any) -> Any:
            handler_name = self.current_handler
            instance = self.current_handler_instance()
            with dispatch_context(self.name, handler_name, name):
                logger.debug("Dispatching %s.%s to %s.%s", self.name, name, handler_name, method)
                return getattr(instance, method)(*args, **kwargs)

        action.__name__ = name
        action.__qualname__ = f"{self.name}.{name}"

        self.create_method(name, action)
        self._actions.append(name)
        if alias is not None:
            self.create_method(alias, action)
            self._actions.append(alias)
        return action

    def invoke(self, action: str, *args: Any, **kwargs: Any) -> Any:
        """Dispatch the defined action called ``action``."""

        if action not in self._actions:
            raise AttributeError(f"{self!r} has no action '{action}'")
        return self._members[action](*args, **kwargs)

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    def namespace(self, name: str, body: Optional[NamespaceBody] = None) -> None:
        """Declare a nested driver reachable as ``self.<name>``.

        The sub-driver is built on first access: every handler of this
        driver is registered with its nested class named after the camelized
        ``name`` (``Enom`` -> ``Enom.Nameservers``), then ``body`` is called
        with it to declare actions. The sub-driver joins the driver registry
        only once the build succeeds.

        Raises:
            MissingBlockError: if ``body`` is not given.
            AlreadyImplementedError: if ``name`` is already a member.
        """

        if body is None:
            raise MissingBlockError("namespace")
        if self._has_member(name):
            raise AlreadyImplementedError(self, name)
        self._namespace_bodies[name] = body

    def _namespace_driver(self, name: str) -> "Driver":
        existing = self._namespaces.get(name)
        if existing is not None:
            return existing

        suffix = camelize(name)
        sub_driver = Driver(
            f"{self.name}.{suffix}", path=f"{self.path}.{suffix}", parent=self, register=False
        )
        for handler_name, implementation in self._handlers.items():
            nested = getattr(implementation, suffix, None)
            if nested is None:
                raise HandlerResolutionError(f"{_describe(implementation)}.{suffix}")
            sub_driver.register_handler(handler_name, implementation=nested)
        self._namespace_bodies[name](sub_driver)
        self._namespaces[name] = sub_driver
        register_driver(sub_driver)
        logger.debug("Built namespace %s on %s", name, self.name)
        return sub_driver


__all__ = ["Driver", "NamespaceBody"]
