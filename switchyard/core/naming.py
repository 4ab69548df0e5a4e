"""Naming helpers used for convention-based handler resolution."""

from __future__ import annotations

import importlib
import re
from typing import Any

from switchyard.core.exceptions import HandlerResolutionError

_SEPARATORS = re.compile(r"[_\-\s]+")


def camelize(name: str) -> str:
    """Return ``name`` in CamelCase (``"with_setup"`` -> ``"WithSetup"``)."""

    parts = [part for part in _SEPARATORS.split(str(name)) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts)


def qualified_path(obj: Any) -> str:
    """Return the dotted import path of a class or function."""

    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if not module or not qualname:
        raise HandlerResolutionError(repr(obj))
    return f"{module}.{qualname}"


def _is_missing_prefix(module_name: str, missing: str | None) -> bool:
    """Return whether ``missing`` is ``module_name`` itself or one of its parents."""

    if not missing:
        return False
    return module_name == missing or module_name.startswith(f"{missing}.")


def resolve_path(path: str) -> Any:
    """Import the object at dotted ``path``.

    The longest importable module prefix is imported and the remaining
    segments are walked as attributes, so nested classes resolve
    (``pkg.domain.Enom.Nameservers``). Import errors raised from inside an
    existing module propagate unchanged.
    """

    parts = [part for part in str(path).split(".") if part]
    if not parts:
        raise HandlerResolutionError(str(path))

    for split in range(len(parts), 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            if not _is_missing_prefix(module_name, exc.name):
                raise
            continue
        for attr in parts[split:]:
            try:
                target = getattr(target, attr)
            except AttributeError as exc:
                raise HandlerResolutionError(path) from exc
        return target

    raise HandlerResolutionError(path)


__all__ = ["camelize", "qualified_path", "resolve_path"]
