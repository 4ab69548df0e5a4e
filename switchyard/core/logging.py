"""Structured logging helpers carrying driver, handler, and action metadata."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar, Token
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator, Optional

from pythonjsonlogger.json import JsonFormatter

from switchyard.core.config import settings

_log_driver: ContextVar[Optional[str]] = ContextVar("log_driver", default=None)
_log_handler: ContextVar[Optional[str]] = ContextVar("log_handler", default=None)
_log_action: ContextVar[Optional[str]] = ContextVar("log_action", default=None)

LEVEL_NAME = str(getattr(settings, "SWITCHYARD_LOG_LEVEL", "info")).upper()
LOG_LEVEL = getattr(logging, LEVEL_NAME, logging.INFO)
LOG_SCHEMA_VERSION = str(getattr(settings, "SWITCHYARD_LOG_SCHEMA_VERSION", "1.0.0"))
LOG_FILE_NAME = "switchyard.log"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

PACKAGE_LOGGER_NAME = "switchyard"


def _resolve_log_file() -> Path | None:
    """Return the rotating log file path, or ``None`` when file logging is off."""

    configured_dir = getattr(settings, "SWITCHYARD_LOG_DIR", None)
    if not configured_dir:
        return None
    log_dir = Path(configured_dir)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        return None
    return log_dir / LOG_FILE_NAME


class VersionedJsonFormatter(JsonFormatter):
    """Inject a schema version into each structured log entry."""

    def __init__(self, *args, schema_version: str, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._schema_version = schema_version

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("schema_version", self._schema_version)


class DispatchContextFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Attach driver, handler, and action metadata to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.driver = get_log_driver() or "-"
        record.handler = get_log_handler() or "-"
        record.action = get_log_action() or "-"
        return True


def bind_log_driver(value: Optional[str]) -> Token[Optional[str]]:
    """Bind the driver name for downstream logging."""

    return _log_driver.set(value)


def reset_log_driver(token: Token[Optional[str]]) -> None:
    """Reset the driver context variable to a previous state."""

    _log_driver.reset(token)


def get_log_driver() -> Optional[str]:
    """Return the current driver name if bound."""

    return _log_driver.get()


def bind_log_handler(value: Optional[str]) -> Token[Optional[str]]:
    """Bind the handler name for downstream logging."""

    return _log_handler.set(value)


def reset_log_handler(token: Token[Optional[str]]) -> None:
    """Reset the handler context variable to a previous state."""

    _log_handler.reset(token)


def get_log_handler() -> Optional[str]:
    """Return the current handler name if bound."""

    return _log_handler.get()


def bind_log_action(value: Optional[str]) -> Token[Optional[str]]:
    """Bind the action name for downstream logging."""

    return _log_action.set(value)


def reset_log_action(token: Token[Optional[str]]) -> None:
    """Reset the action context variable to a previous state."""

    _log_action.reset(token)


def get_log_action() -> Optional[str]:
    """Return the current action name if bound."""

    return _log_action.get()


@contextmanager
def dispatch_context(
    driver: Optional[str], handler: Optional[str], action: Optional[str]
) -> Iterator[None]:
    """Context manager that temporarily binds driver, handler, and action."""

    driver_token = bind_log_driver(driver)
    handler_token = bind_log_handler(handler)
    action_token = bind_log_action(action)
    try:
        yield
    finally:
        reset_log_action(action_token)
        reset_log_handler(handler_token)
        reset_log_driver(driver_token)


def _ensure_handlers(logger: logging.Logger) -> None:
    if logger.handlers:
        return

    formatter = VersionedJsonFormatter(
        " ".join(
            [
                "%(asctime)s",
                "%(levelname)s",
                "%(name)s",
                "%(message)s",
                "%(driver)s",
                "%(handler)s",
                "%(action)s",
            ]
        ),
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
        datefmt="%Y-%m-%d %H:%M:%S",
        json_ensure_ascii=False,
        schema_version=LOG_SCHEMA_VERSION,
    )
    context_filter = DispatchContextFilter()

    if getattr(settings, "SWITCHYARD_LOG_STDOUT", False):
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.addFilter(context_filter)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    log_file = _resolve_log_file()
    if log_file is not None:
        file_handler = RotatingFileHandler(
            log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
        file_handler.addFilter(context_filter)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Output is opt-in; stay silent for consumers that configure nothing.
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Return a logger whose records flow through the shared package handlers."""

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(LOG_LEVEL)
    _ensure_handlers(package_logger)
    return logging.getLogger(name)


__all__ = [
    "DispatchContextFilter",
    "VersionedJsonFormatter",
    "bind_log_driver",
    "bind_log_handler",
    "bind_log_action",
    "reset_log_driver",
    "reset_log_handler",
    "reset_log_action",
    "get_log_driver",
    "get_log_handler",
    "get_log_action",
    "dispatch_context",
    "get_logger",
    "LOG_SCHEMA_VERSION",
]
