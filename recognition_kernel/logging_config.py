"""
Structured JSON logging for the recognition engine.

Every record under the ``recognition_kernel`` namespace is rendered as one
JSON object per line:

* the envelope: ``ts``, ``level``, ``logger``, ``message``;
* the identifiers bound in ``LogContext`` (``schedule_id``, ``entry_id``,
  and the ``correlation_id`` shared by every line of one batch or auto-post
  run);
* the ``extra`` fields of the call;
* for failures, an ``error`` object with the exception type, message,
  ``RecognitionError`` code and attributes, plus the traceback.

Money (``Decimal``) is written as a string so amounts are never rounded by a
JSON float.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "LOGGER_NAMESPACE",
    "LOG_LEVEL_ENV_VAR",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import os
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, TextIO
from uuid import UUID

LOGGER_NAMESPACE = "recognition_kernel"
LOG_LEVEL_ENV_VAR = "RECOGNITION_LOG_LEVEL"

CONTEXT_FIELDS = ("correlation_id", "actor_id", "schedule_id", "entry_id")

# Never mutated in place; every change installs a new dict.
_context: ContextVar[dict[str, str]] = ContextVar("recognition_log_context", default={})


class LogContext:
    """Identifiers attached to every record logged in the current context."""

    @staticmethod
    def _merged(fields: dict[str, Any]) -> dict[str, str]:
        unknown = sorted(set(fields) - set(CONTEXT_FIELDS))
        if unknown:
            raise TypeError(f"unknown log context field(s): {', '.join(unknown)}")
        merged = dict(_context.get())
        merged.update({k: str(v) for k, v in fields.items() if v is not None})
        return merged

    @classmethod
    def set(cls, **fields: Any) -> None:
        """Bind fields until cleared.  ``None`` values leave a field as it is."""
        _context.set(cls._merged(fields))

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[type["LogContext"]]:
        """Bind fields for the duration of a ``with`` block."""
        token = _context.set(cls._merged(fields))
        try:
            yield cls
        finally:
            _context.reset(token)

    @staticmethod
    def get_all() -> dict[str, str]:
        return dict(_context.get())

    @staticmethod
    def clear() -> None:
        _context.set({})


# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _to_json(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    return str(value)


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES and key not in payload:
                payload[key] = value

        if record.exc_info and record.exc_info[1] is not None:
            payload["error"] = self.error_payload(record.exc_info[1])
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)

    @staticmethod
    def error_payload(exc: BaseException) -> dict[str, Any]:
        error: dict[str, Any] = {
            "type": type(exc).__name__,
            "message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            error["code"] = code
        for key, value in vars(exc).items():
            if not key.startswith("_"):
                error.setdefault(key, value)
        return error


def get_logger(name: str) -> logging.Logger:
    """Logger for *name* under the ``recognition_kernel`` namespace."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level {level!r}")
        return resolved
    return level


def configure_logging(
    *,
    level: int | str | None = None,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Install the JSON handler on the namespace logger (idempotent).

    *level* defaults to ``$RECOGNITION_LOG_LEVEL``, then INFO.  A second
    call is a no-op until ``reset_logging()``.
    """
    global _installed_handler
    namespace = logging.getLogger(LOGGER_NAMESPACE)
    with _lock:
        if _installed_handler is not None:
            return namespace

        h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
        h.setFormatter(StructuredFormatter())
        namespace.setLevel(_resolve_level(level))
        namespace.propagate = False
        namespace.addHandler(h)
        _installed_handler = h
    return namespace


def reset_logging() -> None:
    """Remove the handler ``configure_logging`` installed.  For tests."""
    global _installed_handler
    namespace = logging.getLogger(LOGGER_NAMESPACE)
    with _lock:
        if _installed_handler is not None:
            namespace.removeHandler(_installed_handler)
            _installed_handler = None
        namespace.setLevel(logging.NOTSET)
        namespace.propagate = True
