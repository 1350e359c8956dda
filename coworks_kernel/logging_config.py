"""
Structured JSON logging for the coworks kernel.

Every record under the ``coworks_kernel`` logger is written as one JSON
object per line. Engines log an event name as the message and put their
values in ``extra``; the active ``LogContext`` is stamped onto every record,
so a trace fingerprint and seating type bound by an engine appear on all
log lines emitted while that engine runs.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

# correlation_id and booking_id come from the caller; trace_id is the engine
# input fingerprint and seating_type the resolved tag, both bound by engines.
CONTEXT_FIELDS = ("correlation_id", "booking_id", "trace_id", "seating_type")

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"coworks_log_{name}", default=None) for name in CONTEXT_FIELDS
}


def _context_var(name: str) -> ContextVar[str | None]:
    try:
        return _CONTEXT_VARS[name]
    except KeyError:
        raise TypeError(f"unknown log context field {name!r}") from None


class LogContext:
    """Async-safe holder for fields stamped onto every log record."""

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set context fields. None values leave a field untouched."""
        for name, value in fields.items():
            var = _context_var(name)
            if value is not None:
                var.set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        """Non-None context fields, in CONTEXT_FIELDS order."""
        ctx: dict[str, str] = {}
        for name, var in _CONTEXT_VARS.items():
            value = var.get()
            if value is not None:
                ctx[name] = value
        return ctx

    @staticmethod
    def clear() -> None:
        for var in _CONTEXT_VARS.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Set fields for the duration of a block, then restore them."""
        tokens = [
            (_context_var(name), _context_var(name).set(value))
            for name, value in fields.items()
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_RESERVED_KEYS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    """Render billing values: Decimal and UUID as strings, dates ISO, enums by value."""
    if isinstance(obj, (Decimal, UUID)):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Type, message, error code and structured attributes of an exception."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for key, value in vars(exc).items():
        if not key.startswith("_"):
            fields[f"exc_{key}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: header, context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(LogContext.get_all())
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED_KEYS and key not in payload
        )

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Logger factory and initialization
# ---------------------------------------------------------------------------

_LOGGER_PREFIX = "coworks_kernel"

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Logger under the coworks_kernel namespace, e.g. ``engines.billing``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach one structured handler to the coworks_kernel logger (idempotent)."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.setLevel(level)
    root_logger.propagate = False

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(handler)


def reset_logging() -> None:
    """Drop configured handlers. FOR TESTING ONLY."""
    global _configured
    with _lock:
        _configured = False
    root_logger = logging.getLogger(_LOGGER_PREFIX)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
