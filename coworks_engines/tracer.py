"""
coworks_engines.tracer -- Engine invocation tracer emitting COWORKS_ENGINE_TRACE.

Responsibility:
    Provide a lightweight decorator (``@traced_engine``) that wraps pure
    engine invocations with structured trace logging.  The trace captures
    engine_name, engine_version, input_fingerprint (deterministic SHA-256
    hash of selected inputs), and duration_ms.

Invariants enforced:
    - Fingerprints are deterministic: _canonicalize produces stable string
      representations; dict keys are sorted; the hash is SHA-256 truncated
      to 16 hex chars.
    - Engine purity: the decorator only reads arguments and emits a log
      record; it does not mutate inputs.
    - Every log line emitted during a traced call carries the input
      fingerprint as ``trace_id`` through LogContext.

Usage:
    from coworks_engines.tracer import traced_engine

    @traced_engine("billing", "1.0", fingerprint_fields=("start_date", "end_date"))
    def calculate_booking_cost(start_date, end_date, monthly_rate):
        ...
"""

from __future__ import annotations

import functools
import hashlib
import inspect
import time
from collections.abc import Callable
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from coworks_kernel.logging_config import LogContext, get_logger

_logger = get_logger("engines.tracer")


def _canonicalize(value: Any) -> str:
    """Produce a stable string representation of a value for fingerprinting.

    Unknown types fall back to ``str(value)``.
    """
    if value is None:
        return "null"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: str(kv[0]))
        return "{" + ",".join(f"{k}:{_canonicalize(v)}" for k, v in items) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_canonicalize(v) for v in value) + "]"
    return str(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    arguments: dict[str, Any],
) -> str:
    """Compute a deterministic SHA-256 fingerprint of selected input fields.

    Missing fields are recorded as "null". The result is a 16-character hex
    digest prefix.
    """
    parts: list[str] = []
    for field in fingerprint_fields:
        val = arguments.get(field)
        parts.append(f"{field}={_canonicalize(val)}")
    canonical = "|".join(parts)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    """Decorator that emits COWORKS_ENGINE_TRACE for pure engine invocations.

    Args:
        engine_name: Engine identifier (e.g., "billing").
        engine_version: Engine version (e.g., "1.0").
        fingerprint_fields: Parameter names to include in the input
            fingerprint hash. Positional and keyword arguments both count.

    Returns:
        Decorator function.
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fp = ""
            if fingerprint_fields:
                bound = signature.bind_partial(*args, **kwargs)
                fp = compute_input_fingerprint(fingerprint_fields, dict(bound.arguments))

            with LogContext.bind(trace_id=fp or None):
                t0 = time.monotonic()
                result = func(*args, **kwargs)
                duration_ms = round((time.monotonic() - t0) * 1000, 2)

                _logger.info(
                    "COWORKS_ENGINE_TRACE",
                    extra={
                        "trace_type": "COWORKS_ENGINE_TRACE",
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fp,
                        "duration_ms": duration_ms,
                        "function": func.__qualname__,
                    },
                )
            return result

        return wrapper

    return decorator
