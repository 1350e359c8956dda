"""
Typed exception hierarchy for the coworks kernel.

Every error carries a ``code`` class attribute (machine-readable, API-safe)
and keeps its context as structured attributes, so callers catch by type and
read fields instead of parsing message strings::

    try:
        result = calculate_booking_cost(start, end, rate)
    except InvalidDateRangeError as e:
        return error_response(code=e.code, start=e.start_date, end=e.end_date)

Hierarchy::

    CoworksKernelError (base)
    |
    +-- BillingError
    |   +-- InvalidDateRangeError
    |   +-- InvalidRateError
    |
    +-- PolicyError
        +-- InvalidPolicyError

Error codes:

Category | Code                | When raised
---------|---------------------|------------------------------------------
Billing  | INVALID_DATE_RANGE  | end date falls before start date
         | INVALID_RATE        | rate is negative, NaN, infinite or unparsable
Policy   | INVALID_POLICY      | seating-type constraint is inconsistent

The billing validation errors also derive from ``ValueError`` so that the
HTTP layer's generic input-validation handlers keep catching them.
"""

from __future__ import annotations

from typing import Any


class CoworksKernelError(Exception):
    """
    Base exception for all coworks kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "COWORKS_KERNEL_ERROR"


# Billing-related exceptions


class BillingError(CoworksKernelError):
    """Base exception for booking cost calculation errors."""

    code: str = "BILLING_ERROR"


class InvalidDateRangeError(BillingError, ValueError):
    """Booking end date falls before its start date."""

    code: str = "INVALID_DATE_RANGE"

    def __init__(self, start_date: Any, end_date: Any):
        self.start_date = str(start_date)
        self.end_date = str(end_date)
        super().__init__(
            f"Invalid date range: end {end_date} is before start {start_date}"
        )


class InvalidRateError(BillingError, ValueError):
    """Rate is negative, non-finite or not a number."""

    code: str = "INVALID_RATE"

    def __init__(self, rate: Any, reason: str = "must be a finite, non-negative amount"):
        self.rate = str(rate)
        self.reason = reason
        super().__init__(f"Invalid rate {rate!r}: {reason}")


# Policy-related exceptions


class PolicyError(CoworksKernelError):
    """Base exception for seating-type policy errors."""

    code: str = "POLICY_ERROR"


class InvalidPolicyError(PolicyError):
    """A seating-type constraint is internally inconsistent."""

    code: str = "INVALID_POLICY"

    def __init__(self, seating_type: str, reason: str):
        self.seating_type = seating_type
        self.reason = reason
        super().__init__(f"Invalid policy for {seating_type}: {reason}")
