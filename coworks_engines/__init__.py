"""
Module: coworks_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    HTTP layer.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import coworks_kernel (and sibling engine modules).
    MUST NOT import coworks_config.

Invariants enforced:
    - Purity: engines never call ``date.today()``; every date is an
      explicit parameter.
    - Decimal-only arithmetic for money.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from coworks_engines import calculate_booking_cost, calculate_initial_payment
    from coworks_engines import SEATING_TYPE_CONSTRAINTS, get_constraint
    from coworks_engines import calculate_total_price, find_best_rate_type
"""

from coworks_engines.billing import (
    BillingRequest,
    BillingResult,
    InitialPaymentResult,
    LineItem,
    LineItemKind,
    calculate_booking_cost,
    calculate_booking_cost_for,
    calculate_initial_payment,
)
from coworks_engines.policy import (
    DEFAULT_NOTICE_PERIOD_DAYS,
    SEATING_TYPE_CONSTRAINTS,
    PolicyTable,
    build_policy_table,
    get_constraint,
    notice_period_days,
)
from coworks_engines.pricing import (
    RateType,
    apply_quantity_discount,
    calculate_total_price,
    coerce_rate,
    find_best_rate_type,
)
from coworks_engines.tracer import compute_input_fingerprint, traced_engine

__all__ = [
    "BillingRequest",
    "BillingResult",
    "DEFAULT_NOTICE_PERIOD_DAYS",
    "InitialPaymentResult",
    "LineItem",
    "LineItemKind",
    "PolicyTable",
    "RateType",
    "SEATING_TYPE_CONSTRAINTS",
    "apply_quantity_discount",
    "build_policy_table",
    "calculate_booking_cost",
    "calculate_booking_cost_for",
    "calculate_initial_payment",
    "calculate_total_price",
    "coerce_rate",
    "compute_input_fingerprint",
    "find_best_rate_type",
    "get_constraint",
    "notice_period_days",
    "traced_engine",
]
