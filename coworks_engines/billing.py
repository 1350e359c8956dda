"""
Booking Cost Engine.

Pure functions with deterministic behavior. No I/O.

Calculates what a coworking booking costs over its lifetime and what is due
at move-in. Monthly-cadence seating (desks, cubicles) is billed per calendar
month with pro-rata amounts for partial first and last months; hourly and
daily seating is billed as a single line.

Billing rules:
- Partial month: round(monthly_rate / days_in_month x days_used), half-up to
  whole rupees.
- Full month: the monthly rate.
- Cancellation: periods starting after the notice cutoff (cancellation date
  plus the seating type's notice period) are refunded and removed from the
  breakdown.
- Move-in: pro-rata for the rest of the start month, the following full
  month, and a refundable deposit of one month's rate.

Usage:
    from coworks_engines.billing import calculate_booking_cost

    result = calculate_booking_cost(
        start_date=date(2023, 3, 21),
        end_date=date(2023, 4, 30),
        monthly_rate=Decimal("5000"),
        seating_type=SeatingType.HOT_DESK,
    )
    result.total_cost  # Decimal("6774")
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from coworks_engines.periods import (
    as_date,
    as_datetime,
    days_in_month,
    elapsed_months,
    is_last_day_of_month,
    last_of_month,
    month_label,
    next_month,
    same_month,
)
from coworks_engines.policy import PolicyTable, get_constraint, notice_period_days
from coworks_engines.pricing import coerce_rate
from coworks_engines.tracer import traced_engine
from coworks_kernel.domain.currency import format_currency
from coworks_kernel.domain.seating import (
    BillingCadence,
    SeatingType,
    SeatingTypeConstraint,
)
from coworks_kernel.exceptions import InvalidDateRangeError
from coworks_kernel.logging_config import LogContext, get_logger

logger = get_logger("engines.billing")


# ============================================================================
# Constants
# ============================================================================

_WHOLE_UNIT = Decimal("1")
_TWO_PLACES = Decimal("0.01")
_ZERO = Decimal("0")
_SECONDS_PER_HOUR = Decimal("3600")


class LineItemKind(str, Enum):
    """What a breakdown line bills for."""

    PRO_RATA = "PRO_RATA"
    FULL_MONTH = "FULL_MONTH"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    FULL_PAYMENT = "FULL_PAYMENT"
    SECURITY_DEPOSIT = "SECURITY_DEPOSIT"
    CANCELLATION_NOTICE = "CANCELLATION_NOTICE"


# ============================================================================
# Value Objects
# ============================================================================


@dataclass(frozen=True)
class LineItem:
    """
    A single line of a cost breakdown.

    ``description`` and ``amount`` are what customers see. ``kind`` and the
    period dates describe the line for the engine itself; refund matching
    reads them, never the description.
    """

    description: str
    amount: Decimal
    kind: LineItemKind
    period_start: date | None = None
    period_end: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"description": self.description, "amount": str(self.amount)}


@dataclass(frozen=True)
class BillingRequest:
    """Inputs of a booking cost calculation, as one value."""

    start_date: date | datetime
    end_date: date | datetime
    monthly_rate: Decimal | int | str
    cancellation_date: date | datetime | None = None
    seating_type: SeatingType | str | None = None


@dataclass(frozen=True)
class BillingResult:
    """
    Lifetime cost of a booking.

    Attributes:
        total_cost: Sum of billed lines after any refund
        breakdown: Billing periods in chronological order, then adjustments
        refund_amount: Amount refunded on cancellation (0 without one)
        extra_details: Explanations, warnings and policy notes
    """

    total_cost: Decimal
    breakdown: tuple[LineItem, ...]
    refund_amount: Decimal
    extra_details: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready shape; amounts are rendered as decimal strings."""
        return {
            "totalCost": str(self.total_cost),
            "breakdown": [item.to_dict() for item in self.breakdown],
            "refundAmount": str(self.refund_amount),
            "extraDetails": list(self.extra_details),
        }


@dataclass(frozen=True)
class InitialPaymentResult:
    """Amount due at move-in with its breakdown."""

    total_amount: Decimal
    breakdown: tuple[LineItem, ...]
    extra_details: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalAmount": str(self.total_amount),
            "breakdown": [item.to_dict() for item in self.breakdown],
            "extraDetails": list(self.extra_details),
        }


# ============================================================================
# Core Billing Functions
# ============================================================================


@traced_engine(
    "billing",
    "1.0",
    fingerprint_fields=(
        "start_date",
        "end_date",
        "monthly_rate",
        "cancellation_date",
        "seating_type",
    ),
)
def calculate_booking_cost(
    start_date: date | datetime,
    end_date: date | datetime,
    monthly_rate: Decimal | int | str,
    cancellation_date: date | datetime | None = None,
    seating_type: SeatingType | str | None = None,
    policies: PolicyTable | None = None,
) -> BillingResult:
    """
    Calculate the full lifecycle cost of a booking.

    Pure function - no side effects, no I/O, deterministic output.

    For hourly and daily seating types ``monthly_rate`` is read as the
    hourly or daily rate and a single line is returned; cancellation does
    not apply to them.

    Args:
        start_date: First day (or start time) of the booking
        end_date: Last day (or end time) of the booking, inclusive
        monthly_rate: Rate per billing period
        cancellation_date: Day notice was given, if the booking is cancelled
        seating_type: Seating-type tag; unknown tags bill monthly with no
            policy notes
        policies: Policy table override; defaults to SEATING_TYPE_CONSTRAINTS

    Returns:
        BillingResult with breakdown, totals and refund

    Raises:
        InvalidRateError: If the rate is negative, non-finite or not a number
        InvalidDateRangeError: If end_date is before start_date
    """
    t0 = time.monotonic()
    rate = coerce_rate(monthly_rate)
    constraint = _resolve_constraint(seating_type, policies)
    cadence = constraint.billing_cadence if constraint else BillingCadence.MONTHLY
    _check_date_range(start_date, end_date, cadence)

    with LogContext.bind(seating_type=_context_tag(constraint)):
        logger.info("billing_calculation_started", extra={
            "start_date": as_date(start_date).isoformat(),
            "end_date": as_date(end_date).isoformat(),
            "rate": str(rate),
            "cadence": cadence.value,
            "has_cancellation": cancellation_date is not None,
        })

        if cadence == BillingCadence.HOURLY:
            result = _calculate_hourly_cost(start_date, end_date, rate, constraint)
        elif cadence == BillingCadence.DAILY:
            result = _calculate_daily_cost(start_date, end_date, rate, constraint)
        else:
            result = _calculate_monthly_cost(
                as_date(start_date),
                as_date(end_date),
                rate,
                cancellation_date,
                constraint,
                policies,
            )

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("billing_calculation_completed", extra={
            "cadence": cadence.value,
            "total_cost": str(result.total_cost),
            "refund_amount": str(result.refund_amount),
            "line_item_count": len(result.breakdown),
            "duration_ms": duration_ms,
        })

    return result


def calculate_booking_cost_for(
    request: BillingRequest,
    policies: PolicyTable | None = None,
) -> BillingResult:
    """Calculate booking cost from a BillingRequest."""
    return calculate_booking_cost(
        start_date=request.start_date,
        end_date=request.end_date,
        monthly_rate=request.monthly_rate,
        cancellation_date=request.cancellation_date,
        seating_type=request.seating_type,
        policies=policies,
    )


@traced_engine(
    "billing",
    "1.0",
    fingerprint_fields=("start_date", "monthly_rate", "seating_type"),
)
def calculate_initial_payment(
    start_date: date | datetime,
    monthly_rate: Decimal | int | str,
    seating_type: SeatingType | str | None = None,
    policies: PolicyTable | None = None,
) -> InitialPaymentResult:
    """
    Calculate the payment due at move-in.

    Monthly seating: pro-rata for the rest of the start month (when it
    starts mid-month), one full month, and a refundable security deposit
    equal to the monthly rate. Hourly and daily seating: one full-payment
    line equal to the rate, no deposit.

    Raises:
        InvalidRateError: If the rate is negative, non-finite or not a number
    """
    rate = coerce_rate(monthly_rate)
    start = as_date(start_date)
    constraint = _resolve_constraint(seating_type, policies)

    with LogContext.bind(seating_type=_context_tag(constraint)):
        return _initial_payment(start, rate, constraint)


def _initial_payment(
    start: date,
    rate: Decimal,
    constraint: SeatingTypeConstraint | None,
) -> InitialPaymentResult:
    if constraint is not None and not constraint.is_monthly:
        line = LineItem(
            description=f"Full payment: {constraint.display_name}",
            amount=rate,
            kind=LineItemKind.FULL_PAYMENT,
            period_start=start,
        )
        logger.info("initial_payment_calculated", extra={
            "total_amount": str(rate),
            "line_item_count": 1,
        })
        return InitialPaymentResult(
            total_amount=rate,
            breakdown=(line,),
            extra_details=("Full prepayment is due at booking",),
        )

    lines: list[LineItem] = []
    details: list[str] = []

    if start.day == 1:
        lines.append(_full_month_line(rate, start))
    else:
        pro_rata, explanation = _pro_rata_line(rate, start, last_of_month(start))
        lines.append(pro_rata)
        details.append(explanation)
        lines.append(_full_month_line(rate, next_month(start)))

    lines.append(LineItem(
        description="Security deposit (refundable)",
        amount=rate,
        kind=LineItemKind.SECURITY_DEPOSIT,
    ))

    if constraint is not None:
        details.append(
            f"{constraint.display_name} requires a minimum commitment of "
            f"{constraint.min_months} months"
        )
        if constraint.min_seats > 1:
            details.append(_min_seats_note(constraint))

    total = sum((line.amount for line in lines), _ZERO)

    logger.info("initial_payment_calculated", extra={
        "total_amount": str(total),
        "line_item_count": len(lines),
    })

    return InitialPaymentResult(
        total_amount=total,
        breakdown=tuple(lines),
        extra_details=tuple(details),
    )


# ============================================================================
# Cadence-Specific Calculators
# ============================================================================


def _calculate_hourly_cost(
    start_date: date | datetime,
    end_date: date | datetime,
    rate: Decimal,
    constraint: SeatingTypeConstraint,
) -> BillingResult:
    """Bill rounded hours at the hourly rate. Full prepayment, no refunds."""
    delta = as_datetime(end_date) - as_datetime(start_date)
    seconds = Decimal(delta.days * 86400 + delta.seconds)
    hours = (seconds / _SECONDS_PER_HOUR).quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)
    amount = hours * rate

    unit = "hour" if hours == 1 else "hours"
    line = LineItem(
        description=(
            f"{constraint.display_name}: {hours} {unit} @ {format_currency(rate)}/hour"
        ),
        amount=amount,
        kind=LineItemKind.HOURLY,
        period_start=as_date(start_date),
        period_end=as_date(end_date),
    )

    details = []
    if hours < constraint.minimum_duration:
        details.append(
            f"{constraint.display_name} requires a minimum booking of "
            f"{constraint.minimum_duration} hours"
        )
    details.append("Full prepayment required; no partial refunds for short bookings")

    return BillingResult(
        total_cost=amount,
        breakdown=(line,),
        refund_amount=_ZERO,
        extra_details=tuple(details),
    )


def _calculate_daily_cost(
    start_date: date | datetime,
    end_date: date | datetime,
    rate: Decimal,
    constraint: SeatingTypeConstraint,
) -> BillingResult:
    """Bill inclusive calendar days at the daily rate."""
    start, end = as_date(start_date), as_date(end_date)
    days = (end - start).days + 1
    amount = Decimal(days) * rate

    unit = "day" if days == 1 else "days"
    line = LineItem(
        description=(
            f"{constraint.display_name}: {days} {unit} @ {format_currency(rate)}/day"
        ),
        amount=amount,
        kind=LineItemKind.DAILY,
        period_start=start,
        period_end=end,
    )

    details = []
    if days < constraint.minimum_duration:
        details.append(
            f"{constraint.display_name} requires a minimum booking of "
            f"{constraint.minimum_duration} days"
        )
    details.append("Full prepayment required; no partial refunds for short bookings")

    return BillingResult(
        total_cost=amount,
        breakdown=(line,),
        refund_amount=_ZERO,
        extra_details=tuple(details),
    )


def _calculate_monthly_cost(
    start: date,
    end: date,
    rate: Decimal,
    cancellation_date: date | datetime | None,
    constraint: SeatingTypeConstraint | None,
    policies: PolicyTable | None,
) -> BillingResult:
    """Bill calendar months, pro-rating the partial first and last months."""
    lines: list[LineItem] = []
    details: list[str] = []

    whole_single_month = start.day == 1 and is_last_day_of_month(end)
    if same_month(start, end) and not whole_single_month:
        # One partial month: a single pro-rata line covers it
        line, explanation = _pro_rata_line(rate, start, end)
        lines.append(line)
        details.append(explanation)
    else:
        if start.day != 1:
            line, explanation = _pro_rata_line(rate, start, last_of_month(start))
            lines.append(line)
            details.append(explanation)
            cursor = next_month(start)
        else:
            cursor = start

        while cursor <= end:
            if same_month(cursor, end) and not is_last_day_of_month(end):
                line, explanation = _pro_rata_line(rate, cursor, end)
                lines.append(line)
                details.append(explanation)
                break
            lines.append(_full_month_line(rate, cursor))
            cursor = next_month(cursor)

    total = sum((line.amount for line in lines), _ZERO)

    if constraint is not None:
        details.extend(_commitment_notes(start, end, constraint))

    refund = _ZERO
    if cancellation_date is not None:
        notice_days = notice_period_days(
            constraint.seating_type if constraint else None, policies
        )
        lines, refund, explanation = _apply_cancellation(
            lines, as_date(cancellation_date), notice_days
        )
        details.append(explanation)
        total -= refund

    return BillingResult(
        total_cost=total,
        breakdown=tuple(lines),
        refund_amount=refund,
        extra_details=tuple(details),
    )


def _apply_cancellation(
    lines: list[LineItem],
    cancellation_date: date,
    notice_days: int,
) -> tuple[list[LineItem], Decimal, str]:
    """
    Refund every period that starts after the notice cutoff.

    A line is refunded when its period_start falls strictly after
    cancellation_date + notice_days. Returns the kept lines (with the
    zero-amount cancellation entry appended), the refund and its explanation.
    """
    notice_end = cancellation_date + timedelta(days=notice_days)

    kept: list[LineItem] = []
    refund = _ZERO
    refunded_count = 0
    for line in lines:
        if line.period_start is not None and line.period_start > notice_end:
            refund += line.amount
            refunded_count += 1
        else:
            kept.append(line)

    kept.append(LineItem(
        description=(
            f"Cancellation notice: {cancellation_date.isoformat()} "
            f"({notice_days} days notice)"
        ),
        amount=_ZERO,
        kind=LineItemKind.CANCELLATION_NOTICE,
        period_start=cancellation_date,
        period_end=notice_end,
    ))

    logger.info("booking_refund_applied", extra={
        "cancellation_date": cancellation_date.isoformat(),
        "notice_period_days": notice_days,
        "notice_end_date": notice_end.isoformat(),
        "refunded_periods": refunded_count,
        "refund_amount": str(refund),
    })

    explanation = (
        f"Refund of {format_currency(refund)} for periods after the notice "
        f"cutoff {notice_end.isoformat()}"
    )
    return kept, refund, explanation


# ============================================================================
# Line Builders
# ============================================================================


def _pro_rata_line(rate: Decimal, first: date, last: date) -> tuple[LineItem, str]:
    """Pro-rata line for days first..last of one month, with its working."""
    month_days = days_in_month(first.year, first.month)
    days_used = last.day - first.day + 1
    amount = (rate * days_used / month_days).quantize(_WHOLE_UNIT, rounding=ROUND_HALF_UP)
    label = month_label(first)

    line = LineItem(
        description=f"Pro-rata for {label} ({first.day}-{last.day})",
        amount=amount,
        kind=LineItemKind.PRO_RATA,
        period_start=first,
        period_end=last,
    )
    explanation = (
        f"Pro-rata for {label}: {format_currency(rate)} / {month_days} days "
        f"× {days_used} days = {format_currency(amount)}"
    )
    return line, explanation


def _full_month_line(rate: Decimal, month_start: date) -> LineItem:
    return LineItem(
        description=f"Full month: {month_label(month_start)}",
        amount=rate,
        kind=LineItemKind.FULL_MONTH,
        period_start=month_start,
        period_end=last_of_month(month_start),
    )


def _commitment_notes(
    start: date,
    end: date,
    constraint: SeatingTypeConstraint,
) -> list[str]:
    """Minimum-duration warning and minimum-seat note. Never alter totals."""
    notes = []
    covered = elapsed_months(start, end)
    if covered < constraint.min_months:
        notes.append(
            f"Warning: {constraint.display_name} requires a minimum commitment of "
            f"{constraint.min_months} months; this booking covers "
            f"{covered.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)} months"
        )
    if constraint.min_seats > 1:
        notes.append(_min_seats_note(constraint))
    return notes


def _min_seats_note(constraint: SeatingTypeConstraint) -> str:
    return (
        f"{constraint.display_name} requires a minimum of "
        f"{constraint.min_seats} seats per booking"
    )


# ============================================================================
# Input Handling
# ============================================================================


def _check_date_range(
    start_date: date | datetime,
    end_date: date | datetime,
    cadence: BillingCadence,
) -> None:
    """Hourly bookings compare times; the others compare calendar days."""
    if cadence == BillingCadence.HOURLY:
        reversed_range = as_datetime(end_date) < as_datetime(start_date)
    else:
        reversed_range = as_date(end_date) < as_date(start_date)
    if reversed_range:
        logger.error("billing_invalid_date_range", extra={
            "start_date": str(start_date),
            "end_date": str(end_date),
        })
        raise InvalidDateRangeError(start_date, end_date)


def _resolve_constraint(
    seating_type: SeatingType | str | None,
    policies: PolicyTable | None,
) -> SeatingTypeConstraint | None:
    """Constraint for the tag; unknown tags fall back to monthly billing."""
    constraint = get_constraint(seating_type, policies)
    if seating_type is not None and constraint is None:
        logger.warning("billing_unknown_seating_type", extra={
            "seating_type": str(seating_type),
        })
    return constraint


def _context_tag(constraint: SeatingTypeConstraint | None) -> str | None:
    return constraint.seating_type.value if constraint else None
