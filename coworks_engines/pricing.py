"""
Rate-type pricing for seats and rooms.

Pure functions. Prices a booking span at an hourly, daily, weekly or monthly
rate for a number of units, applies quantity discounts from a seating type's
cost-multiplier table, and picks the cheapest rate type for a span. Amounts
are rounded half-up to paise.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum

from coworks_engines.periods import as_datetime, days_in_month
from coworks_kernel.domain.currency import BILLING_CURRENCY
from coworks_kernel.exceptions import InvalidDateRangeError, InvalidRateError
from coworks_kernel.logging_config import get_logger

logger = get_logger("engines.pricing")

_CENTS = Decimal(BILLING_CURRENCY.quantize_string)
_SECONDS_PER_HOUR = Decimal("3600")
_HOURS_PER_DAY = Decimal("24")
_DAYS_PER_WEEK = Decimal("7")
_DAYS_PER_MONTH_APPROX = Decimal("30")


class RateType(str, Enum):
    """Unit a rate is quoted in."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


def coerce_rate(rate: Decimal | int | float | str) -> Decimal:
    """Convert a rate to Decimal, rejecting negative and non-finite values."""
    try:
        value = rate if isinstance(rate, Decimal) else Decimal(str(rate))
    except (InvalidOperation, ValueError) as e:
        logger.error("invalid_rate", extra={"rate": str(rate)})
        raise InvalidRateError(rate, "is not a number") from e

    if not value.is_finite():
        reason = "must be finite"
    elif value < 0:
        reason = "must be non-negative"
    else:
        return value
    logger.error("invalid_rate", extra={"rate": str(rate), "reason": reason})
    raise InvalidRateError(rate, reason)


def _elapsed_hours(start: datetime, end: datetime) -> Decimal:
    delta = end - start
    seconds = Decimal(delta.days * 86400 + delta.seconds)
    seconds += Decimal(delta.microseconds) / Decimal(1_000_000)
    return seconds / _SECONDS_PER_HOUR


def _span(start_date: date | datetime, end_date: date | datetime) -> tuple[datetime, datetime]:
    start, end = as_datetime(start_date), as_datetime(end_date)
    if end < start:
        raise InvalidDateRangeError(start_date, end_date)
    return start, end


def _fractional_months(start: datetime, end: datetime) -> Decimal:
    """Whole months between the two months plus both edge-month day ratios."""
    whole = (end.year - start.year) * 12 + (end.month - start.month)
    start_month_days = days_in_month(start.year, start.month)
    end_month_days = days_in_month(end.year, end.month)
    start_ratio = Decimal(start_month_days - start.day + 1) / Decimal(start_month_days)
    end_ratio = Decimal(end.day) / Decimal(end_month_days)
    return Decimal(whole) + start_ratio + end_ratio


def calculate_total_price(
    start_date: date | datetime,
    end_date: date | datetime,
    rate: Decimal | int | float | str,
    quantity: int = 1,
    rate_type: RateType = RateType.HOURLY,
) -> Decimal:
    """
    Price a span at a rate for ``quantity`` units.

    Durations are exact, not rounded up: 90 minutes at an hourly rate bills
    1.5 hours. Monthly pricing counts whole months plus the partial start
    and end months as day ratios.

    Raises:
        InvalidDateRangeError: If end_date is before start_date
        InvalidRateError: If rate is negative, non-finite or not a number
        ValueError: If quantity is below 1
    """
    rate = coerce_rate(rate)
    if quantity < 1:
        raise ValueError("quantity must be at least 1")

    start, end = _span(start_date, end_date)
    rate_type = RateType(rate_type)
    hours = _elapsed_hours(start, end)

    if rate_type == RateType.HOURLY:
        units = hours
    elif rate_type == RateType.DAILY:
        units = hours / _HOURS_PER_DAY
    elif rate_type == RateType.WEEKLY:
        units = hours / (_HOURS_PER_DAY * _DAYS_PER_WEEK)
    else:
        units = _fractional_months(start, end)

    total = (rate * units * quantity).quantize(_CENTS, rounding=ROUND_HALF_UP)

    logger.debug("total_price_calculated", extra={
        "rate_type": rate_type.value,
        "rate": str(rate),
        "units": str(units),
        "quantity": quantity,
        "total_price": str(total),
    })
    return total


def apply_quantity_discount(
    base_price: Decimal,
    quantity: int = 1,
    cost_multiplier: Mapping[str | int, Decimal | str] | None = None,
) -> Decimal:
    """
    Apply the multiplier for the highest quantity threshold reached.

    ``cost_multiplier`` maps a minimum quantity to a price multiplier, e.g.
    ``{"5": "0.95", "10": "0.90"}``. Without a table, or for a single unit,
    the base price is returned unchanged.
    """
    if not cost_multiplier or quantity <= 1:
        return base_price

    thresholds = sorted(
        (int(key), Decimal(str(value))) for key, value in cost_multiplier.items()
    )
    selected = Decimal("1")
    for threshold, multiplier in thresholds:
        if quantity >= threshold:
            selected = multiplier
        else:
            break

    discounted = (base_price * selected).quantize(_CENTS, rounding=ROUND_HALF_UP)
    if selected != 1:
        logger.info("quantity_discount_applied", extra={
            "quantity": quantity,
            "multiplier": str(selected),
            "base_price": str(base_price),
            "discounted_price": str(discounted),
        })
    return discounted


def find_best_rate_type(
    start_date: date | datetime,
    end_date: date | datetime,
    rates: Mapping[RateType | str, Decimal],
) -> RateType:
    """
    Cheapest rate type for a span.

    Monthly is approximated as days / 30. Ties go to the earlier of hourly,
    daily, weekly, monthly.
    """
    start, end = _span(start_date, end_date)
    hours = _elapsed_hours(start, end)
    days = hours / _HOURS_PER_DAY
    by_type = {RateType(key): coerce_rate(value) for key, value in rates.items()}

    prices = [
        (RateType.HOURLY, by_type[RateType.HOURLY] * hours),
        (RateType.DAILY, by_type[RateType.DAILY] * days),
        (RateType.WEEKLY, by_type[RateType.WEEKLY] * days / _DAYS_PER_WEEK),
        (RateType.MONTHLY, by_type[RateType.MONTHLY] * days / _DAYS_PER_MONTH_APPROX),
    ]
    best_type, best_price = prices[0]
    for rate_type, price in prices[1:]:
        if price < best_price:
            best_type, best_price = rate_type, price
    return best_type
