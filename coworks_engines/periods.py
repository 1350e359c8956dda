"""
Calendar-month helpers for booking periods.

Pure functions over immutable ``date`` values; nothing here mutates its
arguments. Month arithmetic clamps the day to the target month's length.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime
from decimal import Decimal


def as_date(value: date | datetime) -> date:
    """Drop the time component, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value


def as_datetime(value: date | datetime) -> datetime:
    """Promote a plain date to midnight of that day."""
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_of_month(d: date) -> date:
    return d.replace(day=1)


def last_of_month(d: date) -> date:
    return d.replace(day=days_in_month(d.year, d.month))


def is_last_day_of_month(d: date) -> bool:
    return d.day == days_in_month(d.year, d.month)


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day (Jan 31 + 1 -> Feb 28/29)."""
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(d.day, days_in_month(year, month)))


def next_month(d: date) -> date:
    """First day of the month after ``d``."""
    return add_months(first_of_month(d), 1)


def same_month(a: date, b: date) -> bool:
    return a.year == b.year and a.month == b.month


def month_label(d: date) -> str:
    """English month and year, e.g. ``March 2023``."""
    return f"{calendar.month_name[d.month]} {d.year}"


def elapsed_months(start: date, end: date) -> Decimal:
    """
    Fractional months covered by an inclusive start..end span.

    Measured the way billing lines are built: the start month's remaining
    days over its length, whole months in between, then the end month's
    days over its length. 2023-01-01..2023-03-31 is 3; 2023-03-21..
    2023-04-30 is 11/31 + 1; 2023-01-31..2023-02-01 is 1/31 + 1/28.
    """
    if same_month(start, end):
        return Decimal(end.day - start.day + 1) / Decimal(days_in_month(end.year, end.month))

    start_days = days_in_month(start.year, start.month)
    head = Decimal(start_days - start.day + 1) / Decimal(start_days)
    between = (end.year - start.year) * 12 + (end.month - start.month) - 1
    tail = Decimal(end.day) / Decimal(days_in_month(end.year, end.month))
    return head + Decimal(between) + tail
