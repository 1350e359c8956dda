"""
Seating types and their booking constraints.

SeatingTypeConstraint is declarative data only: the engines read it, nothing
computes inside it beyond self-validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from coworks_kernel.exceptions import InvalidPolicyError


class SeatingType(str, Enum):
    """Closed set of seating-type tags."""

    HOT_DESK = "HOT_DESK"
    DEDICATED_DESK = "DEDICATED_DESK"
    CUBICLE = "CUBICLE"
    MEETING_ROOM = "MEETING_ROOM"
    DAILY_PASS = "DAILY_PASS"

    @classmethod
    def parse(cls, value: SeatingType | str | None) -> SeatingType | None:
        """Resolve a tag to a member, or None when missing or unknown."""
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


class BillingCadence(str, Enum):
    """How a seating type is billed."""

    HOURLY = "hourly"
    DAILY = "daily"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class SeatingTypeConstraint:
    """
    Booking constraints for one seating type.

    Exactly one of min_months / min_hours / min_days is set, and it must be
    the one matching billing_cadence.
    """

    seating_type: SeatingType
    display_name: str
    billing_cadence: BillingCadence
    min_months: int | None = None
    min_hours: int | None = None
    min_days: int | None = None
    min_seats: int = 1
    notice_period_days: int = 0

    def __post_init__(self) -> None:
        tag = self.seating_type.value
        populated = {
            name: getattr(self, name)
            for name in ("min_months", "min_hours", "min_days")
            if getattr(self, name) is not None
        }
        if len(populated) != 1:
            raise InvalidPolicyError(
                tag, "exactly one of min_months, min_hours, min_days must be set"
            )
        expected = _CADENCE_MINIMUM_FIELD[self.billing_cadence]
        if expected not in populated:
            raise InvalidPolicyError(
                tag, f"{self.billing_cadence.value} cadence requires {expected}"
            )
        if populated[expected] < 0:
            raise InvalidPolicyError(tag, f"{expected} must be non-negative")
        if self.min_seats < 1:
            raise InvalidPolicyError(tag, "min_seats must be at least 1")
        if self.notice_period_days < 0:
            raise InvalidPolicyError(tag, "notice_period_days must be non-negative")

    @property
    def is_monthly(self) -> bool:
        return self.billing_cadence == BillingCadence.MONTHLY

    @property
    def minimum_duration(self) -> int:
        """The populated minimum, in units of the billing cadence."""
        return getattr(self, _CADENCE_MINIMUM_FIELD[self.billing_cadence])


_CADENCE_MINIMUM_FIELD = {
    BillingCadence.MONTHLY: "min_months",
    BillingCadence.HOURLY: "min_hours",
    BillingCadence.DAILY: "min_days",
}
