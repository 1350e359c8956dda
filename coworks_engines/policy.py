"""
Seating-type policy table.

Static, read-only lookup from each seating-type tag to its
SeatingTypeConstraint. Built once at import; engines receive an optional
``policies`` mapping so callers can inject a loaded table (see
``coworks_config.get_active_policies``) without mutating this one.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from coworks_kernel.domain.seating import (
    BillingCadence,
    SeatingType,
    SeatingTypeConstraint,
)
from coworks_kernel.exceptions import InvalidPolicyError

# Notice period applied when the seating type is missing or unknown
DEFAULT_NOTICE_PERIOD_DAYS = 30

PolicyTable = Mapping[SeatingType, SeatingTypeConstraint]


def build_policy_table(constraints: Iterable[SeatingTypeConstraint]) -> PolicyTable:
    """Freeze constraints into a read-only mapping keyed by seating type."""
    table: dict[SeatingType, SeatingTypeConstraint] = {}
    for constraint in constraints:
        if constraint.seating_type in table:
            raise InvalidPolicyError(
                constraint.seating_type.value, "duplicate seating type in policy table"
            )
        table[constraint.seating_type] = constraint
    return MappingProxyType(table)


SEATING_TYPE_CONSTRAINTS: PolicyTable = build_policy_table((
    SeatingTypeConstraint(
        seating_type=SeatingType.HOT_DESK,
        display_name="Hot Desk",
        billing_cadence=BillingCadence.MONTHLY,
        min_months=2,
        min_seats=1,
        notice_period_days=15,
    ),
    SeatingTypeConstraint(
        seating_type=SeatingType.DEDICATED_DESK,
        display_name="Dedicated Desk",
        billing_cadence=BillingCadence.MONTHLY,
        min_months=3,
        min_seats=10,
        notice_period_days=30,
    ),
    SeatingTypeConstraint(
        seating_type=SeatingType.CUBICLE,
        display_name="Cubicle",
        billing_cadence=BillingCadence.MONTHLY,
        min_months=6,
        min_seats=1,
        notice_period_days=60,
    ),
    SeatingTypeConstraint(
        seating_type=SeatingType.MEETING_ROOM,
        display_name="Meeting Room",
        billing_cadence=BillingCadence.HOURLY,
        min_hours=2,
        min_seats=1,
        notice_period_days=0,
    ),
    SeatingTypeConstraint(
        seating_type=SeatingType.DAILY_PASS,
        display_name="Day Pass",
        billing_cadence=BillingCadence.DAILY,
        min_days=1,
        min_seats=1,
        notice_period_days=0,
    ),
))


def get_constraint(
    seating_type: SeatingType | str | None,
    policies: PolicyTable | None = None,
) -> SeatingTypeConstraint | None:
    """Constraint for a tag, or None when the tag is missing or unknown."""
    tag = SeatingType.parse(seating_type)
    if tag is None:
        return None
    table = SEATING_TYPE_CONSTRAINTS if policies is None else policies
    return table.get(tag)


def notice_period_days(
    seating_type: SeatingType | str | None,
    policies: PolicyTable | None = None,
) -> int:
    constraint = get_constraint(seating_type, policies)
    if constraint is None:
        return DEFAULT_NOTICE_PERIOD_DAYS
    return constraint.notice_period_days
