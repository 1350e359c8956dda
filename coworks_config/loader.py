"""
Policy Table Loader (``coworks_config.loader``).

Responsibility
--------------
Loads a seating-type policy YAML file and parses it into frozen
``SeatingTypeConstraint`` instances keyed by seating type.  Runtime callers
go through ``coworks_config.get_active_policies()`` rather than calling this
module directly.

Expected layout::

    version: 1
    seating_types:
      - seating_type: HOT_DESK
        display_name: Hot Desk
        billing_cadence: monthly
        min_months: 2
        min_seats: 1
        notice_period_days: 15

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown seating type or cadence, inconsistent minimums, duplicate tags
  -> ``InvalidPolicyError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from coworks_engines.policy import PolicyTable, build_policy_table
from coworks_kernel.domain.seating import (
    BillingCadence,
    SeatingType,
    SeatingTypeConstraint,
)
from coworks_kernel.exceptions import InvalidPolicyError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _optional_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    return None if value is None else int(value)


def parse_constraint(data: dict[str, Any]) -> SeatingTypeConstraint:
    """Parse a ``SeatingTypeConstraint`` from a dict."""
    raw_tag = data["seating_type"]
    seating_type = SeatingType.parse(raw_tag)
    if seating_type is None:
        raise InvalidPolicyError(str(raw_tag), "unknown seating type")

    try:
        cadence = BillingCadence(str(data["billing_cadence"]).lower())
    except ValueError as e:
        raise InvalidPolicyError(
            seating_type.value, f"unknown billing cadence {data['billing_cadence']!r}"
        ) from e

    return SeatingTypeConstraint(
        seating_type=seating_type,
        display_name=data.get("display_name", seating_type.value.replace("_", " ").title()),
        billing_cadence=cadence,
        min_months=_optional_int(data, "min_months"),
        min_hours=_optional_int(data, "min_hours"),
        min_days=_optional_int(data, "min_days"),
        min_seats=int(data.get("min_seats", 1)),
        notice_period_days=int(data.get("notice_period_days", 0)),
    )


def parse_policy_table(data: dict[str, Any]) -> PolicyTable:
    """Parse the ``seating_types`` list of a policy document."""
    return build_policy_table(
        parse_constraint(entry) for entry in data.get("seating_types", [])
    )


def load_policy_table(path: Path) -> PolicyTable:
    """Load and parse a policy YAML file into a read-only policy table."""
    return parse_policy_table(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
