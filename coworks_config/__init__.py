"""
coworks_config -- single public entrypoint for seating-type policy configuration.

Responsibility:
    Provides the runtime way to obtain a policy table from YAML through
    ``get_active_policies()``.  The returned mapping is read-only and can be
    passed to any engine function as ``policies=``.

Architecture position:
    Configuration -- sits above ``coworks_kernel`` and ``coworks_engines``.
    Neither of those packages imports from ``coworks_config``.

Failure modes:
    - ``FileNotFoundError`` -- the policy file does not exist.
    - ``yaml.YAMLError`` -- the policy file is not valid YAML.
    - ``InvalidPolicyError`` -- a constraint is inconsistent.

Audit relevance:
    Every successful ``get_active_policies()`` call emits a
    ``COWORKS_CONFIG_TRACE`` log entry with the file path, checksum and
    number of seating types, tying billing results back to the exact policy
    version that produced them.
"""

from __future__ import annotations

from pathlib import Path

from coworks_config.loader import compute_checksum, load_yaml_file, parse_policy_table
from coworks_engines.policy import PolicyTable
from coworks_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_POLICY_PATH = Path(__file__).parent / "policies" / "seating_types.yaml"


def get_active_policies(config_path: Path | None = None) -> PolicyTable:
    """Load the seating-type policy table.

    Args:
        config_path: Override path to a policy YAML file. Defaults to the
            packaged ``policies/seating_types.yaml``.

    Returns:
        Read-only mapping of SeatingType to SeatingTypeConstraint.
    """
    path = config_path or DEFAULT_POLICY_PATH
    data = load_yaml_file(path)
    table = parse_policy_table(data)

    _logger.info(
        "COWORKS_CONFIG_TRACE",
        extra={
            "trace_type": "COWORKS_CONFIG_TRACE",
            "config_path": str(path),
            "config_version": data.get("version"),
            "checksum": compute_checksum(data),
            "seating_type_count": len(table),
        },
    )
    return table


__all__ = ["DEFAULT_POLICY_PATH", "get_active_policies"]
