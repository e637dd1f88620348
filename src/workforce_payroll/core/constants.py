"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_REPORT_TIMEZONE = "America/Chicago"

DEFAULT_VARIANCE_WARN_HOURS = 2.0
DEFAULT_DRIFT_WARN_HOURS = 2.0
DEFAULT_EXPECTED_DRAWER_CENTS = 20000

# Reconciliation diffs at or below this many hours count as balanced.
BALANCE_EPSILON_HOURS = 0.01

REMOVED_LAST_ACTION = "removed"
UNKNOWN_NAME = "Unknown"
