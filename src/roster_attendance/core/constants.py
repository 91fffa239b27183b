"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_REPORT_DAYS = 7

# Used only when a roster carries no grace_period of its own.
DEFAULT_GRACE_MINUTES = 0

# Upper bounds (inclusive) for late_severity buckets.
MINOR_LATE_MINUTES = 15
MAJOR_LATE_MINUTES = 30

ROSTER_MISSING_NOTE = "roster missing"
DAY_OFF_NOTE = "scheduled day off"
