"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_DAYS = 7

HOURS_PER_DAY = 8
MIN_DURATION = 0.5

MIN_REASON_LENGTH = 10
MIN_REJECTED_REASON_LENGTH = 5

MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6
