"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Grace period after a check-in window closes before a miss is declared.
WINDOW_BUFFER_MINUTES = 2

LOOKBACK_DAYS = 90
READINESS_LOOKBACK_DAYS = 7
MISS_WINDOWS = (30, 60, 90)

# 0 = Sunday ... 6 = Saturday
DEFAULT_WORK_DAYS = frozenset({1, 2, 3, 4, 5})

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

NOTES_MAX_LENGTH = 500
