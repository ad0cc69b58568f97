"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DUPLICATE_PUNCH_WINDOW_SECONDS = 60
MAX_DESCRIPTION_LENGTH = 500
MAX_BACKDATE_DAYS = 7
MAX_FUTURE_SKEW_MINUTES = 5

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SUMMARY_DAYS = 30

MAX_FULL_NAME_LENGTH = 100
MIN_PASSWORD_LENGTH = 6

DEFAULT_TOKEN_EXPIRATION_MINUTES = 480
DEFAULT_TOKEN_REFRESH_MAX_AGE_DAYS = 7
DEFAULT_PUNCH_LOCK_TIMEOUT_SECONDS = 5
