"""Application-wide constants."""
from datetime import timedelta


# Trending score parameters
HALF_LIFE_DAYS = 3  # An event this old contributes half as much as a fresh one
LOOKBACK_WINDOW = timedelta(days=28)  # Older events are ignored entirely
POPULARITY_WEIGHT = 0.3
RECENCY_WEIGHT = 0.7

# Minimum spacing between accepted copies of one formula by one session
RATE_LIMIT_WINDOW = timedelta(seconds=10)

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


# Session cookie configuration
class SessionCookie:
    """Session cookie constants."""
    NAME = "sid"
    MAX_AGE_SECONDS = 60 * 60 * 24 * 30 * 6  # Six months
    SAME_SITE = "lax"
    SIGNER_SALT = "sid"
