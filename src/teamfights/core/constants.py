"""
Configuration constants for team battle scheduling.

This module centralizes the defaults shared by the schedule generator, the
creation client and the cycle state machine so the timing policy can be
tuned in one place.
"""

from datetime import date, datetime, timedelta, timezone

# =============================================================================
# Remote service
# =============================================================================

DEFAULT_SERVER = "https://lichess.org"
TOURNAMENT_API_PATH = "/api/tournament"
DEFAULT_TIMEOUT = 10.0
DEFAULT_NB_LEADERS = 20

# =============================================================================
# Battle defaults
# =============================================================================

DEFAULT_HOST_TEAM_ID = "rare"
DEFAULT_TEAMS = ("rare", "darkonteams", "tekio")
DEFAULT_MINUTES = 720  # 12 hours
DEFAULT_CLOCK_TIME = 3
DEFAULT_CLOCK_INCREMENT = 0
DEFAULT_RATED = True
DEFAULT_VARIANT = "standard"

# =============================================================================
# Schedule shape
# =============================================================================

DAYS_PER_CYCLE = 7
SLOTS_PER_CYCLE = 14
OPENING_TIME = (7, 0)  # 07:00 UTC
CLOSING_TIME = (18, 58)  # 18:58 UTC

NAME_TEMPLATE = "LMAO {label} '{number}'"
DESCRIPTION_TEMPLATE = (
    "Welcome to the LMAO {label} '{number}' Team Battle! "
    "Have fun and fair play!"
)

# Historical bootstrap: the first cycle opened with Night 24.
SEED_SEQUENCE_NUMBER = 24
SEED_CLOSING_START = datetime(2025, 9, 7, 18, 58, tzinfo=timezone.utc)
SEED_ANCHOR_DATE = date(2025, 9, 7)

# =============================================================================
# Batching policy
# =============================================================================

BATCH_BOUNDS = {
    1: (0, 4),
    2: (4, 8),
    3: (8, 12),
    4: (12, 14),
}
BATCH_COUNT = len(BATCH_BOUNDS)
BATCH_INTERVAL = timedelta(hours=5)
CYCLE_INTERVAL = timedelta(days=7)
PACING_SECONDS = 10.0

# =============================================================================
# Persistence
# =============================================================================

DEFAULT_STATE_FILE = "config/batch-tournament.state.json"
DEFAULT_LAST_COMPLETED_SEQUENCE_NUMBER = SEED_SEQUENCE_NUMBER - 1

# =============================================================================
# Process environment
# =============================================================================

TOKEN_ENV = "OAUTH_TOKEN"
DRY_RUN_ENV = "DRY_RUN"
TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})
