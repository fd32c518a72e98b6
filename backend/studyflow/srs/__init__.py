"""SRS helpers (SM-2 scheduling, interval text, UTC time)."""

from .sm2 import (
    MAX_INTERVAL_DAYS,
    RATING_QUALITY,
    Rating,
    ReviewState,
    SM2State,
    apply_sm2,
    compute_next_state,
    new_review_state,
)
from .intervals import describe_interval, preview_all, preview_interval
from .time import (
    utc_now,
    utc_now_iso,
    utc_datetime_to_iso_z,
    parse_iso_z,
    day_key,
    day_key_offset,
)

__all__ = [
    "MAX_INTERVAL_DAYS",
    "RATING_QUALITY",
    "Rating",
    "ReviewState",
    "SM2State",
    "apply_sm2",
    "compute_next_state",
    "new_review_state",
    "describe_interval",
    "preview_all",
    "preview_interval",
    "utc_now",
    "utc_now_iso",
    "utc_datetime_to_iso_z",
    "parse_iso_z",
    "day_key",
    "day_key_offset",
]
