"""SRS helpers (quality mapping, SM-2 state, scheduling time).

The lifecycle and mistake modules depend on the models package and are
imported by their full path (medstride.srs.lifecycle, medstride.srs.mistakes).
"""

from .quality import map_quality, score_percentage
from .sm2 import ReviewState, initial_review_state, next_state
from .time import (
    utc_now,
    utc_now_iso,
    utc_datetime_to_iso_z,
    parse_iso_z,
    add_days,
    add_days_iso,
    classify_due,
    is_due,
)

__all__ = [
    "map_quality",
    "score_percentage",
    "ReviewState",
    "initial_review_state",
    "next_state",
    "utc_now",
    "utc_now_iso",
    "utc_datetime_to_iso_z",
    "parse_iso_z",
    "add_days",
    "add_days_iso",
    "classify_due",
    "is_due",
]
