"""SM-2 review scheduling.

The scheduler is pure: given a quality grade, the previous state and `now`,
it returns the next state without touching anything else.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from medstride.errors import InvalidInputError
from medstride.srs.quality import PASSING_QUALITY
from medstride.srs.time import add_days, utc_now


INITIAL_INTERVAL = 1
INITIAL_EASINESS_FACTOR = 2.5
MIN_EASINESS_FACTOR = 1.3


@dataclass(frozen=True)
class ReviewState:
    interval: int
    repetitions: int
    easiness_factor: float
    next_review_at: datetime


def initial_review_state(now: datetime | None = None) -> ReviewState:
    """State of an exercise that has never been reviewed (due immediately)."""
    return ReviewState(
        interval=INITIAL_INTERVAL,
        repetitions=0,
        easiness_factor=INITIAL_EASINESS_FACTOR,
        next_review_at=now or utc_now(),
    )


def _clamp_easiness_factor(ef: float) -> float:
    return max(MIN_EASINESS_FACTOR, ef)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def validate_quality(quality: int) -> None:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidInputError(f"quality must be an integer, got {quality!r}")
    if quality < 0 or quality > 5:
        raise InvalidInputError(f"quality must be between 0 and 5, got {quality}")


def validate_state(state: ReviewState) -> None:
    """Reject states that could not have been produced by the scheduler."""
    if isinstance(state.interval, bool) or not isinstance(state.interval, int) or state.interval < 1:
        raise InvalidInputError(f"interval must be an integer >= 1, got {state.interval!r}")
    if (
        isinstance(state.repetitions, bool)
        or not isinstance(state.repetitions, int)
        or state.repetitions < 0
    ):
        raise InvalidInputError(f"repetitions must be an integer >= 0, got {state.repetitions!r}")
    ef = state.easiness_factor
    if isinstance(ef, bool) or not isinstance(ef, (int, float)) or math.isnan(ef) or ef < MIN_EASINESS_FACTOR:
        raise InvalidInputError(f"easiness_factor must be a number >= {MIN_EASINESS_FACTOR}, got {ef!r}")


def next_state(quality: int, previous: ReviewState, now: datetime | None = None) -> ReviewState:
    """Compute the state following a review graded `quality`.

    quality: 0-5

    Rules:
    - if q >= 3:
        repetitions 0 -> interval 1
        repetitions 1 -> interval 6
        otherwise     -> interval = round(previous interval * previous EF)
        repetitions += 1
    - if q < 3: repetitions = 0, interval = 1
    - EF' = EF + (0.1 - (5-q)*(0.08 + (5-q)*0.02)), clamped to >= 1.3
    - next review = now + interval calendar days

    Raises:
        InvalidInputError: If quality is out of range or `previous` is malformed.
    """
    validate_quality(quality)
    validate_state(previous)

    if now is None:
        now = utc_now()

    if quality >= PASSING_QUALITY:
        if previous.repetitions == 0:
            interval = 1
        elif previous.repetitions == 1:
            interval = 6
        else:
            interval = max(1, _round_half_up(previous.interval * previous.easiness_factor))
        repetitions = previous.repetitions + 1
    else:
        interval = 1
        repetitions = 0

    penalty = 5 - quality
    ef = previous.easiness_factor + (0.1 - penalty * (0.08 + penalty * 0.02))

    return ReviewState(
        interval=interval,
        repetitions=repetitions,
        easiness_factor=_clamp_easiness_factor(ef),
        next_review_at=add_days(now, interval),
    )
