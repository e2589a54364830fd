"""Quiz score to review quality mapping.

The quality grade is the 0-5 scale consumed by the SM-2 scheduler. It is
derived from the percentage of correctly answered questions using fixed,
inclusive thresholds (highest first):

    >= 90% -> 5
    >= 80% -> 4
    >= 70% -> 3
    >= 60% -> 2
    >= 50% -> 1
    otherwise -> 0
"""

from __future__ import annotations

from medstride.errors import InvalidInputError


# (minimum percentage, quality), highest first
QUALITY_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (90, 5),
    (80, 4),
    (70, 3),
    (60, 2),
    (50, 1),
)

# Quality grades at or above this count as a successful review
PASSING_QUALITY = 3


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_score(correct_count: int, total_questions: int) -> None:
    if not _is_int(correct_count) or not _is_int(total_questions):
        raise InvalidInputError("correct_count and total_questions must be integers")
    if total_questions <= 0:
        raise InvalidInputError(f"total_questions must be > 0, got {total_questions}")
    if correct_count < 0 or correct_count > total_questions:
        raise InvalidInputError(
            f"correct_count must be between 0 and {total_questions}, got {correct_count}"
        )


def score_percentage(correct_count: int, total_questions: int) -> float:
    """Return the score as a percentage in [0, 100]."""
    _validate_score(correct_count, total_questions)
    return correct_count / total_questions * 100


def map_quality(correct_count: int, total_questions: int) -> int:
    """Map a quiz score to a quality grade in 0..5.

    Thresholds are compared with integer arithmetic so that boundaries such as
    7/10 (exactly 70%) are never lost to float rounding.

    Raises:
        InvalidInputError: If the question set is empty or the score is out of range.
    """
    _validate_score(correct_count, total_questions)

    scaled = correct_count * 100
    for threshold, quality in QUALITY_THRESHOLDS:
        if scaled >= threshold * total_questions:
            return quality
    return 0
