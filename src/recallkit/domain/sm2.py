"""
SuperMemo-2 review-state transition.

Pure computation: maps a review state and a 0-5 grade to the next state.

Grades:
    5 - perfect response
    4 - correct response after a hesitation
    3 - correct response recalled with serious difficulty
    2 - incorrect response; the correct one seemed easy to recall
    1 - incorrect response; the correct one remembered
    0 - complete blackout
"""

import math
from dataclasses import replace

from .constants import MAX_GRADE, MIN_EASINESS_FACTOR, MIN_GRADE, SUCCESS_GRADE
from .errors import InvalidGradeError
from .models import ReviewState


def validate_grade(grade: object) -> int:
    """Return ``grade`` if it is an integer in 0..5, else raise InvalidGradeError."""
    if isinstance(grade, bool) or not isinstance(grade, int):
        raise InvalidGradeError(grade)
    if not MIN_GRADE <= grade <= MAX_GRADE:
        raise InvalidGradeError(grade)
    return grade


def round_half_up(value: float) -> int:
    # round() would send 2.5 -> 2; intervals round halves upward
    return math.floor(value + 0.5)


def next_easiness_factor(easiness_factor: float, grade: int) -> float:
    """
    EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3.

    No upper bound is applied.
    """
    miss = MAX_GRADE - grade
    updated = easiness_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return max(MIN_EASINESS_FACTOR, updated)


def transition(state: ReviewState, grade: int) -> ReviewState:
    """
    Compute the next review state after a graded response.

    Args:
        state: Current state of the item.
        grade: Response quality, 0-5. Grades >= 3 count as success.

    Returns:
        A new ReviewState. ``last_reviewed_at`` and ``memo`` are carried over
        unchanged; callers stamp the review time themselves.

    Raises:
        InvalidGradeError: If grade is not an integer in 0..5.
    """
    grade = validate_grade(grade)

    if grade >= SUCCESS_GRADE:
        if state.repetition == 0:
            interval = 1
        elif state.repetition == 1:
            interval = 6
        else:
            interval = round_half_up(state.interval * state.easiness_factor)
        repetition = state.repetition + 1
    else:
        repetition = 0
        interval = 1

    return replace(
        state,
        interval=interval,
        repetition=repetition,
        easiness_factor=next_easiness_factor(state.easiness_factor, grade),
    )
