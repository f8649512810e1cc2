"""Grade calculation for a finished character."""
from typing import Callable, Optional

from strokecoach.config import settings

BEST_GRADE = 1
WORST_GRADE = 3

WarningPolicy = Callable[[str], int]


def grade(penalty_count: int, max_penalties: Optional[int] = None) -> int:
    """Map accumulated penalty points to a grade from 1 (best) to 3.

    One forced reveal worth of penalties (``max_penalties``) is enough
    to reach the worst grade.
    """
    if penalty_count < 0:
        raise ValueError(f"Penalty count cannot be negative: {penalty_count}")
    if max_penalties is None:
        max_penalties = settings.grading.max_penalties
    return min(2 * penalty_count // max_penalties + 1, WORST_GRADE)


def no_warning_penalty(warning: str) -> int:
    """Recognizer warnings are shown but never penalized."""
    return 0


def fixed_warning_penalty(weight: int) -> WarningPolicy:
    """Penalize every recognizer warning by the same weight."""
    if weight < 0:
        raise ValueError(f"Warning penalty cannot be negative: {weight}")

    def policy(warning: str) -> int:
        return weight

    return policy


def get_warning_policy() -> WarningPolicy:
    """Get the warning policy selected by GRADING_WARNING_PENALTY."""
    if settings.grading.warning_penalty:
        return fixed_warning_penalty(settings.grading.warning_penalty)
    return no_warning_penalty
