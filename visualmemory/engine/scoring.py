"""Dynamic Priority Score (DPS) for VisualMemory.

score = base priority score x urgency multiplier x frequency weight

The function is pure: the same task and the same `now` always produce the
same score. Nothing is cached between calls, so a task whose due date was
added or removed is scored from scratch on the next cycle.
"""

from datetime import datetime, timedelta
from typing import Optional

from visualmemory.models.task import AppTask, enum_to_value
from visualmemory.models.constants import (
    BASE_PRIORITY_SCORES,
    UNKNOWN_BASE_PRIORITY_SCORE,
    FREQUENCY_WEIGHTS,
    UNKNOWN_FREQUENCY_WEIGHT,
    NO_DUE_DATE_MULTIPLIER,
    OVERDUE_BASE_MULTIPLIER,
    OVERDUE_MINUTES_PER_STEP,
    OVERDUE_MAX_BONUS,
    URGENCY_BRACKETS,
    DISTANT_DUE_MULTIPLIER,
)


def base_priority_score(base_priority) -> float:
    """Score for the importance tier (high 100, medium 60, low 30, other 50)."""
    return BASE_PRIORITY_SCORES.get(enum_to_value(base_priority).lower(), UNKNOWN_BASE_PRIORITY_SCORE)


def frequency_weight(frequency) -> float:
    """Weight for the recurrence class.

    Rarer obligations are costlier to miss, so they weigh more
    (daily 0.7, weekly 1.0, monthly 1.3, yearly 1.5, once 1.4, other 1.0).
    """
    return FREQUENCY_WEIGHTS.get(enum_to_value(frequency).lower(), UNKNOWN_FREQUENCY_WEIGHT)


def urgency_multiplier(remaining: Optional[timedelta]) -> float:
    """Multiplier for deadline proximity.

    Args:
        remaining: due_at - now (negative when overdue), or None without a due date

    Returns:
        0.5 without a due date, 10x..30x when overdue, 8.0 down to 1.0 otherwise
    """
    if remaining is None:
        return NO_DUE_DATE_MULTIPLIER

    if remaining < timedelta(0):
        overdue_minutes = abs(remaining.total_seconds()) / 60
        return OVERDUE_BASE_MULTIPLIER + min(overdue_minutes / OVERDUE_MINUTES_PER_STEP, OVERDUE_MAX_BONUS)

    for upper_bound, multiplier in URGENCY_BRACKETS:
        if remaining < upper_bound:
            return multiplier
    return DISTANT_DUE_MULTIPLIER


def calculate_dps(task: AppTask, now: datetime) -> float:
    """Compute the Dynamic Priority Score of a task at `now`.

    Args:
        task: Task to score (completion state is not considered here)
        now: Current instant

    Returns:
        Non-negative score; higher means more urgent
    """
    return (
        base_priority_score(task.base_priority)
        * urgency_multiplier(task.time_remaining(now))
        * frequency_weight(task.frequency)
    )
