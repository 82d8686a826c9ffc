"""Danger zone filter for VisualMemory.

The danger zone surfaces the few tasks that need attention right now:
due within the next 30 minutes (or overdue by less than 24 hours),
not low priority, and not a routine personal-care or leisure activity.
"""

from datetime import datetime, timedelta
from typing import List

from visualmemory.models.task import AppTask, BasePriority, RankedTask, enum_to_value
from visualmemory.models.constants import (
    DANGER_ZONE_LEAD,
    DANGER_ZONE_OVERDUE_FLOOR,
    ROUTINE_KEYWORDS,
)


def is_routine_task(task: AppTask) -> bool:
    """Check if a task title names a low-stakes routine activity.

    Matching is a case-insensitive substring test against ROUTINE_KEYWORDS.
    """
    title = (task.title or "").lower()
    return any(keyword in title for keyword in ROUTINE_KEYWORDS)


def is_in_danger_zone(task: AppTask, now: datetime) -> bool:
    """Check if a single task qualifies for the danger zone at `now`."""
    if is_routine_task(task):
        return False
    if enum_to_value(task.base_priority) == BasePriority.LOW.value:
        return False

    remaining = task.time_remaining(now)
    if remaining is None:
        return False
    return -DANGER_ZONE_OVERDUE_FLOOR < remaining < DANGER_ZONE_LEAD


def filter_danger_zone(ranked_tasks: List[RankedTask], now: datetime) -> List[RankedTask]:
    """Select danger zone tasks from a ranking, keeping score order.

    Args:
        ranked_tasks: Output of a ranking cycle (highest score first)
        now: Instant the ranking was computed for

    Returns:
        Ranked tasks that qualify, in the same order
    """
    return [ranked for ranked in ranked_tasks if is_in_danger_zone(ranked.task, now)]
