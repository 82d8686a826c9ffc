"""Next due date for onboarding recurrence descriptions.

Onboarding hands over "every Tuesday at 08:00" style descriptions; the
engine needs one concrete `due_at` per task. Everything here is
deterministic given `now`.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import List, Optional

from visualmemory.models.constants import MAX_ANCHOR_DAY_OF_MONTH
from visualmemory.models.onboarding import OnboardingTask
from visualmemory.models.task import AppTask, Frequency, enum_to_value
from visualmemory.models.task_factory import create_task


# Python weekday: Monday=0 ... Sunday=6
_WEEKDAYS = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}


def _anchor_day(day: Optional[int]) -> int:
    return max(1, min(day or 1, MAX_ANCHOR_DAY_OF_MONTH))


def apply_time_of_day(dt: datetime, time_str: Optional[str]) -> datetime:
    """Set the hour and minute of `dt` from an "HH:mm" string.

    Empty or unparseable strings leave `dt` unchanged.
    """
    if not time_str:
        return dt
    parts = time_str.strip().split(":")
    if len(parts) < 2:
        return dt
    try:
        return dt.replace(hour=int(parts[0]), minute=int(parts[1]), second=0, microsecond=0)
    except ValueError:
        return dt


def next_weekly_occurrence(days_of_week: List[str], now: datetime) -> Optional[datetime]:
    """Next occurrence of the first recognized weekday name, strictly after today.

    A weekday equal to today maps to one week ahead. The time of day of
    `now` is kept. Returns None when no name is recognized.
    """
    today = now.weekday()
    for day_name in days_of_week:
        target = _WEEKDAYS.get(day_name.strip().lower())
        if target is None:
            continue
        days_to_add = target - today
        if days_to_add <= 0:
            days_to_add += 7
        return now + timedelta(days=days_to_add)
    return None


def next_monthly_occurrence(day: Optional[int], now: datetime) -> datetime:
    """Midnight of `day` this month if still ahead of `now`, otherwise next month.

    Days past the 28th are clamped to the 28th.
    """
    candidate = datetime(now.year, now.month, _anchor_day(day))
    if candidate > now:
        return candidate
    if now.month == 12:
        return candidate.replace(year=now.year + 1, month=1)
    return candidate.replace(month=now.month + 1)


def next_yearly_occurrence(month: Optional[int], day: Optional[int], now: datetime) -> datetime:
    """Midnight of month/day this year if still ahead of `now`, otherwise next year."""
    month = max(1, min(month or 1, 12))
    candidate = datetime(now.year, month, _anchor_day(day))
    if candidate > now:
        return candidate
    return candidate.replace(year=now.year + 1)


def compute_due_at(proto: OnboardingTask, now: datetime) -> datetime:
    """Concrete due instant for an onboarding task.

    - daily: today
    - weekly: next listed weekday (today if none is recognized)
    - monthly: next `day_of_month` (defaults to the 1st)
    - yearly: next `month_of_year`/`day_of_month` (defaults to January 1st)
    - once: `due_date`, or today
    The optional "HH:mm" time is applied last.
    """
    frequency = enum_to_value(proto.frequency)

    if frequency == Frequency.WEEKLY.value:
        due = next_weekly_occurrence(proto.days_of_week, now) or now
    elif frequency == Frequency.MONTHLY.value:
        due = next_monthly_occurrence(proto.day_of_month, now)
    elif frequency == Frequency.YEARLY.value:
        due = next_yearly_occurrence(proto.month_of_year, proto.day_of_month, now)
    elif frequency == Frequency.ONCE.value:
        due = proto.due_date or now
    else:
        due = now

    return apply_time_of_day(due, proto.time)


def build_task_from_onboarding(proto: OnboardingTask, now: datetime) -> AppTask:
    """Turn an onboarding description into an incomplete AppTask (same id)."""
    return create_task(
        title=proto.title,
        base_priority=proto.priority,
        frequency=proto.frequency,
        due_at=compute_due_at(proto, now),
        category=proto.category,
        duration_min=proto.duration_min,
        task_id=proto.id,
        created_at=now,
    )
