"""Task creation factory for VisualMemory.

This module centralizes task creation logic so that every entry point
(API form, onboarding import, tests) applies the same defaults.
"""

import uuid
from datetime import datetime
from typing import Optional, Dict, Any

from visualmemory.models.task import AppTask, BasePriority, Frequency
from visualmemory.models.constants import DEFAULT_CATEGORY, DEFAULT_DURATION_MINUTES


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary."""
    return {
        "category": DEFAULT_CATEGORY,
        "base_priority": BasePriority.MEDIUM,
        "frequency": Frequency.ONCE,
        "due_at": None,
        "duration_min": DEFAULT_DURATION_MINUTES,
    }


def create_task(
    title: str,
    base_priority: Optional[Any] = None,
    frequency: Optional[Any] = None,
    due_at: Optional[datetime] = None,
    category: Optional[str] = None,
    duration_min: Optional[int] = None,
    task_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> AppTask:
    """Create an incomplete task with defaults, allowing overrides.

    Args:
        title: Task title (required)
        base_priority: Importance tier (defaults to medium)
        frequency: Recurrence class (defaults to once)
        due_at: Combined due date and time (None = no deadline)
        category: Display category label
        duration_min: Expected duration in minutes
        task_id: Explicit id (e.g. carried over from an import source); a UUID v4 otherwise
        created_at: Creation timestamp (defaults to now)

    Returns:
        AppTask with defaults applied
    """
    defaults = create_task_defaults()

    return AppTask(
        id=task_id or str(uuid.uuid4()),
        title=title,
        category=category if category is not None else defaults["category"],
        base_priority=base_priority if base_priority is not None else defaults["base_priority"],
        frequency=frequency if frequency is not None else defaults["frequency"],
        due_at=due_at if due_at is not None else defaults["due_at"],
        duration_min=duration_min if duration_min is not None else defaults["duration_min"],
        is_completed=False,
        completed_at=None,
        last_rank_position=None,
        created_at=created_at or datetime.now(),
    )
