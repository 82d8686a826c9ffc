"""Proto-task model handed over by onboarding / bulk import sources."""

import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from visualmemory.models.constants import DEFAULT_CATEGORY, ONBOARDING_DEFAULT_DURATION_MINUTES
from visualmemory.models.task import BasePriority, Frequency, parse_base_priority, parse_frequency, to_local_naive


class OnboardingTask(BaseModel):
    """A recurrence description that the engine turns into a concrete task.

    Notes:
    - `time` is "HH:mm" (24h) or empty for "any time".
    - `days_of_week` is only used for weekly tasks (full or three-letter names).
    - `day_of_month` is used for monthly and yearly tasks, `month_of_year` for yearly.
    - `due_date` is only used for one-time tasks.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str
    category: str = DEFAULT_CATEGORY
    frequency: Frequency = Frequency.DAILY
    priority: BasePriority = BasePriority.MEDIUM
    time: str = ""
    due_date: Optional[datetime] = None
    days_of_week: List[str] = Field(default_factory=list)
    day_of_month: Optional[int] = None
    month_of_year: Optional[int] = Field(None, ge=1, le=12)
    duration_min: int = Field(ONBOARDING_DEFAULT_DURATION_MINUTES, ge=0)
    is_selected: bool = True

    class Config:
        use_enum_values = True

    @field_validator("frequency", mode="before")
    @classmethod
    def _decode_frequency(cls, v):
        return parse_frequency(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _decode_priority(cls, v):
        return parse_base_priority(v)

    @field_validator("due_date")
    @classmethod
    def _normalize_due_date(cls, v):
        return to_local_naive(v)
