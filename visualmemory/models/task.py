"""Task data model for VisualMemory."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from visualmemory.models.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_DURATION_MINUTES,
    SCORE_URGENCY_BANDS,
)


class BasePriority(str, Enum):
    """User-assigned importance tier."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"  # Unrecognized stored value (scores as a mid-value)


class Frequency(str, Enum):
    """Recurrence class (weights a task, does not schedule it)."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    ONCE = "once"
    UNKNOWN = "unknown"


class UrgencyLevel(str, Enum):
    """Deadline proximity band used for coloring."""
    OVERDUE = "overdue"
    CRITICAL = "critical"  # < 15 min
    URGENT = "urgent"  # < 1 hour
    SOON = "soon"  # < 4 hours
    LATER = "later"
    NONE = "none"  # no due date


class ScoreUrgency(str, Enum):
    """Score band used for flashing / glow treatment."""
    CRITICAL = "critical"
    VERY_HIGH = "very_high"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    MINIMAL = "minimal"


def enum_to_value(enum_obj: Any) -> str:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance or string value

    Returns:
        String value of the enum, or the string itself if already a string
    """
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


_FREQUENCY_ALIASES = {
    "one-time": Frequency.ONCE.value,
    "one time": Frequency.ONCE.value,
    "onetime": Frequency.ONCE.value,
}


def _tolerant_value(value: Any, enum_class, aliases: Optional[dict] = None) -> str:
    """Lowercase a raw value and map anything unrecognized to UNKNOWN."""
    if isinstance(value, Enum):
        value = value.value
    if not isinstance(value, str):
        return enum_class.UNKNOWN.value
    normalized = value.strip().lower()
    if aliases:
        normalized = aliases.get(normalized, normalized)
    if normalized in {member.value for member in enum_class}:
        return normalized
    return enum_class.UNKNOWN.value


def parse_base_priority(value: Any) -> BasePriority:
    """Decode a stored priority string, defaulting to UNKNOWN."""
    return BasePriority(_tolerant_value(value, BasePriority))


def parse_frequency(value: Any) -> Frequency:
    """Decode a stored frequency string, defaulting to UNKNOWN."""
    return Frequency(_tolerant_value(value, Frequency, _FREQUENCY_ALIASES))


def to_local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive local time (the engine clock is naive)."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class AppTask(BaseModel):
    """One trackable obligation owned by the priority engine."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., description="Task title")
    category: str = Field(DEFAULT_CATEGORY, description="Display category label")
    base_priority: BasePriority = Field(BasePriority.MEDIUM, description="User-assigned importance tier")
    frequency: Frequency = Field(Frequency.ONCE, description="Recurrence class")
    due_at: Optional[datetime] = Field(None, description="Combined due date and time (null = no deadline)")
    duration_min: int = Field(DEFAULT_DURATION_MINUTES, ge=0, description="Expected duration in minutes")
    is_completed: bool = Field(False, description="Whether the task is done")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp (set iff completed)")
    last_rank_position: Optional[int] = Field(
        None, description="Rank as of the previous ranking cycle (movement tracking only)"
    )
    created_at: datetime = Field(default_factory=datetime.now, description="Task creation timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @field_validator("base_priority", mode="before")
    @classmethod
    def _decode_base_priority(cls, v):
        return parse_base_priority(v)

    @field_validator("frequency", mode="before")
    @classmethod
    def _decode_frequency(cls, v):
        return parse_frequency(v)

    @field_validator("due_at", "completed_at", "created_at")
    @classmethod
    def _normalize_datetimes(cls, v):
        return to_local_naive(v)

    def time_remaining(self, now: Optional[datetime] = None) -> Optional[timedelta]:
        """Time until the due instant (negative when overdue, None without a due date)."""
        if self.due_at is None:
            return None
        return self.due_at - (now or datetime.now())

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        remaining = self.time_remaining(now)
        return remaining is not None and remaining < timedelta(0)

    def urgency_level(self, now: Optional[datetime] = None) -> UrgencyLevel:
        remaining = self.time_remaining(now)
        if remaining is None:
            return UrgencyLevel.NONE
        if remaining < timedelta(0):
            return UrgencyLevel.OVERDUE
        if remaining < timedelta(minutes=15):
            return UrgencyLevel.CRITICAL
        if remaining < timedelta(hours=1):
            return UrgencyLevel.URGENT
        if remaining < timedelta(hours=4):
            return UrgencyLevel.SOON
        return UrgencyLevel.LATER

    def time_remaining_display(self, now: Optional[datetime] = None) -> str:
        """Human readable time left, e.g. "42 min", "3h 20m", "2d overdue"."""
        remaining = self.time_remaining(now)
        if remaining is None:
            return "No due date"

        seconds = remaining.total_seconds()
        if seconds < 0:
            overdue = abs(seconds)
            if overdue < 60:
                return "OVERDUE"
            if overdue < 3600:
                return f"{int(overdue / 60)}m overdue"
            if overdue < 86400:
                return f"{int(overdue / 3600)}h overdue"
            return f"{int(overdue / 86400)}d overdue"

        if seconds < 60:
            return "< 1 min"
        if seconds < 3600:
            return f"{int(seconds / 60)} min"
        if seconds < 86400:
            hours = int(seconds / 3600)
            mins = int((seconds % 3600) / 60)
            if mins == 0:
                return f"{hours}h"
            return f"{hours}h {mins}m"
        days = int(seconds / 86400)
        return f"{days} day{'' if days == 1 else 's'}"

    def relative_time_display(self, now: Optional[datetime] = None) -> Optional[str]:
        """Everyday comparison for the time left (helps with time blindness)."""
        remaining = self.time_remaining(now)
        if remaining is None or remaining <= timedelta(0):
            return None

        minutes = remaining.total_seconds() / 60
        if minutes < 5:
            return "Less than a song"
        if minutes < 15:
            return "≈ 1 YouTube video"
        if minutes < 30:
            return "≈ A quick shower"
        if minutes < 45:
            return "≈ Half a TV episode"
        if minutes < 60:
            return "≈ 1 TV episode"
        if minutes < 90:
            return "≈ A workout session"
        if minutes < 120:
            return "≈ A movie"
        if minutes < 180:
            return "≈ A long movie"
        if minutes < 240:
            return "≈ A short flight"
        return None


class RankedTask(BaseModel):
    """Read-only projection of a task after a ranking cycle."""

    task: AppTask
    score: float
    rank: int = Field(..., ge=1, description="1-based position after sort")
    movement: int = Field(0, description="previous rank - current rank (positive = more urgent)")

    class Config:
        frozen = True

    @property
    def id(self) -> str:
        return self.task.id

    @property
    def movement_display(self) -> str:
        if self.movement > 0:
            return f"▲+{self.movement}"
        if self.movement < 0:
            return f"▼{self.movement}"
        return "━"

    @property
    def score_display(self) -> str:
        return str(int(self.score))

    @property
    def score_urgency(self) -> ScoreUrgency:
        for lower_bound, band in SCORE_URGENCY_BANDS:
            if self.score >= lower_bound:
                return ScoreUrgency(band)
        return ScoreUrgency.MINIMAL
