"""Data models for VisualMemory."""

from visualmemory.models.task import (
    AppTask,
    BasePriority,
    Frequency,
    RankedTask,
    ScoreUrgency,
    UrgencyLevel,
    parse_base_priority,
    parse_frequency,
)
from visualmemory.models.onboarding import OnboardingTask

__all__ = [
    "AppTask",
    "BasePriority",
    "Frequency",
    "RankedTask",
    "ScoreUrgency",
    "UrgencyLevel",
    "parse_base_priority",
    "parse_frequency",
    "OnboardingTask",
]
