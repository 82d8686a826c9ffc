"""Recurrence helpers for VisualMemory."""

from visualmemory.recurrence.next_due import build_task_from_onboarding, compute_due_at

__all__ = [
    "build_task_from_onboarding",
    "compute_due_at",
]
