"""Tests for AppTask / RankedTask models and their display helpers."""

import pytest
from datetime import datetime, timedelta, timezone

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
from visualmemory.models.task_factory import create_task


class TestTolerantDecode:

    @pytest.mark.parametrize("raw, expected", [
        ("high", BasePriority.HIGH),
        ("MEDIUM", BasePriority.MEDIUM),
        (" Low ", BasePriority.LOW),
        ("urgent", BasePriority.UNKNOWN),
        (None, BasePriority.UNKNOWN),
        (3, BasePriority.UNKNOWN),
        (BasePriority.HIGH, BasePriority.HIGH),
    ])
    def test_parse_base_priority(self, raw, expected):
        assert parse_base_priority(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        ("Daily", Frequency.DAILY),
        ("One-time", Frequency.ONCE),
        ("once", Frequency.ONCE),
        ("biweekly", Frequency.UNKNOWN),
    ])
    def test_parse_frequency(self, raw, expected):
        assert parse_frequency(raw) == expected

    def test_model_accepts_legacy_values(self, sample_task_base):
        task = AppTask(**{**sample_task_base, "base_priority": "Critical", "frequency": "Quarterly"})
        assert task.base_priority == BasePriority.UNKNOWN
        assert task.frequency == Frequency.UNKNOWN


class TestTaskFactory:

    def test_defaults(self, now):
        task = create_task("Buy milk", created_at=now)
        assert task.base_priority == BasePriority.MEDIUM
        assert task.frequency == Frequency.ONCE
        assert task.due_at is None
        assert task.category == "Personal"
        assert task.duration_min == 30
        assert task.is_completed is False
        assert task.completed_at is None
        assert task.created_at == now

    def test_generates_unique_ids(self):
        assert create_task("A").id != create_task("B").id


class TestUrgencyLevel:

    @pytest.mark.parametrize("offset, expected", [
        (None, UrgencyLevel.NONE),
        (timedelta(minutes=-1), UrgencyLevel.OVERDUE),
        (timedelta(minutes=10), UrgencyLevel.CRITICAL),
        (timedelta(minutes=40), UrgencyLevel.URGENT),
        (timedelta(hours=3), UrgencyLevel.SOON),
        (timedelta(hours=5), UrgencyLevel.LATER),
    ])
    def test_levels(self, make_task, now, offset, expected):
        task = make_task(due_at=None if offset is None else now + offset)
        assert task.urgency_level(now) == expected

    def test_is_overdue(self, make_task, now):
        assert make_task(due_at=now - timedelta(seconds=1)).is_overdue(now) is True
        assert make_task(due_at=now + timedelta(seconds=1)).is_overdue(now) is False
        assert make_task(due_at=None).is_overdue(now) is False


class TestTimeRemainingDisplay:

    @pytest.mark.parametrize("offset, expected", [
        (None, "No due date"),
        (timedelta(seconds=-30), "OVERDUE"),
        (timedelta(minutes=-12), "12m overdue"),
        (timedelta(hours=-3, minutes=-5), "3h overdue"),
        (timedelta(days=-2, hours=-1), "2d overdue"),
        (timedelta(seconds=30), "< 1 min"),
        (timedelta(minutes=42), "42 min"),
        (timedelta(hours=3), "3h"),
        (timedelta(hours=3, minutes=20), "3h 20m"),
        (timedelta(days=1, hours=2), "1 day"),
        (timedelta(days=4), "4 days"),
    ])
    def test_display(self, make_task, now, offset, expected):
        task = make_task(due_at=None if offset is None else now + offset)
        assert task.time_remaining_display(now) == expected

    @pytest.mark.parametrize("offset, expected", [
        (timedelta(minutes=3), "Less than a song"),
        (timedelta(minutes=20), "≈ A quick shower"),
        (timedelta(minutes=100), "≈ A movie"),
        (timedelta(hours=5), None),
        (timedelta(minutes=-5), None),
    ])
    def test_relative_display(self, make_task, now, offset, expected):
        assert make_task(due_at=now + offset).relative_time_display(now) == expected


class TestRankedTask:

    @pytest.mark.parametrize("movement, expected", [(2, "▲+2"), (-1, "▼-1"), (0, "━")])
    def test_movement_display(self, sample_task, movement, expected):
        ranked = RankedTask(task=sample_task, score=10.0, rank=1, movement=movement)
        assert ranked.movement_display == expected

    @pytest.mark.parametrize("score, expected", [
        (900.0, ScoreUrgency.CRITICAL),
        (800.0, ScoreUrgency.CRITICAL),
        (630.0, ScoreUrgency.VERY_HIGH),
        (350.0, ScoreUrgency.HIGH),
        (150.0, ScoreUrgency.MEDIUM),
        (60.0, ScoreUrgency.LOW),
        (39.0, ScoreUrgency.MINIMAL),
    ])
    def test_score_urgency(self, sample_task, score, expected):
        ranked = RankedTask(task=sample_task, score=score, rank=1)
        assert ranked.score_urgency == expected

    def test_score_display_truncates(self, sample_task):
        assert RankedTask(task=sample_task, score=349.9, rank=1).score_display == "349"

    def test_id_is_task_id(self, sample_task):
        assert RankedTask(task=sample_task, score=1.0, rank=1).id == sample_task.id


class TestDatetimeNormalization:

    def test_aware_due_at_becomes_naive_local(self, sample_task_base):
        aware = datetime(2026, 1, 22, 12, 10, tzinfo=timezone.utc)

        task = AppTask(**{**sample_task_base, "due_at": aware})

        assert task.due_at.tzinfo is None
        assert task.due_at == aware.astimezone().replace(tzinfo=None)

    def test_iso_string_with_offset_is_normalized(self, sample_task_base):
        task = AppTask(**{**sample_task_base, "due_at": "2026-01-22T12:10:00Z",
                          "completed_at": "2026-01-22T11:00:00+02:00"})

        assert task.due_at.tzinfo is None
        assert task.completed_at.tzinfo is None
        assert task.due_at - task.completed_at == timedelta(hours=3, minutes=10)

    def test_aware_task_can_be_scored_against_naive_clock(self, sample_task_base, now):
        task = AppTask(**{**sample_task_base, "due_at": datetime(2026, 1, 22, 12, 10, tzinfo=timezone.utc)})
        assert task.time_remaining(now) is not None

    def test_naive_datetimes_are_untouched(self, sample_task_base, now):
        task = AppTask(**{**sample_task_base, "due_at": now})
        assert task.due_at == now
