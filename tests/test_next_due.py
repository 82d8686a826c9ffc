"""Tests for next-due computation of onboarding tasks."""

import pytest
from datetime import datetime, timedelta, timezone

from visualmemory.models.onboarding import OnboardingTask
from visualmemory.recurrence.next_due import (
    apply_time_of_day,
    build_task_from_onboarding,
    compute_due_at,
    next_monthly_occurrence,
    next_weekly_occurrence,
    next_yearly_occurrence,
)


class TestWeekly:

    def test_earlier_weekday_rolls_to_next_week(self, now):
        # now is Thursday
        assert next_weekly_occurrence(["wednesday"], now) == now + timedelta(days=6)

    def test_later_weekday_this_week(self, now):
        assert next_weekly_occurrence(["Sat"], now) == now + timedelta(days=2)

    def test_same_weekday_is_a_week_ahead(self, now):
        assert next_weekly_occurrence(["thursday"], now) == now + timedelta(days=7)

    def test_first_recognized_name_wins(self, now):
        assert next_weekly_occurrence(["someday", "mon", "fri"], now) == now + timedelta(days=4)

    def test_no_recognized_name(self, now):
        assert next_weekly_occurrence(["blursday"], now) is None
        assert next_weekly_occurrence([], now) is None

    def test_compute_falls_back_to_today(self, now):
        proto = OnboardingTask(title="Laundry", frequency="weekly", days_of_week=[])
        assert compute_due_at(proto, now) == now


class TestMonthly:

    def test_day_still_ahead_this_month(self, now):
        assert next_monthly_occurrence(25, now) == datetime(2026, 1, 25)

    def test_day_passed_rolls_to_next_month(self, now):
        assert next_monthly_occurrence(1, now) == datetime(2026, 2, 1)

    def test_today_already_started_rolls_over(self, now):
        assert next_monthly_occurrence(22, now) == datetime(2026, 2, 22)

    def test_december_rolls_into_january(self):
        assert next_monthly_occurrence(5, datetime(2026, 12, 10, 9, 0)) == datetime(2027, 1, 5)

    def test_late_days_are_clamped(self):
        assert next_monthly_occurrence(31, datetime(2026, 2, 1, 9, 0)) == datetime(2026, 2, 28)

    def test_missing_day_defaults_to_first(self, now):
        assert next_monthly_occurrence(None, now) == datetime(2026, 2, 1)


class TestYearly:

    def test_date_ahead_this_year(self, now):
        assert next_yearly_occurrence(4, 15, now) == datetime(2026, 4, 15)

    def test_date_passed_rolls_to_next_year(self, now):
        assert next_yearly_occurrence(1, 10, now) == datetime(2027, 1, 10)

    def test_defaults_to_new_year(self, now):
        assert next_yearly_occurrence(None, None, now) == datetime(2027, 1, 1)


class TestTimeOfDay:

    def test_applies_hour_and_minute(self, now):
        assert apply_time_of_day(now, "07:45") == datetime(2026, 1, 22, 7, 45)

    @pytest.mark.parametrize("value", ["", None, "noon", "25:00", "7"])
    def test_invalid_time_keeps_date(self, now, value):
        assert apply_time_of_day(now, value) == now


class TestComputeDueAt:

    def test_daily_is_today_at_time(self, now):
        proto = OnboardingTask(title="Meds", frequency="daily", time="21:00")
        assert compute_due_at(proto, now) == datetime(2026, 1, 22, 21, 0)

    def test_once_uses_due_date(self, now):
        proto = OnboardingTask(title="Passport", frequency="One-time", due_date=datetime(2026, 3, 3), time="10:00")
        assert compute_due_at(proto, now) == datetime(2026, 3, 3, 10, 0)

    def test_aware_due_date_is_normalized(self, now):
        aware = datetime(2026, 3, 3, 10, 0, tzinfo=timezone.utc)
        proto = OnboardingTask(title="Passport", frequency="once", due_date=aware)

        due = compute_due_at(proto, now)

        assert due.tzinfo is None
        assert due == aware.astimezone().replace(tzinfo=None)

    def test_once_without_date_is_now(self, now):
        proto = OnboardingTask(title="Call back", frequency="once")
        assert compute_due_at(proto, now) == now

    def test_yearly_uses_month_and_day(self, now):
        proto = OnboardingTask(title="Birthday card", frequency="yearly", month_of_year=6, day_of_month=30)
        assert compute_due_at(proto, now) == datetime(2026, 6, 28)


class TestBuildTask:

    def test_keeps_id_and_normalizes_enums(self, now):
        proto = OnboardingTask(title="Vet visit", frequency="One-time", priority="Low", category="Pet Care")

        task = build_task_from_onboarding(proto, now)

        assert task.id == proto.id
        assert task.frequency == "once"
        assert task.base_priority == "low"
        assert task.category == "Pet Care"
        assert task.duration_min == 15
        assert task.created_at == now
        assert task.last_rank_position is None
