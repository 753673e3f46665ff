"""Unit tests for recurrence projection.

Tests cover:
- Fixed-interval candidates from the cursor
- Weekend adjustment to Monday
- End date and horizon bounds (raw and adjusted)
- Invalid frequencies
- Daily weekday whitelist
"""

from datetime import date, timedelta

from app.maintenance.recurrence import (
    MaintenancePlanInput,
    ScheduleCursor,
    Weekday,
    adjust_for_weekend,
    iter_raw_candidates,
    parse_weekdays,
    project_occurrences,
    weekday_of,
)


def _plan(frequency_days=7, end_date=None, days=None, active=True) -> MaintenancePlanInput:
    return MaintenancePlanInput(
        plan_id="plan-1",
        name="Lubrificação compressor",
        frequency_days=frequency_days,
        end_date=end_date,
        schedule_days_of_week=days,
        active=active,
    )


def _cursor(next_date: date) -> ScheduleCursor:
    return ScheduleCursor(plan_id="plan-1", next_scheduled_date=next_date)


class TestWeekendAdjustment:
    """Test weekend-to-Monday adjustment."""

    def test_saturday_moves_two_days(self):
        assert adjust_for_weekend(date(2024, 1, 6)) == date(2024, 1, 8)

    def test_sunday_moves_one_day(self):
        assert adjust_for_weekend(date(2024, 1, 7)) == date(2024, 1, 8)

    def test_weekdays_unchanged(self):
        for offset in range(5):
            day = date(2024, 1, 8) + timedelta(days=offset)
            assert adjust_for_weekend(day) == day

    def test_weekday_of_matches_calendar(self):
        assert weekday_of(date(2024, 1, 8)) == Weekday.MONDAY
        assert weekday_of(date(2024, 1, 7)) == Weekday.SUNDAY


class TestProjectOccurrences:
    """Test projected occurrence sequences."""

    def test_weekly_plan_starting_on_saturday(self):
        """Every Saturday candidate lands on the following Monday."""
        result = list(project_occurrences(_plan(), _cursor(date(2024, 1, 6)), date(2024, 2, 1)))

        assert result == [date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22), date(2024, 1, 29)]

    def test_adjusted_date_past_end_date_is_dropped(self):
        """2024-01-20 is within end_date raw but adjusts to 2024-01-22, past it."""
        plan = _plan(end_date=date(2024, 1, 20))

        result = list(project_occurrences(plan, _cursor(date(2024, 1, 6)), date(2024, 2, 1)))

        assert result == [date(2024, 1, 8), date(2024, 1, 15)]

    def test_adjusted_date_past_horizon_is_dropped(self):
        result = list(project_occurrences(_plan(), _cursor(date(2024, 1, 6)), date(2024, 1, 27)))

        assert result == [date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]

    def test_zero_frequency_yields_nothing(self):
        assert list(project_occurrences(_plan(frequency_days=0), _cursor(date(2024, 1, 6)), date(2024, 2, 1))) == []

    def test_negative_or_missing_frequency_yields_nothing(self):
        for frequency in (-7, None):
            plan = _plan(frequency_days=frequency)
            assert list(project_occurrences(plan, _cursor(date(2024, 1, 6)), date(2024, 2, 1))) == []

    def test_cursor_after_horizon_yields_nothing(self):
        assert list(project_occurrences(_plan(), _cursor(date(2024, 3, 1)), date(2024, 2, 1))) == []

    def test_cursor_after_end_date_yields_nothing(self):
        plan = _plan(end_date=date(2024, 1, 1))
        assert list(project_occurrences(plan, _cursor(date(2024, 1, 8)), date(2024, 2, 1))) == []

    def test_results_never_fall_on_weekends(self):
        plan = _plan(frequency_days=3)
        result = list(project_occurrences(plan, _cursor(date(2024, 1, 1)), date(2024, 6, 30)))

        assert result
        assert all(day.weekday() < 5 for day in result)
        assert result == sorted(result)

    def test_projection_is_deterministic(self):
        plan = _plan(frequency_days=10)
        cursor = _cursor(date(2024, 1, 3))

        first = list(project_occurrences(plan, cursor, date(2024, 12, 31)))
        second = list(project_occurrences(plan, cursor, date(2024, 12, 31)))

        assert first == second


class TestRawCandidates:
    """Test unadjusted candidate generation."""

    def test_candidates_spaced_by_frequency(self):
        result = list(iter_raw_candidates(_plan(frequency_days=15), _cursor(date(2024, 1, 1)), date(2024, 3, 31)))

        assert result[0] == date(2024, 1, 1)
        assert all((b - a).days == 15 for a, b in zip(result, result[1:]))
        assert result[-1] <= date(2024, 3, 31)

    def test_horizon_is_inclusive(self):
        result = list(iter_raw_candidates(_plan(), _cursor(date(2024, 1, 1)), date(2024, 1, 15)))

        assert result == [date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15)]


class TestDailyWeekdayWhitelist:
    """Test schedule_days_of_week for daily plans."""

    def test_daily_plan_only_whitelisted_days(self):
        days = frozenset({Weekday.MONDAY, Weekday.WEDNESDAY})
        plan = _plan(frequency_days=1, days=days)

        result = list(project_occurrences(plan, _cursor(date(2024, 1, 8)), date(2024, 1, 21)))

        assert result == [date(2024, 1, 8), date(2024, 1, 10), date(2024, 1, 15), date(2024, 1, 17)]

    def test_whitelisted_weekend_day_is_still_moved_to_monday(self):
        plan = _plan(frequency_days=1, days=frozenset({Weekday.SATURDAY}))

        result = list(project_occurrences(plan, _cursor(date(2024, 1, 1)), date(2024, 1, 15)))

        assert result == [date(2024, 1, 8), date(2024, 1, 15)]

    def test_whitelist_ignored_for_non_daily_plans(self):
        plan = _plan(frequency_days=7, days=frozenset({Weekday.FRIDAY}))

        result = list(project_occurrences(plan, _cursor(date(2024, 1, 8)), date(2024, 1, 22)))

        assert result == [date(2024, 1, 8), date(2024, 1, 15), date(2024, 1, 22)]

    def test_daily_plan_without_whitelist_collapses_weekend_onto_monday(self):
        plan = _plan(frequency_days=1)

        result = list(project_occurrences(plan, _cursor(date(2024, 1, 5)), date(2024, 1, 8)))

        assert result == [date(2024, 1, 5), date(2024, 1, 8), date(2024, 1, 8), date(2024, 1, 8)]


class TestParseWeekdays:
    """Test weekday name normalization."""

    def test_case_and_whitespace_normalized(self):
        assert parse_weekdays([" Monday", "FRIDAY"]) == frozenset({Weekday.MONDAY, Weekday.FRIDAY})

    def test_unknown_names_dropped(self):
        assert parse_weekdays(["monday", "someday"]) == frozenset({Weekday.MONDAY})

    def test_empty_or_invalid_is_none(self):
        assert parse_weekdays(None) is None
        assert parse_weekdays([]) is None
        assert parse_weekdays(["segunda"]) is None
