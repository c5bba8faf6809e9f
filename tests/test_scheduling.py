"""
Tests for day assignment.

Run with: python -m pytest tests/test_scheduling.py -v
"""

import pytest
from datetime import date, timedelta

from periodization.scheduling import (
    DayOfWeek,
    assign_days,
    format_weekly_schedule,
    is_valid_placement,
    neighbours,
    parse_days,
    week_order,
)
from periodization.sessions import Session, SessionType


def long_run(km=15.0):
    return Session(SessionType.LONG_RUN, "Long run", effort=4, distance_km=km, duration_min=90)


def quality(effort=7, title="Intervals"):
    return Session(SessionType.VO2MAX, title, effort=effort, distance_km=8.0, duration_min=50)


def easy(title="Easy run"):
    return Session(SessionType.EASY, title, effort=3, distance_km=6.0, duration_min=36)


def day_of(week, title):
    return next(s.weekday for s in week if s.title == title)


# =============================================================================
# Weekdays
# =============================================================================

class TestDayOfWeek:
    """Tests for weekday parsing and ordering."""

    def test_parse_names_and_indices(self):
        assert DayOfWeek.parse("sat") == DayOfWeek.SATURDAY
        assert DayOfWeek.parse("Saturday") == DayOfWeek.SATURDAY
        assert DayOfWeek.parse(5) == DayOfWeek.SATURDAY
        assert DayOfWeek.parse(DayOfWeek.MONDAY) == DayOfWeek.MONDAY

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            DayOfWeek.parse("someday")

    def test_parse_days_defaults_to_all(self):
        assert parse_days(None) == set(DayOfWeek)
        assert parse_days(["tue", 3]) == {DayOfWeek.TUESDAY, DayOfWeek.THURSDAY}

    def test_week_order_from_wednesday(self):
        order = week_order(date(2026, 1, 7))
        assert order[0] == DayOfWeek.WEDNESDAY
        assert order[-1] == DayOfWeek.TUESDAY

    def test_neighbours_no_wraparound(self):
        assert neighbours(DayOfWeek.MONDAY) == [DayOfWeek.TUESDAY]
        assert neighbours(DayOfWeek.SUNDAY) == [DayOfWeek.SATURDAY]
        order = week_order(date(2026, 1, 7))
        assert neighbours(DayOfWeek.TUESDAY, order) == [DayOfWeek.MONDAY]
        assert neighbours(DayOfWeek.MONDAY, order) == [DayOfWeek.SUNDAY, DayOfWeek.TUESDAY]


# =============================================================================
# Placement
# =============================================================================

class TestPlacement:
    """Tests for is_valid_placement."""

    def test_quality_not_next_to_long_run(self):
        schedule = {DayOfWeek.SATURDAY: long_run()}
        available = set(DayOfWeek)
        assert not is_valid_placement(DayOfWeek.FRIDAY, quality(), schedule, available)
        assert is_valid_placement(DayOfWeek.THURSDAY, quality(), schedule, available)

    def test_easy_can_sit_next_to_long_run(self):
        schedule = {DayOfWeek.SATURDAY: long_run()}
        assert is_valid_placement(DayOfWeek.FRIDAY, easy(), schedule, set(DayOfWeek))

    def test_unavailable_or_taken(self):
        schedule = {DayOfWeek.TUESDAY: easy()}
        assert not is_valid_placement(DayOfWeek.TUESDAY, quality(), schedule, set(DayOfWeek))
        assert not is_valid_placement(DayOfWeek.MONDAY, easy(), {}, {DayOfWeek.SUNDAY})

    def test_previous_day_neighbours_first_day(self):
        """Sunday's long run of last week sits next to this Monday."""
        available = set(DayOfWeek)
        assert not is_valid_placement(
            DayOfWeek.MONDAY, quality(), {}, available, previous_day=long_run()
        )
        assert not is_valid_placement(
            DayOfWeek.MONDAY, quality(), {}, available, previous_day=quality(6)
        )
        assert is_valid_placement(
            DayOfWeek.MONDAY, quality(), {}, available, previous_day=easy()
        )
        assert is_valid_placement(
            DayOfWeek.TUESDAY, quality(), {}, available, previous_day=long_run()
        )

    def test_previous_day_follows_week_start(self):
        order = week_order(date(2026, 1, 7))
        available = set(DayOfWeek)
        assert not is_valid_placement(
            DayOfWeek.WEDNESDAY, quality(), {}, available, order, long_run()
        )
        assert is_valid_placement(
            DayOfWeek.MONDAY, quality(), {}, available, order, long_run()
        )


class TestAssignDays:
    """Tests for assign_days."""

    def test_seven_entries_with_rest(self):
        week = assign_days([long_run(), easy()])
        assert len(week) == 7
        assert sum(1 for s in week if s.is_rest) == 5
        assert [s.weekday for s in week] == [d.label for d in DayOfWeek]

    def test_long_run_on_saturday(self):
        week = assign_days([long_run()])
        assert week[DayOfWeek.SATURDAY.value].is_long_run

    def test_long_run_falls_back_to_sunday(self):
        week = assign_days([long_run()], ["mon", "wed", "sun"])
        assert day_of(week, "Long run") == "Sunday"

    def test_long_run_on_latest_free_day(self):
        week = assign_days([long_run()], ["mon", "tue", "wed"])
        assert day_of(week, "Long run") == "Wednesday"

    def test_quality_midweek_away_from_long_run(self):
        week = assign_days([long_run(), quality()])
        assert day_of(week, "Long run") == "Saturday"
        assert day_of(week, "Intervals") == "Tuesday"

    def test_two_quality_sessions_spaced(self):
        sessions = [long_run(), quality(7, "Hard"), quality(5, "Moderate")]
        sessions[2].session_type = SessionType.TEMPO
        week = assign_days(sessions)
        assert day_of(week, "Hard") == "Tuesday"
        assert day_of(week, "Moderate") == "Thursday"

    def test_default_availability_keeps_hard_days_apart(self):
        sessions = [long_run(), quality(7, "Hard"), easy("Recovery"), easy()]
        week = assign_days(sessions, ["tue", "thu", "sat", "sun"])
        for today, tomorrow in zip(week, week[1:]):
            hard_today = today.is_long_run or today.effort >= 6
            hard_tomorrow = tomorrow.is_long_run or tomorrow.effort >= 6
            assert not (today.is_quality and hard_tomorrow)
            assert not (tomorrow.is_quality and hard_today)

    def test_fallback_when_no_valid_day(self):
        """Only Fri-Sun: the interval session lands next to the long run."""
        week = assign_days([long_run(), quality()], ["fri", "sat", "sun"])
        assert day_of(week, "Long run") == "Saturday"
        assert day_of(week, "Intervals") == "Friday"

    def test_quality_avoids_day_after_previous_long_run(self):
        days = ["mon", "fri", "sun"]
        week = assign_days([long_run(), quality()], days)
        assert day_of(week, "Intervals") == "Monday"
        week = assign_days([long_run(), quality()], days, previous_day=long_run())
        assert day_of(week, "Long run") == "Sunday"
        assert day_of(week, "Intervals") == "Friday"

    def test_easy_fills_first_free_days(self):
        week = assign_days([long_run(), easy("A"), easy("B")], ["mon", "wed", "sat"])
        assert day_of(week, "A") == "Monday"
        assert day_of(week, "B") == "Wednesday"

    def test_more_sessions_than_days_drops_extras(self):
        week = assign_days([long_run(), easy("A"), easy("B")], ["sat"])
        assert [s.title for s in week if not s.is_rest] == ["Long run"]

    def test_dates_follow_week_start(self):
        """A Wednesday start: seven consecutive dates with matching weekday labels."""
        start = date(2026, 1, 7)
        week = assign_days([long_run(), quality()], week_start=start)
        assert [s.session_date for s in week] == [start + timedelta(days=i) for i in range(7)]
        for session in week:
            assert session.weekday == DayOfWeek(session.session_date.weekday()).label
        long = next(s for s in week if s.is_long_run)
        assert long.session_date == date(2026, 1, 10)


def test_format_weekly_schedule():
    week = assign_days([long_run(), easy()])
    text = format_weekly_schedule(week)
    lines = text.splitlines()
    assert len(lines) == 7
    assert "Rest" in lines[1]
    assert lines[5].startswith("  Sat")
    assert "15.0 km" in lines[5]
    assert "1h30" in lines[5]
