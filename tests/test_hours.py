"""Tests for daily/weekly hours and the hours table."""

from datetime import date, time

from shiftboard.config import ShiftboardConfig
from shiftboard.domain.models import Worker
from shiftboard.domain.shifts import DayKey, ScheduleWeek, Shift, ShiftOrigin, ShiftType
from shiftboard.services.hours import (
    daily_hours,
    format_hours,
    format_time_12h,
    hours_summary,
    overtime_workers,
    weekly_hours,
)


def guard(start, end):
    return Shift(ShiftType.GUARD, time(start), time(end))


def test_daily_hours_ignores_status_entries():
    """Test that a timed OFF marker does not count as work."""
    day = [Shift(ShiftType.OFF, time(12), time(14), ShiftOrigin.from_request("r1")), guard(9, 12)]
    assert daily_hours(day, is_minor=False) == 3.0


def test_daily_hours_none_day():
    assert daily_hours(None, is_minor=False) == 0.0


def test_weekly_hours_sums_days():
    week = {DayKey.MON: [guard(9, 17)], DayKey.TUE: [guard(9, 13)], DayKey.SAT: None}
    assert weekly_hours(week, is_minor=False) == 12.0


def test_weekly_hours_uses_config_thresholds():
    cfg = ShiftboardConfig(adult_break_threshold_hours=6.0)
    week = {DayKey.MON: [guard(9, 17)]}
    assert weekly_hours(week, is_minor=False, cfg=cfg) == 7.5


def make_week():
    long_days = {day: [guard(8, 17)] for day in (DayKey.MON, DayKey.TUE, DayKey.WED, DayKey.THU, DayKey.FRI)}
    return ScheduleWeek(
        company_id="acme",
        week_of=date(2025, 6, 1),
        shifts={
            "w1": long_days,
            "w2": {DayKey.SUN: [guard(9, 15)]},
        },
    )


def test_overtime_workers():
    workers = [
        Worker(uid="w1", company_id="acme", full_name="Ava Reed", is_minor=False),
        Worker(uid="w2", company_id="acme", full_name="Ben Cole", is_minor=True),
    ]
    # 5 x (9h - 0.5h break) = 42.5h
    assert overtime_workers(make_week(), workers) == ["w1"]


def test_hours_summary():
    """Test the hours table shape and totals."""
    workers = [
        Worker(uid="w1", company_id="acme", full_name="Ava Reed", is_minor=False),
        Worker(uid="w2", company_id="acme", full_name="Ben Cole", is_minor=True),
    ]
    table = hours_summary(make_week(), workers)

    assert list(table.index) == ["w1", "w2"]
    assert list(table.columns) == ["name", "sun", "mon", "tue", "wed", "thu", "fri", "sat", "total", "overtime"]
    assert table.loc["w1", "total"] == 42.5
    assert bool(table.loc["w1", "overtime"]) is True
    # 6h minor day: 1h over the 5h threshold
    assert table.loc["w2", "sun"] == 5.5
    assert bool(table.loc["w2", "overtime"]) is False


def test_hours_summary_no_workers():
    assert hours_summary(make_week(), []).empty


def test_format_hours():
    assert format_hours(8) == "8"
    assert format_hours(8.5) == "8.5"
    assert format_hours(7.25) == "7.25"
    assert format_hours(0.0) == "0"


def test_format_time_12h():
    assert format_time_12h(time(9, 0)) == "9"
    assert format_time_12h(time(13, 30)) == "1:30"
    assert format_time_12h(time(0, 0)) == "12"
    assert format_time_12h(None) == ""
