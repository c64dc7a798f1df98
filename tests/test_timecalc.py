"""Tests for worked-hours interval arithmetic."""

from datetime import time

import pytest

from shiftboard.domain.shifts import Shift, ShiftType
from shiftboard.services.timecalc import apply_break_deduction, merge_intervals, worked_hours


def guard(start, end):
    return Shift(ShiftType.GUARD, time(*start), time(*end))


def test_merge_intervals_overlapping():
    """Test that overlapping intervals merge into one."""
    assert merge_intervals([(600, 720), (540, 660)]) == [(540, 720)]


def test_merge_intervals_touching_stay_separate():
    """Test that intervals sharing an endpoint are not merged."""
    assert merge_intervals([(540, 780), (780, 1110)]) == [(540, 780), (780, 1110)]


def test_merge_intervals_empty():
    assert merge_intervals([]) == []


def test_adult_long_day_deducts_break():
    """Test 09:00-13:00 + 13:00-18:30 for an adult: 9.5h worked, 9.0h paid."""
    shifts = [guard((9, 0), (13, 0)), guard((13, 0), (18, 30))]
    assert worked_hours(shifts, is_minor=False) == 9.0


def test_minor_short_excess_caps_at_threshold():
    """Test 09:00-14:20 for a minor: 5.33h worked, paid exactly 5.0h."""
    assert worked_hours([guard((9, 0), (14, 20))], is_minor=True) == 5.0


def test_same_shift_adult_not_deducted():
    assert worked_hours([guard((9, 0), (14, 20))], is_minor=False) == pytest.approx(16 / 3)


@pytest.mark.parametrize(
    "duration,expected",
    [
        (8.0, 8.0),
        (8.25, 8.0),
        (8.5, 8.0),
        (9.0, 8.5),
    ],
)
def test_apply_break_deduction_adult(duration, expected):
    assert apply_break_deduction(duration, threshold=8.0) == expected


@pytest.mark.parametrize(
    "duration,expected",
    [
        (4.5, 4.5),
        (5.0, 5.0),
        (5.4, 5.0),
        (5.5, 5.0),
        (6.0, 5.5),
    ],
)
def test_apply_break_deduction_minor(duration, expected):
    assert apply_break_deduction(duration, threshold=5.0) == pytest.approx(expected)


def test_minor_long_day_deducts_break():
    """Test 09:00-15:00 for a minor: 6h worked, 5.5h paid."""
    assert worked_hours([guard((9, 0), (15, 0))], is_minor=True) == 5.5


def test_minor_short_day_untouched():
    assert worked_hours([guard((9, 0), (13, 30))], is_minor=True) == 4.5


def test_overlapping_shifts_counted_once():
    shifts = [guard((9, 0), (12, 0)), guard((11, 0), (13, 0))]
    assert worked_hours(shifts, is_minor=False) == 4.0


def test_leading_all_day_off_is_zero():
    shifts = [Shift(ShiftType.OFF), guard((9, 0), (17, 0))]
    assert worked_hours(shifts, is_minor=False) == 0.0


def test_untimed_and_inverted_shifts_ignored():
    shifts = [Shift(ShiftType.GUARD), guard((15, 0), (9, 0)), guard((9, 0), (11, 0))]
    assert worked_hours(shifts, is_minor=False) == 2.0


def test_empty_day():
    assert worked_hours([], is_minor=True) == 0.0


def test_custom_thresholds():
    shifts = [guard((8, 0), (15, 0))]
    assert worked_hours(shifts, is_minor=False, adult_threshold=6.0, deduction=0.25) == 6.75
