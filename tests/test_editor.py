"""Tests for manager edits to a worker-day."""

from datetime import date, time

import pytest

from shiftboard.domain.shifts import DayKey, Shift, ShiftOrigin, ShiftType
from shiftboard.engine.editor import (
    apply_manager_edit,
    replace_manual_entries,
    set_custom_off,
    set_work_shifts,
    toggle_status,
)
from shiftboard.errors import ValidationError

RULE_OFF = Shift(ShiftType.OFF, origin=ShiftOrigin.from_rule("r"))
REQUEST_OFF = Shift(ShiftType.OFF, origin=ShiftOrigin.from_request("q"))
GUARD = Shift(ShiftType.GUARD, time(9), time(13))
FRONT = Shift(ShiftType.FRONT, time(14), time(18))


def test_set_work_shifts_keeps_statuses():
    day = [RULE_OFF, GUARD]
    result = set_work_shifts(day, [FRONT, Shift(ShiftType.CAMP)])
    assert result == [RULE_OFF, FRONT]


def test_set_work_shifts_empty_is_none():
    assert set_work_shifts([GUARD], []) is None


def test_set_work_shifts_rejects_status():
    with pytest.raises(ValidationError):
        set_work_shifts(None, [Shift(ShiftType.OFF)])


def test_toggle_off_adds_and_removes():
    added = toggle_status([GUARD], ShiftType.OFF)
    assert added == [Shift(ShiftType.OFF), GUARD]
    assert toggle_status(added, ShiftType.OFF) == [GUARD]


def test_toggle_off_never_removes_rule_marker():
    day = [RULE_OFF, REQUEST_OFF]
    # Request OFF is manageable and is removed; the rule marker stays
    assert toggle_status(day, ShiftType.OFF) == [RULE_OFF]
    assert toggle_status([RULE_OFF], ShiftType.OFF) == [RULE_OFF, Shift(ShiftType.OFF)]


def test_toggle_swim_meet():
    day = toggle_status(None, ShiftType.SWIM_MEET)
    assert day == [Shift(ShiftType.SWIM_MEET)]
    assert toggle_status(day, ShiftType.SWIM_MEET) is None


def test_toggle_rejects_work_type():
    with pytest.raises(ValidationError):
        toggle_status(None, ShiftType.GUARD)


def test_set_custom_off():
    day = [RULE_OFF, Shift(ShiftType.OFF), Shift(ShiftType.SWIM_MEET), GUARD]
    result = set_custom_off(day, time(12), time(15))
    assert result == [RULE_OFF, Shift(ShiftType.SWIM_MEET), Shift(ShiftType.OFF, time(12), time(15)), GUARD]

    with pytest.raises(ValidationError):
        set_custom_off(day, time(15), time(12))


def test_apply_manager_edit_writes_published_week(store):
    """Test that manager edits are allowed on published weeks."""
    store.set_published("acme", date(2025, 6, 1), True)

    apply_manager_edit(store, "acme", "w1", date(2025, 6, 3), [GUARD])
    assert store.get("acme", date(2025, 6, 3)).worker_day("w1", DayKey.TUE) == [GUARD]

    apply_manager_edit(store, "acme", "w1", date(2025, 6, 3), [])
    assert store.get("acme", date(2025, 6, 3)).worker_day("w1", DayKey.TUE) is None


def test_replace_manual_entries_keeps_derived_markers():
    day = [RULE_OFF, Shift(ShiftType.OFF), REQUEST_OFF, Shift(ShiftType.SWIM_MEET), GUARD]
    assert replace_manual_entries(day, [FRONT]) == [RULE_OFF, REQUEST_OFF, FRONT]
    assert replace_manual_entries([GUARD], []) is None
