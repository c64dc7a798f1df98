"""Tests for the SQLAlchemy-backed schedule week store."""

from datetime import date, time

from shiftboard.domain.models import ScheduleWeekRecord
from shiftboard.domain.shifts import DayKey, Shift, ShiftType


def test_create_if_absent_is_keyed_by_sunday(store):
    """Test that any date in a week resolves to the same document."""
    created = store.create_if_absent("acme", date(2025, 6, 4))
    again = store.create_if_absent("acme", date(2025, 6, 7))

    assert created.doc_id == "acme_2025-06-01"
    assert again.doc_id == created.doc_id
    assert created.week_of == date(2025, 6, 1)
    assert created.is_published is False
    assert created.shifts == {}


def test_create_if_absent_keeps_existing(store):
    initial = {"w1": {DayKey.MON: [Shift(ShiftType.GUARD, time(9), time(13))]}}
    store.create_if_absent("acme", date(2025, 6, 1), initial)
    store.create_if_absent("acme", date(2025, 6, 1), {})

    week = store.get("acme", date(2025, 6, 2))
    assert week.worker_day("w1", DayKey.MON) == [Shift(ShiftType.GUARD, time(9), time(13))]


def test_get_missing_week(store):
    assert store.get("acme", date(2025, 6, 1)) is None


def test_patch_merges_per_worker_day(store):
    """Test that a patch leaves other worker-days untouched."""
    guard = Shift(ShiftType.GUARD, time(9), time(13))
    store.patch_shifts("acme", date(2025, 6, 1), {"w1": {DayKey.MON: [guard], DayKey.TUE: [guard]}})
    store.patch_shifts("acme", date(2025, 6, 1), {"w2": {DayKey.MON: [guard]}})
    store.patch_shifts("acme", date(2025, 6, 1), {"w1": {DayKey.TUE: None}})

    week = store.get("acme", date(2025, 6, 1))
    assert week.worker_day("w1", DayKey.MON) == [guard]
    assert week.worker_day("w1", DayKey.TUE) is None
    assert week.worker_day("w2", DayKey.MON) == [guard]


def test_empty_day_stored_as_null(store, db_session):
    store.patch_shifts("acme", date(2025, 6, 1), {"w1": {DayKey.MON: []}})

    record = db_session.get(ScheduleWeekRecord, "acme_2025-06-01")
    assert record.shifts == {"w1": {"mon": None}}


def test_list_weeks_since(store):
    for d in (date(2025, 5, 25), date(2025, 6, 1), date(2025, 6, 8)):
        store.create_if_absent("acme", d)
    store.create_if_absent("other", date(2025, 6, 8))

    weeks = store.list_weeks("acme", since=date(2025, 6, 3))
    assert [w.week_of for w in weeks] == [date(2025, 6, 1), date(2025, 6, 8)]
    assert len(store.list_weeks("acme")) == 3


def test_set_published(store):
    store.create_if_absent("acme", date(2025, 6, 1))

    week = store.set_published("acme", date(2025, 6, 3), True)
    assert week.is_published is True
    assert store.get("acme", date(2025, 6, 1)).is_published is True

    store.set_published("acme", date(2025, 6, 1), False)
    assert store.get("acme", date(2025, 6, 1)).is_published is False
