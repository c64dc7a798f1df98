"""Manager edits to a single worker-day.

These are explicit manager actions, so unlike reconciliation they also
apply to published weeks. Rule-derived OFF markers always survive an edit.
"""

from __future__ import annotations

from datetime import date, time
from typing import List, Sequence

import structlog

from shiftboard.domain.shifts import DayKey, Shift, ShiftType, WorkerDay
from shiftboard.domain.store import ScheduleWeekStore
from shiftboard.errors import ValidationError

log = structlog.get_logger(__name__)


def _statuses(day: WorkerDay) -> List[Shift]:
    return [s for s in (day or []) if s.is_status]


def _work(day: WorkerDay) -> List[Shift]:
    return [s for s in (day or []) if not s.is_status]


def _is_manageable(shift: Shift, status: ShiftType) -> bool:
    return shift.type is status and not shift.origin.is_rule


def set_work_shifts(day: WorkerDay, work_shifts: Sequence[Shift]) -> WorkerDay:
    """Replace the timed work shifts, keeping every OFF and SWIM MEET entry."""
    for shift in work_shifts:
        if shift.is_status:
            raise ValidationError(f"{shift.type.value} is a status, not a work shift")
    valid = [s for s in work_shifts if s.is_timed]
    result = _statuses(day) + valid
    return result or None


def toggle_status(day: WorkerDay, status: ShiftType) -> WorkerDay:
    """
    Add or remove the manager-controlled OFF / SWIM MEET status.

    Rule-derived OFF markers are never removed; adding a manual OFF
    replaces any other manageable OFF on the day.
    """
    if status not in (ShiftType.OFF, ShiftType.SWIM_MEET):
        raise ValidationError(f"{status.value} is not a status type")

    statuses = _statuses(day)
    if any(_is_manageable(s, status) for s in statuses):
        statuses = [s for s in statuses if not _is_manageable(s, status)]
    else:
        if status is ShiftType.OFF:
            statuses = [s for s in statuses if not _is_manageable(s, ShiftType.OFF)]
        statuses.append(Shift(type=status))

    result = statuses + _work(day)
    return result or None


def set_custom_off(day: WorkerDay, start: time, end: time) -> WorkerDay:
    """Replace the manageable OFF with a timed manual OFF."""
    if end <= start:
        raise ValidationError("End time must be after start time")
    kept = [
        s for s in _statuses(day)
        if s.type is ShiftType.SWIM_MEET or (s.type is ShiftType.OFF and s.origin.is_rule)
    ]
    return kept + [Shift(type=ShiftType.OFF, start=start, end=end)] + _work(day)


def replace_manual_entries(day: WorkerDay, entries: Sequence[Shift]) -> WorkerDay:
    """Replace every manager-entered shift and status, keeping request and rule OFF markers."""
    derived = [s for s in (day or []) if s.origin.is_request or s.origin.is_rule]
    result = derived + list(entries)
    return result or None


def apply_manager_edit(
    store: ScheduleWeekStore,
    company_id: str,
    worker_id: str,
    on: date,
    new_day: WorkerDay,
) -> None:
    """Write an edited worker-day; errors propagate to the caller."""
    day = DayKey.for_date(on)
    store.patch_shifts(company_id, on, {worker_id: {day: new_day or None}})
    log.info("worker_day_edited", worker_id=worker_id, date=on.isoformat())
