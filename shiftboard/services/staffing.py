"""Per-day opening/closing staffing counts."""

from __future__ import annotations

from typing import Dict, Tuple

from shiftboard.domain.shifts import DayKey, ShiftType, WeekShifts

from .classifier import ShiftCategory, categorize

_OPENING = (ShiftCategory.OPENING, ShiftCategory.ALL_DAY)
_CLOSING = (ShiftCategory.CLOSING, ShiftCategory.ALL_DAY)


def opening_closing_counts(week_shifts: WeekShifts, shift_kind: ShiftType, day: DayKey, **marks) -> Tuple[int, int]:
    """
    Count workers present at opening and at closing for one day and kind.

    A worker counts once per side even with several shifts of that kind.
    """
    opening = 0
    closing = 0
    for days in week_shifts.values():
        shifts = [s for s in (days.get(day) or []) if s.type is shift_kind]
        categories = {categorize(s, **marks) for s in shifts}
        if categories.intersection(_OPENING):
            opening += 1
        if categories.intersection(_CLOSING):
            closing += 1
    return opening, closing


def format_count(opening: int, closing: int) -> str:
    if opening == closing:
        return str(opening)
    return f"{opening}-{closing}"


def daily_counts(week_shifts: WeekShifts, shift_kind: ShiftType, **marks) -> Dict[DayKey, str]:
    """
    Staffing label per day for one shift kind.

    Returns:
        Dict of day -> ``"{opening}"`` when both counts match, else ``"{opening}-{closing}"``
    """
    return {
        day: format_count(*opening_closing_counts(week_shifts, shift_kind, day, **marks))
        for day in DayKey
    }
