"""Interval arithmetic for worked time."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from shiftboard.config import ADULT_BREAK_THRESHOLD, BREAK_DEDUCTION, MINOR_BREAK_THRESHOLD
from shiftboard.domain.shifts import Shift, ShiftType, minutes_since_midnight

Interval = Tuple[int, int]


def merge_intervals(intervals: Iterable[Interval]) -> List[Interval]:
    """
    Merge overlapping ``(start, end)`` intervals.

    Intervals that merely touch (next start == running end) stay separate.

    Args:
        intervals: Intervals in any order, as minutes since midnight

    Returns:
        Sorted, non-overlapping intervals
    """
    ordered = sorted(intervals, key=lambda iv: iv[0])
    if not ordered:
        return []

    merged = [ordered[0]]
    for start, end in ordered[1:]:
        last_start, last_end = merged[-1]
        if start < last_end:
            merged[-1] = (last_start, max(last_end, end))
        else:
            merged.append((start, end))
    return merged


def apply_break_deduction(
    duration_hours: float,
    threshold: float,
    deduction: float = BREAK_DEDUCTION,
) -> float:
    """Deduct an unpaid break once ``duration_hours`` exceeds ``threshold``.

    Paid time never drops below the threshold itself.
    """
    if duration_hours <= threshold:
        return duration_hours
    if duration_hours - threshold <= deduction:
        return threshold
    return duration_hours - deduction


def worked_hours(
    shifts: Sequence[Shift],
    is_minor: bool,
    adult_threshold: float = ADULT_BREAK_THRESHOLD,
    minor_threshold: float = MINOR_BREAK_THRESHOLD,
    deduction: float = BREAK_DEDUCTION,
) -> float:
    """
    Paid hours for one worker-day after merging overlaps and deducting breaks.

    Args:
        shifts: The worker-day's shift entries
        is_minor: Minors get the lower break threshold
        adult_threshold: Break threshold in hours for adults
        minor_threshold: Break threshold in hours for minors
        deduction: Break length in hours

    Returns:
        Non-negative hours, never more than the merged duration
    """
    if not shifts:
        return 0.0
    first = shifts[0]
    if first.type is ShiftType.OFF and first.is_all_day:
        return 0.0

    intervals = []
    for shift in shifts:
        if not shift.is_timed:
            continue
        start = minutes_since_midnight(shift.start)
        end = minutes_since_midnight(shift.end)
        if end <= start:
            continue
        intervals.append((start, end))

    total_minutes = sum(end - start for start, end in merge_intervals(intervals))
    threshold = minor_threshold if is_minor else adult_threshold
    return apply_break_deduction(total_minutes / 60, threshold, deduction)
