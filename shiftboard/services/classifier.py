"""Shift categories relative to the core opening/closing hours."""

from __future__ import annotations

from datetime import time
from enum import Enum
from typing import Optional

from shiftboard.config import CLOSING_MARK, OPENING_MARK
from shiftboard.domain.shifts import Shift, ShiftType, parse_time


class ShiftCategory(Enum):
    ALL_DAY = "All Day"
    OPENING = "Opening"
    CLOSING = "Closing"
    MIDDAY = "Midday"
    NONE = "None"


def categorize(
    shift: Optional[Shift],
    opening_mark: str | time = OPENING_MARK,
    closing_mark: str | time = CLOSING_MARK,
) -> ShiftCategory:
    """
    Categorize a shift by whether it covers opening and/or closing.

    A shift starting at or before the opening mark counts as opening; one
    ending at or after the closing mark counts as closing.
    """
    if shift is None or not shift.is_timed:
        return ShiftCategory.NONE

    is_opening = shift.start <= parse_time(opening_mark)
    is_closing = shift.end >= parse_time(closing_mark)
    if is_opening and is_closing:
        return ShiftCategory.ALL_DAY
    if is_opening:
        return ShiftCategory.OPENING
    if is_closing:
        return ShiftCategory.CLOSING
    return ShiftCategory.MIDDAY


def highlight_category(shift: Optional[Shift], **marks) -> Optional[ShiftCategory]:
    """Category used for display highlighting; lessons are never highlighted."""
    if shift is None or shift.type is ShiftType.LESSONS:
        return None
    category = categorize(shift, **marks)
    if category in (ShiftCategory.NONE, ShiftCategory.MIDDAY):
        return None
    return category
