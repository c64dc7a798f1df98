"""Read-only query functions over schedule week snapshots."""

from .classifier import ShiftCategory, categorize, highlight_category
from .hours import daily_hours, hours_summary, overtime_workers, weekly_hours
from .staffing import daily_counts
from .timecalc import merge_intervals, worked_hours

__all__ = [
    "ShiftCategory",
    "categorize",
    "highlight_category",
    "daily_hours",
    "hours_summary",
    "overtime_workers",
    "weekly_hours",
    "daily_counts",
    "merge_intervals",
    "worked_hours",
]
