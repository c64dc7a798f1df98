"""Daily and weekly worked-hours totals."""

from __future__ import annotations

from datetime import time
from typing import Dict, Iterable, List, Optional

import pandas as pd

from shiftboard.config import OVERTIME_THRESHOLD, ShiftboardConfig
from shiftboard.domain.models import Worker
from shiftboard.domain.shifts import DayKey, ScheduleWeek, WorkerDay

from .timecalc import worked_hours


def _thresholds(cfg: Optional[ShiftboardConfig]) -> dict:
    if cfg is None:
        return {}
    return {
        "adult_threshold": cfg.adult_break_threshold_hours,
        "minor_threshold": cfg.minor_break_threshold_hours,
        "deduction": cfg.break_deduction_hours,
    }


def daily_hours(day_shifts: WorkerDay, is_minor: bool, cfg: Optional[ShiftboardConfig] = None) -> float:
    """Worked hours for a worker-day, ignoring OFF and SWIM MEET entries."""
    work = [s for s in (day_shifts or []) if not s.is_status]
    return worked_hours(work, is_minor, **_thresholds(cfg))


def weekly_hours(
    week_shifts: Dict[DayKey, WorkerDay],
    is_minor: bool,
    cfg: Optional[ShiftboardConfig] = None,
) -> float:
    """Sum of ``daily_hours`` over the seven days of a worker's week."""
    return sum(daily_hours(week_shifts.get(day), is_minor, cfg) for day in DayKey)


def is_overtime(hours: float, threshold: float = OVERTIME_THRESHOLD) -> bool:
    # Warning signal for manager review, not an enforced limit
    return hours > threshold


def overtime_workers(
    week: ScheduleWeek,
    workers: Iterable[Worker],
    cfg: Optional[ShiftboardConfig] = None,
) -> List[str]:
    """Uids of workers whose weekly hours exceed the overtime threshold."""
    threshold = cfg.overtime_threshold_hours if cfg is not None else OVERTIME_THRESHOLD
    return [
        w.uid
        for w in workers
        if is_overtime(weekly_hours(week.worker_week(w.uid), bool(w.is_minor), cfg), threshold)
    ]


def hours_summary(
    week: ScheduleWeek,
    workers: Iterable[Worker],
    cfg: Optional[ShiftboardConfig] = None,
) -> pd.DataFrame:
    """
    Hours table for a week.

    Returns:
        DataFrame indexed by worker uid with columns ``name``, ``sun``..``sat``,
        ``total`` and ``overtime``
    """
    threshold = cfg.overtime_threshold_hours if cfg is not None else OVERTIME_THRESHOLD
    rows = []
    for worker in workers:
        days = week.worker_week(worker.uid)
        row = {"uid": worker.uid, "name": worker.full_name}
        for day in DayKey:
            row[day.value] = daily_hours(days.get(day), bool(worker.is_minor), cfg)
        row["total"] = sum(row[day.value] for day in DayKey)
        row["overtime"] = is_overtime(row["total"], threshold)
        rows.append(row)

    columns = ["uid", "name"] + [d.value for d in DayKey] + ["total", "overtime"]
    return pd.DataFrame(rows, columns=columns).set_index("uid")


def format_hours(num: float) -> str:
    """Render hours compactly: 8 -> "8", 8.5 -> "8.5", 7.25 -> "7.25"."""
    if float(num).is_integer():
        return str(int(num))
    return f"{num:.2f}".rstrip("0").rstrip(".")


def format_time_12h(value: Optional[time]) -> str:
    """Short 12-hour label used on schedule cells: 09:00 -> "9", 13:30 -> "1:30"."""
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    if value.minute == 0:
        return str(hour)
    return f"{hour}:{value.minute:02d}"
