"""CSV import utilities to load rosters and shifts."""

from __future__ import annotations

from collections import defaultdict
from pathlib import Path
from typing import Dict, List, Tuple

import pandas as pd
import structlog
from sqlalchemy.orm import Session

from shiftboard.domain.models import Worker
from shiftboard.domain.shifts import DayKey, Shift, ShiftType, parse_time, sunday_of_week
from shiftboard.domain.store import ScheduleWeekStore
from shiftboard.engine.editor import replace_manual_entries
from shiftboard.errors import ValidationError

log = structlog.get_logger(__name__)

TRUE_VALUES = {"TRUE", "T", "1", "YES", "Y"}


def _as_bool(value) -> bool:
    if pd.isna(value):
        return False
    return str(value).strip().upper() in TRUE_VALUES


def _optional_str(value) -> str | None:
    if pd.isna(value) or str(value).strip() == "":
        return None
    return str(value).strip()


def import_workers_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import workers from CSV into the database.

    Expected columns: ``uid, company_id, full_name`` and optionally
    ``title, yos, is_minor``.

    Returns:
        Number of workers imported
    """
    df = pd.read_csv(csv_path, dtype={"uid": str, "company_id": str})

    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()

    missing = {"uid", "company_id", "full_name"} - set(df.columns)
    if missing:
        raise ValidationError(f"Workers CSV is missing columns: {', '.join(sorted(missing))}")

    workers = []
    for _, row in df.iterrows():
        workers.append(
            Worker(
                uid=str(row["uid"]).strip(),
                company_id=str(row["company_id"]).strip(),
                full_name=str(row["full_name"]).strip(),
                title=_optional_str(row.get("title")) or "Lifeguard",
                yos=int(row["yos"]) if pd.notna(row.get("yos")) else 0,
                is_minor=_as_bool(row.get("is_minor")),
            )
        )

    session.add_all(workers)
    session.commit()

    log.info("workers_imported", count=len(workers), path=str(csv_path))
    return len(workers)


def import_shifts_csv(store: ScheduleWeekStore, csv_path: str | Path) -> int:
    """
    Import manually scheduled shifts into schedule weeks.

    Expected columns: ``company_id, worker_id, date, type`` and optionally
    ``start, end`` (``HH:MM``). Rows for the same worker-day are grouped
    and replace the manager-entered entries of that worker-day; OFF markers
    from time-off requests and rules are kept.

    Returns:
        Number of shift rows imported
    """
    df = pd.read_csv(csv_path, dtype={"company_id": str, "worker_id": str, "start": str, "end": str})
    df.columns = df.columns.str.lower().str.strip()

    missing = {"company_id", "worker_id", "date", "type"} - set(df.columns)
    if missing:
        raise ValidationError(f"Shifts CSV is missing columns: {', '.join(sorted(missing))}")

    df["date"] = pd.to_datetime(df["date"]).dt.date

    # (company, week) -> worker -> day -> shifts
    grouped: Dict[Tuple[str, object], Dict[str, Dict[DayKey, List[Shift]]]] = defaultdict(
        lambda: defaultdict(lambda: defaultdict(list))
    )
    for _, row in df.iterrows():
        try:
            shift_type = ShiftType.parse(row["type"])
        except ValueError:
            raise ValidationError(f"Unknown shift type {row['type']!r} on {row['date']}") from None
        shift = Shift(
            type=shift_type,
            start=parse_time(_optional_str(row.get("start"))),
            end=parse_time(_optional_str(row.get("end"))),
        )
        week_key = (str(row["company_id"]).strip(), sunday_of_week(row["date"]))
        grouped[week_key][str(row["worker_id"]).strip()][DayKey.for_date(row["date"])].append(shift)

    for (company_id, week_of), imported in grouped.items():
        week = store.create_if_absent(company_id, week_of)
        patch = {
            worker_id: {
                day: replace_manual_entries(week.worker_day(worker_id, day), rows)
                for day, rows in days.items()
            }
            for worker_id, days in imported.items()
        }
        store.patch_shifts(company_id, week_of, patch)

    log.info("shifts_imported", count=len(df), weeks=len(grouped), path=str(csv_path))
    return len(df)
