"""Schedule week store: the document-store seam used by reconciliation.

Every operation is keyed by ``{company_id}_{YYYY-MM-DD}`` of the week's
Sunday, so any date inside a week resolves to the same document.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shiftboard.errors import StoreReadError, StoreWriteError

from .models import ScheduleWeekRecord
from .shifts import (
    DayKey,
    ScheduleWeek,
    WeekShifts,
    WorkerDay,
    dump_week_shifts,
    dump_worker_day,
    parse_week_shifts,
    schedule_week_id,
    sunday_of_week,
)

log = structlog.get_logger(__name__)

ShiftsPatch = Dict[str, Dict[DayKey, WorkerDay]]


class ScheduleWeekStore(ABC):
    """
    Abstract access to schedule week documents.

    ``patch_shifts`` must merge at the worker-day level: worker-days not
    named in the patch are left untouched.
    """

    @abstractmethod
    def get(self, company_id: str, week_start: date) -> Optional[ScheduleWeek]:
        """Return the week containing ``week_start``, or None if absent."""
        pass

    @abstractmethod
    def create_if_absent(
        self,
        company_id: str,
        week_start: date,
        initial_shifts: Optional[WeekShifts] = None,
    ) -> ScheduleWeek:
        """Return the existing week, or create it as an unpublished draft."""
        pass

    @abstractmethod
    def patch_shifts(self, company_id: str, week_start: date, patch: ShiftsPatch) -> None:
        """
        Merge worker-day lists into the week's shifts.

        Raises:
            StoreWriteError: If the write is rejected
        """
        pass

    @abstractmethod
    def list_weeks(self, company_id: str, since: Optional[date] = None) -> List[ScheduleWeek]:
        """List a company's weeks, optionally only those anchored on or after ``since``."""
        pass

    @abstractmethod
    def set_published(self, company_id: str, week_start: date, published: bool) -> ScheduleWeek:
        """Publish or unpublish a week (manager action)."""
        pass


def _to_snapshot(record: ScheduleWeekRecord) -> ScheduleWeek:
    return ScheduleWeek(
        company_id=record.company_id,
        week_of=record.week_of,
        is_published=bool(record.is_published),
        shifts=parse_week_shifts(record.shifts),
    )


class SqlScheduleWeekStore(ScheduleWeekStore):
    """Schedule week store backed by a SQLAlchemy table with a JSON shifts column."""

    def __init__(self, session_factory: sessionmaker):
        self.SessionLocal = session_factory

    def get(self, company_id: str, week_start: date) -> Optional[ScheduleWeek]:
        doc_id = schedule_week_id(company_id, week_start)
        try:
            with self.SessionLocal() as session:
                record = session.get(ScheduleWeekRecord, doc_id)
                return _to_snapshot(record) if record is not None else None
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to read schedule {doc_id}: {e}") from e

    def create_if_absent(
        self,
        company_id: str,
        week_start: date,
        initial_shifts: Optional[WeekShifts] = None,
    ) -> ScheduleWeek:
        doc_id = schedule_week_id(company_id, week_start)
        try:
            with self.SessionLocal() as session:
                record = session.get(ScheduleWeekRecord, doc_id)
                if record is None:
                    record = ScheduleWeekRecord(
                        id=doc_id,
                        company_id=company_id,
                        week_of=sunday_of_week(week_start),
                        is_published=False,
                        shifts=dump_week_shifts(initial_shifts or {}),
                    )
                    session.add(record)
                    session.commit()
                    log.info("schedule_week_created", doc_id=doc_id)
                return _to_snapshot(record)
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Failed to create schedule {doc_id}: {e}") from e

    def patch_shifts(self, company_id: str, week_start: date, patch: ShiftsPatch) -> None:
        doc_id = schedule_week_id(company_id, week_start)
        try:
            with self.SessionLocal() as session:
                record = session.get(ScheduleWeekRecord, doc_id)
                if record is None:
                    # Merge writes create the document, as a set-with-merge would
                    record = ScheduleWeekRecord(
                        id=doc_id,
                        company_id=company_id,
                        week_of=sunday_of_week(week_start),
                        is_published=False,
                        shifts={},
                    )
                    session.add(record)

                merged = copy.deepcopy(dict(record.shifts or {}))
                for worker_id, days in patch.items():
                    worker_days = dict(merged.get(worker_id) or {})
                    for day, shifts in days.items():
                        worker_days[day.value] = dump_worker_day(shifts)
                    merged[worker_id] = worker_days
                record.shifts = merged
                session.commit()
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Failed to patch schedule {doc_id}: {e}") from e

    def list_weeks(self, company_id: str, since: Optional[date] = None) -> List[ScheduleWeek]:
        try:
            with self.SessionLocal() as session:
                query = session.query(ScheduleWeekRecord).filter(
                    ScheduleWeekRecord.company_id == company_id
                )
                if since is not None:
                    query = query.filter(ScheduleWeekRecord.week_of >= sunday_of_week(since))
                return [_to_snapshot(r) for r in query.order_by(ScheduleWeekRecord.week_of).all()]
        except SQLAlchemyError as e:
            raise StoreReadError(f"Failed to list schedules for {company_id}: {e}") from e

    def set_published(self, company_id: str, week_start: date, published: bool) -> ScheduleWeek:
        doc_id = schedule_week_id(company_id, week_start)
        try:
            with self.SessionLocal() as session:
                record = session.get(ScheduleWeekRecord, doc_id)
                if record is None:
                    record = ScheduleWeekRecord(
                        id=doc_id,
                        company_id=company_id,
                        week_of=sunday_of_week(week_start),
                        shifts={},
                    )
                    session.add(record)
                record.is_published = published
                session.commit()
                log.info("schedule_week_published" if published else "schedule_week_unpublished", doc_id=doc_id)
                return _to_snapshot(record)
        except SQLAlchemyError as e:
            raise StoreWriteError(f"Failed to update schedule {doc_id}: {e}") from e
