"""Time-off reconciliation across schedule weeks.

Derived OFF markers are written into draft weeks when requests are
approved or rules are saved, and removed again when requests are denied
or retracted. Published weeks are never modified here. Each day (or week,
for rules) is an independent merge write; a failing write is logged and
the loop moves on, so callers can retry the dates reported as failed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from shiftboard.domain.models import OffRule
from shiftboard.domain.shifts import (
    DayKey,
    Shift,
    ShiftOrigin,
    ShiftType,
    iter_dates,
    parse_time,
    sunday_of_week,
)
from shiftboard.domain.store import ScheduleWeekStore
from shiftboard.errors import StoreError

log = structlog.get_logger(__name__)

ShiftPredicate = Callable[[Shift], bool]


@dataclass(frozen=True)
class TimeDetail:
    """The time window a piece of OFF time covers on each day."""

    is_all_day: bool = True
    start: Optional[time] = None
    end: Optional[time] = None


@dataclass
class ReconcileResult:
    touched: List[date] = field(default_factory=list)
    unchanged: List[date] = field(default_factory=list)
    skipped_published: List[date] = field(default_factory=list)
    failed: List[date] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def build_off_marker(detail: TimeDetail, origin: ShiftOrigin) -> Shift:
    if detail.is_all_day:
        return Shift(type=ShiftType.OFF, origin=origin)
    return Shift(type=ShiftType.OFF, start=detail.start, end=detail.end, origin=origin)


def rule_marker(rule: OffRule) -> Shift:
    detail = TimeDetail(
        is_all_day=bool(rule.all_day),
        start=parse_time(rule.start_time),
        end=parse_time(rule.end_time),
    )
    return build_off_marker(detail, ShiftOrigin.from_rule(rule.id))


def is_request_off(shift: Shift) -> bool:
    return shift.type is ShiftType.OFF and shift.origin.is_request


def is_rule_off(shift: Shift) -> bool:
    return shift.type is ShiftType.OFF and shift.origin.is_rule


def request_off_for(request_id: str) -> ShiftPredicate:
    """Match OFF markers owned by one request."""

    def _matches(shift: Shift) -> bool:
        return is_request_off(shift) and shift.origin.ref == request_id

    return _matches


class TimeOffReconciler:
    """Applies and removes derived OFF markers through a schedule week store."""

    def __init__(self, store: ScheduleWeekStore):
        self.store = store

    def apply_range(
        self,
        company_id: str,
        start: date,
        end: date,
        worker_id: str,
        detail: TimeDetail,
        origin: ShiftOrigin,
    ) -> ReconcileResult:
        """
        Add an OFF marker for ``worker_id`` on every draft day in ``start..end``.

        Request-tagged markers are idempotent per worker-day: a day that
        already carries a request OFF is left as is.

        Args:
            company_id: Company that owns the schedule weeks
            start: First day (inclusive)
            end: Last day (inclusive)
            worker_id: Worker the OFF time belongs to
            detail: All-day or timed window
            origin: Back-reference to the owning request or rule

        Returns:
            ReconcileResult listing touched, unchanged, skipped and failed days
        """
        result = ReconcileResult()
        marker = build_off_marker(detail, origin)

        for d in iter_dates(start, end):
            try:
                week = self.store.create_if_absent(company_id, sunday_of_week(d))
                if week.is_published:
                    log.debug("published_week_skipped", doc_id=week.doc_id, date=d.isoformat())
                    result.skipped_published.append(d)
                    continue

                day = DayKey.for_date(d)
                existing = list(week.worker_day(worker_id, day) or [])
                if origin.is_request and any(is_request_off(s) for s in existing):
                    result.unchanged.append(d)
                    continue

                self.store.patch_shifts(company_id, d, {worker_id: {day: existing + [marker]}})
                result.touched.append(d)
                log.info("off_marker_applied", worker_id=worker_id, date=d.isoformat(), doc_id=week.doc_id)
            except StoreError:
                log.warning("reconcile_day_failed", worker_id=worker_id, date=d.isoformat(), exc_info=True)
                result.failed.append(d)

        return result

    def remove_range(
        self,
        company_id: str,
        start: date,
        end: date,
        worker_id: str,
        predicate: ShiftPredicate,
    ) -> ReconcileResult:
        """
        Drop entries matching ``predicate`` from the worker's days in ``start..end``.

        A worker-day left empty is written back as ``None``.
        """
        result = ReconcileResult()

        for d in iter_dates(start, end):
            try:
                week = self.store.get(company_id, d)
                if week is None:
                    result.unchanged.append(d)
                    continue
                if week.is_published:
                    log.debug("published_week_skipped", doc_id=week.doc_id, date=d.isoformat())
                    result.skipped_published.append(d)
                    continue

                day = DayKey.for_date(d)
                existing = week.worker_day(worker_id, day) or []
                kept = [s for s in existing if not predicate(s)]
                if len(kept) == len(existing):
                    result.unchanged.append(d)
                    continue

                self.store.patch_shifts(company_id, d, {worker_id: {day: kept or None}})
                result.touched.append(d)
                log.info("off_marker_removed", worker_id=worker_id, date=d.isoformat(), doc_id=week.doc_id)
            except StoreError:
                log.warning("reconcile_day_failed", worker_id=worker_id, date=d.isoformat(), exc_info=True)
                result.failed.append(d)

        return result

    def regenerate_rules(
        self,
        company_id: str,
        worker_id: str,
        rules: Sequence[OffRule],
        today: date,
    ) -> ReconcileResult:
        """
        Rebuild rule-derived OFF markers in every draft week from this week on.

        All existing rule markers for the worker are discarded and rebuilt
        from ``rules``, so edited time windows and deleted rules never
        leave stale markers behind. Result dates are week anchors.
        """
        result = ReconcileResult()
        markers_by_day: Dict[DayKey, List[Shift]] = {day: [] for day in DayKey}
        for rule in rules:
            markers_by_day[DayKey(rule.day)].append(rule_marker(rule))

        for week in self.store.list_weeks(company_id, since=sunday_of_week(today)):
            if week.is_published:
                result.skipped_published.append(week.week_of)
                continue

            patch = {}
            for day in DayKey:
                existing = week.worker_day(worker_id, day) or []
                rebuilt = [s for s in existing if not is_rule_off(s)] + markers_by_day[day]
                if rebuilt != existing:
                    patch[day] = rebuilt or None

            if not patch:
                result.unchanged.append(week.week_of)
                continue
            try:
                self.store.patch_shifts(company_id, week.week_of, {worker_id: patch})
                result.touched.append(week.week_of)
                log.info("off_rules_applied", worker_id=worker_id, doc_id=week.doc_id, days=len(patch))
            except StoreError:
                log.warning("reconcile_week_failed", worker_id=worker_id, doc_id=week.doc_id, exc_info=True)
                result.failed.append(week.week_of)

        return result
