"""Saving a worker's recurring OFF rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import List, Optional, Sequence, Tuple
from uuid import uuid4

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiftboard.domain.models import OffRule
from shiftboard.domain.repositories import WorkerRepository
from shiftboard.domain.shifts import DayKey, format_time, parse_time
from shiftboard.errors import StoreWriteError, ValidationError

from .reconciler import ReconcileResult, TimeOffReconciler

log = structlog.get_logger(__name__)


@dataclass
class RuleSpec:
    day: str
    all_day: bool = True
    start_time: Optional[str | time] = None
    end_time: Optional[str | time] = None
    id: Optional[str] = None


def build_rule(spec: RuleSpec) -> OffRule:
    """Validate a rule definition and turn it into an ``OffRule`` row."""
    try:
        day = DayKey(spec.day)
    except ValueError:
        raise ValidationError(f"Unknown day {spec.day!r}; expected one of sun..sat") from None

    start = end = None
    if not spec.all_day:
        start = parse_time(spec.start_time)
        end = parse_time(spec.end_time)
        if start is None or end is None:
            raise ValidationError(f"Rule for {day.value} needs a start and end time")
        if end <= start:
            raise ValidationError(f"Rule for {day.value}: end time must be after start time")

    return OffRule(
        id=spec.id or uuid4().hex,
        day=day.value,
        all_day=spec.all_day,
        start_time=format_time(start),
        end_time=format_time(end),
    )


def save_rules(
    session: Session,
    reconciler: TimeOffReconciler,
    worker_uid: str,
    specs: Sequence[RuleSpec],
    today: Optional[date] = None,
) -> Tuple[List[OffRule], ReconcileResult]:
    """
    Replace a worker's OFF rules and regenerate their markers.

    The rule list is saved first (failure raises); marker regeneration on
    draft weeks from the current week onward follows and is best-effort.

    Raises:
        ValidationError: If the worker is unknown or a rule is invalid
        StoreWriteError: If the rules could not be saved
    """
    worker = WorkerRepository.get_by_uid(session, worker_uid)
    if worker is None:
        raise ValidationError(f"Unknown worker {worker_uid}")

    rules = [build_rule(spec) for spec in specs]
    try:
        rules = WorkerRepository.replace_rules(session, worker, rules)
    except SQLAlchemyError as e:
        session.rollback()
        raise StoreWriteError(f"Failed to save OFF rules for {worker_uid}: {e}") from e
    log.info("off_rules_saved", worker_id=worker_uid, count=len(rules))

    result = reconciler.regenerate_rules(worker.company_id, worker_uid, rules, today or date.today())
    return rules, result
