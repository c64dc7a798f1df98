"""Time-off request lifecycle.

    pending --approve--> approved --retract--> retracted
    pending --deny-----> denied
    approved --deny----> denied     (removes scheduled OFF, needs confirmation)
    denied --approve---> approved

Status updates are single-document writes and raise on failure. The OFF
markers that follow a transition are reconciled best-effort per day; the
outcome reports which days were touched, skipped or failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shiftboard.config import ADVANCE_NOTICE_DAYS, ShiftboardConfig
from shiftboard.domain.models import OffRequest
from shiftboard.domain.repositories import OffRequestRepository
from shiftboard.domain.shifts import ShiftOrigin, format_time, parse_time
from shiftboard.errors import (
    ConfirmationRequired,
    InvalidTransition,
    PermissionDenied,
    RequestNotFound,
    StoreWriteError,
    ValidationError,
)

from .reconciler import ReconcileResult, TimeDetail, TimeOffReconciler, request_off_for

log = structlog.get_logger(__name__)

PENDING = "pending"
APPROVED = "approved"
DENIED = "denied"
RETRACTED = "retracted"

SYSTEM_ACTOR = "system"


@dataclass
class TransitionOutcome:
    request: OffRequest
    reconcile: Optional[ReconcileResult] = None


def time_detail_for(request: OffRequest) -> TimeDetail:
    if request.is_all_day:
        return TimeDetail(is_all_day=True)
    return TimeDetail(
        is_all_day=False,
        start=parse_time(request.start_time),
        end=parse_time(request.end_time),
    )


def is_auto_approved(start_date: date, now: datetime, advance_notice_days: int = ADVANCE_NOTICE_DAYS) -> bool:
    """Requests starting at least the advance-notice window from now skip review."""
    return datetime.combine(start_date, time.min) >= now + timedelta(days=advance_notice_days)


class TimeOffRequestLifecycle:
    """Submits time-off requests and drives their status transitions."""

    def __init__(
        self,
        session: Session,
        reconciler: TimeOffReconciler,
        cfg: Optional[ShiftboardConfig] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.session = session
        self.reconciler = reconciler
        self.advance_notice_days = cfg.advance_notice_days if cfg is not None else ADVANCE_NOTICE_DAYS
        self.clock = clock

    def _save(self, request: OffRequest) -> OffRequest:
        try:
            return OffRequestRepository.save(self.session, request)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreWriteError(f"Failed to update request {request.id}: {e}") from e

    def _load(self, request_id: str) -> OffRequest:
        request = OffRequestRepository.get_by_id(self.session, request_id)
        if request is None:
            raise RequestNotFound(f"No time-off request with id {request_id}")
        return request

    def _apply(self, request: OffRequest) -> ReconcileResult:
        return self.reconciler.apply_range(
            request.company_id,
            request.start_date,
            request.end_date,
            request.worker_id,
            time_detail_for(request),
            ShiftOrigin.from_request(request.id),
        )

    def _remove(self, request: OffRequest) -> ReconcileResult:
        """Drop the request's OFF markers, then restore overlapping approved requests.

        Adding is idempotent per worker-day, so a day shared with another
        approved request may only carry this request's marker.
        """
        result = self.reconciler.remove_range(
            request.company_id,
            request.start_date,
            request.end_date,
            request.worker_id,
            request_off_for(request.id),
        )
        overlapping = OffRequestRepository.get_approved_overlapping(
            self.session,
            request.company_id,
            request.worker_id,
            request.start_date,
            request.end_date,
            exclude_id=request.id,
        )
        for other in overlapping:
            restored = self.reconciler.apply_range(
                other.company_id,
                max(other.start_date, request.start_date),
                min(other.end_date, request.end_date),
                other.worker_id,
                time_detail_for(other),
                ShiftOrigin.from_request(other.id),
            )
            for d in restored.failed:
                if d not in result.failed:
                    result.failed.append(d)
            if restored.touched:
                log.info("overlapping_request_restored", request_id=other.id, days=len(restored.touched))
        return result

    def submit_request(
        self,
        company_id: str,
        worker_id: str,
        start_date: Optional[date],
        end_date: Optional[date] = None,
        is_all_day: bool = True,
        start_time: Optional[str | time] = None,
        end_time: Optional[str | time] = None,
        reason: str = "",
        worker_name: Optional[str] = None,
    ) -> TransitionOutcome:
        """
        Record a new time-off request.

        Requests far enough ahead are approved by the system on creation and
        their OFF markers are applied immediately.

        Raises:
            ValidationError: If company, worker, dates or times are missing or inconsistent
        """
        if not start_date:
            raise ValidationError("Please select a start date")
        if not worker_id:
            raise ValidationError("Worker information is missing")
        if not company_id:
            raise ValidationError("Company information is missing")

        end_date = end_date or start_date
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date")

        start_t = end_t = None
        if not is_all_day:
            start_t = parse_time(start_time)
            end_t = parse_time(end_time)
            if start_t is None or end_t is None:
                raise ValidationError("Partial-day requests need a start and end time")
            if end_t <= start_t:
                raise ValidationError("End time must be after start time")

        now = self.clock()
        auto = is_auto_approved(start_date, now, self.advance_notice_days)
        request = OffRequest(
            worker_id=worker_id,
            worker_name=worker_name,
            company_id=company_id,
            start_date=start_date,
            end_date=end_date,
            is_all_day=is_all_day,
            start_time=format_time(start_t),
            end_time=format_time(end_t),
            reason=(reason or "").strip(),
            status=APPROVED if auto else PENDING,
            is_auto_approved=auto,
            requested_at=now,
            approved_at=now if auto else None,
            approved_by=SYSTEM_ACTOR if auto else None,
        )
        try:
            request = OffRequestRepository.create(self.session, request)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreWriteError(f"Failed to submit time-off request: {e}") from e

        log.info("off_request_submitted", request_id=request.id, worker_id=worker_id, status=request.status)
        reconcile = self._apply(request) if auto else None
        return TransitionOutcome(request, reconcile)

    def approve(self, request_id: str, actor: str) -> TransitionOutcome:
        """Approve a pending or previously denied request and schedule its OFF time."""
        request = self._load(request_id)
        if request.status not in (PENDING, DENIED):
            raise InvalidTransition(request_id, request.status, "approve")

        request.status = APPROVED
        request.approved_at = self.clock()
        request.approved_by = actor
        request.denied_at = None
        request.denied_by = None
        request.retracted_at = None
        request.retracted_by = None
        self._save(request)
        log.info("off_request_approved", request_id=request_id, actor=actor)

        return TransitionOutcome(request, self._apply(request))

    def deny(self, request_id: str, actor: str, confirm: bool = False) -> TransitionOutcome:
        """
        Deny a pending or approved request.

        Denying an approved request removes its scheduled OFF time, so the
        caller must pass ``confirm=True`` for that case.

        Raises:
            ConfirmationRequired: If the request is approved and ``confirm`` is False
        """
        request = self._load(request_id)
        if request.status not in (PENDING, APPROVED):
            raise InvalidTransition(request_id, request.status, "deny")

        reconcile = None
        if request.status == APPROVED:
            if not confirm:
                raise ConfirmationRequired(
                    f"Request {request_id} is approved and may have OFF time scheduled; "
                    "denying it removes that OFF time"
                )
            reconcile = self._remove(request)

        request.status = DENIED
        request.denied_at = self.clock()
        request.denied_by = actor
        request.approved_at = None
        request.approved_by = None
        request.retracted_at = None
        request.retracted_by = None
        self._save(request)
        log.info("off_request_denied", request_id=request_id, actor=actor)

        return TransitionOutcome(request, reconcile)

    def retract(self, request_id: str, actor: str) -> TransitionOutcome:
        """Worker withdraws their own approved request; scheduled OFF time is removed."""
        request = self._load(request_id)
        if request.status != APPROVED:
            raise InvalidTransition(request_id, request.status, "retract")
        if actor != request.worker_id:
            raise PermissionDenied("Only the requesting worker can retract a request")

        reconcile = self._remove(request)

        request.status = RETRACTED
        request.retracted_at = self.clock()
        request.retracted_by = actor
        request.denied_at = None
        request.denied_by = None
        self._save(request)
        log.info("off_request_retracted", request_id=request_id, actor=actor)

        return TransitionOutcome(request, reconcile)

    def delete(self, request_id: str, actor: str) -> None:
        """Delete the worker's own request while it is still pending."""
        request = self._load(request_id)
        if request.status != PENDING:
            raise InvalidTransition(request_id, request.status, "delete")
        if actor != request.worker_id:
            raise PermissionDenied("Only the requesting worker can delete a request")
        try:
            OffRequestRepository.delete(self.session, request)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StoreWriteError(f"Failed to delete request {request_id}: {e}") from e
        log.info("off_request_deleted", request_id=request_id, actor=actor)
