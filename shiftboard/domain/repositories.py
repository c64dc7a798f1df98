"""Repository classes for worker and time-off request data access."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from .models import OffRequest, OffRule, Worker


class WorkerRepository:
    """Repository for worker data access."""

    @staticmethod
    def get_by_uid(session: Session, uid: str) -> Optional[Worker]:
        """Get worker by uid."""
        return session.get(Worker, uid)

    @staticmethod
    def get_by_company(session: Session, company_id: str) -> List[Worker]:
        """Get all workers of a company, ordered by seniority then name."""
        return (
            session.query(Worker)
            .filter(Worker.company_id == company_id)
            .order_by(Worker.yos.desc(), Worker.full_name)
            .all()
        )

    @staticmethod
    def create(session: Session, worker: Worker) -> Worker:
        """Create a new worker."""
        session.add(worker)
        session.commit()
        session.refresh(worker)
        return worker

    @staticmethod
    def bulk_create(session: Session, workers: List[Worker]) -> None:
        """Create multiple workers."""
        session.add_all(workers)
        session.commit()

    @staticmethod
    def replace_rules(session: Session, worker: Worker, rules: List[OffRule]) -> List[OffRule]:
        """Replace a worker's OFF rules with ``rules`` (kept in the given order).

        Rows whose id is already stored are updated in place.
        """
        existing = {r.id: r for r in worker.off_rules}
        updated = []
        for position, rule in enumerate(rules):
            row = existing.get(rule.id)
            if row is None:
                row = rule
            else:
                row.day = rule.day
                row.all_day = rule.all_day
                row.start_time = rule.start_time
                row.end_time = rule.end_time
            row.position = position
            updated.append(row)
        worker.off_rules = updated
        session.commit()
        session.refresh(worker)
        return list(worker.off_rules)


class OffRequestRepository:
    """Repository for time-off request data access."""

    @staticmethod
    def get_by_id(session: Session, request_id: str) -> Optional[OffRequest]:
        return session.get(OffRequest, request_id)

    @staticmethod
    def get_by_worker(session: Session, company_id: str, worker_id: str) -> List[OffRequest]:
        """Get a worker's requests, newest first."""
        return (
            session.query(OffRequest)
            .filter(OffRequest.company_id == company_id, OffRequest.worker_id == worker_id)
            .order_by(OffRequest.requested_at.desc())
            .all()
        )

    @staticmethod
    def get_by_company(session: Session, company_id: str) -> List[OffRequest]:
        """Get all requests for a company, newest first."""
        return (
            session.query(OffRequest)
            .filter(OffRequest.company_id == company_id)
            .order_by(OffRequest.requested_at.desc())
            .all()
        )

    @staticmethod
    def get_pending(session: Session, company_id: str) -> List[OffRequest]:
        return (
            session.query(OffRequest)
            .filter(OffRequest.company_id == company_id, OffRequest.status == "pending")
            .order_by(OffRequest.requested_at.desc())
            .all()
        )

    @staticmethod
    def get_approved_overlapping(
        session: Session,
        company_id: str,
        worker_id: str,
        start: date,
        end: date,
        exclude_id: Optional[str] = None,
    ) -> List[OffRequest]:
        """Approved requests of a worker whose date range intersects ``start..end``."""
        query = session.query(OffRequest).filter(
            OffRequest.company_id == company_id,
            OffRequest.worker_id == worker_id,
            OffRequest.status == "approved",
            OffRequest.start_date <= end,
            OffRequest.end_date >= start,
        )
        if exclude_id is not None:
            query = query.filter(OffRequest.id != exclude_id)
        return query.order_by(OffRequest.start_date).all()

    @staticmethod
    def create(session: Session, request: OffRequest) -> OffRequest:
        session.add(request)
        session.commit()
        session.refresh(request)
        return request

    @staticmethod
    def save(session: Session, request: OffRequest) -> OffRequest:
        """Persist changes made to an already-loaded request."""
        session.add(request)
        session.commit()
        return request

    @staticmethod
    def delete(session: Session, request: OffRequest) -> None:
        session.delete(request)
        session.commit()
