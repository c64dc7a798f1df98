"""SQLAlchemy models for schedule weeks, workers and time-off requests."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.mutable import MutableDict
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def _new_id() -> str:
    return uuid4().hex


class ScheduleWeekRecord(Base):
    """One schedule document per company and Sunday-anchored week."""

    __tablename__ = "schedule_weeks"

    id = Column(String(120), primary_key=True)  # {company_id}_{YYYY-MM-DD}
    company_id = Column(String(64), nullable=False, index=True)
    week_of = Column(Date, nullable=False)
    is_published = Column(Boolean, nullable=False, default=False)
    shifts = Column(MutableDict.as_mutable(JSON), nullable=False, default=dict)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self) -> str:
        return f"<ScheduleWeekRecord(id='{self.id}', published={self.is_published})>"


class Worker(Base):
    """A staff member who can be scheduled."""

    __tablename__ = "workers"

    uid = Column(String(64), primary_key=True)
    company_id = Column(String(64), nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    title = Column(String(100), nullable=False, default="Lifeguard")
    yos = Column(Integer, nullable=False, default=0)  # years of service
    is_minor = Column(Boolean, nullable=False, default=False)

    off_rules = relationship(
        "OffRule",
        back_populates="worker",
        cascade="all, delete-orphan",
        order_by="OffRule.position",
    )

    def __repr__(self) -> str:
        return f"<Worker(uid='{self.uid}', name='{self.full_name}', minor={self.is_minor})>"


class OffRule(Base):
    """Recurring weekly OFF time for a worker."""

    __tablename__ = "off_rules"

    id = Column(String(64), primary_key=True, default=_new_id)
    worker_uid = Column(String(64), ForeignKey("workers.uid"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    day = Column(String(3), nullable=False)  # sun..sat
    all_day = Column(Boolean, nullable=False, default=True)
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)

    worker = relationship("Worker", back_populates="off_rules")

    def __repr__(self) -> str:
        return f"<OffRule(id='{self.id}', day='{self.day}', all_day={self.all_day})>"


class OffRequest(Base):
    """An ad-hoc time-off request and its approval history."""

    __tablename__ = "off_requests"

    id = Column(String(64), primary_key=True, default=_new_id)
    worker_id = Column(String(64), nullable=False, index=True)
    worker_name = Column(String(200), nullable=True)
    company_id = Column(String(64), nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_all_day = Column(Boolean, nullable=False, default=True)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    reason = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, approved, denied, retracted
    is_auto_approved = Column(Boolean, nullable=False, default=False)
    requested_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    approved_at = Column(DateTime, nullable=True)
    approved_by = Column(String(64), nullable=True)
    denied_at = Column(DateTime, nullable=True)
    denied_by = Column(String(64), nullable=True)
    retracted_at = Column(DateTime, nullable=True)
    retracted_by = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<OffRequest(id='{self.id}', worker='{self.worker_id}', "
            f"{self.start_date}..{self.end_date}, status='{self.status}')>"
        )
