"""Domain models and data access layer."""

from .models import Base, OffRequest, OffRule, ScheduleWeekRecord, Worker
from .repositories import OffRequestRepository, WorkerRepository
from .shifts import DayKey, ScheduleWeek, Shift, ShiftOrigin, ShiftType
from .store import ScheduleWeekStore, SqlScheduleWeekStore

__all__ = [
    "Base",
    "OffRequest",
    "OffRule",
    "ScheduleWeekRecord",
    "Worker",
    "OffRequestRepository",
    "WorkerRepository",
    "DayKey",
    "ScheduleWeek",
    "Shift",
    "ShiftOrigin",
    "ShiftType",
    "ScheduleWeekStore",
    "SqlScheduleWeekStore",
]
