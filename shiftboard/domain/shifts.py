"""Typed shift data model and week/date helpers.

The store keeps a week's shifts as nested JSON
(``worker -> day -> [shift, ...] | null``). This module converts that
form to typed values and back, and owns the week-anchoring rules that
every caller must agree on to address the same schedule document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time, timedelta
from enum import Enum
from typing import Dict, Iterator, List, Optional


class ShiftType(Enum):
    GUARD = "GUARD"
    MANAGER = "MANAGER"
    FRONT = "FRONT"
    LESSONS = "LESSONS"
    CAMP = "CAMP"
    OFF = "OFF"
    SWIM_MEET = "SWIM MEET"

    @classmethod
    def parse(cls, label: str) -> "ShiftType":
        """Accept stored values ("SWIM MEET") as well as member names ("SWIM_MEET")."""
        label = label.strip().upper()
        if label in cls.__members__:
            return cls[label]
        return cls(label)


STATUS_TYPES = frozenset({ShiftType.OFF, ShiftType.SWIM_MEET})
WORK_TYPES = frozenset(set(ShiftType) - STATUS_TYPES)


class DayKey(Enum):
    SUN = "sun"
    MON = "mon"
    TUE = "tue"
    WED = "wed"
    THU = "thu"
    FRI = "fri"
    SAT = "sat"

    @classmethod
    def ordered(cls) -> List["DayKey"]:
        return list(cls)

    @classmethod
    def for_date(cls, d: date) -> "DayKey":
        # date.weekday() is Monday=0; week rows are Sunday-first
        return cls.ordered()[(d.weekday() + 1) % 7]

    def offset(self) -> int:
        """Days from the week's Sunday anchor."""
        return DayKey.ordered().index(self)


class OriginKind(Enum):
    MANUAL = "manual"
    REQUEST = "request"
    RULE = "rule"


@dataclass(frozen=True)
class ShiftOrigin:
    """Who created a shift entry: a manager, a time-off request, or an OFF rule."""

    kind: OriginKind = OriginKind.MANUAL
    ref: Optional[str] = None

    @classmethod
    def manual(cls) -> "ShiftOrigin":
        return cls()

    @classmethod
    def from_request(cls, request_id: Optional[str]) -> "ShiftOrigin":
        return cls(OriginKind.REQUEST, request_id)

    @classmethod
    def from_rule(cls, rule_id: Optional[str]) -> "ShiftOrigin":
        return cls(OriginKind.RULE, rule_id)

    @property
    def is_request(self) -> bool:
        return self.kind is OriginKind.REQUEST

    @property
    def is_rule(self) -> bool:
        return self.kind is OriginKind.RULE


def parse_time(value: str | time | None) -> Optional[time]:
    """Parse an ``HH:MM`` string as stored in schedule documents."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    hours, minutes = value.strip().split(":")[:2]
    return time(int(hours), int(minutes))


def format_time(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return f"{value.hour:02d}:{value.minute:02d}"


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


@dataclass(frozen=True)
class Shift:
    """A single entry in a worker-day: a work shift, OFF, or SWIM MEET."""

    type: ShiftType
    start: Optional[time] = None
    end: Optional[time] = None
    origin: ShiftOrigin = field(default_factory=ShiftOrigin.manual)

    @property
    def is_timed(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_all_day(self) -> bool:
        return not self.is_timed

    @property
    def is_status(self) -> bool:
        return self.type in STATUS_TYPES

    @classmethod
    def from_dict(cls, data: Dict) -> "Shift":
        if data.get("isRequest"):
            origin = ShiftOrigin.from_request(data.get("requestId"))
        elif data.get("isRule"):
            origin = ShiftOrigin.from_rule(data.get("ruleId"))
        else:
            origin = ShiftOrigin.manual()
        return cls(
            type=ShiftType(data["type"]),
            start=parse_time(data.get("start")),
            end=parse_time(data.get("end")),
            origin=origin,
        )

    def to_dict(self) -> Dict:
        out: Dict = {"type": self.type.value}
        if self.start is not None:
            out["start"] = format_time(self.start)
        if self.end is not None:
            out["end"] = format_time(self.end)
        if self.origin.is_request:
            out["isRequest"] = True
            if self.origin.ref is not None:
                out["requestId"] = self.origin.ref
        elif self.origin.is_rule:
            out["isRule"] = True
            if self.origin.ref is not None:
                out["ruleId"] = self.origin.ref
        return out


WorkerDay = Optional[List[Shift]]
WeekShifts = Dict[str, Dict[DayKey, WorkerDay]]


def parse_worker_day(raw) -> WorkerDay:
    if raw is None:
        return None
    return [Shift.from_dict(item) for item in raw]


def dump_worker_day(day: WorkerDay):
    if not day:
        return None
    return [s.to_dict() for s in day]


def parse_week_shifts(raw: Optional[Dict]) -> WeekShifts:
    """Convert stored ``{worker: {day: [..]}}`` JSON into typed form."""
    result: WeekShifts = {}
    for worker_id, days in (raw or {}).items():
        if not days:
            continue
        result[worker_id] = {DayKey(k): parse_worker_day(v) for k, v in days.items()}
    return result


def dump_week_shifts(shifts: WeekShifts) -> Dict:
    return {
        worker_id: {day.value: dump_worker_day(v) for day, v in days.items()}
        for worker_id, days in shifts.items()
    }


def sunday_of_week(d: date) -> date:
    """Return the Sunday that anchors the schedule week containing ``d``."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def schedule_week_id(company_id: str, d: date) -> str:
    """Document id ``{companyId}_{YYYY-MM-DD}`` for the week containing ``d``."""
    return f"{company_id}_{sunday_of_week(d).isoformat()}"


def week_dates(week_of: date) -> Dict[DayKey, date]:
    anchor = sunday_of_week(week_of)
    return {day: anchor + timedelta(days=day.offset()) for day in DayKey}


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


@dataclass(frozen=True)
class ScheduleWeek:
    """Immutable snapshot of one schedule week document."""

    company_id: str
    week_of: date
    is_published: bool = False
    shifts: WeekShifts = field(default_factory=dict)

    @property
    def doc_id(self) -> str:
        return schedule_week_id(self.company_id, self.week_of)

    def worker_day(self, worker_id: str, day: DayKey) -> WorkerDay:
        return self.shifts.get(worker_id, {}).get(day)

    def worker_week(self, worker_id: str) -> Dict[DayKey, WorkerDay]:
        return self.shifts.get(worker_id, {})
