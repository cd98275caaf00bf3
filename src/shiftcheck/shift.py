from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shiftcheck.exceptions import InvalidRecordError
from shiftcheck.timeutils import Interval, effective_hours, parse_date, to_minutes


class ShiftType(str, Enum):
    REGULAR = "regular"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    SPLIT = "split"
    LEAVE_PAID = "leave_paid"
    LEAVE_SICK = "leave_sick"
    LEAVE_RTT = "leave_rtt"
    TRAINING = "training"
    ONCALL = "oncall"
    STANDBY = "standby"


class ShiftStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Shift:
    """
    One scheduled unit of time for one employee on one calendar day.

    Times are kept as the raw "HH:MM" strings handed over by the persistence
    layer; a malformed value is reported by the validators as a structural
    conflict instead of being rejected here.
    """

    id: str
    employee_id: str
    date: dt.date
    start_time: str
    end_time: str
    break_minutes: int = 0
    type: ShiftType = ShiftType.REGULAR
    status: ShiftStatus = ShiftStatus.DRAFT
    organization_id: str = ""
    notes: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidRecordError("shift", "'id' is required.")
        if not self.employee_id:
            raise InvalidRecordError("shift", f"shift {self.id} has no employee_id.")
        try:
            object.__setattr__(self, "date", parse_date(self.date))
            object.__setattr__(self, "type", ShiftType(self.type))
            object.__setattr__(self, "status", ShiftStatus(self.status))
            object.__setattr__(self, "break_minutes", int(self.break_minutes or 0))
        except (TypeError, ValueError) as exc:
            raise InvalidRecordError("shift", f"shift {self.id}: {exc}") from exc

    @property
    def interval(self) -> Interval:
        """Minutes since midnight; raises MalformedTimeError on bad times."""
        return Interval(to_minutes(self.start_time), to_minutes(self.end_time))

    @property
    def effective_hours(self) -> float:
        return effective_hours(self.start_time, self.end_time, self.break_minutes)

    @property
    def is_cancelled(self) -> bool:
        return self.status is ShiftStatus.CANCELLED

    def label(self) -> str:
        return f"{self.start_time}-{self.end_time}"
