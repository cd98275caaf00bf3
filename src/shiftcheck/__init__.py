from .config import ValidationConfig
from .conflicts import Conflict, ConflictCategory, Severity, ValidationResult
from .engine import validate_candidate, validate_week
from .opening_hours import DayOpeningHours, OpeningHoursWeek, TimeSlot
from .shift import Shift, ShiftStatus, ShiftType
from .staff import Employee, EmployeeCategory
from .timeutils import effective_hours

__all__ = [
    "Conflict",
    "ConflictCategory",
    "DayOpeningHours",
    "Employee",
    "EmployeeCategory",
    "OpeningHoursWeek",
    "Severity",
    "Shift",
    "ShiftStatus",
    "ShiftType",
    "TimeSlot",
    "ValidationConfig",
    "ValidationResult",
    "effective_hours",
    "validate_candidate",
    "validate_week",
]
