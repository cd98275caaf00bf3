from __future__ import annotations


class ShiftcheckError(Exception):
    """Base class for programming errors raised at the engine boundary."""


class MalformedTimeError(ShiftcheckError, ValueError):
    """A time-of-day value is not a valid "HH:MM" string."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Malformed time {value!r}; expected 'HH:MM'.")
        self.value = value


class InvalidRecordError(ShiftcheckError, ValueError):
    """A shift/employee/opening-hours record is missing a field or has the wrong shape."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"Invalid {kind} record: {message}")
        self.kind = kind
