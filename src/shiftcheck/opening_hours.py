from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping

from shiftcheck.timeutils import Interval, to_minutes


@dataclass(frozen=True)
class TimeSlot:
    start: str
    end: str

    def __post_init__(self) -> None:
        if to_minutes(self.end) <= to_minutes(self.start):
            raise ValueError(f"Opening slot {self.start}-{self.end} must end after it starts.")

    @property
    def interval(self) -> Interval:
        return Interval(to_minutes(self.start), to_minutes(self.end))


@dataclass(frozen=True)
class DayOpeningHours:
    """Opening hours for one weekday; several slots model a midday closure."""

    is_open: bool = False
    slots: tuple[TimeSlot, ...] = ()

    def __post_init__(self) -> None:
        ordered = tuple(sorted(self.slots, key=lambda s: to_minutes(s.start)))
        for prev, nxt in zip(ordered, ordered[1:]):
            if to_minutes(nxt.start) < to_minutes(prev.end):
                raise ValueError(
                    f"Opening slots {prev.start}-{prev.end} and {nxt.start}-{nxt.end} overlap."
                )
        object.__setattr__(self, "slots", ordered)

    @property
    def open_slots(self) -> tuple[TimeSlot, ...]:
        return self.slots if self.is_open else ()


@dataclass(frozen=True)
class OpeningHoursWeek:
    """Weekday (0 = Monday .. 6 = Sunday) -> DayOpeningHours."""

    days: Mapping[int, DayOpeningHours] = field(default_factory=dict)

    def __post_init__(self) -> None:
        bad = [d for d in self.days if not 0 <= int(d) <= 6]
        if bad:
            raise ValueError(f"Weekday keys must be within [0, 6]; got {bad}.")
        object.__setattr__(self, "days", {int(k): v for k, v in self.days.items()})

    def for_weekday(self, weekday: int) -> DayOpeningHours:
        return self.days.get(weekday, DayOpeningHours())

    @classmethod
    def uniform(
        cls, slots: Iterable[tuple[str, str]], weekdays: Iterable[int] = range(6)
    ) -> "OpeningHoursWeek":
        """Same slots on every listed weekday (Monday to Saturday by default)."""
        day = DayOpeningHours(
            is_open=True, slots=tuple(TimeSlot(s, e) for s, e in slots)
        )
        return cls(days={d: day for d in weekdays})
