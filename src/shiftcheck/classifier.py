from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Mapping

from shiftcheck.shift import Shift, ShiftType

if TYPE_CHECKING:
    from shiftcheck.config import ValidationConfig


class ShiftKind(str, Enum):
    WORKABLE = "workable"
    LEAVE = "leave"
    SPECIAL = "special"
    TRAINING = "training"


DEFAULT_KIND_BY_TYPE: Mapping[ShiftType, ShiftKind] = {
    ShiftType.REGULAR: ShiftKind.WORKABLE,
    ShiftType.MORNING: ShiftKind.WORKABLE,
    ShiftType.AFTERNOON: ShiftKind.WORKABLE,
    ShiftType.SPLIT: ShiftKind.WORKABLE,
    ShiftType.LEAVE_PAID: ShiftKind.LEAVE,
    ShiftType.LEAVE_SICK: ShiftKind.LEAVE,
    ShiftType.LEAVE_RTT: ShiftKind.LEAVE,
    ShiftType.ONCALL: ShiftKind.SPECIAL,
    ShiftType.STANDBY: ShiftKind.SPECIAL,
    ShiftType.TRAINING: ShiftKind.TRAINING,
}


@dataclass(frozen=True)
class ShiftClassifier:
    """
    Partition shifts into kinds and answer which kinds feed which validator.

    Which kinds count toward daily hours and which toward pharmacist coverage
    both come from the ValidationConfig.

    Every kind occupies time: overlap detection and the weekly rest timeline
    look at all shifts regardless of kind.
    """

    hours_kinds: frozenset[ShiftKind] = frozenset({ShiftKind.WORKABLE})
    coverage_kinds: frozenset[ShiftKind] = frozenset({ShiftKind.WORKABLE})
    kind_by_type: Mapping[ShiftType, ShiftKind] = field(
        default_factory=lambda: dict(DEFAULT_KIND_BY_TYPE)
    )

    @classmethod
    def from_config(cls, cfg: "ValidationConfig") -> "ShiftClassifier":
        return cls(
            hours_kinds=frozenset(cfg.HOURS_KINDS),
            coverage_kinds=frozenset(cfg.COVERAGE_KINDS),
        )

    def classify(self, shift: Shift) -> ShiftKind:
        return self.kind_by_type[shift.type]

    def counts_toward_hours(self, shift: Shift) -> bool:
        return self.classify(shift) in self.hours_kinds

    def counts_toward_coverage(self, shift: Shift) -> bool:
        return not shift.is_cancelled and self.classify(shift) in self.coverage_kinds

    def partition(self, shifts: Iterable[Shift]) -> dict[ShiftKind, list[Shift]]:
        out: dict[ShiftKind, list[Shift]] = defaultdict(list)
        for shift in shifts:
            out[self.classify(shift)].append(shift)
        return dict(out)
