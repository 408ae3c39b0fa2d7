"""TimeSlot and TimeAxis value objects.

A TimeSlot is one column of the bay schedule header; a TimeAxis is the
ordered run of slots for one (date range, granularity) request.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from datetime import date

from .enums import Granularity


@dataclass(frozen=True)
class TimeSlot:
    date: date
    end: date  # exclusive
    label: str
    sub_label: str
    width: int
    is_weekend: bool = False

    @property
    def days(self) -> int:
        return (self.end - self.date).days

    def contains(self, day: date) -> bool:
        return self.date <= day < self.end


@dataclass(frozen=True)
class TimeAxis:
    granularity: Granularity
    slots: tuple[TimeSlot, ...]

    @property
    def slot_width(self) -> int:
        return self.granularity.slot_width

    @property
    def start(self) -> date | None:
        return self.slots[0].date if self.slots else None

    @property
    def end(self) -> date | None:
        """Exclusive end of the last slot."""
        return self.slots[-1].end if self.slots else None

    @property
    def total_width(self) -> int:
        return len(self.slots) * self.slot_width

    def __len__(self) -> int:
        return len(self.slots)

    def is_empty(self) -> bool:
        return not self.slots

    def slot_index_for(self, day: date) -> int | None:
        """Index of the slot containing ``day``, or None when off the axis."""
        if not self.slots or day < self.slots[0].date or day >= self.slots[-1].end:
            return None
        starts = [slot.date for slot in self.slots]
        return bisect_right(starts, day) - 1

    def slot_at(self, index: int) -> TimeSlot | None:
        if 0 <= index < len(self.slots):
            return self.slots[index]
        return None
