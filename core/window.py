"""Rolling nine-day window: two days back, today, six days ahead.

The window advances by one day the first time the rollover check sees a
new date. Slots whose new date falls outside the range are reported as
evicted; clearing their tiles is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from core.models import slot_name

logger = logging.getLogger(__name__)


DAYS_BEFORE = 2
DAYS_AFTER = 6
WINDOW_SIZE = DAYS_BEFORE + 1 + DAYS_AFTER


@dataclass
class DaySlot:
    index: int
    day: date

    @property
    def name(self) -> str:
        return slot_name(self.index)


@dataclass
class Rollover:
    today: date
    evicted: list[str] = field(default_factory=list)


def in_range(day: date, today: date) -> bool:
    return today - timedelta(days=DAYS_BEFORE) <= day <= today + timedelta(days=DAYS_AFTER)


class DayWindow:
    def __init__(self, slots: list[DaySlot], last_checked: date) -> None:
        self.slots = slots
        self.last_checked = last_checked

    @classmethod
    def build(cls, today: date) -> DayWindow:
        start = today - timedelta(days=DAYS_BEFORE)
        slots = [DaySlot(i, start + timedelta(days=i)) for i in range(WINDOW_SIZE)]
        return cls(slots, last_checked=today)

    def __len__(self) -> int:
        return len(self.slots)

    @property
    def names(self) -> list[str]:
        return [s.name for s in self.slots]

    def slot_named(self, name: str) -> DaySlot | None:
        for s in self.slots:
            if s.name == name:
                return s
        return None

    def slot_for_day(self, day: date) -> DaySlot | None:
        for s in self.slots:
            if s.day == day:
                return s
        return None

    def is_today(self, slot: DaySlot, today: date | None = None) -> bool:
        return slot.day == (today or self.last_checked)

    @staticmethod
    def header(slot: DaySlot) -> tuple[str, str]:
        """Weekday and date labels, e.g. ('Mon', 'Oct 19')."""
        return slot.day.strftime("%a"), slot.day.strftime("%b %d")

    def shift_forward(self) -> None:
        for s in self.slots:
            s.day = s.day + timedelta(days=1)

    def check_rollover(self, current: date) -> Rollover | None:
        """Advance once per date change. Returns None when the date is unchanged."""
        if current == self.last_checked:
            return None
        self.last_checked = current
        self.shift_forward()
        evicted = [s.name for s in self.slots if not in_range(s.day, current)]
        logger.info(
            "Day rolled over to %s; window now %s..%s, evicting %s",
            current,
            self.slots[0].day,
            self.slots[-1].day,
            evicted or "nothing",
        )
        return Rollover(today=current, evicted=evicted)
