"""
Time and Shift Model
====================
Calendar facts for a month and resolution of a shift id into the effective
start/end/hours for an employee's work system and an optional override.

Everything here is pure; `effective_shift` sits in the generator's inner
loops, so catalog resolutions are memoized.
"""
import calendar
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import FrozenSet, List, NamedTuple, Optional

from shiftplan.models.employee import WorkSystem
from shiftplan.models.rules import HOLIDAYS
from shiftplan.models.schedule import ShiftOverride
from shiftplan.models.shift import OFF, ShiftKind, get_shift


class Week(NamedTuple):
    """Inclusive day range of one calendar week clipped to the month."""
    start: int
    end: int

    @property
    def days(self) -> List[int]:
        return list(range(self.start, self.end + 1))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def is_weekend(year: int, month: int, day: int) -> bool:
    """Saturday or Sunday."""
    return date(year, month, day).weekday() >= 5


def week_boundaries(year: int, month: int) -> List[Week]:
    """
    Partition the month into calendar weeks.

    Each week ends on a Sunday or on the last day of the month and starts on
    day 1 or the day after the previous week's end.
    """
    last = days_in_month(year, month)
    weeks = []
    current = 1
    while current <= last:
        to_sunday = 6 - date(year, month, current).weekday()
        end = min(current + to_sunday, last)
        weeks.append(Week(current, end))
        current = end + 1
    return weeks


def holidays_for(year: int, month: int) -> FrozenSet[int]:
    """Holiday day numbers from the static table (independent of year)."""
    return frozenset(HOLIDAYS.get(month, ()))


def working_days(year: int, month: int) -> int:
    """Weekdays that are not holidays. Sizes the monthly hour targets."""
    holidays = holidays_for(year, month)
    return sum(
        1 for day in range(1, days_in_month(year, month) + 1)
        if not is_weekend(year, month, day) and day not in holidays
    )


def decimal_to_time(decimal: float) -> str:
    """8.25 -> "08:15"."""
    hours = int(decimal)
    minutes = round((decimal - hours) * 60)
    if minutes == 60:
        hours, minutes = hours + 1, 0
    return f"{hours:02d}:{minutes:02d}"


def time_to_decimal(value: str) -> float:
    """"08:15" -> 8.25."""
    h, _, m = value.strip().partition(":")
    return int(h) + (int(m) / 60 if m else 0)


@dataclass(frozen=True)
class EffectiveShift:
    """Resolved timing of one cell."""
    shift_id: str
    start: float
    end: float
    hours: float
    kind: ShiftKind
    label: str = ""

    @property
    def is_work(self) -> bool:
        return self.kind is ShiftKind.WORK

    @property
    def is_absence(self) -> bool:
        return self.kind is ShiftKind.ABSENCE

    @property
    def is_off(self) -> bool:
        return self.shift_id == OFF

    @property
    def end_offset(self) -> float:
        """End on a continuous timeline (an end before start is next day)."""
        return self.end if self.end >= self.start else self.end + 24

    def covers(self, hour: float) -> bool:
        """True if the hour slot starting at `hour` falls inside the shift."""
        return self.start <= hour < self.end_offset


def _time_label(start: float, end: float) -> str:
    return f"{decimal_to_time(start)} - {decimal_to_time(end)}"


@lru_cache(maxsize=256)
def _catalog_shift(shift_id: str, work_system: WorkSystem) -> EffectiveShift:
    base = get_shift(shift_id)
    if shift_id == OFF or base.id == OFF:
        return EffectiveShift(OFF, base.start, base.end, base.hours, base.kind, base.label)

    hours = work_system.hours
    end = base.start + hours
    if base.is_absence:
        return EffectiveShift(shift_id, base.start, end, hours, base.kind, base.label)
    return EffectiveShift(shift_id, base.start, end, hours, base.kind, _time_label(base.start, end))


def effective_shift(
    shift_id: Optional[str],
    work_system: WorkSystem = WorkSystem.SEVEN,
    override: Optional[ShiftOverride] = None,
) -> EffectiveShift:
    """
    Resolve a cell to its effective timing.

    Resolution order:
        1. override present: start/end/hours taken verbatim, kind from base shift
        2. OFF (or unknown id): zero-duration off record
        3. absence: hours = work system nominal, end = start + hours
        4. work shift: end = start + work system nominal hours
    """
    work_system = WorkSystem.from_string(work_system)
    if override is not None:
        base = get_shift(shift_id)
        return EffectiveShift(
            shift_id or OFF,
            override.start,
            override.end,
            override.hours,
            base.kind,
            _time_label(override.start, override.end),
        )
    return _catalog_shift(shift_id or OFF, work_system)


def rest_gap(previous: EffectiveShift, following: EffectiveShift) -> float:
    """Hours of rest between a shift and the next day's shift."""
    return (24 - previous.end_offset) + following.start
