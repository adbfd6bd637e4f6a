"""Schedule snapshot models: cell keys, overrides, month snapshot."""
import calendar
from dataclasses import dataclass, field, replace
from typing import Dict, List, Mapping, NamedTuple, Optional

import pandas as pd

from .employee import Employee
from .shift import OFF, is_off


class CellKey(NamedTuple):
    """Composite (employee, day) key for every per-cell map."""
    employee_id: str
    day: int

    @classmethod
    def parse(cls, raw: str) -> "CellKey":
        """Parse the external "employeeId-day" form. Ids may contain hyphens."""
        emp_id, sep, day = str(raw).rpartition("-")
        if not sep or not emp_id:
            raise ValueError(f"Malformed cell key: {raw!r}")
        try:
            return cls(emp_id, int(day))
        except ValueError:
            raise ValueError(f"Malformed cell key: {raw!r}") from None

    def __str__(self) -> str:
        return f"{self.employee_id}-{self.day}"


def span_hours(start: float, end: float) -> float:
    """Duration between two clock hours, wrapping past midnight."""
    hours = end - start
    if hours < 0:
        hours += 24
    return hours


@dataclass
class ShiftOverride:
    """Manual start/end/duration replacing catalog timing for one cell."""
    start: float
    end: float
    hours: Optional[float] = None
    note: Optional[str] = None

    def __post_init__(self):
        self.start = float(self.start)
        self.end = float(self.end)
        if self.hours is None:
            self.hours = span_hours(self.start, self.end)
        else:
            self.hours = float(self.hours)
            if self.hours < 0:
                self.hours += 24

    @property
    def end_offset(self) -> float:
        """End on a continuous timeline: an end before start is the next day."""
        return self.end if self.end >= self.start else self.end + 24

    @property
    def label(self) -> str:
        from shiftplan.solver.timeline import decimal_to_time
        return f"{decimal_to_time(self.start)} - {decimal_to_time(self.end)}"

    def to_dict(self) -> dict:
        d = {"start": self.start, "end": self.end, "hours": self.hours}
        if self.note:
            d["note"] = self.note
        return d

    @classmethod
    def from_dict(cls, d: Mapping) -> "ShiftOverride":
        return cls(
            start=d["start"],
            end=d["end"],
            hours=d.get("hours"),
            note=d.get("note"),
        )


ScheduleMap = Dict[CellKey, str]
OverrideMap = Dict[CellKey, ShiftOverride]
FlagMap = Dict[CellKey, bool]
NoteMap = Dict[CellKey, str]


@dataclass
class MonthSnapshot:
    """
    Everything the core needs about one month, passed by value.

    The core never mutates a snapshot; operations return new maps or a new
    snapshot via `with_schedule` / `dataclasses.replace`.
    """
    year: int
    month: int  # 1-based
    employees: List[Employee] = field(default_factory=list)
    schedule: ScheduleMap = field(default_factory=dict)
    overrides: OverrideMap = field(default_factory=dict)
    locks: FlagMap = field(default_factory=dict)
    english_lessons: FlagMap = field(default_factory=dict)
    home_office: FlagMap = field(default_factory=dict)
    notes: NoteMap = field(default_factory=dict)

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be 1..12, got {self.month}")

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def days(self) -> List[int]:
        return list(range(1, self.days_in_month + 1))

    def employee(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self.employees if e.id == employee_id), None)

    def shift_at(self, employee_id: str, day: int) -> str:
        """Shift id in a cell, OFF when unset."""
        return self.schedule.get(CellKey(employee_id, day)) or OFF

    def is_locked(self, employee_id: str, day: int) -> bool:
        return bool(self.locks.get(CellKey(employee_id, day)))

    def has_override(self, employee_id: str, day: int) -> bool:
        return CellKey(employee_id, day) in self.overrides

    def has_english_lesson(self, employee_id: str, day: int) -> bool:
        return bool(self.english_lessons.get(CellKey(employee_id, day)))

    def with_schedule(self, schedule: ScheduleMap) -> "MonthSnapshot":
        """New snapshot with a replaced schedule map."""
        return replace(self, schedule=dict(schedule))

    def to_dataframe(self) -> pd.DataFrame:
        """Employee × day grid of shift ids (blank for off days)."""
        columns = ["id", "name", "team"] + self.days
        if not self.employees:
            return pd.DataFrame(columns=columns)

        rows = []
        for emp in self.employees:
            row = {"id": emp.id, "name": emp.name, "team": emp.team}
            for day in self.days:
                shift_id = self.schedule.get(CellKey(emp.id, day))
                row[day] = "" if is_off(shift_id) else shift_id
            rows.append(row)
        return pd.DataFrame(rows, columns=columns)
