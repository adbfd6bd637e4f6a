"""Shift catalog: work shifts and absence entries."""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .employee import WorkSystem


class ShiftKind(str, Enum):
    """Whether a catalog entry is worked time or a paid absence."""
    WORK = "work"
    ABSENCE = "absence"


@dataclass(frozen=True)
class ShiftDefinition:
    """Static catalog entry. Start/end are nominal; see timeline.effective_shift."""
    id: str
    label: str
    start: float
    end: float
    hours: float
    kind: ShiftKind = ShiftKind.WORK

    @property
    def is_work(self) -> bool:
        return self.kind is ShiftKind.WORK

    @property
    def is_absence(self) -> bool:
        return self.kind is ShiftKind.ABSENCE


# Shift ids
OFF = "OFF"
EARLY = "8-15"
MID = "10-17"
MIDDAY = "12-19"      # 12-19 on 7h, 12-20 on 8h
LATE_8H = "13-21"
LATE_7H = "14-21"
ANNUAL_LEAVE = "UW"
LEAVE_ON_DEMAND = "UŻ"
SICK_LEAVE = "L4"
CHILDCARE = "O"

# First entry is the fallback record for unknown ids
SHIFTS: Dict[str, ShiftDefinition] = {
    OFF: ShiftDefinition(OFF, "Off", 0, 0, 0, ShiftKind.ABSENCE),
    EARLY: ShiftDefinition(EARLY, "08:00 - 15:00", 8, 15, 7),
    MID: ShiftDefinition(MID, "10:00 - 17:00", 10, 17, 7),
    MIDDAY: ShiftDefinition(MIDDAY, "12:00 - 19:00", 12, 19, 7),
    LATE_8H: ShiftDefinition(LATE_8H, "13:00 - 21:00", 13, 21, 7),
    LATE_7H: ShiftDefinition(LATE_7H, "14:00 - 21:00", 14, 21, 7),
    ANNUAL_LEAVE: ShiftDefinition(ANNUAL_LEAVE, "Annual leave", 8, 15, 7, ShiftKind.ABSENCE),
    LEAVE_ON_DEMAND: ShiftDefinition(LEAVE_ON_DEMAND, "Leave on demand", 8, 15, 7, ShiftKind.ABSENCE),
    # Spans the whole day nominally, but resolves like any absence (start plus
    # work-system hours). Rest and coverage checks skip absences either way.
    SICK_LEAVE: ShiftDefinition(SICK_LEAVE, "Sick leave", 0, 24, 7, ShiftKind.ABSENCE),
    CHILDCARE: ShiftDefinition(CHILDCARE, "Childcare leave", 8, 15, 7, ShiftKind.ABSENCE),
}

WORK_SHIFT_IDS = tuple(k for k, s in SHIFTS.items() if s.is_work)
ABSENCE_IDS = tuple(k for k, s in SHIFTS.items() if s.is_absence and k != OFF)


def get_shift(shift_id: Optional[str]) -> ShiftDefinition:
    """Catalog lookup. Unknown or stale ids resolve to the OFF record."""
    if shift_id is None:
        return SHIFTS[OFF]
    return SHIFTS.get(shift_id, SHIFTS[OFF])


def is_off(shift_id: Optional[str]) -> bool:
    """True for an unset cell or the OFF sentinel."""
    return not shift_id or shift_id == OFF


def late_shift_for(work_system: WorkSystem) -> str:
    """Latest shift ending at 21:00 for the given work system."""
    return LATE_8H if WorkSystem.from_string(work_system) is WorkSystem.EIGHT else LATE_7H
