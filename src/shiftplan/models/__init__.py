# shiftplan/models - Data models for the scheduling core
from .constraints import GeneratorConfig, ShortfallMargins
from .employee import ContractType, Employee, GenerationMode, WorkSystem
from .schedule import (
    CellKey,
    FlagMap,
    MonthSnapshot,
    NoteMap,
    OverrideMap,
    ScheduleMap,
    ShiftOverride,
)
from .shift import OFF, SHIFTS, ShiftDefinition, ShiftKind, get_shift, is_off

__all__ = [
    "Employee", "ContractType", "WorkSystem", "GenerationMode",
    "ShiftDefinition", "ShiftKind", "SHIFTS", "OFF", "get_shift", "is_off",
    "CellKey", "ShiftOverride", "MonthSnapshot",
    "ScheduleMap", "OverrideMap", "FlagMap", "NoteMap",
    "GeneratorConfig", "ShortfallMargins",
]
