"""
Schedule Editing
================
Pure helpers behind the planner's edit actions. Each returns new maps or a
new snapshot; the input snapshot is never mutated.
"""
from dataclasses import dataclass, replace
from typing import Dict, TypeVar

from shiftplan.models.schedule import CellKey, FlagMap, MonthSnapshot, NoteMap, ScheduleMap
from shiftplan.models.shift import get_shift, is_off
from shiftplan.utils.logging_setup import get_logger

logger = get_logger("shiftplan.solver.editing")

V = TypeVar("V")


@dataclass
class ClearResult:
    """Maps left after clearing a month."""
    schedule: ScheduleMap
    english_lessons: FlagMap
    home_office: FlagMap
    notes: NoteMap


def _is_protected(snapshot: MonthSnapshot, key: CellKey) -> bool:
    """Locked, overridden and absence cells survive a clear."""
    if snapshot.locks.get(key) or key in snapshot.overrides:
        return True
    shift_id = snapshot.schedule.get(key)
    return not is_off(shift_id) and get_shift(shift_id).is_absence


def clear_schedule(snapshot: MonthSnapshot) -> ClearResult:
    """
    Clear every unprotected cell of the month with its annotations.

    English-lesson, home-office and note entries of a cleared cell go with it.
    """
    schedule = dict(snapshot.schedule)
    english = dict(snapshot.english_lessons)
    home_office = dict(snapshot.home_office)
    notes = dict(snapshot.notes)

    cleared = 0
    for emp in snapshot.employees:
        for day in snapshot.days:
            key = CellKey(emp.id, day)
            if _is_protected(snapshot, key):
                continue
            if schedule.pop(key, None) is not None:
                cleared += 1
            english.pop(key, None)
            home_office.pop(key, None)
            notes.pop(key, None)

    logger.info(f"Cleared {cleared} cell(s) in {snapshot.year}-{snapshot.month:02d}")
    return ClearResult(schedule=schedule, english_lessons=english, home_office=home_office, notes=notes)


def apply_manual_edit(snapshot: MonthSnapshot, employee_id: str, day: int, shift_id: str) -> MonthSnapshot:
    """
    Set one cell by hand.

    Locked cells are left as they are. Setting a cell off also drops its
    English-lesson and home-office flags.
    """
    key = CellKey(employee_id, day)
    if snapshot.locks.get(key):
        logger.debug(f"Ignoring edit of locked cell {key}")
        return snapshot

    schedule = dict(snapshot.schedule)
    if is_off(shift_id):
        schedule.pop(key, None)
        english = {k: v for k, v in snapshot.english_lessons.items() if k != key}
        home_office = {k: v for k, v in snapshot.home_office.items() if k != key}
        return replace(snapshot, schedule=schedule, english_lessons=english, home_office=home_office)

    schedule[key] = shift_id
    return replace(snapshot, schedule=schedule)


def _without_employee(cells: Dict[CellKey, V], employee_id: str) -> Dict[CellKey, V]:
    return {k: v for k, v in cells.items() if k.employee_id != employee_id}


def remove_employee(snapshot: MonthSnapshot, employee_id: str) -> MonthSnapshot:
    """Drop an employee and every cell-keyed entry that belongs to them."""
    if snapshot.employee(employee_id) is None:
        raise KeyError(employee_id)

    logger.info(f"Removing employee {employee_id}")
    return replace(
        snapshot,
        employees=[e for e in snapshot.employees if e.id != employee_id],
        schedule=_without_employee(snapshot.schedule, employee_id),
        overrides=_without_employee(snapshot.overrides, employee_id),
        locks=_without_employee(snapshot.locks, employee_id),
        english_lessons=_without_employee(snapshot.english_lessons, employee_id),
        home_office=_without_employee(snapshot.home_office, employee_id),
        notes=_without_employee(snapshot.notes, employee_id),
    )
