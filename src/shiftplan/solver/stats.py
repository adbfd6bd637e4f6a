"""
Employee Statistics
===================
Worked hours and fatigue score per employee. Single source of truth for
every consumer (grid totals, exports, generator reports).
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

import pandas as pd

from shiftplan.models.employee import Employee
from shiftplan.models.rules import AFTERNOON_START_HOUR
from shiftplan.models.schedule import CellKey, MonthSnapshot, ShiftOverride
from shiftplan.models.shift import is_off
from shiftplan.solver.timeline import effective_shift, is_weekend, working_days as month_working_days
from shiftplan.utils.logging_setup import get_logger

logger = get_logger("shiftplan.solver.stats")

WEEKEND_FATIGUE = 2
AFTERNOON_FATIGUE = 1


@dataclass
class EmployeeStats:
    """Statistics for a single employee."""
    total_hours: float
    fatigue_points: int

    # Additional metadata (filled by calculate_team_stats)
    employee_id: str = ""
    name: str = ""
    target_hours: float = 0
    delta: float = 0


def employee_stats(
    employee: Employee,
    schedule: Mapping[CellKey, str],
    overrides: Mapping[CellKey, ShiftOverride],
    english_lessons: Mapping[CellKey, bool],
    days: Iterable[int],
    year: int,
    month: int,
) -> EmployeeStats:
    """
    Total hours and fatigue points for one employee over `days`.

    Hours: effective hours of every non-off cell (absences count a full
    nominal day), plus 1 per English-lesson day whatever the shift.
    Fatigue: per work-kind day, +2 on weekends, +1 when starting at 11:00
    or later.
    """
    total_hours = 0.0
    fatigue_points = 0

    for day in days:
        key = CellKey(employee.id, day)
        if english_lessons.get(key):
            total_hours += 1

        shift_id = schedule.get(key)
        if is_off(shift_id):
            continue

        shift = effective_shift(shift_id, employee.work_system, overrides.get(key))
        total_hours += shift.hours

        if not shift.is_work:
            continue
        if is_weekend(year, month, day):
            fatigue_points += WEEKEND_FATIGUE
        if shift.start >= AFTERNOON_START_HOUR:
            fatigue_points += AFTERNOON_FATIGUE

    return EmployeeStats(
        total_hours=round(total_hours, 2),
        fatigue_points=fatigue_points,
        employee_id=employee.id,
        name=employee.name,
    )


def calculate_team_stats(
    snapshot: MonthSnapshot,
    working_days: Optional[int] = None,
) -> List[EmployeeStats]:
    """
    Stats for every employee of the snapshot, with hour targets.

    Args:
        snapshot: The month
        working_days: Working days used for targets (default: computed)
    """
    if working_days is None:
        working_days = month_working_days(snapshot.year, snapshot.month)

    stats = []
    for emp in snapshot.employees:
        s = employee_stats(
            emp, snapshot.schedule, snapshot.overrides, snapshot.english_lessons,
            snapshot.days, snapshot.year, snapshot.month,
        )
        s.target_hours = emp.monthly_target_hours(working_days)
        s.delta = round(s.total_hours - s.target_hours, 2)
        stats.append(s)

    logger.debug(f"Calculated stats for {len(stats)} employees, {working_days} working days")
    return stats


def stats_to_dict_list(stats: List[EmployeeStats]) -> List[Dict]:
    """Convert stats to list of dicts for DataFrame or export."""
    return [
        {
            "id": s.employee_id,
            "name": s.name,
            "hours": s.total_hours,
            "target": s.target_hours,
            "delta": s.delta,
            "fatigue": s.fatigue_points,
        }
        for s in stats
    ]


def stats_to_dataframe(stats: List[EmployeeStats]) -> pd.DataFrame:
    columns = ["id", "name", "hours", "target", "delta", "fatigue"]
    if not stats:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(stats_to_dict_list(stats), columns=columns)
