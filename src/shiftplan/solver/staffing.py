"""
Staffing Coverage
=================
Hourly headcounts per day and the weekday staffing adequacy rule:
- 08:00 headcount must reach the morning minimum
- 20:00 headcount must reach the (lower) evening minimum
Weekends are exempt.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

import pandas as pd

from shiftplan.models.constraints import GeneratorConfig
from shiftplan.models.schedule import CellKey, MonthSnapshot
from shiftplan.models.shift import is_off
from shiftplan.solver.timeline import EffectiveShift, effective_shift, is_weekend
from shiftplan.utils.logging_setup import get_logger

logger = get_logger("shiftplan.solver.staffing")

DayCoverage = Dict[int, int]  # {hour: headcount}


@dataclass
class StaffingStatus:
    """Adequacy of one day's staffing."""
    valid: bool
    messages: List[str] = field(default_factory=list)


@dataclass
class DayStaffing:
    """Morning/evening headcounts for one day, as cached by the generator."""
    morning: int = 0
    evening: int = 0

    def add(self, shift: EffectiveShift, config: GeneratorConfig, sign: int = 1) -> None:
        """Count (sign=1) or uncount (sign=-1) a shift."""
        if not shift.is_work:
            return
        if shift.covers(config.morning_hour):
            self.morning += sign
        if shift.covers(config.evening_hour):
            self.evening += sign


def coverage_by_hour(
    snapshot: MonthSnapshot,
    config: Optional[GeneratorConfig] = None,
) -> Dict[int, DayCoverage]:
    """
    Headcount for every hour slot of the coverage window, per day.

    Only work-kind cells count; overrides are honored.

    Returns:
        {day: {hour: headcount}} for hours coverage_first_hour..coverage_last_hour
    """
    config = config or GeneratorConfig()
    hours = range(config.coverage_first_hour, config.coverage_last_hour + 1)
    coverage = {day: {h: 0 for h in hours} for day in snapshot.days}

    for emp in snapshot.employees:
        for day in snapshot.days:
            key = CellKey(emp.id, day)
            shift_id = snapshot.schedule.get(key)
            if is_off(shift_id):
                continue
            shift = effective_shift(shift_id, emp.work_system, snapshot.overrides.get(key))
            if not shift.is_work:
                continue
            for h in hours:
                if shift.covers(h):
                    coverage[day][h] += 1

    return coverage


def staffing_status(
    day_coverage: Mapping[int, int],
    weekend: bool,
    config: Optional[GeneratorConfig] = None,
) -> StaffingStatus:
    """
    Check one day's coverage against the staffing minimums.

    Args:
        day_coverage: {hour: headcount}
        weekend: weekends are always valid
        config: supplies the minimums and the checked hours

    The mapping may be sparse: a threshold whose hour is missing is not
    checked, so ``{8: 10}`` reports only the morning and ``{}`` is valid.
    Callers judging a whole day pass the full window from coverage_by_hour
    (month_staffing does), where a zero headcount is an explicit 0.
    """
    if weekend:
        return StaffingStatus(valid=True)

    config = config or GeneratorConfig()
    messages = []

    if config.morning_hour in day_coverage:
        morning = day_coverage[config.morning_hour]
        if morning < config.min_staff_morning:
            messages.append(f"Morning ({config.morning_hour:02d}:00): {morning}/{config.min_staff_morning}")

    if config.evening_hour in day_coverage:
        evening = day_coverage[config.evening_hour]
        if evening < config.min_staff_evening:
            messages.append(f"Evening ({config.evening_hour:02d}:00): {evening}/{config.min_staff_evening}")

    return StaffingStatus(valid=not messages, messages=messages)


def month_staffing(
    snapshot: MonthSnapshot,
    config: Optional[GeneratorConfig] = None,
) -> Dict[int, StaffingStatus]:
    """Staffing status for every day of the snapshot's month."""
    config = config or GeneratorConfig()
    coverage = coverage_by_hour(snapshot, config)
    result = {
        day: staffing_status(coverage[day], is_weekend(snapshot.year, snapshot.month, day), config)
        for day in snapshot.days
    }
    short = sum(1 for s in result.values() if not s.valid)
    logger.debug(f"Staffing {snapshot.year}-{snapshot.month:02d}: {short} understaffed day(s)")
    return result


def count_day_staffing(
    snapshot: MonthSnapshot,
    config: Optional[GeneratorConfig] = None,
) -> Dict[int, DayStaffing]:
    """Morning/evening headcounts per day (the generator's staffing cache seed)."""
    config = config or GeneratorConfig()
    counts = {day: DayStaffing() for day in snapshot.days}
    for emp in snapshot.employees:
        for day in snapshot.days:
            key = CellKey(emp.id, day)
            shift_id = snapshot.schedule.get(key)
            if is_off(shift_id):
                continue
            counts[day].add(effective_shift(shift_id, emp.work_system, snapshot.overrides.get(key)), config)
    return counts


def coverage_to_dataframe(coverage: Mapping[int, DayCoverage]) -> pd.DataFrame:
    """Hour × day table of headcounts, rows labelled "HH:00"."""
    if not coverage:
        return pd.DataFrame()
    df = pd.DataFrame(coverage).sort_index()
    df.index = [f"{int(h):02d}:00" for h in df.index]
    df.index.name = "hour"
    return df
