"""
Validation Engine
=================
Per-cell labour-rule checks (rest gap, consecutive-day cap) and a
whole-month sweep combining them with daily staffing adequacy.

The cell helpers (`assigned_shift`, `work_streak`) are shared with the
generator so that generation and validation judge a cell identically.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from shiftplan.models.constraints import GeneratorConfig
from shiftplan.models.employee import Employee
from shiftplan.models.schedule import CellKey, MonthSnapshot, ShiftOverride
from shiftplan.models.shift import is_off
from shiftplan.solver.staffing import StaffingStatus, month_staffing
from shiftplan.solver.timeline import EffectiveShift, effective_shift, rest_gap
from shiftplan.utils.logging_setup import get_logger

logger = get_logger("shiftplan.solver.validation")


@dataclass
class Violation:
    """Single rule violation for one cell."""
    type: str  # "rest_gap_before", "rest_gap_after", "consecutive_days"
    severity: str  # "critical", "warning"
    employee_id: str
    day: int
    message: str


@dataclass
class ValidationResult:
    """Validation metrics for a month."""
    rest_gap: int = 0
    consecutive_days: int = 0
    understaffed_days: int = 0

    violations: List[Violation] = field(default_factory=list)
    staffing: Dict[int, StaffingStatus] = field(default_factory=dict)

    def add_violation(self, v: Violation):
        self.violations.append(v)
        if v.type == "consecutive_days":
            self.consecutive_days += 1
        else:
            self.rest_gap += 1

    def as_dict(self) -> Dict[str, int]:
        return {
            "rest_gap": self.rest_gap,
            "consecutive_days": self.consecutive_days,
            "understaffed_days": self.understaffed_days,
        }

    @property
    def has_critical_issues(self) -> bool:
        """Labour-rule violations are critical; understaffing is not."""
        return any(v.severity == "critical" for v in self.violations)

    def for_cell(self, employee_id: str, day: int) -> List[str]:
        """Messages for one cell, in check order."""
        return [v.message for v in self.violations if v.employee_id == employee_id and v.day == day]


def assigned_shift(
    employee: Employee,
    day: int,
    schedule: Mapping[CellKey, str],
    overrides: Mapping[CellKey, ShiftOverride],
) -> Optional[EffectiveShift]:
    """Effective shift in a cell, or None when the cell is off/unset."""
    key = CellKey(employee.id, day)
    shift_id = schedule.get(key)
    if is_off(shift_id):
        return None
    return effective_shift(shift_id, employee.work_system, overrides.get(key))


def work_streak(
    employee: Employee,
    day: int,
    schedule: Mapping[CellKey, str],
    overrides: Mapping[CellKey, ShiftOverride],
    days_in_month: int,
    step: int,
) -> int:
    """
    Consecutive work days next to `day` (excluded) going backward (step=-1)
    or forward (step=1). Off and absence cells end the run.
    """
    count = 0
    d = day + step
    while 1 <= d <= days_in_month:
        shift = assigned_shift(employee, d, schedule, overrides)
        if shift is None or not shift.is_work:
            break
        count += 1
        d += step
    return count


def check_assignment(
    employee: Employee,
    day: int,
    shift_id: str,
    schedule: Mapping[CellKey, str],
    overrides: Mapping[CellKey, ShiftOverride],
    days_in_month: int,
    config: Optional[GeneratorConfig] = None,
) -> List[Violation]:
    """
    Structured form of `validate_assignment`.

    All applicable violations are reported; checks do not short-circuit.
    """
    if is_off(shift_id):
        return []

    config = config or GeneratorConfig()
    current = effective_shift(shift_id, employee.work_system, overrides.get(CellKey(employee.id, day)))
    if not current.is_work:
        return []

    violations = []
    min_rest = config.min_rest_hours

    if day > 1:
        prev = assigned_shift(employee, day - 1, schedule, overrides)
        if prev is not None and prev.is_work:
            gap = rest_gap(prev, current)
            if gap < min_rest:
                violations.append(Violation(
                    type="rest_gap_before",
                    severity="critical",
                    employee_id=employee.id, day=day,
                    message=f"Missing {min_rest:g}h rest! Only {gap:.1f}h since the previous shift.",
                ))

    if day < days_in_month:
        nxt = assigned_shift(employee, day + 1, schedule, overrides)
        if nxt is not None and nxt.is_work:
            gap = rest_gap(current, nxt)
            if gap < min_rest:
                violations.append(Violation(
                    type="rest_gap_after",
                    severity="critical",
                    employee_id=employee.id, day=day,
                    message=f"Missing {min_rest:g}h rest before the next day's shift! Only {gap:.1f}h.",
                ))

    run = (
        1
        + work_streak(employee, day, schedule, overrides, days_in_month, -1)
        + work_streak(employee, day, schedule, overrides, days_in_month, 1)
    )
    if run > config.max_consecutive_days:
        violations.append(Violation(
            type="consecutive_days",
            severity="critical",
            employee_id=employee.id, day=day,
            message=f"Working {run} days in a row (maximum {config.max_consecutive_days}).",
        ))

    return violations


def validate_assignment(
    employee: Employee,
    day: int,
    shift_id: str,
    schedule: Mapping[CellKey, str],
    overrides: Mapping[CellKey, ShiftOverride],
    days_in_month: int,
    config: Optional[GeneratorConfig] = None,
) -> List[str]:
    """
    Rule violations for placing `shift_id` in (employee, day).

    Args:
        employee: The employee owning the cell
        day: Day of month (1-based)
        shift_id: Shift id being validated (usually the cell's current value)
        schedule: Schedule snapshot
        overrides: Override snapshot
        days_in_month: Last day of the month
        config: Rule thresholds (defaults: 11h rest, 5-day cap)

    Returns:
        Human-readable messages; empty for off/absence shifts.
    """
    return [
        v.message
        for v in check_assignment(employee, day, shift_id, schedule, overrides, days_in_month, config)
    ]


def validate_month(
    snapshot: MonthSnapshot,
    config: Optional[GeneratorConfig] = None,
) -> ValidationResult:
    """
    Validate every assigned cell of the month plus daily staffing.

    Args:
        snapshot: The month to validate
        config: Rule thresholds and staffing minimums

    Returns:
        ValidationResult with counters, violations and per-day staffing
    """
    config = config or GeneratorConfig()
    result = ValidationResult()
    dim = snapshot.days_in_month

    for emp in snapshot.employees:
        for day in snapshot.days:
            shift_id = snapshot.schedule.get(CellKey(emp.id, day))
            if is_off(shift_id):
                continue
            for v in check_assignment(emp, day, shift_id, snapshot.schedule, snapshot.overrides, dim, config):
                result.add_violation(v)

    result.staffing = month_staffing(snapshot, config)
    result.understaffed_days = sum(1 for s in result.staffing.values() if not s.valid)

    logger.info(f"Validation {snapshot.year}-{snapshot.month:02d}: rest_gap={result.rest_gap}, "
                f"consecutive={result.consecutive_days}, understaffed_days={result.understaffed_days}")
    return result
