# shiftplan/solver - Timeline, validation, staffing, statistics and generation
from .editing import ClearResult, apply_manual_edit, clear_schedule, remove_employee
from .generator import GenerationResult, ScheduleGenerator, generate_schedule
from .staffing import StaffingStatus, coverage_by_hour, month_staffing, staffing_status
from .stats import EmployeeStats, calculate_team_stats, employee_stats
from .timeline import EffectiveShift, effective_shift, rest_gap, week_boundaries, working_days
from .validation import ValidationResult, Violation, validate_assignment, validate_month

__all__ = [
    "EffectiveShift", "effective_shift", "rest_gap", "week_boundaries", "working_days",
    "Violation", "ValidationResult", "validate_assignment", "validate_month",
    "StaffingStatus", "coverage_by_hour", "staffing_status", "month_staffing",
    "EmployeeStats", "employee_stats", "calculate_team_stats",
    "GenerationResult", "ScheduleGenerator", "generate_schedule",
    "ClearResult", "clear_schedule", "apply_manual_edit", "remove_employee",
]
