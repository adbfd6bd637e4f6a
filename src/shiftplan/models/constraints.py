"""Generator configuration: labour rules, staffing minimums, heuristics."""
from dataclasses import dataclass, field, fields
from typing import Dict, List

from .rules import (
    COVERAGE_FIRST_HOUR,
    COVERAGE_LAST_HOUR,
    MAX_CONSECUTIVE_DAYS,
    MIN_REST_HOURS,
    MIN_STAFF_EVENING,
    MIN_STAFF_MORNING,
    ROTATION_PATTERN,
    TARGET_WORKDAYS_PER_WEEK,
)


@dataclass
class ShortfallMargins:
    """
    How far below a staffing minimum a day must be before a phase forces
    an early/late shift over the employee's own rotation slot.
    """
    evening: int
    morning: int


@dataclass
class GeneratorConfig:
    """Configuration for the schedule generator and the validation engine."""

    # Hard constraints
    min_rest_hours: float = MIN_REST_HOURS
    max_consecutive_days: int = MAX_CONSECUTIVE_DAYS

    # Staffing adequacy (weekdays)
    min_staff_morning: int = MIN_STAFF_MORNING
    min_staff_evening: int = MIN_STAFF_EVENING
    morning_hour: int = 8
    evening_hour: int = 20
    coverage_first_hour: int = COVERAGE_FIRST_HOUR
    coverage_last_hour: int = COVERAGE_LAST_HOUR

    # Rotation
    target_workdays_per_week: int = TARGET_WORKDAYS_PER_WEEK
    rotation_pattern: List[str] = field(default_factory=lambda: list(ROTATION_PATTERN))

    # Shortfall heuristics per phase
    weekend_margins: ShortfallMargins = field(default_factory=lambda: ShortfallMargins(evening=2, morning=3))
    weekday_margins: ShortfallMargins = field(default_factory=lambda: ShortfallMargins(evening=3, morning=4))
    backfill_margins: ShortfallMargins = field(default_factory=lambda: ShortfallMargins(evening=2, morning=2))

    # Backfill variety: share of picks going to 12:00 and 08:00 starts,
    # the remainder goes to 10:00.
    backfill_midday_share: float = 0.4
    backfill_early_share: float = 0.3

    def evening_critical(self, evening_count: int, margins: ShortfallMargins) -> bool:
        return evening_count < self.min_staff_evening - margins.evening

    def morning_critical(self, morning_count: int, margins: ShortfallMargins) -> bool:
        return morning_count < self.min_staff_morning - margins.morning

    def to_dict(self) -> Dict:
        """Serialize to dictionary."""
        d = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ShortfallMargins):
                value = {"evening": value.evening, "morning": value.morning}
            elif isinstance(value, list):
                value = list(value)
            d[f.name] = value
        return d

    @classmethod
    def from_dict(cls, d: Dict) -> "GeneratorConfig":
        """Create from dictionary; unknown keys are ignored."""
        cfg = cls()
        for key, value in d.items():
            if not hasattr(cfg, key):
                continue
            if key.endswith("_margins") and isinstance(value, dict):
                value = ShortfallMargins(
                    evening=int(value.get("evening", 0)),
                    morning=int(value.get("morning", 0)),
                )
            elif key == "rotation_pattern":
                value = list(value)
            setattr(cfg, key, value)
        return cfg
