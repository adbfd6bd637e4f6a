"""
Pydantic Validated Models
=========================
Strict validation layer for generator configuration at input boundaries
(CLI `--config` files, JSON payloads from the shell).

Usage:
    from shiftplan.models.validated import ValidatedGeneratorConfig

    config = ValidatedGeneratorConfig(min_staff_morning=12).to_dataclass()

The dataclass `GeneratorConfig` stays the type the solver consumes.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .constraints import GeneratorConfig, ShortfallMargins
from .rules import ROTATION_PATTERN
from .shift import WORK_SHIFT_IDS


class ValidatedMargins(BaseModel):
    """Shortfall margins below the staffing minimums."""
    evening: int = Field(ge=0, le=100)
    morning: int = Field(ge=0, le=100)


class ValidatedGeneratorConfig(BaseModel):
    """
    Pydantic-validated generator configuration.

    Converts to/from the dataclass GeneratorConfig.
    """
    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    # Hard constraints
    min_rest_hours: float = Field(default=11, ge=0, le=24, description="Minimum rest between shifts")
    max_consecutive_days: int = Field(default=5, ge=1, le=31)

    # Staffing
    min_staff_morning: int = Field(default=15, ge=0)
    min_staff_evening: int = Field(default=8, ge=0)
    morning_hour: int = Field(default=8, ge=0, le=23)
    evening_hour: int = Field(default=20, ge=0, le=23)
    coverage_first_hour: int = Field(default=8, ge=0, le=23)
    coverage_last_hour: int = Field(default=20, ge=0, le=23)

    # Rotation
    target_workdays_per_week: int = Field(default=5, ge=0, le=7)
    rotation_pattern: List[str] = Field(default_factory=lambda: list(ROTATION_PATTERN), min_length=1)

    # Heuristics
    weekend_margins: ValidatedMargins = Field(default_factory=lambda: ValidatedMargins(evening=2, morning=3))
    weekday_margins: ValidatedMargins = Field(default_factory=lambda: ValidatedMargins(evening=3, morning=4))
    backfill_margins: ValidatedMargins = Field(default_factory=lambda: ValidatedMargins(evening=2, morning=2))
    backfill_midday_share: float = Field(default=0.4, ge=0, le=1)
    backfill_early_share: float = Field(default=0.3, ge=0, le=1)

    @field_validator("rotation_pattern")
    @classmethod
    def validate_rotation_pattern(cls, v: List[str]) -> List[str]:
        """Rotation slots must be known work shifts."""
        unknown = [s for s in v if s not in WORK_SHIFT_IDS]
        if unknown:
            raise ValueError(f"unknown work shift ids in rotation_pattern: {unknown}")
        return v

    @model_validator(mode="after")
    def validate_model(self):
        """Cross-field validation."""
        if self.min_staff_evening > self.min_staff_morning:
            raise ValueError("min_staff_evening cannot exceed min_staff_morning")
        if self.backfill_midday_share + self.backfill_early_share > 1:
            raise ValueError("backfill shares cannot sum above 1")
        if self.coverage_first_hour > self.coverage_last_hour:
            raise ValueError("coverage_first_hour must not be after coverage_last_hour")
        for hour in (self.morning_hour, self.evening_hour):
            if not self.coverage_first_hour <= hour <= self.coverage_last_hour:
                raise ValueError(f"staffing hour {hour} lies outside the coverage window")
        return self

    def to_dataclass(self) -> GeneratorConfig:
        """Convert to the dataclass GeneratorConfig used by the solver."""
        data = self.model_dump()
        for key in ("weekend_margins", "weekday_margins", "backfill_margins"):
            data[key] = ShortfallMargins(**data[key])
        return GeneratorConfig(**data)

    @classmethod
    def from_dataclass(cls, config: GeneratorConfig) -> "ValidatedGeneratorConfig":
        """Create from dataclass GeneratorConfig."""
        return cls(**config.to_dict())
