"""Employee model and contract enums."""
from dataclasses import dataclass
from enum import Enum


class ContractType(str, Enum):
    """Contract kinds. Values are the codes used in stored snapshots."""
    EMPLOYMENT = "UoP"   # Employment contract
    CIVIL = "UZ"         # Civil contract

    @classmethod
    def from_string(cls, s) -> "ContractType":
        """Parse contract from stored code or English name."""
        if isinstance(s, cls):
            return s
        key = str(s).strip().lower()
        mapping = {
            "uop": cls.EMPLOYMENT, "employment": cls.EMPLOYMENT,
            "uz": cls.CIVIL, "civil": cls.CIVIL, "civilcontract": cls.CIVIL,
        }
        return mapping.get(key, cls.EMPLOYMENT)


class WorkSystem(str, Enum):
    """Contracted shift length."""
    SEVEN = "7h"
    EIGHT = "8h"

    @property
    def hours(self) -> int:
        """Nominal hours of one shift (and of one paid absence day)."""
        return 8 if self is WorkSystem.EIGHT else 7

    @classmethod
    def from_string(cls, s) -> "WorkSystem":
        """Parse work system; anything other than an 8h marker is 7h."""
        if isinstance(s, cls):
            return s
        key = str(s).strip().lower()
        if key in ("8h", "8"):
            return cls.EIGHT
        return cls.SEVEN


class GenerationMode(str, Enum):
    """Whether a civil-contract employee takes part in automatic generation."""
    AUTO = "auto"
    MANUAL = "manual"

    @classmethod
    def from_string(cls, s) -> "GenerationMode":
        if isinstance(s, cls):
            return s
        if s is not None and str(s).strip().lower() == "auto":
            return cls.AUTO
        return cls.MANUAL


@dataclass
class Employee:
    """A member of the workforce. Relationships (team) are by name only."""

    id: str
    name: str
    team: str = ""
    contract: ContractType = ContractType.EMPLOYMENT
    work_system: WorkSystem = WorkSystem.SEVEN
    location: str = ""
    generation_mode: GenerationMode = GenerationMode.MANUAL

    def __post_init__(self):
        """Validate and normalize fields."""
        self.id = str(self.id).strip()
        self.name = str(self.name).strip()
        self.team = str(self.team or "").strip()
        self.location = str(self.location or "").strip()
        self.contract = ContractType.from_string(self.contract)
        self.work_system = WorkSystem.from_string(self.work_system)
        self.generation_mode = GenerationMode.from_string(self.generation_mode)

    @property
    def is_generator_eligible(self) -> bool:
        """Employment contracts always; civil contracts only in auto mode."""
        if self.contract is ContractType.EMPLOYMENT:
            return True
        return self.generation_mode is GenerationMode.AUTO

    def monthly_target_hours(self, working_days: int) -> int:
        """Hour target for a month with `working_days` working days."""
        return working_days * self.work_system.hours

    def to_dict(self) -> dict:
        """Convert to dictionary using the stored snapshot field names."""
        d = {
            "id": self.id,
            "name": self.name,
            "team": self.team,
            "contract": self.contract.value,
            "location": self.location,
            "workSystem": self.work_system.value,
        }
        if self.contract is ContractType.CIVIL:
            d["generationType"] = self.generation_mode.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Employee":
        """Create from a stored snapshot record."""
        return cls(
            id=d.get("id", ""),
            name=d.get("name", ""),
            team=d.get("team", ""),
            contract=d.get("contract", ContractType.EMPLOYMENT.value),
            work_system=d.get("workSystem", d.get("work_system", WorkSystem.SEVEN.value)),
            location=d.get("location", ""),
            generation_mode=d.get("generationType", d.get("generation_mode")),
        )
