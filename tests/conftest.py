"""Pytest configuration and fixtures."""
import random
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from shiftplan.models.constraints import GeneratorConfig
from shiftplan.models.employee import Employee
from shiftplan.models.schedule import MonthSnapshot

# March 2025: starts on a Saturday, 31 days, no holidays, 21 working days
YEAR = 2025
MONTH = 3


@pytest.fixture
def sample_employees():
    """A small mixed team."""
    return [
        Employee(id="e1", name="Anna Nowak", team="Alpha"),
        Employee(id="e2", name="Bartek Kowalski", team="Alpha", work_system="8h"),
        Employee(id="e3", name="Celina Wójcik", team="Beta", contract="UZ", generation_mode="auto"),
        Employee(id="e4", name="Dawid Lis", team="Beta", contract="UZ"),
    ]


@pytest.fixture
def large_team():
    """Twenty employees, a quarter of them on the 8h system."""
    return [
        Employee(
            id=f"emp-{i:02d}",
            name=f"Employee {i}",
            team="Alpha" if i % 2 else "Beta",
            work_system="8h" if i % 4 == 0 else "7h",
        )
        for i in range(20)
    ]


@pytest.fixture
def make_snapshot(sample_employees):
    """Factory for March 2025 snapshots; defaults to the sample team."""
    def _make(**kwargs):
        kwargs.setdefault("employees", sample_employees)
        return MonthSnapshot(year=YEAR, month=MONTH, **kwargs)
    return _make


@pytest.fixture
def default_config():
    """Default generator configuration."""
    return GeneratorConfig()


@pytest.fixture
def rng():
    """Seeded random source for reproducible generation."""
    return random.Random(42)


@pytest.fixture
def snapshot_document():
    """A backup document as stored on disk (0-based month)."""
    return {
        "version": 1,
        "year": YEAR,
        "month": MONTH - 1,
        "employees": [
            {"id": "e1", "name": "Anna Nowak", "team": "Alpha", "contract": "UoP",
             "location": "Kraków", "workSystem": "7h"},
            {"id": "e2", "name": "Bartek Kowalski", "team": "Alpha", "contract": "UoP",
             "location": "Kraków", "workSystem": "8h"},
            {"id": "e3", "name": "Celina Wójcik", "team": "Beta", "contract": "UZ",
             "location": "Zdalnie", "workSystem": "7h", "generationType": "auto"},
        ],
        "teams": ["Alpha", "Beta"],
        "schedule": {"e1-3": "8-15", "e1-4": "UW", "e2-3": "13-21", "e3-5": "OFF"},
        "overrides": {"e1-3": {"start": 8, "end": 16.5, "hours": 8.5}},
        "notes": {"e1-3": "training"},
        "lockedCells": {"e1-4": True, "e2-3": False},
        "englishLessons": {"e2-3": True},
        "homeOffice": {"e1-3": True},
    }
