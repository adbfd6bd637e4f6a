"""
Property-Based Tests with Hypothesis
====================================
Invariants that must hold for arbitrary teams, seeds and inputs.
"""
import random

from hypothesis import HealthCheck, given, settings, strategies as st

from shiftplan.models.constraints import GeneratorConfig
from shiftplan.models.employee import Employee
from shiftplan.models.schedule import CellKey, MonthSnapshot, ShiftOverride
from shiftplan.models.shift import WORK_SHIFT_IDS, SHIFTS
from shiftplan.solver.editing import clear_schedule
from shiftplan.solver.generator import generate_schedule
from shiftplan.solver.timeline import effective_shift, rest_gap, week_boundaries
from shiftplan.solver.validation import validate_month

GENERATOR_SETTINGS = settings(max_examples=15, deadline=None, suppress_health_check=[HealthCheck.too_slow])


@st.composite
def snapshots(draw):
    """A month with a random team, some locked cells and some absences."""
    year = draw(st.integers(min_value=2024, max_value=2026))
    month = draw(st.integers(min_value=1, max_value=12))
    size = draw(st.integers(min_value=1, max_value=8))
    employees = [
        Employee(
            id=f"e{i}",
            name=f"Employee {i}",
            work_system=draw(st.sampled_from(["7h", "8h"])),
            contract=draw(st.sampled_from(["UoP", "UZ"])),
            generation_mode=draw(st.sampled_from(["auto", "manual"])),
        )
        for i in range(size)
    ]
    snap = MonthSnapshot(year=year, month=month, employees=employees)

    cells = st.tuples(st.integers(0, size - 1), st.integers(1, snap.days_in_month))
    schedule, locks = {}, {}
    for idx, day in draw(st.lists(cells, max_size=10, unique=True)):
        key = CellKey(f"e{idx}", day)
        # absences never count towards rest or streak rules
        schedule[key] = draw(st.sampled_from(["UW", "L4", "O"]))
        if draw(st.booleans()):
            locks[key] = True
    snap.schedule = schedule
    snap.locks = locks
    return snap


class TestGeneratorProperties:
    """Generated schedules honor the hard constraints."""

    @GENERATOR_SETTINGS
    @given(snap=snapshots(), seed=st.integers(min_value=0, max_value=2**16))
    def test_no_rest_or_streak_violations(self, snap, seed):
        schedule = generate_schedule(snap, rng=random.Random(seed))
        result = validate_month(snap.with_schedule(schedule))

        assert result.rest_gap == 0
        assert result.consecutive_days == 0

    @GENERATOR_SETTINGS
    @given(snap=snapshots(), seed=st.integers(min_value=0, max_value=2**16))
    def test_preserved_cells(self, snap, seed):
        """Absences stay, and only eligible employees gain cells."""
        schedule = generate_schedule(snap, rng=random.Random(seed))
        eligible = {e.id for e in snap.employees if e.is_generator_eligible}

        for key, shift_id in snap.schedule.items():
            assert schedule[key] == shift_id
        for key, shift_id in schedule.items():
            if key not in snap.schedule:
                assert key.employee_id in eligible
                assert shift_id in WORK_SHIFT_IDS
                assert not snap.locks.get(key)

    @GENERATOR_SETTINGS
    @given(snap=snapshots(), seed=st.integers(min_value=0, max_value=2**16))
    def test_clear_after_generate_keeps_only_protected(self, snap, seed):
        generated = snap.with_schedule(generate_schedule(snap, rng=random.Random(seed)))

        assert clear_schedule(generated).schedule == snap.schedule


class TestTimelineProperties:
    """Calendar and timing invariants."""

    @given(year=st.integers(min_value=1990, max_value=2100), month=st.integers(min_value=1, max_value=12))
    def test_weeks_partition_month(self, year, month):
        weeks = week_boundaries(year, month)

        assert weeks[0].start == 1
        for prev, nxt in zip(weeks, weeks[1:]):
            assert nxt.start == prev.end + 1
        assert all(len(w.days) <= 7 for w in weeks)

    @given(
        shift_id=st.sampled_from(list(SHIFTS)),
        work_system=st.sampled_from(["7h", "8h"]),
    )
    def test_effective_hours_non_negative(self, shift_id, work_system):
        shift = effective_shift(shift_id, work_system)

        assert shift.hours >= 0
        assert shift.end_offset >= shift.start

    @given(
        start=st.floats(min_value=0, max_value=23.75),
        end=st.floats(min_value=0, max_value=23.75),
    )
    def test_override_hours_wrap(self, start, end):
        override = ShiftOverride(start=start, end=end)

        assert 0 <= override.hours <= 24
        assert override.end_offset >= override.start

    @given(
        prev_id=st.sampled_from(list(WORK_SHIFT_IDS)),
        next_id=st.sampled_from(list(WORK_SHIFT_IDS)),
    )
    def test_catalog_shifts_always_rest_enough(self, prev_id, next_id):
        """Any two 7h catalog shifts on consecutive days leave at least 11h."""
        gap = rest_gap(effective_shift(prev_id), effective_shift(next_id))

        assert gap >= GeneratorConfig().min_rest_hours
