"""
Schedule Generator
==================
Greedy monthly schedule generation in four phases:

    1. Clear:     reset unlocked, non-override, non-absence cells of
                  eligible employees to off
    2. Rotation:  week by week, give each employee their rotation slot,
                  alternate weekend duty, fill weekdays up to 5 worked days
    3. (cont.)    shifts are picked from priority lists that react to the
                  running morning/evening staffing shortfall
    4. Backfill:  top up employees still under their hour target on any
                  remaining open day

Every write goes through `_write`, which keeps the per-employee hour cache
and the per-day staffing cache in step with the working schedule. Every
candidate goes through `check_constraints` first, so hard constraints hold
for all generated cells. Cells that cannot be filled stay off.
"""
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from shiftplan.models.constraints import GeneratorConfig, ShortfallMargins
from shiftplan.models.employee import Employee, WorkSystem
from shiftplan.models.schedule import CellKey, MonthSnapshot, ScheduleMap
from shiftplan.models.shift import (
    EARLY,
    LATE_7H,
    LATE_8H,
    MID,
    MIDDAY,
    OFF,
    get_shift,
    is_off,
    late_shift_for,
)
from shiftplan.solver.staffing import DayStaffing, count_day_staffing
from shiftplan.solver.stats import employee_stats
from shiftplan.solver.timeline import (
    Week,
    effective_shift,
    is_weekend,
    rest_gap,
    week_boundaries,
    working_days as month_working_days,
)
from shiftplan.solver.validation import assigned_shift, work_streak
from shiftplan.utils.logging_setup import GeneratorLogger, get_logger
from shiftplan.utils.structured_logging import get_structured_logger

logger = get_logger("shiftplan.solver.generator")
slog = get_structured_logger("shiftplan.solver.generator")

AFTERNOON_SLOTS = (LATE_7H, LATE_8H, MIDDAY)


@dataclass
class RotationSlot:
    """An eligible employee with their fixed position in the rotation."""
    index: int
    employee: Employee
    offset: int


@dataclass
class GenerationResult:
    """Outcome of one generator run."""
    schedule: ScheduleMap
    hours: Dict[str, float] = field(default_factory=dict)
    targets: Dict[str, float] = field(default_factory=dict)
    cells_written: int = 0
    cells_cleared: int = 0

    @property
    def under_target(self) -> List[str]:
        """Eligible employees who ended below their monthly hour target."""
        return [emp_id for emp_id, target in self.targets.items() if self.hours.get(emp_id, 0) < target]

    def summary(self) -> Dict:
        return {
            "cells_written": self.cells_written,
            "cells_cleared": self.cells_cleared,
            "eligible": len(self.targets),
            "under_target": len(self.under_target),
        }


def _unique(candidates: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(candidates))


class ScheduleGenerator:
    """
    One generation run over a month snapshot.

    The snapshot is never mutated; the generator works on a private copy of
    the schedule map and returns it in the result.
    """

    def __init__(
        self,
        snapshot: MonthSnapshot,
        working_days: Optional[int] = None,
        config: Optional[GeneratorConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.snapshot = snapshot
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random()
        if working_days is None:
            working_days = month_working_days(snapshot.year, snapshot.month)
        self.working_days = working_days

        self.days = snapshot.days
        self.days_in_month = snapshot.days_in_month
        self.weeks: List[Week] = week_boundaries(snapshot.year, snapshot.month)

        self.schedule: ScheduleMap = dict(snapshot.schedule)
        self.overrides = snapshot.overrides
        self.locks = snapshot.locks

        self.eligible = [e for e in snapshot.employees if e.is_generator_eligible]
        self.targets = {e.id: e.monthly_target_hours(working_days) for e in self.eligible}

        self.hours: Dict[str, float] = {}
        self.staffing: Dict[int, DayStaffing] = {}
        self.cells_written = 0
        self.cells_cleared = 0
        self.log = GeneratorLogger()
        self._init_caches()

    # ---------- Caches ----------

    def _init_caches(self) -> None:
        """Seed both caches from the input schedule (all employees count)."""
        snap = self.snapshot
        self.staffing = count_day_staffing(snap, self.config)
        self.hours = {
            emp.id: employee_stats(
                emp, snap.schedule, snap.overrides, snap.english_lessons, self.days, snap.year, snap.month
            ).total_hours
            for emp in snap.employees
        }

    def _write(self, employee: Employee, day: int, shift_id: str) -> None:
        """Replace a cell, moving its contribution between cache entries."""
        key = CellKey(employee.id, day)

        old = assigned_shift(employee, day, self.schedule, self.overrides)
        if old is not None:
            self.hours[employee.id] -= old.hours
            self.staffing[day].add(old, self.config, sign=-1)

        if is_off(shift_id):
            self.schedule.pop(key, None)
            return

        self.schedule[key] = shift_id
        new = assigned_shift(employee, day, self.schedule, self.overrides)
        self.hours[employee.id] += new.hours
        self.staffing[day].add(new, self.config)

    def _is_open(self, employee: Employee, day: int) -> bool:
        key = CellKey(employee.id, day)
        return is_off(self.schedule.get(key)) and not self.locks.get(key)

    def _reached_target(self, employee: Employee) -> bool:
        return self.hours[employee.id] >= self.targets[employee.id]

    # ---------- Constraints ----------

    def check_constraints(self, employee: Employee, day: int, shift_id: str) -> bool:
        """
        True if `shift_id` may be written to (employee, day).

        Rejects locked cells, occupied cells, override cells, rest gaps below
        the minimum against either neighbour (absences count as full rest)
        and runs of work days above the cap.
        """
        key = CellKey(employee.id, day)
        if self.locks.get(key):
            return False
        if not is_off(self.schedule.get(key)):
            return False
        if key in self.overrides:
            return False

        proposed = effective_shift(shift_id, employee.work_system)
        min_rest = self.config.min_rest_hours

        if day > 1:
            prev = assigned_shift(employee, day - 1, self.schedule, self.overrides)
            if prev is not None and prev.is_work and rest_gap(prev, proposed) < min_rest:
                self.log.constraint("rest_before", False, f"{employee.id} d{day} {shift_id}")
                return False

        if day < self.days_in_month:
            nxt = assigned_shift(employee, day + 1, self.schedule, self.overrides)
            if nxt is not None and nxt.is_work and rest_gap(proposed, nxt) < min_rest:
                self.log.constraint("rest_after", False, f"{employee.id} d{day} {shift_id}")
                return False

        run = (
            1
            + work_streak(employee, day, self.schedule, self.overrides, self.days_in_month, -1)
            + work_streak(employee, day, self.schedule, self.overrides, self.days_in_month, 1)
        )
        if run > self.config.max_consecutive_days:
            self.log.constraint("streak", False, f"{employee.id} d{day} run={run}")
            return False

        return True

    def _try_assign(self, employee: Employee, day: int, candidates: Sequence[str]) -> Optional[str]:
        """Write the first candidate that satisfies all constraints."""
        for shift_id in _unique(candidates):
            if self.check_constraints(employee, day, shift_id):
                self._write(employee, day, shift_id)
                self.cells_written += 1
                return shift_id
        logger.debug(f"No feasible shift for {employee.id} on day {day}")
        return None

    def _shortfall_pick(self, day: int, margins: ShortfallMargins, late: str) -> Optional[str]:
        """Shift forced by a critical staffing shortfall on `day`, if any."""
        counts = self.staffing[day]
        if self.config.evening_critical(counts.evening, margins):
            return late
        if self.config.morning_critical(counts.morning, margins):
            return EARLY
        return None

    # ---------- Phase 1 ----------

    def clear_phase(self) -> None:
        """Reset generator-controlled cells of eligible employees to off."""
        self.log.phase("Clear")
        for emp in self.eligible:
            for day in self.days:
                key = CellKey(emp.id, day)
                if self.locks.get(key) or key in self.overrides:
                    continue
                shift_id = self.schedule.get(key)
                if is_off(shift_id) or get_shift(shift_id).is_absence:
                    continue
                self._write(emp, day, OFF)
                self.cells_cleared += 1
        self.log.phase_done("Clear", cleared=self.cells_cleared)
        self.log.caches(self.hours, self.targets, self.staffing)

    # ---------- Phases 2-3 ----------

    def rotation_slots(self) -> List[RotationSlot]:
        pattern_len = len(self.config.rotation_pattern)
        return [
            RotationSlot(index=i, employee=emp, offset=i % pattern_len)
            for i, emp in enumerate(self.eligible)
        ]

    def base_shift(self, slot: RotationSlot, week_index: int) -> str:
        """This week's rotation shift for the employee."""
        pattern = self.config.rotation_pattern
        shift_id = pattern[(slot.offset + week_index) % len(pattern)]
        if shift_id == LATE_7H and slot.employee.work_system is WorkSystem.EIGHT:
            shift_id = LATE_8H
        return shift_id

    @staticmethod
    def works_weekend(slot: RotationSlot, week_index: int) -> bool:
        """Alternating halves of the roster cover alternating weekends."""
        return (slot.index + week_index) % 2 == 0

    def rotation_phase(self) -> None:
        """Assign rotation shifts week by week."""
        self.log.phase("Rotation")
        slots = self.rotation_slots()
        self.log.step(f"{len(slots)} rotation slot(s) over {len(self.weeks)} week(s)")
        written = self.cells_written
        for week_index, week in enumerate(self.weeks):
            order = list(slots)
            self.rng.shuffle(order)
            week_written = self.cells_written
            self.log.enter(f"week {week_index + 1}: days {week.start}-{week.end}")
            for slot in order:
                self._fill_week(slot, week_index, week)
            self.log.exit(f"week {week_index + 1}: {self.cells_written - week_written} cell(s)")
        self.log.phase_done("Rotation", written=self.cells_written - written)
        self.log.caches(self.hours, self.targets, self.staffing)

    def _fill_week(self, slot: RotationSlot, week_index: int, week: Week) -> None:
        emp = slot.employee
        if self._reached_target(emp):
            return

        base = self.base_shift(slot, week_index)
        late = late_shift_for(emp.work_system)
        snap = self.snapshot

        week_days = week.days
        weekend_days = [d for d in week_days if is_weekend(snap.year, snap.month, d)]
        weekdays = [d for d in week_days if not is_weekend(snap.year, snap.month, d)]

        # A. Weekend duty
        if weekend_days and self.works_weekend(slot, week_index):
            preference = late if base in AFTERNOON_SLOTS else EARLY
            for day in weekend_days:
                if not self._is_open(emp, day):
                    continue
                choice = self._shortfall_pick(day, self.config.weekend_margins, late) or preference
                self._try_assign(emp, day, [choice, late, EARLY, MIDDAY])

        # B. Weekdays up to the weekly target
        scheduled = sum(1 for d in week_days if not is_off(self.schedule.get(CellKey(emp.id, d))))
        needed = max(0, self.config.target_workdays_per_week - scheduled)
        open_days = [d for d in weekdays if self._is_open(emp, d)]
        self.rng.shuffle(open_days)

        for day in sorted(open_days[:needed]):
            if self._reached_target(emp):
                break
            forced = self._shortfall_pick(day, self.config.weekday_margins, late)
            if forced == late:
                candidates = [late, MIDDAY, base]
            elif forced == EARLY:
                candidates = [EARLY, MID, base]
            else:
                candidates = [base, MID, MIDDAY, EARLY, late]
            self._try_assign(emp, day, candidates)

    # ---------- Phase 4 ----------

    def _backfill_preference(self) -> str:
        """Weighted pick favouring midday starts."""
        r = self.rng.random()
        if r < self.config.backfill_midday_share:
            return MIDDAY
        if r < self.config.backfill_midday_share + self.config.backfill_early_share:
            return EARLY
        return MID

    def backfill_phase(self) -> None:
        """Top up employees still under target on any open day."""
        self.log.phase("Backfill")
        pending = [s for s in self.rotation_slots() if not self._reached_target(s.employee)]
        self.log.step(f"{len(pending)} employee(s) under target")
        written = self.cells_written
        for slot in pending:
            emp = slot.employee
            late = late_shift_for(emp.work_system)
            open_days = [d for d in self.days if self._is_open(emp, d)]
            self.rng.shuffle(open_days)

            for day in open_days:
                if self._reached_target(emp):
                    break
                preference = self._backfill_preference()
                preference = self._shortfall_pick(day, self.config.backfill_margins, late) or preference
                self._try_assign(emp, day, [preference, EARLY, MIDDAY, late])
        self.log.phase_done("Backfill", written=self.cells_written - written)
        self.log.caches(self.hours, self.targets, self.staffing)

    # ---------- Run ----------

    def run(self) -> GenerationResult:
        """Execute all phases and return the new schedule with diagnostics."""
        snap = self.snapshot
        logger.info(f"Generating {snap.year}-{snap.month:02d}: {len(self.eligible)} eligible of "
                    f"{len(snap.employees)} employees, {self.working_days} working days")

        self.clear_phase()
        self.rotation_phase()
        self.backfill_phase()

        result = GenerationResult(
            schedule=self.schedule,
            hours={e.id: round(self.hours[e.id], 2) for e in self.eligible},
            targets=dict(self.targets),
            cells_written=self.cells_written,
            cells_cleared=self.cells_cleared,
        )
        for emp_id in result.under_target:
            logger.warning(f"{emp_id} under target: {result.hours[emp_id]}h / {result.targets[emp_id]}h")
        slog.info("generation_finished", year=snap.year, month=snap.month, **result.summary())
        return result


def generate_schedule(
    snapshot: MonthSnapshot,
    working_days: Optional[int] = None,
    config: Optional[GeneratorConfig] = None,
    rng: Optional[random.Random] = None,
    seed: Optional[int] = None,
) -> ScheduleMap:
    """
    Generate a full month schedule.

    Args:
        snapshot: Employees, existing schedule, overrides, locks, flags
        working_days: Working days of the month (default: weekdays minus holidays)
        config: Rules and heuristics (default GeneratorConfig())
        rng: Random source for tie-breaking
        seed: Convenience seed when no rng is given

    Returns:
        A new schedule map; the snapshot is left untouched
    """
    if rng is None and seed is not None:
        rng = random.Random(seed)
    return ScheduleGenerator(snapshot, working_days, config, rng).run().schedule
