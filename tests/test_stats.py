"""Tests for employee statistics."""
from shiftplan.models.employee import Employee
from shiftplan.models.schedule import CellKey, ShiftOverride
from shiftplan.models.shift import EARLY, LATE_7H, MID, MIDDAY
from shiftplan.solver.stats import (
    calculate_team_stats,
    employee_stats,
    stats_to_dataframe,
    stats_to_dict_list,
)

DAYS = list(range(1, 32))


def _stats(emp, schedule, overrides=None, english=None):
    return employee_stats(emp, schedule, overrides or {}, english or {}, DAYS, 2025, 3)


class TestEmployeeStats:
    """Tests for hours and fatigue of one employee."""

    def test_override_hours_counted(self):
        emp = Employee(id="e1", name="Anna")
        schedule = {CellKey("e1", 3): EARLY}
        overrides = {CellKey("e1", 3): ShiftOverride(start=8, end=16.5, hours=8.5)}

        assert _stats(emp, schedule, overrides).total_hours == 8.5

    def test_hours_follow_work_system(self):
        schedule = {CellKey("e1", 3): EARLY, CellKey("e1", 4): MID}

        assert _stats(Employee(id="e1", name="A"), schedule).total_hours == 14
        assert _stats(Employee(id="e1", name="A", work_system="8h"), schedule).total_hours == 16

    def test_absence_counts_full_day(self):
        schedule = {CellKey("e1", 3): "UW", CellKey("e1", 4): "L4"}

        stats = _stats(Employee(id="e1", name="A"), schedule)

        assert stats.total_hours == 14
        assert stats.fatigue_points == 0

    def test_english_lesson_adds_hour_on_any_day(self):
        emp = Employee(id="e1", name="A")
        english = {CellKey("e1", 3): True, CellKey("e1", 10): True}

        assert _stats(emp, {CellKey("e1", 3): EARLY}, english=english).total_hours == 9

    def test_fatigue_points(self):
        emp = Employee(id="e1", name="A")
        schedule = {
            CellKey("e1", 1): EARLY,     # Saturday: +2
            CellKey("e1", 2): LATE_7H,   # Sunday afternoon: +3
            CellKey("e1", 3): MIDDAY,    # Monday afternoon: +1
            CellKey("e1", 4): MID,       # Tuesday 10:00 start: 0
        }

        assert _stats(emp, schedule).fatigue_points == 6

    def test_other_employees_ignored(self):
        schedule = {CellKey("e2", 3): EARLY}

        assert _stats(Employee(id="e1", name="A"), schedule).total_hours == 0


class TestTeamStats:
    """Tests for calculate_team_stats and conversions."""

    def test_targets_and_delta(self, make_snapshot):
        snap = make_snapshot(schedule={CellKey("e1", 3): EARLY})
        stats = {s.employee_id: s for s in calculate_team_stats(snap)}

        assert stats["e1"].target_hours == 147
        assert stats["e1"].delta == 7 - 147
        assert stats["e2"].target_hours == 168
        assert len(stats) == 4

    def test_working_days_override(self, make_snapshot):
        stats = calculate_team_stats(make_snapshot(), working_days=10)

        assert stats[0].target_hours == 70

    def test_dict_list_and_dataframe(self, make_snapshot):
        stats = calculate_team_stats(make_snapshot())
        rows = stats_to_dict_list(stats)
        df = stats_to_dataframe(stats)

        assert rows[0]["id"] == "e1"
        assert set(rows[0]) == {"id", "name", "hours", "target", "delta", "fatigue"}
        assert list(df.columns) == ["id", "name", "hours", "target", "delta", "fatigue"]
        assert len(df) == 4

    def test_empty_dataframe(self):
        assert stats_to_dataframe([]).empty
