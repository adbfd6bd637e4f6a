"""Tests for calendar helpers and effective shift resolution."""
import pytest

from shiftplan.models.employee import WorkSystem
from shiftplan.models.schedule import ShiftOverride
from shiftplan.models.shift import EARLY, LATE_7H, LATE_8H, MIDDAY, OFF, SICK_LEAVE, ShiftKind
from shiftplan.solver.timeline import (
    Week,
    decimal_to_time,
    effective_shift,
    holidays_for,
    is_weekend,
    rest_gap,
    time_to_decimal,
    week_boundaries,
    working_days,
)


class TestCalendar:
    """Tests for month calendar facts."""

    def test_weekend_detection(self):
        assert is_weekend(2025, 3, 1)       # Saturday
        assert is_weekend(2025, 3, 2)       # Sunday
        assert not is_weekend(2025, 3, 3)   # Monday

    def test_week_boundaries_end_on_sunday(self):
        """Weeks end on Sunday or at month end."""
        weeks = week_boundaries(2025, 3)

        assert weeks[0] == Week(1, 2)
        assert weeks[1] == Week(3, 9)
        assert weeks[-1] == Week(31, 31)
        assert len(weeks) == 6

    def test_week_boundaries_cover_month(self):
        """Weeks partition the month without gaps."""
        for month in range(1, 13):
            weeks = week_boundaries(2025, month)
            days = [d for w in weeks for d in w.days]
            assert days == list(range(1, days[-1] + 1))
            assert weeks[0].start == 1

    def test_working_days_excludes_holidays(self):
        assert working_days(2025, 3) == 21
        # May 2025: 22 weekdays, holidays on Thu 1st and Sat 3rd
        assert working_days(2025, 5) == 21

    def test_holidays_table(self):
        assert holidays_for(2025, 12) == frozenset({25, 26})
        assert holidays_for(2025, 3) == frozenset()

    def test_time_conversions(self):
        assert decimal_to_time(8.25) == "08:15"
        assert decimal_to_time(16.5) == "16:30"
        assert time_to_decimal("08:15") == 8.25
        assert time_to_decimal("21") == 21


class TestEffectiveShift:
    """Tests for effective_shift resolution."""

    def test_early_shift_follows_work_system(self):
        """8-15 lasts 7h on the 7h system and 8h on the 8h system."""
        seven = effective_shift(EARLY, WorkSystem.SEVEN)
        eight = effective_shift(EARLY, WorkSystem.EIGHT)

        assert seven.hours == 7
        assert seven.end == 15
        assert eight.hours == 8
        assert eight.end == 16

    def test_work_system_accepts_strings(self):
        assert effective_shift(MIDDAY, "8h").end == 20

    def test_off_and_unknown_resolve_to_off(self):
        for shift_id in (OFF, None, "", "no-such-shift"):
            shift = effective_shift(shift_id)
            assert shift.is_off
            assert shift.hours == 0
            assert not shift.is_work

    def test_absence_counts_nominal_hours(self):
        shift = effective_shift("UW", WorkSystem.EIGHT)

        assert shift.kind is ShiftKind.ABSENCE
        assert shift.hours == 8
        assert shift.end == shift.start + 8

    def test_sick_leave_resolves_like_other_absences(self):
        """L4 is listed as 0-24 but takes the work-system hours from midnight."""
        shift = effective_shift(SICK_LEAVE, WorkSystem.SEVEN)

        assert (shift.start, shift.end, shift.hours) == (0, 7, 7)
        assert not shift.is_work

    def test_override_taken_verbatim(self):
        override = ShiftOverride(start=8, end=16.5, hours=8.5)
        shift = effective_shift(EARLY, WorkSystem.SEVEN, override)

        assert shift.start == 8
        assert shift.end == 16.5
        assert shift.hours == 8.5
        assert shift.is_work
        assert shift.label == "08:00 - 16:30"

    def test_override_keeps_absence_kind(self):
        shift = effective_shift(SICK_LEAVE, override=ShiftOverride(start=9, end=13))

        assert shift.is_absence
        assert shift.hours == 4

    def test_override_negative_duration_wraps(self):
        override = ShiftOverride(start=22, end=6)

        assert override.hours == 8
        assert override.end_offset == 30

    def test_covers_is_half_open(self):
        late = effective_shift(LATE_7H)

        assert late.covers(20)
        assert not late.covers(21)
        assert not late.covers(13)
        assert effective_shift(EARLY).covers(8)


class TestRestGap:
    """Tests for rest_gap between consecutive days."""

    def test_late_then_early_is_eleven_hours(self):
        assert rest_gap(effective_shift(LATE_7H), effective_shift(EARLY)) == 11

    def test_override_start_shortens_gap(self):
        late = effective_shift(LATE_7H)
        seven = effective_shift(EARLY, override=ShiftOverride(start=7, end=15))

        assert rest_gap(late, seven) == 10

    @pytest.mark.parametrize("late_id", [LATE_7H, LATE_8H])
    def test_late_shifts_end_at_21_on_8h(self, late_id):
        """On the 8h system 13-21 ends at 21; 14-21 runs over to 22."""
        shift = effective_shift(late_id, WorkSystem.EIGHT)
        assert shift.end == shift.start + 8

    def test_past_midnight_override(self):
        night = effective_shift(EARLY, override=ShiftOverride(start=22, end=2))

        assert rest_gap(night, effective_shift(EARLY)) == 6
