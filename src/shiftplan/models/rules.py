"""
Business Rules and Constants
============================
Central source of truth for staffing minimums, labour rules and the
weekly rotation pattern.
"""
from typing import Dict, List

from .shift import EARLY, LATE_7H, MID, MIDDAY

# Weekly rotation of base start times; each employee starts at a different
# offset and advances one slot per calendar week.
ROTATION_PATTERN: List[str] = [EARLY, LATE_7H, MID, MIDDAY]

# Staffing requirements (weekdays only)
MIN_STAFF_MORNING = 15  # headcount at 08:00
MIN_STAFF_EVENING = 8   # headcount at 20:00

# Labour rules
MIN_REST_HOURS = 11
MAX_CONSECUTIVE_DAYS = 5
TARGET_WORKDAYS_PER_WEEK = 5

# Hours displayed/checked by the coverage grid (08:00 .. 20:00 slots)
COVERAGE_FIRST_HOUR = 8
COVERAGE_LAST_HOUR = 20

# Start hour from which a work shift counts as afternoon/evening for fatigue
AFTERNOON_START_HOUR = 11

# Static holiday table, month (1-based) -> days. Year independent: movable
# feasts are approximated, not computed.
HOLIDAYS: Dict[int, List[int]] = {
    1: [1, 6],
    4: [1, 2],
    5: [1, 3],
    8: [15],
    11: [1, 11],
    12: [25, 26],
}
