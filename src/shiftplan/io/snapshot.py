"""
JSON snapshot loading and saving.

The file format is the planner's backup document: cell-keyed maps use
"employeeId-day" string keys and `month` is stored 0-based.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Union

from shiftplan.models.employee import Employee
from shiftplan.models.schedule import CellKey, MonthSnapshot, ShiftOverride
from shiftplan.models.shift import is_off
from shiftplan.utils.logging_setup import get_logger, log_function_call

logger = get_logger("shiftplan.io.snapshot")

FORMAT_VERSION = 1


class SnapshotError(ValueError):
    """Snapshot document cannot be decoded."""


def _safe_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return False


def _decode_map(raw: Any, field_name: str, convert: Callable[[Any], Any]) -> Dict[CellKey, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise SnapshotError(f"'{field_name}' must be an object, got {type(raw).__name__}")

    decoded = {}
    for raw_key, value in raw.items():
        try:
            key = CellKey.parse(raw_key)
        except ValueError as e:
            raise SnapshotError(f"'{field_name}': {e}") from e
        decoded[key] = convert(value)
    return decoded


def _text(value: Any) -> str:
    # null cells are empty, not the text "None"
    return "" if value is None else str(value)


def _decode_override(value: Any) -> ShiftOverride:
    try:
        return ShiftOverride.from_dict(value)
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid override {value!r}") from e


def _decode_flags(raw: Any, field_name: str) -> Dict[CellKey, bool]:
    # Cleared flags may be stored as false; keep only the set ones
    return {k: v for k, v in _decode_map(raw, field_name, _safe_bool).items() if v}


def snapshot_from_dict(data: Mapping) -> MonthSnapshot:
    """Decode a backup document into a MonthSnapshot."""
    if not isinstance(data, Mapping) or "employees" not in data or "schedule" not in data:
        raise SnapshotError("Snapshot must contain 'employees' and 'schedule'")

    try:
        year = int(data.get("year", datetime.now().year))
        month = int(data.get("month", datetime.now().month - 1)) + 1
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid year/month: {e}") from e
    if not 1 <= month <= 12:
        raise SnapshotError(f"Invalid month index {month - 1} (expected 0..11)")

    if not isinstance(data["employees"], list):
        raise SnapshotError("'employees' must be a list")
    employees = []
    for record in data["employees"]:
        if not isinstance(record, Mapping) or record.get("id") in (None, ""):
            raise SnapshotError(f"Invalid employee record: {record!r}")
        employees.append(Employee.from_dict(record))

    schedule = {
        k: v for k, v in _decode_map(data["schedule"], "schedule", _text).items()
        if not is_off(v)
    }

    snapshot = MonthSnapshot(
        year=year,
        month=month,
        employees=employees,
        schedule=schedule,
        overrides=_decode_map(data.get("overrides"), "overrides", _decode_override),
        locks=_decode_flags(data.get("lockedCells"), "lockedCells"),
        english_lessons=_decode_flags(data.get("englishLessons"), "englishLessons"),
        home_office=_decode_flags(data.get("homeOffice"), "homeOffice"),
        notes={
            k: v for k, v in _decode_map(data.get("notes"), "notes", _text).items() if v
        },
    )
    logger.debug(f"Decoded snapshot {year}-{month:02d}: {len(employees)} employees, {len(schedule)} cells")
    return snapshot


@log_function_call
def load_snapshot(source: Union[str, Path, Mapping]) -> MonthSnapshot:
    """
    Load a snapshot from a JSON file or an already parsed document.

    Args:
        source: Path to a backup JSON file, or its decoded dict

    Returns:
        MonthSnapshot (month 1-based)

    Raises:
        SnapshotError: if the document is not a valid snapshot
    """
    if isinstance(source, Mapping):
        return snapshot_from_dict(source)

    path = Path(source)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path}: not valid JSON ({e})") from e
    return snapshot_from_dict(data)


def _encode_map(cells: Mapping[CellKey, Any], convert: Callable[[Any], Any] = lambda v: v) -> Dict[str, Any]:
    return {str(k): convert(v) for k, v in cells.items()}


def snapshot_to_dict(snapshot: MonthSnapshot) -> Dict[str, Any]:
    """Encode a snapshot as a backup document."""
    teams = list(dict.fromkeys(e.team for e in snapshot.employees if e.team))
    return {
        "version": FORMAT_VERSION,
        "date": datetime.now().isoformat(timespec="seconds"),
        "year": snapshot.year,
        "month": snapshot.month - 1,
        "employees": [e.to_dict() for e in snapshot.employees],
        "teams": teams,
        "schedule": _encode_map({k: v for k, v in snapshot.schedule.items() if not is_off(v)}),
        "overrides": _encode_map(snapshot.overrides, ShiftOverride.to_dict),
        "notes": _encode_map(snapshot.notes),
        "lockedCells": _encode_map({k: True for k, v in snapshot.locks.items() if v}),
        "englishLessons": _encode_map({k: True for k, v in snapshot.english_lessons.items() if v}),
        "homeOffice": _encode_map({k: True for k, v in snapshot.home_office.items() if v}),
    }


@log_function_call
def save_snapshot(snapshot: MonthSnapshot, path: Union[str, Path]) -> Path:
    """Write a snapshot as pretty-printed JSON; returns the path written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(snapshot_to_dict(snapshot), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info(f"Saved snapshot {snapshot.year}-{snapshot.month:02d} to {path}")
    return path
