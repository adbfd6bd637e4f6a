# shiftplan/io - Input/output handling
from .snapshot import SnapshotError, load_snapshot, save_snapshot, snapshot_from_dict, snapshot_to_dict

__all__ = ["SnapshotError", "load_snapshot", "save_snapshot", "snapshot_from_dict", "snapshot_to_dict"]
