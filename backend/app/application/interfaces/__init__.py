from .snapshot_slot import SnapshotSlot

__all__ = [
    "SnapshotSlot",
]
