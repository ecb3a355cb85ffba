from .snapshot_slot import SnapshotSlotModel

__all__ = [
    "SnapshotSlotModel",
]
