from .snapshot_slot_repository import SQLAlchemySnapshotSlotRepository

__all__ = [
    "SQLAlchemySnapshotSlotRepository",
]
