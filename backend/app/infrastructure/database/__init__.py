from .base import Base
from .session import engine, async_session_factory, ensure_sqlite_directory
from .models import SnapshotSlotModel

__all__ = [
    "Base",
    "engine",
    "async_session_factory",
    "ensure_sqlite_directory",
    "SnapshotSlotModel",
]
