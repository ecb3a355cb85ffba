"""SQLAlchemy ORM model for the snapshot slot."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.base import Base


class SnapshotSlotModel(Base):
    """ORM model — maps to the 'snapshot_slots' table, one row per slot key."""

    __tablename__ = "snapshot_slots"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SnapshotSlotModel(key='{self.key}', size={len(self.payload or '')})>"
