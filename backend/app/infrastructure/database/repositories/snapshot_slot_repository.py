"""Concrete SnapshotSlot implementation backed by SQLAlchemy."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.application.interfaces import SnapshotSlot
from app.infrastructure.database.models import SnapshotSlotModel


class SQLAlchemySnapshotSlotRepository(SnapshotSlot):
    """Implements the SnapshotSlot port with one short transaction per call.

    The product service lives for the whole process, so the repository holds
    a session factory rather than a request-scoped session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def read(self, key: str) -> str | None:
        async with self._session_factory() as session:
            model = await session.get(SnapshotSlotModel, key)
            return model.payload if model else None

    async def write(self, key: str, payload: str) -> None:
        async with self._session_factory() as session:
            try:
                model = await session.get(SnapshotSlotModel, key)
                if model is None:
                    session.add(SnapshotSlotModel(key=key, payload=payload))
                else:
                    model.payload = payload
                await session.commit()
            except Exception:
                await session.rollback()
                raise
