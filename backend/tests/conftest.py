"""Shared fixtures — an in-memory snapshot slot and services wired to it."""

import asyncio

import pytest

from app.application.interfaces import SnapshotSlot
from app.application.services import ProductService, ProductStore, SnapshotPersistence

SLOT_KEY = "htmlManagerV2Data"


class InMemorySnapshotSlot(SnapshotSlot):
    """Dict-backed slot with switches for simulating storage trouble."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.writes = 0
        self.fail_reads = False
        self.fail_writes = False
        self.write_delay = 0.0

    async def read(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("storage unavailable")
        return self.data.get(key)

    async def write(self, key: str, payload: str) -> None:
        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        if self.fail_writes:
            raise OSError("disk full")
        self.data[key] = payload
        self.writes += 1


@pytest.fixture
def slot() -> InMemorySnapshotSlot:
    return InMemorySnapshotSlot()


@pytest.fixture
def persistence(slot) -> SnapshotPersistence:
    return SnapshotPersistence(slot, key=SLOT_KEY, timeout_seconds=0.5)


@pytest.fixture
def store() -> ProductStore:
    return ProductStore()


@pytest.fixture
def service(store, persistence) -> ProductService:
    return ProductService(store, persistence)
