"""Abstract interface (port) for the durable key-value snapshot slot."""

from abc import ABC, abstractmethod


class SnapshotSlot(ABC):
    """Port for whole-snapshot text storage — implemented in the infrastructure layer.

    A slot holds one text payload per key and is always overwritten in full.
    """

    @abstractmethod
    async def read(self, key: str) -> str | None:
        """Return the payload stored under ``key``, or None if the slot is empty."""
        ...

    @abstractmethod
    async def write(self, key: str, payload: str) -> None:
        """Overwrite the payload stored under ``key``."""
        ...
