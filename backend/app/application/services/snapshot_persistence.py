"""Snapshot persistence — whole-collection save/load against a single slot.

The collection is written as one JSON array under a fixed key. There are no
partial writes: every save overwrites the slot with the full collection.
Loading never fails on bad content; it falls back to an empty collection
and reports a warning instead.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from app.application.interfaces import SnapshotSlot
from app.application.schemas.snapshot import ProductSnapshot, snapshot_adapter
from app.domain.entities import Product
from app.domain.exceptions import ParseFailureError, PersistenceFailureError

logger = logging.getLogger(__name__)


@dataclass
class SnapshotLoad:
    """Products rehydrated at startup plus any warning raised on the way."""

    products: list[Product] = field(default_factory=list)
    warning: str | None = None


def encode(products: list[Product]) -> str:
    """Serialize a collection to the canonical snapshot text."""
    snapshots = [ProductSnapshot.from_entity(p) for p in products]
    return snapshot_adapter.dump_json(
        snapshots, by_alias=True, exclude_none=True
    ).decode("utf-8")


def decode(text: str) -> list[Product]:
    """Parse snapshot text back into products.

    Raises:
        ParseFailureError: the text is not a valid snapshot.
    """
    try:
        snapshots = snapshot_adapter.validate_json(text)
    except PydanticValidationError as exc:
        raise ParseFailureError(
            f"Stored snapshot is not a valid product list ({exc.error_count()} error(s))"
        ) from exc
    return [s.to_entity() for s in snapshots]


class SnapshotPersistence:
    """Durable mirror of the product store, kept in one snapshot slot."""

    def __init__(self, slot: SnapshotSlot, key: str, timeout_seconds: float = 5.0):
        self._slot = slot
        self._key = key
        self._timeout = timeout_seconds
        self._write_lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    async def save(self, products: list[Product]) -> None:
        """Overwrite the slot with the whole collection.

        Raises:
            PersistenceFailureError: the write failed or timed out.
        """
        payload = encode(products)
        async with self._write_lock:
            try:
                await asyncio.wait_for(
                    self._slot.write(self._key, payload), timeout=self._timeout
                )
            except asyncio.TimeoutError as exc:
                logger.error("Snapshot write timed out after %.1fs", self._timeout)
                raise PersistenceFailureError(
                    "write", f"timed out after {self._timeout:.1f}s"
                ) from exc
            except Exception as exc:
                logger.error("Snapshot write failed: %s", exc)
                raise PersistenceFailureError("write", str(exc)) from exc
        logger.debug("Saved snapshot '%s' (%d products)", self._key, len(products))

    async def load(self) -> SnapshotLoad:
        """Read the slot back; an absent or corrupt slot yields an empty collection.

        Raises:
            PersistenceFailureError: the slot itself could not be read.
        """
        try:
            raw = await asyncio.wait_for(self._slot.read(self._key), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise PersistenceFailureError(
                "read", f"timed out after {self._timeout:.1f}s"
            ) from exc
        except Exception as exc:
            raise PersistenceFailureError("read", str(exc)) from exc

        if raw is None:
            logger.info("Snapshot slot '%s' is empty — starting with no products", self._key)
            return SnapshotLoad()

        try:
            products = decode(raw)
        except ParseFailureError as exc:
            backup_key = await self._preserve_corrupt(raw)
            warning = f"{exc.message}; started empty"
            if backup_key:
                warning += f" (original kept under '{backup_key}')"
            logger.warning("Could not load snapshot '%s': %s", self._key, warning)
            return SnapshotLoad(warning=warning)

        logger.info("Loaded %d product(s) from snapshot '%s'", len(products), self._key)
        return SnapshotLoad(products=products)

    async def _preserve_corrupt(self, raw: str) -> str | None:
        """Copy unreadable snapshot text aside so the next save cannot lose it."""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        backup_key = f"{self._key}.corrupt-{stamp}"
        try:
            await asyncio.wait_for(self._slot.write(backup_key, raw), timeout=self._timeout)
        except Exception as exc:
            logger.warning("Could not back up corrupt snapshot: %s", exc)
            return None
        return backup_key
