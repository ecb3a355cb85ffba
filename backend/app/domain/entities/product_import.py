"""Domain entities for the import pipeline — batches, merge plans and outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4

from .product import Product


class ImportState(str, Enum):
    """Lifecycle states of a single import."""

    IDLE = "idle"
    NORMALIZING = "normalizing"
    COLLISION_CHECK = "collision_check"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    MERGING = "merging"
    PERSISTED = "persisted"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PayloadShape(str, Enum):
    """Which accepted payload layout an import matched."""

    RECORD_LIST = "record_list"
    PRODUCTS_FIELD = "products_field"
    VERSIONED_PRODUCTS = "versioned_products"
    SINGLE_RECORD = "single_record"
    LEGACY_HTML = "legacy_html"


@dataclass
class NormalizedBatch:
    """Records decoded from an external payload, ready to merge."""

    products: list[Product]
    shape: PayloadShape
    skipped: int = 0

    def __len__(self) -> int:
        return len(self.products)


@dataclass
class MergePlan:
    """An incoming batch checked against the store, before any mutation."""

    incoming: list[Product]
    collisions: list[str]
    plan_id: str = field(default_factory=lambda: str(uuid4()))

    @property
    def requires_confirmation(self) -> bool:
        return bool(self.collisions)


@dataclass
class MergeOutcome:
    """Result of applying (or declining) a merge plan."""

    state: ImportState
    imported: int = 0
    created: int = 0
    overwritten: int = 0


@dataclass
class ImportTicket:
    """What an import caller sees at each step of the pipeline.

    ``imported`` is the size of the incoming batch, regardless of how many
    records were overwrites rather than additions.
    """

    plan_id: str
    state: ImportState
    imported: int = 0
    created: int = 0
    overwritten: int = 0
    collisions: list[str] = field(default_factory=list)
    shape: PayloadShape | None = None
    skipped: int = 0

    @property
    def collision_count(self) -> int:
        return len(self.collisions)

    @property
    def message(self) -> str:
        if self.state == ImportState.PERSISTED:
            return f"{self.imported} product(s) imported"
        if self.state == ImportState.CANCELLED:
            return "Import cancelled"
        if self.state == ImportState.AWAITING_CONFIRMATION:
            return (
                f"{self.collision_count} product id(s) already exist. "
                "Overwrite them?"
            )
        return self.state.value
