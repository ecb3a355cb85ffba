from .product import (
    ImportDecision,
    ImportTicketResponse,
    ProductContentResponse,
    ProductContentUpdate,
    ProductIdChange,
    ProductRename,
    ProductResponse,
    SnapshotSaveResponse,
)
from .snapshot import ProductSnapshot, snapshot_adapter

__all__ = [
    "ImportDecision",
    "ImportTicketResponse",
    "ProductContentResponse",
    "ProductContentUpdate",
    "ProductIdChange",
    "ProductRename",
    "ProductResponse",
    "SnapshotSaveResponse",
    "ProductSnapshot",
    "snapshot_adapter",
]
