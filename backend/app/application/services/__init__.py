from .import_normalizer import ImportNormalizer
from .merge_reconciler import MergeReconciler
from .product_service import ProductService
from .product_store import ProductStore
from .snapshot_persistence import SnapshotLoad, SnapshotPersistence

__all__ = [
    "ImportNormalizer",
    "MergeReconciler",
    "ProductService",
    "ProductStore",
    "SnapshotLoad",
    "SnapshotPersistence",
]
