from .product import (
    DEFAULT_VARIANT,
    NEW_PRODUCT_HTML,
    NEW_PRODUCT_NAME,
    Product,
    natural_key,
    utc_now,
)
from .product_import import (
    ImportState,
    ImportTicket,
    MergeOutcome,
    MergePlan,
    NormalizedBatch,
    PayloadShape,
)

__all__ = [
    "DEFAULT_VARIANT",
    "NEW_PRODUCT_HTML",
    "NEW_PRODUCT_NAME",
    "Product",
    "natural_key",
    "utc_now",
    "ImportState",
    "ImportTicket",
    "MergeOutcome",
    "MergePlan",
    "NormalizedBatch",
    "PayloadShape",
]
