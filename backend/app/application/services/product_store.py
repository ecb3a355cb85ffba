"""In-memory product store — the authoritative collection and its invariants.

The store is synchronous and owns one ``dict[str, Product]``. Everything
that mutates a product goes through a method here; persistence is the
caller's job (see ``ProductService``).
"""

import logging
import time
from collections.abc import Iterable

from app.domain.entities import (
    DEFAULT_VARIANT,
    NEW_PRODUCT_HTML,
    NEW_PRODUCT_NAME,
    Product,
    natural_key,
)
from app.domain.exceptions import EmptyIdError, EntityNotFoundError, IdConflictError

logger = logging.getLogger(__name__)

NEW_ID_PREFIX = "product"


class ProductStore:
    """Authoritative CRUD over the in-memory product collection."""

    def __init__(self, products: Iterable[Product] = ()):
        self._products: dict[str, Product] = {}
        self._last_stamp = 0
        self.replace_all(products)

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    # ── Reads ───────────────────────────────────────────────────────

    def get(self, product_id: str) -> Product | None:
        return self._products.get(product_id)

    def require(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise EntityNotFoundError("Product", product_id)
        return product

    def list_all(self) -> list[Product]:
        """All products ordered by id, comparing digit runs numerically."""
        return sorted(self._products.values(), key=lambda p: natural_key(p.id))

    def search(self, term: str) -> list[Product]:
        """Products whose id or name contains ``term``, case-insensitively."""
        needle = term.casefold()
        if not needle:
            return self.list_all()
        return [
            p for p in self.list_all()
            if needle in p.id.casefold() or needle in p.name.casefold()
        ]

    def get_content(self, product_id: str, variant_key: str = DEFAULT_VARIANT) -> str:
        return self.require(product_id).read(variant_key)

    def variant_names(self, product_id: str) -> list[str]:
        return self.require(product_id).variant_names()

    def ids(self) -> set[str]:
        return set(self._products)

    def snapshot(self) -> list[Product]:
        """Deep copy of the collection in insertion order."""
        return [p.clone() for p in self._products.values()]

    # ── Mutations ───────────────────────────────────────────────────

    def create(self) -> Product:
        """Append a template product under a freshly generated unique id."""
        product = Product(
            id=self._generate_id(),
            name=NEW_PRODUCT_NAME,
            content=NEW_PRODUCT_HTML,
        )
        self._products[product.id] = product
        logger.info("Created product %s", product.id)
        return product

    def rename(self, product_id: str, new_name: str) -> Product:
        product = self.require(product_id)
        product.touch()
        product.name = new_name
        return product

    def change_id(self, old_id: str, new_id: str) -> Product:
        """Re-key a product; the previous id is kept if the new one is invalid."""
        product = self.require(old_id)
        candidate = new_id.strip()
        if not candidate:
            raise EmptyIdError(old_id)
        if candidate == old_id:
            return product
        if candidate in self._products:
            raise IdConflictError(old_id, candidate)
        product.touch()

        # Rebuild to keep insertion order stable for the renamed entry
        self._products = {
            (candidate if key == old_id else key): value
            for key, value in self._products.items()
        }
        product.id = candidate
        logger.info("Changed product id %s -> %s", old_id, candidate)
        return product

    def set_content(self, product_id: str, variant_key: str, content: str) -> Product:
        product = self.require(product_id)
        product.write(variant_key, content)
        return product

    def delete(self, product_id: str) -> bool:
        """Remove a product. Returns False if it was not present."""
        removed = self._products.pop(product_id, None)
        if removed is not None:
            logger.info("Deleted product %s", product_id)
        return removed is not None

    def replace_all(self, products: Iterable[Product]) -> None:
        """Swap in a whole new collection; later duplicates of an id win."""
        replacement: dict[str, Product] = {}
        for product in products:
            replacement[product.id] = product
        self._products = replacement

    # ── Internals ───────────────────────────────────────────────────

    def _generate_id(self) -> str:
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        while f"{NEW_ID_PREFIX}-{stamp}" in self._products:
            stamp += 1
        self._last_stamp = stamp
        return f"{NEW_ID_PREFIX}-{stamp}"
