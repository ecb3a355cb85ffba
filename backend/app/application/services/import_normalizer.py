"""Import normalizer — turns foreign payloads into canonical products.

Accepted layouts, tried in order:

1. a bare JSON array of product objects;
2. an object whose ``products`` field is such an array;
3. the same object carrying a ``version`` marker (informational only);
4. a single product object, wrapped into a one-element batch.

Each field is decoded on its own: a value of the expected type is used,
anything else falls back to that field's default. A bad field never
rejects the record, and a bad record never rejects the batch. Only a
payload that cannot be read at all raises ``ParseFailureError``.
"""

import json
import logging
import re
import time
from datetime import datetime, timezone
from typing import Any

from app.domain.entities import (
    DEFAULT_VARIANT,
    NormalizedBatch,
    PayloadShape,
    Product,
    utc_now,
)
from app.domain.exceptions import ParseFailureError

logger = logging.getLogger(__name__)

IMPORTED_ID_PREFIX = "imported"
LEGACY_PRODUCT_NAME = "Imported from legacy system"
LEGACY_PRODUCT_HTML = (
    "<div>\n"
    "  <h1>Imported HTML</h1>\n"
    "  <p>Data carried over from the previous system</p>\n"
    "</div>"
)

_LEGACY_MARKER = re.compile(r"""localStorage\.getItem\(['"](.*?)['"]\)""")


# ── Field decoders ───────────────────────────────────────────────────

def _text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _variants(value: Any) -> dict[str, str] | None:
    if not isinstance(value, dict):
        return None
    return {
        key: body
        for key, body in value.items()
        if isinstance(key, str) and isinstance(body, str) and key != DEFAULT_VARIANT
    }


def _timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip())
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        return None


class ImportNormalizer:
    """Decodes import payloads into a ``NormalizedBatch``."""

    def __init__(self) -> None:
        self._last_stamp = 0

    # ── Public API ──────────────────────────────────────────────────

    def normalize(self, payload: str | bytes) -> NormalizedBatch:
        """Decode a JSON payload in any accepted layout.

        Raises:
            ParseFailureError: the payload is not UTF-8 JSON, has no
                record-like shape, or yields no records.
        """
        data = self._parse_json(payload)
        records, shape = self._unwrap(data)

        products: dict[str, Product] = {}
        skipped = 0
        for index, raw in enumerate(records):
            if not isinstance(raw, dict):
                logger.warning("Skipping import entry %d: not an object", index)
                skipped += 1
                continue
            product = self._normalize_record(raw)
            if product.id in products:
                logger.warning("Duplicate id '%s' in import batch — last one wins", product.id)
            products[product.id] = product

        if not products:
            raise ParseFailureError("No valid product data found in payload")

        logger.info(
            "Normalized %d product(s) from %s payload (%d skipped)",
            len(products), shape.value, skipped,
        )
        return NormalizedBatch(products=list(products.values()), shape=shape, skipped=skipped)

    def normalize_legacy_html(self, payload: str | bytes) -> NormalizedBatch:
        """Recognise a page saved from the previous manager and import a placeholder.

        The old pages kept their data in browser storage, so all that can be
        recovered is the fact that a product existed.

        Raises:
            ParseFailureError: the page carries no storage marker.
        """
        text = self._decode_text(payload)
        match = _LEGACY_MARKER.search(text)
        if match is None:
            raise ParseFailureError("No valid product data found in legacy page")

        logger.info("Legacy page references storage key '%s'", match.group(1))
        now = utc_now()
        product = Product(
            id=self._synthesize_id(),
            name=LEGACY_PRODUCT_NAME,
            content=LEGACY_PRODUCT_HTML,
            variants={},
            created_at=now,
            updated_at=now,
        )
        return NormalizedBatch(products=[product], shape=PayloadShape.LEGACY_HTML)

    # ── Payload level ───────────────────────────────────────────────

    @staticmethod
    def _decode_text(payload: str | bytes) -> str:
        if isinstance(payload, str):
            return payload.lstrip("\ufeff")
        try:
            return payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseFailureError(f"Payload is not UTF-8 text: {exc.reason}") from exc

    def _parse_json(self, payload: str | bytes) -> Any:
        text = self._decode_text(payload)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise ParseFailureError(
                f"Payload is not valid JSON (line {exc.lineno}, column {exc.colno})"
            ) from exc
        except RecursionError as exc:
            raise ParseFailureError("Payload is nested too deeply to read") from exc

    @staticmethod
    def _unwrap(data: Any) -> tuple[list[Any], PayloadShape]:
        if isinstance(data, list):
            return data, PayloadShape.RECORD_LIST
        if isinstance(data, dict):
            products = data.get("products")
            if isinstance(products, list):
                if "version" in data:
                    logger.debug("Import payload declares version %r", data["version"])
                    return products, PayloadShape.VERSIONED_PRODUCTS
                return products, PayloadShape.PRODUCTS_FIELD
            return [data], PayloadShape.SINGLE_RECORD
        raise ParseFailureError(
            f"Payload must be a product object or list, got {type(data).__name__}"
        )

    # ── Record level ────────────────────────────────────────────────

    def _normalize_record(self, raw: dict[str, Any]) -> Product:
        now = utc_now()

        product_id = (_text(raw.get("id")) or "").strip() or self._synthesize_id()

        content = _text(raw.get("html"))
        if content is None:
            content = _text(raw.get("content")) or ""

        variants = _variants(raw.get("versions"))
        if variants is None:
            variants = _variants(raw.get("variants")) or {}

        name = _text(raw.get("name"))
        if name is None:
            name = f"Imported product {product_id}"

        created_at = _timestamp(raw.get("createdAt")) or now

        return Product(
            id=product_id,
            name=name,
            content=content,
            variants=variants,
            created_at=min(created_at, now),
            updated_at=now,
        )

    def _synthesize_id(self) -> str:
        stamp = max(int(time.time() * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return f"{IMPORTED_ID_PREFIX}-{stamp}"
