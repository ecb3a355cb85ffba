"""Domain entity — an HTML snippet product with named content variants."""

import copy
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_VARIANT = "default"

NEW_PRODUCT_NAME = "New product"
NEW_PRODUCT_HTML = (
    "<div>\n"
    "  <!-- Enter HTML here -->\n"
    "  <h1>New product</h1>\n"
    "</div>"
)

_DIGITS = re.compile(r"(\d+)")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def natural_key(value: str) -> tuple:
    """Sort key comparing digit runs numerically: product-2 < product-10.

    ``re.split`` with a capture group alternates text/digits, so every key
    has text at even positions and ints at odd ones and stays comparable.
    """
    parts = _DIGITS.split(value.casefold())
    chunks = tuple(int(p) if i % 2 else p for i, p in enumerate(parts))
    return (chunks, value)


@dataclass
class Product:
    """A named HTML record with a default body and optional variants.

    ``variants`` stays ``None`` until the first variant is written; the
    default body lives in ``content`` and is never stored under
    ``DEFAULT_VARIANT`` inside ``variants``.
    """

    id: str
    name: str = NEW_PRODUCT_NAME
    content: str = ""
    variants: dict[str, str] | None = None
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime | None = None

    def touch(self) -> None:
        """Stamp ``updated_at``, never earlier than ``created_at``."""
        self.updated_at = max(utc_now(), self.created_at)

    def read(self, variant_key: str) -> str:
        """Return the body for a variant; unknown variants read as empty."""
        if variant_key == DEFAULT_VARIANT:
            return self.content
        return (self.variants or {}).get(variant_key, "")

    def write(self, variant_key: str, content: str) -> None:
        """Stamp the update, then set the body for a variant."""
        self.touch()
        if variant_key == DEFAULT_VARIANT:
            self.content = content
        else:
            if self.variants is None:
                self.variants = {}
            self.variants[variant_key] = content

    def variant_names(self) -> list[str]:
        """The default key followed by stored variant names in sort order."""
        return [DEFAULT_VARIANT, *sorted(self.variants or {}, key=natural_key)]

    def clone(self) -> "Product":
        return copy.deepcopy(self)
