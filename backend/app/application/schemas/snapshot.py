"""Pydantic schema for the persisted product snapshot (the storage wire format)."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

from app.domain.entities import DEFAULT_VARIANT, Product


class ProductSnapshot(BaseModel):
    """One product as stored in the snapshot slot.

    Field names on the wire follow the browser-era format:
    ``id``, ``name``, ``html``, ``versions``, ``createdAt``, ``updatedAt``.
    Timestamps without an offset are read as UTC.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str
    content: str = Field(..., alias="html")
    variants: dict[str, str] | None = Field(None, alias="versions")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("variants")
    @classmethod
    def drop_reserved_variant(cls, value: dict[str, str] | None) -> dict[str, str] | None:
        # The default body lives in ``html``
        if value is not None and DEFAULT_VARIANT in value:
            return {k: v for k, v in value.items() if k != DEFAULT_VARIANT}
        return value

    @model_validator(mode="after")
    def updated_not_before_created(self) -> "ProductSnapshot":
        if self.updated_at is not None and self.updated_at < self.created_at:
            self.updated_at = self.created_at
        return self

    @classmethod
    def from_entity(cls, product: Product) -> "ProductSnapshot":
        return cls(
            id=product.id,
            name=product.name,
            content=product.content,
            variants=dict(product.variants) if product.variants is not None else None,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            content=self.content,
            variants=dict(self.variants) if self.variants is not None else None,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


snapshot_adapter: TypeAdapter[list[ProductSnapshot]] = TypeAdapter(list[ProductSnapshot])
