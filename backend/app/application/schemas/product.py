"""Pydantic DTOs (Data Transfer Objects) for the product and import features."""

from datetime import datetime

from pydantic import BaseModel, Field


class ProductRename(BaseModel):
    """Schema for renaming a product — names are free text."""

    name: str = Field(..., examples=["Summer campaign banner"])


class ProductIdChange(BaseModel):
    """Schema for changing a product id."""

    id: str = Field(..., examples=["product-42"])


class ProductContentUpdate(BaseModel):
    """Schema for writing the body of one variant."""

    content: str = Field(..., examples=["<h1>Hello</h1>"])


class ProductContentResponse(BaseModel):
    """The body of a single variant."""

    product_id: str
    variant: str
    content: str


class ProductResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    name: str
    content: str
    variants: dict[str, str] | None
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class ImportDecision(BaseModel):
    """Answer to an overwrite prompt."""

    confirmed: bool


class ImportTicketResponse(BaseModel):
    """State of an import after a pipeline step."""

    plan_id: str
    state: str
    message: str
    imported: int
    created: int
    overwritten: int
    collision_count: int
    collisions: list[str]
    shape: str | None = None
    skipped: int = 0


class SnapshotSaveResponse(BaseModel):
    """Result of an explicit snapshot write."""

    saved: int
