"""Product CRUD endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.application.schemas.product import (
    ProductContentResponse,
    ProductContentUpdate,
    ProductIdChange,
    ProductRename,
    ProductResponse,
)
from app.application.services import ProductService
from app.domain.entities import Product
from app.domain.exceptions import (
    EmptyIdError,
    EntityNotFoundError,
    IdConflictError,
    PersistenceFailureError,
)
from app.infrastructure.dependencies import get_product_service

router = APIRouter(prefix="/products", tags=["Products"])


def _to_response(product: Product) -> ProductResponse:
    return ProductResponse.model_validate(product, from_attributes=True)


def not_durable(exc: PersistenceFailureError) -> HTTPException:
    """The change is applied in memory but has not reached the snapshot slot."""
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Change applied but not yet durable: {exc}",
    )


@router.get("", response_model=list[ProductResponse])
async def list_products(
    q: str | None = Query(None, description="Case-insensitive match on id or name"),
    service: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    """List products ordered by id, optionally filtered by a search term."""
    products = service.search_products(q) if q else service.list_products()
    return [_to_response(p) for p in products]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Create a product from the default template."""
    try:
        product = await service.create_product()
    except PersistenceFailureError as e:
        raise not_durable(e)
    return _to_response(product)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Retrieve a single product by id."""
    try:
        product = service.get_product(product_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return _to_response(product)


@router.patch("/{product_id}/name", response_model=ProductResponse)
async def rename_product(
    product_id: str,
    data: ProductRename,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Change a product's display name."""
    try:
        product = await service.rename_product(product_id, data.name)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceFailureError as e:
        raise not_durable(e)
    return _to_response(product)


@router.patch("/{product_id}/id", response_model=ProductResponse)
async def change_product_id(
    product_id: str,
    data: ProductIdChange,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Change a product's id; empty or taken ids are rejected."""
    try:
        product = await service.change_product_id(product_id, data.id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EmptyIdError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except IdConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except PersistenceFailureError as e:
        raise not_durable(e)
    return _to_response(product)


@router.get("/{product_id}/versions/{variant}", response_model=ProductContentResponse)
async def get_product_content(
    product_id: str,
    variant: str,
    service: ProductService = Depends(get_product_service),
) -> ProductContentResponse:
    """Read the body of one variant ("default" for the main body)."""
    try:
        content = service.get_product_content(product_id, variant)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProductContentResponse(product_id=product_id, variant=variant, content=content)


@router.put("/{product_id}/versions/{variant}", response_model=ProductResponse)
async def set_product_content(
    product_id: str,
    variant: str,
    data: ProductContentUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Write the body of one variant ("default" for the main body)."""
    try:
        product = await service.set_product_content(product_id, variant, data.content)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except PersistenceFailureError as e:
        raise not_durable(e)
    return _to_response(product)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
) -> None:
    """Delete a product by id. Deleting an unknown id is not an error."""
    try:
        await service.delete_product(product_id)
    except PersistenceFailureError as e:
        raise not_durable(e)
