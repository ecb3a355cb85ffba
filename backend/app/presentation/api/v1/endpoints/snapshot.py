"""Snapshot endpoint — retry a write after a persistence failure."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.schemas.product import SnapshotSaveResponse
from app.application.services import ProductService
from app.domain.exceptions import PersistenceFailureError
from app.infrastructure.dependencies import get_product_service

router = APIRouter(prefix="/snapshot", tags=["Snapshot"])


@router.post("/save", response_model=SnapshotSaveResponse)
async def save_snapshot(
    service: ProductService = Depends(get_product_service),
) -> SnapshotSaveResponse:
    """Write the in-memory collection to the snapshot slot again."""
    try:
        saved = await service.save_now()
    except PersistenceFailureError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return SnapshotSaveResponse(saved=saved)
