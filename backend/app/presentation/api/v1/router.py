"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from app.presentation.api.v1.endpoints.health import router as health_router
from app.presentation.api.v1.endpoints.products import router as products_router
from app.presentation.api.v1.endpoints.imports import router as imports_router
from app.presentation.api.v1.endpoints.snapshot import router as snapshot_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(products_router)
router.include_router(imports_router)
router.include_router(snapshot_router)
