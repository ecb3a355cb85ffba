"""FastAPI dependency injection — wires infrastructure to application layer."""

from fastapi import HTTPException, Request, status

from app.application.services import ProductService, SnapshotPersistence
from app.config import get_settings
from app.infrastructure.database.repositories import SQLAlchemySnapshotSlotRepository
from app.infrastructure.database.session import async_session_factory


def build_snapshot_persistence() -> SnapshotPersistence:
    """Provides the snapshot persistence adapter backed by the configured database."""
    settings = get_settings()
    slot = SQLAlchemySnapshotSlotRepository(async_session_factory)
    return SnapshotPersistence(
        slot,
        key=settings.snapshot_key,
        timeout_seconds=settings.persistence_timeout_seconds,
    )


def get_product_service(request: Request) -> ProductService:
    """Provides the process-wide ProductService built during startup."""
    service: ProductService | None = getattr(request.app.state, "product_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Product store is not ready",
        )
    return service
