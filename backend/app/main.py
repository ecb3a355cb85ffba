"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.application.services import ProductService
from app.config import get_settings
from app.infrastructure.database import Base, engine, ensure_sqlite_directory
from app.infrastructure.dependencies import build_snapshot_persistence
from app.infrastructure.logging.log_config import setup_logging
from app.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — create tables, rehydrate the product store."""
    settings = get_settings()
    setup_logging()

    # 1. Create the snapshot table
    ensure_sqlite_directory(settings.database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # 2. Load the product collection from its snapshot slot
    service = await ProductService.open(build_snapshot_persistence())
    app.state.product_service = service
    if service.startup_warning:
        logger.warning("Product store started empty: %s", service.startup_warning)
    else:
        logger.info("Product store ready: %d product(s)", len(service.store))

    yield

    # Shutdown — the store holds nothing that needs releasing
    app.state.product_service = None
    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
