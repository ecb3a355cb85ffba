"""Tests for the health check endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.services import ProductService
from app.main import app, create_app


@pytest.mark.asyncio
async def test_health_check_returns_200():
    """Health endpoint should return 200 with status, version, and environment."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data
    assert data["storage_warning"] is None


@pytest.mark.asyncio
async def test_health_check_reports_storage_warning(slot, persistence):
    """A corrupt snapshot at startup is surfaced on the health endpoint."""
    slot.data[persistence.key] = "{oops"
    fresh = create_app()
    fresh.state.product_service = await ProductService.open(persistence)

    transport = ASGITransport(app=fresh)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/health")

    assert response.json()["storage_warning"] is not None
