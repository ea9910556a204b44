"""Tests for health check endpoints."""

import pytest


@pytest.mark.asyncio
async def test_health_check(client):
    """Test basic health check."""
    response = await client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert data["environment"] == "development"


@pytest.mark.asyncio
async def test_readiness_check(client):
    """Readiness reports the storage check."""
    response = await client.get("/health/ready")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["storage"] is True


@pytest.mark.asyncio
async def test_readiness_degraded_when_storage_fails(client, storage, monkeypatch):
    async def broken():
        raise RuntimeError("firestore unreachable")

    monkeypatch.setattr(storage, "health_check", broken)

    response = await client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


@pytest.mark.asyncio
async def test_liveness_check(client):
    """Test liveness probe."""
    response = await client.get("/health/live")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "alive"


@pytest.mark.asyncio
async def test_root_endpoint(client):
    """Test root endpoint."""
    response = await client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["service"] == "AGENLY API"
    assert data["status"] == "running"
