"""Health and root endpoint tests."""

import pytest


@pytest.mark.asyncio
async def test_health_returns_ok(client):
    """Health endpoint should return server status, version and database."""
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["server"] == "ok"
    assert data["database"] == "ok"
    assert data["status"] == "healthy"
    assert "version" in data


@pytest.mark.asyncio
async def test_root_banner(client):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Wardrobe API is running!"


@pytest.mark.asyncio
async def test_unknown_route_uses_message_shape(client):
    resp = await client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}
