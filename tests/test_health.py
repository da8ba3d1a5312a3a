# tests/test_health.py
import httpx
import pytest

from aura_share.main import app


@pytest.mark.asyncio
async def test_health_responds() -> None:
    """The health endpoint answers without touching the database."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_root_describes_api() -> None:
    """The root endpoint advertises the API name and docs location."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        r = await client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert data["docs"] == "/docs"
    assert "version" in data
