"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_readiness_reports_ok_or_not_ready(client: AsyncClient) -> None:
    """GET /api/v1/health/ready returns 200 with a database, 503 without one."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code in (200, 503)
    if response.status_code == 503:
        assert response.json()["status"] == "not_ready"


async def test_request_id_is_echoed(client: AsyncClient) -> None:
    """A safe X-Request-ID header is echoed back."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-abc_123"})
    assert response.headers["X-Request-ID"] == "req-abc_123"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    """An unsafe X-Request-ID is replaced with a fresh UUID."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id\nforged"})
    assert response.headers["X-Request-ID"] != "bad id\nforged"
    assert len(response.headers["X-Request-ID"]) == 36
