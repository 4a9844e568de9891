"""Тесты для API health checks."""
import pytest


@pytest.mark.asyncio
@pytest.mark.integration
async def test_health_endpoint(http):
    response = await http.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_unknown_route_uses_envelope(http):
    response = await http.get("/api/v1/nope")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["statusCode"] == 404
