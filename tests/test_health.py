"""Tests for health and info endpoints."""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "automation-bridge-test"


@pytest.mark.asyncio
async def test_ready(client):
    with patch("automation_bridge.api.health.check_connection", new=AsyncMock(return_value=True)):
        response = await client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_not_ready(client):
    with patch("automation_bridge.api.health.check_connection", new=AsyncMock(return_value=False)):
        response = await client.get("/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["webhooks"] == "/webhooks/events"


@pytest.mark.asyncio
async def test_request_id_header(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc"})

    assert response.headers["x-request-id"] == "abc"
    assert "x-process-time" in response.headers
