"""Health probes, correlation ids, admin token guard and the error envelope."""

import uuid

import pytest

from sitecms.core.config import get_settings

pytestmark = pytest.mark.integration


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "sitecms"}


async def test_ready_checks_database(client):
    response = await client.get("/api/ready")
    assert response.status_code == 200
    assert response.json()["checks"] == {"database": True}


async def test_correlation_id_generated_and_echoed(client):
    response = await client.get("/api/health")
    uuid.UUID(response.headers["x-request-id"])

    response = await client.get("/api/health", headers={"X-Request-ID": "custom-id-123"})
    assert response.headers["x-request-id"] == "custom-id-123"


async def test_not_found_has_debug_id(client):
    response = await client.get("/api/admin/plans/missing")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Plan not found"
    uuid.UUID(body["debug_id"])


async def test_malformed_body_is_400(client):
    response = await client.post("/api/admin/plans", json={"position": "first"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["errors"]
    assert "debug_id" in body


async def test_admin_token_required_when_configured(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "admin_api_token", "s3cret")

    assert (await client.get("/api/admin/plans")).status_code == 401
    assert (await client.get("/api/admin/plans", headers={"X-Admin-Token": "wrong"})).status_code == 401
    response = await client.get("/api/admin/plans", headers={"X-Admin-Token": "s3cret"})
    assert response.status_code == 200

    # Public endpoints stay open
    assert (await client.get("/api/health")).status_code == 200
