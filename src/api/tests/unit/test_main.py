"""Unit tests for the main FastAPI application."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from infrastructure.version import __version__


@pytest.fixture
def client() -> TestClient:
    """Client without lifespan, so no database is touched."""
    from main import app

    return TestClient(app)


class TestRootEndpoints:
    def test_root_describes_api(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Multi-Tenant CRM API"
        assert body["version"] == __version__
        assert set(body["endpoints"]) == {
            "tenants",
            "contacts",
            "conversations",
            "messages",
        }

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestRouting:
    def test_registers_tenant_and_crm_routes(self):
        from main import app

        paths = {route.path for route in app.routes}

        assert "/tenants" in paths
        assert "/tenants/{tenant_id}" in paths
        assert "/contacts/{contact_id}" in paths
        assert "/conversations/contact/{contact_id}" in paths
        assert "/conversations/{conversation_id}/status" in paths
        assert "/messages/conversation/{conversation_id}" in paths

    def test_crm_routes_require_tenant_header(self, client):
        response = client.get("/contacts")

        assert response.status_code == 401
        assert response.json()["detail"] == "Missing X-Tenant-Id header"


class TestCORS:
    def test_preflight_allows_tenant_header(self, client):
        response = client.options(
            "/contacts",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "X-Tenant-Id",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert "x-tenant-id" in response.headers["access-control-allow-headers"].lower()
