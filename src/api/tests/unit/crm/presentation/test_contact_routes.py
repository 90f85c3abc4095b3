"""Unit tests for contact HTTP routes."""

from __future__ import annotations

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from crm.domain.exceptions import InvalidContactError
from crm.ports.exceptions import ContactNotFoundError
from infrastructure.database.exceptions import StorageUnavailableError
from tenancy.application.services import TenantLifecycleService


class TestCreateContact:
    def test_returns_contact_and_conversation(
        self, test_client, mock_contact_service, contact, conversation
    ):
        mock_contact_service.create_contact.return_value = (contact, conversation)

        response = test_client.post(
            "/contacts",
            json={"name": "John Doe", "email": "john@example.com"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["contact"]["id"] == str(contact.id)
        assert body["contact"]["metadata"] == {"company": "Example Inc"}
        assert body["conversation"]["contact_id"] == str(contact.id)
        assert body["conversation"]["status"] == "active"
        mock_contact_service.create_contact.assert_awaited_once_with(
            name="John Doe",
            email="john@example.com",
            phone=None,
            metadata={},
        )

    def test_invalid_details_return_400(self, test_client, mock_contact_service):
        mock_contact_service.create_contact.side_effect = InvalidContactError(
            "Either email or phone is required"
        )

        response = test_client.post("/contacts", json={"name": "John Doe"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Either email or phone is required"

    def test_storage_outage_returns_503(self, test_client, mock_contact_service):
        mock_contact_service.create_contact.side_effect = StorageUnavailableError("down")

        response = test_client.post(
            "/contacts", json={"name": "John Doe", "phone": "+1234567890"}
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_unexpected_error_returns_500(self, test_client, mock_contact_service):
        mock_contact_service.create_contact.side_effect = RuntimeError("boom")

        response = test_client.post(
            "/contacts", json={"name": "John Doe", "phone": "+1234567890"}
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "Failed to create contact"


class TestReadContacts:
    def test_lists_contacts(self, test_client, mock_contact_service, contact):
        mock_contact_service.list_contacts.return_value = [contact]

        response = test_client.get("/contacts")

        assert response.status_code == status.HTTP_200_OK
        assert [c["name"] for c in response.json()] == ["John Doe"]

    def test_gets_contact(self, test_client, mock_contact_service, contact):
        mock_contact_service.get_contact.return_value = contact

        response = test_client.get(f"/contacts/{contact.id}")

        assert response.status_code == status.HTTP_200_OK
        mock_contact_service.get_contact.assert_awaited_once_with(contact.id)

    def test_missing_contact_returns_404(self, test_client, mock_contact_service):
        mock_contact_service.get_contact.side_effect = ContactNotFoundError("gone")

        response = test_client.get(f"/contacts/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_malformed_id_returns_400(self, test_client, mock_contact_service):
        response = test_client.get("/contacts/123")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_contact_service.get_contact.assert_not_called()


class TestUpdateContact:
    def test_passes_only_set_fields(self, test_client, mock_contact_service, contact):
        mock_contact_service.update_contact.return_value = contact

        response = test_client.put(
            f"/contacts/{contact.id}", json={"phone": "+1987654321"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_contact_service.update_contact.assert_awaited_once_with(
            contact.id, {"phone": "+1987654321"}
        )

    def test_blank_name_returns_400(self, test_client, mock_contact_service, contact):
        mock_contact_service.update_contact.side_effect = InvalidContactError(
            "Name is required"
        )

        response = test_client.put(f"/contacts/{contact.id}", json={"name": ""})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_missing_contact_returns_404(self, test_client, mock_contact_service):
        mock_contact_service.update_contact.side_effect = ContactNotFoundError("gone")

        response = test_client.put(f"/contacts/{uuid4()}", json={"name": "Jane"})

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteContact:
    def test_deletes_contact(self, test_client, mock_contact_service, contact):
        response = test_client.delete(f"/contacts/{contact.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_contact_service.delete_contact.assert_awaited_once_with(contact.id)

    def test_missing_contact_returns_404(self, test_client, mock_contact_service):
        mock_contact_service.delete_contact.side_effect = ContactNotFoundError("gone")

        response = test_client.delete(f"/contacts/{uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestTenantHeaderEnforcement:
    """CRM routes resolve the tenant before any service is built."""

    @pytest.fixture
    def tenant_scoped_client(self) -> tuple[TestClient, AsyncMock]:
        from crm.presentation import router
        from tenancy.dependencies.tenant import get_tenant_service

        tenant_service = AsyncMock(spec=TenantLifecycleService)
        app = FastAPI()
        app.dependency_overrides[get_tenant_service] = lambda: tenant_service
        app.include_router(router)
        return TestClient(app), tenant_service

    def test_missing_header_returns_401(self, tenant_scoped_client):
        client, tenant_service = tenant_scoped_client

        response = client.get("/contacts")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        tenant_service.resolve_tenant.assert_not_called()

    def test_unknown_tenant_returns_401(self, tenant_scoped_client):
        from tenancy.ports.exceptions import UnknownTenantError

        client, tenant_service = tenant_scoped_client
        tenant_service.resolve_tenant.side_effect = UnknownTenantError("nope")

        response = client.get("/contacts", headers={"X-Tenant-Id": "nope"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        tenant_service.resolve_tenant.assert_awaited_once_with("NOPE")
