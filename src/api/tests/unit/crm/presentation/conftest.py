"""Fixtures for CRM route tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from crm.application.services import (
    ContactService,
    ConversationService,
    MessageService,
)


@pytest.fixture
def mock_contact_service() -> AsyncMock:
    return AsyncMock(spec=ContactService)


@pytest.fixture
def mock_conversation_service() -> AsyncMock:
    return AsyncMock(spec=ConversationService)


@pytest.fixture
def mock_message_service() -> AsyncMock:
    return AsyncMock(spec=MessageService)


@pytest.fixture
def test_client(
    mock_contact_service: AsyncMock,
    mock_conversation_service: AsyncMock,
    mock_message_service: AsyncMock,
) -> TestClient:
    """Create TestClient with the CRM services replaced by mocks."""
    from crm.dependencies.services import (
        get_contact_service,
        get_conversation_service,
        get_message_service,
    )
    from crm.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_contact_service] = lambda: mock_contact_service
    app.dependency_overrides[get_conversation_service] = (
        lambda: mock_conversation_service
    )
    app.dependency_overrides[get_message_service] = lambda: mock_message_service
    app.include_router(router)

    return TestClient(app)
