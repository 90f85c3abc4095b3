"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, Mock

import pytest
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password=SecretStr("testpass"),
    )


@pytest.fixture
def mock_session():
    """Mock AsyncSession whose begin() works as an async context manager.

    Exceptions raised inside the block propagate, as with a real
    transaction that rolls back.
    """
    session = Mock(spec=AsyncSession)

    ctx_manager = AsyncMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=None)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    session.begin = Mock(return_value=ctx_manager)
    return session
