"""Unit tests for storage error translation."""

import asyncio

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from infrastructure.database.exceptions import (
    MigrationFailureError,
    NamespaceAlreadyExistsError,
    StorageUnavailableError,
    is_transient,
    translate_storage_errors,
)


class TestIsTransient:
    """Tests for is_transient()."""

    @pytest.mark.parametrize(
        "error",
        [
            OperationalError("SELECT 1", {}, Exception("server closed")),
            ConnectionRefusedError("refused"),
            asyncio.TimeoutError(),
            PoolTimeoutError("QueuePool limit of size 10 overflow 0 reached"),
        ],
    )
    def test_connectivity_failures_are_transient(self, error):
        assert is_transient(error)

    @pytest.mark.parametrize(
        "error",
        [
            IntegrityError("INSERT", {}, Exception("duplicate key")),
            ProgrammingError("SELECT", {}, Exception("syntax error")),
            ValueError("bad"),
        ],
    )
    def test_statement_failures_are_not_transient(self, error):
        assert not is_transient(error)


class TestTranslateStorageErrors:
    """Tests for translate_storage_errors()."""

    @pytest.mark.asyncio
    async def test_transient_error_becomes_storage_unavailable(self):
        with pytest.raises(StorageUnavailableError, match="tenant lookup"):
            async with translate_storage_errors("tenant lookup"):
                raise ConnectionRefusedError("refused")

    @pytest.mark.asyncio
    async def test_exhausted_pool_becomes_storage_unavailable(self):
        with pytest.raises(StorageUnavailableError, match="contact lookup"):
            async with translate_storage_errors("contact lookup"):
                raise PoolTimeoutError("QueuePool limit of size 5 overflow 0 reached")

    @pytest.mark.asyncio
    async def test_constraint_violation_propagates_unchanged(self):
        with pytest.raises(IntegrityError):
            async with translate_storage_errors("tenant save"):
                raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    @pytest.mark.asyncio
    async def test_database_errors_are_not_rewrapped(self):
        with pytest.raises(NamespaceAlreadyExistsError):
            async with translate_storage_errors("namespace create"):
                raise NamespaceAlreadyExistsError("acme_corp")

    @pytest.mark.asyncio
    async def test_translated_error_keeps_cause(self):
        original = TimeoutError("timed out")
        with pytest.raises(StorageUnavailableError) as exc_info:
            async with translate_storage_errors("migration"):
                raise original
        assert exc_info.value.__cause__ is original


def test_migration_failure_carries_location():
    error = MigrationFailureError("boom", namespace="acme_corp", revision="20240101000004")

    assert error.namespace == "acme_corp"
    assert error.revision == "20240101000004"
    assert str(error) == "boom"
