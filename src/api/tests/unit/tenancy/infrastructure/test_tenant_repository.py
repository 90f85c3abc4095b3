"""Unit tests for TenantRepository.

The session is mocked; these tests cover the mapping between the ORM
model and the Tenant aggregate and the duplicate detection on flush.
"""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Tenant
from tenancy.domain.value_objects import SchemaName, TenantId
from tenancy.infrastructure.models import TenantModel
from tenancy.infrastructure.observability import TenantRepositoryProbe
from tenancy.infrastructure.tenant_repository import TenantRepository
from tenancy.ports.exceptions import DuplicateTenantError


@pytest.fixture
def session():
    session = MagicMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    session.connection = AsyncMock()
    return session


@pytest.fixture
def mock_probe():
    return MagicMock(spec=TenantRepositoryProbe)


@pytest.fixture
def repository(session, mock_probe):
    return TenantRepository(session=session, probe=mock_probe)


def _result(model):
    result = MagicMock()
    result.scalar_one_or_none.return_value = model
    result.scalars.return_value.all.return_value = [model] if model else []
    return result


def _model(tenant_id: str, name: str = "Acme Corp", schema: str = "acme_corp"):
    now = datetime.now(UTC)
    return TenantModel(
        id=tenant_id,
        name=name,
        schema_name=schema,
        created_at=now,
        updated_at=now,
    )


class TestSave:
    """Tests for TenantRepository.save()."""

    @pytest.mark.asyncio
    async def test_adds_new_model(self, repository, session, mock_probe):
        tenant = Tenant.create("Acme Corp")
        session.execute.return_value = _result(None)

        await repository.save(tenant)

        added = session.add.call_args.args[0]
        assert isinstance(added, TenantModel)
        assert added.id == tenant.id.value
        assert added.schema_name == "acme_corp"
        session.flush.assert_awaited_once()
        mock_probe.tenant_saved.assert_called_once_with(tenant.id.value, "acme_corp")

    @pytest.mark.asyncio
    async def test_updates_name_of_existing_model(self, repository, session):
        tenant = Tenant.create("Acme Corp")
        model = _model(tenant.id.value, name="Old Name")
        session.execute.return_value = _result(model)

        await repository.save(tenant)

        assert model.name == "Acme Corp"
        session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_unique_index_violation_is_duplicate(
        self, repository, session, mock_probe
    ):
        session.execute.return_value = _result(None)
        session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception('duplicate key violates "ix_tenants_schema_name"')
        )

        with pytest.raises(DuplicateTenantError):
            await repository.save(Tenant.create("Acme Corp"))

        mock_probe.duplicate_schema_name.assert_called_once_with("acme_corp")

    @pytest.mark.asyncio
    async def test_other_integrity_errors_propagate(self, repository, session):
        session.execute.return_value = _result(None)
        session.flush.side_effect = IntegrityError("INSERT", {}, Exception("not null"))

        with pytest.raises(IntegrityError):
            await repository.save(Tenant.create("Acme Corp"))


class TestReads:
    """Tests for lookups and listing."""

    @pytest.mark.asyncio
    async def test_get_by_id_maps_to_domain(self, repository, session):
        tenant_id = TenantId.generate()
        session.execute.return_value = _result(_model(tenant_id.value))

        tenant = await repository.get_by_id(tenant_id)

        assert tenant.id == tenant_id
        assert tenant.schema_name == SchemaName(value="acme_corp")

    @pytest.mark.asyncio
    async def test_get_by_id_returns_none(self, repository, session):
        session.execute.return_value = _result(None)
        assert await repository.get_by_id(TenantId.generate()) is None

    @pytest.mark.asyncio
    async def test_list_all(self, repository, session, mock_probe):
        session.execute.return_value = _result(_model(TenantId.generate().value))

        tenants = await repository.list_all()

        assert len(tenants) == 1
        mock_probe.tenants_listed.assert_called_once_with(1)


class TestDelete:
    """Tests for TenantRepository.delete()."""

    @pytest.mark.asyncio
    async def test_deletes_existing(self, repository, session, mock_probe):
        tenant = Tenant.create("Acme Corp")
        model = _model(tenant.id.value)
        session.execute.return_value = _result(model)

        assert await repository.delete(tenant) is True
        session.delete.assert_awaited_once_with(model)
        mock_probe.tenant_deleted.assert_called_once_with(tenant.id.value)

    @pytest.mark.asyncio
    async def test_returns_false_when_missing(self, repository, session):
        session.execute.return_value = _result(None)
        assert await repository.delete(Tenant.create("Acme Corp")) is False

    @pytest.mark.asyncio
    async def test_connection_is_the_session_connection(self, repository, session):
        assert await repository.connection() is session.connection.return_value
