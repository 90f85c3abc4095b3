"""Unit tests for the Tenant aggregate."""

import pytest

from tenancy.domain.aggregates import Tenant
from tenancy.domain.exceptions import InvalidTenantNameError


class TestTenantCreate:
    """Tests for Tenant.create()."""

    def test_derives_schema_name(self):
        tenant = Tenant.create(name="Acme Corp")

        assert tenant.name == "Acme Corp"
        assert tenant.schema_name.value == "acme_corp"

    def test_strips_display_name(self):
        tenant = Tenant.create(name="  Acme Corp  ")
        assert tenant.name == "Acme Corp"

    def test_generates_id_and_timestamps(self):
        tenant = Tenant.create(name="Acme Corp")

        assert tenant.id.value
        assert tenant.created_at.tzinfo is not None
        assert tenant.updated_at >= tenant.created_at

    def test_distinct_names_with_same_schema_name(self):
        """Names that differ only in punctuation map to one schema name."""
        first = Tenant.create(name="Acme Corp")
        second = Tenant.create(name="acme-corp")

        assert first.schema_name == second.schema_name
        assert first.id != second.id

    def test_rejects_unusable_name(self):
        with pytest.raises(InvalidTenantNameError):
            Tenant.create(name="   ")
