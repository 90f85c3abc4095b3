"""Unit tests for migration script discovery."""

from __future__ import annotations

import io
import textwrap

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations

from infrastructure.migrations.scripts import (
    MigrationScript,
    MigrationScriptSet,
    registry_scripts,
    tenant_scripts,
)


def _noop() -> None:
    pass


def _script(revision: str, name: str | None = None) -> MigrationScript:
    return MigrationScript(
        revision=revision,
        name=name or f"{revision}_step",
        upgrade=_noop,
        downgrade=_noop,
    )


def _render_sql(step) -> str:
    """Render a script function to PostgreSQL DDL without a database."""
    buffer = io.StringIO()
    context = MigrationContext.configure(
        dialect_name="postgresql",
        opts={"as_sql": True, "output_buffer": buffer},
    )
    with Operations.context(context):
        step()
    return buffer.getvalue()


class TestMigrationScriptSet:
    """Tests for MigrationScriptSet ordering and lookups."""

    def test_orders_by_revision(self):
        scripts = MigrationScriptSet("t", [_script("3"), _script("1"), _script("2")])
        assert [s.revision for s in scripts] == ["1", "2", "3"]

    def test_rejects_duplicate_revisions(self):
        with pytest.raises(ValueError, match="Duplicate revision"):
            MigrationScriptSet("t", [_script("1", "a"), _script("1", "b")])

    def test_rejects_duplicate_names(self):
        with pytest.raises(ValueError, match="Duplicate script name"):
            MigrationScriptSet("t", [_script("1", "a"), _script("2", "a")])

    def test_lookup_by_name(self):
        scripts = MigrationScriptSet("t", [_script("1", "first")])

        assert "first" in scripts
        assert scripts.get("first").revision == "1"
        assert scripts.get("missing") is None
        assert len(scripts) == 1


class TestFromDirectory:
    """Tests for loading scripts from disk."""

    def test_loads_numbered_modules_only(self, tmp_path):
        (tmp_path / "002_second.py").write_text(
            textwrap.dedent(
                """
                revision = "002"
                def upgrade(): pass
                def downgrade(): pass
                """
            )
        )
        (tmp_path / "001_first.py").write_text(
            textwrap.dedent(
                """
                revision = "001"
                def upgrade(): pass
                def downgrade(): pass
                """
            )
        )
        (tmp_path / "helpers.py").write_text("VALUE = 1\n")

        scripts = MigrationScriptSet.from_directory("sample", tmp_path)

        assert scripts.names == ["001_first", "002_second"]

    def test_missing_function_is_an_error(self, tmp_path):
        (tmp_path / "001_broken.py").write_text('revision = "001"\n')

        with pytest.raises(ImportError, match="upgrade"):
            MigrationScriptSet.from_directory("broken", tmp_path)


class TestBundledScripts:
    """Tests for the scripts shipped with the application."""

    def test_registry_scripts(self):
        assert registry_scripts().names == ["20240101000001_create_tenants_table"]

    def test_tenant_scripts_in_dependency_order(self):
        assert tenant_scripts().names == [
            "20240101000002_create_contacts_table",
            "20240101000003_create_conversations_table",
            "20240101000004_create_messages_table",
        ]

    def test_tenant_scripts_emit_unqualified_tables(self):
        """Tenant DDL never names a schema; search_path decides where it lands."""
        sql = "\n".join(_render_sql(s.upgrade) for s in tenant_scripts())

        assert "CREATE TABLE contacts" in sql
        assert "CREATE TABLE conversations" in sql
        assert "CREATE TABLE messages" in sql
        assert "public." not in sql

    def test_tenant_scripts_cascade_deletes(self):
        sql = "\n".join(_render_sql(s.upgrade) for s in tenant_scripts())
        assert sql.count("ON DELETE CASCADE") == 2

    def test_enums_are_check_constraints(self):
        sql = "\n".join(_render_sql(s.upgrade) for s in tenant_scripts())

        assert "CREATE TYPE" not in sql
        assert "CONSTRAINT conversation_status CHECK" in sql
        assert "CONSTRAINT message_sender_type CHECK" in sql

    def test_downgrades_drop_tables(self):
        for script in tenant_scripts():
            assert "DROP TABLE" in _render_sql(script.downgrade)

    def test_registry_schema_name_is_unique(self):
        sql = _render_sql(registry_scripts().get("20240101000001_create_tenants_table").upgrade)
        assert "CREATE UNIQUE INDEX ix_tenants_schema_name" in sql
