"""Catalog queries used by integration tests to inspect namespaces."""

from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine


async def tables_in(engine: AsyncEngine, schema: str) -> set[str]:
    """Names of the base tables inside a schema."""
    async with engine.connect() as conn:
        result = await conn.execute(
            text(
                "SELECT table_name FROM information_schema.tables "
                "WHERE table_schema = :schema AND table_type = 'BASE TABLE'"
            ),
            {"schema": schema},
        )
        return {row[0] for row in result}
