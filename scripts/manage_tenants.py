#!/usr/bin/env python3
"""Tenant schema management for the Multi-Tenant CRM API.

This script:
- Loads config from env/api.env (CRM_DB_* variables)
- Migrates the shared registry schema and tenant namespaces
- Rolls back or inspects one tenant namespace
- Creates, deletes and seeds tenants outside the HTTP API

Usage:
    ./scripts/manage_tenants.py migrate-registry
    ./scripts/manage_tenants.py migrate-tenants
    ./scripts/manage_tenants.py migrate-tenant acme_corp
    ./scripts/manage_tenants.py rollback-tenant acme_corp
    ./scripts/manage_tenants.py status acme_corp
    ./scripts/manage_tenants.py create-tenant "Acme Corp"
    ./scripts/manage_tenants.py delete-tenant 01HXYZ...
    ./scripts/manage_tenants.py seed
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich import box
from rich.console import Console
from rich.table import Table

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "api"))

# Load environment from env/api.env
load_dotenv(root_path / "env" / "api.env")

from crm.application.services import ContactService, MessageService  # noqa: E402
from crm.domain.value_objects import SenderType  # noqa: E402
from crm.infrastructure import (  # noqa: E402
    ContactRepository,
    ConversationRepository,
    MessageRepository,
)
from infrastructure.database.dependencies import (  # noqa: E402
    close_database_connections,
    get_registry_engine,
    get_registry_sessionmaker,
)
from infrastructure.database.engines import PUBLIC_SCHEMA  # noqa: E402
from infrastructure.database.exceptions import DatabaseError  # noqa: E402
from infrastructure.database.namespace_store import NamespaceStore  # noqa: E402
from infrastructure.logging import configure_logging  # noqa: E402
from infrastructure.migrations import (  # noqa: E402
    MigrationRunner,
    MigrationScriptSet,
    registry_scripts,
    tenant_scripts,
)
from infrastructure.settings import (  # noqa: E402
    get_database_settings,
    get_tenancy_settings,
)
from tenancy.application.services import TenantLifecycleService  # noqa: E402
from tenancy.domain.value_objects import TenantId  # noqa: E402
from tenancy.infrastructure.connection_registry import (  # noqa: E402
    TenantConnectionRegistry,
)
from tenancy.infrastructure.tenant_repository import TenantRepository  # noqa: E402

console = Console()

SEED_TENANT_NAME = "Acme Corp"

SEED_CONTACTS = [
    {
        "name": "John Doe",
        "email": "john@example.com",
        "phone": "+1234567890",
        "metadata": {"company": "Example Inc", "position": "CEO"},
        "messages": [
            (SenderType.CONTACT, "Hi, I'm interested in your product."),
            (SenderType.USER, "Thanks for reaching out! How can I help?"),
        ],
    },
    {
        "name": "Jane Smith",
        "email": "jane@example.com",
        "phone": None,
        "metadata": {"company": "Tech Corp", "position": "CTO"},
        "messages": [
            (SenderType.CONTACT, "Can we schedule a demo next week?"),
        ],
    },
    {
        "name": "Bob Johnson",
        "email": None,
        "phone": "+1987654321",
        "metadata": {"company": "StartUp LLC"},
        "messages": [],
    },
]


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Manage tenant namespaces of the Multi-Tenant CRM API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s migrate-registry
  %(prog)s migrate-tenant acme_corp
  %(prog)s create-tenant "Acme Corp"
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "migrate-registry", help="Apply pending migrations to the registry schema"
    )
    subparsers.add_parser(
        "migrate-tenants", help="Apply pending migrations to every registered tenant"
    )

    migrate_tenant = subparsers.add_parser(
        "migrate-tenant", help="Apply pending migrations to one tenant namespace"
    )
    migrate_tenant.add_argument("schema", help="Tenant schema name")

    rollback_tenant = subparsers.add_parser(
        "rollback-tenant", help="Undo the last applied migration of one namespace"
    )
    rollback_tenant.add_argument("schema", help="Tenant schema name")

    status = subparsers.add_parser(
        "status", help="Show applied and pending migrations of one namespace"
    )
    status.add_argument("schema", help="Tenant schema name")

    create_tenant = subparsers.add_parser(
        "create-tenant", help="Provision a tenant and its namespace"
    )
    create_tenant.add_argument("name", help="Tenant display name")

    delete_tenant = subparsers.add_parser(
        "delete-tenant", help="Delete a tenant and drop its namespace"
    )
    delete_tenant.add_argument("tenant_id", help="Tenant ID (ULID)")

    subparsers.add_parser(
        "seed", help=f"Create the '{SEED_TENANT_NAME}' tenant with sample data"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Emit debug-level log events",
    )

    return parser.parse_args()


def build_runner() -> MigrationRunner:
    return MigrationRunner(
        engine=get_registry_engine(),
        tracking_table_name=get_tenancy_settings().migration_table,
    )


def build_lifecycle_service(
    session, connection_registry: TenantConnectionRegistry
) -> TenantLifecycleService:
    return TenantLifecycleService(
        session=session,
        tenant_repository=TenantRepository(session=session),
        namespace_store=NamespaceStore(engine=get_registry_engine()),
        migration_runner=build_runner(),
        connection_registry=connection_registry,
        tenant_scripts=tenant_scripts(),
    )


def print_applied(schema: str, applied: list[str]) -> None:
    if not applied:
        console.print(f"[green]✓[/green] {schema}: already up to date")
        return
    for name in applied:
        console.print(f"[green]✓[/green] {schema}: applied [bold]{name}[/bold]")


async def migrate_registry() -> None:
    applied = await build_runner().apply_latest(PUBLIC_SCHEMA, registry_scripts())
    print_applied(PUBLIC_SCHEMA, applied)


async def migrate_schema(schema: str) -> None:
    applied = await build_runner().apply_latest(schema, tenant_scripts())
    print_applied(schema, applied)


async def rollback_schema(schema: str) -> None:
    name = await build_runner().rollback_last(schema, tenant_scripts())
    if name is None:
        console.print(f"[yellow]{schema}: nothing to roll back[/yellow]")
    else:
        console.print(f"[green]✓[/green] {schema}: rolled back [bold]{name}[/bold]")


async def show_status(schema: str) -> None:
    scripts: MigrationScriptSet = (
        registry_scripts() if schema == PUBLIC_SCHEMA else tenant_scripts()
    )
    applied = set(await build_runner().applied(schema))

    table = Table(title=f"Migrations for {schema}", box=box.SIMPLE)
    table.add_column("Revision", style="dim")
    table.add_column("Name")
    table.add_column("Status")
    for script in scripts:
        state = "[green]applied[/green]" if script.name in applied else "[yellow]pending[/yellow]"
        table.add_row(script.revision, script.name, state)
    console.print(table)


async def with_lifecycle_service(operation):
    """Run ``operation(service)`` with a registry session and clean up after."""
    registry = TenantConnectionRegistry(
        settings=get_database_settings(),
        tenancy_settings=get_tenancy_settings(),
    )
    try:
        async with get_registry_sessionmaker()() as session:
            return await operation(build_lifecycle_service(session, registry))
    finally:
        await registry.release_all()


async def migrate_all_tenants() -> None:
    async def operation(service: TenantLifecycleService):
        return await service.upgrade_tenants()

    results = await with_lifecycle_service(operation)
    if not results:
        console.print("[yellow]No tenants registered[/yellow]")
    for schema, applied in results.items():
        print_applied(schema, applied)


async def create_tenant(name: str) -> None:
    async def operation(service: TenantLifecycleService):
        return await service.create_tenant(name)

    tenant = await with_lifecycle_service(operation)
    console.print(
        f"[green]✓[/green] Created tenant [bold]{tenant.name}[/bold] "
        f"(id {tenant.id}, schema {tenant.schema_name})"
    )


async def delete_tenant(tenant_id: str) -> None:
    parsed = TenantId.from_string(tenant_id.upper())

    async def operation(service: TenantLifecycleService):
        await service.delete_tenant(parsed)

    await with_lifecycle_service(operation)
    console.print(f"[green]✓[/green] Deleted tenant {parsed}")


async def seed() -> None:
    async def operation(service: TenantLifecycleService):
        tenant = await service.create_tenant(SEED_TENANT_NAME)
        context = await service.resolve_tenant(tenant.id.value)

        async with context.connection.session() as session:
            contacts = ContactService(
                session=session,
                contact_repository=ContactRepository(session),
                conversation_repository=ConversationRepository(session),
            )
            messages = MessageService(
                session=session,
                conversation_repository=ConversationRepository(session),
                message_repository=MessageRepository(session),
            )
            for sample in SEED_CONTACTS:
                contact, conversation = await contacts.create_contact(
                    name=sample["name"],
                    email=sample["email"],
                    phone=sample["phone"],
                    metadata=sample["metadata"],
                )
                for sender_type, content in sample["messages"]:
                    await messages.create_message(
                        conversation_id=conversation.id,
                        sender_type=sender_type,
                        content=content,
                    )
                console.print(f"[green]✓[/green] Seeded contact {contact.name}")
        return tenant

    tenant = await with_lifecycle_service(operation)
    console.print(
        f"\n[bold]Seeded tenant {tenant.name}[/bold]\n"
        f"Use header [cyan]X-Tenant-Id: {tenant.id}[/cyan]"
    )


async def run(args) -> None:
    try:
        if args.command == "migrate-registry":
            await migrate_registry()
        elif args.command == "migrate-tenants":
            await migrate_all_tenants()
        elif args.command == "migrate-tenant":
            await migrate_schema(args.schema)
        elif args.command == "rollback-tenant":
            await rollback_schema(args.schema)
        elif args.command == "status":
            await show_status(args.schema)
        elif args.command == "create-tenant":
            await create_tenant(args.name)
        elif args.command == "delete-tenant":
            await delete_tenant(args.tenant_id)
        elif args.command == "seed":
            await seed()
    finally:
        await close_database_connections()


def main():
    """Main entry point."""
    args = parse_args()
    configure_logging(debug=args.debug)

    console.print("[bold cyan]CRM Tenant Manager[/bold cyan]")
    console.print(f"[dim]Database: {get_database_settings().connection_string}[/dim]\n")

    try:
        asyncio.run(run(args))
    except (DatabaseError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        sys.exit(1)
    except Exception as e:
        # Lifecycle errors (duplicate tenant, unknown tenant) carry readable messages
        console.print(f"[bold red]Failed:[/bold red] {type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)  # Standard exit code for Ctrl+C
