"""Management CLI for the RBAC API."""

import asyncio
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from rbac_api import __version__


if TYPE_CHECKING:
    from rbac_api.seeding import SeedSummary


console = Console()

app = typer.Typer(
    name="rbac-api",
    help="Manage the RBAC API database and bootstrap data.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """RBAC API management commands."""
    if version:
        console.print(f"[bold cyan]rbac-api[/bold cyan] version {__version__}")
        raise typer.Exit()


async def _create_tables() -> None:
    from rbac_api.config import get_settings
    from rbac_api.core.database import Database

    database = Database.from_settings(get_settings())
    try:
        await database.create_all()
    finally:
        await database.dispose()


async def _seed(admin_email: str | None, create_tables: bool) -> "SeedSummary":
    from rbac_api.config import get_settings
    from rbac_api.core.database import Database
    from rbac_api.seeding import seed_rbac

    settings = get_settings()
    database = Database.from_settings(settings)
    try:
        if create_tables:
            await database.create_all()
        async with database.session() as session:
            return await seed_rbac(
                session,
                bootstrap_admin_email=admin_email or settings.bootstrap_admin_email,
            )
    finally:
        await database.dispose()


@app.command(name="create-tables")
def create_tables() -> None:
    """Create all database tables that don't exist yet."""
    asyncio.run(_create_tables())
    console.print("[green]Tables created.[/green]")


@app.command(name="seed")
def seed(
    admin_email: str | None = typer.Option(
        None,
        "--admin-email",
        "-a",
        help="Account to grant the admin role (defaults to BOOTSTRAP_ADMIN_EMAIL).",
    ),
    create: bool = typer.Option(
        False, "--create-tables", help="Create missing tables before seeding."
    ),
) -> None:
    """Seed permissions, default roles and the bootstrap admin grant.

    Safe to run repeatedly; existing rows are left alone.
    """
    summary = asyncio.run(_seed(admin_email, create))

    if not summary.changed:
        console.print("[yellow]Nothing to do, seed data already present.[/yellow]")
        return

    table = Table(title="Seeded", show_header=True)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Created")
    table.add_row("permissions", ", ".join(summary.permissions_created) or "-")
    table.add_row("roles", ", ".join(summary.roles_created) or "-")
    table.add_row("admin", summary.admin_granted or "-")

    console.print()
    console.print(table)
    console.print()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
