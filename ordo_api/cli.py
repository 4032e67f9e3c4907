"""
Ordo CLI.

Command-line interface for database setup, seeding and account management.
"""

import sys
import time

import httpx
import typer
from rich.console import Console
from rich.table import Table
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from ordo_shared.config.logging import setup_logging
from ordo_shared.config.settings import settings

app = typer.Typer(
    name="ordo",
    help="Ordo restaurant ordering CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================


@app.command()
def init_db():
    """Create all tables that do not exist yet."""
    from ordo_api.models import Base
    from ordo_shared.infrastructure.db import engine

    console.print("[blue]Creating tables...[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed demo users, restaurant configuration and menu."""
    from ordo_api.seed import seed as run_seed
    from ordo_shared.infrastructure.db import get_db_context

    if settings.is_production and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    setup_logging()
    try:
        with get_db_context() as db:
            run_seed(db)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Seed complete[/green]")


# =============================================================================
# Account Commands
# =============================================================================


@app.command()
def create_admin(
    email: str = typer.Option(..., prompt=True),
    name: str = typer.Option(..., prompt=True),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Create an ADMIN account."""
    from ordo_api.services.domain import StaffService
    from ordo_shared.infrastructure.db import get_db_context
    from ordo_shared.utils.exceptions import AppException
    from ordo_shared.utils.schemas import StaffCreateRequest

    try:
        data = StaffCreateRequest(email=email, name=name, role="ADMIN", password=password)
    except ValueError as e:
        console.print(f"[red]✗ Invalid input: {e}[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        try:
            user = StaffService(db).create_staff(data)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)
        console.print(f"[green]✓ Admin created (id={user.id})[/green]")


@app.command()
def list_staff():
    """List staff accounts."""
    from ordo_api.models import User
    from ordo_shared.config.constants import Roles
    from ordo_shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        users = db.scalars(
            select(User).where(User.role.in_(Roles.STAFF)).order_by(User.is_active.desc(), User.id)
        ).all()

        table = Table(title="Staff")
        table.add_column("ID", style="cyan")
        table.add_column("Email")
        table.add_column("Name")
        table.add_column("Role", style="magenta")
        table.add_column("Active", style="green")
        for user in users:
            table.add_row(str(user.id), user.email, user.name, user.role, "yes" if user.is_active else "no")

    console.print(table)


# =============================================================================
# Health Commands
# =============================================================================


@app.command()
def health(
    url: str = typer.Option(f"http://localhost:{settings.api_port}/api/health", help="Health endpoint"),
):
    """Check that the API answers."""
    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    start = time.time()
    try:
        response = httpx.get(url, timeout=5.0)
    except httpx.HTTPError as e:
        table.add_row("Ordo API", f"✗ {type(e).__name__}", "-")
        console.print(table)
        raise typer.Exit(1)

    elapsed = (time.time() - start) * 1000
    if response.status_code == 200:
        table.add_row("Ordo API", "✓ Healthy", f"{elapsed:.0f}ms")
    else:
        table.add_row("Ordo API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Ordo Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
