"""
Tableside CLI.

Command-line interface for database setup, seeding, staff accounts and
running the server.

Usage:
    python cli.py init-db
    python cli.py seed
    python cli.py create-staff kitchen@example.com secret123 --role KITCHEN
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="tableside",
    help="Tableside restaurant ordering CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def init_db():
    """Create all database tables."""
    from tableside_api.models import Base
    from tableside_shared.infrastructure.db import engine

    Base.metadata.create_all(bind=engine)
    console.print("[green]✓ Tables created[/green]")


@app.command()
def seed():
    """Load the demo restaurant (idempotent)."""
    from tableside_api.models import Base
    from tableside_api.seed import seed as seed_database
    from tableside_shared.infrastructure.db import engine, get_db_context

    Base.metadata.create_all(bind=engine)
    try:
        with get_db_context() as db:
            seed_database(db)
    except Exception as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Demo data loaded[/green]")


@app.command()
def link_dish_categories(
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Report without saving"),
):
    """Backfill dish categories from their legacy labels."""
    from migrations.link_dish_categories import link_dish_categories as run_link
    from tableside_shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        report = run_link(db, dry_run=dry_run)

    console.print(f"[green]✓ Linked {report.linked} dishes[/green] (skipped {report.skipped})")
    if report.unmatched:
        table = Table(title="Unmatched dishes")
        table.add_column("Dish ID", style="cyan")
        table.add_column("Legacy category", style="yellow")
        for dish_id, label in report.unmatched:
            table.add_row(str(dish_id), label)
        console.print(table)


# =============================================================================
# Staff Commands
# =============================================================================

@app.command()
def create_staff(
    email: str = typer.Argument(..., help="Login email"),
    password: str = typer.Argument(..., help="Initial password"),
    name: str = typer.Option(None, "--name", help="Full name"),
    role: str = typer.Option("WAITER", "--role", "-r", help="ADMIN, MANAGER, KITCHEN or WAITER"),
):
    """Create a staff account."""
    from sqlalchemy import select

    from tableside_api.models import StaffUser
    from tableside_shared.config.constants import Roles
    from tableside_shared.infrastructure.db import get_db_context
    from tableside_shared.security.password import hash_password

    role = role.upper()
    if role not in Roles.ALL:
        console.print(f"[red]Unknown role {role}. Use one of: {', '.join(Roles.ALL)}[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        if db.scalar(select(StaffUser.id).where(StaffUser.email == email)):
            console.print(f"[red]A staff account for {email} already exists[/red]")
            raise typer.Exit(1)
        user = StaffUser(email=email, password=hash_password(password), full_name=name, role=role)
        db.add(user)
        db.commit()
        console.print(f"[green]✓ Created {role} account {email} (id {user.id})[/green]")


# =============================================================================
# Operations
# =============================================================================

@app.command()
def purge_sessions():
    """Close expired table sessions and discard their carts."""
    from tableside_api.services.domain import purge_expired_sessions

    closed = purge_expired_sessions()
    console.print(f"[green]✓ Closed {closed} expired sessions[/green]")


@app.command()
def publish_outbox():
    """Publish pending outbox events once."""
    from tableside_api.services.events import process_pending_events_once

    published = asyncio.run(process_pending_events_once())
    console.print(f"[green]✓ Published {published} events[/green]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (defaults to REST_API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API with uvicorn."""
    import uvicorn

    from tableside_shared.config.settings import settings

    uvicorn.run("tableside_api.main:app", host=host, port=port or settings.rest_api_port, reload=reload)


@app.command()
def version():
    """Show version information."""
    console.print("[bold]Tableside[/bold] v0.1.0")


if __name__ == "__main__":
    app()
