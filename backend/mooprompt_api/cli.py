"""
MooPrompt CLI.

Command-line interface for common operations:

    mooprompt db-init
    mooprompt db-seed
    mooprompt create-user alice --role CASHIER
    mooprompt check-config
    mooprompt routes
    mooprompt ws-test --work-id 3
    mooprompt health
"""

import asyncio
import sys
import time

import typer
from sqlalchemy.exc import SQLAlchemyError
from rich.console import Console
from rich.table import Table

from shared.config.constants import Roles

app = typer.Typer(
    name="mooprompt",
    help="MooPrompt restaurant POS and FlowTrak CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all database tables."""
    from mooprompt_api.models import Base
    from shared.infrastructure.db import engine

    console.print("[blue]Creating tables...[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ {len(Base.metadata.tables)} tables ready[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed the admin account, restaurant info and demo data."""
    from mooprompt_api.seed import seed
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    try:
        with get_db_context() as db:
            seed(db)
    except SQLAlchemyError as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Seed complete[/green]")


@app.command()
def create_user(
    username: str = typer.Argument(..., help="Login name"),
    name: str = typer.Option(None, help="Display name (defaults to the username)"),
    role: str = typer.Option(Roles.STAFF, help="One of: " + ", ".join(Roles.ALL)),
    department_id: int = typer.Option(None, help="FlowTrak department id"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
):
    """Create a staff account."""
    from mooprompt_api.services.domain.user_service import UserService
    from shared.infrastructure.db import get_db_context, safe_commit
    from shared.utils.exceptions import AppException
    from shared.utils.pos_schemas import UserCreate

    role = role.upper()
    if role not in Roles.ALL:
        console.print(f"[red]Unknown role: {role}[/red]")
        raise typer.Exit(1)

    try:
        data = UserCreate(
            username=username,
            name=name or username,
            password=password,
            role=role,
            department_id=department_id,
        )
        with get_db_context() as db:
            user = UserService(db).create(data, None)
            safe_commit(db)
            console.print(f"[green]✓ Created {user.username} ({user.role}) with id {user.id}[/green]")
    except AppException as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]✗ Invalid input: {e}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Configuration Commands
# =============================================================================

@app.command()
def check_config():
    """Show the effective configuration and production secret problems."""
    from shared.config.settings import settings

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Database", settings.database_url.split("@")[-1])
    table.add_row("Redis", settings.redis_url)
    table.add_row("Default locale", settings.default_locale)
    table.add_row("Upload dir", settings.upload_dir)
    table.add_row("Public base URL", settings.public_base_url or "(from request)")
    table.add_row("POS login limit", settings.login_rate_limit)
    table.add_row("FlowTrak login limit", settings.flow_login_rate_limit)
    console.print(table)

    errors = settings.validate_production_secrets()
    if not errors:
        console.print("[green]✓ No configuration problems[/green]")
        return
    for error in errors:
        console.print(f"[yellow]! {error}[/yellow]")
    if settings.environment == "production":
        raise typer.Exit(1)


HTTP_METHODS = ("get", "post", "put", "patch", "delete")


def route_rows(api) -> list[tuple[str, str, str]]:
    """(method, path, summary) for every documented route, sorted by path."""
    rows = []
    for path, operations in api.openapi()["paths"].items():
        for method, operation in operations.items():
            if method in HTTP_METHODS:
                rows.append((method.upper(), path, operation.get("summary", "")))
    return sorted(rows, key=lambda row: (row[1], HTTP_METHODS.index(row[0].lower())))


@app.command()
def routes():
    """List the REST API routes."""
    from mooprompt_api.main import app as api

    table = Table(title="REST API routes")
    table.add_column("Method", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Summary", style="yellow")

    rows = route_rows(api)
    for row in rows:
        table.add_row(*row)
    console.print(table)
    console.print(f"{len(rows)} routes")


# =============================================================================
# WebSocket Commands
# =============================================================================

@app.command()
def ws_test(
    url: str = typer.Option("ws://localhost:8001/ws/events", help="Event socket URL"),
    work_id: int = typer.Option(None, help="Also join this work order's room"),
):
    """Test WebSocket connectivity."""
    import websockets

    async def _test():
        console.print(f"[blue]Testing WebSocket: {url}[/blue]")
        try:
            async with websockets.connect(url, close_timeout=5) as ws:
                await ws.send('{"type": "ping"}')
                response = await asyncio.wait_for(ws.recv(), timeout=5)
                console.print(f"[green]✓ Connected! Response: {response}[/green]")
                if work_id is not None:
                    await ws.send(f'{{"type": "join:work", "work_id": {work_id}}}')
                    response = await asyncio.wait_for(ws.recv(), timeout=5)
                    console.print(f"[green]✓ {response}[/green]")
        except asyncio.TimeoutError:
            console.print("[red]✗ Connection timed out[/red]")
            raise typer.Exit(1)
        except (OSError, websockets.WebSocketException) as e:
            console.print(f"[red]✗ Connection failed: {e}[/red]")
            raise typer.Exit(1)

    asyncio.run(_test())


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    api_url: str = typer.Option("http://localhost:8000", help="REST API base URL"),
    ws_url: str = typer.Option("http://localhost:8001", help="WebSocket gateway base URL"),
):
    """Check system health."""
    import httpx

    async def _health():
        services = [
            ("REST API", f"{api_url}/api/health"),
            ("WS Gateway", f"{ws_url}/ws/health"),
        ]

        table = Table(title="Service Health")
        table.add_column("Service", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Response Time", style="yellow")

        async with httpx.AsyncClient(timeout=5.0) as client:
            for name, url in services:
                start = time.time()
                try:
                    response = await client.get(url)
                except httpx.HTTPError as e:
                    table.add_row(name, f"✗ {type(e).__name__}", "-")
                    continue
                elapsed = (time.time() - start) * 1000
                if response.status_code == 200:
                    table.add_row(name, "✓ Healthy", f"{elapsed:.0f}ms")
                else:
                    table.add_row(name, f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")

        from redis import RedisError
        from shared.infrastructure.events import close_redis_pool, get_redis_pool

        start = time.time()
        try:
            redis = await get_redis_pool()
            await redis.ping()
            table.add_row("Redis", "✓ Healthy", f"{(time.time() - start) * 1000:.0f}ms")
        except (RedisError, OSError) as e:
            table.add_row("Redis", f"✗ {type(e).__name__}", "-")
        finally:
            await close_redis_pool()

        console.print(table)

    asyncio.run(_health())


@app.command()
def version():
    """Show version information."""
    from mooprompt_api.main import app as api

    table = Table(title="MooPrompt Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")
    table.add_row("API", api.version)
    table.add_row("Python", sys.version.split()[0])
    console.print(table)


if __name__ == "__main__":
    app()
