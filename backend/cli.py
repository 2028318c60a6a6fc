"""
Roster CLI.

Command-line interface for database bootstrap and read-only inspection.
"""

import sys
import time
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="roster",
    help="Roster Teams and Players CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all database tables."""
    from rest_api.models import Base
    from shared.infrastructure.db import engine

    console.print("[blue]Creating tables...[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
        console.print("[green]✓ Tables created[/green]")
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Seed even in production"),
):
    """Seed database with sample teams and players."""
    from rest_api.seed import seed
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context

    console.print(f"[blue]Seeding database for: {settings.environment}[/blue]")

    if settings.is_production and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    try:
        with get_db_context() as db:
            seed(db)
        console.print("[green]✓ Seeding complete[/green]")
    except Exception as e:
        console.print(f"[red]✗ Seeding failed: {e}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Inspection Commands
# =============================================================================

@app.command()
def teams(
    sort: str = typer.Option(None, help="Sort fields, e.g. -created_at,name"),
    keyword: str = typer.Option(None, "--keyword", "-k", help="Search team names"),
    page: int = typer.Option(1, help="Page number"),
    limit: int = typer.Option(20, help="Teams per page"),
):
    """List teams."""
    from rest_api.services.domain import TeamService
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException

    query = {"page": page, "limit": limit}
    if sort:
        query["sort"] = sort
    if keyword:
        query["keyword"] = keyword

    try:
        with get_db_context() as db:
            result = TeamService(db).get_all(query)
    except AppException as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)

    table = Table(title="Teams")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Shirt", style="green")
    table.add_column("Created", style="yellow")

    for team in result.data:
        table.add_row(team["id"], team["name"], team["shirt_color"], str(team["created_at"]))

    console.print(table)

    pagination = result.pagination
    console.print(
        f"Page {pagination.page} of {pagination.number_of_pages} "
        f"({pagination.total} teams)"
    )


@app.command()
def team_stats(
    team_id: str = typer.Argument(..., help="Team ID"),
):
    """Show the roster and salary statistics of a team."""
    from rest_api.services.domain import TeamService
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException

    try:
        with get_db_context() as db:
            service = TeamService(db)
            team = service.get_team_with_players(team_id)
            stats = service.stats_for(team["players"])
    except AppException as e:
        console.print(f"[red]✗ {e.message}[/red]")
        raise typer.Exit(1)

    roster = Table(title=f"{team['name']} roster")
    roster.add_column("Name", style="cyan")
    roster.add_column("Position")
    roster.add_column("Age", justify="right")
    roster.add_column("Salary", style="green", justify="right")

    for player in team["players"]:
        roster.add_row(
            player["name"],
            player["position"],
            str(player["age"]),
            f"{player['salary']:,.2f}",
        )
    console.print(roster)

    summary = Table(title="Salary statistics")
    summary.add_column("Metric", style="cyan")
    summary.add_column("Value", style="green")
    summary.add_row("Players", str(stats.player_count))
    summary.add_row("Total salary", f"{stats.total_salary:,.2f}")
    summary.add_row("Average salary", f"{stats.average_salary:,.2f}")
    console.print(summary)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option("http://localhost:8000/api/health/detailed", help="Health endpoint"),
):
    """Check API health."""
    import httpx

    table = Table(title="Service Health")
    table.add_column("Service", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    try:
        start = time.time()
        response = httpx.get(url, timeout=5.0)
        elapsed = (time.time() - start) * 1000

        if response.status_code == 200:
            table.add_row("REST API", "✓ Healthy", f"{elapsed:.0f}ms")
        else:
            table.add_row("REST API", f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
    except httpx.HTTPError as e:
        table.add_row("REST API", f"✗ {type(e).__name__}", "-")

    console.print(table)


@app.command()
def version():
    """Show version information."""
    table = Table(title="Roster Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
