"""
SkillMatch Command Line Interface

Provides CLI commands for managing users and skills and for running
recommendations, searches and mutual-match lookups against MongoDB.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from skillmatch.core.exceptions import SkillMatchError

app = typer.Typer(
    name="skillmatch",
    help="Learner/mentor skill matching CLI",
    add_completion=False,
)
console = Console()


@app.callback()
def main(ctx: typer.Context):
    """Learner/mentor skill matching CLI."""
    from skillmatch.data.database import get_database_manager

    ctx.call_on_close(get_database_manager().close_all)


def _require_connection() -> None:
    """Exit early when MongoDB cannot be reached."""
    from skillmatch.data.database import get_database_manager

    if not get_database_manager().check_sync_connection():
        console.print("[red]Error: Could not connect to MongoDB. Run 'init-db' first.[/red]")
        raise typer.Exit(1)


def _fail(error: SkillMatchError) -> None:
    console.print(f"[red]Error: {error.message}[/red] [dim]({error.code.value})[/dim]")
    raise typer.Exit(1)


def _get_service():
    from skillmatch.core.ranking import SkillMatchService
    from skillmatch.data.repositories import get_user_repository

    return SkillMatchService(get_user_repository())


def _split_skills(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [s for s in (part.strip() for part in value.split(",")) if s]


@app.command()
def version():
    """Show application version."""
    from skillmatch import __version__, __app_name__

    console.print(f"[bold blue]{__app_name__}[/bold blue] version [green]{__version__}[/green]")


@app.command()
def info():
    """Show configuration."""
    from skillmatch.utils.config import get_settings

    settings = get_settings()

    table = Table(title="SkillMatch Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.environment)
    table.add_row("Debug Mode", str(settings.debug))
    table.add_row("Database Host", settings.database.host)
    table.add_row("Database Name", settings.database.name)
    table.add_row("Candidate Pool Limit", str(settings.matching.candidate_pool_limit))
    table.add_row("Recommendation Limit", str(settings.matching.recommendation_limit))
    table.add_row("Search Page Size", str(settings.matching.search_page_size))
    table.add_row("Scoring Workers", str(settings.matching.scoring_workers))
    table.add_row("Log Level", settings.logging.level)

    console.print(table)


@app.command()
def init_db():
    """Initialize the database indexes used by recommendation and search."""
    from skillmatch.data.database import get_database_manager

    console.print("[yellow]Initializing database...[/yellow]")
    _require_connection()
    console.print("  [green]✓[/green] Connected to MongoDB")

    get_database_manager().ensure_indexes()
    console.print("  [green]✓[/green] Indexes created")
    console.print("\n[green]Database initialized successfully![/green]")


@app.command()
def health_check():
    """Check database connectivity."""
    from skillmatch.data.database import get_database_manager
    from skillmatch.utils.config import get_settings

    console.print("[bold cyan]System Health Check[/bold cyan]")
    console.print(f"[dim]{'─' * 50}[/dim]")

    settings = get_settings()
    if get_database_manager().check_sync_connection():
        console.print("  [green]✓[/green] MongoDB connected")
        console.print(f"    Host: {settings.database.host}:{settings.database.port}")
        console.print(f"    Database: {settings.database.name}")
    else:
        console.print("  [red]✗[/red] MongoDB not connected")
        raise typer.Exit(1)


@app.command()
def create_user(
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    email: str = typer.Option(..., "--email", "-e", help="Email address"),
    known: Optional[str] = typer.Option(None, "--known", "-k", help="Comma-separated skills the user can teach"),
    wanted: Optional[str] = typer.Option(None, "--wanted", "-w", help="Comma-separated skills the user wants to learn"),
):
    """Register a user with skill lists."""
    from pydantic import ValidationError

    from skillmatch.data.models import UserCreate
    from skillmatch.data.repositories import get_user_repository

    try:
        data = UserCreate(
            name=name,
            email=email,
            skills_known=_split_skills(known),
            skills_to_learn=_split_skills(wanted),
        )
    except ValidationError as e:
        console.print(f"[red]Invalid user data:[/red] {e.errors()[0]['msg']}")
        raise typer.Exit(1)

    _require_connection()
    try:
        user = get_user_repository().create_from_schema(data)
    except SkillMatchError as e:
        _fail(e)

    console.print(f"[green]Created user[/green] [cyan]{user.id}[/cyan] ({user.name})")


@app.command()
def skills(user_id: str = typer.Argument(..., help="User ID")):
    """Show a user's skills."""
    from skillmatch.data.repositories import get_user_repository

    _require_connection()
    try:
        current = get_user_repository().get_skills(user_id)
    except SkillMatchError as e:
        _fail(e)

    if current is None:
        console.print(f"[red]Error: User not found: {user_id}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Knows:[/bold] {', '.join(current.skills_known) or '-'}")
    console.print(f"[bold]Wants:[/bold] {', '.join(current.skills_to_learn) or '-'}")


@app.command()
def set_skills(
    user_id: str = typer.Argument(..., help="User ID"),
    known: Optional[str] = typer.Option(None, "--known", "-k", help="Comma-separated skills the user can teach"),
    wanted: Optional[str] = typer.Option(None, "--wanted", "-w", help="Comma-separated skills the user wants to learn"),
):
    """Replace a user's skill lists."""
    from skillmatch.data.models import SkillUpdate
    from skillmatch.data.repositories import get_user_repository

    _require_connection()
    data = SkillUpdate(skills_known=_split_skills(known), skills_to_learn=_split_skills(wanted))
    try:
        user = get_user_repository().update_skills(user_id, data)
    except SkillMatchError as e:
        _fail(e)

    if user is None:
        console.print(f"[red]Error: User not found: {user_id}[/red]")
        raise typer.Exit(1)

    console.print("[green]Skills updated[/green]")


@app.command()
def recommend(user_id: str = typer.Argument(..., help="Requesting user ID")):
    """Show the best skill matches for a user."""
    _require_connection()
    try:
        page = _get_service().recommend(user_id)
    except SkillMatchError as e:
        _fail(e)

    if not page.items:
        console.print("[yellow]No candidates found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Top {len(page.items)} Recommendations")
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="cyan")
    table.add_column("Match", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Mutual Skills")

    for rank, candidate in enumerate(page.items, 1):
        pct = candidate.match_percentage
        color = "green" if pct >= 30 else "yellow" if pct >= 10 else "red"
        table.add_row(
            str(rank),
            candidate.name,
            f"[{color}]{pct}%[/{color}]",
            str(candidate.match_score),
            ", ".join(candidate.mutual_skills[:5]),
        )

    console.print(table)


@app.command()
def search(
    user_id: str = typer.Argument(..., help="Requesting user ID"),
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Free text matched on names and skills"),
    offered: Optional[str] = typer.Option(None, "--offered", "-o", help="Skill the candidate can teach"),
    wanted: Optional[str] = typer.Option(None, "--wanted", "-w", help="Skill the candidate wants to learn"),
    page: int = typer.Option(1, "--page", "-p", help="Page number"),
):
    """Search other users with optional filters."""
    _require_connection()
    try:
        result = _get_service().search(
            user_id, query=query, skill_offered=offered, skill_wanted=wanted, page=page
        )
    except SkillMatchError as e:
        _fail(e)

    table = Table(title=f"Page {result.page} of {result.total_pages} ({result.total_count} users)")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Offers")
    table.add_column("Wants")

    for candidate in result.items:
        table.add_row(
            candidate.user_id,
            candidate.name,
            ", ".join(candidate.skills_offered),
            ", ".join(candidate.skills_wanted),
        )

    console.print(table)


@app.command()
def mutual(user_id: str = typer.Argument(..., help="Requesting user ID")):
    """Show users the requester can both learn from and teach."""
    _require_connection()
    try:
        matches = _get_service().find_mutual_matches(user_id)
    except SkillMatchError as e:
        _fail(e)

    if not matches:
        console.print("[yellow]No mutual matches found.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Mutual Matches")
    table.add_column("Name", style="cyan")
    table.add_column("Learn", style="green")
    table.add_column("Teach", style="magenta")
    table.add_column("Score", justify="right")

    for match in matches:
        table.add_row(
            match.name,
            ", ".join(match.learn_from_other),
            ", ".join(match.teach_to_other),
            str(match.match_score),
        )

    console.print(table)


if __name__ == "__main__":
    app()
