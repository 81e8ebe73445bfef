"""Hadith Master CLI - daily hadith service."""

import asyncio
import logging
from contextlib import closing
from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import settings
from .models import Hadith
from .services import HadithNotFoundError, ServiceError
from .store import StoreError
from .utils.console import console
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)

# Shown when the store holds no hadith at all (first run before any import)
DEFAULT_MESSAGE = (
    "Verily actions are by intentions, and for every person is what he intended.\n"
    "- Umar ibn Al-Khattab (Sahih al-Bukhari 1:1)\n\n"
    "[dim]No hadiths in the store yet. Run 'hadithmaster hadith import' to load some.[/dim]"
)


def _print_panel(message: str, style: str = "blue") -> None:
    """Print a styled panel message."""
    console.print(Panel(f"[bold]{message}[/bold]", style=style))


def _print_hadith(hadith: Hadith, title: str = "Hadith of the Day") -> None:
    """Render one hadith as a panel."""
    body = []
    if hadith.arabic:
        body.append(f"[bold]{hadith.arabic}[/bold]\n")
    body.append(hadith.english.text)
    body.append(f"\n[cyan]- {hadith.english.narrator}[/cyan]")
    body.append(f"[dim]{hadith.citation()}[/dim]")
    if hadith.chapter:
        body.append(f"[dim]{hadith.chapter}[/dim]")
    console.print(Panel("\n".join(body), title=title, style="green"))


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]{message}[/red]")
    return typer.Exit(code=1)


app = typer.Typer(
    name="hadithmaster",
    help="Hadith Master - daily hadith, browsing and scheduling",
    no_args_is_help=True,
)

schedule_app = typer.Typer(help="Manage the daily hadith schedule")
hadith_app = typer.Typer(help="Browse, search and import hadiths")
daemon_app = typer.Typer(help="Background daemon for the daily schedule rotation")

app.add_typer(schedule_app, name="schedule")
app.add_typer(hadith_app, name="hadith")
app.add_typer(daemon_app, name="daemon")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]Hadith Master[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Hadith Master - one hadith a day."""
    settings.ensure_directories()
    setup_logging(settings.log_level, settings.log_path)


# ============================================================================
# DAILY HADITH
# ============================================================================


@app.command("today")
def today() -> None:
    """Show today's hadith (cached for the rest of the day)."""
    from .services import make_daily_service

    try:
        with closing(make_daily_service()) as service:
            hadith = service.resolve_today()
    except HadithNotFoundError:
        console.print(Panel(DEFAULT_MESSAGE, title="Hadith of the Day", style="yellow"))
        return
    except (StoreError, ServiceError) as e:
        raise _fail(f"Could not load today's hadith: {e}") from e

    _print_hadith(hadith)


@app.command("refresh")
def refresh() -> None:
    """Discard the cached hadith and resolve today's again."""
    from .services import make_daily_service

    try:
        with closing(make_daily_service()) as service:
            hadith = service.force_refresh()
    except (StoreError, ServiceError) as e:
        raise _fail(f"Refresh failed: {e}") from e

    _print_hadith(hadith)


@app.command("status")
def status() -> None:
    """Show whether the cached hadith is current."""
    from .services import make_daily_service

    with closing(make_daily_service()) as service:
        cached = service.cached()
        today_key = service.day_key()
        fresh = service.is_fresh_for_today()

    console.print("[bold cyan]Daily Hadith Cache[/bold cyan]\n")
    console.print(f"Today: {today_key}")
    if cached is None:
        console.print("Cached: [yellow]nothing[/yellow]")
        return

    state = "[green]fresh[/green]" if fresh else "[yellow]stale[/yellow]"
    console.print(f"Cached for: {cached.day} ({state})")
    console.print(f"Hadith: {cached.hadith.id} - {cached.hadith.citation()}")


# ============================================================================
# SCHEDULE COMMANDS
# ============================================================================


@schedule_app.command("tomorrow")
def schedule_tomorrow() -> None:
    """Schedule a random active hadith for tomorrow unless one is set."""
    from .services import make_daily_service

    try:
        with closing(make_daily_service()) as service:
            outcome = service.ensure_tomorrow_scheduled()
    except (StoreError, ServiceError) as e:
        raise _fail(f"Scheduling failed: {e}") from e

    if outcome.created:
        console.print(
            f"[green]Scheduled hadith {outcome.schedule.hadith_id} for {outcome.date}[/green]"
        )
    else:
        console.print(
            f"[yellow]Already scheduled for {outcome.date}: "
            f"hadith {outcome.schedule.hadith_id}[/yellow]"
        )


@schedule_app.command("list")
def schedule_list(
    limit: Annotated[int, typer.Option("--limit", "-n", help="Number of rows")] = 7,
) -> None:
    """List the most recent schedule rows."""
    from .services import make_hadith_service

    try:
        with closing(make_hadith_service()) as service:
            rows = service.upcoming(limit=limit)
    except StoreError as e:
        raise _fail(f"Could not read the schedule: {e}") from e

    if not rows:
        console.print("[dim]No schedule rows.[/dim]")
        return

    table = Table(title="Daily Hadith Schedule")
    table.add_column("Date")
    table.add_column("Hadith")
    table.add_column("Featured")
    table.add_column("Sent")
    for row in rows:
        table.add_row(row.date, row.hadith_id, str(row.featured), str(row.sent))
    console.print(table)


# ============================================================================
# HADITH COMMANDS
# ============================================================================


def _print_hadith_table(hadiths: list[Hadith], title: str) -> None:
    table = Table(title=title)
    table.add_column("ID")
    table.add_column("Narrator")
    table.add_column("Source")
    table.add_column("Category")
    table.add_column("Text", overflow="fold")
    for h in hadiths:
        text = h.english.text if len(h.english.text) <= 80 else h.english.text[:77] + "..."
        table.add_row(h.id or "", h.english.narrator, h.citation(), h.category, text)
    console.print(table)


@hadith_app.command("list")
def hadith_list(
    category: Annotated[
        str | None, typer.Option("--category", "-c", help="Filter by category")
    ] = None,
    difficulty: Annotated[
        str | None, typer.Option("--difficulty", "-d", help="Filter by difficulty")
    ] = None,
    limit: Annotated[int | None, typer.Option("--limit", "-n", help="Maximum rows")] = None,
) -> None:
    """List hadiths, optionally filtered by category or difficulty."""
    from .services import make_hadith_service

    try:
        with closing(make_hadith_service()) as service:
            if category:
                hadiths = service.by_category(category)
            elif difficulty:
                hadiths = service.by_difficulty(difficulty)
            else:
                hadiths = service.list_all(limit=limit)
    except StoreError as e:
        raise _fail(f"Could not list hadiths: {e}") from e

    if limit is not None:
        hadiths = hadiths[:limit]
    if not hadiths:
        console.print("[dim]No hadiths found.[/dim]")
        return
    _print_hadith_table(hadiths, f"Hadiths ({len(hadiths)})")


@hadith_app.command("search")
def hadith_search(
    term: Annotated[str, typer.Argument(help="Text to look for")],
) -> None:
    """Search active hadiths by text, narrator, book or tag."""
    from .services import make_hadith_service

    try:
        with closing(make_hadith_service()) as service:
            hadiths = service.search(term)
    except StoreError as e:
        raise _fail(f"Search failed: {e}") from e

    if not hadiths:
        console.print(f"[dim]No hadiths match '{term}'.[/dim]")
        return
    _print_hadith_table(hadiths, f"Results for '{term}' ({len(hadiths)})")


@hadith_app.command("stats")
def hadith_stats() -> None:
    """Show catalogue statistics."""
    from .services import make_hadith_service

    try:
        with closing(make_hadith_service()) as service:
            stats = service.stats()
    except StoreError as e:
        raise _fail(f"Could not compute statistics: {e}") from e

    console.print("[bold cyan]Hadith Statistics[/bold cyan]\n")
    console.print(f"Total: {stats.total}")
    console.print(f"Active: {stats.active}")
    if stats.categories:
        console.print("\n[bold]By category[/bold]")
        for name, count in sorted(stats.categories.items()):
            console.print(f"  {name}: {count}")
    if stats.difficulties:
        console.print("\n[bold]By difficulty[/bold]")
        for name, count in sorted(stats.difficulties.items()):
            console.print(f"  {name}: {count}")


@hadith_app.command("import")
def hadith_import(
    path: Annotated[
        Path | None,
        typer.Argument(help="JSON array of hadiths (default: bundled sample data)"),
    ] = None,
) -> None:
    """Import hadiths from a JSON file. Existing ids are skipped."""
    from .services import SAMPLE_DATA_FILE, make_hadith_service

    source = path or SAMPLE_DATA_FILE
    _print_panel(f"Importing hadiths from {source.name}...")
    try:
        with closing(make_hadith_service()) as service:
            result = service.import_file(source)
    except (StoreError, ServiceError) as e:
        raise _fail(f"Import failed: {e}") from e

    console.print(f"[green]✓ Added {len(result.added)} hadiths[/green]")
    if result.skipped:
        console.print(f"[yellow]Skipped {len(result.skipped)} existing ids[/yellow]")


# ============================================================================
# DAEMON COMMANDS
# ============================================================================


@daemon_app.command("start")
def daemon_start(
    foreground: Annotated[
        bool,
        typer.Option("--foreground", "-f", help="Run in foreground (don't daemonize)"),
    ] = False,
) -> None:
    """Start the background daemon that schedules tomorrow's hadith every day."""
    from .daemon.server import get_daemon_status, run_daemon

    status = get_daemon_status()
    if status.status.value == "running":
        console.print(f"[yellow]Daemon already running (PID {status.pid})[/yellow]")
        return

    if foreground:
        console.print("[bold cyan]Starting daemon in foreground...[/bold cyan]")
        console.print("[dim]Press Ctrl+C to stop[/dim]\n")
        try:
            run_daemon(foreground=True)
        except KeyboardInterrupt:
            console.print("\n[dim]Daemon stopped.[/dim]")
    else:
        console.print("[bold cyan]Starting daemon...[/bold cyan]")
        run_daemon(foreground=False)


@daemon_app.command("stop")
def daemon_stop() -> None:
    """Stop the background daemon."""
    from .daemon.server import get_daemon_status, stop_daemon

    status = get_daemon_status()
    if status.status.value != "running":
        console.print("[yellow]Daemon is not running.[/yellow]")
        return

    console.print(f"[bold cyan]Stopping daemon (PID {status.pid})...[/bold cyan]")
    if stop_daemon():
        console.print("[green]Daemon stopped.[/green]")
    else:
        console.print("[red]Failed to stop daemon.[/red]")


@daemon_app.command("status")
def daemon_status() -> None:
    """Show daemon status."""
    from .daemon.server import get_daemon_status

    status = get_daemon_status()

    console.print("[bold cyan]Daemon Status[/bold cyan]\n")
    if status.status.value == "running":
        console.print("Status: [green]Running[/green]")
        console.print(f"PID: {status.pid}")
        if status.started_at:
            console.print(f"Started: {status.started_at:%Y-%m-%d %H:%M}")
    else:
        console.print("Status: [yellow]Stopped[/yellow]")

    console.print(f"Scheduled jobs: {status.jobs_registered}")
    console.print(f"Log file: {status.log_file}")


@daemon_app.command("run")
def daemon_run_job(
    job: Annotated[
        str,
        typer.Argument(help="Job to run: schedule-tomorrow"),
    ] = "schedule-tomorrow",
) -> None:
    """Run a daemon job immediately (for testing or manual catch-up)."""
    from .daemon.scheduler import DailyScheduler

    console.print(f"[bold cyan]Running job: {job}...[/bold cyan]")
    result = asyncio.run(DailyScheduler().run_job_now(job))

    if "error" in result:
        raise _fail(f"Job failed: {result['error']}")

    verb = "Scheduled" if result["created"] else "Already scheduled"
    console.print(f"[green]{verb}: hadith {result['hadith_id']} for {result['date']}[/green]")


if __name__ == "__main__":
    app()
