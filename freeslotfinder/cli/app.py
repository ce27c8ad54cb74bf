"""
Main CLI application using Typer.
"""

import asyncio
import logging
from datetime import timedelta
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import FreeSlotError
from ..domain.models import FreeSlotQuery
from ..adapters.api_authenticator import ApiAuthenticator
from ..adapters.http_event_store import HttpEventStore
from ..adapters.json_event_store import DEFAULT_EVENTS_FILE, JsonEventStore
from ..services.free_slot_finder import EventStoreProtocol, FreeSlotFinderService

app = typer.Typer(
    name="freeslotfinder",
    help="Find common free meeting slots in calendar API events",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(config_file: Optional[Path], allow_missing: bool = False) -> AppConfig:
    config_path = config_file or get_default_config_path()
    if allow_missing and not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return AppConfig()
    return AppConfig.load_from_yaml(config_path)


def _parse_instant(value: str, label: str) -> DateTime:
    """Parse a CLI date or date-time as a UTC instant."""
    try:
        parsed = pendulum.parse(value, tz="UTC")
    except ValueError as e:
        console.print(f"[red]Error parsing {label}: {e}[/red]")
        raise typer.Exit(1)

    if not isinstance(parsed, DateTime):
        console.print(f"[red]Error parsing {label}: '{value}' is not a date or date-time[/red]")
        raise typer.Exit(1)

    return parsed.in_timezone("UTC")


def _determine_window(
    *,
    config: AppConfig,
    start_option: Optional[str],
    end_option: Optional[str],
):
    """
    Resolve the search window from explicit options or the configured default.
    Returns (window_start, window_end).
    """
    if start_option:
        window_start = _parse_instant(start_option, "start")
    else:
        window_start = pendulum.now("UTC").start_of("day")

    if end_option:
        window_end = _parse_instant(end_option, "end")
    else:
        window_end = window_start.add(days=config.defaults.window_days)

    return window_start, window_end


def _build_event_store(
    *,
    config: AppConfig,
    mock: bool,
    events_file: Optional[Path],
    password: Optional[str],
    quiet: bool,
) -> EventStoreProtocol:
    """Pick the JSON file store or the HTTP store (logging in if needed)."""
    if mock:
        if not quiet:
            console.print("[yellow]⚠  MOCK MODE: using bundled sample events[/yellow]\n")
        return JsonEventStore(DEFAULT_EVENTS_FILE)

    file_path = events_file or config.events_file
    if file_path is not None:
        if not quiet:
            console.print(f"[dim]Reading events from {file_path}[/dim]\n")
        return JsonEventStore(file_path)

    authenticator = ApiAuthenticator(base_url=config.api_base_url, email=config.email)
    access_token = authenticator.get_access_token(password=password)
    if authenticator.insecure_storage_warning and not quiet:
        console.print(f"[yellow]{authenticator.insecure_storage_warning}[/yellow]")

    return HttpEventStore(base_url=config.api_base_url, access_token=access_token)


@app.command()
def find(
    participants: Annotated[List[str], typer.Argument(help="Participant names or user ids (e.g. 'alice 2').")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Window start, UTC (YYYY-MM-DD or ISO 8601)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Window end, UTC (YYYY-MM-DD or ISO 8601)")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Meeting duration in minutes")] = None,
    events_file: Annotated[Optional[Path], typer.Option("--events-file", help="Read events from a JSON file instead of the API.")] = None,
    mock: Annotated[bool, typer.Option("--mock", help="Use bundled sample events and skip authentication.")] = False,
    password: Annotated[Optional[str], typer.Option("--password", envvar="FREESLOTFINDER_PASSWORD", help="API password, only needed without a cached token.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print slots as JSON.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Find free meeting slots shared by all participants.

    Examples:

        # Two configured colleagues, default window and duration
        freeslotfinder find alice bob

        # Explicit window and a one hour meeting
        freeslotfinder find 1 2 --start 2024-03-01T09:00 --end 2024-03-01T17:00 -d 60

        # Use sample data (no API needed)
        freeslotfinder find 1 2 --mock --start 2024-03-01T09:00 --end 2024-03-01T17:00
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file, allow_missing=mock)

        participant_ids = config.resolve_participants(participants)
        minutes = duration if duration is not None else config.defaults.duration_minutes
        window_start, window_end = _determine_window(
            config=config,
            start_option=start,
            end_option=end,
        )

        query = FreeSlotQuery(
            window_start=window_start,
            window_end=window_end,
            duration=timedelta(minutes=minutes),
            participant_ids=frozenset(participant_ids),
        )
        FreeSlotFinderService.validate_query(query)

        if not as_json:
            console.print("[bold cyan]📊 Summary:[/bold cyan]")
            console.print(f"   Participants: {', '.join(config.describe_participant(p) for p in participant_ids)}")
            console.print(f"   Window: {window_start.format('DD.MM.YYYY HH:mm')} - {window_end.format('DD.MM.YYYY HH:mm')} UTC")
            console.print(f"   Duration: {minutes} minutes")
            console.print()

        event_store = _build_event_store(
            config=config,
            mock=mock,
            events_file=events_file,
            password=password,
            quiet=as_json,
        )
        service = FreeSlotFinderService(event_store=event_store)

        slots = asyncio.run(
            service.find_slots(
                participants=participant_ids,
                window_start=window_start,
                window_end=window_end,
                duration=query.duration,
            )
        )

        if as_json:
            console.print_json(data=[slot.to_dict() for slot in slots])
            return

        if not slots:
            console.print(
                "[yellow]⚠ No free slots found.[/yellow]\n"
                "Try a longer window or a shorter duration."
            )
        else:
            console.print(f"[bold green]✓ {len(slots)} free slot(s) found:[/bold green]\n")

            for slot in slots:
                console.print(f"  {slot.format_display()}")

        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (FreeSlotError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_colleagues(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured colleagues.
    """
    try:
        config = _load_config(config_file)

        if not config.colleagues:
            console.print("[yellow]No colleagues defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured colleagues",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name (alias)", style="bold yellow")
        table.add_column("User id", style="dim")

        for colleague in config.colleagues:
            table.add_row(
                colleague.name,
                str(colleague.user_id)
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def login(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    ),
    password: str = typer.Option(
        ...,
        "--password",
        prompt=True,
        hide_input=True,
        envvar="FREESLOTFINDER_PASSWORD",
        help="API password"
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Log in again even if a token is cached"
    )
):
    """
    Log in to the calendar API and cache the token.
    """
    try:
        config = _load_config(config_file)

        authenticator = ApiAuthenticator(base_url=config.api_base_url, email=config.email)
        access_token = authenticator.get_access_token(password=password, force_refresh=force)

        users = HttpEventStore(
            base_url=config.api_base_url,
            access_token=access_token
        ).test_connection()

        console.print(
            f"\n[bold green]✓ Logged in as {config.email}[/bold green] "
            f"({len(users)} user(s) visible, token stored in {authenticator.cache_backend})\n"
        )

    except (FileNotFoundError, FreeSlotError, ValueError) as e:
        console.print(f"\n[bold red]✗ Error:[/bold red] {e}\n")
        raise typer.Exit(1)


@app.command()
def clear_cache(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    Clear the authentication token cache.
    """
    try:
        config = _load_config(config_file)

        authenticator = ApiAuthenticator(base_url=config.api_base_url, email=config.email)
        authenticator.clear_cache()

        console.print("\n[green]✓ Token cache cleared.[/green]")
        console.print("You will need to log in again on the next call.\n")

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]freeslotfinder[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
