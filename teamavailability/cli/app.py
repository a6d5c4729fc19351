"""
Main CLI application using Typer.
"""

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Annotated, List, Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..adapters.json_source import JsonAvailabilitySource
from ..adapters.rest_client import RestAvailabilitySource
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import TeamAvailabilityError
from ..domain.models import TeamAvailabilityResult, format_duration
from ..services.team_availability import AvailabilitySourceProtocol, TeamAvailabilityService

app = typer.Typer(
    name="teamavailability",
    help="Find times when a whole team of instructors is available",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the given config file, or the default one when it exists.

    An explicitly requested file must exist; a missing default file just
    yields an empty configuration.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    config_path = get_default_config_path()
    if config_path.exists():
        return AppConfig.load_from_yaml(config_path)
    return AppConfig()


def _parse_date(value: str, label: str) -> date:
    try:
        parsed = pendulum.from_format(value, "YYYY-MM-DD")
    except ValueError as e:
        raise ValueError(f"Could not parse {label} '{value}': expected YYYY-MM-DD") from e
    return date(parsed.year, parsed.month, parsed.day)


def _determine_date_range(
    config: AppConfig,
    start_option: Optional[str],
    end_option: Optional[str],
) -> tuple[date, date]:
    """
    Resolve the search range. Defaults to today plus the configured number of days.
    """
    if start_option:
        start_date = _parse_date(start_option, "start date")
    else:
        today = pendulum.today()
        start_date = date(today.year, today.month, today.day)

    if end_option:
        end_date = _parse_date(end_option, "end date")
    else:
        end_date = start_date + timedelta(days=config.defaults.range_days)

    return start_date, end_date


def _build_source(config: AppConfig, data_file: Optional[Path]) -> AvailabilitySourceProtocol:
    """Pick the availability source: --data wins over the configured one."""
    if data_file is not None:
        return JsonAvailabilitySource(data_file)

    source = config.data_source
    if source is None:
        raise ValueError(
            "No availability source configured. Pass --data FILE or set data_source in config.yaml."
        )

    if source.json_file is not None:
        return JsonAvailabilitySource(source.json_file)

    return RestAvailabilitySource(
        base_url=source.api_url,
        api_key=source.get_api_key(),
        timeout=source.timeout_seconds,
    )


def _print_overlaps(result: TeamAvailabilityResult, config: AppConfig) -> None:
    names = ", ".join(config.display_name(email) for email in result.emails)
    console.print(f"[bold cyan]Instructors:[/bold cyan] {names}")
    console.print(
        f"[bold cyan]Range:[/bold cyan] {result.start_date.isoformat()} - {result.end_date.isoformat()}\n"
    )

    if not result.overlaps:
        console.print(
            "[yellow]No common availability found.[/yellow]\n"
            "Try a longer date range or fewer instructors."
        )
        return

    console.print(
        f"[bold green]{len(result.overlaps)} common window(s) found "
        f"({format_duration(result.total_overlap_minutes())} total):[/bold green]\n"
    )
    for window in result.overlaps:
        console.print(f"  {window.format_display()}")


def _print_individual(result: TeamAvailabilityResult) -> None:
    table = Table(
        title="Individual availability",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Instructor", style="bold yellow")
    table.add_column("Date")
    table.add_column("Available", style="dim")

    for person in result.individual:
        if not person.days:
            table.add_row(person.name, "-", "no availability submitted")
            continue
        for day in person.days:
            windows = ", ".join(
                "all day" if slot.is_all_day
                else f"{slot.start_time:%H:%M} - {slot.end_time:%H:%M}" if slot.has_times
                else "incomplete"
                for slot in day.slots
            )
            table.add_row(person.name, day.date.isoformat(), windows)

    console.print()
    console.print(table)


@app.command()
def find(
    instructors: Annotated[Optional[List[str]], typer.Argument(help="Instructor names or emails (at least two).")] = None,
    view: Annotated[Optional[str], typer.Option("--view", help="Use a saved team view instead of listing instructors.")] = None,
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    data_file: Annotated[Optional[Path], typer.Option("--data", help="JSON file with availability rows.")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD)")] = None,
    individual: Annotated[bool, typer.Option("--individual", help="Also show each instructor's submitted availability.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Enable debug logging.")] = False,
):
    """
    Find windows when all selected instructors are available.

    Examples:

        teamavailability find alex sam --start 2024-06-10 --end 2024-06-14

        teamavailability find --view "Skills lab team" --individual

        teamavailability find a@example.com b@example.com --data availability.json
    """
    _configure_logging(verbose)

    try:
        config = _load_config(config_file)

        if view and instructors:
            console.print("[red]Error: pass either instructors or --view, not both.[/red]")
            raise typer.Exit(1)

        team_view = config.find_view(view) if view else None
        if team_view is not None:
            emails = team_view.instructor_emails
        else:
            emails = config.resolve_instructors(instructors or [])

        start_date, end_date = _determine_date_range(config, start, end)

        # Validate up front so the user gets a message instead of a failed fetch
        if end_date < start_date:
            console.print("[red]Error: end date must not be before start date.[/red]")
            raise typer.Exit(1)
        if len(emails) < 2:
            console.print("[red]Error: please select at least 2 instructors.[/red]")
            raise typer.Exit(1)

        service = TeamAvailabilityService(availability_source=_build_source(config, data_file))
        if team_view is not None:
            result = service.find_for_view(team_view, start_date=start_date, end_date=end_date)
        else:
            result = service.find_team_availability(
                emails=emails,
                start_date=start_date,
                end_date=end_date,
            )

        console.print()
        _print_overlaps(result, config)
        if individual:
            _print_individual(result)
        console.print()

    except (TeamAvailabilityError, ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_instructors(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all configured instructors.
    """
    try:
        config = _load_config(config_file)

        if not config.instructors:
            console.print("[yellow]No instructors defined in the config file.[/yellow]")
            return

        table = Table(
            title="Configured instructors",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name (Alias)", style="bold yellow")
        table.add_column("Email", style="dim")

        for instructor in config.instructors:
            table.add_row(instructor.name, instructor.email)

        console.print()
        console.print(table)
        console.print()

    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_views(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    List all saved team views.
    """
    try:
        config = _load_config(config_file)

        if not config.views:
            console.print("[yellow]No team views defined in the config file.[/yellow]")
            return

        table = Table(
            title="Saved team views",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Name", style="bold yellow")
        table.add_column("Instructors", style="dim")

        for team_view in config.views:
            table.add_row(
                team_view.name,
                ", ".join(config.display_name(email) for email in team_view.instructor_emails)
            )

        console.print()
        console.print(table)
        console.print()

    except (ValueError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]teamavailability[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
