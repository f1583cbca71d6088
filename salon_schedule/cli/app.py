"""
Main CLI application using Typer.
"""

import asyncio
import json
from pathlib import Path
from typing import Annotated, Any, Dict, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters import SAMPLE_DATA_FILE, HttpSalonRepository, JsonSalonRepository
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import ScheduleError
from ..domain.slot_calculator import SlotCalculator
from ..logging_config import configure_logging
from ..services.schedule_tools import ScheduleToolsService

app = typer.Typer(
    name="salon-schedule",
    help="Master availability, free slots and schedule gaps for a salon",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
DataOption = Annotated[Optional[Path], typer.Option("--data", help="Read salon data from this JSON file instead of the API.")]
DateOption = Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD). Defaults to today.")]
MasterOption = Annotated[Optional[str], typer.Option("--master", "-m", help="Master id or part of the name.")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """Load the explicit config file, or the default one when it exists."""
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)

    return AppConfig()


def _build_service(config_file: Optional[Path], data_file: Optional[Path]) -> ScheduleToolsService:
    """Wire config, repository and calculator into the tools service."""
    config = _load_config(config_file)
    configure_logging(config.log_level)
    tz = config.timezone

    if data_file is not None:
        repository = JsonSalonRepository.from_file(data_file, timezone=tz)
    elif config.api is not None:
        repository = HttpSalonRepository(
            base_url=config.api.base_url,
            business_id=config.business_id,
            token=config.api.token,
            timezone=tz,
            timeout=config.api.timeout_seconds,
        )
    elif config.data_file is not None:
        repository = JsonSalonRepository.from_file(config.data_file, timezone=tz)
    else:
        console.print("[yellow]⚠  DEMO MODE: using bundled sample data[/yellow]\n")
        repository = JsonSalonRepository.from_file(SAMPLE_DATA_FILE, timezone=tz)

    return ScheduleToolsService(
        repository=repository,
        slot_calculator=SlotCalculator(step_minutes=config.defaults.slot_step_minutes),
        timezone=tz,
        defaults=config.defaults,
    )


def _master_args(master: Optional[str]) -> Dict[str, Any]:
    # The same text is tried as an exact id first, then as a name fragment.
    if not master:
        return {}
    return {"masterId": master, "masterName": master}


def _run(service: ScheduleToolsService, name: str, args: Dict[str, Any]) -> Dict[str, Any]:
    return asyncio.run(service.run_tool(name, args))["data"]


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


def _report_master_required(data: Dict[str, Any]) -> bool:
    if data.get("error") != "master_required":
        return False
    console.print(f"[bold red]Master not found.[/bold red] {data.get('hint', '')}")
    return True


@app.command()
def free_slots(
    master: MasterOption = None,
    date: DateOption = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Booking duration in minutes")] = None,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum number of slots")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List bookable start times for a master.

    Examples:

        salon-schedule free-slots -m olena --date 2024-06-10 -d 60
    """
    try:
        service = _build_service(config_file, data_file)
        data = _run(service, "free_slots", {
            **_master_args(master),
            "date": date,
            "durationMinutes": duration,
            "limit": limit,
        })
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    if _report_master_required(data):
        raise typer.Exit(1)

    title = f"{data['master']['name']} · {data['date']} · {data['durationMinutes']} min"
    if data.get("note") == "no_working_hours":
        console.print(f"[yellow]{title}: not working ({data.get('source')})[/yellow]")
        return

    if not data["slots"]:
        console.print(f"[yellow]{title}: no free slots ({data['totalBusy']} busy interval(s))[/yellow]")
        return

    console.print(f"[bold green]✓ {title}[/bold green]\n")
    times = [slot.split("T", 1)[1] for slot in data["slots"]]
    console.print("  " + "  ".join(times))
    console.print()


@app.command()
def gaps(
    master: MasterOption = None,
    date: DateOption = None,
    min_gap: Annotated[Optional[int], typer.Option("--min-gap", help="Minimum gap length in minutes")] = None,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum number of gaps")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Show idle stretches between a master's bookings, largest first.
    """
    try:
        service = _build_service(config_file, data_file)
        data = _run(service, "gaps_summary", {
            **_master_args(master),
            "date": date,
            "minGapMinutes": min_gap,
            "limit": limit,
        })
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    if _report_master_required(data):
        raise typer.Exit(1)

    title = f"Gaps ≥ {data['minGapMinutes']} min · {data['master']['name']} · {data['date']}"
    if data.get("note") == "no_working_hours":
        console.print(f"[yellow]{title}: not working ({data.get('source')})[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Start", style="bold yellow")
    table.add_column("End")
    table.add_column("Minutes", justify="right")

    for gap in data["gaps"]:
        table.add_row(gap["start"], gap["end"], str(gap["minutes"]))

    console.print()
    console.print(table)
    console.print(
        f"[dim]{data['totalGaps']} gap(s) total, "
        f"{data['totalAppointments']} appointment(s)[/dim]\n"
    )


@app.command()
def who_working(
    date: DateOption = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List which masters work on a date.
    """
    try:
        service = _build_service(config_file, data_file)
        data = _run(service, "who_working", {"date": date})
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    table = Table(title=f"Masters on {data['date']}", show_header=True, header_style="bold cyan")
    table.add_column("Master", style="bold yellow")
    table.add_column("Hours")
    table.add_column("Source", style="dim")

    for entry in data["working"]:
        hours = ", ".join(entry.get("windows") or [f"{entry['start']}-{entry['end']}"])
        table.add_row(entry["name"], hours, entry["source"])
    for entry in data["off"]:
        table.add_row(entry["name"], "[red]off[/red]", entry["source"])

    console.print()
    console.print(table)
    console.print()


@app.command()
def overview(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Summarise the weekly schedules of the business and its masters.
    """
    try:
        service = _build_service(config_file, data_file)
        data = _run(service, "schedule_overview", {})
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    business = data.get("business")
    if business:
        console.print(Panel.fit(
            f"[bold]{business['name']}[/bold]\n{business['summary']}",
            title="Business hours"
        ))

    table = Table(title="Masters", show_header=True, header_style="bold cyan")
    table.add_column("Master", style="bold yellow")
    table.add_column("Weekly schedule")
    table.add_column("Upcoming overrides", justify="right")

    for entry in data["masters"]:
        table.add_row(entry["name"], entry["summary"], str(entry["overridesUpcoming"]))

    console.print()
    console.print(table)
    console.print()


@app.command()
def tool(
    name: Annotated[str, typer.Argument(help="Tool name, e.g. free_slots")],
    args: Annotated[str, typer.Option("--args", "-a", help="Tool arguments as a JSON object")] = "{}",
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    Run a schedule tool exactly as the chat agent would and print its JSON.

    Examples:

        salon-schedule tool free_slots -a '{"masterName": "olena", "date": "2024-06-10"}'
    """
    try:
        parsed = json.loads(args)
    except ValueError as e:
        _fail(ValueError(f"--args is not valid JSON: {e}"))

    if not isinstance(parsed, dict):
        _fail(ValueError("--args must be a JSON object"))

    try:
        service = _build_service(config_file, data_file)
        result = asyncio.run(service.run_tool(name, parsed))
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    console.print_json(json.dumps(result, ensure_ascii=False))


@app.command()
def list_masters(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List active masters and their ids.
    """
    try:
        service = _build_service(config_file, data_file)
        data = _run(service, "schedule_overview", {})
    except (FileNotFoundError, ValueError, ScheduleError) as e:
        _fail(e)

    if not data["masters"]:
        console.print("[yellow]No active masters found.[/yellow]")
        return

    table = Table(title="Active masters", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold yellow")
    table.add_column("ID", style="dim")

    for entry in data["masters"]:
        table.add_row(entry["name"], entry["id"])

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]salon-schedule[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
