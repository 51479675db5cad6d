"""CLI interface using Typer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from resqnav import __version__
from resqnav.config import ResQNavConfig
from resqnav.errors import InvalidCoordinate, NoSheltersAvailable
from resqnav.exporters import export_geojson, export_json
from resqnav.geo import format_distance, validate_coordinate
from resqnav.models import Alert, RouteRecommendation
from resqnav.pipeline import build_engine, plan_evacuation, refresh_alerts
from resqnav.shelters import load_shelters
from resqnav.store import SqliteAlertStore

app = typer.Typer(
    name="resqnav",
    help="Disaster alert aggregation and route-safety scoring.",
    add_completion=False,
)
console = Console()

SEVERITY_STYLES: dict[str, str] = {
    "critical": "[bold red]critical[/bold red]",
    "high": "[red]high[/red]",
    "medium": "[yellow]medium[/yellow]",
    "low": "[green]low[/green]",
}

RISK_STYLES: dict[str, str] = {
    "safe": "green",
    "moderate risk": "yellow",
    "elevated risk": "dark_orange",
    "high risk": "red",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"resqnav {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


def _alerts_table(alerts: list[Alert], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Kind", style="bold")
    table.add_column("Severity")
    table.add_column("Title")
    table.add_column("Radius", justify="right")
    table.add_column("Observed", style="dim")
    table.add_column("Active", justify="center")
    for alert in alerts:
        table.add_row(
            alert.kind,
            SEVERITY_STYLES.get(alert.severity, alert.severity),
            alert.title,
            format_distance(alert.radius_km),
            alert.observed_at.strftime("%Y-%m-%d"),
            "yes" if alert.active else "no",
        )
    return table


def _print_recommendation(route: RouteRecommendation) -> None:
    style = RISK_STYLES.get(route.risk_level, "white")
    console.print(
        f"[{style}]{route.risk_level.upper()}[/{style}]  "
        f"score {route.safety_score:.0f}/100, {format_distance(route.distance_km)}"
    )
    console.print(route.rationale)
    waypoints = " -> ".join(f"({lat:.4f}, {lon:.4f})" for lat, lon in route.path)
    console.print(f"Path: {waypoints}")
    if route.hazards_near_route:
        console.print("Hazards near route: " + ", ".join(route.hazards_near_route))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """ResQNav: disaster alert aggregation and route-safety scoring."""


@app.command()
def refresh(
    db: Annotated[
        Path,
        typer.Option("--db", help="SQLite alert store path."),
    ] = Path("resqnav.db"),
    days: Annotated[
        int,
        typer.Option("--days", "-d", help="Seismic lookback window in days."),
    ] = 30,
    min_magnitude: Annotated[
        float,
        typer.Option("--min-magnitude", "-m", help="Minimum earthquake magnitude."),
    ] = 4.0,
    timeout: Annotated[
        float,
        typer.Option("--timeout", help="Overall fetch timeout in seconds."),
    ] = 90.0,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Also write active alerts to GeoJSON."),
    ] = None,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Disable disk caching of ReliefWeb details."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Fetch every disaster feed and upsert the alerts into the store."""
    _configure_logging(verbose)

    config = ResQNavConfig(
        db_path=db,
        days_lookback=days,
        min_magnitude=min_magnitude,
        fetch_timeout=timeout,
        cache_enabled=not no_cache,
    )

    with SqliteAlertStore(config.db_path) as store:
        result = refresh_alerts(config, store)
        active = store.active_alerts()

    if result.error is not None:
        console.print(f"[red]Fetch failed:[/red] {result.error.summary()}")
        console.print("[yellow]Stored alerts were kept; try again later.[/yellow]")
        raise typer.Exit(code=1)

    console.print()
    console.print(_alerts_table(active, "Active Disaster Alerts"))
    for name, reason in result.failures.items():
        console.print(f"[yellow]Feed {name} unavailable:[/yellow] {reason}")
    console.print(
        f"\nFetched {len(result.alerts)} alerts from {len(result.succeeded)} feeds; "
        f"{len(active)} active in [bold]{config.db_path}[/bold]"
    )

    if output is not None:
        export_geojson(active, output)
        console.print(f"GeoJSON written to [bold]{output}[/bold]")


@app.command()
def alerts(
    db: Annotated[
        Path,
        typer.Option("--db", help="SQLite alert store path."),
    ] = Path("resqnav.db"),
    severity: Annotated[
        str | None,
        typer.Option("--severity", "-s", help="Only show this severity."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the listed alerts to JSON."),
    ] = None,
) -> None:
    """List active alerts from the store."""
    with SqliteAlertStore(db) as store:
        listed = store.alerts_by_severity(severity) if severity else store.active_alerts()

    if not listed:
        console.print("[yellow]No active alerts.[/yellow]")
        raise typer.Exit()

    console.print(_alerts_table(listed, "Active Disaster Alerts"))
    if output is not None:
        export_json(listed, output)
        console.print(f"JSON written to [bold]{output}[/bold]")


@app.command()
def route(
    lat: Annotated[float, typer.Option("--lat", help="Origin latitude.")],
    lon: Annotated[float, typer.Option("--lon", help="Origin longitude.")],
    shelters_file: Annotated[
        Path | None,
        typer.Option("--shelters", help="Shelter CSV; nearest one is the destination."),
    ] = None,
    dest_lat: Annotated[
        float | None,
        typer.Option("--dest-lat", help="Explicit destination latitude."),
    ] = None,
    dest_lon: Annotated[
        float | None,
        typer.Option("--dest-lon", help="Explicit destination longitude."),
    ] = None,
    db: Annotated[
        Path,
        typer.Option("--db", help="SQLite alert store path."),
    ] = Path("resqnav.db"),
    detour_offset: Annotated[
        float,
        typer.Option("--detour-offset", help="Detour offset in degrees."),
    ] = 0.01,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write alerts and route to GeoJSON."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Recommend the safest route to a shelter (or an explicit destination)."""
    _configure_logging(verbose)
    config = ResQNavConfig(db_path=db, detour_offset_deg=detour_offset)
    engine = build_engine(config)
    try:
        origin = validate_coordinate(lat, lon)
        if dest_lat is not None and dest_lon is not None:
            validate_coordinate(dest_lat, dest_lon)
    except InvalidCoordinate as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=2) from None

    with SqliteAlertStore(config.db_path) as store:
        active = store.active_alerts()

    shelter = None
    if dest_lat is not None and dest_lon is not None:
        recommendation = engine.safest_route(origin, (dest_lat, dest_lon), active)
    elif shelters_file is not None:
        try:
            plan = plan_evacuation(origin, load_shelters(shelters_file), active, engine)
        except NoSheltersAvailable as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from None
        shelter = plan.shelter
        recommendation = plan.recommendation
        console.print(
            f"Nearest shelter: [bold]{shelter.name}[/bold] "
            f"({format_distance(plan.shelter_distance_km)} away, "
            f"{shelter.current_occupancy}/{shelter.capacity} occupied)"
        )
    else:
        console.print("[red]Provide --shelters or both --dest-lat and --dest-lon.[/red]")
        raise typer.Exit(code=2)

    _print_recommendation(recommendation)
    if output is not None:
        export_geojson(active, output, route=recommendation, shelter=shelter)
        console.print(f"GeoJSON written to [bold]{output}[/bold]")
