"""Command-line interface using Typer."""

import asyncio
import json
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from engage_dashboard import __version__
from engage_dashboard.logging import setup_logging

# Logs go to stderr so they never interleave with command output
setup_logging(stream=sys.stderr)

app = typer.Typer(
    name="engage-dashboard",
    help="Engage Dashboard - social media scheduling and engagement CLI",
    add_completion=False,
)

# Subcommand groups
preferences_app = typer.Typer(help="User preference commands")
app.add_typer(preferences_app, name="preferences")

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"Engage Dashboard v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Engage Dashboard - schedule content, track engagement, train engagement models."""
    pass


@app.command()
def version() -> None:
    """Show the installed version."""
    console.print(f"Engage Dashboard v{__version__}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
) -> None:
    """Run the reference API server."""
    import uvicorn

    from engage_dashboard.config import settings

    console.print("[bold blue]Starting API server...[/bold blue]")
    uvicorn.run(
        "engage_dashboard.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload or settings.api_reload,
    )


@app.command()
def health() -> None:
    """Check the health of the API."""
    import httpx

    from engage_dashboard.config import settings

    url = f"{settings.api_base_url.rstrip('/')}/health"

    try:
        response = httpx.get(url, timeout=10)
        data = response.json()

        table = Table(title="Service Health")
        table.add_column("Component", style="cyan")
        table.add_column("Status")

        for component, healthy in data.get("components", {}).items():
            table.add_row(component, "✓" if healthy else "✗")

        console.print(table)
        console.print(f"[bold green]API {data.get('status')} (v{data.get('version')})[/bold green]")

    except httpx.RequestError as e:
        console.print(f"[bold red]Cannot connect to API: {e}[/bold red]")
        console.print("[dim]Is the API server running?[/dim]")
        raise typer.Exit(code=1)


@app.command()
def stats() -> None:
    """Show the dashboard headline numbers."""
    from engage_dashboard.client import DashboardClient
    from engage_dashboard.domain.results import Success

    async def _fetch():
        async with DashboardClient() as client:
            return await client.fetch_dashboard_stats(), await client.fetch_platform_roi()

    stats_result, roi_result = asyncio.run(_fetch())
    if not isinstance(stats_result, Success):
        console.print(f"[bold red]Could not load stats: {stats_result.reason}[/bold red]")
        raise typer.Exit(code=1)

    data = stats_result.value
    table = Table(title="Dashboard")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total followers", f"{data.total_followers:,}")
    table.add_row("Engagement rate", f"{data.engagement_rate:.2%}")
    table.add_row("Revenue generated", f"${data.revenue_generated:,.2f}")
    table.add_row("Scheduled posts", str(data.scheduled_posts))
    console.print(table)

    if isinstance(roi_result, Success) and roi_result.value:
        roi_table = Table(title="Revenue by Platform")
        roi_table.add_column("Platform", style="cyan")
        roi_table.add_column("Revenue", justify="right")
        roi_table.add_column("Share", justify="right")
        for row in roi_result.value:
            roi_table.add_row(row.platform, f"${row.revenue:,.2f}", f"{row.percentage:.1f}%")
        console.print(roi_table)


def _parse_month(value: str | None) -> date:
    if value is None:
        return date.today().replace(day=1)
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise typer.BadParameter("Use the YYYY-MM format", param_hint="--month")


@app.command()
def calendar(
    month: Optional[str] = typer.Option(None, "--month", "-m", help="Month as YYYY-MM"),
    platform: str = typer.Option("all", "--platform", "-p", help="Platform or 'all'"),
    tz: Optional[str] = typer.Option(None, "--tz", help="IANA timezone for the calendar"),
) -> None:
    """Show scheduled posts for a month, day by day."""
    from zoneinfo import ZoneInfoNotFoundError

    from engage_dashboard.client import DashboardClient
    from engage_dashboard.domain.results import Success
    from engage_dashboard.services.calendar import CalendarView, viewer_timezone

    target = _parse_month(month)
    try:
        viewer_tz = viewer_timezone(tz)
    except (ZoneInfoNotFoundError, ValueError):
        raise typer.BadParameter(f"Unknown timezone: {tz}", param_hint="--tz")

    async def _load():
        async with DashboardClient() as client:
            view = CalendarView(client, month=target, platform=platform, tz=viewer_tz)
            return await view.load()

    result = asyncio.run(_load())
    if not isinstance(result, Success):
        reason = result.reason if result is not None else "superseded"
        console.print(f"[bold red]Could not load calendar: {reason}[/bold red]")
        raise typer.Exit(code=1)

    view = result.value
    table = Table(title=f"{view.month:%B %Y} ({platform})")
    table.add_column("Day", style="cyan")
    table.add_column("Time")
    table.add_column("Platform")
    table.add_column("Status")
    table.add_column("Content")

    for day in view.busy_days:
        for post in view.days[day]:
            table.add_row(
                f"{day:%a %d}",
                f"{post.scheduled_at:%H:%M}" if post.scheduled_at else "-",
                str(post.platform),
                str(post.status),
                post.content[:50] + ("..." if len(post.content) > 50 else ""),
            )

    console.print(table)
    console.print(f"[dim]{view.total_posts} post(s) on {len(view.busy_days)} day(s)[/dim]")


@app.command()
def train(
    lookback: Optional[int] = typer.Option(
        None, "--lookback", "-l", help="Lookback window in days (30, 90, 180 or 365)"
    ),
) -> None:
    """Train an engagement model on recent content."""
    from engage_dashboard.client import DashboardClient
    from engage_dashboard.config import settings
    from engage_dashboard.domain.engagement_model import parse_lookback
    from engage_dashboard.errors import SchemaValidationError
    from engage_dashboard.services.training import TrainingFlow, check_training_readiness

    try:
        lookback_period = parse_lookback(lookback or settings.default_lookback_period)
    except SchemaValidationError as e:
        raise typer.BadParameter(e.errors[0].message, param_hint="--lookback")

    async def _train():
        async with DashboardClient() as client:
            readiness = await check_training_readiness(client)
            flow = TrainingFlow(client)
            await flow.trigger(lookback_period)
            return readiness, flow.snapshot()

    readiness, state = asyncio.run(_train())

    if readiness.message:
        console.print(f"[yellow]{readiness.message}[/yellow]")

    if state.error:
        console.print(f"[bold red]{state.error}[/bold red]")
        raise typer.Exit(code=1)

    if state.is_empty or state.model is None:
        console.print(
            Panel(
                "No posts in the selected window, so there was nothing to learn from.",
                title="Engagement model not trained",
            )
        )
        return

    model = state.model
    high = model.content_patterns.high_engagement
    low = model.content_patterns.low_engagement

    console.print(
        Panel(
            f"Model [bold]{model.short_id}[/bold] trained {model.trained_on:%Y-%m-%d %H:%M} "
            f"on {int(lookback_period)} days\nPlatforms: {', '.join(model.platforms)}",
            title="Engagement model",
        )
    )

    table = Table(title="Content patterns")
    table.add_column("", style="cyan")
    table.add_column("High engagement", style="green")
    table.add_column("Low engagement", style="red")
    table.add_row("Topics", ", ".join(high.topics), ", ".join(low.topics))
    table.add_row("Formats", ", ".join(high.formats), ", ".join(low.formats))
    table.add_row(
        "Days", ", ".join(high.timing.days_of_week), ", ".join(low.timing.days_of_week)
    )
    table.add_row(
        "Time of day", ", ".join(high.timing.time_of_day), ", ".join(low.timing.time_of_day)
    )
    table.add_row(
        "Length", high.content_attributes.length, low.content_attributes.length
    )
    console.print(table)

    console.print("[bold]Audience affinities:[/bold] " + ", ".join(model.audience_affinities))
    console.print("[bold]Performance factors:[/bold]")
    for factor in model.predicted_performance_factors:
        console.print(f"  • {factor}")


# =============================================================================
# PREFERENCES COMMANDS
# =============================================================================


@preferences_app.command("validate")
def preferences_validate(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON preferences file"),
) -> None:
    """Validate a preferences document and print it with defaults filled in."""
    from engage_dashboard.domain.preferences import validate_preferences
    from engage_dashboard.errors import PreferencesValidationError

    try:
        data = json.loads(file.read_text())
    except json.JSONDecodeError as e:
        console.print(f"[bold red]Not valid JSON: {e}[/bold red]")
        raise typer.Exit(code=1)

    if not isinstance(data, dict):
        console.print("[bold red]Preferences must be a JSON object[/bold red]")
        raise typer.Exit(code=1)

    try:
        prefs = validate_preferences(data)
    except PreferencesValidationError as e:
        table = Table(title="Invalid preferences")
        table.add_column("Field", style="cyan")
        table.add_column("Problem", style="red")
        for error in e.errors:
            table.add_row(error.path, error.message)
        console.print(table)
        raise typer.Exit(code=1)

    console.print("[bold green]✓ Preferences are valid[/bold green]")
    console.print_json(data=prefs.to_wire())


@preferences_app.command("show")
def preferences_show() -> None:
    """Show the stored preferences."""
    from engage_dashboard.client import DashboardClient
    from engage_dashboard.domain.results import Success

    async def _fetch():
        async with DashboardClient() as client:
            return await client.fetch_preferences()

    result = asyncio.run(_fetch())
    if not isinstance(result, Success):
        console.print("[bold red]Could not load preferences[/bold red]")
        raise typer.Exit(code=1)
    console.print_json(data=result.value.to_wire())


if __name__ == "__main__":
    app()
