"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import httpx
import typer
from rich.console import Console
from rich.table import Table

from adapters.geolocation import FreeGeoIPResolver
from adapters.ip_lookup import IpifyResolver
from adapters.pass_predictor import IssPassPredictor
from core.config import AppSettings, write_user_env_vars
from core.errors import FlyoverError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()

_SERVICE_NAMES = ("IP service", "Geolocation service", "Pass service")


async def _check_services(
    settings: AppSettings,
    *,
    client: httpx.AsyncClient | None = None,
) -> list[tuple[str, str, str]]:
    """Call each service once, in order; later checks are skipped after a failure."""

    rows: list[tuple[str, str, str]] = []
    try:
        ip = await IpifyResolver(settings, client=client).resolve_my_ip()
        rows.append(("IP service", "OK", ip))
        coords = await FreeGeoIPResolver(settings, client=client).resolve_coordinates(ip)
        rows.append(("Geolocation service", "OK", f"{coords.latitude}, {coords.longitude}"))
        passes = await IssPassPredictor(settings, client=client).predict_passes(coords)
        rows.append(("Pass service", "OK", f"{len(passes)} passes"))
    except FlyoverError as exc:
        rows.append((_SERVICE_NAMES[len(rows)], "FAIL", str(exc)))

    for name in _SERVICE_NAMES[len(rows):]:
        rows.append((name, "SKIPPED", "previous step failed"))
    return rows


@app.command()
def run() -> None:
    """Show the active configuration and check each upstream service."""

    settings = AppSettings()

    table = Table(title="ISS Spotter Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("IP service URL", "OK", settings.ip_service_url)
    table.add_row("Geolocation URL", "OK", settings.geolocation_url_template)
    table.add_row("Pass service URL", "OK", settings.pass_service_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")

    # Connectivity
    rows = asyncio.run(_check_services(settings))
    for row in rows:
        table.add_row(*row)

    _console.print(table)

    if any(status == "FAIL" for _, status, _ in rows):
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup of the service URLs (stored in the user config .env)."""

    settings = AppSettings()

    ip_url = typer.prompt("IP service URL", default=settings.ip_service_url).strip()
    geo_url = typer.prompt("Geolocation URL template", default=settings.geolocation_url_template).strip()
    pass_url = typer.prompt("Pass service URL", default=settings.pass_service_url).strip()

    if "{ip}" not in geo_url:
        raise typer.BadParameter("geolocation URL template must contain '{ip}'")

    env_path = write_user_env_vars(
        {
            "ISS_SPOTTER_IP_SERVICE_URL": ip_url,
            "ISS_SPOTTER_GEOLOCATION_URL_TEMPLATE": geo_url,
            "ISS_SPOTTER_PASS_SERVICE_URL": pass_url,
        }
    )

    _console.print(f"[green]Saved service config to:[/green] {env_path}")
