"""Componentes de UI para CLI (Rich).

Separados de los comandos para reutilizar tablas/paneles entre `passes` y
`doctor`.
"""

from __future__ import annotations

from datetime import datetime, tzinfo

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import FlyoverReport, PassWindow


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (se omite en modo `--json`)."""

    title = Text("ISS SPOTTER", style="bold cyan")
    subtitle = Text("IP • Geolocalización • Próximos pases", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def describe_pass(window: PassWindow, *, tz: tzinfo | None = None) -> str:
    """Línea legible para un pase, en la zona horaria local por defecto.

    Ejemplo (UTC): `Next pass at Thu Jan 01 1970 00:00:00 UTC for 600 seconds!`
    """

    rise = window.rise_datetime.astimezone(tz)
    return f"Next pass at {rise:%a %b %d %Y %H:%M:%S} {rise.tzname()} for {window.duration} seconds!"


def build_passes_table(passes: list[PassWindow], *, tz: tzinfo | None = None) -> Table:
    """Tabla Rich con un pase por fila, en el orden recibido."""

    table = Table(title="Upcoming ISS passes")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Rise", style="cyan", no_wrap=True)
    table.add_column("Set", style="cyan", no_wrap=True)
    table.add_column("Duration (s)", style="green", justify="right")
    for index, window in enumerate(passes, start=1):
        table.add_row(
            str(index),
            _fmt(window.rise_datetime, tz),
            _fmt(window.set_datetime, tz),
            str(window.duration),
        )
    return table


def build_location_panel(report: FlyoverReport) -> Panel:
    """Panel con la IP y las coordenadas usadas para la predicción."""

    body = Text()
    body.append("IP: ", style="bold")
    body.append(f"{report.ip}\n")
    body.append("Latitude: ", style="bold")
    body.append(f"{report.coordinates.latitude}\n")
    body.append("Longitude: ", style="bold")
    body.append(f"{report.coordinates.longitude}")
    return Panel(body, title=Text("Location", style="bold yellow"), border_style="yellow")


def _fmt(value: datetime, tz: tzinfo | None) -> str:
    local = value.astimezone(tz)
    return f"{local:%Y-%m-%d %H:%M:%S} {local.tzname()}"
