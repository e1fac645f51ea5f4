"""CLI principal (Typer + Rich).

Solo presentación: el pipeline devuelve pases o lanza un único error, y
aquí se decide cómo mostrarlo.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console

from adapters.json_exporter import export_report_json, report_to_json
from cli import doctor
from cli.ui_components import build_location_panel, build_passes_table, describe_pass, print_banner
from core.config import AppSettings
from core.domain.models import FlyoverReport
from core.errors import FlyoverError
from core.logging_setup import configure_logging
from core.services.flyover_pipeline import FlyoverPipeline, PipelineHooks, PipelineStage

app = typer.Typer(no_args_is_help=True, help="Upcoming ISS passes over your current location.")
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)

_STAGE_LABELS: dict[PipelineStage, str] = {
    PipelineStage.AWAITING_IP: "Resolving public IP...",
    PipelineStage.AWAITING_COORDINATES: "Geolocating IP...",
    PipelineStage.AWAITING_PASSES: "Fetching ISS passes...",
    PipelineStage.DONE: "Done",
    PipelineStage.FAILED: "Failed",
}


def _build_pipeline(settings: AppSettings, hooks: PipelineHooks | None = None) -> FlyoverPipeline:
    return FlyoverPipeline.from_settings(settings, hooks=hooks)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr."),
) -> None:
    settings = AppSettings()
    configure_logging("DEBUG" if verbose else settings.log_level, json_logs=settings.json_logs)


@app.command()
def passes(
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON on stdout."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Also write the JSON report to this file."),
    show_location: bool = typer.Option(False, "--show-location", help="Show the detected IP and coordinates."),
    count: int | None = typer.Option(None, "--count", "-n", min=1, max=100, help="Number of passes to request."),
) -> None:
    """Print the next ISS passes for the location of your public IP."""

    settings = AppSettings()
    if count is not None:
        settings = settings.model_copy(update={"pass_count": count})

    try:
        if json_output:
            report = asyncio.run(_build_pipeline(settings).run_report())
        else:
            print_banner(_console)
            report = _run_with_status(settings)
    except FlyoverError as exc:
        _err_console.print(f"[red]It didn't work![/red] {exc}")
        raise typer.Exit(code=1) from exc

    if output is not None:
        path = export_report_json(report=report, output_path=output)
        if not json_output:
            _console.print(f"[green]Saved JSON report to:[/green] {path}")

    if json_output:
        typer.echo(report_to_json(report))
        return

    if show_location:
        _console.print(build_location_panel(report))
    if not report.passes:
        _console.print("[yellow]No upcoming passes returned by the service.[/yellow]")
        return
    for window in report.passes:
        _console.print(describe_pass(window))
    _console.print(build_passes_table(report.passes))


def _run_with_status(settings: AppSettings) -> FlyoverReport:
    with _console.status(_STAGE_LABELS[PipelineStage.AWAITING_IP]) as status:
        hooks = PipelineHooks(stage_changed=lambda stage: status.update(_STAGE_LABELS[stage]))
        return asyncio.run(_build_pipeline(settings, hooks).run_report())


def run() -> None:
    app()


if __name__ == "__main__":
    run()
