from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_comparison, render_periods, render_summary
from models.records import Granularity


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Summaries and environmental impact reports from the energy impact service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("summary")
def summary_command(
    ctx: typer.Context,
    records: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Consumption CSV."),
    devices: Optional[Path] = typer.Option(
        None, "--devices", "-d", exists=True, dir_okay=False, readable=True, help="Devices CSV."
    ),
    previous: Optional[Path] = typer.Option(
        None, "--previous", "-p", exists=True, dir_okay=False, readable=True,
        help="Consumption CSV of the preceding period.",
    ),
    top: Optional[int] = typer.Option(None, "--top", min=0, help="Number of top devices to list."),
    start: Optional[datetime] = typer.Option(
        None, "--start", formats=["%Y-%m-%d"], help="First day of the weekly and monthly trends."
    ),
    end: Optional[datetime] = typer.Option(
        None, "--end", formats=["%Y-%m-%d"], help="Last day of the weekly and monthly trends."
    ),
) -> None:
    """Summarize consumption with type breakdown, top devices and trends."""
    state = _get_state(ctx)
    payload = state.client.upload_summary(
        records,
        devices=devices,
        previous=previous,
        top_n=top,
        start=_as_date(start),
        end=_as_date(end),
    )
    render_summary(payload)


@app.command("impact")
def impact_command(
    ctx: typer.Context,
    records: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Consumption CSV."),
    devices: Optional[Path] = typer.Option(
        None, "--devices", "-d", exists=True, dir_okay=False, readable=True, help="Devices CSV."
    ),
    granularity: Granularity = typer.Option(Granularity.month, "--granularity", "-g"),
    reference: Optional[datetime] = typer.Option(
        None, "--reference", "-r", formats=["%Y-%m-%d"], help="Reference day, defaults to today."
    ),
) -> None:
    """Compare environmental impact of the current and previous period."""
    state = _get_state(ctx)
    payload = state.client.upload_impact_comparison(
        records,
        devices=devices,
        granularity=granularity.value,
        reference=_as_date(reference),
    )
    render_comparison(payload)


@app.command("periods")
def periods_command(
    ctx: typer.Context,
    granularity: Granularity = typer.Argument(Granularity.month),
    reference: Optional[datetime] = typer.Option(
        None, "--reference", "-r", formats=["%Y-%m-%d"], help="Reference day, defaults to today."
    ),
) -> None:
    """Show the current and previous comparison windows."""
    state = _get_state(ctx)
    render_periods(state.client.get_periods(granularity.value, _as_date(reference)))
