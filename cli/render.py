from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

from services.formatting import (
    format_co2,
    format_energy,
    format_percentage,
    format_trees,
    format_water,
)


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_errors(errors: Iterable[Dict[str, Any]]) -> None:
    errors = list(errors)
    if not errors:
        return
    typer.echo()
    echo_heading("Skipped Rows")
    for error in errors:
        typer.echo(f"  - {error.get('file')} row {error.get('row_number')}: {error.get('reason')}")


def render_summary(payload: Dict[str, Any]) -> None:
    summary = payload.get("summary") or {}
    echo_heading("Consumption Summary")
    echo_key_values(
        [
            ("total", format_energy(summary.get("total_kwh", 0.0))),
            ("average_daily", format_energy(summary.get("average_daily_kwh", 0.0))),
            ("vs_previous", format_percentage(summary.get("comparison_to_previous_period_pct", 0.0))),
        ]
    )
    unattributed = summary.get("unattributed_records") or 0
    if unattributed:
        typer.secho(
            f"{unattributed} record(s) reference unknown devices and were counted as other.",
            fg=typer.colors.YELLOW,
        )

    typer.echo()
    echo_heading("By Type")
    by_type = payload.get("by_type") or []
    if by_type:
        for entry in by_type:
            typer.echo(
                f"  - {entry.get('key')}: {format_energy(entry.get('total_kwh', 0.0))}"
                f" ({entry.get('percentage', 0.0):.1f}%)"
            )
    else:
        typer.echo("No consumption recorded.")

    typer.echo()
    echo_heading("Top Devices")
    for rank, device in enumerate(payload.get("top_devices") or [], start=1):
        typer.echo(
            f"  {rank}. {device.get('device_name')} [{device.get('device_type')}]: "
            f"{format_energy(device.get('total_kwh', 0.0))} ({device.get('percentage', 0.0):.1f}%)"
        )

    _render_series("Weekly", payload.get("weekly") or {})
    _render_series("Monthly", payload.get("monthly") or {})

    render_errors(payload.get("errors") or [])


def _render_series(title: str, series: Dict[str, float]) -> None:
    if not series:
        return
    typer.echo()
    echo_heading(title)
    for bucket, total in series.items():
        typer.echo(f"  - {bucket}: {format_energy(total)}")


def _render_impact(title: str, metrics: Dict[str, Any]) -> None:
    echo_heading(title)
    period = metrics.get("period") or {}
    if period:
        typer.echo(f"period: {period.get('start_date')} .. {period.get('end_date')}")
    echo_key_values(
        [
            ("energy_saved", format_energy(metrics.get("energy_saved_kwh", 0.0))),
            ("co2_reduction", format_co2(metrics.get("co2_reduction_kg", 0.0))),
            ("trees_equivalent", format_trees(metrics.get("trees_equivalent", 0.0))),
            ("water_saved", format_water(metrics.get("water_saved_liters", 0.0))),
            ("devices_recycled", metrics.get("devices_recycled", 0)),
            ("sustainability_score", metrics.get("sustainability_score", 0)),
        ]
    )


def render_comparison(payload: Dict[str, Any]) -> None:
    _render_impact("Current Period", payload.get("current") or {})
    typer.echo()
    _render_impact("Previous Period", payload.get("previous") or {})

    change = payload.get("percentage_change") or {}
    typer.echo()
    echo_heading("Change")
    echo_key_values(
        [
            ("energy_saved", format_percentage(change.get("energy_saved", 0.0))),
            ("co2_reduction", format_percentage(change.get("co2_reduction", 0.0))),
            ("sustainability_score", format_percentage(change.get("sustainability_score", 0.0))),
        ]
    )

    render_errors(payload.get("errors") or [])


def render_periods(payload: Dict[str, Any]) -> None:
    echo_heading(f"Comparison Periods ({payload.get('granularity')})")
    for name in ("current", "previous"):
        window = payload.get(name) or {}
        typer.echo(f"{name}: {window.get('start_date')} .. {window.get('end_date')}")
