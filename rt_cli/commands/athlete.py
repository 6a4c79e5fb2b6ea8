"""Athlete profile, heart-rate zone, and baseline commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich.table import Table

from rt_cli.commands.common import (
    athlete_profile,
    baseline_from_file,
    fail,
    get_state,
    print_json_payload,
)
from rt_cli.core.config import save_config
from rt_cli.core.constants import HISTORY_LIMIT, ZONE_LABELS
from rt_cli.core.zones import calculate_hr_zones, zone_method
from rt_cli.utils.dates import validate_date
from rt_cli.utils.formatting import format_pace_seconds

profile_app = typer.Typer(help="Athlete profile stored in the config file")


def _positive(value: Optional[float], name: str) -> Optional[float]:
    if value is not None and value <= 0:
        raise typer.BadParameter(f"{name} must be positive")
    return value


def zones_command(
    ctx: typer.Context,
    birth_date: Optional[str] = typer.Option(None, help="Birth date YYYY-MM-DD", callback=validate_date),
    max_hr: Optional[float] = typer.Option(None, help="Manual max heart rate"),
    resting_hr: Optional[float] = typer.Option(None, help="Resting heart rate (enables Karvonen)"),
) -> None:
    """Show personalized heart-rate zones."""
    state = get_state(ctx)
    profile = athlete_profile(state, birth_date, _positive(max_hr, "max-hr"), _positive(resting_hr, "resting-hr"))

    zones = calculate_hr_zones(
        birth_date=profile["birth_date"],
        manual_max_hr=profile["max_hr"],
        resting_hr=profile["resting_hr"],
    )
    resting = profile["resting_hr"]
    method = zone_method(zones.max_hr, resting)
    payload: Dict[str, Any] = {
        "max_hr": zones.max_hr,
        "resting_hr": resting,
        "method": method,
        "zones": zones.to_dict(),
    }

    if state.json_output:
        print_json_payload(state, payload)
        return

    if state.plain_output:
        for number, zone in enumerate(zones.as_list(), 1):
            typer.echo(f"z{number}\t{zone.lower}\t{zone.upper}")
        typer.echo(f"max_hr\t{zones.max_hr}")
        return

    table = Table(title=f"HR zones (max {zones.max_hr} bpm, {method})")
    table.add_column("Zone")
    table.add_column("Name")
    table.add_column("Range")
    for number, zone in enumerate(zones.as_list(), 1):
        table.add_row(f"Z{number}", ZONE_LABELS[number], f"{zone.lower}-{zone.upper} bpm")
    state.console.print(table)


def baseline_command(
    ctx: typer.Context,
    history_file: Optional[Path] = typer.Argument(None, help="History JSON/YAML file, most recent first"),
    limit: int = typer.Option(HISTORY_LIMIT, help="Maximum number of recent activities"),
) -> None:
    """Estimate the athlete baseline from past activities."""
    state = get_state(ctx)
    if limit <= 0:
        raise typer.BadParameter("limit must be positive")

    source = history_file or athlete_profile(state)["history_file"]
    if source is None:
        fail("No history file given and athlete.history_file is not configured.")

    baseline = baseline_from_file(Path(source), limit=limit)
    payload = {"history_file": str(source), "baseline": baseline.to_dict() if baseline else None}

    if state.json_output:
        print_json_payload(state, payload)
        return

    if baseline is None:
        state.console.print("Not enough history for a baseline (need at least 3 activities).")
        return

    if state.plain_output:
        for key, value in baseline.to_dict().items():
            typer.echo(f"{key}\t{value}")
        return

    table = Table(title=f"Baseline ({baseline.sample_count} activities)")
    table.add_column("Metric")
    table.add_column("Value")
    table.add_row("Easy pace", format_pace_seconds(baseline.avg_easy_pace))
    table.add_row("Competition pace", format_pace_seconds(baseline.avg_competition_pace))
    table.add_row("Easy HR", f"{baseline.avg_easy_hr:.0f} bpm" if baseline.avg_easy_hr else "N/A")
    state.console.print(table)


@profile_app.command("set")
def profile_set_command(
    ctx: typer.Context,
    birth_date: Optional[str] = typer.Option(None, help="Birth date YYYY-MM-DD", callback=validate_date),
    max_hr: Optional[float] = typer.Option(None, help="Manual max heart rate"),
    resting_hr: Optional[float] = typer.Option(None, help="Resting heart rate"),
    history_file: Optional[Path] = typer.Option(None, help="Default history file for baselines"),
) -> None:
    """Store athlete profile fields in the config file."""
    state = get_state(ctx)
    updates: Dict[str, Any] = {}
    if birth_date is not None:
        updates["birth_date"] = birth_date
    if max_hr is not None:
        updates["max_hr"] = _positive(max_hr, "max-hr")
    if resting_hr is not None:
        updates["resting_hr"] = _positive(resting_hr, "resting-hr")
    if history_file is not None:
        updates["history_file"] = str(history_file.expanduser().resolve())
    if not updates:
        raise typer.BadParameter("Nothing to update; pass at least one profile option")

    state.config.setdefault("athlete", {}).update(updates)
    path = save_config(state.config, state.config_path)

    if state.json_output:
        print_json_payload(state, {"config_file": str(path), "athlete": state.config["athlete"]})
        return
    state.console.print(f"Saved athlete profile to {path}")


@profile_app.command("show")
def profile_show_command(ctx: typer.Context) -> None:
    """Show the stored athlete profile."""
    state = get_state(ctx)
    profile = athlete_profile(state)
    payload = {key: (str(value) if value is not None else None) for key, value in profile.items()}

    if state.json_output:
        print_json_payload(state, payload)
        return

    for key, value in payload.items():
        if state.plain_output:
            typer.echo(f"{key}\t{value or '-'}")
        else:
            state.console.print(f"{key}: {value or '-'}")
