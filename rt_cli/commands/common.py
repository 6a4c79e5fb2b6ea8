"""Shared command helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from rt_cli.core.baseline import estimate_baseline
from rt_cli.core.config import ConfigError, resolve_athlete
from rt_cli.core.constants import HISTORY_LIMIT
from rt_cli.core.models import AthleteBaseline, ClassificationContext, HRZones
from rt_cli.core.state import CLIState
from rt_cli.core.zones import calculate_hr_zones
from rt_cli.utils.dates import parse_date
from rt_cli.utils.parsing import InputError, load_history_input


def get_state(ctx: typer.Context) -> CLIState:
    """Extract validated CLI state from Typer context."""
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=2)
    return state


def configure_logging(verbose: bool, plain_output: bool = False) -> None:
    """Route rt_cli debug logs to stderr through rich when verbose."""
    logger = logging.getLogger("rt_cli")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    if not verbose:
        logger.setLevel(logging.WARNING)
        return

    handler = RichHandler(
        console=Console(stderr=True, no_color=plain_output),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def print_json_payload(state: CLIState, payload: Any) -> None:
    """Print JSON payload with plain-mode fallback for piping."""
    if state.plain_output:
        typer.echo(json.dumps(payload, separators=(",", ":"), ensure_ascii=False))
        return
    state.console.print_json(data=payload)


def fail(message: str, code: int = 2) -> NoReturn:
    """Print an error and exit."""
    typer.echo(message)
    raise typer.Exit(code=code)


def athlete_profile(
    state: CLIState,
    birth_date: Optional[str] = None,
    max_hr: Optional[float] = None,
    resting_hr: Optional[float] = None,
    history_file: Optional[Path] = None,
) -> Dict[str, Any]:
    """Athlete profile from config, with CLI flags taking precedence."""
    try:
        profile = resolve_athlete(state.config)
    except ConfigError as exc:
        fail(f"Config error: {exc}")

    if birth_date is not None:
        profile["birth_date"] = parse_date(birth_date)
    if max_hr is not None:
        profile["max_hr"] = max_hr
    if resting_hr is not None:
        profile["resting_hr"] = resting_hr
    if history_file is not None:
        profile["history_file"] = history_file
    return profile


def zones_for_profile(profile: Dict[str, Any]) -> Optional[HRZones]:
    """HR zones when the profile carries any heart-rate information."""
    if profile.get("birth_date") is None and profile.get("max_hr") is None and profile.get("resting_hr") is None:
        return None
    return calculate_hr_zones(
        birth_date=profile.get("birth_date"),
        manual_max_hr=profile.get("max_hr"),
        resting_hr=profile.get("resting_hr"),
    )


def baseline_from_file(path: Path, limit: int = HISTORY_LIMIT) -> Optional[AthleteBaseline]:
    """Estimate a baseline from a history file; exits with code 2 when unreadable."""
    try:
        records = load_history_input(path)
    except InputError as exc:
        fail(f"Input error: {exc}")
    return estimate_baseline(records, limit=limit)


def build_context(profile: Dict[str, Any]) -> ClassificationContext:
    """Classification context from a resolved athlete profile."""
    history_file = profile.get("history_file")
    baseline = baseline_from_file(Path(history_file)) if history_file else None
    return ClassificationContext(
        hr_zones=zones_for_profile(profile),
        athlete_baseline=baseline,
    )
