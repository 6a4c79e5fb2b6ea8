"""Activity classification commands."""

from __future__ import annotations

import logging
from collections import Counter
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.table import Table

from rt_cli.commands.common import (
    athlete_profile,
    build_context,
    fail,
    get_state,
    print_json_payload,
)
from rt_cli.core.classify import classify
from rt_cli.core.constants import TYPE_LABELS
from rt_cli.core.models import ClassificationContext
from rt_cli.core.state import CLIState
from rt_cli.exporters.json_export import write_json
from rt_cli.utils.dates import validate_date
from rt_cli.utils.formatting import format_distance, format_duration
from rt_cli.utils.parsing import InputError, activity_from_payload, load_activity_input

logger = logging.getLogger(__name__)

ACTIVITY_SUFFIXES = {".json", ".yaml", ".yml"}


def _classify_payloads(
    payloads: List[Dict[str, Any]],
    context: ClassificationContext,
    thresholds: Dict[str, float],
    source: Optional[Path] = None,
) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for payload in payloads:
        activity = activity_from_payload(payload)
        result = classify(activity, context, thresholds)
        row: Dict[str, Any] = {
            "id": activity.activity_id,
            "name": activity.name,
            "distance": activity.distance,
            "moving_time": activity.moving_time,
        }
        if source is not None:
            row["file"] = str(source)
        row.update(result.to_dict())
        rows.append(row)
    return rows


def _summary(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    by_type = Counter(row["workout_type"] for row in rows)
    by_confidence = Counter(row["confidence"] for row in rows)
    return {
        "total": len(rows),
        "by_type": dict(sorted(by_type.items())),
        "by_confidence": dict(sorted(by_confidence.items())),
    }


def _print_rows(state: CLIState, rows: List[Dict[str, Any]], title: str) -> None:
    if state.plain_output:
        typer.echo("id\tname\ttype\tconfidence\tdescription")
        for row in rows:
            typer.echo(
                "\t".join(
                    [
                        str(row.get("id") or "-"),
                        str(row.get("name") or "-"),
                        row["workout_type"],
                        row["confidence"],
                        row["human_readable"],
                    ]
                )
            )
        return

    table = Table(title=title)
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Distance")
    table.add_column("Time")
    table.add_column("Type")
    table.add_column("Confidence")
    table.add_column("Description")
    for row in rows:
        table.add_row(
            str(row.get("id") or "-"),
            str(row.get("name") or "Untitled"),
            format_distance(row.get("distance")),
            format_duration(row.get("moving_time")),
            TYPE_LABELS.get(row["workout_type"], row["workout_type"]),
            row["confidence"],
            row["human_readable"],
        )
    state.console.print(table)


def classify_command(
    ctx: typer.Context,
    file_path: Path = typer.Argument(..., help="Activity JSON/YAML file (object or list)"),
    birth_date: Optional[str] = typer.Option(None, help="Athlete birth date YYYY-MM-DD", callback=validate_date),
    max_hr: Optional[float] = typer.Option(None, help="Manual max heart rate"),
    resting_hr: Optional[float] = typer.Option(None, help="Resting heart rate"),
    history_file: Optional[Path] = typer.Option(None, help="History file for the athlete baseline"),
    output_file: Optional[Path] = typer.Option(None, help="Write result to file"),
) -> None:
    """Classify the workout intent of one or more activities."""
    state = get_state(ctx)

    try:
        payloads = load_activity_input(file_path)
    except InputError as exc:
        fail(f"Input error: {exc}")
    if not payloads:
        fail(f"Input error: no activities found in {file_path}")

    profile = athlete_profile(state, birth_date, max_hr, resting_hr, history_file)
    context = build_context(profile)
    rows = _classify_payloads(payloads, context, state.thresholds)

    payload: Any = rows[0] if len(rows) == 1 else {"results": rows, "summary": _summary(rows)}
    if output_file:
        write_json(output_file, payload)

    if state.json_output:
        print_json_payload(state, payload)
        return

    _print_rows(state, rows, title=f"Classification ({len(rows)} activities)")
    if output_file:
        state.console.print(f"Written to: {output_file}")


def reclassify_command(
    ctx: typer.Context,
    directory: Path = typer.Argument(..., help="Directory with activity JSON/YAML files"),
    birth_date: Optional[str] = typer.Option(None, help="Athlete birth date YYYY-MM-DD", callback=validate_date),
    max_hr: Optional[float] = typer.Option(None, help="Manual max heart rate"),
    resting_hr: Optional[float] = typer.Option(None, help="Resting heart rate"),
    history_file: Optional[Path] = typer.Option(None, help="History file for the athlete baseline"),
    output_file: Optional[Path] = typer.Option(None, help="Write JSON report to file"),
) -> None:
    """Re-run classification over every activity file in a directory."""
    state = get_state(ctx)

    if not directory.is_dir():
        fail(f"Input error: {directory} is not a directory")

    files = sorted(path for path in directory.iterdir() if path.suffix.lower() in ACTIVITY_SUFFIXES)
    profile = athlete_profile(state, birth_date, max_hr, resting_hr, history_file)
    context = build_context(profile)

    rows: List[Dict[str, Any]] = []
    errors: List[Dict[str, str]] = []
    status_ctx = (
        state.console.status(f"Classifying {len(files)} files...")
        if not state.plain_output and not state.json_output
        else nullcontext()
    )
    with status_ctx:
        for path in files:
            try:
                payloads = load_activity_input(path)
            except InputError as exc:
                logger.warning("Skipping %s: %s", path, exc)
                errors.append({"file": str(path), "error": str(exc)})
                continue
            rows.extend(_classify_payloads(payloads, context, state.thresholds, source=path))

    report = {"results": rows, "errors": errors, "summary": _summary(rows)}
    if output_file:
        write_json(output_file, report)

    if state.json_output:
        print_json_payload(state, report)
        return

    summary = report["summary"]
    if state.plain_output:
        for workout_type, count in summary["by_type"].items():
            typer.echo(f"{workout_type}\t{count}")
        typer.echo(f"total\t{summary['total']}")
        typer.echo(f"errors\t{len(errors)}")
        return

    table = Table(title=f"Reclassified {summary['total']} activities from {len(files)} files")
    table.add_column("Type")
    table.add_column("Count")
    for workout_type, count in summary["by_type"].items():
        table.add_row(TYPE_LABELS.get(workout_type, workout_type), str(count))
    state.console.print(table)
    for error in errors:
        state.console.print(f"Skipped {error['file']}: {error['error']}")
    if output_file:
        state.console.print(f"Report written to: {output_file}")
