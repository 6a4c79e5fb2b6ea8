"""Parsing helpers for activity and history payload conversion."""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import yaml

from rt_cli.core.baseline import HistoryRecord
from rt_cli.core.models import Activity, Lap, Split


class InputError(RuntimeError):
    """Raised when an activity or history file cannot be read."""


def _number(value: Any) -> Optional[float]:
    """Float for numeric-looking values; None for missing, bad, or non-finite ones."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _read_payload(file_path: Path) -> Any:
    try:
        text = file_path.read_text()
    except OSError as exc:
        raise InputError(f"Cannot read {file_path}: {exc}") from exc

    try:
        if file_path.suffix.lower() in {".yaml", ".yml"}:
            return yaml.safe_load(text)
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputError(f"Invalid JSON in {file_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise InputError(f"Invalid YAML in {file_path}: {exc}") from exc


def load_activity_input(file_path: Path) -> List[Dict[str, Any]]:
    """Load activity object(s) from a JSON or YAML file."""
    raw_data = _read_payload(file_path)
    if isinstance(raw_data, dict):
        if isinstance(raw_data.get("activities"), list):
            raw_data = raw_data["activities"]
        else:
            return [raw_data]
    if isinstance(raw_data, list):
        return [item for item in raw_data if isinstance(item, dict)]
    raise InputError(f"{file_path} must contain an activity object or a list of activities")


def _split_from_payload(item: Dict[str, Any]) -> Split:
    return Split(
        distance=_number(item.get("distance")) or 0.0,
        moving_time=_number(item.get("moving_time")) or 0.0,
        elapsed_time=_number(item.get("elapsed_time")) or 0.0,
        average_speed=_number(item.get("average_speed")) or 0.0,
        elevation_difference=_number(item.get("elevation_difference")),
    )


def _lap_from_payload(item: Dict[str, Any]) -> Lap:
    return Lap(
        distance=_number(item.get("distance")) or 0.0,
        moving_time=_number(item.get("moving_time")) or 0.0,
        elapsed_time=_number(item.get("elapsed_time")) or 0.0,
        average_speed=_number(item.get("average_speed")) or 0.0,
        total_elevation_gain=_number(item.get("total_elevation_gain")),
        average_heartrate=_number(item.get("average_heartrate")),
        max_heartrate=_number(item.get("max_heartrate")),
    )


def _records(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def activity_from_payload(payload: Dict[str, Any]) -> Activity:
    """
    Build an Activity from a provider-shaped payload.

    Splits are read from ``splits_metric`` (falling back to ``splits``).
    Missing aggregate distance or time is derived from the splits, then
    the laps. Unparseable numbers are treated as missing.
    """
    split_items = _records(payload.get("splits_metric")) or _records(payload.get("splits"))
    splits = tuple(_split_from_payload(item) for item in split_items)
    laps = tuple(_lap_from_payload(item) for item in _records(payload.get("laps")))
    segments = splits or laps

    distance = _number(payload.get("distance"))
    if distance is None or distance <= 0:
        distance = sum(segment.distance for segment in segments)
    moving_time = _number(payload.get("moving_time"))
    if moving_time is None or moving_time <= 0:
        moving_time = sum(segment.moving_time for segment in segments)
    elapsed_time = _number(payload.get("elapsed_time")) or moving_time
    average_speed = _number(payload.get("average_speed"))
    if not average_speed and distance > 0 and moving_time > 0:
        average_speed = distance / moving_time

    activity_id = payload.get("id", payload.get("activity_id"))
    name = payload.get("name")
    return Activity(
        distance=distance,
        moving_time=moving_time,
        elapsed_time=elapsed_time,
        average_speed=average_speed or 0.0,
        total_elevation_gain=_number(payload.get("total_elevation_gain")),
        average_heartrate=_number(payload.get("average_heartrate")),
        max_heartrate=_number(payload.get("max_heartrate")),
        splits=splits,
        laps=laps,
        name=str(name) if name is not None else None,
        activity_id=str(activity_id) if activity_id is not None else None,
    )


def history_from_payload(items: Iterable[Dict[str, Any]]) -> List[HistoryRecord]:
    """Convert stored activity rows (most recent first) into history records."""
    records: List[HistoryRecord] = []
    for item in items:
        duration = _number(item.get("duration"))
        if duration is None:
            duration = _number(item.get("moving_time"))
        heartrate = _number(item.get("avg_heartrate"))
        if heartrate is None:
            heartrate = _number(item.get("average_heartrate"))
        label = item.get("label") or item.get("workout_type")
        records.append(
            HistoryRecord(
                distance=_number(item.get("distance")) or 0.0,
                duration=duration or 0.0,
                avg_heartrate=heartrate,
                label=str(label) if label else None,
            )
        )
    return records


def load_history_input(file_path: Path) -> List[HistoryRecord]:
    """Load history records from a JSON or YAML file."""
    return history_from_payload(load_activity_input(file_path))
