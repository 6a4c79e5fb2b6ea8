from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
from typer.testing import CliRunner

from rt_cli.core.models import Activity, Lap, Split


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def splits_from_paces(
    paces: Sequence[float],
    elevations: Optional[Sequence[float]] = None,
    distance: float = 1000.0,
) -> Tuple[Split, ...]:
    """One split per pace (min/km), each ``distance`` meters long."""
    splits = []
    for position, pace in enumerate(paces):
        moving = pace * 60.0 * distance / 1000.0
        splits.append(
            Split(
                distance=distance,
                moving_time=moving,
                elapsed_time=moving,
                average_speed=distance / moving,
                elevation_difference=elevations[position] if elevations else None,
            )
        )
    return tuple(splits)


def laps_from_specs(specs: Sequence[Tuple[float, ...]]) -> Tuple[Lap, ...]:
    """Laps from (distance, moving_time, elapsed_time[, gain[, avg_hr]]) tuples."""
    laps = []
    for spec in specs:
        distance, moving, elapsed = spec[:3]
        gain = spec[3] if len(spec) > 3 else None
        hr = spec[4] if len(spec) > 4 else None
        laps.append(
            Lap(
                distance=distance,
                moving_time=moving,
                elapsed_time=elapsed,
                average_speed=distance / moving,
                total_elevation_gain=gain,
                average_heartrate=hr,
            )
        )
    return tuple(laps)


def activity_from_segments(
    splits: Sequence[Split] = (),
    laps: Sequence[Lap] = (),
    **overrides: Any,
) -> Activity:
    """Activity whose aggregates are summed from its splits (or laps)."""
    source = list(splits) or list(laps)
    distance = sum(item.distance for item in source)
    moving = sum(item.moving_time for item in source)
    elapsed = sum(item.elapsed_time for item in source)
    fields: Dict[str, Any] = {
        "distance": distance,
        "moving_time": moving,
        "elapsed_time": elapsed,
        "average_speed": distance / moving if moving else 0.0,
        "splits": tuple(splits),
        "laps": tuple(laps),
    }
    fields.update(overrides)
    return Activity(**fields)


@pytest.fixture()
def make_splits():
    return splits_from_paces


@pytest.fixture()
def make_laps():
    return laps_from_specs


@pytest.fixture()
def make_activity():
    return activity_from_segments


@pytest.fixture()
def interval_payload() -> Dict[str, Any]:
    """10x400m track session as exported by the activity provider."""
    return {
        "id": 1001,
        "name": "Pista martes",
        "distance": 4000,
        "moving_time": 900,
        "elapsed_time": 1800,
        "average_speed": 4.44,
        "laps": [
            {"distance": 400, "moving_time": 90, "elapsed_time": 180, "average_speed": 4.44}
            for _ in range(10)
        ],
    }


@pytest.fixture()
def long_run_payload() -> Dict[str, Any]:
    return {
        "id": 1002,
        "name": "Tirada larga",
        "distance": 20000,
        "moving_time": 6360,
        "elapsed_time": 6400,
        "average_speed": 3.145,
        "splits_metric": [
            {"distance": 1000, "moving_time": 318, "elapsed_time": 318, "average_speed": 3.145}
            for _ in range(20)
        ],
    }


@pytest.fixture()
def history_payload() -> List[Dict[str, Any]]:
    """Most recent first; easy runs at 5:00-5:10/km, quality at 4:00-4:10/km."""
    return [
        {"distance": 10000, "duration": 3000, "avg_heartrate": 140, "label": "RODAJE"},
        {"distance": 8000, "duration": 2480, "avg_heartrate": 145, "label": "RODAJE"},
        {"distance": 6000, "duration": 1440, "avg_heartrate": 170, "label": "SERIES"},
        {"distance": 8000, "duration": 2000, "avg_heartrate": 165, "label": "TEMPO"},
    ]


@pytest.fixture()
def write_temp_json(tmp_path: Path):
    def _write(name: str, payload: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2) + "\n")
        return path

    return _write


@pytest.fixture()
def write_temp_toml(tmp_path: Path):
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content.strip() + "\n")
        return path

    return _write
