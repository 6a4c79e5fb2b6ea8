from __future__ import annotations

import math

import pytest

from rt_cli.core.models import Lap, Split
from rt_cli.core.segments import (
    coefficient_of_variation,
    normalize_laps,
    normalize_splits,
    pace_from_totals,
    speed_to_pace,
    summarize,
    trim_edges,
)


def test_speed_to_pace() -> None:
    assert speed_to_pace(1000 / 240) == pytest.approx(4.0)
    assert pace_from_totals(400, 90) == pytest.approx(3.75)
    assert pace_from_totals(0, 90) is None
    assert pace_from_totals(400, 0) is None


def test_normalize_laps_computes_rest_and_drops_empty_laps() -> None:
    laps = [
        Lap(distance=400, moving_time=90, elapsed_time=180, average_speed=4.44, total_elevation_gain=3.0, average_heartrate=172),
        Lap(distance=0, moving_time=60, elapsed_time=60, average_speed=0),
        Lap(distance=400, moving_time=0, elapsed_time=90, average_speed=0),
        Lap(distance=400, moving_time=95, elapsed_time=90, average_speed=0),
    ]
    segments = normalize_laps(laps)
    assert [segment.index for segment in segments] == [0, 3]
    assert segments[0].rest == 90
    assert segments[0].elevation == 3.0
    assert segments[0].avg_hr == 172
    assert segments[1].rest == 0
    assert segments[1].pace == pytest.approx(speed_to_pace(400 / 95))


def test_normalize_splits_never_produces_non_finite_paces() -> None:
    splits = [
        Split(distance=1000, moving_time=300, elapsed_time=300, average_speed=float("nan")),
        Split(distance=float("inf"), moving_time=300, elapsed_time=300, average_speed=3.3),
        Split(distance=1000, moving_time=300, elapsed_time=300, average_speed=3.33, elevation_difference=-4.0),
    ]
    segments = normalize_splits(splits)
    assert len(segments) == 2
    assert all(math.isfinite(segment.pace) for segment in segments)
    assert segments[0].pace == pytest.approx(5.0)
    assert segments[1].source == "split"
    assert segments[1].elevation == -4.0


def test_coefficient_of_variation() -> None:
    assert coefficient_of_variation([5.0, 5.0, 5.0]) == 0.0
    assert coefficient_of_variation([5.0]) == 0.0
    assert coefficient_of_variation([]) == 0.0
    assert coefficient_of_variation([4.0, 6.0]) == pytest.approx(0.2)


def test_summarize(make_splits) -> None:
    segments = normalize_splits(make_splits([5.0, 4.0]))
    summary = summarize(segments)
    assert summary is not None
    assert summary.distance_m == 2000
    assert summary.time_s == pytest.approx(540)
    assert summary.pace_min_km == pytest.approx(4.5)
    assert (summary.start_index, summary.end_index) == (0, 1)
    assert summarize([]) is None


def test_trim_edges_warmup_and_cooldown(make_splits) -> None:
    segments = normalize_splits(make_splits([5.5, 5.3, 4.2, 4.1, 4.2, 4.1, 4.2, 4.1, 5.4, 5.5]))
    warmup, main, cooldown = trim_edges(segments)
    assert [s.index for s in warmup] == [0, 1]
    assert [s.index for s in main] == [2, 3, 4, 5, 6, 7]
    assert [s.index for s in cooldown] == [8, 9]


def test_trim_edges_caps_each_edge(make_splits) -> None:
    paces = [6.5, 6.4, 6.3, 6.2, 4.0, 4.0, 4.0, 4.0, 4.0, 4.0, 4.0, 4.0, 4.0]
    warmup, main, cooldown = trim_edges(normalize_splits(make_splits(paces)), max_edge=3)
    assert len(warmup) == 3
    assert len(main) == 10
    assert cooldown == []


def test_trim_edges_short_input_untouched(make_splits) -> None:
    segments = normalize_splits(make_splits([6.0, 4.0]))
    warmup, main, cooldown = trim_edges(segments)
    assert warmup == [] and cooldown == []
    assert len(main) == 2
